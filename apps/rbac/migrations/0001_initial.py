# Initial schema for users, groups, permissions and menus

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Permission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('code', models.CharField(db_index=True, help_text="Unique permission code (e.g., 'users.create')", max_length=150, unique=True)),
                ('name', models.CharField(help_text="Human-readable name (e.g., 'Create Users')", max_length=255)),
                ('description', models.TextField(blank=True, help_text='Detailed description of what this permission grants')),
                ('parent_code', models.CharField(blank=True, help_text='Code of the permission this one is displayed under', max_length=150, null=True)),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive permissions are never granted')),
            ],
            options={
                'db_table': 'permissions',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Group',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('code', models.CharField(db_index=True, help_text="Unique group code (e.g., 'GROUP_ADMIN')", max_length=100, unique=True)),
                ('name', models.CharField(help_text='Human-readable group name', max_length=255)),
                ('description', models.TextField(blank=True, help_text='What members of this group are for')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive groups contribute no permissions')),
                ('permissions', models.ManyToManyField(blank=True, db_table='group_permissions', help_text='Permissions granted by this group', related_name='groups', to='rbac.permission')),
            ],
            options={
                'db_table': 'groups',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Menu',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('name', models.CharField(help_text="Label shown in navigation (e.g., 'User Management')", max_length=255)),
                ('path', models.CharField(help_text="Frontend route (e.g., '/dashboard/users')", max_length=255)),
                ('icon', models.CharField(blank=True, help_text="Icon identifier (e.g., 'UserOutlined')", max_length=100, null=True)),
                ('order', models.IntegerField(default=0, help_text='Sort key among siblings (ascending)')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive menus are never shown')),
                ('parent', models.ForeignKey(blank=True, help_text='Parent menu', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='rbac.menu')),
                ('permission', models.ForeignKey(help_text='Permission required to see this menu', on_delete=django.db.models.deletion.PROTECT, related_name='menus', to='rbac.permission')),
            ],
            options={
                'db_table': 'menus',
                'ordering': ['order', 'created_at'],
                'indexes': [models.Index(fields=['is_active', 'order'], name='menus_active_order_idx')],
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('email', models.EmailField(db_index=True, help_text='User email address (unique)', max_length=254, unique=True)),
                ('display_name', models.CharField(blank=True, help_text='Name shown in the admin UI', max_length=255)),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Whether user account is active')),
                ('is_superuser', models.BooleanField(default=False, help_text='Platform administrator')),
                ('groups', models.ManyToManyField(blank=True, db_table='user_groups', help_text='Groups this user belongs to', related_name='users', to='rbac.group')),
            ],
            options={
                'db_table': 'users',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['is_active', 'created_at'], name='users_active_created_idx')],
            },
        ),
    ]
