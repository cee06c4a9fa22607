"""
Management command to seed the baseline permission taxonomy, admin group and menus.

Creates the canonical Permission records, a GROUP_ADMIN group holding every
active permission, and the baseline navigation menu tree. This command is
idempotent and safe to re-run.
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from apps.rbac.models import Group, Menu, Permission, User


class Command(BaseCommand):
    help = 'Seed baseline permissions, the GROUP_ADMIN group and navigation menus (idempotent)'

    ADMIN_GROUP_CODE = 'GROUP_ADMIN'

    # Module roots first so every parent_code refers to an existing permission
    CANONICAL_PERMISSIONS = [
        {'code': 'dashboard', 'name': 'Dashboard', 'description': 'Dashboard module access'},
        {'code': 'system', 'name': 'System Management', 'description': 'System administration module'},
        {'code': 'users', 'name': 'User Management', 'description': 'User management module'},
        {'code': 'groups', 'name': 'Group Management', 'description': 'Group management module'},
        {'code': 'permissions', 'name': 'Permission Management', 'description': 'Permission management module'},
        {'code': 'menus', 'name': 'Menu Management', 'description': 'Menu management module'},
        {'code': 'audit', 'name': 'Audit & Logs', 'description': 'Audit and logging module'},
        {'code': 'meetings', 'name': 'Meetings Management', 'description': 'Meetings module access'},

        # Dashboard
        {'code': 'dashboard.view', 'name': 'View Dashboard', 'description': 'Access dashboard page', 'parent_code': 'dashboard'},
        {'code': 'dashboard.stats', 'name': 'View Statistics', 'description': 'View dashboard statistics', 'parent_code': 'dashboard'},

        # System
        {'code': 'system.view', 'name': 'View System', 'description': 'Access system management', 'parent_code': 'system'},
        {'code': 'system.configure', 'name': 'Configure System', 'description': 'Configure system settings', 'parent_code': 'system'},

        # Users
        {'code': 'users.view', 'name': 'View Users', 'description': 'View user list and details', 'parent_code': 'users'},
        {'code': 'users.create', 'name': 'Create Users', 'description': 'Create new users', 'parent_code': 'users'},
        {'code': 'users.edit', 'name': 'Edit Users', 'description': 'Edit user information', 'parent_code': 'users'},
        {'code': 'users.delete', 'name': 'Delete Users', 'description': 'Delete users', 'parent_code': 'users'},
        {'code': 'users.manage_groups', 'name': 'Manage User Groups', 'description': 'Assign users to groups', 'parent_code': 'users'},

        # Groups
        {'code': 'groups.view', 'name': 'View Groups', 'description': 'View group list and details', 'parent_code': 'groups'},
        {'code': 'groups.create', 'name': 'Create Groups', 'description': 'Create new groups', 'parent_code': 'groups'},
        {'code': 'groups.edit', 'name': 'Edit Groups', 'description': 'Edit group information', 'parent_code': 'groups'},
        {'code': 'groups.delete', 'name': 'Delete Groups', 'description': 'Delete groups', 'parent_code': 'groups'},
        {'code': 'groups.manage_members', 'name': 'Manage Members', 'description': 'Add and remove group members', 'parent_code': 'groups'},
        {'code': 'groups.manage_permissions', 'name': 'Manage Group Permissions', 'description': 'Assign permissions to groups', 'parent_code': 'groups'},

        # Permissions
        {'code': 'permissions.view', 'name': 'View Permissions', 'description': 'View permission list', 'parent_code': 'permissions'},
        {'code': 'permissions.create', 'name': 'Create Permissions', 'description': 'Create new permissions', 'parent_code': 'permissions'},
        {'code': 'permissions.edit', 'name': 'Edit Permissions', 'description': 'Edit permission details', 'parent_code': 'permissions'},
        {'code': 'permissions.delete', 'name': 'Delete Permissions', 'description': 'Delete permissions', 'parent_code': 'permissions'},

        # Menus
        {'code': 'menus.view', 'name': 'View Menus', 'description': 'View menu structure', 'parent_code': 'menus'},
        {'code': 'menus.create', 'name': 'Create Menus', 'description': 'Create new menu items', 'parent_code': 'menus'},
        {'code': 'menus.edit', 'name': 'Edit Menus', 'description': 'Edit menu items', 'parent_code': 'menus'},
        {'code': 'menus.delete', 'name': 'Delete Menus', 'description': 'Delete menu items', 'parent_code': 'menus'},
        {'code': 'menus.reorder', 'name': 'Reorder Menus', 'description': 'Change menu order', 'parent_code': 'menus'},

        # Audit
        {'code': 'audit.view', 'name': 'View Audit Logs', 'description': 'View system audit logs', 'parent_code': 'audit'},
        {'code': 'audit.export', 'name': 'Export Audit Logs', 'description': 'Export audit data', 'parent_code': 'audit'},

        # Meetings
        {'code': 'meetings.view', 'name': 'View Meetings', 'description': 'View meetings and participants', 'parent_code': 'meetings'},
        {'code': 'meetings.create', 'name': 'Create Meetings', 'description': 'Create new meetings', 'parent_code': 'meetings'},
        {'code': 'meetings.join', 'name': 'Join Meetings', 'description': 'Join and leave meetings', 'parent_code': 'meetings'},
        {'code': 'meetings.manage', 'name': 'Manage Meetings', 'description': 'Manage meeting participants and settings', 'parent_code': 'meetings'},
    ]

    # Parents are listed before their children
    BASELINE_MENUS = [
        {'name': 'Dashboard', 'path': '/dashboard', 'icon': 'DashboardOutlined', 'order': 1,
         'permission_code': 'dashboard.view'},
        {'name': 'System Management', 'path': '/dashboard/system', 'icon': 'SettingOutlined', 'order': 2,
         'permission_code': 'system.view'},
        {'name': 'User Management', 'path': '/dashboard/users', 'icon': 'UserOutlined', 'order': 1,
         'permission_code': 'users.view', 'parent_path': '/dashboard/system'},
        {'name': 'Group Management', 'path': '/dashboard/groups', 'icon': 'TeamOutlined', 'order': 2,
         'permission_code': 'groups.view', 'parent_path': '/dashboard/system'},
        {'name': 'Permission Management', 'path': '/dashboard/permissions', 'icon': 'SafetyCertificateOutlined',
         'order': 3, 'permission_code': 'permissions.view', 'parent_path': '/dashboard/system'},
        {'name': 'Activity Logs', 'path': '/dashboard/activity-logs', 'icon': 'HistoryOutlined', 'order': 4,
         'permission_code': 'audit.view', 'parent_path': '/dashboard/system'},
        {'name': 'Meetings', 'path': '/dashboard/meetings', 'icon': 'VideoCameraOutlined', 'order': 3,
         'permission_code': 'meetings.view'},
    ]

    def add_arguments(self, parser):
        parser.add_argument(
            '--admin-email',
            type=str,
            help='Email of a user to create (if missing) and add to GROUP_ADMIN'
        )

    @transaction.atomic
    def handle(self, *args, **options):
        """Create or update permissions, the admin group and baseline menus."""
        self.seed_permissions()
        admin_group = self.seed_admin_group()
        self.seed_menus()

        if options.get('admin_email'):
            self.seed_admin_user(options['admin_email'], admin_group)

        self.stdout.write(
            self.style.SUCCESS(
                f'\n✓ Seeding complete: {Permission.objects.count()} permissions, '
                f'{Group.objects.count()} groups, {Menu.objects.count()} menus'
            )
        )

    def seed_permissions(self):
        created_count = 0
        updated_count = 0

        self.stdout.write('Seeding permissions...\n')

        for perm_data in self.CANONICAL_PERMISSIONS:
            permission, created = Permission.objects.get_or_create_permission(
                code=perm_data['code'],
                name=perm_data['name'],
                description=perm_data['description'],
                parent_code=perm_data.get('parent_code'),
            )

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'✓ Created: {permission.code}'))
                continue

            # Update fields if they changed
            updated = False
            for field in ('name', 'description', 'parent_code'):
                value = perm_data.get(field)
                if getattr(permission, field) != value:
                    setattr(permission, field, value)
                    updated = True

            if updated:
                permission.save()
                updated_count += 1
                self.stdout.write(self.style.WARNING(f'↻ Updated: {permission.code}'))
            else:
                self.stdout.write(self.style.HTTP_INFO(f'  Exists: {permission.code}'))

        self.stdout.write(
            f'Permissions: {created_count} created, {updated_count} updated, '
            f'{len(self.CANONICAL_PERMISSIONS) - created_count - updated_count} unchanged'
        )

    def seed_admin_group(self):
        """Ensure GROUP_ADMIN exists and holds every active permission."""
        admin_group, created = Group.objects.get_or_create(
            code=self.ADMIN_GROUP_CODE,
            defaults={
                'name': 'System Administrator',
                'description': 'Full system access group with all permissions',
            }
        )
        all_permissions = list(Permission.objects.active())
        admin_group.permissions.set(all_permissions)

        verb = 'Created' if created else 'Updated'
        self.stdout.write(
            self.style.SUCCESS(f'✓ {verb} {admin_group.code} with {len(all_permissions)} permissions')
        )
        return admin_group

    def seed_menus(self):
        self.stdout.write('\nSeeding menus...\n')

        for menu_data in self.BASELINE_MENUS:
            if Menu.objects.by_path(menu_data['path']):
                self.stdout.write(self.style.HTTP_INFO(f"  Exists: {menu_data['path']}"))
                continue

            permission = Permission.objects.by_code(menu_data['permission_code'])
            if permission is None:
                self.stdout.write(
                    self.style.WARNING(
                        f"⚠ Permission not found: {menu_data['permission_code']} for menu: {menu_data['name']}"
                    )
                )
                continue

            parent = None
            if menu_data.get('parent_path'):
                parent = Menu.objects.by_path(menu_data['parent_path'])

            Menu.objects.create(
                name=menu_data['name'],
                path=menu_data['path'],
                icon=menu_data['icon'],
                order=menu_data['order'],
                permission=permission,
                parent=parent,
            )
            self.stdout.write(self.style.SUCCESS(f"✓ Created menu: {menu_data['name']}"))

    def seed_admin_user(self, email, admin_group):
        user = User.objects.by_email(email)
        if user is None:
            user = User.objects.create_user(email=email, display_name='System Administrator')
            self.stdout.write(self.style.SUCCESS(f'✓ Created admin user: {user.email}'))

        if user.groups.filter(pk=admin_group.pk).exists():
            self.stdout.write(self.style.HTTP_INFO(f'  {user.email} already in {admin_group.code}'))
        else:
            user.groups.add(admin_group)
            self.stdout.write(self.style.SUCCESS(f'✓ Added {user.email} to {admin_group.code}'))
