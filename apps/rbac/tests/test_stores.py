"""
Tests for the ORM-backed PermissionStore.
"""
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.rbac.models import Group, Menu
from apps.rbac.stores import DjangoPermissionStore, GroupGrant, PermissionGrant


@pytest.fixture
def store():
    return DjangoPermissionStore()


@pytest.mark.django_db
class TestLoadUserGrants:
    """Test loading group memberships with permissions."""

    def test_unknown_user_returns_none(self, store):
        assert store.load_user_grants(uuid.uuid4()) is None

    def test_malformed_id_returns_none(self, store):
        assert store.load_user_grants('not-a-uuid') is None

    def test_user_without_groups(self, store, user):
        assert store.load_user_grants(user.id) == []

    def test_accepts_string_ids(self, store, user):
        assert store.load_user_grants(str(user.id)) == []

    def test_groups_with_permissions(self, store, user, group, make_permissions):
        group.permissions.set(make_permissions('users', 'users.view'))
        user.groups.add(group)

        grants = store.load_user_grants(user.id)

        assert len(grants) == 1
        assert grants[0].code == 'GROUP_EDITORS'
        assert grants[0].is_active is True
        assert sorted(grants[0].permissions, key=lambda p: p.code) == [
            PermissionGrant(code='users', is_active=True),
            PermissionGrant(code='users.view', is_active=True),
        ]

    def test_inactive_records_reported_not_filtered(self, store, user, make_permissions):
        users_root, users_view = make_permissions('users', 'users.view')
        users_view.is_active = False
        users_view.save()
        old_group = Group.objects.create(code='OLD', name='Old', is_active=False)
        old_group.permissions.set([users_root, users_view])
        user.groups.add(old_group)

        grants = store.load_user_grants(user.id)

        assert grants[0].is_active is False
        assert PermissionGrant(code='users.view', is_active=False) in grants[0].permissions

    def test_returns_group_grants(self, store, user, group):
        user.groups.add(group)
        assert all(isinstance(grant, GroupGrant) for grant in store.load_user_grants(user.id))


@pytest.mark.django_db
class TestListActiveMenus:
    """Test loading menus."""

    def test_only_active_menus_in_order(self, store, make_permissions):
        dashboard_view, = make_permissions('dashboard.view')
        Menu.objects.create(name='Second', path='/second', order=2, permission=dashboard_view)
        Menu.objects.create(name='First', path='/first', order=1, permission=dashboard_view)
        Menu.objects.create(name='Hidden', path='/hidden', order=0, permission=dashboard_view, is_active=False)

        menus = store.list_active_menus()

        assert [menu.name for menu in menus] == ['First', 'Second']

    def test_menu_record_fields(self, store, make_permissions):
        system_view, users_view = make_permissions('system.view', 'users.view')
        parent = Menu.objects.create(name='System', path='/dashboard/system', order=2, permission=system_view)
        Menu.objects.create(
            name='Users', path='/dashboard/users', order=1, icon='UserOutlined',
            permission=users_view, parent=parent,
        )

        records = {record.name: record for record in store.list_active_menus()}

        assert records['System'].parent_id is None
        assert records['System'].id == str(parent.id)
        assert records['Users'].parent_id == str(parent.id)
        assert records['Users'].permission_code == 'users.view'
        assert records['Users'].icon == 'UserOutlined'

    def test_equal_order_keeps_storage_order(self, store, make_permissions):
        dashboard_view, = make_permissions('dashboard.view')
        created = timezone.now()
        for offset, (name, order) in enumerate([('Reports', 2), ('Home', 1), ('Settings', 2)]):
            menu = Menu.objects.create(name=name, path=f'/{name.lower()}', order=order, permission=dashboard_view)
            Menu.objects.filter(pk=menu.pk).update(created_at=created + timedelta(seconds=offset))

        menus = store.list_active_menus()

        assert [menu.name for menu in menus] == ['Home', 'Reports', 'Settings']

    def test_same_timestamp_ties_are_deterministic(self, store, make_permissions):
        dashboard_view, = make_permissions('dashboard.view')
        created = timezone.now()
        for name in ('Reports', 'Settings', 'Audit'):
            Menu.objects.create(name=name, path=f'/{name.lower()}', order=2, permission=dashboard_view)
        Menu.objects.update(created_at=created)

        expected = [str(pk) for pk in Menu.objects.order_by('id').values_list('id', flat=True)]

        assert [menu.id for menu in store.list_active_menus()] == expected
