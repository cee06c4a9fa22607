"""
Pytest configuration and fixtures.
"""
import pytest
from django.conf import settings


def pytest_configure(config):
    """Configure Django settings for tests."""
    settings.DATABASES['default'] = {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'ATOMIC_REQUESTS': False,
    }
    settings.CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'warden-tests',
        }
    }
    settings.SECURE_SSL_REDIRECT = False


@pytest.fixture(autouse=True)
def clear_cache():
    """Start and finish every test with an empty cache."""
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return DRF API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_permissions(db):
    """Create permissions by code; parent_code follows the dot-path unless given."""
    from apps.rbac.models import Permission

    def _make(*codes, **parents):
        permissions = []
        for code in codes:
            parent_code = parents.get(code, code.rpartition('.')[0] or None)
            permission, _ = Permission.objects.get_or_create(
                code=code,
                defaults={'name': code.replace('.', ' ').title(), 'parent_code': parent_code},
            )
            permissions.append(permission)
        return permissions

    return _make


@pytest.fixture
def user(db):
    """Create a test user with no groups."""
    from apps.rbac.models import User
    return User.objects.create_user(email='user@example.com', display_name='Test User')


@pytest.fixture
def other_user(db):
    """Create a second test user for isolation tests."""
    from apps.rbac.models import User
    return User.objects.create_user(email='other@example.com', display_name='Other User')


@pytest.fixture
def group(db):
    """Create an empty active group."""
    from apps.rbac.models import Group
    return Group.objects.create(code='GROUP_EDITORS', name='Editors')


@pytest.fixture
def admin_user(db, make_permissions):
    """Create a user whose group holds the permission-administration permissions."""
    from apps.rbac.models import Group, User
    admin_group = Group.objects.create(code='GROUP_ADMIN', name='System Administrator')
    admin_group.permissions.set(
        make_permissions('permissions', 'permissions.view', 'permissions.edit')
    )
    admin = User.objects.create_user(email='admin@example.com', display_name='Admin')
    admin.groups.add(admin_group)
    return admin
