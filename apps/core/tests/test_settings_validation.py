"""
Tests for startup configuration validation.

Validates:
- RBAC cache alias must name a configured cache
- RBAC cache TTL must be a positive number of seconds
"""
import pytest
from django.apps import apps
from django.core.exceptions import ImproperlyConfigured


@pytest.fixture
def core_config():
    return apps.get_app_config('core')


class TestRbacCacheValidation:
    """Test RBAC cache settings validation."""

    def test_default_configuration_is_valid(self, core_config):
        core_config._validate_cache_configuration()

    def test_unknown_alias_rejected(self, core_config, settings):
        settings.RBAC_CACHE_ALIAS = 'permissions'

        with pytest.raises(ImproperlyConfigured, match='RBAC_CACHE_ALIAS'):
            core_config._validate_cache_configuration()

    @pytest.mark.parametrize('ttl', [0, -5, '900', True])
    def test_invalid_ttl_rejected(self, core_config, settings, ttl):
        settings.RBAC_CACHE_TTL = ttl

        with pytest.raises(ImproperlyConfigured, match='RBAC_CACHE_TTL'):
            core_config._validate_cache_configuration()

    def test_default_ttl_is_fifteen_minutes(self, settings):
        assert settings.RBAC_CACHE_TTL == 900


class TestSecuritySettingsValidation:
    """Test security setting warnings."""

    def test_development_key_warned_outside_debug(self, core_config, settings, caplog):
        settings.DEBUG = False
        settings.SECRET_KEY = 'django-insecure-warden-development-key'

        core_config._validate_security_settings()

        assert 'SECRET_KEY' in caplog.text

    def test_no_warning_in_debug(self, core_config, settings, caplog):
        settings.DEBUG = True
        settings.SECRET_KEY = 'django-insecure-warden-development-key'

        core_config._validate_security_settings()

        assert 'SECRET_KEY' not in caplog.text
