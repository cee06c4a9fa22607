from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
import logging

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        """
        Perform startup validation checks when Django initializes.

        Authorization caching must point at a configured cache with a
        positive TTL before the application starts accepting requests.
        """
        self._validate_cache_configuration()
        self._validate_security_settings()

    def _validate_cache_configuration(self):
        """Validate the RBAC cache alias and TTL."""
        alias = getattr(settings, 'RBAC_CACHE_ALIAS', 'default')
        if alias not in settings.CACHES:
            raise ImproperlyConfigured(
                f"RBAC_CACHE_ALIAS '{alias}' is not defined in CACHES. "
                f"Configured aliases: {sorted(settings.CACHES)}"
            )

        ttl = getattr(settings, 'RBAC_CACHE_TTL', 900)
        if not isinstance(ttl, int) or isinstance(ttl, bool) or ttl <= 0:
            raise ImproperlyConfigured(
                f"RBAC_CACHE_TTL must be a positive number of seconds. Current value: {ttl!r}"
            )

        logger.debug(f"RBAC cache configured: alias={alias}, ttl={ttl}s")

    def _validate_security_settings(self):
        """Warn about weak security settings outside DEBUG."""
        if getattr(settings, 'DEBUG', False):
            return

        secret_key = getattr(settings, 'SECRET_KEY', '') or ''
        if 'insecure' in secret_key.lower():
            logger.warning(
                "⚠ SECRET_KEY appears to be a development default. "
                "Generate a strong key with: "
                "python -c \"import secrets; print(secrets.token_urlsafe(50))\""
            )
