"""
Caching utilities for authorization data.

Provides a cache-aside wrapper around a Django cache backend with
consistent key naming, TTLs and generation-based bulk invalidation.
"""
import logging
from typing import Any, Callable, Optional
from django.core.cache import cache, caches

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheKeys:
    """Centralized cache key definitions with consistent naming."""

    # Effective permission set per user (TTL: 15 minutes)
    USER_PERMISSIONS = "user_permissions:{user_id}"

    # Filtered menu tree per user (TTL: 15 minutes)
    USER_MENU = "user_menu:{user_id}"

    # Counter whose value is used as the cache version of every entry above
    GENERATION = "rbac:generation"

    @classmethod
    def format(cls, key_template: str, **kwargs) -> str:
        """Format a cache key with provided parameters."""
        return key_template.format(**kwargs)


class CacheTTL:
    """Cache TTL (Time To Live) constants in seconds."""

    RBAC = 900  # 15 minutes


class CacheService:
    """
    Cache-aside access to a Django cache backend.

    Every entry is written under the current cache generation (Django's
    per-key ``version``). Bumping the generation makes all earlier entries
    unreachable, which gives bulk invalidation on backends that cannot
    enumerate keys.

    Backend failures never escape this class: reads degrade to a miss and
    writes/deletes report False, so callers always fall through to
    recomputation.
    """

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else cache

    @classmethod
    def for_alias(cls, alias: str = 'default') -> 'CacheService':
        """Build a service bound to one of the configured ``CACHES`` aliases."""
        return cls(caches[alias])

    def generation(self) -> int:
        """Return the current cache generation (1 until first bumped)."""
        try:
            value = self.backend.get(CacheKeys.GENERATION)
        except Exception as e:
            logger.error(f"Cache generation read error: {str(e)}")
            return 1
        return int(value) if value else 1

    def bump_generation(self) -> bool:
        """
        Advance the cache generation, orphaning every cached entry.

        Returns:
            True if successful, False otherwise
        """
        try:
            self.backend.add(CacheKeys.GENERATION, 1, timeout=None)
            generation = self.backend.incr(CacheKeys.GENERATION)
            logger.info(f"Cache generation advanced to {generation}")
            return True
        except Exception as e:
            logger.error(f"Cache generation bump error: {str(e)}")
            return False

    def get(self, key: str, default: Any = None, version: Optional[int] = None) -> Any:
        """
        Get value from cache.

        Args:
            key: Cache key
            default: Default value if key not found
            version: Cache generation to read (current one if omitted)

        Returns:
            Cached value or default
        """
        if version is None:
            version = self.generation()
        try:
            value = self.backend.get(key, _MISSING, version=version)
        except Exception as e:
            logger.error(f"Cache get error for key {key}: {str(e)}")
            return default
        if value is _MISSING:
            logger.debug(f"Cache MISS: {key}")
            return default
        logger.debug(f"Cache HIT: {key}")
        return value

    def set(self, key: str, value: Any, ttl: int = None, version: Optional[int] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (optional)
            version: Cache generation to write (current one if omitted)

        Returns:
            True if successful, False otherwise
        """
        if version is None:
            version = self.generation()
        try:
            self.backend.set(key, value, timeout=ttl, version=version)
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error for key {key}: {str(e)}")
            return False

    def delete(self, key: str) -> bool:
        """
        Delete value from the current cache generation.

        Args:
            key: Cache key

        Returns:
            True if successful, False otherwise
        """
        try:
            self.backend.delete(key, version=self.generation())
            logger.debug(f"Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {str(e)}")
            return False

    def get_or_set(self, key: str, default_func: Callable[[], Any], ttl: int = None) -> Any:
        """
        Get value from cache or set it using default_func if not found.

        Concurrent misses may each call default_func; the last write wins.
        Exceptions raised by default_func propagate and nothing is cached.

        Args:
            key: Cache key
            default_func: Function to call if cache miss
            ttl: Time to live in seconds (optional)

        Returns:
            Cached or computed value
        """
        version = self.generation()
        value = self.get(key, _MISSING, version=version)
        if value is _MISSING:
            value = default_func()
            self.set(key, value, ttl, version=version)
        return value
