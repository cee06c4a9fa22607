"""
Access-control services.

Implements:
- AccessControlService: effective permission resolution, permission-filtered
  menu trees, permission checks and cache invalidation
"""
import logging
import uuid
from typing import Iterable, List, Set

from django.conf import settings

from apps.core.cache import CacheKeys, CacheService, CacheTTL
from apps.core.logging import SecurityLogger
from apps.rbac.hierarchy import normalize_permissions
from apps.rbac.menus import build_menu_tree
from apps.rbac.stores import DjangoPermissionStore, PermissionStore

logger = logging.getLogger(__name__)


def canonical_user_id(user_id) -> str:
    """
    Return the one spelling of ``user_id`` used for cache keys.

    UUIDs in any accepted form (upper-case, no hyphens, UUID instances)
    map to the lower-case hyphenated string; anything else is kept as is.
    """
    try:
        return str(uuid.UUID(str(user_id)))
    except ValueError:
        return str(user_id)


class AccessControlService:
    """
    Resolves what a user may do and see.

    Effective permissions and menu trees are cached per user for ``ttl``
    seconds. Results can be stale until then unless a writer invalidates
    them; the rbac signal handlers do so for every ORM write.
    """

    def __init__(self, store: PermissionStore, cache: CacheService, ttl: int = CacheTTL.RBAC):
        self.store = store
        self.cache = cache
        self.ttl = ttl

    @classmethod
    def default(cls) -> 'AccessControlService':
        """Build a service over the ORM store and the configured cache."""
        return cls(
            store=DjangoPermissionStore(),
            cache=CacheService.for_alias(getattr(settings, 'RBAC_CACHE_ALIAS', 'default')),
            ttl=getattr(settings, 'RBAC_CACHE_TTL', CacheTTL.RBAC),
        )

    # ----- Effective permissions -----

    def resolve_permissions(self, user_id) -> Set[str]:
        """
        Compute the user's effective permissions from the store, bypassing the cache.

        Only active permissions of active groups count, and a permission only
        survives if all of its dot-path ancestors are granted too. An unknown
        user has no permissions.
        """
        grants = self.store.load_user_grants(user_id)
        if grants is None:
            logger.info(f"Permission resolution for unknown user {user_id}; returning no permissions")
            return set()

        granted = {
            permission.code
            for group in grants if group.is_active
            for permission in group.permissions if permission.is_active
        }
        effective = normalize_permissions(granted)

        dropped = granted - effective
        if dropped:
            logger.debug(
                f"Dropped {len(dropped)} permissions with missing ancestors for user {user_id}",
                extra={'user_id': str(user_id), 'dropped_permissions': sorted(dropped)}
            )
        return effective

    def get_effective_permissions(self, user_id) -> Set[str]:
        """
        Return the user's effective permission codes.

        Results are cached for ``ttl`` seconds under
        ``user_permissions:<user_id>``.
        """
        user_id = canonical_user_id(user_id)
        key = CacheKeys.format(CacheKeys.USER_PERMISSIONS, user_id=user_id)
        codes = self.cache.get_or_set(
            key,
            lambda: sorted(self.resolve_permissions(user_id)),
            self.ttl,
        )
        return set(codes)

    def has_permission(self, user_id, code: str) -> bool:
        """Check if the user holds a specific permission."""
        return code in self.get_effective_permissions(user_id)

    def has_all_permissions(self, user_id, codes: Iterable[str]) -> bool:
        """
        Check if the user holds every permission in ``codes`` (True when empty).

        A single code may be passed as a plain string.
        """
        if isinstance(codes, str):
            codes = {codes}
        else:
            codes = set(codes)
        return codes.issubset(self.get_effective_permissions(user_id))

    # ----- Menus -----

    def get_filtered_menu_tree(self, user_id) -> List[dict]:
        """
        Return the menu forest the user may see.

        Results are cached for ``ttl`` seconds under ``user_menu:<user_id>``,
        independently of the permission entry.
        """
        user_id = canonical_user_id(user_id)
        key = CacheKeys.format(CacheKeys.USER_MENU, user_id=user_id)
        return self.cache.get_or_set(
            key,
            lambda: build_menu_tree(
                self.store.list_active_menus(),
                self.get_effective_permissions(user_id),
            ),
            self.ttl,
        )

    # ----- Invalidation -----

    def invalidate_user_cache(self, user_id) -> bool:
        """
        Drop the cached permissions and menu tree of one user.

        Must be called after any write that changes the user's groups, a
        group's permissions, or permission/group/menu activity.
        """
        user_id = canonical_user_id(user_id)
        deleted = all([
            self.cache.delete(CacheKeys.format(CacheKeys.USER_PERMISSIONS, user_id=user_id)),
            self.cache.delete(CacheKeys.format(CacheKeys.USER_MENU, user_id=user_id)),
        ])
        if deleted:
            logger.info(f"Invalidated access-control cache for user {user_id}")
        else:
            SecurityLogger.log_cache_invalidation_failed(user_ids=[user_id])
        return deleted

    def invalidate_users_cache(self, user_ids: Iterable) -> bool:
        """Drop the cached permissions and menu trees of several users."""
        results = [self.invalidate_user_cache(user_id) for user_id in user_ids]
        return all(results)

    def invalidate_all_cache(self) -> bool:
        """
        Make every cached permission set and menu tree a miss.

        Advances the cache generation instead of deleting keys one by one.
        """
        advanced = self.cache.bump_generation()
        if advanced:
            logger.info("Invalidated access-control cache for all users")
        else:
            SecurityLogger.log_cache_invalidation_failed(scope='all')
        return advanced
