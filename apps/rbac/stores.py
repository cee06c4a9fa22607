"""
Read access to the permission, group and menu data behind authorization.

The access-control service only depends on ``PermissionStore``; the ORM
implementation lives here too so the service can be exercised against an
in-memory store in tests.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionGrant:
    """A permission reachable through a group."""
    code: str
    is_active: bool = True


@dataclass(frozen=True)
class GroupGrant:
    """A group membership together with the permissions the group bundles."""
    code: str
    is_active: bool = True
    permissions: List[PermissionGrant] = field(default_factory=list)


@dataclass(frozen=True)
class MenuRecord:
    """A menu node as needed for filtering."""
    id: str
    name: str
    path: str
    permission_code: str
    order: int = 0
    icon: Optional[str] = None
    parent_id: Optional[str] = None


class PermissionStore(ABC):
    """Read capability over users, groups, permissions and menus."""

    @abstractmethod
    def load_user_grants(self, user_id) -> Optional[List[GroupGrant]]:
        """
        Return the user's group memberships with each group's permissions.

        Returns None when the user does not exist. Inactive groups and
        permissions are included with ``is_active=False``.
        """

    @abstractmethod
    def list_active_menus(self) -> List[MenuRecord]:
        """Return all active menus in storage order."""


class DjangoPermissionStore(PermissionStore):
    """PermissionStore backed by the rbac ORM models."""

    def load_user_grants(self, user_id) -> Optional[List[GroupGrant]]:
        from apps.rbac.models import User

        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            logger.debug(f"Malformed user id treated as unknown user: {user_id!r}")
            return None

        user = (
            User.objects
            .filter(id=user_id)
            .prefetch_related('groups__permissions')
            .first()
        )
        if user is None:
            return None

        return [
            GroupGrant(
                code=group.code,
                is_active=group.is_active,
                permissions=[
                    PermissionGrant(code=permission.code, is_active=permission.is_active)
                    for permission in group.permissions.all()
                ],
            )
            for group in user.groups.all()
        ]

    def list_active_menus(self) -> List[MenuRecord]:
        from apps.rbac.models import Menu

        menus = (
            Menu.objects
            .filter(is_active=True)
            .select_related('permission')
            .order_by('order', 'created_at', 'id')
        )
        return [
            MenuRecord(
                id=str(menu.id),
                name=menu.name,
                path=menu.path,
                permission_code=menu.permission.code,
                order=menu.order,
                icon=menu.icon,
                parent_id=str(menu.parent_id) if menu.parent_id else None,
            )
            for menu in menus
        ]
