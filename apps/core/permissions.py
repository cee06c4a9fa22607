"""
DRF permission classes and decorators for RBAC permission enforcement.

This module provides:
- HasPermissions: DRF permission class that enforces permission-code requirements
- @requires_permissions: Decorator to declare required permission codes on views
"""
import logging
from django.core.exceptions import ImproperlyConfigured
from rest_framework.permissions import BasePermission

from apps.core.logging import SecurityLogger

logger = logging.getLogger(__name__)


class HasPermissions(BasePermission):
    """
    DRF permission class that enforces permission codes on API endpoints.

    This permission class:
    1. Reads the view's required_permissions attribute
    2. Requires an authenticated user
    3. Asks the access-control service whether the user holds all of them
    4. Logs denials with the missing codes

    Usage in views:
        class PermissionTreeView(APIView):
            permission_classes = [HasPermissions]
            required_permissions = ['permissions.view']

    Or use with decorator:
        @requires_permissions('permissions.view')
        class PermissionTreeView(APIView):
            permission_classes = [HasPermissions]
    """

    message = 'You do not have the permissions required for this action.'

    def has_permission(self, request, view):
        """
        Check if the request user holds every required permission for the view.

        Args:
            request: DRF request object
            view: DRF view instance with optional required_permissions attribute

        Returns:
            bool: True if all required permissions are held, False otherwise
        """
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return False

        required = getattr(view, 'required_permissions', None)
        if not required:
            return True

        if isinstance(required, str):
            required = {required}
        else:
            required = set(required)

        # Imported here to keep apps.core free of an import-time dependency on apps.rbac
        from apps.rbac.services import AccessControlService

        service = AccessControlService.default()
        if service.has_all_permissions(user.id, required):
            logger.debug(
                f"Permission granted: User has all required permissions {required}",
                extra={
                    'user_id': str(user.id),
                    'required_permissions': sorted(required),
                    'view': view.__class__.__name__,
                }
            )
            return True

        missing = required - service.get_effective_permissions(user.id)
        logger.warning(
            f"Permission denied: User {user.id} missing permissions: {sorted(missing)}",
            extra={
                'user_id': str(user.id),
                'required_permissions': sorted(required),
                'missing_permissions': sorted(missing),
                'view': view.__class__.__name__,
                'method': request.method,
                'path': request.path,
                'request_id': getattr(request, 'request_id', None),
            }
        )
        SecurityLogger.log_permission_denied(user, required, missing, path=request.path)
        return False


def requires_permissions(*codes):
    """
    Decorator to declare required permission codes on a view class.

    The codes are checked by the HasPermissions permission class, which DRF
    evaluates before any handler method runs.

    Usage:
        @requires_permissions('permissions.view')
        class PermissionTreeView(APIView):
            permission_classes = [HasPermissions]

    Args:
        *codes: Permission codes required for access

    Returns:
        Decorator function that sets the required_permissions attribute

    Raises:
        ImproperlyConfigured: If any code is blank
    """
    for code in codes:
        if not isinstance(code, str) or not code.strip():
            raise ImproperlyConfigured(f"Invalid permission code: {code!r}")

    def decorator(view_class):
        view_class.required_permissions = set(codes)
        return view_class

    return decorator
