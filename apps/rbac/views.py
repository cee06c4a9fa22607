"""
RBAC REST API views.

Implements endpoints for:
- Current user's effective permissions and filtered menu tree
- Refreshing the current user's cached authorization data
- Permission display tree
- Administrative cache invalidation
"""
import logging
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from apps.core.permissions import HasPermissions, requires_permissions
from apps.rbac.hierarchy import build_permission_display_tree
from apps.rbac.models import Permission
from apps.rbac.services import AccessControlService
from apps.rbac.serializers import (
    AuthorizationSummarySerializer,
    CacheInvalidateSerializer,
    MenuNodeSerializer,
    PermissionTreeNodeSerializer,
    UserProfileSerializer,
)

logger = logging.getLogger(__name__)


def _authorization_summary(service, user):
    return {
        'user': UserProfileSerializer(user).data,
        'effective_permissions': sorted(service.get_effective_permissions(user.id)),
        'menu_tree': MenuNodeSerializer(service.get_filtered_menu_tree(user.id), many=True).data,
    }


@extend_schema_view(
    get=extend_schema(
        tags=['Authorization'],
        summary='Get current user authorization',
        description='''
Return the authenticated user's profile, effective permission codes and
permission-filtered menu tree.

**No permission required** - users can always see their own authorization.

Results may be served from cache for up to 15 minutes.
        ''',
        responses={
            200: AuthorizationSummarySerializer,
            401: OpenApiTypes.OBJECT,
        },
        examples=[
            OpenApiExample(
                'Success Response',
                value={
                    'user': {
                        'id': '123e4567-e89b-12d3-a456-426614174000',
                        'email': 'admin@example.com',
                        'display_name': 'Admin',
                        'is_active': True
                    },
                    'effective_permissions': ['dashboard', 'dashboard.view'],
                    'menu_tree': [
                        {
                            'id': '123e4567-e89b-12d3-a456-426614174001',
                            'name': 'Dashboard',
                            'path': '/dashboard',
                            'icon': 'DashboardOutlined',
                            'order': 1,
                            'permission_code': 'dashboard.view',
                            'children': []
                        }
                    ]
                },
                response_only=True
            )
        ]
    )
)
class MeView(APIView):
    """
    GET /v1/auth/me

    Return the authenticated user's profile, effective permissions and menu tree.
    """

    def get(self, request):
        service = AccessControlService.default()
        return Response(_authorization_summary(service, request.user))


@extend_schema_view(
    get=extend_schema(
        tags=['Authorization'],
        summary='Get current user menu tree',
        description='''
Return the navigation menu tree the authenticated user may see.

A menu is shown when the user holds its permission, even if its parent
menu is hidden; such menus are promoted to the root level. Siblings are
ordered by their `order` value.
        ''',
        responses={
            200: MenuNodeSerializer(many=True),
            401: OpenApiTypes.OBJECT,
        },
    )
)
class MenuTreeView(APIView):
    """
    GET /v1/auth/menus

    Return the authenticated user's permission-filtered menu tree.
    """

    def get(self, request):
        service = AccessControlService.default()
        tree = service.get_filtered_menu_tree(request.user.id)
        return Response(MenuNodeSerializer(tree, many=True).data)


@extend_schema_view(
    post=extend_schema(
        tags=['Authorization'],
        summary='Refresh current user authorization',
        description='''
Drop the authenticated user's cached permissions and menu tree, then
return freshly computed values.

Only the caller's own cache entries are affected.
        ''',
        request=None,
        responses={
            200: AuthorizationSummarySerializer,
            401: OpenApiTypes.OBJECT,
        },
    )
)
class CacheRefreshView(APIView):
    """
    POST /v1/auth/cache/refresh

    Invalidate the caller's cached authorization data and return it recomputed.
    """

    def post(self, request):
        service = AccessControlService.default()
        service.invalidate_user_cache(request.user.id)
        return Response(_authorization_summary(service, request.user))


@extend_schema_view(
    get=extend_schema(
        tags=['RBAC - Permissions'],
        summary='Get permission tree',
        description='''
Return every permission arranged by its stored `parent_code`.

**Required permission:** `permissions.view`

The tree is for display only; enforcement uses the dot-path of each code.
Permissions whose `parent_code` is unset or unknown appear at the root.
        ''',
        responses={
            200: PermissionTreeNodeSerializer(many=True),
            401: OpenApiTypes.OBJECT,
            403: OpenApiTypes.OBJECT,
        },
    )
)
@requires_permissions('permissions.view')
class PermissionTreeView(APIView):
    """
    GET /v1/permissions/tree

    Return all permissions nested by display parent.

    Required permission: permissions.view
    """

    permission_classes = [HasPermissions]

    def get(self, request):
        permissions = Permission.objects.order_by('code').values(
            'id', 'code', 'name', 'description', 'parent_code', 'is_active'
        )
        tree = build_permission_display_tree(
            {**permission, 'id': str(permission['id'])} for permission in permissions
        )
        return Response(PermissionTreeNodeSerializer(tree, many=True).data)


@extend_schema_view(
    post=extend_schema(
        tags=['RBAC - Permissions'],
        summary='Invalidate authorization cache',
        description='''
Drop cached permissions and menu trees for specific users or for everyone.

**Required permission:** `permissions.edit`

Send either `user_ids` (non-empty list) or `all: true`, not both.
        ''',
        request=CacheInvalidateSerializer,
        responses={
            200: OpenApiTypes.OBJECT,
            400: OpenApiTypes.OBJECT,
            401: OpenApiTypes.OBJECT,
            403: OpenApiTypes.OBJECT,
        },
        examples=[
            OpenApiExample(
                'Invalidate Users',
                value={'user_ids': ['123e4567-e89b-12d3-a456-426614174000']},
                request_only=True
            ),
            OpenApiExample(
                'Invalidate Everyone',
                value={'all': True},
                request_only=True
            ),
            OpenApiExample(
                'Success Response',
                value={'invalidated': True, 'scope': 'users', 'count': 1},
                response_only=True
            ),
        ]
    )
)
@requires_permissions('permissions.edit')
class CacheInvalidateView(APIView):
    """
    POST /v1/permissions/cache/invalidate

    Invalidate cached authorization data for the given users or for all users.

    Required permission: permissions.edit
    """

    permission_classes = [HasPermissions]

    def post(self, request):
        serializer = CacheInvalidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AccessControlService.default()
        if serializer.validated_data.get('all'):
            invalidated = service.invalidate_all_cache()
            payload = {'invalidated': invalidated, 'scope': 'all'}
        else:
            user_ids = [str(user_id) for user_id in serializer.validated_data['user_ids']]
            invalidated = service.invalidate_users_cache(user_ids)
            payload = {'invalidated': invalidated, 'scope': 'users', 'count': len(user_ids)}

        logger.info(
            f"Authorization cache invalidated by {request.user.id}: {payload['scope']}",
            extra={'user_id': str(request.user.id), 'scope': payload['scope']}
        )

        response_status = status.HTTP_200_OK if invalidated else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(payload, status=response_status)
