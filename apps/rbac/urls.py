"""
RBAC API URLs.

Provides endpoints for:
- Current user's effective permissions and menu tree
- Refreshing the current user's cached authorization data
- Permission display tree
- Administrative cache invalidation
"""
from django.urls import path
from apps.rbac.views import (
    MeView,
    MenuTreeView,
    CacheRefreshView,
    PermissionTreeView,
    CacheInvalidateView,
)

app_name = 'rbac'

urlpatterns = [
    # Current user endpoints
    path('auth/me', MeView.as_view(), name='auth-me'),
    path('auth/menus', MenuTreeView.as_view(), name='auth-menus'),
    path('auth/cache/refresh', CacheRefreshView.as_view(), name='auth-cache-refresh'),

    # Permission administration endpoints
    path('permissions/tree', PermissionTreeView.as_view(), name='permission-tree'),
    path('permissions/cache/invalidate', CacheInvalidateView.as_view(), name='permission-cache-invalidate'),
]
