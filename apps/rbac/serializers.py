"""
RBAC serializers for REST API endpoints.

Provides serialization for:
- Current user profile and authorization summary
- Permission-filtered menu trees
- Permission display trees
- Cache invalidation requests
"""
from rest_framework import serializers
from apps.rbac.models import Permission, User


class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for the authenticated user's profile."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'is_active']
        read_only_fields = fields


class MenuNodeSerializer(serializers.Serializer):
    """Serializer for one node of a filtered menu tree (recursive)."""

    id = serializers.CharField()
    name = serializers.CharField()
    path = serializers.CharField()
    icon = serializers.CharField(allow_null=True)
    order = serializers.IntegerField()
    permission_code = serializers.CharField()

    def get_fields(self):
        fields = super().get_fields()
        fields['children'] = MenuNodeSerializer(many=True)
        return fields


class PermissionSerializer(serializers.ModelSerializer):
    """Serializer for Permission model."""

    class Meta:
        model = Permission
        fields = [
            'id', 'code', 'name', 'description', 'parent_code', 'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PermissionTreeNodeSerializer(serializers.Serializer):
    """Serializer for one node of the permission display tree (recursive)."""

    id = serializers.CharField()
    code = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()

    def get_fields(self):
        fields = super().get_fields()
        fields['children'] = PermissionTreeNodeSerializer(many=True)
        return fields


class AuthorizationSummarySerializer(serializers.Serializer):
    """Serializer for the current user's profile, permissions and menus."""

    user = UserProfileSerializer()
    effective_permissions = serializers.ListField(child=serializers.CharField())
    menu_tree = MenuNodeSerializer(many=True)


class CacheInvalidateSerializer(serializers.Serializer):
    """Serializer for administrative cache invalidation requests."""

    user_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=False,
        help_text="Users whose cached permissions and menus should be dropped"
    )
    all = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Drop cached permissions and menus of every user"
    )

    def validate(self, attrs):
        """Exactly one of user_ids or all must be given."""
        has_users = bool(attrs.get('user_ids'))
        if has_users == attrs.get('all', False):
            raise serializers.ValidationError(
                "Provide either a non-empty 'user_ids' list or 'all': true"
            )
        return attrs
