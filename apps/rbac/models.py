"""
RBAC models for group-based admin access control.

Implements:
- User (identity; AUTH_USER_MODEL)
- Permission (dot-path permission codes with a display-only parent pointer)
- Group (bundle of permissions; users belong to many groups)
- Menu (navigation tree node gated by exactly one permission)
"""
from django.db import models
from apps.core.models import BaseModel
from apps.rbac.hierarchy import lexical_ancestors


class UserManager(models.Manager):
    """
    Manager for User queries.

    Compatible with Django's authentication system.
    """

    def active(self):
        """Return only active users."""
        return self.filter(is_active=True)

    def by_email(self, email):
        """Find user by email."""
        return self.filter(email=self.normalize_email(email)).first()

    def create_user(self, email, **extra_fields):
        """Create a new user."""
        if not email:
            raise ValueError('Email address is required')

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.save(using=self._db)
        return user

    def normalize_email(self, email):
        """
        Normalize the email address by lowercasing the domain part.
        """
        email = email or ''
        try:
            email_name, domain_part = email.strip().rsplit('@', 1)
        except ValueError:
            pass
        else:
            email = email_name + '@' + domain_part.lower()
        return email

    def get_by_natural_key(self, email):
        """
        Get user by natural key (email).

        This method is required for Django's authentication system.
        """
        return self.get(**{self.model.USERNAME_FIELD: email})


class User(BaseModel):
    """
    Application user.

    Credentials are verified upstream; Warden only needs to know which
    groups a user belongs to. This is the AUTH_USER_MODEL for the project.
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        help_text="User email address (unique)"
    )
    display_name = models.CharField(
        max_length=255,
        blank=True,
        help_text="Name shown in the admin UI"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether user account is active"
    )
    is_superuser = models.BooleanField(
        default=False,
        help_text="Platform administrator"
    )
    groups = models.ManyToManyField(
        'rbac.Group',
        related_name='users',
        blank=True,
        db_table='user_groups',
        help_text="Groups this user belongs to"
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_active', 'created_at'], name='users_active_created_idx'),
        ]

    def __str__(self):
        return self.email

    def get_username(self):
        return self.email

    @property
    def is_authenticated(self):
        """Always True for User instances (Django auth compatibility)."""
        return True

    @property
    def is_anonymous(self):
        """Always False for User instances (Django auth compatibility)."""
        return False

    def natural_key(self):
        return (self.email,)


class PermissionManager(models.Manager):
    """Manager for Permission queries."""

    def active(self):
        """Return only active permissions."""
        return self.filter(is_active=True)

    def by_code(self, code):
        """Find permission by code."""
        return self.filter(code=code).first()

    def get_or_create_permission(self, code, name, description='', parent_code=None):
        """Get or create permission (idempotent)."""
        permission, created = self.get_or_create(
            code=code,
            defaults={
                'name': name,
                'description': description,
                'parent_code': parent_code,
            }
        )
        return permission, created


class Permission(BaseModel):
    """
    A named capability identified by a dot-path code (e.g. 'users.create').

    Every dot-prefix of the code is implicitly required for the code to be
    effective. ``parent_code`` is an unrelated, curated pointer used only to
    arrange permissions for display.
    """

    code = models.CharField(
        max_length=150,
        unique=True,
        db_index=True,
        help_text="Unique permission code (e.g., 'users.create')"
    )
    name = models.CharField(
        max_length=255,
        help_text="Human-readable name (e.g., 'Create Users')"
    )
    description = models.TextField(
        blank=True,
        help_text="Detailed description of what this permission grants"
    )
    parent_code = models.CharField(
        max_length=150,
        null=True,
        blank=True,
        help_text="Code of the permission this one is displayed under"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive permissions are never granted"
    )

    objects = PermissionManager()

    class Meta:
        db_table = 'permissions'
        ordering = ['code']

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def lexical_ancestors(self):
        """Codes that must also be granted for this permission to be effective."""
        return lexical_ancestors(self.code)

    @property
    def display_parent_code(self):
        """Parent in the admin permission tree; not used for enforcement."""
        return self.parent_code


class GroupManager(models.Manager):
    """Manager for Group queries."""

    def active(self):
        """Return only active groups."""
        return self.filter(is_active=True)

    def by_code(self, code):
        """Find group by code."""
        return self.filter(code=code).first()


class Group(BaseModel):
    """
    A bundle of permissions granted to every member.

    An inactive group grants nothing, even to its members.
    """

    code = models.CharField(
        max_length=100,
        unique=True,
        db_index=True,
        help_text="Unique group code (e.g., 'GROUP_ADMIN')"
    )
    name = models.CharField(
        max_length=255,
        help_text="Human-readable group name"
    )
    description = models.TextField(
        blank=True,
        help_text="What members of this group are for"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive groups contribute no permissions"
    )
    permissions = models.ManyToManyField(
        Permission,
        related_name='groups',
        blank=True,
        db_table='group_permissions',
        help_text="Permissions granted by this group"
    )

    objects = GroupManager()

    class Meta:
        db_table = 'groups'
        ordering = ['name']

    def __str__(self):
        return self.name

    def member_ids(self):
        """IDs of every user in this group."""
        return list(self.users.values_list('id', flat=True))


class MenuManager(models.Manager):
    """Manager for Menu queries."""

    def active(self):
        """Return only active menus."""
        return self.filter(is_active=True)

    def by_path(self, path):
        """Find menu by path."""
        return self.filter(path=path).first()


class Menu(BaseModel):
    """
    Navigation menu node.

    A menu is visible to users holding its permission, regardless of
    whether its parent menu is visible to them.
    """

    name = models.CharField(
        max_length=255,
        help_text="Label shown in navigation (e.g., 'User Management')"
    )
    path = models.CharField(
        max_length=255,
        help_text="Frontend route (e.g., '/dashboard/users')"
    )
    icon = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="Icon identifier (e.g., 'UserOutlined')"
    )
    order = models.IntegerField(
        default=0,
        help_text="Sort key among siblings (ascending)"
    )
    permission = models.ForeignKey(
        Permission,
        on_delete=models.PROTECT,
        related_name='menus',
        help_text="Permission required to see this menu"
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        help_text="Parent menu"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive menus are never shown"
    )

    objects = MenuManager()

    class Meta:
        db_table = 'menus'
        ordering = ['order', 'created_at']
        indexes = [
            models.Index(fields=['is_active', 'order'], name='menus_active_order_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.path})"
