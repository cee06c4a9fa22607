"""
RBAC signals for access-control cache invalidation.

Every ORM write that can change a user's effective permissions or menu
tree invalidates the affected cache entries once the write commits:

- membership changes (User.groups) -> the users involved
- group permission changes (Group.permissions) -> members of the groups
- Group save/delete -> its members
- Permission save/delete -> users reaching it through any group, plus
  everyone when a menu is bound to it
- Menu save/delete -> everyone (the cache generation is advanced)
- User delete -> that user

Member ids needed after a delete or clear are captured in the matching
pre_* signal, while the relations still exist.
"""
import logging
from django.db import transaction
from django.db.models.signals import m2m_changed, post_delete, post_save, pre_delete
from django.dispatch import receiver

from apps.rbac.models import Group, Menu, Permission, User

logger = logging.getLogger(__name__)

_PENDING_ATTR = '_rbac_pending_user_ids'


def _invalidate_users_on_commit(user_ids):
    """Invalidate the given users' cache entries after the current transaction commits."""
    user_ids = sorted({str(user_id) for user_id in user_ids})
    if not user_ids:
        return

    def invalidate():
        from apps.rbac.services import AccessControlService
        AccessControlService.default().invalidate_users_cache(user_ids)

    transaction.on_commit(invalidate)


def _invalidate_all_on_commit():
    def invalidate():
        from apps.rbac.services import AccessControlService
        AccessControlService.default().invalidate_all_cache()

    transaction.on_commit(invalidate)


def _members_of_groups(group_ids):
    return list(
        User.objects.filter(groups__id__in=group_ids).values_list('id', flat=True).distinct()
    )


def _holders_of_permission(permission):
    return list(
        User.objects.filter(groups__permissions=permission).values_list('id', flat=True).distinct()
    )


def _stash(instance, user_ids):
    setattr(instance, _PENDING_ATTR, list(user_ids))


def _pop_stash(instance):
    user_ids = getattr(instance, _PENDING_ATTR, [])
    if hasattr(instance, _PENDING_ATTR):
        delattr(instance, _PENDING_ATTR)
    return user_ids


@receiver(m2m_changed, sender=User.groups.through)
def user_groups_changed(sender, instance, action, reverse, pk_set, **kwargs):
    """
    Invalidate users whose group memberships changed.

    ``instance`` is a User when edited from the user side and a Group when
    edited through ``group.users``.
    """
    if not reverse:
        if action in ('post_add', 'post_remove', 'post_clear'):
            _invalidate_users_on_commit([instance.pk])
        return

    if action == 'pre_clear':
        _stash(instance, instance.users.values_list('id', flat=True))
    elif action == 'post_clear':
        _invalidate_users_on_commit(_pop_stash(instance))
    elif action in ('post_add', 'post_remove'):
        _invalidate_users_on_commit(pk_set or [])


@receiver(m2m_changed, sender=Group.permissions.through)
def group_permissions_changed(sender, instance, action, reverse, pk_set, **kwargs):
    """
    Invalidate members of groups whose permission set changed.

    ``instance`` is a Group when edited from the group side and a
    Permission when edited through ``permission.groups``.
    """
    if not reverse:
        if action in ('post_add', 'post_remove', 'post_clear'):
            _invalidate_users_on_commit(_members_of_groups([instance.pk]))
        return

    if action == 'pre_clear':
        _stash(instance, _holders_of_permission(instance))
    elif action == 'post_clear':
        _invalidate_users_on_commit(_pop_stash(instance))
    elif action in ('post_add', 'post_remove'):
        _invalidate_users_on_commit(_members_of_groups(pk_set or []))


@receiver(post_save, sender=Group)
def group_saved(sender, instance, created, **kwargs):
    """A changed group (e.g. activity flag) affects all of its members."""
    if created:
        return
    _invalidate_users_on_commit(instance.member_ids())


@receiver(pre_delete, sender=Group)
def group_deleting(sender, instance, **kwargs):
    _stash(instance, instance.member_ids())


@receiver(post_delete, sender=Group)
def group_deleted(sender, instance, **kwargs):
    _invalidate_users_on_commit(_pop_stash(instance))


@receiver(post_save, sender=Permission)
def permission_saved(sender, instance, created, **kwargs):
    """A changed permission (code or activity flag) affects everyone holding it."""
    if created:
        return
    _invalidate_users_on_commit(_holders_of_permission(instance))
    if instance.menus.exists():
        _invalidate_all_on_commit()


@receiver(pre_delete, sender=Permission)
def permission_deleting(sender, instance, **kwargs):
    _stash(instance, _holders_of_permission(instance))


@receiver(post_delete, sender=Permission)
def permission_deleted(sender, instance, **kwargs):
    _invalidate_users_on_commit(_pop_stash(instance))


@receiver(post_save, sender=Menu)
@receiver(post_delete, sender=Menu)
def menu_changed(sender, instance, **kwargs):
    """Menus are shared by every user, so all cached menu trees go stale."""
    logger.debug(f"Menu {instance.pk} changed; invalidating all cached menu trees")
    _invalidate_all_on_commit()


@receiver(post_delete, sender=User)
def user_deleted(sender, instance, **kwargs):
    _invalidate_users_on_commit([instance.pk])
