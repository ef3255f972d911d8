"""Access-decision queries over a resolved permission map.

Every function here is pure and total: unknown keys answer False, no
function raises, and none re-runs the resolver. Used by the guard and
directly by service handlers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Optional

from .constants import Permissions, is_valid_key
from .presets import CAPABILITY_BUNDLES

PermissionLookup = Mapping[str, bool]


def has(permissions: PermissionLookup, key: object) -> bool:
    """Check a single permission key.

    Returns False for anything not in the map, including keys outside
    the catalog and the ``NOT_A_PERMISSION`` sentinel.

    Example::

        has(default_preset(), Permissions.CONTENT_VIEW)    # True
        has(default_preset(), Permissions.CONTENT_CREATE)  # False
        has(default_preset(), "content.archive")           # False
    """
    return is_valid_key(key) and permissions.get(key) is True


def has_any(permissions: PermissionLookup, keys: Iterable[str]) -> bool:
    """True iff at least one key is granted. An empty list is never satisfied."""
    return any(has(permissions, key) for key in keys)


def has_all(permissions: PermissionLookup, keys: Iterable[str]) -> bool:
    """True iff every key is granted.

    An empty list is vacuously satisfied: ``has_all(perms, [])`` is True
    for every map. Callers building key lists dynamically should check
    for emptiness themselves if that is not what they want.
    """
    return all(has(permissions, key) for key in keys)


def can_access(permissions: PermissionLookup, resource: str, action: str) -> bool:
    """Check ``resource.action``; False when that key is not in the catalog."""
    return has(permissions, Permissions.compose(resource, action))


def can_access_tenant(
    permissions: PermissionLookup,
    identity_tenant_id: Optional[str],
    target_tenant_id: Optional[str],
) -> bool:
    """Administrators cross tenant boundaries; everyone else stays in their own.

    An identity without a tenant never matches, not even a missing target.
    """
    if has(permissions, Permissions.ADMIN_ACCESS):
        return True
    return identity_tenant_id is not None and identity_tenant_id == target_tenant_id


def can_act_on_owned(
    permissions: PermissionLookup,
    identity_id: Optional[str],
    resource_owner_id: Optional[str],
    key: str,
) -> bool:
    """Act on a resource you own, provided you also hold the base capability.

    Example::

        can_act_on_owned(perms, "u1", "u1", Permissions.CONTENT_EDIT)
        # == has(perms, Permissions.CONTENT_EDIT)

        can_act_on_owned(perms, "u1", "u2", Permissions.CONTENT_EDIT)
        # False unless perms grants admin.access
    """
    if has(permissions, Permissions.ADMIN_ACCESS):
        return True
    if identity_id is None or identity_id != resource_owner_id:
        return False
    return has(permissions, key)


# ── Role Helpers ───────────────────────────────────────


def is_admin(permissions: PermissionLookup) -> bool:
    return has(permissions, Permissions.ADMIN_ACCESS)


def is_moderator(permissions: PermissionLookup) -> bool:
    return has_any(permissions, CAPABILITY_BUNDLES["moderator"])


def can_manage_users(permissions: PermissionLookup) -> bool:
    return has_any(permissions, CAPABILITY_BUNDLES["user_manager"])


def can_view_analytics(permissions: PermissionLookup) -> bool:
    return has(permissions, Permissions.ANALYTICS_VIEW)


def can_manage_content(permissions: PermissionLookup) -> bool:
    return has_any(permissions, CAPABILITY_BUNDLES["content_manager"])


def can_manage_registration_codes(permissions: PermissionLookup) -> bool:
    return has_any(permissions, CAPABILITY_BUNDLES["code_manager"])


def can_edit_own_content(
    permissions: PermissionLookup,
    identity_id: Optional[str],
    content_owner_id: Optional[str],
) -> bool:
    return can_act_on_owned(permissions, identity_id, content_owner_id, Permissions.CONTENT_EDIT)


def can_delete_own_content(
    permissions: PermissionLookup,
    identity_id: Optional[str],
    content_owner_id: Optional[str],
) -> bool:
    return can_act_on_owned(permissions, identity_id, content_owner_id, Permissions.CONTENT_DELETE)


__all__ = [
    "PermissionLookup",
    "can_access",
    "can_access_tenant",
    "can_act_on_owned",
    "can_delete_own_content",
    "can_edit_own_content",
    "can_manage_content",
    "can_manage_registration_codes",
    "can_manage_users",
    "can_view_analytics",
    "has",
    "has_all",
    "has_any",
    "is_admin",
    "is_moderator",
]
