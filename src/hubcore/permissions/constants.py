"""Permission catalog for the content hub.

Provides:
- ``Permissions`` - all permission key constants (``resource.action`` format).
- ``PERMISSION_KEYS`` / ``CATALOG`` - the closed catalog, in declaration order.
- ``is_valid_key()`` - catalog membership test.
- ``NOT_A_PERMISSION`` - sentinel returned by ``Permissions.compose()``.
- Reserved administrator naming signals.
"""

from __future__ import annotations

from typing import Final, Union


class _NotAPermission:
    """Sentinel for a composed key that is not in the catalog."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_A_PERMISSION"

    def __bool__(self) -> bool:
        return False


NOT_A_PERMISSION: Final = _NotAPermission()


class Permissions:
    """Canonical permission keys for the content hub.

    Format: ``{resource}.{action}``

    The catalog is closed. Adding a key means adding a constant here
    (and deciding its value in both presets), never a data migration.

    Two modes of use:

    1. **Static constants**::

        has(resolution.permissions, Permissions.CONTENT_EDIT)

    2. **Validated composition** for resource/action pairs coming from
       routes or UI props::

        Permissions.compose("articles", "publish")  → "articles.publish"
        Permissions.compose("articles", "archive")  → NOT_A_PERMISSION
    """

    # ── Content ─────────────────────────────────────────
    CONTENT_VIEW = "content.view"
    CONTENT_CREATE = "content.create"
    CONTENT_EDIT = "content.edit"
    CONTENT_DELETE = "content.delete"
    CONTENT_PUBLISH = "content.publish"

    # ── Articles ────────────────────────────────────────
    ARTICLES_VIEW = "articles.view"
    ARTICLES_CREATE = "articles.create"
    ARTICLES_EDIT = "articles.edit"
    ARTICLES_DELETE = "articles.delete"
    ARTICLES_PUBLISH = "articles.publish"

    # ── User Management ─────────────────────────────────
    USERS_VIEW = "users.view"
    USERS_CREATE = "users.create"
    USERS_EDIT = "users.edit"
    USERS_DELETE = "users.delete"
    USERS_MANAGE_ROLES = "users.manage_roles"

    # ── Analytics ───────────────────────────────────────
    ANALYTICS_VIEW = "analytics.view"
    ANALYTICS_EXPORT = "analytics.export"
    ANALYTICS_MANAGE = "analytics.manage"

    # ── Registration Codes ──────────────────────────────
    CODES_VIEW = "codes.view"
    CODES_CREATE = "codes.create"
    CODES_EDIT = "codes.edit"
    CODES_DELETE = "codes.delete"
    CODES_ANALYTICS = "codes.analytics"

    # ── Admin ───────────────────────────────────────────
    ADMIN_ACCESS = "admin.access"
    ADMIN_MANAGE_ENTITIES = "admin.manage_entities"
    ADMIN_MANAGE_GROUPS = "admin.manage_groups"
    ADMIN_SYSTEM_SETTINGS = "admin.system_settings"

    # ── Forum ───────────────────────────────────────────
    FORUM_VIEW = "forum.view"
    FORUM_POST = "forum.post"
    FORUM_MODERATE = "forum.moderate"

    # ── Comments ────────────────────────────────────────
    COMMENTS_VIEW = "comments.view"
    COMMENTS_CREATE = "comments.create"
    COMMENTS_EDIT = "comments.edit"
    COMMENTS_DELETE = "comments.delete"
    COMMENTS_MODERATE = "comments.moderate"

    # ── Builders ────────────────────────────────────────

    @staticmethod
    def compose(resource: str, action: str) -> Union[str, _NotAPermission]:
        """Build a permission key from resource and action, checked against the catalog.

        Args:
            resource: Resource namespace (e.g. ``"content"``, ``"codes"``).
            action: Operation on that resource (e.g. ``"edit"``).

        Returns:
            The catalog key, or :data:`NOT_A_PERMISSION` if
            ``"{resource}.{action}"`` is not in the catalog.

        Example::

            Permissions.compose("content", "edit")    # "content.edit"
            Permissions.compose("content", "export")  # NOT_A_PERMISSION
        """
        if not isinstance(resource, str) or not isinstance(action, str):
            return NOT_A_PERMISSION
        key = f"{resource}.{action}"
        return key if key in CATALOG else NOT_A_PERMISSION


PERMISSION_KEYS: tuple[str, ...] = tuple(
    value
    for name, value in vars(Permissions).items()
    if name.isupper() and isinstance(value, str)
)

CATALOG: frozenset[str] = frozenset(PERMISSION_KEYS)


def is_valid_key(key: object) -> bool:
    """Return True iff ``key`` is a member of the permission catalog."""
    return isinstance(key, str) and key in CATALOG


# ── Administrator signals ───────────────────────────────
# Tenant codes starting with this prefix are administrative (case-sensitive).
ADMIN_TENANT_PREFIX: Final = "ADMIN"
# Group display names containing this marker are administrative (case-insensitive).
ADMIN_GROUP_MARKER: Final = "admin"


__all__ = [
    "ADMIN_GROUP_MARKER",
    "ADMIN_TENANT_PREFIX",
    "CATALOG",
    "NOT_A_PERMISSION",
    "PERMISSION_KEYS",
    "Permissions",
    "is_valid_key",
]
