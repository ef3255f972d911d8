"""Total permission maps, the two named presets, and capability bundles.

Provides:
- ``PermissionMap`` - immutable total mapping from every catalog key to a bool.
- ``default_preset()`` - guest access: public read only.
- ``administrator_preset()`` - every key granted.
- ``PUBLIC_READ`` - the keys the default preset grants.
- ``CAPABILITY_BUNDLES`` - named key groups used by role helpers and guards.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .constants import CATALOG, PERMISSION_KEYS, Permissions


class PermissionMap(Mapping[str, bool]):
    """Immutable, total assignment of a bool to every catalog key.

    Construction checks totality: the source must contain exactly the
    catalog keys. Iteration follows catalog order, so equal maps
    serialize identically.

    Example::

        perms = default_preset()
        perms[Permissions.CONTENT_VIEW]   # True
        perms.granted()                    # frozenset({"content.view", ...})
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, bool]) -> None:
        keys = set(values)
        missing = CATALOG - keys
        if missing:
            raise ValueError(f"PermissionMap missing catalog keys: {sorted(missing)}")
        unknown = keys - CATALOG
        if unknown:
            raise ValueError(f"PermissionMap has keys outside the catalog: {sorted(unknown)}")
        self._values: dict[str, bool] = {key: values[key] is True for key in PERMISSION_KEYS}

    def __getitem__(self, key: str) -> bool:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def granted(self) -> frozenset[str]:
        """Keys whose value is True."""
        return frozenset(key for key, value in self._values.items() if value)

    def as_dict(self) -> dict[str, bool]:
        """Plain dict copy, in catalog order."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"PermissionMap(granted={sorted(self.granted())!r})"


# ── Presets ─────────────────────────────────────────────

PUBLIC_READ: frozenset[str] = frozenset(
    {
        Permissions.CONTENT_VIEW,
        Permissions.ARTICLES_VIEW,
        Permissions.FORUM_VIEW,
        Permissions.COMMENTS_VIEW,
    }
)

_DEFAULT = PermissionMap({key: key in PUBLIC_READ for key in PERMISSION_KEYS})
_ADMINISTRATOR = PermissionMap({key: True for key in PERMISSION_KEYS})


def default_preset() -> PermissionMap:
    """Minimal guest map: every key False except the public-read subset."""
    return _DEFAULT


def administrator_preset() -> PermissionMap:
    """Full grant: every catalog key True."""
    return _ADMINISTRATOR


# ── Capability Bundles ──────────────────────────────────
# Named groups of keys. A role helper or preset guard passes when
# any key in its bundle is granted.

CAPABILITY_BUNDLES: dict[str, tuple[str, ...]] = {
    "moderator": (
        Permissions.FORUM_MODERATE,
        Permissions.COMMENTS_MODERATE,
        Permissions.CONTENT_PUBLISH,
    ),
    "content_manager": (
        Permissions.CONTENT_CREATE,
        Permissions.CONTENT_EDIT,
        Permissions.CONTENT_DELETE,
        Permissions.CONTENT_PUBLISH,
    ),
    "user_manager": (
        Permissions.USERS_VIEW,
        Permissions.USERS_CREATE,
        Permissions.USERS_EDIT,
        Permissions.USERS_MANAGE_ROLES,
    ),
    "code_manager": (
        Permissions.CODES_CREATE,
        Permissions.CODES_EDIT,
        Permissions.CODES_DELETE,
        Permissions.CODES_ANALYTICS,
    ),
    # The code-manager guard admits viewers; the role helper does not.
    "code_manager_guard": (
        Permissions.CODES_VIEW,
        Permissions.CODES_CREATE,
        Permissions.CODES_EDIT,
        Permissions.CODES_ANALYTICS,
    ),
}


__all__ = [
    "CAPABILITY_BUNDLES",
    "PUBLIC_READ",
    "PermissionMap",
    "administrator_preset",
    "default_preset",
]
