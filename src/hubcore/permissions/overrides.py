"""Partial permission maps from external data.

Group and personal overrides arrive as raw JSON-ish mappings with only
some keys present. ``parse_overrides()`` turns one into an
``OverrideSet``: for every catalog key, either ``Override(value)`` or
``ABSENT``. Entries that are not catalog keys or not booleans are dropped
and reported as ``ResolutionIssue`` objects; they never become grants.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from .constants import PERMISSION_KEYS, is_valid_key
from .presets import PermissionMap


class IssueKind(str, Enum):
    """Kinds of problems found while resolving permissions."""

    UNKNOWN_KEY = "unknown_key"
    NON_BOOLEAN_VALUE = "non_boolean_value"
    MALFORMED_MAP = "malformed_map"
    RESOLVER_FAILURE = "resolver_failure"


@dataclass(frozen=True)
class ResolutionIssue:
    """A condition the resolver tolerated and the caller should log."""

    kind: IssueKind
    source: str
    detail: str
    key: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.source}[{self.key}]" if self.key is not None else self.source
        return f"{self.kind.value} at {where}: {self.detail}"


class Override(NamedTuple):
    """A key explicitly set by an override layer."""

    value: bool


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

OverrideEntry = Union[Override, _Absent]


class OverrideSet:
    """Per-key tagged overrides for one layer (group or identity)."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, bool]] = None) -> None:
        self._entries: dict[str, bool] = dict(entries or {})

    def lookup(self, key: str) -> OverrideEntry:
        if key in self._entries:
            return Override(self._entries[key])
        return ABSENT

    def apply(self, base: PermissionMap) -> PermissionMap:
        """Return a new map with every present override written over ``base``."""
        values = base.as_dict()
        for key in PERMISSION_KEYS:
            entry = self.lookup(key)
            if isinstance(entry, Override):
                values[key] = entry.value
        return PermissionMap(values)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OverrideSet({self._entries!r})"


EMPTY_OVERRIDES = OverrideSet()


def parse_overrides(raw: Any, *, source: str) -> tuple[OverrideSet, list[ResolutionIssue]]:
    """Validate a raw partial map.

    Args:
        raw: The override mapping as stored (``None`` means no overrides).
        source: Layer name used in issue reports (``"group"`` or ``"identity"``).

    Returns:
        The valid overrides and the list of dropped entries.

    Example::

        overrides, issues = parse_overrides(
            {"content.create": True, "content.archive": True, "forum.post": "yes"},
            source="group",
        )
        overrides.lookup("content.create")   # Override(value=True)
        overrides.lookup("content.edit")     # ABSENT
        [i.kind for i in issues]             # [UNKNOWN_KEY, NON_BOOLEAN_VALUE]
    """
    if raw is None:
        return EMPTY_OVERRIDES, []

    if not isinstance(raw, Mapping):
        return EMPTY_OVERRIDES, [
            ResolutionIssue(
                kind=IssueKind.MALFORMED_MAP,
                source=source,
                detail=f"expected a mapping, got {type(raw).__name__}",
            )
        ]

    entries: dict[str, bool] = {}
    issues: list[ResolutionIssue] = []
    for key, value in raw.items():
        if not is_valid_key(key):
            issues.append(
                ResolutionIssue(
                    kind=IssueKind.UNKNOWN_KEY,
                    source=source,
                    key=str(key),
                    detail="not in the permission catalog",
                )
            )
            continue
        # null means "not overridden", same as a missing key
        if value is None:
            continue
        if not isinstance(value, bool):
            issues.append(
                ResolutionIssue(
                    kind=IssueKind.NON_BOOLEAN_VALUE,
                    source=source,
                    key=key,
                    detail=f"expected bool, got {type(value).__name__}",
                )
            )
            continue
        entries[key] = value

    return OverrideSet(entries), issues


__all__ = [
    "ABSENT",
    "EMPTY_OVERRIDES",
    "IssueKind",
    "Override",
    "OverrideEntry",
    "OverrideSet",
    "ResolutionIssue",
    "parse_overrides",
]
