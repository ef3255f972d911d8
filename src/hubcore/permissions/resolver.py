"""Permission resolution: (identity, group, tenant) → effective permission map.

Precedence, later layers win:

1. No identity → default preset (fail closed).
2. Administrator status → administrator preset, nothing else applies.
3. Default preset, then group overrides, then personal overrides.

Resolution never raises. Anything unexpected degrades to the default
preset and is reported through ``Resolution.issues``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import AccessConfig, AdminDetection, HubConfig
from .constants import ADMIN_GROUP_MARKER, ADMIN_TENANT_PREFIX
from .models import GroupRecord, IdentityRecord, TenantRecord
from .overrides import IssueKind, ResolutionIssue, parse_overrides
from .presets import PermissionMap, administrator_preset, default_preset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Result of one resolver invocation.

    Attributes:
        permissions: The effective, total permission map.
        is_administrator: Whether the administrator short-circuit applied.
        issues: Dropped override entries and tolerated failures, for the caller to log.
    """

    permissions: PermissionMap = field(default_factory=default_preset)
    is_administrator: bool = False
    issues: tuple[ResolutionIssue, ...] = ()

    @property
    def degraded(self) -> bool:
        """True when resolution fell back to the default preset after a failure."""
        return any(issue.kind is IssueKind.RESOLVER_FAILURE for issue in self.issues)

    def log_issues(self, log: logging.Logger | logging.LoggerAdapter) -> None:
        """Write every issue to ``log`` at WARNING."""
        for issue in self.issues:
            log.warning("Permission resolution issue: %s", issue)


def is_administrator(
    group: Optional[GroupRecord],
    tenant: Optional[TenantRecord],
    *,
    detection: AdminDetection = AdminDetection.NAMING,
) -> bool:
    """Decide administrator status from tenant and group signals.

    With ``AdminDetection.NAMING`` a tenant code starting with ``ADMIN``
    or a group display name containing ``admin`` (any case) is enough.
    A group called "Sub-admin team" therefore counts; switch to
    ``AdminDetection.FLAG`` to rely on explicit record flags instead.
    """
    by_name = False
    if detection in (AdminDetection.NAMING, AdminDetection.NAMING_OR_FLAG):
        by_name = bool(
            (tenant is not None and tenant.code_prefix.startswith(ADMIN_TENANT_PREFIX))
            or (group is not None and ADMIN_GROUP_MARKER in group.display_name.lower())
        )

    by_flag = False
    if detection in (AdminDetection.FLAG, AdminDetection.NAMING_OR_FLAG):
        by_flag = bool(
            (tenant is not None and tenant.is_administrative is True)
            or (group is not None and group.is_administrative is True)
        )

    return by_name or by_flag


def _access_config(config: HubConfig | AccessConfig | None) -> AccessConfig:
    if config is None:
        return AccessConfig()
    if isinstance(config, HubConfig):
        return config.access
    return config


def resolve_permissions(
    identity: Optional[IdentityRecord] = None,
    group: Optional[GroupRecord] = None,
    tenant: Optional[TenantRecord] = None,
    *,
    config: HubConfig | AccessConfig | None = None,
) -> Resolution:
    """Resolve the effective permission map for one request context.

    Args:
        identity: The authenticated user, or None when not authenticated.
        group: The identity's group, if known.
        tenant: The identity's tenant, if known.
        config: Controls administrator detection. Defaults to name-based detection.

    Returns:
        A :class:`Resolution`. Its map is always total.

    Example::

        resolution = resolve_permissions(
            IdentityRecord(id="u1", tenant_id="t1", group_id="g1",
                           personal_overrides={"content.create": False}),
            GroupRecord(id="g1", tenant_id="t1", display_name="Editors",
                        overrides={"content.create": True}),
            TenantRecord(id="t1", code_prefix="ACME"),
        )
        resolution.permissions["content.create"]  # False, personal wins
    """
    if identity is None:
        return Resolution(permissions=default_preset())

    try:
        access = _access_config(config)

        if is_administrator(group, tenant, detection=access.admin_detection):
            logger.debug("Identity %s resolved as administrator", identity.id)
            return Resolution(permissions=administrator_preset(), is_administrator=True)

        group_overrides, group_issues = parse_overrides(
            group.overrides if group is not None else None,
            source="group",
        )
        personal_overrides, personal_issues = parse_overrides(
            identity.personal_overrides,
            source="identity",
        )

        permissions = personal_overrides.apply(group_overrides.apply(default_preset()))
        return Resolution(
            permissions=permissions,
            issues=tuple(group_issues + personal_issues),
        )
    except Exception as e:
        logger.warning("Permission resolution failed, using default preset", exc_info=True)
        return Resolution(
            permissions=default_preset(),
            issues=(
                ResolutionIssue(
                    kind=IssueKind.RESOLVER_FAILURE,
                    source="resolver",
                    detail=f"{type(e).__name__}: {e}",
                ),
            ),
        )


__all__ = [
    "Resolution",
    "is_administrator",
    "resolve_permissions",
]
