"""Guard - turns a permission requirement into an allow/deny/pending outcome.

Provides:
- ``GuardOutcome`` - PENDING, GRANTED, DENIED_SHOW_FALLBACK, DENIED_SILENT.
- ``GuardRequirement`` - what a protected operation or UI region needs.
- ``AccessContext`` - resolved snapshot (or loading/failed marker) the guard reads.
- ``GuardResult`` - outcome plus the keys evaluated and a denial message.
- ``evaluate_guard()`` - pure, idempotent evaluation.
- ``require()`` - raising variant for protected operations.
- Preset requirements: ``ADMIN_GUARD``, ``CONTENT_MANAGER_GUARD``, ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config import AccessConfig, HubConfig
from ..exceptions import AccessPendingError, ConfigurationError, PermissionDeniedError
from ..permissions.access import (
    can_access,
    can_access_tenant,
    can_act_on_owned,
    has,
    has_all,
    has_any,
)
from ..permissions.constants import Permissions
from ..permissions.models import GroupRecord, IdentityRecord, TenantRecord
from ..permissions.presets import CAPABILITY_BUNDLES
from ..permissions.resolver import Resolution, resolve_permissions

logger = logging.getLogger(__name__)

DENIAL_MESSAGE = (
    "You don't have permission to access this feature. "
    "Contact your administrator if you believe this is an error."
)


# ── Outcomes ─────────────────────────────────────────────────────


class GuardOutcome(str, Enum):
    """Result of a guard evaluation.

    ``PENDING`` means the context is still loading: render a loading
    indicator, never the protected content.
    """

    PENDING = "pending"
    GRANTED = "granted"
    DENIED_SHOW_FALLBACK = "denied_show_fallback"
    DENIED_SILENT = "denied_silent"


class ContextStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


# ── Requirement ──────────────────────────────────────────────────


@dataclass(frozen=True)
class GuardRequirement:
    """What a protected boundary needs.

    The base check uses the first of these that is set:

    1. ``permission`` - a single key.
    2. ``permissions`` - a list, combined with any (default) or all
       (``require_all=True``).
    3. ``resource`` + ``action`` - composed into a catalog key.

    With none of them set the base check passes, so ``tenant_id`` and
    ``owner_id`` can be used on their own.

    Attributes:
        tenant_id: Target tenant; the identity must belong to it.
        owner_id: Owner of the target resource; the identity must own it
            and hold ``ownership_permission``.
        silent: On denial, return ``DENIED_SILENT`` instead of
            ``DENIED_SHOW_FALLBACK``.
    """

    permission: Optional[str] = None
    permissions: tuple[str, ...] = ()
    require_all: bool = False
    resource: Optional[str] = None
    action: Optional[str] = None
    tenant_id: Optional[str] = None
    owner_id: Optional[str] = None
    ownership_permission: str = Permissions.CONTENT_EDIT
    silent: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.permissions, str):
            raise ConfigurationError(
                "GuardRequirement.permissions must be a sequence of keys, not a string",
                permissions=self.permissions,
            )
        # Normalize lists passed by callers so the requirement stays hashable.
        object.__setattr__(self, "permissions", tuple(self.permissions))
        if self.permission == "" or "" in self.permissions:
            raise ConfigurationError(
                "GuardRequirement permission keys must not be empty",
                permission=self.permission,
                permissions=self.permissions,
            )
        if (self.resource is None) != (self.action is None):
            raise ConfigurationError(
                "GuardRequirement needs both resource and action, or neither",
                resource=self.resource,
                action=self.action,
            )

    @property
    def required_keys(self) -> tuple[str, ...]:
        """The keys the base check evaluates, for denial messages."""
        if self.permission:
            return (self.permission,)
        if self.permissions:
            return self.permissions
        if self.resource is not None and self.action is not None:
            return (f"{self.resource}.{self.action}",)
        return ()


# ── Context ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class AccessContext:
    """The snapshot a guard evaluates against.

    Build with :meth:`loading`, :meth:`ready` or :meth:`failed`. A ready
    context without an identity is an anonymous session and carries the
    default preset.
    """

    status: ContextStatus = ContextStatus.LOADING
    identity: Optional[IdentityRecord] = None
    resolution: Resolution = field(default_factory=Resolution)
    version: int = 0

    @classmethod
    def loading(cls, *, version: int = 0) -> AccessContext:
        return cls(status=ContextStatus.LOADING, version=version)

    @classmethod
    def failed(cls, *, version: int = 0) -> AccessContext:
        return cls(status=ContextStatus.FAILED, version=version)

    @classmethod
    def ready(
        cls,
        identity: Optional[IdentityRecord] = None,
        group: Optional[GroupRecord] = None,
        tenant: Optional[TenantRecord] = None,
        *,
        config: HubConfig | AccessConfig | None = None,
        version: int = 0,
    ) -> AccessContext:
        """Resolve permissions for the snapshot and wrap the result."""
        return cls(
            status=ContextStatus.READY,
            identity=identity,
            resolution=resolve_permissions(identity, group, tenant, config=config),
            version=version,
        )

    @property
    def identity_id(self) -> Optional[str]:
        return self.identity.id if self.identity is not None else None

    @property
    def tenant_id(self) -> Optional[str]:
        return self.identity.tenant_id if self.identity is not None else None


# ── Result ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class GuardResult:
    """Outcome of one guard evaluation."""

    outcome: GuardOutcome
    required: tuple[str, ...] = ()
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.GRANTED

    @property
    def pending(self) -> bool:
        return self.outcome is GuardOutcome.PENDING

    @property
    def denied(self) -> bool:
        return self.outcome in (GuardOutcome.DENIED_SHOW_FALLBACK, GuardOutcome.DENIED_SILENT)

    @property
    def denial_message(self) -> Optional[str]:
        """User-facing text for a visible denial; None for every other outcome."""
        if self.outcome is not GuardOutcome.DENIED_SHOW_FALLBACK:
            return None
        if not self.required:
            return DENIAL_MESSAGE
        label = "permissions" if len(self.required) > 1 else "permission"
        return f"{DENIAL_MESSAGE} Required {label}: {', '.join(self.required)}"


# ── Evaluation ───────────────────────────────────────────────────


def _base_check(requirement: GuardRequirement, permissions) -> bool:
    if requirement.permission:
        return has(permissions, requirement.permission)
    if requirement.permissions:
        if requirement.require_all:
            return has_all(permissions, requirement.permissions)
        return has_any(permissions, requirement.permissions)
    if requirement.resource is not None and requirement.action is not None:
        return can_access(permissions, requirement.resource, requirement.action)
    return True


def evaluate_guard(requirement: GuardRequirement, context: AccessContext) -> GuardResult:
    """Evaluate a requirement against a context.

    Order: base check, then tenant scope, then ownership. Holding
    ``admin.access`` is applied last and only ever turns a denial into
    a grant. The function does no I/O; identical inputs give identical
    results.

    Example::

        ctx = AccessContext.ready(identity, group, tenant)
        result = evaluate_guard(
            GuardRequirement(permissions=("codes.view", "codes.create")),
            ctx,
        )
        result.outcome  # GuardOutcome.GRANTED if either key is held
    """
    required = requirement.required_keys

    if context.status is ContextStatus.LOADING:
        return GuardResult(GuardOutcome.PENDING, required, "access context is loading")

    if context.status is ContextStatus.FAILED:
        return GuardResult(GuardOutcome.DENIED_SHOW_FALLBACK, required, "access context unavailable")

    permissions = context.resolution.permissions
    reason = ""

    allowed = _base_check(requirement, permissions)
    if not allowed:
        reason = f"missing permission: {', '.join(required)}"

    if allowed and requirement.tenant_id is not None:
        allowed = can_access_tenant(permissions, context.tenant_id, requirement.tenant_id)
        if not allowed:
            reason = f"tenant access denied: {requirement.tenant_id}"

    if allowed and requirement.owner_id is not None:
        allowed = can_act_on_owned(
            permissions,
            context.identity_id,
            requirement.owner_id,
            requirement.ownership_permission,
        )
        if not allowed:
            reason = f"ownership check failed for {requirement.ownership_permission}"

    # Administrator override
    if not allowed and has(permissions, Permissions.ADMIN_ACCESS):
        allowed = True

    if allowed:
        return GuardResult(GuardOutcome.GRANTED, required)

    outcome = GuardOutcome.DENIED_SILENT if requirement.silent else GuardOutcome.DENIED_SHOW_FALLBACK
    return GuardResult(outcome, required, reason)


def require(requirement: GuardRequirement, context: AccessContext) -> GuardResult:
    """Evaluate and raise unless granted.

    Raises:
        AccessPendingError: The context is still loading.
        PermissionDeniedError: Access denied. For silent requirements the
            message omits the required keys.
    """
    result = evaluate_guard(requirement, context)
    if result.pending:
        raise AccessPendingError(required=result.required)
    if result.denied:
        logger.info(
            "Access denied for identity %s: %s",
            context.identity_id or "anonymous",
            result.reason,
        )
        silent = result.outcome is GuardOutcome.DENIED_SILENT
        raise PermissionDeniedError(
            None if silent else result.denial_message,
            required=result.required,
            silent=silent,
            reason=result.reason,
        )
    return result


# ── Preset Requirements ──────────────────────────────────────────

ADMIN_GUARD = GuardRequirement(permission=Permissions.ADMIN_ACCESS)
CONTENT_MANAGER_GUARD = GuardRequirement(permissions=CAPABILITY_BUNDLES["content_manager"])
ANALYTICS_GUARD = GuardRequirement(permission=Permissions.ANALYTICS_VIEW)
USER_MANAGER_GUARD = GuardRequirement(permissions=CAPABILITY_BUNDLES["user_manager"])
CODE_MANAGER_GUARD = GuardRequirement(permissions=CAPABILITY_BUNDLES["code_manager_guard"])


__all__ = [
    "ADMIN_GUARD",
    "ANALYTICS_GUARD",
    "AccessContext",
    "CODE_MANAGER_GUARD",
    "CONTENT_MANAGER_GUARD",
    "ContextStatus",
    "DENIAL_MESSAGE",
    "GuardOutcome",
    "GuardRequirement",
    "GuardResult",
    "USER_MANAGER_GUARD",
    "evaluate_guard",
    "require",
]
