"""Session-scoped permission gate.

``PermissionGate`` holds the current ``AccessContext`` for one session and
follows the guard state machine::

    PENDING → {GRANTED | DENIED_SILENT | DENIED_SHOW_FALLBACK}

Every context change re-enters PENDING via ``begin_refresh()``. Each refresh
hands out a ticket; only the newest ticket may publish, so a slow, stale
fetch never replaces a newer snapshot.
"""

from __future__ import annotations

from typing import Optional

from ..config import AccessConfig, HubConfig
from ..logging import get_access_logger
from ..permissions.models import GroupRecord, IdentityRecord, TenantRecord
from .guard import AccessContext, GuardRequirement, GuardResult, evaluate_guard


class PermissionGate:
    """Tracks context refreshes and answers guard checks for one session.

    Args:
        config: Administrator detection, fetch-attempt limit and issue logging.

    Usage::

        gate = PermissionGate(config)
        ticket = gate.begin_refresh()
        try:
            snapshot = await provider.fetch(session_key)
        except ContextUnavailableError:
            gate.fetch_failed(ticket)
        else:
            gate.publish(ticket, snapshot.identity, snapshot.group, snapshot.tenant)

        gate.check(ADMIN_GUARD).outcome
    """

    def __init__(self, config: HubConfig | AccessConfig | None = None) -> None:
        if isinstance(config, HubConfig):
            config = config.access
        self._config: AccessConfig = config or AccessConfig()
        self._ticket = 0
        self._failures = 0
        self._published = False
        self._context = AccessContext.loading()

    @property
    def context(self) -> AccessContext:
        return self._context

    @property
    def ticket(self) -> int:
        """The newest ticket issued."""
        return self._ticket

    def begin_refresh(self) -> int:
        """Signal a context change; the gate answers PENDING until it is published."""
        self._ticket += 1
        self._failures = 0
        self._published = False
        self._context = AccessContext.loading(version=self._ticket)
        return self._ticket

    def publish(
        self,
        ticket: int,
        identity: Optional[IdentityRecord],
        group: Optional[GroupRecord] = None,
        tenant: Optional[TenantRecord] = None,
    ) -> bool:
        """Resolve and install a snapshot.

        Returns:
            False if ``ticket`` is stale or already published; the snapshot is discarded.
        """
        if ticket != self._ticket or self._published:
            get_access_logger(__name__).debug(
                "Discarding stale access snapshot (ticket %s, current %s)", ticket, self._ticket
            )
            return False

        context = AccessContext.ready(identity, group, tenant, config=self._config, version=ticket)
        log = get_access_logger(
            __name__,
            identity_id=context.identity_id,
            tenant_id=context.tenant_id,
        )
        if self._config.log_resolution_issues:
            context.resolution.log_issues(log)
        log.debug(
            "Access context ready (administrator=%s, granted=%d)",
            context.resolution.is_administrator,
            len(context.resolution.permissions.granted()),
        )
        self._context = context
        self._published = True
        return True

    def fetch_failed(self, ticket: int) -> None:
        """Record a failed upstream fetch for ``ticket``.

        The gate stays PENDING while a retry is still allowed, then fails
        closed: every check answers DENIED_SHOW_FALLBACK until the next
        ``begin_refresh()``. Reports for a ticket that was already published
        are ignored.
        """
        if ticket != self._ticket or self._published:
            return

        self._failures += 1
        log = get_access_logger(__name__)
        if self._failures >= self._config.max_fetch_attempts:
            log.warning(
                "Access context unavailable after %d attempts; denying access",
                self._failures,
            )
            self._context = AccessContext.failed(version=ticket)
        else:
            log.info(
                "Access context fetch failed (attempt %d of %d); still pending",
                self._failures,
                self._config.max_fetch_attempts,
            )

    def check(self, requirement: GuardRequirement) -> GuardResult:
        """Evaluate ``requirement`` against the current context."""
        result = evaluate_guard(requirement, self._context)
        if result.denied:
            get_access_logger(
                __name__,
                identity_id=self._context.identity_id,
                tenant_id=self._context.tenant_id,
            ).info("Guard denied (%s): %s", result.outcome.value, result.reason)
        return result


__all__ = ["PermissionGate"]
