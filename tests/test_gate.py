"""Tests for PermissionGate."""

from __future__ import annotations

import logging

import pytest

from hubcore import (
    AccessConfig,
    GroupRecord,
    GuardOutcome,
    GuardRequirement,
    HubConfig,
    IdentityRecord,
    PermissionGate,
    TenantRecord,
)
from hubcore.security import ADMIN_GUARD, ContextStatus

TENANT = TenantRecord(id="t1", code_prefix="ACME")
EDITORS = GroupRecord(id="g1", tenant_id="t1", display_name="Editors", overrides={"content.edit": True})
ALICE = IdentityRecord(id="u1", tenant_id="t1", group_id="g1")
EDIT = GuardRequirement(permission="content.edit")


class TestPermissionGate:
    """State machine and last-write-wins behaviour."""

    def test_starts_pending(self) -> None:
        gate = PermissionGate()
        assert gate.check(EDIT).outcome is GuardOutcome.PENDING

    def test_publish_resolves(self) -> None:
        gate = PermissionGate()
        ticket = gate.begin_refresh()
        assert gate.publish(ticket, ALICE, EDITORS, TENANT) is True
        assert gate.context.status is ContextStatus.READY
        assert gate.context.version == ticket
        assert gate.check(EDIT).outcome is GuardOutcome.GRANTED

    def test_refresh_reenters_pending(self) -> None:
        gate = PermissionGate()
        gate.publish(gate.begin_refresh(), ALICE, EDITORS, TENANT)
        assert gate.check(EDIT).allowed

        gate.begin_refresh()
        assert gate.check(EDIT).outcome is GuardOutcome.PENDING

    def test_granted_is_stable_without_refresh(self) -> None:
        gate = PermissionGate()
        gate.publish(gate.begin_refresh(), ALICE, EDITORS, TENANT)
        assert gate.check(EDIT) == gate.check(EDIT)

    def test_stale_publish_discarded(self) -> None:
        gate = PermissionGate()
        stale = gate.begin_refresh()
        fresh = gate.begin_refresh()

        assert gate.publish(fresh, ALICE, None, TENANT) is True
        assert gate.publish(stale, ALICE, EDITORS, TENANT) is False

        # The newer snapshot (no group, so no content.edit) stands.
        assert gate.context.version == fresh
        assert gate.check(EDIT).outcome is GuardOutcome.DENIED_SHOW_FALLBACK

    def test_publish_anonymous(self) -> None:
        gate = PermissionGate()
        gate.publish(gate.begin_refresh(), None)
        assert gate.check(GuardRequirement(permission="content.view")).allowed
        assert gate.check(ADMIN_GUARD).outcome is GuardOutcome.DENIED_SHOW_FALLBACK

    def test_silent_denial(self) -> None:
        gate = PermissionGate()
        gate.publish(gate.begin_refresh(), ALICE, EDITORS, TENANT)
        result = gate.check(GuardRequirement(permission="users.delete", silent=True))
        assert result.outcome is GuardOutcome.DENIED_SILENT


class TestFetchFailures:
    """Upstream failures stay pending, then fail closed."""

    def test_pending_until_attempts_exhausted(self) -> None:
        gate = PermissionGate(AccessConfig(max_fetch_attempts=3))
        ticket = gate.begin_refresh()

        gate.fetch_failed(ticket)
        gate.fetch_failed(ticket)
        assert gate.check(EDIT).outcome is GuardOutcome.PENDING

        gate.fetch_failed(ticket)
        assert gate.context.status is ContextStatus.FAILED
        assert gate.check(EDIT).outcome is GuardOutcome.DENIED_SHOW_FALLBACK

    def test_failed_shows_fallback_even_when_silent(self) -> None:
        gate = PermissionGate(AccessConfig(max_fetch_attempts=1))
        gate.fetch_failed(gate.begin_refresh())
        result = gate.check(GuardRequirement(permission="content.view", silent=True))
        assert result.outcome is GuardOutcome.DENIED_SHOW_FALLBACK

    def test_retry_success_after_failure(self) -> None:
        gate = PermissionGate()
        ticket = gate.begin_refresh()
        gate.fetch_failed(ticket)
        gate.publish(ticket, ALICE, EDITORS, TENANT)
        assert gate.check(EDIT).allowed

    def test_stale_failure_ignored(self) -> None:
        gate = PermissionGate(AccessConfig(max_fetch_attempts=1))
        stale = gate.begin_refresh()
        fresh = gate.begin_refresh()
        gate.fetch_failed(stale)
        assert gate.context.status is ContextStatus.LOADING
        gate.publish(fresh, ALICE, EDITORS, TENANT)
        assert gate.check(EDIT).allowed

    def test_late_failure_after_publish_ignored(self) -> None:
        """A published ticket is used up; a late failure report does not revoke the grant."""
        gate = PermissionGate(AccessConfig(max_fetch_attempts=1))
        ticket = gate.begin_refresh()
        gate.publish(ticket, ALICE, EDITORS, TENANT)

        gate.fetch_failed(ticket)
        assert gate.context.status is ContextStatus.READY
        assert gate.check(EDIT).outcome is GuardOutcome.GRANTED

    def test_second_publish_for_ticket_discarded(self) -> None:
        gate = PermissionGate()
        ticket = gate.begin_refresh()
        assert gate.publish(ticket, ALICE, EDITORS, TENANT) is True
        assert gate.publish(ticket, ALICE, None, TENANT) is False
        assert gate.check(EDIT).allowed

    def test_new_refresh_resets_failures(self) -> None:
        gate = PermissionGate(AccessConfig(max_fetch_attempts=2))
        gate.fetch_failed(gate.begin_refresh())
        ticket = gate.begin_refresh()
        gate.fetch_failed(ticket)
        assert gate.check(EDIT).outcome is GuardOutcome.PENDING

    def test_accepts_hub_config(self) -> None:
        gate = PermissionGate(HubConfig(access=AccessConfig(max_fetch_attempts=1)))
        gate.fetch_failed(gate.begin_refresh())
        assert gate.context.status is ContextStatus.FAILED


class TestGateLogging:
    """Resolution issues and denials are logged."""

    def test_resolution_issues_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        gate = PermissionGate()
        identity = IdentityRecord(id="u1", tenant_id="t1", personal_overrides={"content.archive": True})

        with caplog.at_level(logging.WARNING, logger="hubcore.security.gate"):
            gate.publish(gate.begin_refresh(), identity, None, TENANT)

        assert any("content.archive" in record.getMessage() for record in caplog.records)
        assert caplog.records[-1].identity_id == "u1"

    def test_issue_logging_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        gate = PermissionGate(AccessConfig(log_resolution_issues=False))
        identity = IdentityRecord(id="u1", tenant_id="t1", personal_overrides={"content.archive": True})

        with caplog.at_level(logging.WARNING, logger="hubcore.security.gate"):
            gate.publish(gate.begin_refresh(), identity, None, TENANT)

        assert caplog.records == []

    def test_denial_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        gate = PermissionGate()
        gate.publish(gate.begin_refresh(), ALICE, EDITORS, TENANT)

        with caplog.at_level(logging.INFO, logger="hubcore.security.gate"):
            gate.check(ADMIN_GUARD)

        assert any("Guard denied" in record.getMessage() for record in caplog.records)
