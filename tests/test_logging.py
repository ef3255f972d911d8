"""Tests for hubcore.logging module."""

from __future__ import annotations

import json
import logging

import pytest

from hubcore import (
    HubConfig,
    LogLevel,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from hubcore.logging import AccessLogFormatter


def _record(msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        """Whitespace is normalized."""
        assert safe_preview("hello\n\tworld  test") == "hello world test"

    def test_string_truncation(self) -> None:
        long_string = "a" * 300
        result = safe_preview(long_string, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_dict_value(self) -> None:
        """Dicts are rendered as JSON."""
        result = safe_preview({"content.create": True})
        assert '"content.create": true' in result


class TestRedactSecrets:
    """Tests for redact_secrets function."""

    def test_password_pattern(self) -> None:
        result = redact_secrets('password: "secret123"')
        assert "[REDACTED]" in result
        assert "secret123" not in result

    def test_bearer_token(self) -> None:
        result = redact_secrets("Authorization: Bearer abc123def456")
        assert "[REDACTED]" in result

    def test_no_secrets(self) -> None:
        """Permission keys pass through untouched."""
        text = "missing permission: users.manage_roles"
        assert redact_secrets(text) == text

    def test_session_key(self) -> None:
        result = redact_secrets("fetch failed for x-session=9f2c7e1ab44d")
        assert "9f2c7e1ab44d" not in result

    def test_identity_ids_stay_readable(self) -> None:
        """Hex identity and tenant ids are not mistaken for credentials."""
        text = "identity 3f9a1c2e4b5d6f708192a3b4c5d6e7f8 denied"
        assert redact_secrets(text) == text

    def test_custom_replacement(self) -> None:
        result = redact_secrets("password: secret123", replacement="[HIDDEN]")
        assert "[HIDDEN]" in result


class TestSafeLogValue:
    """Tests for safe_log_value function."""

    def test_with_redaction(self) -> None:
        assert "[REDACTED]" in safe_log_value("api_key: sk-1234567890", redact=True)

    def test_truncation(self) -> None:
        assert len(safe_log_value("a" * 500, limit=100)) <= 100


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_with_config(self) -> None:
        setup_logging(config=HubConfig(log_level=LogLevel.DEBUG), json_format=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_with_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        setup_logging(json_format=False)
        assert logging.getLogger().level == logging.WARNING

    def test_json_format_from_config(self, capsys: pytest.CaptureFixture) -> None:
        """log_json in config selects JSON output when json_format is not given."""
        setup_logging(config=HubConfig(log_level=LogLevel.INFO, log_json=True))

        logging.getLogger("test").info("Test message")

        data = json.loads(capsys.readouterr().err.strip())
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"

    def test_plain_format(self, capsys: pytest.CaptureFixture) -> None:
        setup_logging(config=HubConfig(log_level=LogLevel.INFO), json_format=False)

        logging.getLogger("test").info("Test message")

        output = capsys.readouterr().err.strip()
        assert "INFO" in output
        assert "Test message" in output
        assert not output.startswith("{")


class TestAccessLogger:
    """Tests for the identity/tenant logger adapter."""

    def test_logger_binds_identity_and_tenant(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test", identity_id="u1", tenant_id="t1")

        with caplog.at_level(logging.INFO):
            logger.info("Guard denied")

        record = caplog.records[-1]
        assert record.identity_id == "u1"
        assert record.tenant_id == "t1"

    def test_per_call_override(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test", identity_id="u1")

        with caplog.at_level(logging.INFO):
            logger.info("Guard denied", identity_id="u2")

        assert caplog.records[-1].identity_id == "u2"

    def test_logger_without_context(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test")

        with caplog.at_level(logging.INFO):
            logger.info("Test message")

        assert not hasattr(caplog.records[-1], "identity_id")


class TestAccessLogFormatter:
    """Tests for AccessLogFormatter."""

    def test_json_format(self) -> None:
        record = _record()
        record.identity_id = "u1"
        record.tenant_id = "t1"

        data = json.loads(AccessLogFormatter(json_format=True).format(record))
        assert data["level"] == "INFO"
        assert data["identity_id"] == "u1"
        assert data["tenant_id"] == "t1"

    def test_plain_format(self) -> None:
        record = _record()
        record.identity_id = "u1"

        result = AccessLogFormatter(json_format=False).format(record)
        assert "INFO" in result
        assert "Test message" in result
        assert "identity=u1" in result

    def test_extra_fields_are_previewed(self) -> None:
        record = _record()
        record.required = ("codes.view", "codes.create")

        data = json.loads(AccessLogFormatter(json_format=True).format(record))
        assert "codes.view" in data["required"]
