"""Logging helpers for access decisions.

Guard denials, gate transitions and resolution issues are logged with the
caller's ``identity_id`` and ``tenant_id`` attached. Values that come from
request metadata (session keys, auth headers) are previewed and redacted
before they reach a handler.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import HubConfig, LogLevel

# Credentials that can show up in session metadata or provider errors.
# Identity and tenant ids are left readable.
CREDENTIAL_PATTERNS = (
    re.compile(
        r"(?:password|passwd|secret|token|api[_-]?key|session[_-]?key|x-session|cookie)"
        r"\s*[:=]\s*[\"']?[^\"'\s,;]+",
        re.IGNORECASE,
    ),
    re.compile(r"(?:bearer|basic)\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
)

_CONTEXT_FIELDS = ("identity_id", "tenant_id")

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    *_CONTEXT_FIELDS,
}

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Render ``value`` on one line, at most ``limit`` characters long.

    Mappings and sequences (override maps, required-key tuples) are
    rendered as JSON.
    """
    if value is None:
        return ""

    if isinstance(value, (dict, list, tuple)):
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            text = str(value)
    else:
        text = str(value)

    text = " ".join(text.split())
    if len(text) > limit:
        return text[: limit - 1] + "…"
    return text


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Replace credentials in ``text``. Non-strings are returned unchanged."""
    if not isinstance(text, str):
        return text
    for pattern in CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    preview = safe_preview(value, limit=limit)
    return redact_secrets(preview) if redact else preview


class AccessLogFormatter(logging.Formatter):
    """JSON or plain-text formatter carrying identity and tenant context.

    Extra record fields are previewed (and redacted when enabled), so a
    stray session header passed through ``extra`` never reaches the output
    in full.
    """

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def _context(self, record: logging.LogRecord) -> dict[str, str]:
        if not self.include_context:
            return {}
        return {
            name: str(getattr(record, name))
            for name in _CONTEXT_FIELDS
            if getattr(record, name, None)
        }

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.redact_secrets:
            message = redact_secrets(message)
        context = self._context(record)

        if not self.json_format:
            line = f"[{self.formatTime(record, self.datefmt)}] {record.levelname} {record.name}"
            for name, value in context.items():
                line += f" {name.removesuffix('_id')}={value}"
            line += f" : {message}"
            if record.exc_info:
                line += "\n" + self.formatException(record.exc_info)
            return line

        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            **context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload[key] = safe_log_value(value, redact=self.redact_secrets)
        return json.dumps(payload, default=str, ensure_ascii=False)


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Adds ``identity_id`` and ``tenant_id`` to every record.

    Either can be overridden per call as a keyword argument::

        log = get_access_logger(__name__, identity_id="u1", tenant_id="t1")
        log.info("Guard denied", identity_id="u2")
    """

    def __init__(
        self,
        logger: logging.Logger,
        identity_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.identity_id = identity_id
        self.tenant_id = tenant_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        for name, bound in (("identity_id", self.identity_id), ("tenant_id", self.tenant_id)):
            value = kwargs.pop(name, bound)
            if value:
                extra[name] = value
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config: Optional[HubConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Install a single ``AccessLogFormatter`` handler on the root logger.

    Args:
        config: HubConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact_secrets: Whether to redact credentials (default: True)
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level = _LEVELS.get(LogLevel(config.log_level), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        AccessLogFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(level)


def get_access_logger(
    name: str,
    identity_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter bound to an identity and tenant."""
    return AccessLoggerAdapter(logging.getLogger(name), identity_id=identity_id, tenant_id=tenant_id)


__all__ = [
    "CREDENTIAL_PATTERNS",
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "setup_logging",
    "get_access_logger",
]
