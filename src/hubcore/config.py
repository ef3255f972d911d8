"""Configuration contract for hubcore.

Pydantic-validated models for the settings that surround the permission
engine: logging, administrator detection, guard enforcement.

The permission catalog and its presets are NOT configuration. They are
module constants in ``hubcore.permissions``.

Direct os.environ/os.getenv usage is only allowed in
``load_config_from_env()``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AdminDetection(str, Enum):
    """How administrator status is derived from tenant and group records.

    - ``naming``         - tenant code prefix ``ADMIN`` or group display
                           name containing ``admin`` (case-insensitive).
    - ``flag``           - only the explicit ``is_administrative`` flags.
    - ``naming_or_flag`` - either signal.
    """

    NAMING = "naming"
    FLAG = "flag"
    NAMING_OR_FLAG = "naming_or_flag"


class EnforcementMode(str, Enum):
    """Three-state enforcement toggle for the gRPC guard interceptor.

    - ``off``     - no checks, only caller logging.
    - ``warn``    - evaluate guards, log denials as WARNING, let calls through.
    - ``enforce`` - evaluate guards and abort denied calls.
    """

    OFF = "off"
    WARN = "warn"
    ENFORCE = "enforce"


class AccessConfig(BaseModel):
    """Settings for permission resolution and guard enforcement.

    Environment variables:
        ACCESS_ADMIN_DETECTION     - naming | flag | naming_or_flag
        ACCESS_ENFORCEMENT         - off | warn | enforce
        ACCESS_MAX_FETCH_ATTEMPTS  - failed context fetches before the gate gives up
        ACCESS_LOG_ISSUES          - log dropped override entries
    """

    model_config = {"extra": "ignore"}

    admin_detection: AdminDetection = Field(
        default=AdminDetection.NAMING,
        description="Administrator detection signal",
    )
    enforcement: EnforcementMode = Field(
        default=EnforcementMode.ENFORCE,
        description="Interceptor enforcement mode",
    )
    max_fetch_attempts: int = Field(
        default=3,
        ge=1,
        description="Failed context fetches tolerated before the guard denies",
    )
    log_resolution_issues: bool = Field(
        default=True,
        description="Log dropped override entries at WARNING",
    )


class HubConfig(BaseModel):
    """Top-level configuration for services embedding hubcore."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name for log identification",
    )
    service_version: Optional[str] = Field(
        default=None,
        description="Service version",
    )

    access: AccessConfig = Field(
        default_factory=AccessConfig,
        description="Permission resolution and enforcement settings",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> HubConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name
    - SERVICE_VERSION: Service version
    - ACCESS_ADMIN_DETECTION: naming | flag | naming_or_flag (default: naming)
    - ACCESS_ENFORCEMENT: off | warn | enforce (default: enforce)
    - ACCESS_MAX_FETCH_ATTEMPTS: positive integer (default: 3)
    - ACCESS_LOG_ISSUES: true/false (default: true)

    Returns:
        HubConfig instance with values from environment or defaults.
    """
    import os

    access = AccessConfig(
        admin_detection=os.getenv("ACCESS_ADMIN_DETECTION", "naming").strip().lower(),
        enforcement=os.getenv("ACCESS_ENFORCEMENT", "enforce").strip().lower(),
        max_fetch_attempts=int(os.getenv("ACCESS_MAX_FETCH_ATTEMPTS", "3")),
        log_resolution_issues=os.getenv("ACCESS_LOG_ISSUES", "true").lower() in _TRUTHY,
    )

    return HubConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        service_version=os.getenv("SERVICE_VERSION"),
        access=access,
    )


__all__ = [
    "AccessConfig",
    "AdminDetection",
    "EnforcementMode",
    "HubConfig",
    "LogLevel",
    "load_config_from_env",
]
