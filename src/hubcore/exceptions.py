"""Unified exception hierarchy for hubcore.

Resolution and the access-decision queries never raise: they degrade to the
least-privileged map. These exceptions belong to the boundary layer
(``require()``, the gRPC interceptor, context providers).

Usage:
    from hubcore.exceptions import (
        HubCoreError,
        PermissionDeniedError,
        grpc_error_handler,
    )
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "HubCoreError",
    "ConfigurationError",
    "SecurityError",
    "PermissionDeniedError",
    "AccessPendingError",
    "ContextUnavailableError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # gRPC helpers
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class HubCoreError(Exception):
    """Base exception for hubcore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(HubCoreError):
    """Invalid or missing configuration (including malformed guard requirements)."""

    code: str = "CONFIGURATION_ERROR"


class SecurityError(HubCoreError):
    """Authorization failure at a protected boundary."""

    code: str = "SECURITY_ERROR"


class PermissionDeniedError(SecurityError):
    """The guard denied access.

    ``required`` lists the permission keys that were evaluated.
    ``silent`` mirrors the requirement's mode: callers should not show
    the required keys to the user when it is set.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "You don't have permission to access this feature"

    def __init__(
        self,
        message: str | None = None,
        *,
        required: tuple[str, ...] = (),
        silent: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, required=required, silent=silent, **kwargs)
        self.required = required
        self.silent = silent


class AccessPendingError(SecurityError):
    """The access context is still loading; no decision can be made yet."""

    code: str = "ACCESS_PENDING"
    message: str = "Access context is still loading"


class ContextUnavailableError(HubCoreError):
    """The identity provider could not supply identity, group or tenant data."""

    code: str = "CONTEXT_UNAVAILABLE"
    message: str = "Access context is unavailable"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[HubCoreError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[HubCoreError]] = {}

    def register(self, code: str, error_cls: type[HubCoreError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[HubCoreError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[HubCoreError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("QUOTA_EXCEEDED")
        class QuotaExceededError(HubCoreError):
            code = "QUOTA_EXCEEDED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", HubCoreError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("SECURITY_ERROR", SecurityError)
error_registry.register("PERMISSION_DENIED", PermissionDeniedError)
error_registry.register("ACCESS_PENDING", AccessPendingError)
error_registry.register("CONTEXT_UNAVAILABLE", ContextUnavailableError)


# ---- gRPC Error Handling Utilities ------------------------------------------


def get_grpc_status_code(error: HubCoreError) -> Any:
    """Map HubCoreError to gRPC status code.

    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "SECURITY_ERROR": grpc.StatusCode.PERMISSION_DENIED,
        "ACCESS_PENDING": grpc.StatusCode.UNAVAILABLE,
        "CONTEXT_UNAVAILABLE": grpc.StatusCode.UNAVAILABLE,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def grpc_error_handler(method):
    """Decorator for unary gRPC service methods with proper error handling.

    Catches HubCoreError and sets appropriate gRPC status codes.
    A silent ``PermissionDeniedError`` is reported without its required keys.

    Usage:
        @grpc_error_handler
        async def PublishArticle(self, request, context):
            require(GuardRequirement(permission=Permissions.ARTICLES_PUBLISH), access)
            ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except HubCoreError as e:
            status_code = get_grpc_status_code(e)
            error_message = f"[{e.code}] {e.message}"

            logger.error(
                "%s failed: %s",
                method.__name__,
                error_message,
                extra={
                    "error_code": e.code,
                    "error_details": e.details,
                },
            )

            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(status_code, error_message)
            return

        except Exception as e:
            import grpc

            logger.exception("%s unexpected error: %s", method.__name__, e)
            await context.abort(
                grpc.StatusCode.INTERNAL,
                f"Unexpected {type(e)}: {e}",
            )
            return

    return wrapper
