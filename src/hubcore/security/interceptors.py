"""gRPC interceptor applying guard requirements per RPC.

Provides:
- ``GuardInterceptor`` - server interceptor mapping RPC names to requirements.
- ``_extract_rpc_name``, ``_should_skip`` - helper utilities.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import grpc

from ..config import EnforcementMode, HubConfig
from .guard import AccessContext, GuardOutcome, GuardRequirement, evaluate_guard

logger = logging.getLogger(__name__)

ContextLoader = Callable[[dict[str, str]], Awaitable[AccessContext]]

# Method prefixes that bypass permission checks
_SKIP_PREFIXES = (
    "grpc.health.v1",
    "grpc.reflection.v1",
)


# ── Helpers ──────────────────────────────────────────────────────


def _extract_rpc_name(full_method: str) -> str:
    """Extract RPC name from fully-qualified method string.

    ``/hub.ContentService/PublishArticle`` → ``PublishArticle``
    """
    return full_method.rsplit("/", 1)[-1] if "/" in full_method else full_method


def _should_skip(method: str) -> bool:
    """Check if this method should skip permission checks."""
    return any(prefix in method for prefix in _SKIP_PREFIXES)


def _aborting_handler(status: grpc.StatusCode, message: str) -> grpc.RpcMethodHandler:
    async def _denied(request, context):
        await context.abort(status, message)

    return grpc.unary_unary_rpc_method_handler(_denied)


# ── Interceptor ──────────────────────────────────────────────────


class GuardInterceptor(grpc.aio.ServerInterceptor):
    """gRPC server interceptor enforcing a ``GuardRequirement`` per RPC.

    Sits before all handlers and:
    1. Loads the caller's ``AccessContext`` from invocation metadata
       through ``context_loader`` (the identity provider lives outside hubcore)
    2. Maps the RPC name to its requirement via ``rpc_requirements``
    3. Evaluates the guard and aborts on anything but GRANTED:
       PENDING → ``UNAVAILABLE``, denial → ``PERMISSION_DENIED``

    Unmapped RPCs are denied (fail closed). A loader that raises is
    treated as a failed context.

    Args:
        rpc_requirements: Mapping of RPC name → requirement.
        context_loader: Async callable taking the metadata dict.
        service_name: Human-readable service name for log messages.
        enforcement: Off / warn / enforce. Defaults to ``config.access.enforcement``.
        config: HubConfig supplying the enforcement default.

    Usage::

        interceptor = GuardInterceptor(
            {"PublishArticle": GuardRequirement(permission=Permissions.ARTICLES_PUBLISH)},
            context_loader=load_from_session_header,
            service_name="Content",
        )
        server = grpc.aio.server(interceptors=[interceptor])
    """

    def __init__(
        self,
        rpc_requirements: dict[str, GuardRequirement],
        context_loader: ContextLoader,
        *,
        service_name: str = "Service",
        enforcement: EnforcementMode | None = None,
        config: HubConfig | None = None,
    ) -> None:
        self._rpc_map = rpc_requirements
        self._loader = context_loader
        self._service_name = service_name
        if enforcement is None:
            enforcement = (config or HubConfig()).access.enforcement
        self._mode = EnforcementMode(enforcement)

        if self._mode != EnforcementMode.OFF:
            logger.info(
                "%s guard interceptor mode: %s",
                self._service_name,
                self._mode.value,
            )

    @property
    def mode(self) -> EnforcementMode:
        return self._mode

    async def _load_context(self, metadata: dict[str, str]) -> AccessContext:
        try:
            return await self._loader(metadata)
        except Exception as e:
            logger.warning("%s context loader failed: %s", self._service_name, e)
            return AccessContext.failed()

    async def intercept_service(
        self,
        continuation: Any,
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        """Intercept incoming gRPC calls for guard evaluation."""
        method = handler_call_details.method or ""

        if _should_skip(method):
            return await continuation(handler_call_details)

        rpc_name = _extract_rpc_name(method)

        if self._mode == EnforcementMode.OFF:
            logger.debug("%s RPC %s | guard off", self._service_name, rpc_name)
            return await continuation(handler_call_details)

        metadata = dict(handler_call_details.invocation_metadata or [])
        requirement = self._rpc_map.get(rpc_name)

        if requirement is None:
            status = grpc.StatusCode.PERMISSION_DENIED
            deny_reason = "RPC not mapped to a guard requirement"
            deny_message = f"{self._service_name}: {rpc_name} denied"
        else:
            context = await self._load_context(metadata)
            result = evaluate_guard(requirement, context)

            logger.info(
                "%s RPC %s | caller=%s outcome=%s",
                self._service_name,
                rpc_name,
                context.identity_id or "anonymous",
                result.outcome.value,
            )

            if result.allowed:
                return await continuation(handler_call_details)

            deny_reason = result.reason
            if result.outcome is GuardOutcome.PENDING:
                status = grpc.StatusCode.UNAVAILABLE
                deny_message = f"{self._service_name}: {rpc_name} pending, access context is loading"
            elif result.outcome is GuardOutcome.DENIED_SILENT:
                status = grpc.StatusCode.PERMISSION_DENIED
                deny_message = f"{self._service_name}: {rpc_name} denied"
            else:
                status = grpc.StatusCode.PERMISSION_DENIED
                deny_message = f"{self._service_name}: {rpc_name} denied. {result.denial_message}"

        if self._mode == EnforcementMode.WARN:
            logger.warning(
                "%s WARN_DENIED '%s': %s (would block in enforce mode)",
                self._service_name,
                rpc_name,
                deny_reason,
            )
            return await continuation(handler_call_details)

        logger.warning("%s DENIED '%s': %s", self._service_name, rpc_name, deny_reason)
        return _aborting_handler(status, deny_message)


__all__ = [
    "ContextLoader",
    "GuardInterceptor",
    "_extract_rpc_name",
    "_should_skip",
]
