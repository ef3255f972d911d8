"""Boundary layer: guards, the session gate, and gRPC enforcement.

This package turns resolved permissions into outcomes at protected
boundaries:
1. **Guard** - ``evaluate_guard()`` / ``require()`` over an ``AccessContext``
2. **Gate** - ``PermissionGate`` tracks context refreshes for one session
3. **gRPC interceptor** - ``GuardInterceptor`` applies requirements per RPC

Usage (in a handler)::

    from hubcore.security import GuardRequirement, require

    require(GuardRequirement(permission="content.edit", owner_id=item.owner_id), access)

Configuration (env vars)::

    ACCESS_ENFORCEMENT=enforce          # off | warn | enforce
    ACCESS_MAX_FETCH_ATTEMPTS=3         # before the gate denies
"""

from __future__ import annotations

from .gate import PermissionGate
from .guard import (
    ADMIN_GUARD,
    ANALYTICS_GUARD,
    CODE_MANAGER_GUARD,
    CONTENT_MANAGER_GUARD,
    DENIAL_MESSAGE,
    USER_MANAGER_GUARD,
    AccessContext,
    ContextStatus,
    GuardOutcome,
    GuardRequirement,
    GuardResult,
    evaluate_guard,
    require,
)
from .interceptors import (
    ContextLoader,
    GuardInterceptor,
    _extract_rpc_name,
    _should_skip,
)

__all__ = [
    # Guard
    "AccessContext",
    "ContextStatus",
    "DENIAL_MESSAGE",
    "GuardOutcome",
    "GuardRequirement",
    "GuardResult",
    "evaluate_guard",
    "require",
    # Preset requirements
    "ADMIN_GUARD",
    "ANALYTICS_GUARD",
    "CODE_MANAGER_GUARD",
    "CONTENT_MANAGER_GUARD",
    "USER_MANAGER_GUARD",
    # Gate
    "PermissionGate",
    # Interceptors
    "ContextLoader",
    "GuardInterceptor",
    "_extract_rpc_name",
    "_should_skip",
]
