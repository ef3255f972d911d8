from .config import (
    AccessConfig,
    AdminDetection,
    EnforcementMode,
    HubConfig,
    LogLevel,
    load_config_from_env,
)
from .exceptions import (
    AccessPendingError,
    ConfigurationError,
    ContextUnavailableError,
    HubCoreError,
    PermissionDeniedError,
    SecurityError,
)
from .interfaces import AccessContextProvider, ContextSnapshot, load_access_context
from .logging import (
    AccessLogFormatter,
    AccessLoggerAdapter,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .permissions import (
    CAPABILITY_BUNDLES,
    CATALOG,
    NOT_A_PERMISSION,
    PERMISSION_KEYS,
    GroupRecord,
    IdentityRecord,
    PermissionMap,
    Permissions,
    Resolution,
    ResolutionIssue,
    TenantRecord,
    administrator_preset,
    can_access,
    can_access_tenant,
    can_act_on_owned,
    default_preset,
    has,
    has_all,
    has_any,
    is_administrator,
    is_valid_key,
    resolve_permissions,
)
from .security import (
    AccessContext,
    GuardOutcome,
    GuardRequirement,
    GuardResult,
    PermissionGate,
    evaluate_guard,
    require,
)

__all__ = [
    'AccessConfig',
    'AdminDetection',
    'EnforcementMode',
    'HubConfig',
    'LogLevel',
    'load_config_from_env',
    'AccessPendingError',
    'ConfigurationError',
    'ContextUnavailableError',
    'HubCoreError',
    'PermissionDeniedError',
    'SecurityError',
    'AccessContextProvider',
    'ContextSnapshot',
    'load_access_context',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'get_access_logger',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'CAPABILITY_BUNDLES',
    'CATALOG',
    'NOT_A_PERMISSION',
    'PERMISSION_KEYS',
    'GroupRecord',
    'IdentityRecord',
    'PermissionMap',
    'Permissions',
    'Resolution',
    'ResolutionIssue',
    'TenantRecord',
    'administrator_preset',
    'can_access',
    'can_access_tenant',
    'can_act_on_owned',
    'default_preset',
    'has',
    'has_all',
    'has_any',
    'is_administrator',
    'is_valid_key',
    'resolve_permissions',
    'AccessContext',
    'GuardOutcome',
    'GuardRequirement',
    'GuardResult',
    'PermissionGate',
    'evaluate_guard',
    'require',
]
