"""Permission catalog, resolution, and access decisions for the content hub.

Defines:
- Permissions: all permission key constants (resource.action format)
- default_preset() / administrator_preset(): the two named presets
- PermissionMap: immutable total permission map
- parse_overrides(): tagged per-key overrides from raw partial maps
- resolve_permissions(): (identity, group, tenant) → Resolution
- has(), has_any(), has_all(), can_access(), ...: pure decision queries
"""

from .access import (
    can_access,
    can_access_tenant,
    can_act_on_owned,
    can_delete_own_content,
    can_edit_own_content,
    can_manage_content,
    can_manage_registration_codes,
    can_manage_users,
    can_view_analytics,
    has,
    has_all,
    has_any,
    is_admin,
    is_moderator,
)
from .constants import (
    ADMIN_GROUP_MARKER,
    ADMIN_TENANT_PREFIX,
    CATALOG,
    NOT_A_PERMISSION,
    PERMISSION_KEYS,
    Permissions,
    is_valid_key,
)
from .models import GroupRecord, IdentityRecord, TenantRecord
from .overrides import (
    ABSENT,
    IssueKind,
    Override,
    OverrideSet,
    ResolutionIssue,
    parse_overrides,
)
from .presets import (
    CAPABILITY_BUNDLES,
    PUBLIC_READ,
    PermissionMap,
    administrator_preset,
    default_preset,
)
from .resolver import Resolution, is_administrator, resolve_permissions

__all__ = [
    "ABSENT",
    "ADMIN_GROUP_MARKER",
    "ADMIN_TENANT_PREFIX",
    "CAPABILITY_BUNDLES",
    "CATALOG",
    "GroupRecord",
    "IdentityRecord",
    "IssueKind",
    "NOT_A_PERMISSION",
    "Override",
    "OverrideSet",
    "PERMISSION_KEYS",
    "PUBLIC_READ",
    "PermissionMap",
    "Permissions",
    "Resolution",
    "ResolutionIssue",
    "TenantRecord",
    "administrator_preset",
    "can_access",
    "can_access_tenant",
    "can_act_on_owned",
    "can_delete_own_content",
    "can_edit_own_content",
    "can_manage_content",
    "can_manage_registration_codes",
    "can_manage_users",
    "can_view_analytics",
    "default_preset",
    "has",
    "has_all",
    "has_any",
    "is_admin",
    "is_administrator",
    "is_moderator",
    "is_valid_key",
    "parse_overrides",
    "resolve_permissions",
]
