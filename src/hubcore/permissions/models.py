"""Input records supplied by the identity provider.

These are Pydantic models. Extra columns from storage rows are ignored,
so a provider can pass rows through unchanged. Override maps are kept
raw here; the resolver validates them entry by entry.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class TenantRecord(BaseModel):
    """An organizational boundary ("entity")."""

    model_config = {"frozen": True, "extra": "ignore"}

    id: str
    code_prefix: str = ""
    name: str = ""
    is_administrative: Optional[bool] = Field(
        default=None,
        description="Explicit administrator flag; used by AdminDetection.FLAG modes",
    )


class GroupRecord(BaseModel):
    """A role bucket within a tenant."""

    model_config = {"frozen": True, "extra": "ignore"}

    id: str
    tenant_id: str
    display_name: str = ""
    overrides: Optional[Any] = Field(
        default=None,
        description="Partial permission map; only overridden keys present",
    )
    is_active: bool = True
    display_order: int = 0
    is_administrative: Optional[bool] = Field(
        default=None,
        description="Explicit administrator flag; used by AdminDetection.FLAG modes",
    )


class IdentityRecord(BaseModel):
    """The authenticated user's profile."""

    model_config = {"frozen": True, "extra": "ignore"}

    id: str
    tenant_id: Optional[str] = None
    group_id: Optional[str] = None
    personal_overrides: Optional[Any] = Field(
        default=None,
        description="Partial permission map taking precedence over the group",
    )


__all__ = [
    "GroupRecord",
    "IdentityRecord",
    "TenantRecord",
]
