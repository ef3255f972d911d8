from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from .config import AccessConfig, HubConfig
from .exceptions import ContextUnavailableError
from .permissions.models import GroupRecord, IdentityRecord, TenantRecord
from .security.guard import AccessContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextSnapshot:
    """Identity, group and tenant as fetched together. ``identity=None`` is anonymous."""

    identity: Optional[IdentityRecord] = None
    group: Optional[GroupRecord] = None
    tenant: Optional[TenantRecord] = None


class AccessContextProvider(ABC):
    """Identity/session provider: sources the snapshot for a session key."""

    @abstractmethod
    async def fetch(self, session_key: str) -> ContextSnapshot:
        """Return the snapshot, or raise ContextUnavailableError on upstream failure."""
        raise NotImplementedError


async def load_access_context(
    provider: AccessContextProvider,
    session_key: str,
    *,
    config: HubConfig | AccessConfig | None = None,
) -> AccessContext:
    """Fetch and resolve in one step; any provider failure yields a FAILED context."""
    try:
        snapshot = await provider.fetch(session_key)
    except (ContextUnavailableError, ValidationError) as e:
        logger.warning("Access context unavailable: %s", e)
        return AccessContext.failed()
    except Exception as e:
        logger.warning("Access context provider failed: %s", e, exc_info=True)
        return AccessContext.failed()
    return AccessContext.ready(snapshot.identity, snapshot.group, snapshot.tenant, config=config)


__all__ = ["AccessContextProvider", "ContextSnapshot", "load_access_context"]
