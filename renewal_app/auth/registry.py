"""
Agent authorization registry.

Admin-gated allow-list: only the stored admin may register or revoke agents,
anyone may query membership. Administrative calls report problems through a
typed RegistryResult instead of raising, so callers can branch on them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..delivery.base import EventSink, RenewalEvent
from ..errors import UnauthorizedCallerError
from ..logging.config import get_logger

logger = get_logger(__name__)


class RegistryStatus(Enum):
    """Outcome of an administrative registry call."""
    OK = "ok"
    ALREADY_INITIALIZED = "already_initialized"
    NOT_INITIALIZED = "not_initialized"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class RegistryResult:
    """Result of an administrative registry call."""
    status: RegistryStatus
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is RegistryStatus.OK


class AgentRegistry:
    """Allow-list of agents permitted to act on subscriptions."""

    def __init__(self, sink: Optional[EventSink] = None):
        self.sink = sink
        self._admin: Optional[str] = None
        self._agents: set[str] = set()

    @property
    def admin(self) -> Optional[str]:
        return self._admin

    def init(self, admin: str) -> RegistryResult:
        """Store the admin principal. Only allowed once."""
        if self._admin is not None:
            return RegistryResult(RegistryStatus.ALREADY_INITIALIZED, "Registry already has an admin")
        self._admin = admin
        logger.info("Agent registry initialized", admin=admin)
        return RegistryResult(RegistryStatus.OK)

    def register(self, caller: str, agent: str) -> RegistryResult:
        """Add an agent to the allow-list. Admin only."""
        denied = self._check_admin(caller)
        if denied:
            return denied

        self._agents.add(agent)
        self._publish("reg", agent)
        logger.info("Agent registered", agent=agent)
        return RegistryResult(RegistryStatus.OK)

    def revoke(self, caller: str, agent: str) -> RegistryResult:
        """Remove an agent from the allow-list. Admin only."""
        denied = self._check_admin(caller)
        if denied:
            return denied

        self._agents.discard(agent)
        self._publish("rev", agent)
        logger.info("Agent revoked", agent=agent)
        return RegistryResult(RegistryStatus.OK)

    def is_authorized(self, principal: Optional[str]) -> bool:
        return principal is not None and principal in self._agents

    def require_authorized(self, principal: Optional[str]) -> None:
        """Abort the invocation unless the principal is registered."""
        if not self.is_authorized(principal):
            raise UnauthorizedCallerError(caller=principal)

    def _check_admin(self, caller: str) -> Optional[RegistryResult]:
        if self._admin is None:
            return RegistryResult(RegistryStatus.NOT_INITIALIZED, "Registry has no admin")
        if caller != self._admin:
            logger.warning("Registry call rejected", caller=caller)
            return RegistryResult(RegistryStatus.UNAUTHORIZED, "Caller is not the registry admin")
        return None

    def _publish(self, action: str, agent: str) -> None:
        if self.sink is not None:
            self.sink.emit(RenewalEvent(
                topic="agent",
                subscription_id=None,
                payload={"action": action, "agent": agent}
            ))
