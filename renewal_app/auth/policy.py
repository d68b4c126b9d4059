"""
Authorization policy for state-mutating renewal calls.

The controller does not own the allow-list. It asks this policy whether the
caller may act on a record, and the policy either checks ownership, consults
the AgentRegistry, or (in open mode) allows everyone.
"""

from enum import Enum
from typing import Optional

from ..errors import UnauthorizedCallerError
from ..logging.config import get_gating_logger, log_gate_decision
from .registry import AgentRegistry

gating_logger = get_gating_logger(__name__)


class AuthorizationMode(str, Enum):
    """Who may call init_subscription and renew."""
    OPEN = "open"
    OWNER = "owner"
    AGENT = "agent"
    OWNER_OR_AGENT = "owner_or_agent"


class AuthorizationPolicy:
    """Pluggable caller check."""

    def __init__(self, mode: AuthorizationMode = AuthorizationMode.OPEN,
                 registry: Optional[AgentRegistry] = None):
        self.mode = AuthorizationMode(mode)
        if self.mode in (AuthorizationMode.AGENT, AuthorizationMode.OWNER_OR_AGENT) and registry is None:
            raise ValueError(f"Authorization mode '{self.mode.value}' requires an agent registry")
        self.registry = registry

    def check(self, caller: Optional[str], owner: str) -> bool:
        if self.mode is AuthorizationMode.OPEN:
            return True
        if caller is None:
            return False

        is_owner = caller == owner
        if self.mode is AuthorizationMode.OWNER:
            return is_owner
        if self.mode is AuthorizationMode.AGENT:
            return self.registry.is_authorized(caller)
        return is_owner or self.registry.is_authorized(caller)

    def require(self, caller: Optional[str], owner: str, subscription_id: int) -> None:
        """Raise UnauthorizedCallerError when check() refuses the caller."""
        if self.check(caller, owner):
            return

        log_gate_decision(
            gating_logger,
            gate_name="authorization",
            passed=False,
            subscription_id=subscription_id,
            reason=f"caller rejected in '{self.mode.value}' mode",
            context={"caller": caller}
        )
        raise UnauthorizedCallerError(
            f"Caller not authorized ({self.mode.value} mode)",
            caller=caller,
            subscription_id=subscription_id
        )
