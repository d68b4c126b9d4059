"""Caller authorization: the agent allow-list and the policy that consults it."""

from .policy import AuthorizationMode, AuthorizationPolicy
from .registry import AgentRegistry, RegistryResult, RegistryStatus

__all__ = [
    "AgentRegistry",
    "RegistryResult",
    "RegistryStatus",
    "AuthorizationMode",
    "AuthorizationPolicy",
]
