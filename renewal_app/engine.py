"""
Main renewal engine coordinator.

Builds the record store, event sink, authorization policy and host from
configuration, and runs every controller entry point as one atomic host
invocation.
"""

from pathlib import Path
from typing import Any, Optional

import structlog

from .auth.policy import AuthorizationMode, AuthorizationPolicy
from .auth.registry import AgentRegistry
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .delivery.base import EventSink
from .delivery.file_sink import FileEventSink
from .delivery.memory_sink import MemoryEventSink
from .delivery.stdout_sink import StdoutEventSink
from .host.invocation import Invocation, InvocationHost
from .host.sequence import LedgerSequence
from .logging.config import configure_logging
from .persistence.subscription_store import (
    InMemorySubscriptionStore,
    SQLiteSubscriptionStore,
    SubscriptionStore,
)
from .state.controller import RenewalController
from .state.models import CooldownStatus, SubscriptionRecord

logger = structlog.get_logger(__name__)


def build_store(params: dict[str, Any]) -> SubscriptionStore:
    if params.get("backend", "memory") == "sqlite":
        return SQLiteSubscriptionStore(params["db_path"])
    return InMemorySubscriptionStore()


def build_sink(params: dict[str, Any]) -> EventSink:
    sink = params.get("sink", "memory")
    if sink == "stdout":
        return StdoutEventSink(format=params.get("format", "json"))
    if sink == "file":
        return FileEventSink(params["output_path"])
    return MemoryEventSink()


class RenewalEngine:
    """
    Host-facing coordinator for the subscription renewal controller.

    Every call runs inside InvocationHost.atomic(): an abort leaves the store
    and the sink exactly as they were.

    In agent modes the engine owns an AgentRegistry holding its own state.
    Registry calls are not host invocations, so their `agent` events go to the
    backing sink directly and are not buffered.
    """

    def __init__(
        self,
        config_dir: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        store: Optional[SubscriptionStore] = None,
        sink: Optional[EventSink] = None,
        sequence: Optional[LedgerSequence] = None,
        registry: Optional[AgentRegistry] = None,
        setup_logging: bool = False
    ) -> None:
        self.logger = logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.config = self.config_loader.merge_config(overrides)

        validation_errors = ConfigValidator.validate_config(self.config)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            self.logger.error("Configuration validation failed", errors=error_msgs)
            raise ValueError(f"Invalid renewal configuration: {'; '.join(error_msgs)}")

        if setup_logging:
            logging_params = self.config["logging"]
            configure_logging(
                level=logging_params["level"],
                format_json=logging_params["format_json"],
                include_timestamp=logging_params["include_timestamp"],
                include_caller=logging_params["include_caller"]
            )

        self.store = store if store is not None else build_store(self.config["store"])
        self.sink = sink if sink is not None else build_sink(self.config["events"])
        self.sequence = sequence or LedgerSequence()

        auth_params = self.config["authorization"]
        mode = AuthorizationMode(auth_params["mode"])
        self.registry = registry
        if self.registry is None and mode in (AuthorizationMode.AGENT, AuthorizationMode.OWNER_OR_AGENT):
            self.registry = AgentRegistry(sink=self.sink)
            self.registry.init(auth_params["admin"])
        self.authorization = AuthorizationPolicy(mode, self.registry)

        self.allow_overwrite = self.config["controller"]["allow_overwrite"]
        self.renewal_defaults = self.config["renewal"]
        self.host = InvocationHost(self.store, self.sink, self.sequence)

        self.logger.info(
            "Renewal engine initialized",
            store_backend=self.config["store"]["backend"],
            event_sink=self.config["events"]["sink"],
            authorization_mode=mode.value,
            allow_overwrite=self.allow_overwrite
        )

    def _controller(self, invocation: Invocation) -> RenewalController:
        sequence = invocation.sequence
        return RenewalController(
            store=invocation.store,
            sink=invocation.sink,
            sequence=lambda: sequence,
            authorization=self.authorization,
            allow_overwrite=self.allow_overwrite
        )

    def init_subscription(self, owner: str, subscription_id: int, caller: Optional[str] = None) -> None:
        with self.host.atomic(caller=caller) as invocation:
            self._controller(invocation).init_subscription(owner, subscription_id, caller=caller)

    def renew(
        self,
        subscription_id: int,
        succeeded: bool,
        max_retries: Optional[int] = None,
        cooldown_units: Optional[int] = None,
        caller: Optional[str] = None
    ) -> bool:
        """Renew with the caller's policy, falling back to configured defaults."""
        if max_retries is None:
            max_retries = self.renewal_defaults["max_retries"]
        if cooldown_units is None:
            cooldown_units = self.renewal_defaults["cooldown_units"]

        with self.host.atomic(caller=caller) as invocation:
            return self._controller(invocation).renew(
                subscription_id,
                max_retries=max_retries,
                cooldown_units=cooldown_units,
                succeeded=succeeded,
                caller=caller
            )

    def get_subscription(self, subscription_id: int) -> SubscriptionRecord:
        with self.host.atomic() as invocation:
            return self._controller(invocation).get_subscription(subscription_id)

    def cooldown_status(self, subscription_id: int, cooldown_units: Optional[int] = None) -> CooldownStatus:
        if cooldown_units is None:
            cooldown_units = self.renewal_defaults["cooldown_units"]
        with self.host.atomic() as invocation:
            return self._controller(invocation).cooldown_status(subscription_id, cooldown_units)

    def advance_sequence(self, units: int = 1) -> int:
        """Move the host sequence forward between invocations."""
        return self.sequence.advance(units)
