"""
Renewal controller.

Applies the renewal state machine to persisted records: one read, one full
write and the resulting notifications per call. Preconditions are checked
before anything is written or emitted.
"""

from typing import Callable, Optional

from ..auth.policy import AuthorizationPolicy
from ..delivery.base import EventSink, RenewalEvent
from ..errors import DuplicateSubscriptionError
from ..logging.config import get_logger
from ..persistence.subscription_store import SubscriptionStore
from .machine import check_preconditions, cooldown_status, evaluate_renewal, require_record
from .models import CooldownStatus, RenewalPolicy, SubscriptionRecord

logger = get_logger(__name__)


class RenewalController:
    """Entry points for creating, renewing and reading subscription records."""

    def __init__(
        self,
        store: SubscriptionStore,
        sink: EventSink,
        sequence: Callable[[], int],
        authorization: Optional[AuthorizationPolicy] = None,
        allow_overwrite: bool = False
    ):
        self.store = store
        self.sink = sink
        self.sequence = sequence
        self.authorization = authorization or AuthorizationPolicy()
        self.allow_overwrite = allow_overwrite

    def init_subscription(self, owner: str, subscription_id: int, caller: Optional[str] = None) -> None:
        """Create an Active record with no failures and no attempts."""
        self.authorization.require(caller, owner, subscription_id)

        if not self.allow_overwrite and self.store.exists(subscription_id):
            raise DuplicateSubscriptionError(subscription_id)

        self.store.set(subscription_id, SubscriptionRecord.create(owner))
        logger.info("Subscription initialized", subscription_id=subscription_id, owner=owner)

    def renew(
        self,
        subscription_id: int,
        max_retries: int,
        cooldown_units: int,
        succeeded: bool,
        caller: Optional[str] = None
    ) -> bool:
        """
        Attempt a renewal with the observed outcome.

        Args:
            subscription_id: Record to renew
            max_retries: Failures tolerated before the record is Failed
            cooldown_units: Sequence units required between a failure and the next attempt
            succeeded: Observed outcome of the renewal
            caller: Principal making the call, checked by the authorization policy

        Returns:
            True on success, False on a recorded failure

        Raises:
            SubscriptionNotFoundError, UnauthorizedCallerError,
            TerminalStateViolationError, CooldownActiveError
            ValueError: negative or non-integer policy values on an existing record
        """
        now = self.sequence()

        record = require_record(self.store.get(subscription_id), subscription_id)
        self.authorization.require(caller, record.owner, subscription_id)
        policy = RenewalPolicy(max_retries=max_retries, cooldown_units=cooldown_units)
        record = check_preconditions(record, policy, now, subscription_id)

        transition = evaluate_renewal(record, policy, now, succeeded, subscription_id)

        self.store.set(subscription_id, transition.record)
        for pending in transition.events:
            self.sink.emit(RenewalEvent(
                topic=pending.topic.value,
                subscription_id=subscription_id,
                payload=pending.payload,
                sequence=now
            ))

        return transition.succeeded

    def get_subscription(self, subscription_id: int) -> SubscriptionRecord:
        return require_record(self.store.get(subscription_id), subscription_id)

    def cooldown_status(self, subscription_id: int, cooldown_units: int) -> CooldownStatus:
        """Report whether a retry would currently be rejected by the cooldown gate."""
        record = require_record(self.store.get(subscription_id), subscription_id)
        return cooldown_status(record, cooldown_units, self.sequence())
