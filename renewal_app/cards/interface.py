"""
Virtual card interface.

Types and abstract operations that virtual card implementations must provide.
There is no behavior here: no settlement, balances or fund
storage. Implementations subclass VirtualCardContract and raise
CardOperationError with a VirtualCardError code when an operation is refused.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


class VirtualCardError(IntEnum):
    """Contract-level error codes for card operations."""
    CARD_NOT_FOUND = 1
    UNAUTHORIZED = 2
    CARD_INACTIVE = 3
    INVALID_CARD_STATE = 4
    LIMIT_EXCEEDED = 5
    INVALID_INPUT = 6
    EXPIRED = 7
    DUPLICATE_CARD = 8
    NOT_SUPPORTED = 9
    INTERNAL_ERROR = 10


class CardOperationError(Exception):
    """Raised by implementations to refuse an operation."""

    def __init__(self, code: VirtualCardError, message: Optional[str] = None):
        super().__init__(message or code.name.lower())
        self.code = code


@dataclass(frozen=True, order=True)
class CardId:
    """Unique identifier for a virtual card (unsigned 128-bit)."""
    value: int


class CardStatus(IntEnum):
    PENDING = 0
    ACTIVE = 1
    SUSPENDED = 2
    CLOSED = 3
    AWAITING_ACTIVATION = 4


class CardType(IntEnum):
    STANDARD = 0
    PREMIUM = 1
    RESTRICTED = 2
    CORPORATE = 3
    DISPOSABLE = 4
    CUSTOM = 5


class TransactionStatus(IntEnum):
    PENDING = 0
    APPROVED = 1
    DECLINED = 2
    FAILED = 3


@dataclass(frozen=True)
class CardMetadata:
    """Immutable card properties."""
    card_id: CardId
    holder: str
    card_type: CardType
    created_at: int                                  # Unix epoch seconds
    expires_at: int                                  # Unix epoch seconds
    reference: str                                   # e.g. last 4 digits
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CardConfig:
    """Mutable card configuration."""
    status: CardStatus
    max_transactions: int = 0                        # 0 = unlimited
    spending_limit: int = 0                          # base units, 0 = unlimited
    limit_window_seconds: int = 0                    # 0 = per-transaction
    is_blocked: bool = False
    custom_config: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionRequest:
    card_id: CardId
    amount: int
    currency: str
    merchant: str
    description: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionResponse:
    transaction_id: int
    card_id: CardId
    amount: int
    status: TransactionStatus
    timestamp: int
    metadata: dict[str, str] = field(default_factory=dict)


# Event payloads

@dataclass(frozen=True)
class CardCreatedEvent:
    card_id: CardId
    holder: str
    card_type: CardType
    timestamp: int


@dataclass(frozen=True)
class CardUpdatedEvent:
    card_id: CardId
    status: CardStatus
    timestamp: int


@dataclass(frozen=True)
class CardStatusChangedEvent:
    card_id: CardId
    old_status: CardStatus
    new_status: CardStatus
    reason: str
    timestamp: int


@dataclass(frozen=True)
class TransactionValidatedEvent:
    transaction_id: int
    card_id: CardId
    amount: int
    approved: bool
    reason: str
    timestamp: int


@dataclass(frozen=True)
class CardActivatedEvent:
    card_id: CardId
    holder: str
    timestamp: int


@dataclass(frozen=True)
class CardDeactivatedEvent:
    card_id: CardId
    reason: str
    timestamp: int


@dataclass(frozen=True)
class CustomEvent:
    card_id: CardId
    event_type: str
    timestamp: int
    data: dict[str, str] = field(default_factory=dict)


class EventName(str, Enum):
    """Topic names implementations publish the payloads above under."""
    CARD_CREATED = "card_created"
    CARD_UPDATED = "card_updated"
    CARD_STATUS_CHANGED = "card_status_changed"
    TRANSACTION_VALIDATED = "transaction_validated"
    CARD_ACTIVATED = "card_activated"
    CARD_DEACTIVATED = "card_deactivated"
    CUSTOM = "custom"


class VirtualCardContract(ABC):
    """
    Capability set every virtual card implementation must provide.

    Methods raise CardOperationError on refusal. The event each operation is
    expected to publish is noted on the method.
    """

    @abstractmethod
    def create_card(self, holder: str, card_type: CardType, expires_at: int,
                    reference: str, metadata: dict[str, str]) -> CardId:
        """Create a new card. Publishes CardCreatedEvent."""

    @abstractmethod
    def get_card_metadata(self, card_id: CardId) -> CardMetadata:
        """Return immutable card properties."""

    @abstractmethod
    def get_card_config(self, card_id: CardId) -> CardConfig:
        """Return the current card configuration."""

    @abstractmethod
    def update_card_config(self, card_id: CardId, config: CardConfig) -> None:
        """Replace card configuration. Publishes CardUpdatedEvent."""

    @abstractmethod
    def change_card_status(self, card_id: CardId, new_status: CardStatus, reason: str) -> None:
        """Publishes CardStatusChangedEvent."""

    @abstractmethod
    def activate_card(self, card_id: CardId) -> None:
        """Publishes CardActivatedEvent."""

    @abstractmethod
    def deactivate_card(self, card_id: CardId, reason: str) -> None:
        """Publishes CardDeactivatedEvent."""

    @abstractmethod
    def validate_transaction(self, request: TransactionRequest) -> TransactionResponse:
        """Validate against card constraints without settlement. Publishes TransactionValidatedEvent."""

    @abstractmethod
    def can_transact(self, card_id: CardId, amount: int) -> bool:
        """Whether the card is currently eligible for the amount."""

    @abstractmethod
    def lock_card(self, card_id: CardId, reason: str) -> None:
        """Temporarily lock. Publishes CardStatusChangedEvent."""

    @abstractmethod
    def unlock_card(self, card_id: CardId) -> None:
        """Publishes CardStatusChangedEvent."""

    @abstractmethod
    def verify_ownership(self, card_id: CardId, claimant: str) -> bool:
        """Whether claimant holds the card."""

    @abstractmethod
    def lookup_card_by_reference(self, reference: str) -> CardId:
        """Find a card by its human-readable reference."""

    @abstractmethod
    def emit_custom_event(self, event: CustomEvent) -> None:
        """Publish an implementation-defined event."""

    @abstractmethod
    def get_version(self) -> str:
        """Contract version, for upgrade compatibility."""

    @abstractmethod
    def get_capabilities(self) -> list[str]:
        """Supported feature names, for discovery."""
