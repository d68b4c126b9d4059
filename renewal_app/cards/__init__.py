"""Virtual card interface: shared types and the abstract card contract."""

from .interface import (
    CardConfig,
    CardId,
    CardMetadata,
    CardOperationError,
    CardStatus,
    CardType,
    TransactionRequest,
    TransactionResponse,
    VirtualCardContract,
    VirtualCardError,
)

__all__ = [
    "CardId",
    "CardStatus",
    "CardType",
    "CardMetadata",
    "CardConfig",
    "TransactionRequest",
    "TransactionResponse",
    "VirtualCardError",
    "CardOperationError",
    "VirtualCardContract",
]
