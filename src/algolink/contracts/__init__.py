"""Data contracts shared across the transaction lifecycle.

These Pydantic models are immutable once built; state changes produce
new instances.
"""

from algolink.contracts.assets import (
    AssetDirectoryResult,
    VerificationTier,
    VerifiedAsset,
)
from algolink.contracts.operations import (
    OperationKey,
    OperationRecord,
    OperationStatus,
    OptInStatus,
)
from algolink.contracts.transactions import (
    ConfirmationResult,
    SignedPayload,
    SuggestedParams,
    SwapParams,
    TransactionGroup,
    TransactionToSign,
    TransactionType,
    UnsignedTransaction,
    compute_group_id,
)

__all__ = [
    # Asset contracts
    "AssetDirectoryResult",
    "VerificationTier",
    "VerifiedAsset",
    # Operation contracts
    "OperationKey",
    "OperationRecord",
    "OperationStatus",
    "OptInStatus",
    # Transaction contracts
    "ConfirmationResult",
    "SignedPayload",
    "SuggestedParams",
    "SwapParams",
    "TransactionGroup",
    "TransactionToSign",
    "TransactionType",
    "UnsignedTransaction",
    "compute_group_id",
]
