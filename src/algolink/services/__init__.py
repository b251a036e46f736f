"""Transaction lifecycle services.

- TransactionBuilder: unsigned transactions and atomic groups
- AssetDirectoryClient: verified-asset catalog (read-only)
- SubmissionPipeline: raw submission and confirmation polling
- OperationTracker: per-operation lifecycle state
"""

from algolink.services.asset_directory import AssetDirectoryClient
from algolink.services.submission import (
    ConfirmationTimeoutError,
    SubmissionError,
    SubmissionPipeline,
    SubmissionRejectedError,
)
from algolink.services.tracker import InvalidTransitionError, OperationTicket, OperationTracker
from algolink.services.transaction_builder import TransactionBuilder, TransactionValidationError

__all__ = [
    "AssetDirectoryClient",
    "ConfirmationTimeoutError",
    "InvalidTransitionError",
    "OperationTicket",
    "OperationTracker",
    "SubmissionError",
    "SubmissionPipeline",
    "SubmissionRejectedError",
    "TransactionBuilder",
    "TransactionValidationError",
]
