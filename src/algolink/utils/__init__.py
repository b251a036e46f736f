"""Utility modules for algolink."""

from algolink.utils.cancellation import CancellationToken, OperationCancelledError

__all__ = ["CancellationToken", "OperationCancelledError"]
