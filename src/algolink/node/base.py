"""Base interface for the node RPC boundary.

The lifecycle engine needs only four things from a node: current network
parameters, raw submission, pending-transaction status and a way to wait
for the next round.
"""

import logging
from abc import ABC, abstractmethod

from algolink.contracts.transactions import SuggestedParams

logger = logging.getLogger(__name__)


class NodeClient(ABC):
    """Abstract base class for node clients.

    One instance talks to exactly one network endpoint.
    """

    def __init__(self, endpoint: str):
        self.endpoint = endpoint

    @abstractmethod
    async def get_suggested_params(self) -> SuggestedParams:
        """Fetch fresh network parameters."""
        pass

    @abstractmethod
    async def send_raw_transaction(self, raw: bytes) -> str:
        """Submit signed transaction bytes.

        Returns:
            Transaction ID assigned by the node

        Raises:
            NodeError: If the node rejects the submission
        """
        pass

    @abstractmethod
    async def pending_transaction_info(self, tx_id: str) -> dict:
        """Get pool/inclusion status of a submitted transaction.

        The returned dict carries ``confirmed-round`` once included and
        ``pool-error`` if the pool dropped the transaction.
        """
        pass

    @abstractmethod
    async def status(self) -> dict:
        """Get node status (``last-round`` among others)."""
        pass

    @abstractmethod
    async def status_after_block(self, round_number: int) -> dict:
        """Wait until a block after ``round_number`` is committed."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self.endpoint})"


class NodeError(Exception):
    """Exception raised when the node is unreachable or rejects a call."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
