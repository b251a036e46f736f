"""Submission pipeline.

Two phases:
1. Raw submission - returns a transaction ID or fails on node rejection
2. Confirmation polling - bounded number of rounds

Nothing is retried here. A rejection for stale parameters means the
caller must rebuild, re-sign and resubmit from scratch.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from algolink.config import get_settings
from algolink.contracts.transactions import ConfirmationResult, SignedPayload
from algolink.node.base import NodeClient, NodeError
from algolink.node.factory import get_node_client
from algolink.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubmissionPipeline:
    """Submits signed payloads and waits for inclusion."""

    def __init__(
        self,
        node_factory: Callable[[str], NodeClient] = get_node_client,
        max_rounds: Optional[int] = None,
    ):
        self.node_factory = node_factory
        self.max_rounds = max_rounds or get_settings().confirmation_rounds

    async def submit(
        self,
        payload: SignedPayload,
        endpoint: str,
        token: Optional[CancellationToken] = None,
        on_submitted: Optional[Callable[[str], None]] = None,
    ) -> ConfirmationResult:
        """Submit a signed payload and wait for confirmation.

        Args:
            payload: Signed bytes from the wallet
            endpoint: Node endpoint for the selected network
            token: Abandons the confirmation wait when fired
            on_submitted: Called with the transaction ID once accepted

        Returns:
            ConfirmationResult with the confirmed round

        Raises:
            SubmissionRejectedError: Node or pool rejected the transaction
            SubmissionError: Node unreachable, submission outcome unknown
            ConfirmationTimeoutError: Not confirmed within the round budget
            OperationCancelledError: Token fired while waiting
        """
        client = self.node_factory(endpoint)

        tx_id = await self.send(client, payload, token)
        if on_submitted:
            on_submitted(tx_id)

        return await self.wait_for_confirmation(client, tx_id, token)

    async def send(
        self,
        client: NodeClient,
        payload: SignedPayload,
        token: Optional[CancellationToken] = None,
    ) -> str:
        """Phase 1: raw submission."""
        if token is not None:
            token.raise_if_cancelled()

        try:
            tx_id = await client.send_raw_transaction(payload.raw())
        except NodeError as e:
            if not e.status_code:
                # The node may have accepted the payload before the transport failed.
                logger.warning(f"Submission outcome unknown: {e}")
                raise SubmissionError(f"Could not reach node, outcome unknown: {e}") from e
            logger.warning(f"Submission rejected: {e}")
            raise SubmissionRejectedError(f"Transaction rejected: {e}") from e

        logger.info(f"Submitted transaction {tx_id}")
        return tx_id

    async def wait_for_confirmation(
        self,
        client: NodeClient,
        tx_id: str,
        token: Optional[CancellationToken] = None,
    ) -> ConfirmationResult:
        """Phase 2: poll until confirmed or the round budget is spent."""

        async def call(awaitable: Awaitable[T]) -> T:
            if token is not None:
                return await token.run(awaitable)
            return await awaitable

        try:
            status = await call(client.status())
            start_round = int(status["last-round"]) + 1
            current_round = start_round

            while current_round < start_round + self.max_rounds:
                info = await call(client.pending_transaction_info(tx_id))

                confirmed_round = int(info.get("confirmed-round") or 0)
                if confirmed_round > 0:
                    logger.info(f"Transaction {tx_id} confirmed in round {confirmed_round}")
                    return ConfirmationResult(tx_id=tx_id, confirmed_round=confirmed_round)

                pool_error = info.get("pool-error") or ""
                if pool_error:
                    raise SubmissionRejectedError(
                        f"Transaction rejected by pool: {pool_error}", tx_id=tx_id
                    )

                await call(client.status_after_block(current_round))
                current_round += 1

        except NodeError as e:
            raise SubmissionError(
                f"Lost contact with node while confirming {tx_id}: {e}", tx_id=tx_id
            ) from e
        except (KeyError, TypeError, ValueError) as e:
            raise SubmissionError(
                f"Malformed node status while confirming {tx_id}: {e}", tx_id=tx_id
            ) from e

        raise ConfirmationTimeoutError(tx_id, self.max_rounds)


class SubmissionError(Exception):
    """Exception raised when submission or confirmation fails."""

    def __init__(self, message: str, tx_id: Optional[str] = None):
        super().__init__(message)
        self.tx_id = tx_id


class SubmissionRejectedError(SubmissionError):
    """Known rejection: the node or pool refused the transaction."""
    pass


class ConfirmationTimeoutError(SubmissionError):
    """Unknown outcome: not confirmed within the round budget.

    The transaction may still confirm later; check ``tx_id`` externally.
    """

    def __init__(self, tx_id: str, rounds: int):
        super().__init__(
            f"Transaction {tx_id} not confirmed after {rounds} rounds; "
            f"it may still confirm, check its status externally",
            tx_id=tx_id,
        )
        self.rounds = rounds
