"""Signing gateway.

Wraps a wallet session with the lifecycle the core needs: it owns the
disconnect subscription and the session's cancellation token, and turns a
group into exactly one opaque signing call.
"""

import logging
from typing import Callable, Optional, Union

from algolink.contracts.transactions import (
    SignedPayload,
    TransactionGroup,
    TransactionToSign,
    UnsignedTransaction,
)
from algolink.signing.base import (
    SessionLostError,
    SignerRejectedError,
    SigningError,
    WalletSession,
)
from algolink.utils.cancellation import CancellationToken, OperationCancelledError

logger = logging.getLogger(__name__)


class SigningGateway:
    """Single entry point for signing through an external wallet session."""

    def __init__(
        self,
        session: WalletSession,
        on_session_lost: Optional[Callable[[], None]] = None,
    ):
        self.session = session
        self._on_session_lost = on_session_lost
        self._token = CancellationToken("wallet-session")
        self._token.cancel("Wallet not connected")
        self._attached = False

    @property
    def token(self) -> CancellationToken:
        """Token for the current session; fired on disconnect."""
        return self._token

    @property
    def is_attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Subscribe to the session's disconnect event."""
        if not self._attached:
            self.session.on_disconnect(self._handle_disconnect)
            self._attached = True

    def close(self) -> None:
        """Release the disconnect subscription and invalidate the session token."""
        if self._attached:
            self.session.off_disconnect(self._handle_disconnect)
            self._attached = False
        self._token.cancel("Signing gateway closed")

    def _renew_token(self) -> None:
        self._token.cancel("Session replaced")
        self._token = CancellationToken("wallet-session")

    def _handle_disconnect(self) -> None:
        logger.info("Wallet session disconnected")
        self._token.cancel("Wallet session disconnected")
        if self._on_session_lost:
            self._on_session_lost()

    async def connect(self) -> list[str]:
        """Open a wallet session and return its accounts."""
        self.attach()
        accounts = await self.session.connect()
        self._renew_token()
        logger.info(f"Wallet connected with {len(accounts)} account(s)")
        return accounts

    async def reconnect_session(self) -> list[str]:
        """Restore a persisted session, if any."""
        self.attach()
        accounts = await self.session.reconnect_session()
        if accounts:
            self._renew_token()
            logger.info(f"Wallet session restored with {len(accounts)} account(s)")
        return accounts

    async def disconnect(self) -> None:
        """Close the session and invalidate pending signature requests."""
        self._token.cancel("Wallet session disconnected")
        await self.session.disconnect()

    async def sign(
        self,
        txns: Union[TransactionGroup, UnsignedTransaction],
        required_signers: list[str],
    ) -> SignedPayload:
        """Request signatures for one group (or single transaction).

        Args:
            txns: Group or single transaction to sign
            required_signers: Addresses whose signatures are required

        Returns:
            SignedPayload correlated with the group

        Raises:
            SignerRejectedError: If the wallet declines
            SessionLostError: If the session is gone or drops while waiting
        """
        if isinstance(txns, TransactionGroup):
            members = list(txns.transactions)
            group_id: Optional[str] = txns.group_id
        else:
            members = [txns]
            group_id = txns.group

        # Each member is signed by its own sender, which must be a required signer
        missing = [txn.sender for txn in members if txn.sender not in required_signers]
        if missing:
            raise SignerRejectedError(f"No required signer for transaction from {missing[0]}")

        to_sign = [TransactionToSign(txn=txn, signers=[txn.sender]) for txn in members]
        token = self._token

        try:
            blobs = await token.run(self.session.sign_transaction([to_sign]))
        except OperationCancelledError as e:
            raise SessionLostError(str(e)) from e
        except SigningError:
            raise
        except Exception as e:
            raise SignerRejectedError(f"Wallet failed to sign: {e}") from e

        if len(blobs) != len(members):
            raise SignerRejectedError(
                f"Wallet returned {len(blobs)} signed transaction(s) for {len(members)}"
            )

        return SignedPayload(blobs=tuple(blobs), group_id=group_id)
