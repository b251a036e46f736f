"""Base interfaces for the wallet signing boundary.

Signing flow:
1. Build unsigned transaction(s)
2. Hand them to the wallet session with the required signer addresses
3. The user approves (or rejects) out of band, with no latency bound
4. The wallet returns signed bytes, never keys
5. Signed bytes are submitted to the node

The wallet-connect handshake itself lives in the external wallet
collaborator; this package only sees the session interface below.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from algolink.contracts.transactions import TransactionToSign

logger = logging.getLogger(__name__)

DisconnectListener = Callable[[], None]


class WalletSession(ABC):
    """Abstract base class for wallet sessions.

    Implementations NEVER expose private keys. Disconnect listeners are
    managed here; implementations call ``_emit_disconnect()`` when the
    wallet side drops the session.
    """

    def __init__(self):
        self._disconnect_listeners: list[DisconnectListener] = []

    @abstractmethod
    async def connect(self) -> list[str]:
        """Open a new session.

        Returns:
            Account addresses shared by the wallet
        """
        pass

    @abstractmethod
    async def reconnect_session(self) -> list[str]:
        """Restore a previously persisted session.

        Returns:
            Account addresses, empty if there is no session to restore
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the session."""
        pass

    @abstractmethod
    async def sign_transaction(self, groups: list[list[TransactionToSign]]) -> list[bytes]:
        """Ask the user to sign transaction groups.

        May suspend indefinitely while the user decides.

        Args:
            groups: Transaction groups, each a list of transactions with signers

        Returns:
            Signed transactions, flattened in group order

        Raises:
            SignerRejectedError: If the user or wallet declines
        """
        pass

    def on_disconnect(self, listener: DisconnectListener) -> None:
        """Subscribe to session disconnect events."""
        if listener not in self._disconnect_listeners:
            self._disconnect_listeners.append(listener)

    def off_disconnect(self, listener: DisconnectListener) -> None:
        """Unsubscribe from session disconnect events."""
        if listener in self._disconnect_listeners:
            self._disconnect_listeners.remove(listener)

    def _emit_disconnect(self) -> None:
        for listener in list(self._disconnect_listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Disconnect listener failed: {e}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass


class SignerRejectedError(SigningError):
    """Exception raised when the user or wallet declines to sign."""
    pass


class SessionLostError(SigningError):
    """Exception raised when the session drops while a signature is pending."""
    pass
