"""Simulated wallet session for development and testing.

Signs by prefixing the canonical transaction encoding; nothing here is a
real signature.
"""

import asyncio
import logging
from typing import Optional

from algolink.contracts.transactions import TransactionToSign
from algolink.signing.base import SessionLostError, SignerRejectedError, WalletSession

logger = logging.getLogger(__name__)

SIMULATED_SIGNATURE_PREFIX = b"SIMSIG:"


class SimulatedWalletSession(WalletSession):
    """Wallet session that approves (or rejects) every request."""

    def __init__(
        self,
        accounts: Optional[list[str]] = None,
        approve: bool = True,
        sign_delay: float = 0.0,
        persisted: bool = False,
    ):
        super().__init__()
        self.accounts = list(accounts or [])
        self.approve = approve
        self.sign_delay = sign_delay
        self.persisted = persisted
        self.connected = False
        self.sign_requests: list[list[list[TransactionToSign]]] = []

    async def connect(self) -> list[str]:
        self.connected = True
        self.persisted = True
        logger.info(f"[SIMULATED] Wallet connected: {len(self.accounts)} account(s)")
        return list(self.accounts)

    async def reconnect_session(self) -> list[str]:
        if not self.persisted:
            return []
        self.connected = True
        return list(self.accounts)

    async def disconnect(self) -> None:
        was_connected = self.connected
        self.connected = False
        self.persisted = False
        if was_connected:
            self._emit_disconnect()

    def simulate_disconnect(self) -> None:
        """Drop the session from the wallet side."""
        self.connected = False
        self._emit_disconnect()

    async def sign_transaction(self, groups: list[list[TransactionToSign]]) -> list[bytes]:
        if not self.connected:
            raise SessionLostError("Wallet session is not connected")

        self.sign_requests.append(groups)
        if self.sign_delay:
            await asyncio.sleep(self.sign_delay)

        if not self.approve:
            raise SignerRejectedError("User rejected the request")

        signed = []
        for group in groups:
            for item in group:
                unknown = [s for s in item.signers if s not in self.accounts]
                if unknown:
                    raise SignerRejectedError(f"Wallet does not hold signer {unknown[0]}")
                signed.append(SIMULATED_SIGNATURE_PREFIX + item.txn.encode())

        logger.info(f"[SIMULATED] Signed {len(signed)} transaction(s)")
        return signed
