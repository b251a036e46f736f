"""Wallet signing boundary.

- WalletSession: interface of the external wallet collaborator
- SigningGateway: session lifecycle, disconnect handling and signing
- SimulatedWalletSession: dry-run wallet for development and tests
"""

from algolink.signing.base import (
    SessionLostError,
    SignerRejectedError,
    SigningError,
    WalletSession,
)
from algolink.signing.gateway import SigningGateway
from algolink.signing.simulated import SimulatedWalletSession

__all__ = [
    "SessionLostError",
    "SignerRejectedError",
    "SigningError",
    "SigningGateway",
    "SimulatedWalletSession",
    "WalletSession",
]
