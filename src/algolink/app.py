"""Wallet application facade.

Ties the lifecycle engine together: account/session state, network
selection, the verified-asset read path and the three user operations
(donation, opt-in, atomic swap).

Every operation runs as one async chain:

    build -> sign -> submit -> confirm

and always ends in a tracked terminal state. Nothing is retried; a retry
is a new invocation.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from algolink.config import Settings, get_settings
from algolink.contracts.assets import VerifiedAsset
from algolink.contracts.operations import OperationKey, OperationStatus, TrackerKey
from algolink.contracts.transactions import (
    ConfirmationResult,
    SwapParams,
    TransactionGroup,
    UnsignedTransaction,
)
from algolink.networks import Network, resolve_endpoint
from algolink.node.factory import close_node_clients, get_node_client
from algolink.services.asset_directory import AssetDirectoryClient
from algolink.services.submission import SubmissionPipeline
from algolink.services.tracker import OperationTracker
from algolink.services.transaction_builder import (
    TransactionBuilder,
    validate_opt_in,
    validate_swap,
)
from algolink.signing.base import WalletSession
from algolink.signing.gateway import SigningGateway
from algolink.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

BuildStep = Callable[[CancellationToken], Awaitable[Union[UnsignedTransaction, TransactionGroup]]]

_FALLBACK_MESSAGES = {
    OperationKey.PAYMENT: "Transaction failed",
    OperationKey.SWAP: "Swap failed",
}


def configure_logging(debug: Optional[bool] = None) -> None:
    """Configure root logging for the host application.

    The level follows ``settings.debug`` unless ``debug`` is given.
    """
    if debug is None:
        debug = get_settings().debug
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def format_address(address: str) -> str:
    """Shorten an address for display."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


class WalletApp:
    """Wallet-linked application state and operations."""

    def __init__(
        self,
        session: WalletSession,
        network: Union[Network, str, None] = None,
        builder: Optional[TransactionBuilder] = None,
        pipeline: Optional[SubmissionPipeline] = None,
        tracker: Optional[OperationTracker] = None,
        directory: Optional[AssetDirectoryClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.network = Network.parse(network or self.settings.default_network)
        self.gateway = SigningGateway(session, on_session_lost=self._handle_disconnect)
        self.builder = builder or TransactionBuilder()
        self.pipeline = pipeline or SubmissionPipeline()
        self.tracker = tracker or OperationTracker()
        self.directory = directory or AssetDirectoryClient()

        self.accounts: list[str] = []
        self.account_address = ""
        self.needs_account_selection = False
        self.is_connecting = False

        self.verified_assets: list[VerifiedAsset] = []
        self.assets_loading = False
        self.assets_error = ""

    @property
    def is_connected(self) -> bool:
        return bool(self.account_address)

    # ======================
    # Session
    # ======================

    async def start(self) -> None:
        """Restore a persisted wallet session, if any."""
        accounts = await self.gateway.reconnect_session()
        if accounts:
            self.accounts = accounts
            self.account_address = accounts[0]
            logger.info(f"Restored session for {format_address(self.account_address)}")

    async def connect(self) -> list[str]:
        """Connect the wallet.

        A single account is selected automatically; several accounts set
        ``needs_account_selection``.
        """
        self.is_connecting = True
        try:
            accounts = await self.gateway.connect()
        except Exception as e:
            logger.error(f"Connection failed: {e}")
            return []
        finally:
            self.is_connecting = False

        self.accounts = accounts
        if len(accounts) > 1:
            self.needs_account_selection = True
        elif len(accounts) == 1:
            self.account_address = accounts[0]
        return accounts

    def select_account(self, account: str) -> None:
        if account not in self.accounts:
            raise ValueError(f"Account {account} is not part of this session")
        self.account_address = account
        self.needs_account_selection = False

    def switch_account(self) -> None:
        self.needs_account_selection = True

    async def disconnect(self) -> None:
        """Disconnect the wallet and reset all operation state."""
        await self.gateway.disconnect()
        self._handle_disconnect()

    async def set_network(self, network: Union[Network, str]) -> None:
        """Select a network. Changing it tears down the wallet session."""
        network = Network.parse(network)
        if network == self.network:
            return
        logger.info(f"Switching network {self.network.value} -> {network.value}")
        self.network = network
        await self.disconnect()

    def _handle_disconnect(self) -> None:
        self.account_address = ""
        self.accounts = []
        self.needs_account_selection = False
        self.tracker.reset_all()

    # ======================
    # Verified assets
    # ======================

    async def load_verified_assets(self) -> list[VerifiedAsset]:
        """Load opt-in candidates from the directory."""
        if not self.is_connected:
            return []

        self.assets_loading = True
        self.assets_error = ""
        try:
            result = await self.directory.fetch_result()
        finally:
            self.assets_loading = False

        if result.error:
            self.assets_error = "Failed to load verified assets"
        elif not result.assets:
            self.assets_error = "No verified assets found"
        else:
            self.verified_assets = result.assets
        return result.assets

    # ======================
    # Operations
    # ======================

    async def donate(self) -> Optional[ConfirmationResult]:
        """Send the fixed donation payment."""
        if not self.is_connected:
            logger.warning("Donation requested without a connected account")
            return None

        sender = self.account_address
        network = self.network

        async def build(token: CancellationToken) -> UnsignedTransaction:
            return await self.builder.build_payment(sender, network, token)

        return await self._run(OperationKey.PAYMENT, build, [sender])

    async def opt_in(self, asset_id: int) -> Optional[ConfirmationResult]:
        """Opt the connected account into an asset.

        Raises:
            TransactionValidationError: If ``asset_id`` is not a positive integer
        """
        if not self.is_connected:
            logger.warning("Opt-in requested without a connected account")
            return None

        owner = self.account_address
        network = self.network
        validate_opt_in(owner, asset_id)

        async def build(token: CancellationToken) -> UnsignedTransaction:
            return await self.builder.build_opt_in(owner, asset_id, network, token)

        return await self._run(asset_id, build, [owner])

    async def swap(self, params: SwapParams) -> Optional[ConfirmationResult]:
        """Run a two-party atomic swap from the connected account.

        Both parties must be able to sign through the linked wallet.

        Raises:
            TransactionValidationError: If the swap params are incomplete
        """
        if not self.is_connected:
            logger.warning("Swap requested without a connected account")
            return None

        params = params.model_copy(update={"sender_address": self.account_address})
        network = self.network
        validate_swap(params)

        async def build(token: CancellationToken) -> TransactionGroup:
            return await self.builder.build_atomic_swap(params, network, token)

        signers = [params.sender_address, params.receiver_address]
        return await self._run(OperationKey.SWAP, build, signers)

    async def _run(
        self,
        key: TrackerKey,
        build: BuildStep,
        signers: list[str],
    ) -> Optional[ConfirmationResult]:
        ticket = self.tracker.begin(key)
        if ticket is None:
            return None

        token = self.gateway.token
        endpoint = resolve_endpoint(self.network)

        def record_tx_id(tx_id: str) -> None:
            self.tracker.advance(ticket, OperationStatus.PENDING, tx_id=tx_id)

        try:
            txns = await build(token)
            self.tracker.advance(ticket, OperationStatus.AWAITING_SIGNATURE)

            payload = await self.gateway.sign(txns, signers)
            self.tracker.advance(ticket, OperationStatus.PENDING)

            result = await self.pipeline.submit(
                payload, endpoint, token=token, on_submitted=record_tx_id
            )
        except asyncio.CancelledError:
            logger.warning(f"Operation {key} cancelled by caller")
            self.tracker.fail(ticket, "Operation cancelled")
            raise
        except Exception as e:
            message = str(e) or _FALLBACK_MESSAGES.get(key, "Opt-in failed")
            logger.error(f"Operation {key} failed: {message}")
            self.tracker.fail(ticket, message, tx_id=getattr(e, "tx_id", None))
            return None

        self.tracker.advance(ticket, OperationStatus.CONFIRMED, tx_id=result.tx_id)
        return result

    async def close(self) -> None:
        """Release the disconnect subscription and HTTP resources."""
        self.gateway.close()
        await self.directory.close()
        if get_node_client in (self.builder.node_factory, self.pipeline.node_factory):
            await close_node_clients()
