"""Transaction builder for preparing unsigned transactions.

This service builds unsigned transactions for wallet-side signing.
NO signing or broadcasting happens here.

Every build fetches fresh network parameters; a swap's two legs share one
snapshot so they fall inside the same validity window.
"""

import logging
import re
from typing import Callable, Optional, Union

from algolink.config import get_settings
from algolink.contracts.transactions import (
    SuggestedParams,
    SwapParams,
    TransactionGroup,
    TransactionType,
    UnsignedTransaction,
)
from algolink.networks import Network, resolve_endpoint
from algolink.node.base import NodeClient
from algolink.node.factory import get_node_client
from algolink.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

# 58 base32 characters: 32-byte public key plus 4-byte checksum
ADDRESS_PATTERN = re.compile(r"^[A-Z2-7]{58}$")


def is_valid_address(address: Optional[str]) -> bool:
    """Validate Algorand address format."""
    return bool(address) and ADDRESS_PATTERN.match(address) is not None


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class TransactionBuilder:
    """Builds unsigned transactions and atomic groups.

    This service NEVER:
    - Accesses private keys
    - Signs transactions
    - Broadcasts transactions
    """

    def __init__(
        self,
        node_factory: Callable[[str], NodeClient] = get_node_client,
        donation_receiver: Optional[str] = None,
        donation_amount: Optional[int] = None,
    ):
        settings = get_settings()
        self.node_factory = node_factory
        self.donation_receiver = donation_receiver or settings.donation_receiver
        self.donation_amount = donation_amount or settings.donation_amount

    async def fetch_params(
        self,
        network: Union[Network, str],
        token: Optional[CancellationToken] = None,
    ) -> SuggestedParams:
        """Fetch fresh suggested params for a network."""
        client = self.node_factory(resolve_endpoint(network))
        if token is not None:
            return await token.run(client.get_suggested_params())
        return await client.get_suggested_params()

    async def build_payment(
        self,
        sender: str,
        network: Union[Network, str],
        token: Optional[CancellationToken] = None,
    ) -> UnsignedTransaction:
        """Build the donation payment (1 ALGO to the fixed receiver).

        Args:
            sender: Paying account
            network: Target network

        Returns:
            UnsignedTransaction for the wallet to sign
        """
        if not is_valid_address(sender):
            raise TransactionValidationError(f"Invalid sender address: {sender!r}")

        params = await self.fetch_params(network, token)

        return UnsignedTransaction(
            type=TransactionType.PAYMENT,
            sender=sender,
            receiver=self.donation_receiver,
            amount=self.donation_amount,
            params=params,
        )

    async def build_opt_in(
        self,
        owner: str,
        asset_id: int,
        network: Union[Network, str],
        token: Optional[CancellationToken] = None,
    ) -> UnsignedTransaction:
        """Build an asset opt-in: a zero-amount transfer to self.

        Args:
            owner: Account opting in
            asset_id: Asset to opt into
            network: Target network

        Returns:
            UnsignedTransaction for the wallet to sign
        """
        validate_opt_in(owner, asset_id)

        params = await self.fetch_params(network, token)

        return UnsignedTransaction(
            type=TransactionType.ASSET_TRANSFER,
            sender=owner,
            receiver=owner,
            amount=0,
            asset_id=asset_id,
            params=params,
        )

    async def build_atomic_swap(
        self,
        params: SwapParams,
        network: Union[Network, str],
        token: Optional[CancellationToken] = None,
    ) -> TransactionGroup:
        """Build a two-leg atomic swap group.

        Leg 1: sender -> receiver, amount_a of asset A
        Leg 2: receiver -> sender, amount_b of asset B

        Both legs use one params snapshot; the group ID covers exactly these
        two legs in this order.
        """
        validate_swap(params)

        suggested = await self.fetch_params(network, token)

        leg1 = UnsignedTransaction(
            type=TransactionType.ASSET_TRANSFER,
            sender=params.sender_address,
            receiver=params.receiver_address,
            amount=params.amount_a,
            asset_id=params.asset_id_a,
            params=suggested,
        )
        leg2 = UnsignedTransaction(
            type=TransactionType.ASSET_TRANSFER,
            sender=params.receiver_address,
            receiver=params.sender_address,
            amount=params.amount_b,
            asset_id=params.asset_id_b,
            params=suggested,
        )

        group = TransactionGroup.assemble([leg1, leg2])
        logger.debug(f"Built swap group {group.group_id}")
        return group


def validate_opt_in(owner: str, asset_id: int) -> None:
    """Reject malformed opt-in intents before any network call."""
    if not is_valid_address(owner):
        raise TransactionValidationError(f"Invalid account address: {owner!r}")
    if not _is_positive_int(asset_id):
        raise TransactionValidationError(f"Asset ID must be a positive integer, got {asset_id!r}")


def validate_swap(params: SwapParams) -> None:
    """Reject malformed swap intents before any network call."""
    if not _is_positive_int(params.asset_id_a) or not _is_positive_int(params.asset_id_b):
        raise TransactionValidationError("Both swap asset IDs must be positive integers")
    if not _is_positive_int(params.amount_a) or not _is_positive_int(params.amount_b):
        raise TransactionValidationError("Both swap amounts must be positive")
    if not is_valid_address(params.sender_address):
        raise TransactionValidationError(f"Invalid sender address: {params.sender_address!r}")
    if not is_valid_address(params.receiver_address):
        raise TransactionValidationError(
            f"Invalid counterparty address: {params.receiver_address!r}"
        )
    if params.sender_address == params.receiver_address:
        raise TransactionValidationError("Sender and counterparty must differ")


class TransactionValidationError(ValueError):
    """Raised when a transaction intent is malformed."""
    pass
