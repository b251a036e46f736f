"""Transaction contracts.

Unsigned transactions are built here and handed to the wallet for signing.
NO signing happens in this package - the wallet session owns the keys.

Transaction and group identifiers are derived from a canonical encoding
of the transaction fields, so the same logical transaction always yields
the same identifier.
"""

import base64
import hashlib
import json
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Ledger limit on atomic group size
MAX_GROUP_SIZE = 16

# Domain separation prefixes for hashing
TX_PREFIX = b"TX"
GROUP_PREFIX = b"TG"


class TransactionType(str, Enum):
    """Ledger transaction type."""
    PAYMENT = "pay"
    ASSET_TRANSFER = "axfer"


class SuggestedParams(BaseModel):
    """Short-lived network parameters needed to build a valid transaction.

    Fetched fresh for every build; the validity window expires after
    ``last_valid`` so these must never be cached across builds.
    """

    model_config = ConfigDict(frozen=True)

    fee: int = Field(..., description="Fee per byte in microalgos")
    min_fee: int = Field(default=1000, description="Minimum transaction fee")
    first_valid: int = Field(..., description="First round the transaction is valid")
    last_valid: int = Field(..., description="Last round the transaction is valid")
    genesis_id: str = Field(..., description="Genesis ID (e.g. testnet-v1.0)")
    genesis_hash: str = Field(..., description="Base64 genesis hash")
    flat_fee: bool = Field(default=False, description="Whether fee is a flat amount")

    @classmethod
    def from_node(cls, data: dict, validity_rounds: int = 1000) -> "SuggestedParams":
        """Create from an algod ``/v2/transactions/params`` response."""
        last_round = int(data["last-round"])
        return cls(
            fee=int(data.get("fee", 0)),
            min_fee=int(data.get("min-fee", 1000)),
            first_valid=last_round,
            last_valid=last_round + validity_rounds,
            genesis_id=data["genesis-id"],
            genesis_hash=data["genesis-hash"],
        )


class UnsignedTransaction(BaseModel):
    """One unsigned ledger operation. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    type: TransactionType = Field(..., description="pay or axfer")
    sender: str = Field(..., description="Sender address")
    receiver: str = Field(..., description="Receiver address")
    amount: int = Field(..., description="Amount in base units (microalgos or asset units)")
    asset_id: Optional[int] = Field(None, description="Asset ID for asset transfers")
    params: SuggestedParams = Field(..., description="Network parameters snapshot")
    group: Optional[str] = Field(None, description="Base64 group ID once grouped")

    def encode(self) -> bytes:
        """Canonical byte encoding used for identifiers and signing."""
        data = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(data, sort_keys=True, separators=(",", ":")).encode()

    def raw_txid(self) -> bytes:
        """32-byte transaction digest."""
        return hashlib.sha256(TX_PREFIX + self.encode()).digest()

    def txid(self) -> str:
        """Base32 transaction ID (no padding)."""
        return base64.b32encode(self.raw_txid()).decode().rstrip("=")

    def with_group(self, group_id: Optional[str]) -> "UnsignedTransaction":
        """Return a copy carrying the given group ID."""
        return self.model_copy(update={"group": group_id})

    @property
    def is_opt_in(self) -> bool:
        """Zero-amount asset transfer to self."""
        return (
            self.type == TransactionType.ASSET_TRANSFER
            and self.amount == 0
            and self.sender == self.receiver
        )


def compute_group_id(transactions: list[UnsignedTransaction]) -> str:
    """Compute the atomic group ID over an ordered transaction sequence.

    Any existing group field is ignored, so the result depends only on the
    member fields and their order.
    """
    digest = hashlib.sha256(GROUP_PREFIX)
    for txn in transactions:
        digest.update(txn.with_group(None).raw_txid())
    return base64.b64encode(digest.digest()).decode()


class TransactionGroup(BaseModel):
    """Ordered transactions sharing one atomic-commit identifier.

    Either every member settles or none does. Build with ``assemble()``;
    the group is frozen once the identifier is assigned.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., description="Base64 group ID")
    transactions: tuple[UnsignedTransaction, ...] = Field(..., description="Ordered members")

    @classmethod
    def assemble(cls, transactions: list[UnsignedTransaction]) -> "TransactionGroup":
        """Compute the group ID and stamp it on every member."""
        if not transactions:
            raise ValueError("A transaction group needs at least one transaction")
        if len(transactions) > MAX_GROUP_SIZE:
            raise ValueError(f"A transaction group holds at most {MAX_GROUP_SIZE} transactions")
        if any(txn.group is not None for txn in transactions):
            raise ValueError("Transaction already belongs to a group")

        group_id = compute_group_id(transactions)
        return cls(
            group_id=group_id,
            transactions=tuple(txn.with_group(group_id) for txn in transactions),
        )

    def verify(self) -> bool:
        """Check the ID still matches the members and their order."""
        if any(txn.group != self.group_id for txn in self.transactions):
            return False
        return compute_group_id(list(self.transactions)) == self.group_id

    def __len__(self) -> int:
        return len(self.transactions)


class TransactionToSign(BaseModel):
    """A transaction plus the addresses that must sign it."""

    txn: UnsignedTransaction
    signers: list[str] = Field(default_factory=list)


class SignedPayload(BaseModel):
    """Signed transaction bytes returned by the wallet.

    Correlated 1:1 with the group (or single transaction) it was built from.
    """

    model_config = ConfigDict(frozen=True)

    blobs: tuple[bytes, ...] = Field(..., description="Signed transactions in group order")
    group_id: Optional[str] = Field(None, description="Group ID for atomic groups")

    def raw(self) -> bytes:
        """Concatenated bytes ready for raw submission."""
        return b"".join(self.blobs)


class SwapParams(BaseModel):
    """Parameters of a two-party atomic asset swap.

    Fields are optional so partially filled forms can be held; the
    transaction builder rejects incomplete params.
    """

    asset_id_a: Optional[int] = Field(None, description="Asset sent by the sender")
    asset_id_b: Optional[int] = Field(None, description="Asset sent by the counterparty")
    amount_a: Optional[int] = Field(None, description="Amount of asset A")
    amount_b: Optional[int] = Field(None, description="Amount of asset B")
    sender_address: str = Field(default="", description="Initiating account")
    receiver_address: str = Field(default="", description="Counterparty account")


class ConfirmationResult(BaseModel):
    """Outcome of a confirmed submission."""

    tx_id: str = Field(..., description="Transaction ID returned at submission")
    confirmed_round: int = Field(..., description="Round the transaction was included in")
    pool_error: str = Field(default="", description="Pool error reported by the node")
