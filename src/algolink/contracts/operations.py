"""Operation lifecycle contracts consumed by the presentation layer."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class OperationStatus(str, Enum):
    """Lifecycle status of a tracked operation, in transition order."""
    IDLE = "idle"
    CREATING = "creating"
    AWAITING_SIGNATURE = "awaiting_signature"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    # The swap flow reports success as "completed"
    COMPLETED = "confirmed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER[self]

    @property
    def is_terminal(self) -> bool:
        return self in (OperationStatus.CONFIRMED, OperationStatus.FAILED)

    @property
    def is_in_flight(self) -> bool:
        return not self.is_terminal and self != OperationStatus.IDLE


_STATUS_ORDER = {
    OperationStatus.IDLE: 0,
    OperationStatus.CREATING: 1,
    OperationStatus.AWAITING_SIGNATURE: 2,
    OperationStatus.PENDING: 3,
    OperationStatus.CONFIRMED: 4,
    OperationStatus.FAILED: 4,
}


class OptInStatus(str, Enum):
    """Restricted status view for asset opt-ins."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    @classmethod
    def from_operation(cls, status: OperationStatus) -> "OptInStatus":
        if status == OperationStatus.CONFIRMED:
            return cls.SUCCESS
        if status == OperationStatus.FAILED:
            return cls.FAILED
        return cls.PENDING


class OperationKey(str, Enum):
    """Single-slot operations. Opt-ins are keyed by asset ID instead."""
    PAYMENT = "payment"
    SWAP = "swap"


TrackerKey = Union[OperationKey, int]


class OperationRecord(BaseModel):
    """Tracked state of one operation.

    Records are replaced, never mutated, on every transition.
    """

    model_config = ConfigDict(frozen=True)

    key: TrackerKey = Field(..., description="Operation slot or opt-in asset ID")
    status: OperationStatus = Field(default=OperationStatus.IDLE)
    error: Optional[str] = Field(None, description="Human-readable failure message")
    tx_id: Optional[str] = Field(None, description="Transaction ID once submitted")
    generation: int = Field(default=0, description="Invocation counter for the key")
