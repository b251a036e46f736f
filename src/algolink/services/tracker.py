"""Operation tracker.

Maps operation keys to lifecycle records:

    idle -> creating -> awaiting_signature -> pending -> confirmed | failed

Payment and swap each use a single slot; opt-ins get one slot per asset
ID. A key that is in flight ignores new invocations. Terminal records are
cleared after a display window unless a new invocation supersedes them
first.

The mapping is the only shared mutable state in the lifecycle engine.
Every mutation replaces one key's record against the live mapping, so a
completion for asset X can never clobber a concurrent update for asset Y.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from algolink.config import get_settings
from algolink.contracts.operations import (
    OperationRecord,
    OperationStatus,
    OptInStatus,
    TrackerKey,
)

logger = logging.getLogger(__name__)

TrackerListener = Callable[[TrackerKey, Optional[OperationRecord]], None]


@dataclass(frozen=True)
class OperationTicket:
    """Identity of one invocation of an operation key.

    Updates carrying a superseded ticket are ignored.
    """
    key: TrackerKey
    generation: int


class OperationTracker:
    """Per-key lifecycle state for payment, swap and opt-in operations."""

    def __init__(self, display_window: Optional[float] = None):
        if display_window is None:
            display_window = get_settings().status_display_window
        self.display_window = display_window
        self._records: dict[TrackerKey, OperationRecord] = {}
        self._timers: dict[TrackerKey, asyncio.TimerHandle] = {}
        # Never reset, so tickets from before reset_all() stay stale
        self._generations: dict[TrackerKey, int] = {}
        self._listeners: list[TrackerListener] = []

    # ======================
    # Queries
    # ======================

    def status(self, key: TrackerKey) -> OperationStatus:
        record = self._records.get(key)
        return record.status if record else OperationStatus.IDLE

    def record(self, key: TrackerKey) -> Optional[OperationRecord]:
        return self._records.get(key)

    def is_in_flight(self, key: TrackerKey) -> bool:
        return self.status(key).is_in_flight

    def snapshot(self) -> dict[TrackerKey, OperationRecord]:
        """Copy of all live records."""
        return dict(self._records)

    def opt_in_statuses(self) -> dict[int, OptInStatus]:
        """Restricted ``{asset_id: pending|success|failed}`` view."""
        return {
            key: OptInStatus.from_operation(record.status)
            for key, record in self._records.items()
            if isinstance(key, int)
        }

    def __contains__(self, key: TrackerKey) -> bool:
        return key in self._records

    # ======================
    # Mutations
    # ======================

    def begin(self, key: TrackerKey) -> Optional[OperationTicket]:
        """Start a new invocation for ``key``.

        Returns:
            Ticket for later updates, or None if ``key`` is already in flight
        """
        current = self._records.get(key)
        if current is not None and current.status.is_in_flight:
            logger.info(f"Ignoring new invocation for {key}: already {current.status.value}")
            return None

        self._cancel_timer(key)
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        self._store(
            OperationRecord(key=key, status=OperationStatus.CREATING, generation=generation)
        )
        return OperationTicket(key=key, generation=generation)

    def advance(
        self,
        ticket: OperationTicket,
        status: OperationStatus,
        error: Optional[str] = None,
        tx_id: Optional[str] = None,
    ) -> bool:
        """Move an invocation forward.

        Returns:
            False if the ticket is stale (superseded or reset)

        Raises:
            InvalidTransitionError: If the transition goes backwards
        """
        current = self._records.get(ticket.key)
        if current is None or current.generation != ticket.generation:
            logger.debug(f"Dropping stale update for {ticket.key}: {status.value}")
            return False

        if (
            status == OperationStatus.IDLE
            or current.status.is_terminal
            or status.rank < current.status.rank
        ):
            raise InvalidTransitionError(
                f"{ticket.key}: cannot move from {current.status.value} to {status.value}"
            )

        self._store(
            current.model_copy(
                update={
                    "status": status,
                    "error": error if error is not None else current.error,
                    "tx_id": tx_id if tx_id is not None else current.tx_id,
                }
            )
        )

        if status.is_terminal:
            self._schedule_reset(ticket)
        return True

    def fail(
        self,
        ticket: OperationTicket,
        error: str,
        tx_id: Optional[str] = None,
    ) -> bool:
        return self.advance(ticket, OperationStatus.FAILED, error=error, tx_id=tx_id)

    def reset_all(self) -> None:
        """Drop every record (wallet disconnected or network switched)."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

        keys = list(self._records)
        self._records.clear()
        for key in keys:
            self._notify(key, None)
        if keys:
            logger.info(f"Reset {len(keys)} tracked operation(s)")

    def subscribe(self, listener: TrackerListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ======================
    # Internals
    # ======================

    def _store(self, record: OperationRecord) -> None:
        self._records[record.key] = record
        self._notify(record.key, record)

    def _notify(self, key: TrackerKey, record: Optional[OperationRecord]) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, record)
            except Exception as e:
                logger.error(f"Tracker listener failed for {key}: {e}")

    def _schedule_reset(self, ticket: OperationTicket) -> None:
        self._cancel_timer(ticket.key)
        loop = asyncio.get_running_loop()
        self._timers[ticket.key] = loop.call_later(self.display_window, self._expire, ticket)

    def _cancel_timer(self, key: TrackerKey) -> None:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()

    def _expire(self, ticket: OperationTicket) -> None:
        self._timers.pop(ticket.key, None)
        current = self._records.get(ticket.key)
        if current is None or current.generation != ticket.generation:
            return
        del self._records[ticket.key]
        self._notify(ticket.key, None)


class InvalidTransitionError(Exception):
    """Raised when an operation would move backwards in its lifecycle."""
    pass
