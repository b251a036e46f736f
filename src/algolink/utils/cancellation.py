"""Cancellation tokens for in-flight wallet operations.

A token is tied to one wallet session. Disconnecting the session cancels
the token, and every async chain checks it at its suspension points.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelledError(Exception):
    """Raised when a token fires while an operation is suspended."""

    pass


class CancellationToken:
    """One-shot cancellation signal.

    Example:
        token = CancellationToken()
        signed = await token.run(session.sign_transaction(groups))
    """

    def __init__(self, name: str = "session"):
        self.name = name
        self.reason: Optional[str] = None
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Operation cancelled") -> None:
        """Fire the token. Later calls keep the first reason."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        logger.debug(f"Cancellation token {self.name} fired: {reason}")

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self.reason or "Operation cancelled")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        The awaitable is cancelled when the token wins.

        Raises:
            OperationCancelledError: If the token fired first
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        raise OperationCancelledError(self.reason or "Operation cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(name={self.name}, cancelled={self.cancelled})"
