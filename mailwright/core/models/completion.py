"""One-shot delivery outcome shared between a message and its transport."""

import asyncio
import threading
from typing import List, Optional, Tuple

from mailwright.utils.errors import CompletionAlreadySettledError, NetworkTimeoutError
from mailwright.utils.logging import get_logger

logger = get_logger(__name__)


class CompletionSignal:
    """Pending -> settled(success | failure), settled exactly once.

    The transport calls ``set_sent`` or ``set_sent_error`` when it is done
    with the composed payload. Whoever created the message waits on it with
    ``wait`` from a thread, or ``await`` from an event loop.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._error: Optional[BaseException] = None
        self._waiters: List[Tuple[asyncio.AbstractEventLoop, asyncio.Future]] = []

    @property
    def is_settled(self) -> bool:
        return self._event.is_set()

    @property
    def succeeded(self) -> bool:
        """True once settled without an error."""
        return self._event.is_set() and self._error is None

    @property
    def error(self) -> Optional[BaseException]:
        """The delivery error, if the signal settled as a failure."""
        return self._error

    def set_sent(self) -> None:
        """Settle as delivered."""
        self._settle(None)

    def set_sent_error(self, error: BaseException) -> None:
        """Settle as failed, carrying the delivery error."""
        if error is None:
            raise ValueError("A failed delivery must carry an error")
        self._settle(error)

    def _settle(self, error: Optional[BaseException]) -> None:
        with self._lock:
            if self._event.is_set():
                raise CompletionAlreadySettledError(
                    details={"previous_error": repr(self._error)}
                )
            self._error = error
            self._event.set()
            waiters, self._waiters = self._waiters, []

        for loop, future in waiters:
            if future.done() or loop.is_closed():
                continue
            try:
                loop.call_soon_threadsafe(self._resolve_future, future)
            except RuntimeError:
                # loop closed between the check and the call
                logger.debug("Skipped waiter on a closed event loop")

        logger.debug(
            "Completion settled",
            extra={"context": {"success": error is None}},
        )

    def _discard_waiter(self, future: asyncio.Future) -> None:
        with self._lock:
            self._waiters = [
                (loop, waiter) for loop, waiter in self._waiters if waiter is not future
            ]

    def _resolve_future(self, future: asyncio.Future) -> None:
        if not future.done():
            future.set_result(None)

    def _raise_if_failed(self) -> None:
        if self._error is not None:
            raise self._error

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until settled; re-raise the delivery error on failure.

        Raises:
            NetworkTimeoutError: If the signal is still pending after timeout
        """
        if not self._event.wait(timeout):
            raise NetworkTimeoutError(
                "Timed out waiting for delivery outcome",
                details={"timeout": timeout},
            )
        self._raise_if_failed()

    async def wait_async(self, timeout: Optional[float] = None) -> None:
        """Awaitable form of ``wait``."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        with self._lock:
            if self._event.is_set():
                future.set_result(None)
            else:
                self._waiters.append((loop, future))

        try:
            await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError as e:
            raise NetworkTimeoutError(
                "Timed out waiting for delivery outcome",
                details={"timeout": timeout},
            ) from e
        finally:
            self._discard_waiter(future)

        self._raise_if_failed()

    def __await__(self):
        return self.wait_async().__await__()

    def __repr__(self) -> str:
        if not self.is_settled:
            state = "pending"
        elif self._error is None:
            state = "sent"
        else:
            state = f"failed: {self._error!r}"
        return f"<CompletionSignal {state}>"
