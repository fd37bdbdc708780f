"""Cancellable periodic predicate check.

Turns a "loaded" predicate with no completion event into something that
can be awaited. The predicate is evaluated on a fixed-interval timer armed
with loop.call_later; each tick yields back to the event loop. The timer
is cancelled exactly once, either when the predicate is observed true or
when the check is cancelled by its owner.

States: POLLING -> LOADED, or POLLING -> CANCELLED.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

from caseintake.observability.logging import get_logger

logger = get_logger(__name__)


class PollState(str, Enum):
    """Lifecycle of a periodic check."""

    POLLING = "polling"
    LOADED = "loaded"
    CANCELLED = "cancelled"


class PeriodicCheck:
    """Wait until a predicate holds, checking it every interval.

    There is no timeout: a predicate that never turns true keeps the
    check polling until it is cancelled.
    """

    def __init__(
        self,
        predicate: Callable[[], bool],
        interval_seconds: float,
    ) -> None:
        """Initialize the check.

        Args:
            predicate: Condition to wait for; exceptions count as "not yet"
            interval_seconds: Delay before the first and between later checks
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._predicate = predicate
        self._interval = interval_seconds
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._done: asyncio.Future[bool] | None = None
        self.state = PollState.POLLING
        self.ticks = 0
        self.timer_cancellations = 0

    def start(self) -> None:
        """Arm the timer. Must be called from a running event loop."""
        if self._done is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._done = self._loop.create_future()
        if self.state is not PollState.POLLING:
            self._done.set_result(False)
            return
        self._handle = self._loop.call_later(self._interval, self._tick)

    async def wait(self) -> bool:
        """Wait for the check to finish.

        Returns:
            True once the predicate held, False if the check was cancelled
        """
        self.start()
        assert self._done is not None
        try:
            return await self._done
        except asyncio.CancelledError:
            self.cancel()
            raise

    def cancel(self) -> None:
        """Stop polling. No-op once the check has finished."""
        if self.state is PollState.POLLING:
            self._finish(PollState.CANCELLED)

    def _tick(self) -> None:
        assert self._loop is not None
        self.ticks += 1
        # Re-arm before evaluating so the timer runs at a fixed interval
        self._handle = self._loop.call_later(self._interval, self._tick)

        try:
            loaded = bool(self._predicate())
        except Exception as e:
            logger.warning("periodic_check_predicate_failed", tick=self.ticks, error=str(e))
            return

        if loaded:
            self._finish(PollState.LOADED)

    def _finish(self, state: PollState) -> None:
        self.state = state
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self.timer_cancellations += 1
        if self._done is not None and not self._done.done():
            self._done.set_result(state is PollState.LOADED)
