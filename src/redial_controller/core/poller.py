"""Status poller - refreshes device state on a fixed cadence."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[None]]


class PollerState(str, Enum):
    """Lifecycle states of the poller."""

    IDLE = "idle"
    ACTIVE = "active"


class Poller:
    """Fires a status refresh immediately and then every interval.

    Ticks are not queued: each tick starts its own refresh, so a slow
    request may still be in flight when the next tick fires. Changing the
    target restarts the timer against the new address without cancelling
    requests already sent to the old one.
    """

    DEFAULT_INTERVAL = 5.0

    def __init__(
        self,
        refresh: RefreshCallback,
        interval_seconds: float = DEFAULT_INTERVAL,
    ) -> None:
        """Initialize the poller.

        Args:
            refresh: Coroutine function issuing one status request
            interval_seconds: Time between ticks
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._refresh = refresh
        self._interval = interval_seconds
        self._state = PollerState.IDLE
        self._target_address: Optional[str] = None
        self._timer: Optional[asyncio.Task[None]] = None
        self._ticks: set[asyncio.Task[None]] = set()
        self._tick_count = 0

    @property
    def state(self) -> PollerState:
        """Get the current lifecycle state."""
        return self._state

    @property
    def is_active(self) -> bool:
        """Check if the timer is running."""
        return self._state is PollerState.ACTIVE

    @property
    def target_address(self) -> Optional[str]:
        """Address the current timer was started for."""
        return self._target_address

    @property
    def interval(self) -> float:
        """Get the polling interval in seconds."""
        return self._interval

    @property
    def tick_count(self) -> int:
        """Number of ticks fired since creation."""
        return self._tick_count

    @property
    def in_flight(self) -> int:
        """Number of refreshes still running."""
        return len(self._ticks)

    def start(self, target_address: str) -> None:
        """Start polling against an address.

        Must be called from a running event loop. Starting an active poller
        with a different address behaves like retarget().

        Args:
            target_address: Address the session is currently using
        """
        if self.is_active and target_address == self._target_address:
            return
        self._cancel_timer()
        self._target_address = target_address
        self._state = PollerState.ACTIVE
        self._timer = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Polling {target_address} every {self._interval:g}s")

    def retarget(self, target_address: str) -> None:
        """Restart the timer for a new address.

        Has no effect while idle.
        """
        if not self.is_active:
            self._target_address = target_address
            return
        if target_address == self._target_address:
            return
        logger.info(f"Target changed to {target_address}, restarting poller")
        self.start(target_address)

    async def stop(self) -> None:
        """Stop polling and cancel outstanding refreshes."""
        if not self.is_active:
            return
        self._state = PollerState.IDLE
        timer = self._cancel_timer()
        pending = [t for t in (timer, *self._ticks) if t is not None]
        for task in self._ticks:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._ticks.clear()
        logger.info("Poller stopped")

    def _cancel_timer(self) -> Optional[asyncio.Task[None]]:
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
        return timer

    async def _run(self) -> None:
        while True:
            self._fire()
            await asyncio.sleep(self._interval)

    def _fire(self) -> None:
        self._tick_count += 1
        task = asyncio.get_running_loop().create_task(self._refresh())
        self._ticks.add(task)
        task.add_done_callback(self._tick_done)

    def _tick_done(self, task: "asyncio.Task[None]") -> None:
        self._ticks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Status refresh failed: {error}")
