"""Debouncing for rapidly edited numeric inputs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs an action only after input has been quiet for a window.

    Each call to schedule() replaces the previously scheduled action, so
    a burst of edits results in a single transmission of the last value.
    A window of 0 runs actions immediately. Actions already running are
    never cancelled; flush() waits for them.
    """

    def __init__(self, quiet_seconds: float = 0.3) -> None:
        """Initialize the debouncer.

        Args:
            quiet_seconds: How long input must settle before the action runs
        """
        if quiet_seconds < 0:
            raise ValueError(f"quiet_seconds must be >= 0, got {quiet_seconds}")
        self._quiet = quiet_seconds
        self._task: Optional[asyncio.Task[None]] = None
        self._action: Optional[Callable[[], Awaitable[None]]] = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def quiet_seconds(self) -> float:
        return self._quiet

    @property
    def is_pending(self) -> bool:
        """Check if an action is waiting for the quiet window."""
        return self._task is not None and not self._task.done()

    @property
    def is_running(self) -> bool:
        """Check if a debounced action is in progress."""
        return bool(self._running)

    async def schedule(self, action: Callable[[], Awaitable[None]]) -> None:
        """Schedule an action, replacing any pending one.

        Args:
            action: Coroutine function to run once input settles
        """
        self.cancel()
        if self._quiet == 0:
            await action()
            return
        self._action = action
        self._task = asyncio.get_running_loop().create_task(self._wait_and_run(action))

    async def flush(self) -> None:
        """Run the pending action now and wait for running ones to finish."""
        action = self._action if self.is_pending else None
        self.cancel()
        if self._running:
            await asyncio.gather(*self._running)
        if action is not None:
            await action()

    def cancel(self) -> None:
        """Drop the pending action without running it."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._action = None

    async def _wait_and_run(self, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self._quiet)
        task = asyncio.current_task()
        self._task = None
        self._action = None
        if task is not None:
            self._running.add(task)
        try:
            await action()
        except Exception as e:
            logger.error(f"Debounced action failed: {e}")
        finally:
            self._running.discard(task)
