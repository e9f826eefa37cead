"""Timers and debounced callbacks.

A debounced call coalesces a burst of calls into one deferred invocation:
only the last call within the quiet window executes. Earlier pending calls
are superseded, not cancelled.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from .exceptions import SchedulerError

log = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Runs callbacks after a delay on the single thread of control."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> None:
        ...


class ManualScheduler:
    """Scheduler driven by a virtual clock.

    Nothing runs until ``advance`` moves the clock forward. Used by the
    command line snapshot replay and by tests.
    """

    def __init__(self):
        self.time = 0.0
        self._timers: List[Tuple[float, int, Callable[[], Any]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> None:
        heapq.heappush(self._timers, (self.time + delay, next(self._counter), callback))

    def advance(self, seconds: float) -> int:
        """Move the clock and run every timer that became due.

        Returns:
            Number of callbacks run
        """
        deadline = self.time + seconds
        ran = 0
        while self._timers and self._timers[0][0] <= deadline:
            due, _, callback = heapq.heappop(self._timers)
            self.time = max(self.time, due)
            callback()
            ran += 1
        self.time = deadline
        return ran

    def run_all(self) -> int:
        """Run timers until none are left."""
        ran = 0
        while self._timers:
            ran += self.advance(self._timers[0][0] - self.time)
        return ran

    @property
    def pending(self) -> int:
        return len(self._timers)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(
                    "AsyncioScheduler needs a running event loop; pass a ManualScheduler for synchronous use"
                ) from e
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> None:
        self.loop.call_later(delay, callback)


class Debouncer:
    """Delay a function until calls stop for ``wait`` seconds.

    Every call bumps a generation counter; a timer only runs the function
    if no later call happened in the meantime.
    """

    def __init__(self, func: Callable[[], Any], wait: float, scheduler: Scheduler, name: str = ""):
        """Initialize debouncer.

        Args:
            func: Function to run after the quiet window
            wait: Quiet window in seconds
            scheduler: Scheduler providing timers
            name: Name used in log messages
        """
        self.func = func
        self.wait = wait
        self.scheduler = scheduler
        self.name = name or getattr(func, "__name__", "debounced")
        self._generation = 0
        self._pending = False

    def __call__(self):
        self._generation += 1
        self._pending = True
        generation = self._generation
        self.scheduler.call_later(self.wait, lambda: self._fire(generation))

    def _fire(self, generation: int):
        if generation != self._generation or not self._pending:
            # Superseded by a later call, or already flushed
            return
        self._pending = False
        log.debug("Running debounced %s", self.name)
        self.func()

    def flush(self) -> bool:
        """Run the pending call now.

        Returns:
            True if a call was pending
        """
        if not self._pending:
            return False
        self._pending = False
        self.func()
        return True

    @property
    def pending(self) -> bool:
        return self._pending
