"""
PerkHub — Debounce Scheduling
===============================

What:  A cancel-and-reschedule timer for the search view.
How:   DebounceTimer owns at most one scheduled callback. Scheduling a new
       one cancels the previous handle first, so only the callback armed after
       the last change in a burst ever runs.

The timer is built on a tiny Scheduler protocol (`call_later` returning a
handle with `cancel()`). AsyncioScheduler uses the running event loop;
tests plug in a manual clock.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Schedules callbacks on the running event loop (delay in seconds)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class DebounceTimer:
    """
    Single-slot cancellable timer.

    Attributes:
        delay:   quiet period in seconds
        pending: True while a callback is armed and has not fired
    """

    def __init__(self, delay: float, scheduler: Optional[Scheduler] = None):
        self.delay = delay
        self._scheduler = scheduler or AsyncioScheduler()
        self._handle: Optional[Cancellable] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        """Cancel whatever is armed and arm `callback` after the quiet period."""
        self.cancel()

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(self.delay, fire)

    def cancel(self) -> bool:
        """Disarm the pending callback. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug("Debounce timer cancelled")
        return True
