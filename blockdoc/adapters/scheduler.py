"""
Threading scheduler adapter.

Runs delayed callbacks on daemon timer threads. Exceptions raised by a
callback are logged on the timer thread; there is no caller to return them to.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for one pending callback."""

    def __init__(self, owner: ThreadingScheduler, timer: threading.Timer) -> None:
        self._owner = owner
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()
        self._owner._forget(self)

    @property
    def timer(self) -> threading.Timer:
        return self._timer


class ThreadingScheduler:
    """SchedulerPort backed by threading.Timer."""

    def __init__(self, name: str = "blockdoc-autosave") -> None:
        self._name = name
        self._calls: set[ScheduledCall] = set()
        self._lock = threading.Lock()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        call: ScheduledCall

        def run() -> None:
            self._forget(call)
            try:
                callback()
            except Exception:
                logger.exception("Scheduled callback failed")

        timer = threading.Timer(delay_seconds, run)
        timer.name = self._name
        timer.daemon = True
        call = ScheduledCall(self, timer)
        with self._lock:
            self._calls.add(call)
        timer.start()
        return call

    def _forget(self, call: ScheduledCall) -> None:
        with self._lock:
            self._calls.discard(call)

    def cancel_all(self) -> None:
        """Cancel every callback that has not fired yet."""
        with self._lock:
            calls = list(self._calls)
            self._calls.clear()
        for call in calls:
            call.timer.cancel()
        logger.debug("Cancelled %d pending timers", len(calls))

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._calls)
