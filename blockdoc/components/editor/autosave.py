"""
Debounced draft autosave.

Every edit cancels the pending save and schedules a new one, so a burst
of edits produces a single write with the last state. At fire time the
latest snapshot is pulled from the owner, never a stale copy.

Key behaviors:
- At most one pending save
- Snapshots shorter than the autosave minimum are not written
- Store failures are logged and surfaced through the notifier; the
  in-memory document is never rolled back
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime

from blockdoc.adapters.clock import SystemClock
from blockdoc.core.services.codec import blocks_to_json, get_plain_text_content
from blockdoc.domain.entities import ContentBlock

from .ports import ClockPort, DocumentStorePort, NotifierPort, SchedulerPort, TimerHandle

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save draft"


class DebouncedSaver:
    def __init__(
        self,
        *,
        store: DocumentStorePort,
        key: str,
        scheduler: SchedulerPort,
        snapshot: Callable[[], Sequence[ContentBlock]],
        notifier: NotifierPort | None = None,
        delay_seconds: float = 2.0,
        min_chars: int = 10,
        clock: ClockPort | None = None,
    ) -> None:
        """
        Args:
            store: Where drafts are written
            key: Store key for this document
            scheduler: Timer source for the quiet interval
            snapshot: Returns the current block list when called
            notifier: Receives an error notification when a write fails
            delay_seconds: Quiet interval after the last edit
            min_chars: Minimum plain-text length worth saving
        """
        self._store = store
        self._key = key
        self._scheduler = scheduler
        self._snapshot = snapshot
        self._notifier = notifier
        self._delay = delay_seconds
        self._min_chars = min_chars
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._pending: TimerHandle | None = None
        self._generation = 0
        self.last_saved_at: datetime | None = None
        self.save_count = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self) -> None:
        """Restart the quiet interval."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._scheduler.call_later(self._delay, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

    def flush(self, *, force: bool = False) -> bool:
        """Cancel the timer and write now. `force` skips the length threshold."""
        self.cancel()
        return self._persist(self._snapshot(), force=force)

    def _fire(self, generation: int) -> None:
        # Superseded timers that were already running when cancelled do nothing.
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
        self._persist(self._snapshot())

    def _persist(self, blocks: Sequence[ContentBlock], *, force: bool = False) -> bool:
        if not force:
            length = len(get_plain_text_content(blocks))
            if length < self._min_chars:
                logger.debug(
                    "Skipping autosave for %s: %d chars (min %d)", self._key, length, self._min_chars
                )
                return False

        try:
            self._store.save(self._key, blocks_to_json(blocks))
        except Exception:
            logger.exception("Draft save failed for %s", self._key)
            if self._notifier is not None:
                self._notifier.notify("error", SAVE_FAILED_MESSAGE)
            return False

        self.last_saved_at = self._clock.now_utc()
        self.save_count += 1
        logger.debug("Draft saved for %s (%d blocks)", self._key, len(blocks))
        return True
