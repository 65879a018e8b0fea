"""
Editor session - stateful facade over the pure editor component.

Owns the current EditorState for one document, fans changes out to
listeners and drives the debounced autosave. Commands are applied on the
caller's thread; only the autosave timer runs elsewhere, and it reads the
state through `snapshot()`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from blockdoc.core.services.codec import blocks_to_json, json_to_blocks
from blockdoc.domain.entities import ContentBlock
from blockdoc.rules.models import EditorRules

from .autosave import DebouncedSaver
from .component import character_count, initial_state, key_result, meets_minimum, run
from .models import EditorCommand, EditorOutput, EditorState, KeyDown, KeyResult
from .ports import DocumentStorePort, NotifierPort, SchedulerPort

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load saved draft"

ChangeListener = Callable[[list[ContentBlock]], None]


class DocumentEditorSession:
    def __init__(
        self,
        *,
        store: DocumentStorePort,
        key: str,
        scheduler: SchedulerPort,
        notifier: NotifierPort | None = None,
        rules: EditorRules | None = None,
        blocks: list[ContentBlock] | None = None,
    ) -> None:
        self._rules = rules or EditorRules()
        self._state = initial_state(blocks)
        self._state_lock = threading.Lock()
        self._listeners: list[ChangeListener] = []
        self._closed = False
        self.saver = DebouncedSaver(
            store=store,
            key=key,
            scheduler=scheduler,
            snapshot=self.snapshot,
            notifier=notifier,
            delay_seconds=self._rules.autosave_debounce_seconds,
            min_chars=self._rules.min_autosave_chars,
        )

    @classmethod
    def load(
        cls,
        store: DocumentStorePort,
        key: str,
        *,
        scheduler: SchedulerPort,
        notifier: NotifierPort | None = None,
        rules: EditorRules | None = None,
    ) -> DocumentEditorSession:
        """Open the document stored under key; empty or missing starts a default document."""
        try:
            text = store.load(key)
        except Exception:
            logger.exception("Draft load failed for %s", key)
            if notifier is not None:
                notifier.notify("error", LOAD_FAILED_MESSAGE)
            text = None

        blocks = json_to_blocks(text) if text else None
        return cls(
            store=store,
            key=key,
            scheduler=scheduler,
            notifier=notifier,
            rules=rules,
            blocks=blocks or None,
        )

    # --- State ---

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def blocks(self) -> list[ContentBlock]:
        return list(self._state.blocks)

    def snapshot(self) -> list[ContentBlock]:
        with self._state_lock:
            return list(self._state.blocks)

    def to_json(self) -> str:
        return blocks_to_json(self.snapshot())

    @property
    def character_count(self) -> int:
        return character_count(self._state)

    def can_submit(self) -> bool:
        return meets_minimum(self._state, self._rules.min_submission_chars)

    # --- Commands ---

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener for block list changes; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, command: EditorCommand) -> EditorOutput:
        if self._closed:
            raise RuntimeError("Editor session is closed")

        with self._state_lock:
            output = run(self._state, command)
            self._state = output.state

        if output.blocks_changed:
            blocks = list(output.state.blocks)
            for listener in list(self._listeners):
                listener(blocks)
            self.saver.schedule()
        return output

    def key_down(self, command: KeyDown) -> KeyResult:
        return key_result(self.dispatch(command))

    def save_now(self) -> bool:
        """Write the current document immediately, regardless of length."""
        return self.saver.flush(force=True)

    def close(self) -> None:
        """Drop any pending autosave. Further dispatches raise."""
        self.saver.cancel()
        self._closed = True
        logger.debug("Editor session closed for %s", self.saver.key)
