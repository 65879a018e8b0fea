from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from blockdoc.adapters.memory_store import InMemoryDocumentStore
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import ContentBlock
from blockdoc.rules.loader import load_rules
from blockdoc.rules.models import Rules

# --- Fakes ---


class ManualTimer:
    def __init__(self, scheduler: ManualScheduler, delay: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """SchedulerPort whose timers only run when the test fires them."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self, delay_seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire(self) -> int:
        """Run every timer that is still pending; returns how many ran."""
        due = self.pending
        for timer in due:
            timer.cancelled = True
            timer.callback()
        return len(due)


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, level: str, message: str) -> None:
        self.messages.append((level, message))


class FailingStore:
    """DocumentStorePort whose every call raises."""

    def __init__(self) -> None:
        self.save_attempts = 0

    def load(self, key: str) -> str | None:
        raise OSError("disk unavailable")

    def save(self, key: str, text: str) -> None:
        self.save_attempts += 1
        raise OSError("disk full")

    def delete(self, key: str) -> None:
        raise OSError("disk unavailable")


class FakeClipboard:
    def __init__(self) -> None:
        self.text: str | None = None

    def write_text(self, text: str) -> None:
        self.text = text


class FakeRichTextHost:
    """Stands in for a contenteditable surface; wraps the HTML per command."""

    WRAPPERS = {"bold": "b", "italic": "i", "underline": "u", "strikeThrough": "s"}

    def __init__(self, html: str = "") -> None:
        self.html = html
        self.executed: list[tuple[str, str | None]] = []

    def execute(self, command: str, value: str | None = None) -> None:
        self.executed.append((command, value))
        tag = self.WRAPPERS.get(command)
        if tag:
            self.html = f"<{tag}>{self.html}</{tag}>"
        elif command == "createLink":
            self.html = f'<a href="{value}">{self.html}</a>'

    def read_html(self) -> str:
        return self.html


# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    """Rules loaded from the project's rules.yaml."""
    rules_path = Path(__file__).resolve().parent.parent / "rules.yaml"
    return load_rules(rules_path)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def three_blocks() -> list[ContentBlock]:
    """Heading, paragraph, code."""
    return [
        create_block("heading1", "Title"),
        create_block("text", "Hello world"),
        create_block("code", "print(1)"),
    ]


@pytest.fixture
def host() -> FakeRichTextHost:
    return FakeRichTextHost("Hello")
