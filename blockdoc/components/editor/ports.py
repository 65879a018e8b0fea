"""
Editor component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Literal, Protocol

NotifyLevel = Literal["info", "success", "warning", "error"]


class DocumentStorePort(Protocol):
    """Persists serialized documents as opaque text under a key."""

    def load(self, key: str) -> str | None:
        """Stored text, or None when nothing is stored under the key."""
        ...

    def save(self, key: str, text: str) -> None:
        """Store text, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove the key; a missing key is not an error."""
        ...


class TimerHandle(Protocol):
    """A scheduled callback that has not run yet."""

    def cancel(self) -> None:
        ...


class SchedulerPort(Protocol):
    """Delayed execution of callbacks."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_seconds unless cancelled first."""
        ...


class NotifierPort(Protocol):
    """User-visible notifications (toasts in a UI host)."""

    def notify(self, level: NotifyLevel, message: str) -> None:
        ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        ...
