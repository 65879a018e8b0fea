"""
Per-block editor port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RichTextHostPort(Protocol):
    """The host's rich-text surface (a contenteditable element in a browser)."""

    def execute(self, command: str, value: str | None = None) -> None:
        """Apply a formatting command to the current selection."""
        ...

    def read_html(self) -> str:
        """Current HTML of the editing surface."""
        ...


class ClipboardPort(Protocol):
    def write_text(self, text: str) -> None:
        ...
