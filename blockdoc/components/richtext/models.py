"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class RichTextValidationError:
    """Rich text sanitizer finding."""

    code: str
    message: str
    path: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SanitizeHtmlInput:
    """Input for sanitizing text block HTML."""

    html: str
    block_id: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class SanitizeOutput:
    """Output for sanitized HTML."""

    html: str
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True
