"""
Render blocks component input/output models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from blockdoc.domain.quiz import QuizProgress

# --- Input Models ---


@dataclass(frozen=True)
class RenderDocumentInput:
    """Input for rendering a persisted document to HTML."""

    content: str
    quiz_progress: Mapping[str, QuizProgress] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractTextInput:
    """Input for extracting readable text from a persisted document."""

    content: str


@dataclass(frozen=True)
class ExcerptInput:
    """Input for a short summary of a persisted document."""

    content: str
    max_length: int = 160


# --- Output Models ---


@dataclass(frozen=True)
class RenderDocumentOutput:
    """Output for rendered HTML."""

    html: str
    errors: list[str] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TextOutput:
    """Output for extracted text."""

    text: str
    errors: list[str] = field(default_factory=list)
    success: bool = True
