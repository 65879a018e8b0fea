"""
Richtext component - sanitization of text block HTML.
"""

from blockdoc.core.services.richtext import (
    RichTextConfig,
    RichTextService,
    build_link_rel,
    create_rich_text_service,
    is_safe_url,
    sanitize_html,
    sanitize_url,
)

from .component import run, run_sanitize
from .models import RichTextValidationError, SanitizeHtmlInput, SanitizeOutput

__all__ = [
    # Entry points
    "run",
    "run_sanitize",
    # Models
    "SanitizeHtmlInput",
    "SanitizeOutput",
    "RichTextValidationError",
    # Service
    "RichTextConfig",
    "RichTextService",
    "build_link_rel",
    "create_rich_text_service",
    "is_safe_url",
    "sanitize_html",
    "sanitize_url",
]
