"""
Richtext component - sanitization of text block HTML.

Invariants:
- Only allow-listed tags and attributes survive
- Link URLs never use a forbidden protocol
- No script content in output
"""

from __future__ import annotations

from blockdoc.core.services.richtext import DEFAULT_CONFIG, RichTextConfig, sanitize_html
from blockdoc.rules.loader import richtext_config
from blockdoc.rules.models import Rules

from .models import RichTextValidationError, SanitizeHtmlInput, SanitizeOutput


def _build_config(rules: Rules | None) -> RichTextConfig:
    """Build rich text config from rules."""
    if rules is None:
        return DEFAULT_CONFIG
    return richtext_config(rules.richtext)


def run_sanitize(
    inp: SanitizeHtmlInput,
    *,
    rules: Rules | None = None,
) -> SanitizeOutput:
    """
    Sanitize text block HTML.

    Args:
        inp: Input containing the HTML fragment.
        rules: Optional rules for configuration.

    Returns:
        SanitizeOutput with the cleaned fragment and what was removed.
    """
    cleaned, findings = sanitize_html(inp.html, _build_config(rules))
    errors = [
        RichTextValidationError(code=f.code, message=f.message, path=inp.block_id)
        for f in findings
    ]
    return SanitizeOutput(html=cleaned, errors=errors, success=True)


def run(inp: SanitizeHtmlInput, *, rules: Rules | None = None) -> SanitizeOutput:
    """Main entry point for the richtext component."""
    if isinstance(inp, SanitizeHtmlInput):
        return run_sanitize(inp, rules=rules)
    raise ValueError(f"Unknown input type: {type(inp)}")
