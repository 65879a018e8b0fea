"""
Syntax highlighting for code blocks, backed by Pygments.

Output is an HTML fragment of <span> tokens (no wrapping <pre>), so the
caller decides the surrounding markup. Unknown languages fall back to the
escaped source.
"""

from __future__ import annotations

import html
import logging
from functools import lru_cache

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

# Editor language names that Pygments knows under another alias.
LANGUAGE_ALIASES: dict[str, str] = {
    "shell": "bash",
    "plaintext": "text",
}

_FORMATTER = HtmlFormatter(nowrap=True)


@lru_cache(maxsize=64)
def _lexer_for(language: str) -> Lexer | None:
    name = LANGUAGE_ALIASES.get(language, language)
    try:
        return get_lexer_by_name(name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        logger.debug("No lexer for language %r, rendering plain text", language)
        return None


def is_known_language(language: str | None) -> bool:
    return bool(language) and _lexer_for(language.lower()) is not None


def highlight_code(content: str, language: str | None) -> str:
    """Highlighted HTML for `content`; escaped text when the language is unknown."""
    if not content:
        return ""
    lexer = _lexer_for(language.lower()) if language else None
    if lexer is None:
        return html.escape(content)
    return highlight(content, lexer, _FORMATTER)


def stylesheet(theme: str = "dark") -> str:
    """CSS rules for the highlighted markup, scoped under `.code-block`."""
    style = "monokai" if theme == "dark" else "default"
    return HtmlFormatter(style=style).get_style_defs(".code-block")
