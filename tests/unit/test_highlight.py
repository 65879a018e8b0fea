"""
Tests for Pygments-backed code highlighting.
"""

from __future__ import annotations

from blockdoc.core.services.highlight import highlight_code, is_known_language, stylesheet


class TestHighlightCode:
    def test_known_language_produces_token_spans(self) -> None:
        out = highlight_code("def f():\n    return 1", "python")
        assert "<span" in out
        assert "return" in out
        assert "<pre" not in out

    def test_unknown_language_is_escaped_text(self) -> None:
        assert highlight_code("<b>x</b>", "not-a-language") == "&lt;b&gt;x&lt;/b&gt;"

    def test_no_language_is_escaped_text(self) -> None:
        assert highlight_code("a < b", None) == "a &lt; b"

    def test_empty_content(self) -> None:
        assert highlight_code("", "python") == ""

    def test_markup_in_source_is_escaped(self) -> None:
        out = highlight_code('x = "<script>"', "python")
        assert "<script>" not in out

    def test_editor_aliases(self) -> None:
        assert is_known_language("shell")
        assert is_known_language("plaintext")
        assert is_known_language("JavaScript")
        assert not is_known_language("not-a-language")
        assert not is_known_language(None)


class TestStylesheet:
    def test_scoped_to_code_block(self) -> None:
        css = stylesheet("dark")
        assert ".code-block" in css
        assert css != stylesheet("light")
