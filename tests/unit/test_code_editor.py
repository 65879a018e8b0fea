"""
Tests for the code block editor.
"""

from __future__ import annotations

import pytest

from blockdoc.components.block_editors import CodeEditor
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import CodeMetadata, ContentBlock
from blockdoc.rules.models import CodeRules, EditorRules, Rules


@pytest.fixture
def editor() -> CodeEditor:
    return CodeEditor(create_block("code", "ab"))


class TestIndent:
    def test_tab_inserts_indent_at_caret(self, editor: CodeEditor) -> None:
        update, caret = editor.indent(1)
        assert update.content == "a  b"
        assert caret == 3

    def test_tab_replaces_selection(self) -> None:
        editor = CodeEditor(create_block("code", "hello world"))
        update, caret = editor.indent(0, 5)
        assert update.content == "   world"
        assert caret == 2

    def test_reversed_selection(self) -> None:
        editor = CodeEditor(create_block("code", "abcd"))
        update, _ = editor.indent(3, 1)
        assert update.content == "a  d"

    def test_out_of_range_clamped(self, editor: CodeEditor) -> None:
        update, caret = editor.indent(99)
        assert update.content == "ab  "
        assert caret == 4

    def test_indent_string_from_rules(self) -> None:
        rules = Rules(editor=EditorRules(indent="\t"))
        editor = CodeEditor(create_block("code", "x"), rules=rules)
        update, caret = editor.indent(0)
        assert update.content == "\tx"
        assert caret == 1


class TestSettings:
    def test_supported_language(self, editor: CodeEditor) -> None:
        update = editor.set_language("python")
        assert update.metadata.language == "python"

    def test_unsupported_language_rejected(self, editor: CodeEditor) -> None:
        assert editor.set_language("cobol") is None
        assert editor.metadata.language == "javascript"

    def test_language_list_comes_from_rules(self) -> None:
        rules = Rules(code=CodeRules(default_language="go", supported_languages=["go"]))
        editor = CodeEditor(create_block("code"), rules=rules)
        assert editor.supported_languages == ["go"]
        assert editor.set_language("python") is None

    def test_missing_metadata_uses_default_language(self) -> None:
        block = ContentBlock(type="code", content="x")
        rules = Rules(code=CodeRules(default_language="rust"))
        assert CodeEditor(block, rules=rules).metadata == CodeMetadata(language="rust")

    def test_filename_blank_unsets(self, editor: CodeEditor) -> None:
        assert editor.set_filename(" main.py ").metadata.filename == "main.py"
        assert editor.set_filename("  ").metadata.filename is None

    def test_toggle_line_numbers(self, editor: CodeEditor) -> None:
        assert editor.metadata.show_line_numbers is True
        assert editor.toggle_line_numbers().metadata.show_line_numbers is False

    def test_theme(self, editor: CodeEditor) -> None:
        assert editor.set_theme("light").metadata.theme == "light"


class TestReading:
    def test_copy_writes_raw_source(self, clipboard) -> None:
        source = "if (a < b) {}"
        CodeEditor(create_block("code", source)).copy(clipboard)
        assert clipboard.text == source

    def test_line_numbers(self) -> None:
        assert CodeEditor(create_block("code", "a\nb\nc")).line_numbers() == [1, 2, 3]
        assert CodeEditor(create_block("code", "")).line_numbers() == [1]

    def test_highlighted(self) -> None:
        editor = CodeEditor(create_block("code", "const x = 1;"))
        assert "<span" in editor.highlighted()
