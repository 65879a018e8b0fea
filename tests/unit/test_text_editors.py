"""
Tests for the prose editors: rich text paragraphs, headings and quotes.
"""

from __future__ import annotations

import pytest

from blockdoc.components.block_editors import (
    EDITORS,
    BlockUpdate,
    DividerEditor,
    HeadingEditor,
    QuoteEditor,
    TextEditor,
    editor_for,
)
from blockdoc.components.editor import UpdateBlockContent, apply, initial_state
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import BLOCK_TYPES, TextMetadata


class TestRegistry:
    def test_every_type_has_an_editor(self) -> None:
        assert set(EDITORS) == set(BLOCK_TYPES)

    def test_editor_for(self) -> None:
        assert isinstance(editor_for(create_block("heading2")), HeadingEditor)
        assert isinstance(editor_for(create_block("divider")), DividerEditor)

    def test_wrong_block_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            TextEditor(create_block("code"))


class TestBaseEditor:
    def test_update_converts_to_command(self) -> None:
        block = create_block("quote", "x")
        update = QuoteEditor(block).edit("Wise words")
        assert update == BlockUpdate(block.id, "Wise words", None)
        assert update.to_command() == UpdateBlockContent(block.id, "Wise words", None)

    def test_update_applies_to_document(self) -> None:
        block = create_block("text")
        state = initial_state([block])
        update = TextEditor(block).set_alignment("right")
        new = apply(state, update.to_command())
        assert isinstance(new.blocks[0].metadata, TextMetadata)
        assert new.blocks[0].metadata.alignment == "right"

    def test_successive_edits_accumulate(self) -> None:
        editor = TextEditor(create_block("text", "hi"))
        editor.set_alignment("center")
        update = editor.set_list_type("bullet")
        assert update.metadata == TextMetadata(alignment="center", list_type="bullet")

    def test_sync_rejects_other_block(self) -> None:
        editor = TextEditor(create_block("text"))
        with pytest.raises(ValueError):
            editor.sync(create_block("text"))

    def test_focus_and_blur(self) -> None:
        editor = TextEditor(create_block("text"))
        editor.focus()
        assert editor.is_focused and editor.is_selected
        editor.blur()
        assert not editor.is_focused
        assert editor.is_selected


class TestTextEditor:
    def test_edit_keeps_metadata(self) -> None:
        block = create_block("text", "", TextMetadata(alignment="center"))
        update = TextEditor(block).edit("<b>Hi</b>")
        assert update.content == "<b>Hi</b>"
        assert update.metadata == TextMetadata(alignment="center")

    def test_is_empty_for_host_leftovers(self) -> None:
        assert TextEditor(create_block("text", "<br>")).is_empty
        assert not TextEditor(create_block("text", "x")).is_empty

    def test_leaving_checklist_clears_checked(self) -> None:
        block = create_block("text", "task", TextMetadata(list_type="checklist", checked=True))
        update = TextEditor(block).set_list_type("bullet")
        assert update.metadata == TextMetadata(list_type="bullet")

    def test_toggle_checked_only_for_checklists(self) -> None:
        assert TextEditor(create_block("text", "x")).toggle_checked() is None
        block = create_block("text", "task", TextMetadata(list_type="checklist"))
        editor = TextEditor(block)
        assert editor.toggle_checked().metadata.checked is True
        assert editor.toggle_checked().metadata.checked is False


class TestFormatting:
    def test_command_runs_on_host_and_reads_back(self, host) -> None:
        editor = TextEditor(create_block("text", "Hello"), host=host)
        update = editor.apply_formatting("bold")
        assert host.executed == [("bold", None)]
        assert update.content == "<b>Hello</b>"

    def test_justify_sets_alignment(self, host) -> None:
        update = TextEditor(create_block("text", "Hello"), host=host).apply_formatting("justifyCenter")
        assert update.metadata.alignment == "center"

    def test_list_command_sets_list_type(self, host) -> None:
        update = TextEditor(create_block("text", "Hello"), host=host).apply_formatting("insertOrderedList")
        assert update.metadata.list_type == "numbered"

    def test_safe_link(self, host) -> None:
        update = TextEditor(create_block("text", "Hello"), host=host).apply_formatting(
            "createLink", "https://example.com"
        )
        assert 'href="https://example.com"' in update.content

    @pytest.mark.parametrize("value", [None, "", "   ", "javascript:alert(1)"])
    def test_rejected_links(self, host, value) -> None:
        editor = TextEditor(create_block("text", "Hello"), host=host)
        assert editor.apply_formatting("createLink", value) is None
        assert host.executed == []

    def test_unknown_command(self, host) -> None:
        assert TextEditor(create_block("text"), host=host).apply_formatting("insertHTML", "<x>") is None

    def test_without_host(self) -> None:
        assert TextEditor(create_block("text")).apply_formatting("bold") is None


class TestHeadingAndQuote:
    def test_heading_level_and_placeholder(self) -> None:
        editor = HeadingEditor(create_block("heading3"))
        assert editor.level == 3
        assert editor.placeholder == "Heading 3"

    def test_heading_strips_markup(self) -> None:
        update = HeadingEditor(create_block("heading1")).edit("<b>Big</b>&nbsp;title")
        assert update.content == "Big title"
        assert update.metadata is None

    def test_quote_is_plain_text(self) -> None:
        update = QuoteEditor(create_block("quote")).edit("plain words")
        assert update.content == "plain words"

    def test_empty_checks(self) -> None:
        assert HeadingEditor(create_block("heading1", "  ")).is_empty
        assert not QuoteEditor(create_block("quote", "q")).is_empty
