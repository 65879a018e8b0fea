"""
Tests for the document codec.

Encoding is lossless; decoding never raises and repairs what it can.
"""

from __future__ import annotations

import json
import logging

from blockdoc.core.services.codec import (
    blocks_to_json,
    decode_document,
    get_plain_text_content,
    json_to_blocks,
)
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import (
    BLOCK_TYPES,
    CodeMetadata,
    ContentBlock,
    ImageMetadata,
    QuizMetadata,
    QuizOption,
    QuizQuestion,
    TableCell,
    TableMetadata,
    TextMetadata,
    VideoMetadata,
)


class TestEncode:
    def test_compact_and_ordered(self, three_blocks) -> None:
        text = blocks_to_json(three_blocks)
        assert ", " not in text
        assert [b["id"] for b in json.loads(text)] == [b.id for b in three_blocks]

    def test_non_ascii_kept_literally(self) -> None:
        text = blocks_to_json([create_block("text", "café ✓")])
        assert "café ✓" in text

    def test_empty_list(self) -> None:
        assert blocks_to_json([]) == "[]"


class TestRoundTrip:
    def test_lossless(self, three_blocks) -> None:
        assert json_to_blocks(blocks_to_json(three_blocks)) == three_blocks

    def test_nested_quiz_survives(self) -> None:
        question = QuizQuestion(
            question="2+2?",
            options=[QuizOption(text="4", is_correct=True), QuizOption(text="5")],
            explanation="Arithmetic",
            points=1,
        )
        block = create_block("quiz", metadata=QuizMetadata(questions=[question]))
        assert json_to_blocks(blocks_to_json([block])) == [block]

    def test_every_type_with_all_fields(self) -> None:
        quiz = QuizMetadata(
            questions=[
                QuizQuestion(
                    question="Pick one",
                    options=[QuizOption(text="A", is_correct=True), QuizOption(text="B")],
                    explanation="A is first",
                    points=3,
                ),
                QuizQuestion(
                    question="Sky is blue",
                    type="true-false",
                    correct_answer="true",
                    points=1,
                ),
            ],
            show_results=True,
            randomize_options=True,
        )
        cell = TableCell(
            content="<b>x</b>", row_span=2, col_span=1, background_color="#eee", alignment="right"
        )
        blocks = [
            ContentBlock(
                type="text",
                content="Item",
                metadata=TextMetadata(alignment="center", list_type="checklist", checked=True),
            ),
            ContentBlock(type="heading1", content="H1"),
            ContentBlock(type="heading2", content="H2"),
            ContentBlock(type="heading3", content="H3"),
            ContentBlock(
                type="image",
                metadata=ImageMetadata(
                    src="https://example.com/a.png",
                    alt="Alt",
                    caption="Caption",
                    size="medium",
                    alignment="left",
                    border_radius="large",
                    width=640,
                    height=480.5,
                ),
            ),
            ContentBlock(
                type="video",
                metadata=VideoMetadata(
                    url="https://vimeo.com/123",
                    platform="vimeo",
                    aspect_ratio="4:3",
                    autoplay=True,
                    start_time=5,
                    end_time=60.5,
                ),
            ),
            ContentBlock(
                type="code",
                content="print(1)",
                metadata=CodeMetadata(
                    language="python", filename="main.py", show_line_numbers=False, theme="light"
                ),
            ),
            ContentBlock(type="divider"),
            ContentBlock(type="quote", content="Said"),
            ContentBlock(type="quiz", metadata=quiz),
            ContentBlock(
                type="table",
                metadata=TableMetadata(
                    rows=[[cell, TableCell(content="y")], [TableCell(), TableCell()]],
                    has_header=False,
                    alternating_colors=False,
                    border_style="dashed",
                ),
            ),
        ]
        assert {b.type for b in blocks} == set(BLOCK_TYPES)
        assert json_to_blocks(blocks_to_json(blocks)) == blocks

    def test_encode_is_stable(self, three_blocks) -> None:
        text = blocks_to_json(three_blocks)
        assert blocks_to_json(json_to_blocks(text)) == text


class TestDecodeFallbacks:
    def test_empty_string_gives_default_document(self) -> None:
        blocks = json_to_blocks("")
        assert len(blocks) == 1
        assert blocks[0].type == "text"

    def test_non_string_gives_default_document(self) -> None:
        result = decode_document(None)
        assert result.used_default
        assert len(result.blocks) == 1

    def test_invalid_json_logs_warning(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="blockdoc.core.services.codec"):
            blocks = json_to_blocks("{not json")
        assert len(blocks) == 1
        assert "Unreadable document JSON" in caplog.text

    def test_non_array_gives_default_document(self) -> None:
        result = decode_document('{"type": "text"}')
        assert result.used_default
        assert "not an array" in result.problems[0]

    def test_empty_array_is_empty(self) -> None:
        result = decode_document("[]")
        assert result.blocks == []
        assert result.clean
        assert not result.used_default


class TestDecodeRepairs:
    def test_invalid_elements_skipped_in_order(self) -> None:
        text = json.dumps(
            [
                {"id": "a", "type": "text", "content": "one"},
                {"id": "b", "type": "carousel"},
                "garbage",
                {"id": "c", "type": "quote", "content": "three"},
            ]
        )
        result = decode_document(text)
        assert [b.id for b in result.blocks] == ["a", "c"]
        assert len(result.problems) == 2
        assert not result.used_default

    def test_duplicate_ids_reassigned(self) -> None:
        text = json.dumps(
            [
                {"id": "same", "type": "text", "content": "one"},
                {"id": "same", "type": "text", "content": "two"},
            ]
        )
        blocks = json_to_blocks(text)
        assert blocks[0].id == "same"
        assert blocks[1].id != "same"
        assert blocks[1].content == "two"

    def test_missing_fields_defaulted(self) -> None:
        blocks = json_to_blocks('[{"type": "divider"}]')
        assert blocks[0].type == "divider"
        assert blocks[0].id
        assert blocks[0].content == ""


class TestPlainText:
    def test_only_text_bearing_types(self) -> None:
        blocks = [
            create_block("heading2", "Title"),
            create_block("divider"),
            create_block("quote", "Said"),
            create_block("image"),
            create_block("code", "x = 1"),
        ]
        assert get_plain_text_content(blocks) == "Title\nSaid\nx = 1"

    def test_empty(self) -> None:
        assert get_plain_text_content([]) == ""

    def test_non_text_blocks_between_paragraphs_skipped(self) -> None:
        blocks = [
            create_block("text", "Hello"),
            create_block("image", metadata=ImageMetadata(src="https://example.com/a.png")),
            create_block("text", "World"),
        ]
        assert get_plain_text_content(blocks) == "Hello\nWorld"
