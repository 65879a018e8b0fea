import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from blockdoc.domain.entities import (
    BLOCK_TYPES,
    BlockMetadata,
    BlockType,
    CodeMetadata,
    ContentBlock,
    ImageMetadata,
    QuizMetadata,
    TableCell,
    TableMetadata,
    VideoMetadata,
    now_ms,
)
from blockdoc.rules.models import Rules

# --- Type families ---

PROSE_TYPES: frozenset[BlockType] = frozenset(["text", "heading1", "heading2", "heading3", "quote"])
PLAIN_TEXT_TYPES: frozenset[BlockType] = PROSE_TYPES | {"code"}


@dataclass(frozen=True)
class BlockTypeInfo:
    label: str
    description: str


BLOCK_TYPE_INFO: dict[BlockType, BlockTypeInfo] = {
    "text": BlockTypeInfo("Text", "Plain text paragraph"),
    "heading1": BlockTypeInfo("Heading 1", "Large heading"),
    "heading2": BlockTypeInfo("Heading 2", "Medium heading"),
    "heading3": BlockTypeInfo("Heading 3", "Small heading"),
    "image": BlockTypeInfo("Image", "Upload or embed an image"),
    "video": BlockTypeInfo("Video", "Embed a video from YouTube, Vimeo, etc."),
    "code": BlockTypeInfo("Code", "Code block with syntax highlighting"),
    "divider": BlockTypeInfo("Divider", "Horizontal divider line"),
    "quote": BlockTypeInfo("Quote", "Block quote"),
    "quiz": BlockTypeInfo("Quiz", "Interactive quiz question"),
    "table": BlockTypeInfo("Table", "Data table"),
}


# --- Default metadata ---

def _default_quiz() -> QuizMetadata:
    return QuizMetadata(questions=[], show_results=False, randomize_options=False)


def _default_table() -> TableMetadata:
    header = [TableCell(content=f"Header {i}") for i in range(1, 4)]
    body = [[TableCell(content="") for _ in range(3)] for _ in range(2)]
    return TableMetadata(
        rows=[header, *body],
        has_header=True,
        alternating_colors=True,
        border_style="solid",
    )


def _default_code() -> CodeMetadata:
    return CodeMetadata(language="javascript", show_line_numbers=True, theme="dark")


def _default_image() -> ImageMetadata:
    return ImageMetadata(src="", size="large", alignment="center", border_radius="medium")


def _default_video() -> VideoMetadata:
    return VideoMetadata(url="", platform="youtube", aspect_ratio="16:9")


DEFAULT_METADATA: dict[BlockType, Callable[[], BlockMetadata] | None] = {
    "text": None,
    "heading1": None,
    "heading2": None,
    "heading3": None,
    "image": _default_image,
    "video": _default_video,
    "code": _default_code,
    "divider": None,
    "quote": None,
    "quiz": _default_quiz,
    "table": _default_table,
}


def default_metadata(block_type: BlockType) -> BlockMetadata | None:
    factory = DEFAULT_METADATA[block_type]
    return factory() if factory is not None else None


# --- Factory ---

def create_block(
    block_type: BlockType,
    content: str = "",
    metadata: BlockMetadata | None = None,
) -> ContentBlock:
    """
    Build a fresh block with a new id and current timestamps.

    Supplied metadata is deep-copied so the new block never shares
    nested lists with its source. Without metadata the per-type default is used.
    """
    if block_type not in BLOCK_TYPES:
        raise ValueError(f"Unknown block type '{block_type}'")
    resolved = metadata.model_copy(deep=True) if metadata is not None else default_metadata(block_type)
    timestamp = now_ms()
    return ContentBlock(
        type=block_type,
        content=content,
        metadata=resolved,
        created_at=timestamp,
        updated_at=timestamp,
    )


def get_default_blocks() -> list[ContentBlock]:
    """Starting document: one empty text block."""
    return [create_block("text")]


# --- Validation ---

@dataclass(frozen=True)
class DocumentValidationError:
    code: str
    message: str
    block_id: str | None = None


class BlockValidator:
    """Checks a whole document against the configured limits. Never raises."""

    def __init__(self, rules: Rules):
        self.rules = rules

    def validate(self, blocks: Sequence[ContentBlock]) -> list[DocumentValidationError]:
        errors: list[DocumentValidationError] = []

        # 1. Document-level limits
        if len(blocks) > self.rules.editor.max_blocks:
            errors.append(
                DocumentValidationError(
                    "too_many_blocks",
                    f"Document has {len(blocks)} blocks (max {self.rules.editor.max_blocks}).",
                )
            )

        size = len(json.dumps([b.to_wire() for b in blocks], separators=(",", ":")).encode("utf-8"))
        if size > self.rules.editor.max_json_bytes:
            errors.append(
                DocumentValidationError(
                    "document_too_large",
                    f"Document exceeds size limit ({size} > {self.rules.editor.max_json_bytes}).",
                )
            )

        # 2. Ids
        seen: set[str] = set()
        for block in blocks:
            if block.id in seen:
                errors.append(
                    DocumentValidationError("duplicate_id", f"Duplicate block id '{block.id}'.", block.id)
                )
            seen.add(block.id)

        # 3. Per-type checks
        for block in blocks:
            errors.extend(self._validate_block(block))

        return errors

    def _validate_block(self, block: ContentBlock) -> list[DocumentValidationError]:
        metadata: Any = block.metadata
        if isinstance(metadata, CodeMetadata):
            return self._validate_code(block, metadata)
        if isinstance(metadata, QuizMetadata):
            return self._validate_quiz(block, metadata)
        if isinstance(metadata, TableMetadata):
            return self._validate_table(block, metadata)
        return []

    def _validate_code(self, block: ContentBlock, metadata: CodeMetadata) -> list[DocumentValidationError]:
        if metadata.language not in self.rules.code.supported_languages:
            return [
                DocumentValidationError(
                    "unsupported_language",
                    f"Language '{metadata.language}' is not supported.",
                    block.id,
                )
            ]
        return []

    def _validate_quiz(self, block: ContentBlock, metadata: QuizMetadata) -> list[DocumentValidationError]:
        errors = []
        bounds = self.rules.quiz
        for question in metadata.questions:
            if question.type != "multiple-choice":
                continue
            options = question.options or []
            if not bounds.min_options <= len(options) <= bounds.max_options:
                errors.append(
                    DocumentValidationError(
                        "option_count",
                        f"Question '{question.id}' has {len(options)} options "
                        f"(expected {bounds.min_options}-{bounds.max_options}).",
                        block.id,
                    )
                )
            if sum(1 for o in options if o.is_correct) > 1:
                errors.append(
                    DocumentValidationError(
                        "multiple_correct",
                        f"Question '{question.id}' marks more than one option correct.",
                        block.id,
                    )
                )
        return errors

    def _validate_table(self, block: ContentBlock, metadata: TableMetadata) -> list[DocumentValidationError]:
        if not metadata.rows or not metadata.rows[0]:
            return [DocumentValidationError("empty_table", "Table has no cells.", block.id)]
        width = len(metadata.rows[0])
        if any(len(row) != width for row in metadata.rows):
            return [DocumentValidationError("ragged_table", "Table rows differ in length.", block.id)]
        return []
