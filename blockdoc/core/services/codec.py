"""
Document Codec - persisted JSON text <-> ordered block list.

The persisted form is a compact JSON array of blocks with camelCase keys.
Unset optional fields are omitted, so encode(decode(x)) is stable.

Key behaviors:
- Encoding is lossless: json_to_blocks(blocks_to_json(B)) == B
- Decoding is total: unreadable input falls back to the default document
- Invalid array elements are skipped, the rest keep their order
- Duplicate ids get a fresh id so the decoded document stays addressable
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from blockdoc.domain.blocks import PLAIN_TEXT_TYPES, get_default_blocks
from blockdoc.domain.entities import ContentBlock

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """Decoded blocks plus what had to be repaired or dropped on the way."""

    blocks: list[ContentBlock]
    problems: list[str] = field(default_factory=list)
    used_default: bool = False

    @property
    def clean(self) -> bool:
        return not self.problems


def blocks_to_json(blocks: Sequence[ContentBlock]) -> str:
    """Serialize blocks in order to compact JSON."""
    payload = [block.to_wire() for block in blocks]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _fallback(problem: str) -> DecodeResult:
    logger.warning("%s, using default blocks", problem)
    return DecodeResult(blocks=get_default_blocks(), problems=[problem], used_default=True)


def decode_document(text: Any) -> DecodeResult:
    """
    Parse persisted text into blocks, reporting every repair.

    Never raises. Non-string input, empty text, invalid JSON or a top-level
    value that is not an array all yield the default document. An empty
    array decodes to an empty list; callers that need an editable document
    substitute the default themselves.
    """
    if not isinstance(text, str) or not text.strip():
        return _fallback("Empty or non-string document")

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as e:
        return _fallback(f"Unreadable document JSON ({e})")

    if not isinstance(parsed, list):
        return _fallback(f"Document JSON is a {type(parsed).__name__}, not an array")

    result = DecodeResult(blocks=[])
    seen_ids: set[str] = set()
    for index, raw in enumerate(parsed):
        try:
            block = ContentBlock.model_validate(raw)
        except ValidationError as e:
            problem = f"Skipped invalid block at index {index}: {e.errors(include_url=False)[0]['msg']}"
            logger.warning("%s (%d errors)", problem, e.error_count())
            result.problems.append(problem)
            continue

        if block.id in seen_ids:
            new_id = str(uuid4())
            problem = f"Duplicate block id {block.id} at index {index}, reassigned {new_id}"
            logger.warning("%s", problem)
            result.problems.append(problem)
            block = block.model_copy(update={"id": new_id})
        seen_ids.add(block.id)
        result.blocks.append(block)

    return result


def json_to_blocks(text: Any) -> list[ContentBlock]:
    """Parse persisted text into blocks; see decode_document for the fallbacks."""
    return decode_document(text).blocks


def get_plain_text_content(blocks: Sequence[ContentBlock]) -> str:
    """Newline-joined content of text, heading, quote and code blocks."""
    return "\n".join(block.content for block in blocks if block.type in PLAIN_TEXT_TYPES)
