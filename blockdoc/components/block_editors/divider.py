from typing import ClassVar

from blockdoc.domain.entities import BlockType

from .base import BlockEditor


class DividerEditor(BlockEditor):
    """Horizontal rule. Nothing to edit; it can only take focus."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["divider"])
