"""
Common behaviour of per-block editors.

An editor wraps one block and turns user actions into BlockUpdate values.
It keeps its own copy of the block current, so several actions in a row
build on each other even before the document editor applies them.
Rejected actions return None and leave the block untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from blockdoc.components.editor.models import UpdateBlockContent
from blockdoc.domain.entities import BlockMetadata, BlockType, ContentBlock
from blockdoc.rules.models import Rules


@dataclass(frozen=True)
class BlockUpdate:
    block_id: str
    content: str
    metadata: BlockMetadata | None = None

    def to_command(self) -> UpdateBlockContent:
        return UpdateBlockContent(self.block_id, self.content, self.metadata)


class BlockEditor:
    block_types: ClassVar[frozenset[BlockType]] = frozenset()

    def __init__(
        self,
        block: ContentBlock,
        *,
        is_selected: bool = False,
        is_focused: bool = False,
        rules: Rules | None = None,
    ) -> None:
        if self.block_types and block.type not in self.block_types:
            raise ValueError(f"{type(self).__name__} cannot edit '{block.type}' blocks")
        self._block = block
        self.is_selected = is_selected
        self.is_focused = is_focused
        self.rules = rules or Rules()

    @property
    def block(self) -> ContentBlock:
        return self._block

    def sync(self, block: ContentBlock) -> None:
        """Adopt the document editor's copy of the block."""
        if block.id != self._block.id:
            raise ValueError("Cannot sync an editor to a different block")
        self._block = block

    def focus(self) -> None:
        self.is_focused = True
        self.is_selected = True

    def blur(self) -> None:
        self.is_focused = False

    def _emit(self, content: str | None = None, metadata: BlockMetadata | None = None) -> BlockUpdate:
        new_content = self._block.content if content is None else content
        update: dict[str, object] = {"content": new_content}
        if metadata is not None:
            update["metadata"] = metadata
        self._block = self._block.model_copy(update=update)
        return BlockUpdate(self._block.id, new_content, metadata)
