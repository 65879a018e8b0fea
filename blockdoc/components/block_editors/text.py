from __future__ import annotations

from typing import ClassVar

from blockdoc.core.services.richtext import is_safe_url
from blockdoc.domain.entities import BlockType, ListType, TextAlignment, TextMetadata
from blockdoc.domain.sanitize import is_blank, to_plain_text

from .base import BlockEditor, BlockUpdate
from .ports import RichTextHostPort

FORMATTING_COMMANDS = frozenset(
    [
        "bold",
        "italic",
        "underline",
        "strikeThrough",
        "createLink",
        "unlink",
        "removeFormat",
        "insertUnorderedList",
        "insertOrderedList",
        "justifyLeft",
        "justifyCenter",
        "justifyRight",
        "justifyFull",
    ]
)

JUSTIFY_ALIGNMENT: dict[str, TextAlignment] = {
    "justifyLeft": "left",
    "justifyCenter": "center",
    "justifyRight": "right",
    "justifyFull": "justify",
}

LIST_COMMANDS: dict[str, ListType] = {
    "insertUnorderedList": "bullet",
    "insertOrderedList": "numbered",
}


class TextEditor(BlockEditor):
    """Rich text paragraph. Formatting is delegated to the host surface."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["text"])
    placeholder = "Type '/' for commands..."

    def __init__(self, *args, host: RichTextHostPort | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.host = host

    @property
    def metadata(self) -> TextMetadata:
        metadata = self.block.metadata
        return metadata if isinstance(metadata, TextMetadata) else TextMetadata()

    @property
    def is_empty(self) -> bool:
        return is_blank(self.block.content)

    def edit(self, content: str) -> BlockUpdate:
        return self._emit(content, self.metadata)

    def set_alignment(self, alignment: TextAlignment) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"alignment": alignment}))

    def set_list_type(self, list_type: ListType) -> BlockUpdate:
        update: dict[str, object] = {"list_type": list_type}
        if list_type != "checklist":
            update["checked"] = None
        return self._emit(metadata=self.metadata.model_copy(update=update))

    def toggle_checked(self) -> BlockUpdate | None:
        if self.metadata.list_type != "checklist":
            return None
        return self._emit(metadata=self.metadata.model_copy(update={"checked": not self.metadata.checked}))

    def apply_formatting(self, command: str, value: str | None = None) -> BlockUpdate | None:
        """Run a formatting command on the host, then re-read its HTML."""
        if command not in FORMATTING_COMMANDS or self.host is None:
            return None
        if command == "createLink" and (not value or not value.strip() or not is_safe_url(value)):
            return None

        self.host.execute(command, value)
        metadata = self.metadata
        if command in JUSTIFY_ALIGNMENT:
            metadata = metadata.model_copy(update={"alignment": JUSTIFY_ALIGNMENT[command]})
        elif command in LIST_COMMANDS:
            metadata = metadata.model_copy(update={"list_type": LIST_COMMANDS[command]})
        return self._emit(self.host.read_html(), metadata)


class HeadingEditor(BlockEditor):
    """Plain-text heading."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["heading1", "heading2", "heading3"])

    @property
    def level(self) -> int:
        return int(self.block.type[-1])

    @property
    def placeholder(self) -> str:
        return f"Heading {self.level}"

    @property
    def is_empty(self) -> bool:
        return not self.block.content.strip()

    def edit(self, content: str) -> BlockUpdate:
        return self._emit(to_plain_text(content))


class QuoteEditor(BlockEditor):
    """Plain-text block quote."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["quote"])
    placeholder = "Quote"

    @property
    def is_empty(self) -> bool:
        return not self.block.content.strip()

    def edit(self, content: str) -> BlockUpdate:
        return self._emit(to_plain_text(content))
