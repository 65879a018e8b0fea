from __future__ import annotations

from typing import ClassVar

from blockdoc.core.services.highlight import highlight_code
from blockdoc.domain.entities import BlockType, CodeMetadata, CodeTheme

from .base import BlockEditor, BlockUpdate
from .ports import ClipboardPort


class CodeEditor(BlockEditor):
    """Source code with a language, optional filename and line numbers."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["code"])
    placeholder = "// Write your code here..."

    @property
    def metadata(self) -> CodeMetadata:
        metadata = self.block.metadata
        if isinstance(metadata, CodeMetadata):
            return metadata
        return CodeMetadata(language=self.rules.code.default_language)

    @property
    def supported_languages(self) -> list[str]:
        return list(self.rules.code.supported_languages)

    def edit(self, content: str) -> BlockUpdate:
        return self._emit(content, self.metadata)

    def indent(self, selection_start: int, selection_end: int | None = None) -> tuple[BlockUpdate, int]:
        """
        Tab key: replace the selection with the indent string.

        Returns the update and the caret position after the inserted indent.
        """
        content = self.block.content
        end = selection_start if selection_end is None else selection_end
        start, end = sorted((max(0, selection_start), max(0, end)))
        start, end = min(start, len(content)), min(end, len(content))
        indent = self.rules.editor.indent
        update = self._emit(content[:start] + indent + content[end:], self.metadata)
        return update, start + len(indent)

    def set_language(self, language: str) -> BlockUpdate | None:
        if language not in self.rules.code.supported_languages:
            return None
        return self._emit(metadata=self.metadata.model_copy(update={"language": language}))

    def set_filename(self, filename: str) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"filename": filename.strip() or None}))

    def toggle_line_numbers(self) -> BlockUpdate:
        current = bool(self.metadata.show_line_numbers)
        return self._emit(metadata=self.metadata.model_copy(update={"show_line_numbers": not current}))

    def set_theme(self, theme: CodeTheme) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"theme": theme}))

    def copy(self, clipboard: ClipboardPort) -> None:
        """Copy the raw source, never the highlighted markup."""
        clipboard.write_text(self.block.content)

    def highlighted(self) -> str:
        return highlight_code(self.block.content, self.metadata.language)

    def line_numbers(self) -> list[int]:
        return list(range(1, len(self.block.content.split("\n")) + 1))
