"""
Editor component models - editor state and commands.

State is an immutable value; every command produces a new state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from blockdoc.domain.entities import BlockMetadata, BlockType, ContentBlock

# --- State ---


@dataclass(frozen=True)
class CommandMenuState:
    """Slash-command menu anchored at one block."""

    is_open: bool = False
    block_id: str | None = None
    position: tuple[int, int] = (0, 0)
    search_query: str = ""
    highlighted_index: int = 0


@dataclass(frozen=True)
class EditorState:
    """
    The ordered block list plus focus, selection, menu and preview flags.

    At most one block is focused and at most one is selected.
    """

    blocks: tuple[ContentBlock, ...]
    selected_block_id: str | None = None
    focused_block_id: str | None = None
    command_menu: CommandMenuState = field(default_factory=CommandMenuState)
    preview_mode: bool = False

    def index_of(self, block_id: str | None) -> int:
        """Position of the block, -1 when absent."""
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        return -1

    def get(self, block_id: str | None) -> ContentBlock | None:
        index = self.index_of(block_id)
        return self.blocks[index] if index >= 0 else None


# --- Structural commands ---


@dataclass(frozen=True)
class InsertBlockAfter:
    anchor_id: str
    block_type: BlockType = "text"


@dataclass(frozen=True)
class DeleteBlock:
    block_id: str


@dataclass(frozen=True)
class DuplicateBlock:
    block_id: str


@dataclass(frozen=True)
class MoveBlockUp:
    block_id: str


@dataclass(frozen=True)
class MoveBlockDown:
    block_id: str


@dataclass(frozen=True)
class ConvertBlockType:
    block_id: str
    new_type: BlockType


@dataclass(frozen=True)
class UpdateBlockContent:
    block_id: str
    content: str
    metadata: BlockMetadata | None = None


@dataclass(frozen=True)
class ReorderBlocks:
    """Drag-and-drop: move the block at from_index so it lands at to_index."""

    from_index: int
    to_index: int


# --- Focus / selection ---


@dataclass(frozen=True)
class FocusBlock:
    block_id: str


@dataclass(frozen=True)
class BlurEditor:
    pass


@dataclass(frozen=True)
class SelectBlock:
    block_id: str | None


# --- Keyboard ---


@dataclass(frozen=True)
class KeyDown:
    """A key press inside a block's editing surface."""

    block_id: str
    key: str
    shift: bool = False
    ctrl: bool = False
    meta: bool = False
    caret_at_start: bool = True
    position: tuple[int, int] = (0, 0)  # where a menu opened by this key should appear


# --- Command menu ---


@dataclass(frozen=True)
class OpenCommandMenu:
    block_id: str
    position: tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class UpdateCommandMenuQuery:
    query: str


@dataclass(frozen=True)
class CommandMenuKey:
    key: str


@dataclass(frozen=True)
class ConfirmCommandMenu:
    """Pick a type from the menu; None picks the highlighted entry."""

    block_type: BlockType | None = None


@dataclass(frozen=True)
class CloseCommandMenu:
    pass


# --- Mode ---


@dataclass(frozen=True)
class TogglePreview:
    pass


EditorCommand = (
    InsertBlockAfter
    | DeleteBlock
    | DuplicateBlock
    | MoveBlockUp
    | MoveBlockDown
    | ConvertBlockType
    | UpdateBlockContent
    | ReorderBlocks
    | FocusBlock
    | BlurEditor
    | SelectBlock
    | KeyDown
    | OpenCommandMenu
    | UpdateCommandMenuQuery
    | CommandMenuKey
    | ConfirmCommandMenu
    | CloseCommandMenu
    | TogglePreview
)

STRUCTURAL_COMMANDS = (
    InsertBlockAfter,
    DeleteBlock,
    DuplicateBlock,
    MoveBlockUp,
    MoveBlockDown,
    ConvertBlockType,
    UpdateBlockContent,
    ReorderBlocks,
    KeyDown,
    OpenCommandMenu,
    ConfirmCommandMenu,
)


# --- Output ---


@dataclass(frozen=True)
class KeyResult:
    """Whether the editor consumed a key; hosts suppress the default action when it did."""

    handled: bool


@dataclass(frozen=True)
class EditorOutput:
    """Result of dispatching one command."""

    state: EditorState
    handled: bool = True
    blocks_changed: bool = False
