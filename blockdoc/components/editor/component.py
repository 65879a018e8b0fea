"""
Editor component - ordered block list editing as pure state transitions.

Every operation takes an EditorState and returns a new one. Guarded edits
(unknown ids, boundary moves, illegal conversions) return the input state
unchanged, so callers can compare by identity to detect a no-op.

Invariants:
- A document always has at least one block; deleting the last one clears it
- Block ids stay unique; duplicates get a fresh id
- At most one focused block and at most one selected block
- Conversion only within the prose family
- While in preview mode the block list cannot change
"""

from __future__ import annotations

from dataclasses import replace

from blockdoc.core.services.codec import get_plain_text_content
from blockdoc.domain.blocks import BLOCK_TYPE_INFO, PROSE_TYPES, create_block, get_default_blocks
from blockdoc.domain.entities import (
    BLOCK_TYPES,
    BlockType,
    ContentBlock,
    metadata_matches,
    now_ms,
)
from blockdoc.domain.sanitize import is_blank

from .models import (
    STRUCTURAL_COMMANDS,
    BlurEditor,
    CloseCommandMenu,
    CommandMenuKey,
    CommandMenuState,
    ConfirmCommandMenu,
    ConvertBlockType,
    DeleteBlock,
    DuplicateBlock,
    EditorCommand,
    EditorOutput,
    EditorState,
    FocusBlock,
    InsertBlockAfter,
    KeyDown,
    KeyResult,
    MoveBlockDown,
    MoveBlockUp,
    OpenCommandMenu,
    ReorderBlocks,
    SelectBlock,
    TogglePreview,
    UpdateBlockContent,
    UpdateCommandMenuQuery,
)

COMMAND_TRIGGER = "/"

# Block types whose editing surface is a caret; the others carry their payload
# in metadata and handle their own keys.
KEYBOARD_TYPES: frozenset[BlockType] = PROSE_TYPES | {"code"}


def initial_state(blocks: list[ContentBlock] | tuple[ContentBlock, ...] | None = None) -> EditorState:
    """Editable state for a block list; an empty list becomes the default document."""
    return EditorState(blocks=tuple(blocks) if blocks else tuple(get_default_blocks()))


def _replace_block(state: EditorState, index: int, block: ContentBlock) -> tuple[ContentBlock, ...]:
    return state.blocks[:index] + (block,) + state.blocks[index + 1 :]


def _swap(state: EditorState, first: int, second: int) -> EditorState:
    blocks = list(state.blocks)
    blocks[first], blocks[second] = blocks[second], blocks[first]
    return replace(state, blocks=tuple(blocks))


# --- Structural edits ---


def run_insert_after(state: EditorState, cmd: InsertBlockAfter) -> EditorState:
    index = state.index_of(cmd.anchor_id)
    if index < 0:
        return state
    new_block = create_block(cmd.block_type)
    blocks = state.blocks[: index + 1] + (new_block,) + state.blocks[index + 1 :]
    return replace(
        state,
        blocks=blocks,
        selected_block_id=new_block.id,
        focused_block_id=new_block.id,
    )


def run_delete(state: EditorState, cmd: DeleteBlock) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index < 0:
        return state

    if len(state.blocks) == 1:
        block = state.blocks[0]
        cleared = block.model_copy(update={"content": "", "updated_at": now_ms()})
        return replace(state, blocks=(cleared,))

    blocks = state.blocks[:index] + state.blocks[index + 1 :]
    focus_target = blocks[index - 1] if index > 0 else blocks[0]
    selected = None if state.selected_block_id == cmd.block_id else state.selected_block_id
    return replace(
        state,
        blocks=blocks,
        focused_block_id=focus_target.id,
        selected_block_id=selected,
    )


def run_duplicate(state: EditorState, cmd: DuplicateBlock) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index < 0:
        return state
    source = state.blocks[index]
    copy = create_block(source.type, source.content, source.metadata)
    blocks = state.blocks[: index + 1] + (copy,) + state.blocks[index + 1 :]
    return replace(state, blocks=blocks, focused_block_id=copy.id)


def run_move_up(state: EditorState, cmd: MoveBlockUp) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index <= 0:
        return state
    return _swap(state, index - 1, index)


def run_move_down(state: EditorState, cmd: MoveBlockDown) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index < 0 or index >= len(state.blocks) - 1:
        return state
    return _swap(state, index, index + 1)


def can_convert(source: BlockType, target: BlockType) -> bool:
    return source in PROSE_TYPES and target in PROSE_TYPES


def run_convert(state: EditorState, cmd: ConvertBlockType) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index < 0:
        return state
    block = state.blocks[index]
    if block.type == cmd.new_type or not can_convert(block.type, cmd.new_type):
        return state
    metadata = block.metadata if cmd.new_type == "text" else None
    converted = block.model_copy(
        update={"type": cmd.new_type, "metadata": metadata, "updated_at": now_ms()}
    )
    return replace(state, blocks=_replace_block(state, index, converted))


def run_update_content(state: EditorState, cmd: UpdateBlockContent) -> EditorState:
    index = state.index_of(cmd.block_id)
    if index < 0:
        return state
    block = state.blocks[index]
    if not metadata_matches(block.type, cmd.metadata):
        return state
    update: dict[str, object] = {"content": cmd.content, "updated_at": now_ms()}
    if cmd.metadata is not None:
        update["metadata"] = cmd.metadata
    return replace(state, blocks=_replace_block(state, index, block.model_copy(update=update)))


def run_reorder(state: EditorState, cmd: ReorderBlocks) -> EditorState:
    count = len(state.blocks)
    if not (0 <= cmd.from_index < count and 0 <= cmd.to_index < count):
        return state
    if cmd.from_index == cmd.to_index:
        return state
    blocks = list(state.blocks)
    moved = blocks.pop(cmd.from_index)
    blocks.insert(cmd.to_index, moved)
    return replace(state, blocks=tuple(blocks))


# --- Focus / selection ---


def run_focus(state: EditorState, cmd: FocusBlock) -> EditorState:
    if state.index_of(cmd.block_id) < 0:
        return state
    return replace(state, focused_block_id=cmd.block_id, selected_block_id=cmd.block_id)


def run_blur(state: EditorState, cmd: BlurEditor) -> EditorState:
    return replace(state, focused_block_id=None)


def run_select(state: EditorState, cmd: SelectBlock) -> EditorState:
    if cmd.block_id is not None and state.index_of(cmd.block_id) < 0:
        return state
    return replace(state, selected_block_id=cmd.block_id)


# --- Command menu ---


def menu_items(query: str = "") -> list[BlockType]:
    """Block types offered by the command menu, filtered by label, description or type name."""
    needle = query.strip().lower()
    if not needle:
        return list(BLOCK_TYPES)
    return [
        block_type
        for block_type in BLOCK_TYPES
        if needle in BLOCK_TYPE_INFO[block_type].label.lower()
        or needle in BLOCK_TYPE_INFO[block_type].description.lower()
        or needle in block_type
    ]


def highlighted_item(state: EditorState) -> BlockType | None:
    items = menu_items(state.command_menu.search_query)
    if not items:
        return None
    return items[state.command_menu.highlighted_index % len(items)]


def run_open_menu(state: EditorState, cmd: OpenCommandMenu) -> EditorState:
    if state.index_of(cmd.block_id) < 0:
        return state
    return replace(
        state,
        command_menu=CommandMenuState(is_open=True, block_id=cmd.block_id, position=cmd.position),
    )


def run_menu_query(state: EditorState, cmd: UpdateCommandMenuQuery) -> EditorState:
    if not state.command_menu.is_open:
        return state
    menu = replace(state.command_menu, search_query=cmd.query, highlighted_index=0)
    return replace(state, command_menu=menu)


def run_close_menu(state: EditorState, cmd: CloseCommandMenu | None = None) -> EditorState:
    if not state.command_menu.is_open:
        return state
    return replace(state, command_menu=replace(state.command_menu, is_open=False))


def run_confirm_menu(state: EditorState, cmd: ConfirmCommandMenu) -> EditorState:
    menu = state.command_menu
    if not menu.is_open:
        return state
    chosen = cmd.block_type or highlighted_item(state)
    anchor_index = state.index_of(menu.block_id)
    if chosen is None or anchor_index < 0:
        return run_close_menu(state)

    anchor = state.blocks[anchor_index]
    if anchor.type in PROSE_TYPES and is_blank(anchor.content):
        # An empty prose block is replaced in place, keeping its identity.
        fresh = create_block(chosen)
        turned = fresh.model_copy(update={"id": anchor.id, "created_at": anchor.created_at})
        new_state = replace(
            state,
            blocks=_replace_block(state, anchor_index, turned),
            focused_block_id=anchor.id,
            selected_block_id=anchor.id,
        )
    else:
        new_state = run_insert_after(state, InsertBlockAfter(anchor.id, chosen))
    return run_close_menu(new_state)


def run_menu_key(state: EditorState, cmd: CommandMenuKey) -> EditorOutput:
    menu = state.command_menu
    if not menu.is_open:
        return EditorOutput(state=state, handled=False)

    count = len(menu_items(menu.search_query))
    if cmd.key == "ArrowDown":
        index = (menu.highlighted_index + 1) % count if count else 0
        return EditorOutput(state=replace(state, command_menu=replace(menu, highlighted_index=index)))
    if cmd.key == "ArrowUp":
        index = (menu.highlighted_index - 1) % count if count else 0
        return EditorOutput(state=replace(state, command_menu=replace(menu, highlighted_index=index)))
    if cmd.key == "Enter":
        return EditorOutput(state=run_confirm_menu(state, ConfirmCommandMenu()))
    if cmd.key == "Escape":
        return EditorOutput(state=run_close_menu(state))
    return EditorOutput(state=state, handled=False)


# --- Keyboard policy ---


def run_keydown(state: EditorState, cmd: KeyDown) -> EditorOutput:
    """
    Block-level keyboard policy.

    `/` on an empty block opens the command menu; Enter (without Shift)
    starts a new text block except inside code; Backspace/Delete on an
    empty block removes it unless it is the only one; Ctrl/Cmd+ArrowUp/Down
    move the block. Keys from image, video, divider, quiz and table blocks and
    anything else are left to the host.
    """
    if state.command_menu.is_open and cmd.key in ("ArrowDown", "ArrowUp", "Enter", "Escape"):
        return run_menu_key(state, CommandMenuKey(cmd.key))

    block = state.get(cmd.block_id)
    if block is None or block.type not in KEYBOARD_TYPES:
        return EditorOutput(state=state, handled=False)

    empty = is_blank(block.content)

    if cmd.key == COMMAND_TRIGGER and empty:
        return EditorOutput(state=run_open_menu(state, OpenCommandMenu(block.id, cmd.position)))

    if cmd.key == "Enter" and not cmd.shift:
        if block.type == "code":
            return EditorOutput(state=state, handled=False)
        return EditorOutput(state=run_insert_after(state, InsertBlockAfter(block.id, "text")))

    if cmd.key in ("Backspace", "Delete") and empty and cmd.caret_at_start and len(state.blocks) > 1:
        return EditorOutput(state=run_delete(state, DeleteBlock(block.id)))

    if cmd.ctrl or cmd.meta:
        if cmd.key == "ArrowUp":
            return EditorOutput(state=run_move_up(state, MoveBlockUp(block.id)))
        if cmd.key == "ArrowDown":
            return EditorOutput(state=run_move_down(state, MoveBlockDown(block.id)))

    return EditorOutput(state=state, handled=False)


def key_result(output: EditorOutput) -> KeyResult:
    return KeyResult(handled=output.handled)


# --- Mode ---


def run_toggle_preview(state: EditorState, cmd: TogglePreview) -> EditorState:
    return replace(
        state,
        preview_mode=not state.preview_mode,
        focused_block_id=None,
        command_menu=replace(state.command_menu, is_open=False),
    )


# --- Helpers ---


def character_count(state: EditorState) -> int:
    """Length of the plain-text projection."""
    return len(get_plain_text_content(state.blocks))


def meets_minimum(state: EditorState, min_chars: int) -> bool:
    return character_count(state) >= min_chars


# --- Dispatch ---


def run(state: EditorState, command: EditorCommand) -> EditorOutput:
    """
    Main entry point for the editor component.

    Dispatches to the handler for the command type and reports whether
    the block list changed.
    """
    if state.preview_mode and isinstance(command, STRUCTURAL_COMMANDS):
        return EditorOutput(state=state, handled=False)

    if isinstance(command, KeyDown):
        output = run_keydown(state, command)
    elif isinstance(command, CommandMenuKey):
        output = run_menu_key(state, command)
    else:
        output = EditorOutput(state=_apply_simple(state, command))

    return replace(output, blocks_changed=output.state.blocks is not state.blocks)


def _apply_simple(state: EditorState, command: EditorCommand) -> EditorState:
    if isinstance(command, InsertBlockAfter):
        return run_insert_after(state, command)
    elif isinstance(command, DeleteBlock):
        return run_delete(state, command)
    elif isinstance(command, DuplicateBlock):
        return run_duplicate(state, command)
    elif isinstance(command, MoveBlockUp):
        return run_move_up(state, command)
    elif isinstance(command, MoveBlockDown):
        return run_move_down(state, command)
    elif isinstance(command, ConvertBlockType):
        return run_convert(state, command)
    elif isinstance(command, UpdateBlockContent):
        return run_update_content(state, command)
    elif isinstance(command, ReorderBlocks):
        return run_reorder(state, command)
    elif isinstance(command, FocusBlock):
        return run_focus(state, command)
    elif isinstance(command, BlurEditor):
        return run_blur(state, command)
    elif isinstance(command, SelectBlock):
        return run_select(state, command)
    elif isinstance(command, OpenCommandMenu):
        return run_open_menu(state, command)
    elif isinstance(command, UpdateCommandMenuQuery):
        return run_menu_query(state, command)
    elif isinstance(command, ConfirmCommandMenu):
        return run_confirm_menu(state, command)
    elif isinstance(command, CloseCommandMenu):
        return run_close_menu(state, command)
    elif isinstance(command, TogglePreview):
        return run_toggle_preview(state, command)
    else:
        raise ValueError(f"Unknown command type: {type(command)}")


def apply(state: EditorState, command: EditorCommand) -> EditorState:
    """Apply one command and return the next state."""
    return run(state, command).state
