"""
Editor component - document editing, keyboard policy and draft autosave.
"""

from .autosave import DebouncedSaver
from .component import (
    apply,
    can_convert,
    character_count,
    highlighted_item,
    initial_state,
    meets_minimum,
    menu_items,
    run,
)
from .models import (
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
from .ports import DocumentStorePort, NotifierPort, SchedulerPort, TimerHandle
from .session import DocumentEditorSession

__all__ = [
    # Entry points
    "apply",
    "run",
    "initial_state",
    "character_count",
    "meets_minimum",
    "can_convert",
    "menu_items",
    "highlighted_item",
    # State
    "EditorState",
    "CommandMenuState",
    "EditorOutput",
    "KeyResult",
    # Commands
    "EditorCommand",
    "InsertBlockAfter",
    "DeleteBlock",
    "DuplicateBlock",
    "MoveBlockUp",
    "MoveBlockDown",
    "ConvertBlockType",
    "UpdateBlockContent",
    "ReorderBlocks",
    "FocusBlock",
    "BlurEditor",
    "SelectBlock",
    "KeyDown",
    "OpenCommandMenu",
    "UpdateCommandMenuQuery",
    "CommandMenuKey",
    "ConfirmCommandMenu",
    "CloseCommandMenu",
    "TogglePreview",
    # Session
    "DocumentEditorSession",
    "DebouncedSaver",
    # Ports
    "DocumentStorePort",
    "NotifierPort",
    "SchedulerPort",
    "TimerHandle",
]
