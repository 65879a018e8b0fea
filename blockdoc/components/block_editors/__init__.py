"""
Per-block editors - one editing surface per block type.

Each editor turns user actions into BlockUpdate values that the document
editor applies with UpdateBlockContent.
"""

from .base import BlockEditor, BlockUpdate
from .code import CodeEditor
from .divider import DividerEditor
from .media import ImageEditor, VideoEditor
from .ports import ClipboardPort, RichTextHostPort
from .quiz import QuizEditor, QuizSession
from .registry import EDITORS, editor_for
from .table import CellPosition, TableEditor
from .text import FORMATTING_COMMANDS, HeadingEditor, QuoteEditor, TextEditor

__all__ = [
    "EDITORS",
    "editor_for",
    "BlockEditor",
    "BlockUpdate",
    "TextEditor",
    "HeadingEditor",
    "QuoteEditor",
    "FORMATTING_COMMANDS",
    "ImageEditor",
    "VideoEditor",
    "CodeEditor",
    "QuizEditor",
    "QuizSession",
    "TableEditor",
    "CellPosition",
    "DividerEditor",
    "ClipboardPort",
    "RichTextHostPort",
]
