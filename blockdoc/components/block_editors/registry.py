from blockdoc.domain.entities import BlockType, ContentBlock
from blockdoc.rules.models import Rules

from .base import BlockEditor
from .code import CodeEditor
from .divider import DividerEditor
from .media import ImageEditor, VideoEditor
from .quiz import QuizEditor
from .table import TableEditor
from .text import HeadingEditor, QuoteEditor, TextEditor

# Every block type must appear here.
EDITORS: dict[BlockType, type[BlockEditor]] = {
    "text": TextEditor,
    "heading1": HeadingEditor,
    "heading2": HeadingEditor,
    "heading3": HeadingEditor,
    "image": ImageEditor,
    "video": VideoEditor,
    "code": CodeEditor,
    "divider": DividerEditor,
    "quote": QuoteEditor,
    "quiz": QuizEditor,
    "table": TableEditor,
}


def editor_for(
    block: ContentBlock,
    *,
    is_selected: bool = False,
    is_focused: bool = False,
    rules: Rules | None = None,
) -> BlockEditor:
    """Editor instance for the block's type."""
    return EDITORS[block.type](block, is_selected=is_selected, is_focused=is_focused, rules=rules)
