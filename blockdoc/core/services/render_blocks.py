"""
Block Renderer Service - read-only HTML for a persisted document.

Key behaviors:
- Decodes through the codec, so corrupt documents render the default document
- Escapes every user string; text block HTML goes through the sanitizer
- Emits semantic class names only (align-*, size-*, aspect-*, border-*)
- Image sources limited to http(s), relative paths and data:image/
- Unknown languages render as escaped plain text
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from blockdoc.core.services.codec import get_plain_text_content, json_to_blocks
from blockdoc.core.services.highlight import highlight_code
from blockdoc.core.services.richtext import RichTextConfig, sanitize_html
from blockdoc.domain.blocks import PLAIN_TEXT_TYPES
from blockdoc.domain.entities import (
    BlockType,
    CodeMetadata,
    ContentBlock,
    ImageMetadata,
    QuizMetadata,
    QuizQuestion,
    TableCell,
    TableMetadata,
    TextMetadata,
    VideoMetadata,
)
from blockdoc.domain.quiz import QuizProgress, correct_option_id, is_answer_correct, score_answers
from blockdoc.domain.sanitize import strip_tags
from blockdoc.domain.video import embed_src

# --- Configuration ---


@dataclass(frozen=True)
class RenderConfig:
    """Rendering configuration."""

    rich_text_config: RichTextConfig | None = None
    code_block_class: str = "code-block"
    image_loading: str = "lazy"  # lazy, eager

    # Reader state for interactive quiz blocks, keyed by block id
    quiz_progress: Mapping[str, QuizProgress] = field(default_factory=dict)


DEFAULT_RENDER_CONFIG = RenderConfig()

EMPTY_DOCUMENT_HTML = '<p class="block-empty">No content</p>'

IFRAME_ALLOW = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"


def _escape(text: str) -> str:
    """Escape HTML special characters."""
    return html.escape(text)


def _classes(*names: str | None) -> str:
    return " ".join(name for name in names if name)


# --- URL / attribute checks ---

_URL_NOISE = re.compile(r"[\x00-\x20\x7f]+")
_SCHEME = re.compile(r"^([a-z][a-z0-9+.-]*):")
_SAFE_COLOR = re.compile(r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]+|rgba?\([\d\s.,%]+\))$")


def is_safe_image_src(src: str) -> bool:
    """http(s), data:image/ or a relative reference."""
    normalized = _URL_NOISE.sub("", src).lower()
    if not normalized:
        return False
    if normalized.startswith("data:image/"):
        return True
    scheme = _SCHEME.match(normalized)
    if scheme is None:
        return True
    return scheme.group(1) in ("http", "https")


# --- Block Renderers ---


def render_text(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a rich text paragraph."""
    if not strip_tags(block.content).strip():
        return ""
    metadata = block.metadata if isinstance(block.metadata, TextMetadata) else TextMetadata()
    sanitized, _ = sanitize_html(block.content, config.rich_text_config or RichTextConfig())
    css = _classes(
        "block-text",
        f"align-{metadata.alignment or 'left'}",
        f"list-{metadata.list_type or 'none'}",
        "is-checked" if metadata.list_type == "checklist" and metadata.checked else None,
    )
    return f'<div class="{css}">{sanitized}</div>'


def _heading_renderer(level: int) -> Callable[[ContentBlock, RenderConfig], str]:
    def render_heading(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
        return f'<h{level} class="block-heading">{_escape(block.content)}</h{level}>'

    render_heading.__name__ = f"render_heading{level}"
    return render_heading


def render_quote(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a block quote."""
    if not block.content:
        return ""
    return f'<blockquote class="block-quote">{_escape(block.content)}</blockquote>'


def render_divider(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a horizontal rule."""
    return '<hr class="block-divider" />'


def render_image(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render an image as a figure."""
    metadata = block.metadata
    if not isinstance(metadata, ImageMetadata) or not metadata.src:
        return ""
    if not is_safe_image_src(metadata.src):
        return ""

    parts = [f'src="{_escape(metadata.src.strip())}"']
    parts.append(f'alt="{_escape(metadata.alt or "")}"')
    parts.append(f'class="radius-{metadata.border_radius or "medium"}"')
    if metadata.width:
        parts.append(f'width="{_escape(str(metadata.width))}"')
    if metadata.height:
        parts.append(f'height="{_escape(str(metadata.height))}"')
    parts.append(f'loading="{config.image_loading}"')

    figure_class = _classes(
        "block-image",
        f"size-{metadata.size or 'large'}",
        f"align-{metadata.alignment or 'center'}",
    )
    caption = (
        f'<figcaption class="image-caption">{_escape(metadata.caption)}</figcaption>'
        if metadata.caption
        else ""
    )
    return f'<figure class="{figure_class}"><img {" ".join(parts)} />{caption}</figure>'


def render_video(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a video embed."""
    metadata = block.metadata if isinstance(block.metadata, VideoMetadata) else None
    src = embed_src(metadata, block.content)
    if src is None:
        return ""
    aspect = (metadata.aspect_ratio if metadata else None) or "16:9"
    return (
        f'<div class="block-video aspect-{aspect.replace(":", "-")}">'
        f'<iframe src="{_escape(src)}" allow="{IFRAME_ALLOW}" allowfullscreen></iframe>'
        f"</div>"
    )


def render_code(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a code block with highlighting and optional line numbers."""
    metadata = block.metadata if isinstance(block.metadata, CodeMetadata) else None
    language = (metadata.language if metadata else None) or "plaintext"
    safe_lang = _escape(language)

    header = ""
    if metadata and metadata.filename:
        header = f'<div class="code-filename">{_escape(metadata.filename)}</div>'

    gutter = ""
    if metadata and metadata.show_line_numbers:
        numbers = "\n".join(str(i) for i in range(1, len(block.content.split("\n")) + 1))
        gutter = f'<span class="code-gutter" aria-hidden="true">{numbers}</span>'

    pre_class = _classes(
        config.code_block_class,
        "line-numbers" if gutter else None,
    )
    theme = (metadata.theme if metadata else None) or "dark"
    return (
        f'<div class="block-code theme-{theme}">{header}'
        f'<pre class="{pre_class}" data-language="{safe_lang}">{gutter}'
        f'<code class="language-{safe_lang}">{highlight_code(block.content, language)}</code>'
        f"</pre></div>"
    )


def _render_question(
    index: int,
    question: QuizQuestion,
    progress: QuizProgress,
) -> str:
    answer = progress.answers.get(question.id)
    checked = progress.checked
    outcome = None
    if checked and question.type != "short-answer":
        outcome = "correct" if is_answer_correct(question, answer) else "incorrect"

    parts = [f'<div class="{_classes("quiz-question", outcome)}">']
    parts.append(f'<p class="quiz-prompt">{index}. {_escape(question.question)}</p>')

    if question.type == "multiple-choice":
        right = correct_option_id(question)
        items = []
        for option in question.options or []:
            css = _classes(
                "quiz-option",
                "selected" if answer == option.id else None,
                "correct" if checked and option.id == right else None,
                "wrong" if checked and answer == option.id and option.id != right else None,
            )
            items.append(f'<li class="{css}">{_escape(option.text)}</li>')
        parts.append(f'<ul class="quiz-options">{"".join(items)}</ul>')
    elif question.type == "true-false":
        items = []
        for value, label in (("true", "True"), ("false", "False")):
            css = _classes(
                "quiz-option",
                "selected" if answer == value else None,
                "correct" if checked and question.correct_answer == value else None,
                "wrong" if checked and answer == value and question.correct_answer != value else None,
            )
            items.append(f'<li class="{css}">{label}</li>')
        parts.append(f'<ul class="quiz-options">{"".join(items)}</ul>')
    else:
        parts.append(f'<p class="quiz-answer">{_escape(answer or "")}</p>')

    if checked and question.explanation:
        parts.append(f'<p class="quiz-explanation">{_escape(question.explanation)}</p>')

    parts.append("</div>")
    return "".join(parts)


def render_quiz(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a read-only quiz, with results once the reader has checked answers."""
    metadata = block.metadata if isinstance(block.metadata, QuizMetadata) else QuizMetadata()
    if not metadata.questions:
        return '<div class="block-quiz"><p class="quiz-empty">No questions in this quiz</p></div>'

    progress = config.quiz_progress.get(block.id, QuizProgress())
    parts = ['<div class="block-quiz">']
    if progress.checked:
        score = score_answers(metadata.questions, progress.answers)
        parts.append(
            f'<div class="quiz-score">Score: {score.correct}/{score.total} ({score.percentage}%)</div>'
        )
    for index, question in enumerate(metadata.questions, start=1):
        parts.append(_render_question(index, question, progress))
    parts.append("</div>")
    return "".join(parts)


def _render_cell(cell: TableCell, tag: str) -> str:
    attrs = []
    if cell.alignment:
        attrs.append(f'class="align-{cell.alignment}"')
    if cell.row_span and cell.row_span > 1:
        attrs.append(f'rowspan="{cell.row_span}"')
    if cell.col_span and cell.col_span > 1:
        attrs.append(f'colspan="{cell.col_span}"')
    if cell.background_color and _SAFE_COLOR.match(cell.background_color):
        attrs.append(f'style="background-color: {cell.background_color}"')
    opening = f"<{tag} {' '.join(attrs)}>" if attrs else f"<{tag}>"
    return f"{opening}{_escape(cell.content)}</{tag}>"


def render_table(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a read-only table."""
    metadata = block.metadata
    if not isinstance(metadata, TableMetadata) or not metadata.rows:
        return ""

    head = ""
    body_rows = []
    for row_index, row in enumerate(metadata.rows):
        is_header = bool(metadata.has_header) and row_index == 0
        cells = "".join(_render_cell(cell, "th" if is_header else "td") for cell in row)
        if is_header:
            head = f"<thead><tr>{cells}</tr></thead>"
            continue
        alternate = metadata.alternating_colors and row_index > 0 and row_index % 2 == 0
        body_rows.append(f'<tr class="row-alt">{cells}</tr>' if alternate else f"<tr>{cells}</tr>")

    border = metadata.border_style or "solid"
    return (
        f'<div class="block-table"><table class="border-{border}">'
        f"{head}<tbody>{''.join(body_rows)}</tbody></table></div>"
    )


# --- Block Type Dispatch ---

# Every block type must appear here.
BLOCK_RENDERERS: dict[BlockType, Callable[[ContentBlock, RenderConfig], str]] = {
    "text": render_text,
    "heading1": _heading_renderer(1),
    "heading2": _heading_renderer(2),
    "heading3": _heading_renderer(3),
    "image": render_image,
    "video": render_video,
    "code": render_code,
    "divider": render_divider,
    "quote": render_quote,
    "quiz": render_quiz,
    "table": render_table,
}


def render_block(block: ContentBlock, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a single block."""
    return BLOCK_RENDERERS[block.type](block, config)


def render_blocks(
    blocks: Sequence[ContentBlock],
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> str:
    """Render an already-decoded block list."""
    if not blocks:
        return EMPTY_DOCUMENT_HTML
    inner = "".join(render_block(block, config) for block in blocks)
    return f'<div class="block-document">{inner}</div>'


# --- Main Rendering Functions ---


def render_document(
    text: str,
    config: RenderConfig | None = None,
    quiz_progress: Mapping[str, QuizProgress] | None = None,
) -> str:
    """
    Render a persisted document to HTML.

    Args:
        text: Persisted document JSON
        config: Rendering configuration
        quiz_progress: Reader answers per quiz block id

    Returns:
        Rendered HTML string
    """
    cfg = config or DEFAULT_RENDER_CONFIG
    if quiz_progress is not None:
        cfg = replace(cfg, quiz_progress=quiz_progress)
    return render_blocks(json_to_blocks(text), cfg)


def extract_text(text: str) -> str:
    """Readable text of a persisted document; text block markup is stripped."""
    blocks = json_to_blocks(text)
    lines = [
        strip_tags(block.content).strip() if block.type == "text" else block.content
        for block in blocks
        if block.type in PLAIN_TEXT_TYPES
    ]
    return "\n".join(line for line in lines if line)


def excerpt(text: str, max_length: int = 160) -> str:
    """
    Short summary of a persisted document.

    Breaks at word boundary if possible.
    """
    flat = " ".join(extract_text(text).split())
    if len(flat) <= max_length:
        return flat

    truncated = flat[:max_length]
    last_space = truncated.rfind(" ")

    if last_space > max_length * 0.6:
        truncated = truncated[:last_space]

    return truncated.rstrip() + "..."


# --- Block Renderer Service ---


class BlockRenderer:
    """
    Block renderer service.

    Renders persisted documents to HTML.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or DEFAULT_RENDER_CONFIG

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, text: str, quiz_progress: Mapping[str, QuizProgress] | None = None) -> str:
        """Render document to HTML."""
        return render_document(text, self._config, quiz_progress)

    def plain_text(self, text: str) -> str:
        """Plain-text projection as counted by the editor."""
        return get_plain_text_content(json_to_blocks(text))

    def extract_text(self, text: str) -> str:
        return extract_text(text)

    def excerpt(self, text: str, max_length: int = 160) -> str:
        return excerpt(text, max_length)


# --- Factory ---


def create_block_renderer(config: RenderConfig | None = None) -> BlockRenderer:
    """Create a BlockRenderer."""
    return BlockRenderer(config=config)
