"""
Render blocks component - persisted document to read-only HTML.

Invariants:
- Output never contains unescaped user text
- Text block HTML is sanitized with the configured allow-list
- A corrupt document renders as the default document, never an error
"""

from __future__ import annotations

from blockdoc.core.services.render_blocks import (
    RenderConfig,
    create_block_renderer,
)
from blockdoc.rules.loader import richtext_config
from blockdoc.rules.models import Rules

from .models import (
    ExcerptInput,
    ExtractTextInput,
    RenderDocumentInput,
    RenderDocumentOutput,
    TextOutput,
)


def build_render_config(rules: Rules | None) -> RenderConfig:
    """Build render config from rules."""
    if rules is None:
        return RenderConfig()
    return RenderConfig(
        rich_text_config=richtext_config(rules.richtext),
        code_block_class=rules.render.code_block_class,
        image_loading=rules.render.image_loading,
    )


# --- Component Entry Points ---


def run_render(
    inp: RenderDocumentInput,
    *,
    rules: Rules | None = None,
) -> RenderDocumentOutput:
    """
    Render a persisted document to HTML.

    Args:
        inp: Input containing the document JSON and reader quiz state.
        rules: Optional rules for configuration.

    Returns:
        RenderDocumentOutput with rendered HTML.
    """
    renderer = create_block_renderer(build_render_config(rules))
    html = renderer.render(inp.content, quiz_progress=inp.quiz_progress)
    return RenderDocumentOutput(html=html, errors=[], success=True)


def run_extract_text(
    inp: ExtractTextInput,
    *,
    rules: Rules | None = None,
) -> TextOutput:
    """Extract readable text from a persisted document."""
    renderer = create_block_renderer(build_render_config(rules))
    return TextOutput(text=renderer.extract_text(inp.content), errors=[], success=True)


def run_excerpt(
    inp: ExcerptInput,
    *,
    rules: Rules | None = None,
) -> TextOutput:
    """Word-boundary excerpt of a persisted document."""
    if inp.max_length < 1:
        return TextOutput(text="", errors=["max_length must be positive"], success=False)
    renderer = create_block_renderer(build_render_config(rules))
    return TextOutput(text=renderer.excerpt(inp.content, inp.max_length), errors=[], success=True)


def run(
    inp: RenderDocumentInput | ExtractTextInput | ExcerptInput,
    *,
    rules: Rules | None = None,
) -> RenderDocumentOutput | TextOutput:
    """
    Main entry point for the render blocks component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, RenderDocumentInput):
        return run_render(inp, rules=rules)
    elif isinstance(inp, ExtractTextInput):
        return run_extract_text(inp, rules=rules)
    elif isinstance(inp, ExcerptInput):
        return run_excerpt(inp, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
