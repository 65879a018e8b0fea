"""
Render blocks component - read-only HTML projection of a persisted document.
"""

from blockdoc.core.services.render_blocks import (
    BLOCK_RENDERERS,
    BlockRenderer,
    RenderConfig,
    excerpt,
    extract_text,
    render_block,
    render_document,
)

from .component import (
    build_render_config,
    run,
    run_excerpt,
    run_extract_text,
    run_render,
)
from .models import (
    ExcerptInput,
    ExtractTextInput,
    RenderDocumentInput,
    RenderDocumentOutput,
    TextOutput,
)

__all__ = [
    # Entry points
    "run",
    "run_render",
    "run_extract_text",
    "run_excerpt",
    "build_render_config",
    # Input models
    "RenderDocumentInput",
    "ExtractTextInput",
    "ExcerptInput",
    # Output models
    "RenderDocumentOutput",
    "TextOutput",
    # Service
    "BLOCK_RENDERERS",
    "BlockRenderer",
    "RenderConfig",
    "excerpt",
    "extract_text",
    "render_block",
    "render_document",
]
