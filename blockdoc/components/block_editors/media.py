from __future__ import annotations

import base64
from typing import ClassVar

from blockdoc.core.services.richtext import is_safe_url
from blockdoc.domain.entities import (
    AspectRatio,
    BlockType,
    BorderRadius,
    ImageMetadata,
    ImageSize,
    TextAlignment,
    VideoMetadata,
)
from blockdoc.domain.video import UNSUPPORTED_VIDEO_MESSAGE, VideoEmbed, embed_src, parse_video_url

from .base import BlockEditor, BlockUpdate


class ImageEditor(BlockEditor):
    """Image by upload (stored inline as a data URL) or by link."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["image"])

    @property
    def metadata(self) -> ImageMetadata:
        metadata = self.block.metadata
        return metadata if isinstance(metadata, ImageMetadata) else ImageMetadata(src="")

    @property
    def has_image(self) -> bool:
        return bool(self.metadata.src)

    def _update(self, **changes: object) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update=changes))

    def upload(self, data: bytes, mime_type: str) -> BlockUpdate | None:
        mime_type = mime_type.strip().lower()
        if not data or not mime_type.startswith("image/"):
            return None
        encoded = base64.b64encode(data).decode("ascii")
        return self._update(src=f"data:{mime_type};base64,{encoded}")

    def embed_url(self, url: str) -> BlockUpdate | None:
        url = url.strip()
        # data: is allowed only through upload()
        if not url or not is_safe_url(url) or url.lower().startswith("data:"):
            return None
        return self._update(src=url)

    def remove_image(self) -> BlockUpdate:
        return self._update(src="")

    def set_size(self, size: ImageSize) -> BlockUpdate:
        return self._update(size=size)

    def set_alignment(self, alignment: TextAlignment) -> BlockUpdate:
        return self._update(alignment=alignment)

    def set_border_radius(self, radius: BorderRadius) -> BlockUpdate:
        return self._update(border_radius=radius)

    def set_alt(self, alt: str) -> BlockUpdate:
        return self._update(alt=alt or None)

    def set_caption(self, caption: str) -> BlockUpdate:
        return self._update(caption=caption or None)

    def set_dimensions(self, width: int | None = None, height: int | None = None) -> BlockUpdate | None:
        if (width is not None and width <= 0) or (height is not None and height <= 0):
            return None
        return self._update(width=width, height=height)


class VideoEditor(BlockEditor):
    """Video embed from a pasted YouTube, Vimeo or Loom URL."""

    block_types: ClassVar[frozenset[BlockType]] = frozenset(["video"])

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.error = ""

    @staticmethod
    def parse_video_url(url: str) -> VideoEmbed | None:
        return parse_video_url(url)

    @property
    def metadata(self) -> VideoMetadata:
        metadata = self.block.metadata
        return metadata if isinstance(metadata, VideoMetadata) else VideoMetadata(url="")

    @property
    def has_video(self) -> bool:
        return bool(self.block.content)

    def embed_src(self) -> str | None:
        return embed_src(self.metadata, self.block.content)

    def submit_url(self, url: str) -> BlockUpdate | None:
        url = url.strip()
        parsed = parse_video_url(url)
        if parsed is None:
            self.error = UNSUPPORTED_VIDEO_MESSAGE
            return None
        self.error = ""
        metadata = self.metadata.model_copy(update={"url": url, "platform": parsed.platform})
        return self._emit(parsed.embed_url, metadata)

    def remove_video(self) -> BlockUpdate:
        self.error = ""
        return self._emit("", self.metadata.model_copy(update={"url": "", "platform": None}))

    def _update(self, **changes: object) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update=changes))

    def set_aspect_ratio(self, ratio: AspectRatio) -> BlockUpdate:
        return self._update(aspect_ratio=ratio)

    def set_autoplay(self, autoplay: bool) -> BlockUpdate:
        return self._update(autoplay=autoplay)

    def set_start_time(self, seconds: int | None) -> BlockUpdate | None:
        if seconds is not None and seconds < 0:
            return None
        return self._update(start_time=seconds or None)

    def set_end_time(self, seconds: int | None) -> BlockUpdate | None:
        if seconds is not None and seconds < 0:
            return None
        start = self.metadata.start_time
        if seconds and start and seconds <= start:
            return None
        return self._update(end_time=seconds or None)
