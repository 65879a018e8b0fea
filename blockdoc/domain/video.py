import re
from dataclasses import dataclass
from urllib.parse import urlencode

from blockdoc.domain.entities import VideoMetadata, VideoPlatform

YOUTUBE_PATTERN = re.compile(r"(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)([a-zA-Z0-9_-]{11})")
VIMEO_PATTERN = re.compile(r"vimeo\.com/(\d+)")
LOOM_PATTERN = re.compile(r"loom\.com/(?:share|embed)/([a-zA-Z0-9]+)")

UNSUPPORTED_VIDEO_MESSAGE = "Unsupported video URL. Try YouTube, Vimeo, or Loom."


@dataclass(frozen=True)
class VideoEmbed:
    platform: VideoPlatform
    embed_url: str


def parse_video_url(url: str) -> VideoEmbed | None:
    """Classify a pasted URL and return its canonical embed URL, or None."""
    url = url.strip()

    match = YOUTUBE_PATTERN.search(url)
    if match:
        return VideoEmbed("youtube", f"https://www.youtube.com/embed/{match.group(1)}")

    match = VIMEO_PATTERN.search(url)
    if match:
        return VideoEmbed("vimeo", f"https://player.vimeo.com/video/{match.group(1)}")

    match = LOOM_PATTERN.search(url)
    if match:
        return VideoEmbed("loom", f"https://www.loom.com/embed/{match.group(1)}")

    return None


def _seconds(value: int | float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def embed_src(metadata: VideoMetadata | None, content: str = "") -> str | None:
    """
    The iframe src for a video block.

    Resolved from the pasted URL when it is recognised (YouTube gets
    autoplay/start/end parameters), otherwise the stored embed URL.
    None when there is nothing safe to embed.
    """
    source = metadata.url if metadata is not None and metadata.url else content
    if not source:
        return None

    parsed = parse_video_url(source)
    if parsed is None:
        fallback = content or source
        return fallback if fallback.lower().startswith("https://") else None

    if parsed.platform != "youtube" or metadata is None:
        return parsed.embed_url

    params: dict[str, str] = {}
    if metadata.autoplay:
        params["autoplay"] = "1"
    if metadata.start_time:
        params["start"] = _seconds(metadata.start_time)
    if metadata.end_time:
        params["end"] = _seconds(metadata.end_time)
    return f"{parsed.embed_url}?{urlencode(params)}" if params else parsed.embed_url
