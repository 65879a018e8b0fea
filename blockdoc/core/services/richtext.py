"""
Rich text sanitizer for `text` block HTML.

Text blocks hold whatever markup the host's formatting surface produced
(bold, italic, lists, links). Before that markup is shown to a reader it is
reduced to an allow-list of tags and attributes.

Key behaviors:
- Unknown tags are unwrapped, their text stays
- script/style/iframe/object/embed/template are removed with their bodies
- Comments are removed
- Text between tags is escaped, so a removed tag never splices a new one
- Links lose forbidden-protocol hrefs and gain rel="noopener noreferrer"
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

# Markup the editor's formatting commands can produce.
EDITOR_TAGS = (
    "p", "div", "br", "span",
    "b", "strong", "i", "em", "u", "s", "strike", "del", "sub", "sup",
    "code", "pre", "blockquote",
    "ul", "ol", "li",
    "a",
)

FORBIDDEN_PROTOCOLS = ("javascript:", "vbscript:", "data:")


@dataclass(frozen=True)
class RichTextConfig:
    allow_tags: frozenset[str] = field(default_factory=lambda: frozenset(EDITOR_TAGS))
    # tag -> attributes kept on it; tags not listed keep none
    allow_attrs: dict[str, frozenset[str]] = field(
        default_factory=lambda: {"a": frozenset({"href", "title"})}
    )
    add_noopener: bool = True
    add_noreferrer: bool = True
    forbid_protocols: frozenset[str] = field(default_factory=lambda: frozenset(FORBIDDEN_PROTOCOLS))


DEFAULT_CONFIG = RichTextConfig()


@dataclass
class SanitizerFinding:
    """Something the sanitizer removed."""

    code: str  # stripped_tag | stripped_attribute | unsafe_url
    message: str


# --- Links ---

# Browsers ignore whitespace and control characters inside a scheme.
_SCHEME_NOISE = re.compile(r"[\x00-\x20\x7f]+")


def is_safe_url(url: str, config: RichTextConfig = DEFAULT_CONFIG) -> bool:
    """False when the URL starts with a forbidden protocol. Empty URLs are safe."""
    if not url:
        return True
    squashed = _SCHEME_NOISE.sub("", url).lower()
    return not any(squashed.startswith(protocol) for protocol in config.forbid_protocols)


def sanitize_url(url: str, config: RichTextConfig = DEFAULT_CONFIG) -> str | None:
    return url.strip() if is_safe_url(url, config) else None


def build_link_rel(config: RichTextConfig = DEFAULT_CONFIG) -> str:
    flags = (("noopener", config.add_noopener), ("noreferrer", config.add_noreferrer))
    return " ".join(name for name, enabled in flags if enabled)


# --- Markup ---

_COMMENT = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
_DANGEROUS_ELEMENT = re.compile(
    r"<(script|style|iframe|object|embed|template)\b[^>]*>.*?(?:</\1\s*>|$)",
    re.IGNORECASE | re.DOTALL,
)
_TAG = re.compile(r"<(?P<closing>/?)(?P<name>\w+)(?P<attrs>[^>]*)>")
_ATTR = re.compile(r"""([\w-]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|(\S+))""")


def _parse_attrs(raw: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for m in _ATTR.finditer(raw):
        parsed[m.group(1).lower()] = next((g for g in m.groups()[1:] if g), "")
    return parsed


class _Sanitizer:
    def __init__(self, config: RichTextConfig) -> None:
        self.config = config
        self.findings: list[SanitizerFinding] = []

    def clean(self, markup: str) -> str:
        markup = _COMMENT.sub("", markup)
        markup = _DANGEROUS_ELEMENT.sub(self._drop_element, markup)

        out: list[str] = []
        cursor = 0
        for tag in _TAG.finditer(markup):
            out.append(self._text(markup[cursor : tag.start()]))
            out.append(self._tag(tag))
            cursor = tag.end()
        out.append(self._text(markup[cursor:]))
        return "".join(out)

    def _note(self, code: str, message: str) -> None:
        self.findings.append(SanitizerFinding(code, message))

    def _text(self, run: str) -> str:
        return run.replace("<", "&lt;").replace(">", "&gt;")

    def _drop_element(self, match: re.Match[str]) -> str:
        self._note("stripped_tag", f"Element '{match.group(1).lower()}' was removed with its content")
        return ""

    def _tag(self, match: re.Match[str]) -> str:
        name = match.group("name").lower()
        if name not in self.config.allow_tags:
            self._note("stripped_tag", f"Tag '{name}' was stripped")
            return ""
        if match.group("closing"):
            return f"</{name}>"

        kept = self._attributes(name, _parse_attrs(match.group("attrs")))
        if name == "a":
            self._harden_link(kept)
        rendered = "".join(f' {attr}="{html.escape(value)}"' for attr, value in kept.items())
        return f"<{name}{rendered}>"

    def _attributes(self, tag: str, attrs: dict[str, str]) -> dict[str, str]:
        allowed = self.config.allow_attrs.get(tag, frozenset())
        kept: dict[str, str] = {}
        for attr, value in attrs.items():
            if attr in allowed:
                kept[attr] = value
            else:
                self._note("stripped_attribute", f"Attribute '{attr}' stripped from '{tag}'")
        return kept

    def _harden_link(self, attrs: dict[str, str]) -> None:
        href = attrs.get("href")
        if href is None:
            return
        safe = sanitize_url(href, self.config)
        if safe is None:
            self._note("unsafe_url", f"Unsafe URL protocol in href: {href[:50]}")
            del attrs["href"]
            return
        attrs["href"] = safe
        rel = build_link_rel(self.config)
        if rel:
            attrs["rel"] = rel


def sanitize_html(
    html_content: str,
    config: RichTextConfig = DEFAULT_CONFIG,
) -> tuple[str, list[SanitizerFinding]]:
    """
    Reduce HTML to the configured allow-list.

    Returns:
        The cleaned HTML and what was removed along the way
    """
    sanitizer = _Sanitizer(config)
    return sanitizer.clean(html_content), sanitizer.findings


class RichTextService:
    """Sanitizer bound to one configuration."""

    def __init__(self, config: RichTextConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> RichTextConfig:
        return self._config

    def sanitize_html(self, html_content: str) -> tuple[str, list[SanitizerFinding]]:
        return sanitize_html(html_content, self._config)

    def is_safe_url(self, url: str) -> bool:
        return is_safe_url(url, self._config)


def create_rich_text_service(config: RichTextConfig | None = None) -> RichTextService:
    return RichTextService(config=config)
