import html
import re

_TAG = re.compile(r"<[^>]*>")
_LINE_BREAK = re.compile(r"<\s*(br|/p|/div|/li|/blockquote)\b[^>]*>", re.IGNORECASE)


def strip_tags(content: str) -> str:
    """Visible text of an HTML fragment, entities decoded, nbsp as space."""
    text = _LINE_BREAK.sub("\n", content)
    text = _TAG.sub("", text)
    return html.unescape(text).replace("\xa0", " ")


def is_blank(content: str) -> bool:
    """
    True when the fragment shows nothing to a reader.
    Contenteditable hosts leave `<br>` or `&nbsp;` behind in emptied blocks.
    """
    if not content:
        return True
    return not strip_tags(content).strip()


def to_plain_text(content: str) -> str:
    """Collapse host markup into the single-line text headings and quotes store."""
    return " ".join(strip_tags(content).split()) if "<" in content or "&" in content else content
