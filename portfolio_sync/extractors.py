"""
Text Extraction - Turn feed HTML into display text.

Feed descriptions arrive as HTML fragments; the articles section needs
plain text for excerpts and reading-time estimates, plus the first inline
image as a thumbnail.
"""

import math
import re

from bs4 import BeautifulSoup

EXCERPT_LENGTH = 200
WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

# Only these entities are decoded; anything else is left as-is
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def extract_text_from_html(html: str) -> str:
    """Strip tags, decode the common entities and collapse whitespace."""
    text = _TAG_RE.sub("", html or "")
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_image_url(html: str) -> str | None:
    """Return the src of the first <img> in an HTML fragment."""
    if not html or "<img" not in html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    if img := soup.find("img", src=True):
        return img.get("src") or None
    return None


def make_excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    if len(text) > length:
        return text[:length] + "..."
    return text


def estimate_read_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Minutes to read `text`, never less than one."""
    words = len(text.split())
    return max(1, math.ceil(words / words_per_minute))
