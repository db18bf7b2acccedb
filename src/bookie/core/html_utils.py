"""Helpers for walking BeautifulSoup trees and classifying file names."""

import re
from pathlib import Path

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from bookie.core.layout import TAB_WIDTH

MARKDOWN_EXT = ".md"
IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".gif"}
JPEG_EXTS = {".jpg", ".jpeg"}

# Characters the core fonts cannot show, mapped to close equivalents
SPECIAL_REPLACEMENTS = {
    "\N{HYPHEN}": "-",
    "\N{NON-BREAKING HYPHEN}": "-",
    "\N{FIGURE DASH}": "-",
    "\N{HORIZONTAL BAR}": "--",
    "\N{LEFTWARDS ARROW}": "<-",
    "\N{RIGHTWARDS ARROW}": "->",
    "\N{LEFT RIGHT ARROW}": "<->",
    "\N{LEFTWARDS ARROW WITH HOOK}": "",
    "\N{MINUS SIGN}": "-",
    "\N{CHECK MARK}": "v",
    "\N{HEAVY CHECK MARK}": "v",
    "\N{BALLOT X}": "x",
    "\N{ZERO WIDTH SPACE}": "",
    "\N{VARIATION SELECTOR-15}": "",
    "\N{VARIATION SELECTOR-16}": "",
}
_SPECIAL_RE = re.compile("|".join(map(re.escape, SPECIAL_REPLACEMENTS)))
_WHITESPACE_RE = re.compile(r"\s+")


def is_text(node: PageElement) -> bool:
    """True for plain text nodes (comments, doctypes and CDATA excluded)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_element(node: PageElement) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def text_content(node: PageElement | None) -> str:
    """Concatenate every text node under ``node`` in document order."""
    if node is None:
        return ""
    if is_text(node):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    return "".join(str(s) for s in node.descendants if is_text(s))


def get_attr(node: PageElement | None, key: str) -> str:
    """Attribute value as a string, or "" when absent."""
    if not isinstance(node, Tag) or not key:
        return ""
    value = node.get(key)
    if value is None:
        return ""
    if isinstance(value, list):
        # multi-valued attributes such as class
        return " ".join(value)
    return str(value)


def find_parent(node: PageElement | None, tag: str) -> Tag | None:
    """Nearest ancestor element named ``tag``."""
    if node is None or not tag:
        return None
    return node.find_parent(tag)


def count_previous_siblings(node: PageElement | None) -> int:
    """Number of element siblings before ``node``; text and comments are ignored."""
    if node is None:
        return 0
    return sum(1 for s in node.previous_siblings if is_element(s))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def clean_text(text: str, preserve_whitespace: bool = False) -> str:
    """Prepare text for a core font.

    Whitespace runs collapse to one space unless ``preserve_whitespace`` is set
    (preformatted blocks, where tabs expand instead). Characters outside
    Windows-1252 are mapped through SPECIAL_REPLACEMENTS or replaced by "?".
    """
    if not text:
        return ""
    if preserve_whitespace:
        text = text.replace("\r\n", "\n").expandtabs(TAB_WIDTH)
    else:
        text = collapse_whitespace(text)
    text = _SPECIAL_RE.sub(lambda m: SPECIAL_REPLACEMENTS[m.group(0)], text)
    return text.encode("cp1252", "replace").decode("cp1252")


def is_markdown_file(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith(MARKDOWN_EXT)


def is_image_file(path: Path | str) -> bool:
    """Extensions indexed during discovery (rendering accepts JPEG only)."""
    return Path(path).suffix.lower() in IMAGE_EXTS


def is_jpeg_image(path: Path | str) -> bool:
    if not path:
        return False
    return Path(path).suffix.lower() in JPEG_EXTS
