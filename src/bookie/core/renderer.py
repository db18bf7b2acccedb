"""HTML element renderer.

Walks a BeautifulSoup tree produced from markdown and draws it on a
BookDocument. Only the tags listed in ``ElementRenderer.handlers`` produce
output; any other element is skipped together with its children.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from bs4 import PageElement, Tag

from bookie.core.document import BookDocument
from bookie.core.html_utils import (
    clean_text,
    count_previous_siblings,
    find_parent,
    get_attr,
    is_element,
    is_text,
    text_content,
)
from bookie.core.images import ImageRenderer
from bookie.core.layout import (
    BLACK,
    BLOCK_BREAK_ZONE,
    BLOCK_TRAILING_SPACE,
    BLOCKQUOTE_INDENT,
    CODE_FONT,
    CODE_FONT_SIZE,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_HEIGHT,
    HEADING_BREAK_ZONE,
    HEADING_STYLES,
    INDENT_WIDTH,
    LINK_BLUE,
    LIST_SPACING,
    PAGE_CONTENT_WIDTH,
    SPACED_ELEMENTS,
)
from bookie.core.table import TableRenderer
from bookie.core.toc import TocCollector
from bookie.models.book import Chapter
from bookie.models.config import BookConfig
from bookie.models.style import TextStyle

log = logging.getLogger(__name__)

BULLET = "\N{BULLET} "
TASK_DONE = "[x] "
TASK_OPEN = "[ ] "
UNDERLINE_OFFSET = 3.0


@dataclass
class RenderContext:
    """Where the markdown being rendered came from (used for image lookup)."""

    root_dir: Path
    chapter: Chapter | None = None
    current_file: Path | None = None


class StyleStack:
    """Saved font snapshots; every push is matched by a pop that reapplies it."""

    def __init__(self, document: BookDocument):
        self.document = document
        self.alignment = "L"
        self._saved: list[TextStyle] = []

    @property
    def depth(self) -> int:
        return len(self._saved)

    @property
    def current(self) -> TextStyle:
        return self.document.current_style(self.alignment)

    def push(self) -> TextStyle:
        snapshot = self.current
        self._saved.append(snapshot)
        return snapshot

    def pop(self) -> TextStyle:
        snapshot = self._saved.pop()
        self.apply(snapshot)
        return snapshot

    def apply(self, style: TextStyle) -> None:
        self.document.apply_style(style)
        self.alignment = style.alignment

    @contextmanager
    def scoped(self, style: TextStyle | None = None) -> Iterator[TextStyle]:
        """Apply ``style`` (if given) for the duration of the block."""
        self.push()
        try:
            if style is not None:
                self.apply(style)
            yield self.current
        finally:
            self.pop()


class ElementRenderer:
    """Draw HTML nodes onto a document.

    Args:
        document: Target document; its cursor is advanced as nodes are drawn
        config: Fonts used for body text and headings
        context: Chapter and file being rendered
        toc: Receives one entry per heading when given
    """

    def __init__(
        self,
        document: BookDocument,
        config: BookConfig,
        context: RenderContext,
        toc: TocCollector | None = None,
    ):
        self.document = document
        self.config = config
        self.context = context
        self.toc = toc
        self.styles = StyleStack(document)
        self.tables = TableRenderer(document, config.text_font)
        self.images = ImageRenderer(document, config.text_font)
        # left margin where the outermost list started
        self._list_origin: float | None = None

        self.handlers: dict[str, Callable[[Tag], None]] = {
            "body": self.render_children,
            "p": self._paragraph,
            "blockquote": self._blockquote,
            "pre": self._preformatted,
            "code": self._code,
            "ul": self._list,
            "ol": self._list,
            "li": self._list_item,
            "em": self._italic,
            "i": self._italic,
            "strong": self._bold,
            "b": self._bold,
            "u": self._underline,
            "del": self._strike,
            "s": self._strike,
            "sup": self.render_children,
            "a": self._link,
            "img": self._image,
            "hr": self._rule,
            "br": self._line_break,
            "table": self._table,
            "section": self._section,
        }
        for tag in HEADING_STYLES:
            self.handlers[tag] = self._heading

    @property
    def body_style(self) -> TextStyle:
        return TextStyle(font_family=self.config.text_font, size_pt=DEFAULT_FONT_SIZE)

    def render_body(self, body: Tag) -> None:
        """Render a parsed markdown document starting at its body element."""
        self.render_html(body)

    def render_html(self, node: PageElement) -> None:
        """Render ``node`` in body style, restoring the previous style afterwards."""
        with self.styles.scoped(self.body_style):
            self.render_node(node)

    def render_children(self, node: Tag) -> None:
        for child in list(node.children):
            self.render_node(child)

    def render_node(self, node: PageElement) -> None:
        if is_text(node):
            self._text(node)
            return
        if not is_element(node):
            # the document root is the only non-element container
            if isinstance(node, Tag):
                self.render_children(node)
            return

        if node.name in SPACED_ELEMENTS and not self._opens_list_item(node):
            self.document.ln(DEFAULT_LINE_HEIGHT)

        handler = self.handlers.get(node.name)
        if handler is None:
            log.debug(f"Skipping unsupported element <{node.name}>")
            return
        handler(node)

    # Layout helpers

    def _break_if_below(self, zone: float) -> None:
        doc = self.document
        if doc.get_y() > doc.page_height - zone:
            doc.add_page()

    @contextmanager
    def _indented(self, margin: float) -> Iterator[None]:
        """Move the left margin so wrapped lines keep the indent."""
        doc = self.document
        previous = doc.l_margin
        doc.set_left_margin(margin)
        doc.set_x(margin)
        try:
            yield
        finally:
            doc.set_left_margin(previous)
            doc.set_x(previous)

    def _opens_list_item(self, node: Tag) -> bool:
        """True for the first block of a loose list item, which shares the marker line."""
        parent = node.parent
        if parent is None or parent.name != "li" or node.name != "p":
            return False
        return count_previous_siblings(node) == 0

    # Text

    def _text(self, node: PageElement) -> None:
        preformatted = find_parent(node, "pre") is not None
        text = clean_text(str(node), preserve_whitespace=preformatted)
        if not text.strip():
            return
        self.document.write(DEFAULT_LINE_HEIGHT, text)

    # Block elements

    def _heading(self, node: Tag) -> None:
        doc = self.document
        size, space = HEADING_STYLES[node.name]
        if node.name == "h1":
            doc.add_page()
        else:
            self._break_if_below(HEADING_BREAK_ZONE)
        doc.ln(space)

        if self.toc is not None:
            title = clean_text(text_content(node)).strip()
            self.toc.record(title, int(node.name[1]))

        style = TextStyle(font_family=self.config.chapter_font, style="B", size_pt=size)
        with self.styles.scoped(style):
            self.render_children(node)
        doc.ln(2 * DEFAULT_LINE_HEIGHT)

    def _paragraph(self, node: Tag) -> None:
        doc = self.document
        self._break_if_below(BLOCK_BREAK_ZONE)
        if not self._opens_list_item(node):
            doc.ln(DEFAULT_LINE_HEIGHT / 2)

        # quoted paragraphs stay italic
        style = self.body_style
        if find_parent(node, "blockquote") is not None:
            style = style.with_flag("I")
        with self.styles.scoped(style):
            self.render_children(node)
        doc.ln(DEFAULT_LINE_HEIGHT)

    def _blockquote(self, node: Tag) -> None:
        doc = self.document
        self._break_if_below(BLOCK_BREAK_ZONE)
        with self._indented(doc.l_margin + BLOCKQUOTE_INDENT):
            with self.styles.scoped(self.body_style.with_flag("I")):
                self.render_children(node)
        doc.ln(BLOCK_TRAILING_SPACE)

    def _preformatted(self, node: Tag) -> None:
        self._break_if_below(BLOCK_BREAK_ZONE)
        style = TextStyle(font_family=CODE_FONT, size_pt=CODE_FONT_SIZE)
        with self.styles.scoped(style):
            self.render_children(node)
        self.document.ln(BLOCK_TRAILING_SPACE)

    def _code(self, node: Tag) -> None:
        if find_parent(node, "pre") is not None:
            self.render_children(node)
            return
        style = TextStyle(font_family=CODE_FONT, size_pt=CODE_FONT_SIZE)
        with self.styles.scoped(style):
            self.render_children(node)

    def _rule(self, node: Tag) -> None:
        doc = self.document
        x, y = doc.get_x(), doc.get_y()
        doc.line(x, y, x + PAGE_CONTENT_WIDTH, y)
        doc.ln(BLOCK_TRAILING_SPACE)

    def _line_break(self, node: Tag) -> None:
        self.document.ln(DEFAULT_LINE_HEIGHT)

    def _section(self, node: Tag) -> None:
        # footnote definitions; other sections are not part of the dialect
        if "footnotes" in get_attr(node, "class").split():
            self.render_children(node)

    # Lists

    def _list(self, node: Tag) -> None:
        doc = self.document
        outermost = self._list_origin is None
        if outermost:
            self._list_origin = doc.l_margin
        try:
            doc.ln(LIST_SPACING)
            self.render_children(node)
            doc.ln(LIST_SPACING)
        finally:
            if outermost:
                self._list_origin = None

    def _list_item(self, node: Tag) -> None:
        doc = self.document
        indent = INDENT_WIDTH
        if find_parent(node, "li") is not None:
            indent += INDENT_WIDTH
        origin = self._list_origin if self._list_origin is not None else doc.l_margin

        with self._indented(origin + indent):
            doc.write(DEFAULT_LINE_HEIGHT, self._list_marker(node))
            self.render_children(node)
            doc.ln(LIST_SPACING)

    def _list_marker(self, node: Tag) -> str:
        if "task-list-item" in get_attr(node, "class").split():
            checkbox = node.find("input", recursive=False)
            if checkbox is None:
                checkbox = node.find("input")
            checked = checkbox is not None and checkbox.has_attr("checked")
            return TASK_DONE if checked else TASK_OPEN

        parent = node.parent
        if parent is not None and parent.name == "ol":
            try:
                start = int(get_attr(parent, "start") or 1)
            except ValueError:
                start = 1
            return f"{start + count_previous_siblings(node)}. "
        return BULLET

    # Inline elements

    def _italic(self, node: Tag) -> None:
        with self.styles.scoped(self.styles.current.with_flag("I")):
            self.render_children(node)

    def _bold(self, node: Tag) -> None:
        with self.styles.scoped(self.styles.current.with_flag("B")):
            self.render_children(node)

    def _underline(self, node: Tag) -> None:
        self._decorate(node, UNDERLINE_OFFSET)

    def _strike(self, node: Tag) -> None:
        self._decorate(node, DEFAULT_LINE_HEIGHT / 2)

    def _decorate(self, node: Tag, offset: float) -> None:
        """Render children, then rule a line under (or through) the measured text.

        The line follows the first line only and stops at the right margin.
        """
        doc = self.document
        x, y = doc.get_x(), doc.get_y()
        width = doc.get_string_width(clean_text(text_content(node)))
        self.render_children(node)
        end = min(x + width, doc.w - doc.r_margin)
        doc.line(x, y + offset, end, y + offset)

    def _link(self, node: Tag) -> None:
        if not get_attr(node, "href"):
            self.render_children(node)
            return
        doc = self.document
        doc.set_text_color(*LINK_BLUE)
        try:
            self.render_children(node)
        finally:
            doc.set_text_color(*BLACK)

    # Delegated elements

    def _image(self, node: Tag) -> None:
        ctx = self.context
        with self.styles.scoped():
            self.images.render(node, ctx.chapter, ctx.root_dir, ctx.current_file)

    def _table(self, node: Tag) -> None:
        with self.styles.scoped():
            self.tables.render(node)
