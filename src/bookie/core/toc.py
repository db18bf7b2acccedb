"""Table of contents: heading collection and the contents section."""

from bookie.core.document import BookDocument
from bookie.core.html_utils import clean_text
from bookie.core.layout import (
    CHAPTER_LINE_HEIGHT,
    CHAPTER_SPACING,
    CHAPTER_TITLE_SIZE,
    CHAPTER_TITLE_STYLE,
    INDENT_WIDTH,
    TOC_LINE_HEIGHT,
)
from bookie.models.book import TOCEntry
from bookie.models.config import BookConfig

ELLIPSIS = "..."


class TocCollector:
    """Record a ToC entry for every heading as it is laid out.

    ``links`` holds link ids allocated before the content was laid out (the ToC
    section already points at them); the k-th recorded heading binds the k-th
    link. Headings beyond the planned ones get a fresh link.
    """

    def __init__(self, document: BookDocument, links: list[int] | None = None):
        self.document = document
        self.links = list(links or [])
        self.entries: list[TOCEntry] = []

    def record(self, title: str, level: int) -> TOCEntry:
        doc = self.document
        index = len(self.entries)
        link = self.links[index] if index < len(self.links) else doc.add_link()
        doc.set_link(link, y=doc.get_y(), page=doc.page_no())

        entry = TOCEntry(title=title, level=level, page_num=doc.page_no(), link=link)
        self.entries.append(entry)
        return entry


def fit_text(document: BookDocument, text: str, width: float) -> str:
    """Truncate ``text`` with an ellipsis until it fits ``width``."""
    if document.get_string_width(text) <= width:
        return text
    while text and document.get_string_width(text + ELLIPSIS) > width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS


def render_toc(document: BookDocument, entries: list[TOCEntry], config: BookConfig) -> list[int]:
    """Emit the contents section and return one link id per entry.

    Nothing is drawn when ``config.toc_styles`` is empty. Links start out on
    the contents page; TocCollector moves each one to its heading.
    """
    levels = config.toc_styles
    if not levels:
        return []

    # fpdf2 refuses links that have no page assigned
    document.add_page()
    links = [document.add_link() for _ in entries]
    document.set_font(config.chapter_font, CHAPTER_TITLE_STYLE, CHAPTER_TITLE_SIZE)
    document.cell(0, CHAPTER_LINE_HEIGHT, clean_text(config.toc_title), align="C")
    document.ln(CHAPTER_SPACING)

    for entry, link in zip(entries, links):
        style = levels.get(entry.level)
        if style is None:
            continue

        document.set_font(style.font_family, style.style, style.size_pt)
        indent = (entry.level - 1) * INDENT_WIDTH
        page = str(entry.page_num)
        page_width = document.get_string_width(page) + 2
        title_width = document.epw - indent - page_width

        document.set_x(document.l_margin + indent)
        title = fit_text(document, clean_text(entry.title), title_width)
        document.cell(title_width, TOC_LINE_HEIGHT, title, align=style.alignment, link=link)
        document.cell(page_width, TOC_LINE_HEIGHT, page, align="R", link=link)
        document.ln(TOC_LINE_HEIGHT)

    return links
