"""fpdf2 document configured for book output."""

import logging
from datetime import datetime, timezone

from fpdf import FPDF

from bookie.core.layout import (
    CHAPTER_LINE_HEIGHT,
    DEFAULT_FONT_SIZE,
    PAGE_FORMAT,
    PAGE_MARGIN,
    PAGE_NUMBER_FONT,
    PAGE_NUMBER_SIZE,
    PAGE_NUMBER_STYLE,
    PAGE_NUMBER_Y_OFFSET,
    PAGE_ORIENTATION,
    PAGE_UNIT,
)
from bookie.models.config import BookConfig
from bookie.models.style import TextStyle

# fpdf2 and Pillow are chatty at debug level
logging.getLogger("fpdf").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)

# Fixed so that identical input produces identical bytes
REPRODUCIBLE_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)


class BookDocument(FPDF):
    """A4 portrait document with 20 mm margins and an optional page footer."""

    def __init__(self, config: BookConfig):
        super().__init__(orientation=PAGE_ORIENTATION, unit=PAGE_UNIT, format=PAGE_FORMAT)
        self.book_config = config
        # Windows-1252 instead of latin-1 so bullets and curly quotes work with core fonts
        self.core_fonts_encoding = "windows-1252"
        self.set_margins(PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN)
        self.set_auto_page_break(auto=True, margin=PAGE_MARGIN)
        self.set_creation_date(REPRODUCIBLE_DATE)
        self.set_creator("bookie")
        self.set_font(config.text_font, "", DEFAULT_FONT_SIZE)

    def footer(self) -> None:
        if not self.book_config.page_numbers:
            return
        self.set_y(PAGE_NUMBER_Y_OFFSET)
        self.set_font(PAGE_NUMBER_FONT, PAGE_NUMBER_STYLE, PAGE_NUMBER_SIZE)
        self.cell(0, CHAPTER_LINE_HEIGHT, f"Page {self.page_no()}", align="C")

    @property
    def page_height(self) -> float:
        return self.h

    def current_style(self, alignment: str = "L") -> TextStyle:
        """Snapshot of the active font."""
        return TextStyle(
            font_family=self.font_family,
            style=self.font_style,
            size_pt=self.font_size_pt,
            alignment=alignment,
        )

    def apply_style(self, style: TextStyle) -> None:
        self.set_font(style.font_family, style.style, style.size_pt)

    def to_bytes(self) -> bytes:
        return bytes(self.output())
