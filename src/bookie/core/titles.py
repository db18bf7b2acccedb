"""Chapter title pages and chapter separation."""

from pathlib import Path

from bookie.core.document import BookDocument
from bookie.core.html_utils import clean_text
from bookie.core.layout import (
    CHAPTER_LINE_HEIGHT,
    CHAPTER_SPACING,
    CHAPTER_TITLE_SIZE,
    CHAPTER_TITLE_STYLE,
)

EPISODE_PREFIX = "Episode"


def format_chapter_title(path: Path | str) -> str:
    """``Episode07`` -> ``Episode 07``; ``Episode 3 - Pilot`` -> ``Episode 3 - Pilot``."""
    base = Path(path).name
    if base.startswith(EPISODE_PREFIX):
        base = base[len(EPISODE_PREFIX):]
    return f"{EPISODE_PREFIX} {base.strip()}"


def render_chapter_title(document: BookDocument, path: Path, font: str) -> str:
    """Write the chapter title centred on the current line."""
    title = clean_text(format_chapter_title(path))
    document.set_font(font, CHAPTER_TITLE_STYLE, CHAPTER_TITLE_SIZE)
    width = document.get_string_width(title)
    document.set_x((document.w - width) / 2)
    document.cell(width, CHAPTER_LINE_HEIGHT, title)
    document.ln(CHAPTER_SPACING)
    return title


def start_chapter_page(document: BookDocument) -> None:
    """Every chapter opens on a fresh page with some head room."""
    document.add_page()
    document.ln(CHAPTER_SPACING)


def pad_to_even_page(document: BookDocument) -> bool:
    """Add a blank page when the chapter ended on an odd page number."""
    if document.page_no() % 2 != 0:
        document.add_page()
        return True
    return False
