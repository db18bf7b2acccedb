"""Data models."""

from bookie.models.book import (
    Chapter,
    TOCEntry,
)
from bookie.models.config import (
    BookConfig,
    default_toc_levels,
    normalize_font,
)
from bookie.models.style import (
    TextStyle,
)

__all__ = [
    # Book models
    "Chapter",
    "TOCEntry",
    # Styling
    "TextStyle",
    # Configuration
    "BookConfig",
    "default_toc_levels",
    "normalize_font",
]
