"""Compiler configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookie.models.style import TextStyle

DEFAULT_FONT = "Helvetica"

# PDF core fonts available without embedding
CORE_FONTS = {
    "courier": "Courier",
    "helvetica": "Helvetica",
    "times": "Times",
    "symbol": "Symbol",
    "zapfdingbats": "ZapfDingbats",
}
FONT_ALIASES = {"arial": "Helvetica"}


def normalize_font(name: str) -> str:
    """Map a family name to its canonical core font spelling."""
    key = (name or "").strip().lower()
    if key in FONT_ALIASES:
        return FONT_ALIASES[key]
    if key not in CORE_FONTS:
        supported = ", ".join(sorted(CORE_FONTS.values()))
        raise ValueError(f"unsupported font family {name!r} (core fonts: {supported})")
    return CORE_FONTS[key]


def default_toc_levels(
    chapter_font: str = DEFAULT_FONT, text_font: str = DEFAULT_FONT
) -> dict[int, TextStyle]:
    return {
        1: TextStyle(font_family=chapter_font, style="B", size_pt=14),
        2: TextStyle(font_family=text_font, size_pt=12),
        3: TextStyle(font_family=text_font, style="I", size_pt=11),
    }


class BookConfig(BaseModel):
    """Settings for one compilation."""

    model_config = ConfigDict(validate_assignment=True)

    toc_title: str = "Contents"
    page_numbers: bool = True
    chapter_font: str = DEFAULT_FONT
    text_font: str = DEFAULT_FONT
    # None means the default levels, drawn in the configured fonts
    toc_levels: dict[int, TextStyle] | None = None
    max_layout_passes: int = Field(default=3, ge=1)

    @field_validator("chapter_font", "text_font")
    @classmethod
    def _core_font(cls, value: str) -> str:
        return normalize_font(value)

    @field_validator("toc_levels")
    @classmethod
    def _valid_levels(cls, value: dict[int, TextStyle] | None) -> dict[int, TextStyle] | None:
        if value is None:
            return value
        for level, style in value.items():
            if not 1 <= level <= 6:
                raise ValueError(f"ToC level must be between 1 and 6, got {level}")
            normalize_font(style.font_family)
        return value

    @property
    def toc_styles(self) -> dict[int, TextStyle]:
        """Style per ToC level; an empty map means no ToC section."""
        if self.toc_levels is None:
            return default_toc_levels(self.chapter_font, self.text_font)
        return self.toc_levels
