"""Data models for the book structure."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Chapter(BaseModel):
    """An Episode directory with its markdown files and image index."""

    model_config = ConfigDict(frozen=True)

    path: Path
    files: tuple[Path, ...]
    images: dict[str, Path] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.path.name


class TOCEntry(BaseModel):
    """Single heading recorded for the table of contents."""

    title: str
    level: int = Field(ge=1, le=6)
    page_num: int = Field(ge=1)
    link: int | None = None
