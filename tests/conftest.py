"""Shared test fixtures for the bookie test suite."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image
from pypdf import PdfReader

from bookie.core.document import BookDocument
from bookie.core.markdown import MarkdownConverter
from bookie.core.renderer import ElementRenderer, RenderContext
from bookie.models.config import BookConfig


class RecordingDocument(BookDocument):
    """BookDocument that keeps a log of the drawing calls tests care about."""

    def __init__(self, config: BookConfig | None = None):
        super().__init__(config or BookConfig())
        self.rects: list[tuple[float, float, float, float, str | None]] = []
        self.fill_colors: list[tuple] = []
        self.text_colors: list[tuple] = []
        self.lines: list[tuple[float, float, float, float]] = []
        self.writes: list[tuple[float, str]] = []

    def rect(self, x, y, w, h, style=None, *args, **kwargs):
        self.rects.append((x, y, w, h, style))
        return super().rect(x, y, w, h, style, *args, **kwargs)

    def set_fill_color(self, r, g=-1, b=-1):
        self.fill_colors.append((r, g, b))
        return super().set_fill_color(r, g, b)

    def set_text_color(self, r, g=-1, b=-1):
        self.text_colors.append((r, g, b))
        return super().set_text_color(r, g, b)

    def line(self, x1, y1, x2, y2):
        self.lines.append((x1, y1, x2, y2))
        return super().line(x1, y1, x2, y2)

    def write(self, h=None, text="", *args, **kwargs):
        self.writes.append((self.get_x(), text))
        return super().write(h, text, *args, **kwargs)


@pytest.fixture
def config() -> BookConfig:
    return BookConfig()


@pytest.fixture
def document(config: BookConfig) -> RecordingDocument:
    doc = RecordingDocument(config)
    doc.add_page()
    return doc


@pytest.fixture
def converter() -> MarkdownConverter:
    return MarkdownConverter()


@pytest.fixture
def render_markdown(
    document: RecordingDocument,
    config: BookConfig,
    converter: MarkdownConverter,
    tmp_path: Path,
) -> Callable[..., ElementRenderer]:
    """Render a markdown snippet into the shared document."""

    def _render(source: str, context: RenderContext | None = None, toc=None) -> ElementRenderer:
        renderer = ElementRenderer(document, config, context or RenderContext(tmp_path), toc=toc)
        renderer.render_body(converter.convert(source))
        return renderer

    return _render


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a small solid-colour image; the format follows the file extension."""

    def _make(path: Path, size: tuple[int, int] = (40, 20)) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(200, 30, 30)).save(path)
        return path

    return _make


@pytest.fixture
def make_book(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Build a book tree from {relative path: content} under ``tmp_path/book``."""

    def _make(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "book"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def pdf_pages() -> Callable[[bytes], list[str]]:
    """Extract the text of every page of a PDF."""

    def _pages(data: bytes) -> list[str]:
        reader = PdfReader(io.BytesIO(data))
        return [page.extract_text() or "" for page in reader.pages]

    return _pages
