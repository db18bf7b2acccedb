"""Image lookup and placement."""

import logging
from pathlib import Path
from urllib.parse import unquote

from bs4 import Tag
from PIL import Image

from bookie.core.document import BookDocument
from bookie.core.html_utils import clean_text, get_attr, is_jpeg_image
from bookie.core.layout import (
    CAPTION_FONT_SIZE,
    DEFAULT_LINE_HEIGHT,
    IMAGE_BREAK_ZONE,
    IMAGE_CAPTION_GAP,
    IMAGE_WIDTH,
)
from bookie.errors import BookIOError, ImageNotFoundError, UnsupportedImageFormatError
from bookie.models.book import Chapter

log = logging.getLogger(__name__)


def candidate_paths(
    src: str,
    chapter: Chapter | None,
    root_dir: Path,
    current_file: Path | None,
) -> list[Path]:
    """Lookup order: chapter image index, src as given, root-relative, file-relative."""
    candidates: list[Path] = []
    if chapter is not None and src in chapter.images:
        candidates.append(chapter.images[src])
    candidates.append(Path(src))
    candidates.append(root_dir / src)
    if current_file is not None:
        candidates.append(current_file.parent / src)
    return candidates


def resolve_image_path(
    src: str,
    chapter: Chapter | None,
    root_dir: Path,
    current_file: Path | None,
) -> Path:
    """First existing candidate for ``src``."""
    for path in candidate_paths(src, chapter, root_dir, current_file):
        if path.is_file():
            return path
    raise ImageNotFoundError(f"image not found: {src}")


class ImageRenderer:
    """Place JPEG images at a fixed width with an optional italic caption."""

    def __init__(self, document: BookDocument, text_font: str):
        self.document = document
        self.text_font = text_font
        # path -> pixel size (width, height)
        self.image_cache: dict[Path, tuple[int, int]] = {}

    def render(
        self,
        node: Tag,
        chapter: Chapter | None,
        root_dir: Path,
        current_file: Path | None,
    ) -> None:
        src = unquote(get_attr(node, "src"))
        if not src:
            return

        path = resolve_image_path(src, chapter, root_dir, current_file)
        if not is_jpeg_image(path):
            raise UnsupportedImageFormatError(f"unsupported image format: {path}")

        width_px, height_px = self.register(path)
        scaled_height = height_px * IMAGE_WIDTH / width_px

        doc = self.document
        if doc.get_y() + scaled_height > doc.page_height - IMAGE_BREAK_ZONE:
            doc.add_page()

        x, y = doc.get_x(), doc.get_y()
        doc.image(str(path), x=x, y=y, w=IMAGE_WIDTH)
        doc.set_y(y + scaled_height + IMAGE_CAPTION_GAP)

        alt = clean_text(get_attr(node, "alt")).strip()
        if alt:
            doc.set_font(self.text_font, "I", CAPTION_FONT_SIZE)
            doc.write(DEFAULT_LINE_HEIGHT, alt)
            doc.ln(DEFAULT_LINE_HEIGHT)

        doc.ln(DEFAULT_LINE_HEIGHT)

    def register(self, path: Path) -> tuple[int, int]:
        """Read and cache the pixel size of ``path``."""
        if path in self.image_cache:
            return self.image_cache[path]

        try:
            with Image.open(path) as img:
                size = img.size
        except OSError as e:
            raise BookIOError(f"failed to load image {path}: {e}") from e

        if size[0] <= 0 or size[1] <= 0:
            raise BookIOError(f"image has no pixels: {path}")

        log.debug(f"Registered image {path} ({size[0]}x{size[1]})")
        self.image_cache[path] = size
        return size
