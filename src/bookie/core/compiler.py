"""Book compilation driver.

Lays out every chapter into a BookDocument. The first layout only collects
headings; later layouts put the table of contents in front and are repeated
until the page numbers it shows match where the headings actually landed.
"""

import logging
from pathlib import Path
from typing import Callable, Protocol

from fpdf.errors import FPDFException
from pydantic import ValidationError

from bookie.core.chapters import ChapterScanner
from bookie.core.document import BookDocument
from bookie.core.layout import DEFAULT_LINE_HEIGHT
from bookie.core.markdown import MarkdownConverter
from bookie.core.renderer import ElementRenderer, RenderContext
from bookie.core.titles import pad_to_even_page, render_chapter_title, start_chapter_page
from bookie.core.toc import TocCollector, render_toc
from bookie.errors import (
    BookError,
    BookIOError,
    CompilationCancelledError,
    EmptyChapterError,
    InvalidConfigError,
    RenderError,
)
from bookie.models.book import Chapter, TOCEntry
from bookie.models.config import BookConfig
from bookie.models.style import TextStyle

log = logging.getLogger(__name__)

FILE_SPACING = 2 * DEFAULT_LINE_HEIGHT


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


FileCallback = Callable[[Path], None]


def _page_numbers(entries: list[TOCEntry]) -> list[tuple[str, int, int]]:
    return [(e.title, e.level, e.page_num) for e in entries]


def _config_error(error: ValidationError) -> InvalidConfigError:
    messages = "; ".join(err["msg"] for err in error.errors())
    return InvalidConfigError(f"invalid configuration: {messages}")


class BookCompiler:
    """Compile the Episode chapters under ``root_dir`` into one PDF.

    Args:
        root_dir: Directory holding the ``Episode*`` chapter directories
        output_path: Where ``compile()`` writes the PDF (not needed by ``render()``)
        config: Fonts, ToC and footer settings (defaults when omitted)
    """

    def __init__(
        self,
        root_dir: Path | str,
        output_path: Path | str | None = None,
        config: BookConfig | None = None,
    ):
        # Path("") would silently become the working directory
        self.root_dir = Path(root_dir) if str(root_dir) else None
        self.output_path = Path(output_path) if output_path else None
        self.config = config.model_copy() if config is not None else BookConfig()
        self.converter = MarkdownConverter()

    # Settings

    def _update(self, **changes) -> None:
        try:
            for key, value in changes.items():
                setattr(self.config, key, value)
        except ValidationError as e:
            raise _config_error(e) from e

    def set_toc_title(self, title: str) -> None:
        self._update(toc_title=title)

    def set_page_numbers(self, enabled: bool) -> None:
        self._update(page_numbers=enabled)

    def set_chapter_font(self, font: str) -> None:
        self._update(chapter_font=font)

    def set_text_font(self, font: str) -> None:
        self._update(text_font=font)

    def set_toc_levels(self, levels: dict[int, TextStyle]) -> None:
        self._update(toc_levels=levels)

    # Compilation

    def validate(self, require_output: bool = False) -> None:
        if self.root_dir is None:
            raise InvalidConfigError("input directory not set")
        if require_output and self.output_path is None:
            raise InvalidConfigError("output path not set")

    def scan(self) -> list[Chapter]:
        self.validate()
        return ChapterScanner(self.root_dir).scan()

    def compile(
        self,
        cancel: CancelToken | None = None,
        on_file: FileCallback | None = None,
    ) -> Path:
        """Render the book and write it to ``output_path``.

        Nothing is written unless rendering succeeds.

        Returns:
            The path written
        """
        self.validate(require_output=True)
        data = self.render(cancel=cancel, on_file=on_file)
        try:
            self.output_path.write_bytes(data)
        except OSError as e:
            raise BookIOError(f"failed to write {self.output_path}: {e}") from e

        log.info(f"Wrote {len(data):,} bytes to {self.output_path}")
        return self.output_path

    def render(
        self,
        cancel: CancelToken | None = None,
        on_file: FileCallback | None = None,
    ) -> bytes:
        """Lay out the whole book and return the PDF bytes."""
        self.validate()
        chapters = self.scan()
        log.info(f"Compiling {len(chapters)} chapter(s) from {self.root_dir}")

        document, entries = self.layout(chapters, None, cancel, on_file)
        log.debug(f"Collected {len(entries)} ToC entries")
        if not self.config.toc_styles:
            return document.to_bytes()

        passes = self.config.max_layout_passes
        for attempt in range(1, passes + 1):
            document, recorded = self.layout(chapters, entries, cancel, on_file)
            if _page_numbers(recorded) == _page_numbers(entries):
                log.debug(f"ToC page numbers settled after {attempt} layout(s)")
                break
            entries = recorded
        else:
            log.warning(f"ToC page numbers still moving after {passes} layouts")

        return document.to_bytes()

    def collect_toc(self, chapters: list[Chapter] | None = None) -> list[TOCEntry]:
        """Headings of the book as laid out without a ToC section."""
        if chapters is None:
            chapters = self.scan()
        _, entries = self.layout(chapters, None)
        return entries

    def layout(
        self,
        chapters: list[Chapter],
        toc_entries: list[TOCEntry] | None,
        cancel: CancelToken | None = None,
        on_file: FileCallback | None = None,
    ) -> tuple[BookDocument, list[TOCEntry]]:
        """Lay out all chapters, preceded by a ToC when ``toc_entries`` is given."""
        document = BookDocument(self.config)
        links = []
        if toc_entries is not None:
            links = render_toc(document, toc_entries, self.config)
        toc = TocCollector(document, links)
        renderer = ElementRenderer(document, self.config, RenderContext(self.root_dir), toc=toc)

        for index, chapter in enumerate(chapters):
            # the previous chapter ends on an even page
            if index > 0:
                pad_to_even_page(document)
            try:
                self.process_chapter(renderer, chapter, cancel, on_file)
            except CompilationCancelledError:
                raise
            except (BookError, FPDFException, OSError) as e:
                raise RenderError(f"failed to process chapter {chapter.name}", e) from e

        return document, toc.entries

    def process_chapter(
        self,
        renderer: ElementRenderer,
        chapter: Chapter,
        cancel: CancelToken | None = None,
        on_file: FileCallback | None = None,
    ) -> None:
        if not chapter.files:
            raise EmptyChapterError()

        document = renderer.document
        start_chapter_page(document)
        render_chapter_title(document, chapter.path, self.config.chapter_font)

        for index, path in enumerate(chapter.files):
            if cancel is not None and cancel.is_set():
                raise CompilationCancelledError()
            if on_file is not None:
                on_file(path)

            try:
                self.process_file(renderer, chapter, path)
            except (BookError, FPDFException, OSError) as e:
                raise RenderError(f"failed to process file {path.name}", e) from e

            if index < len(chapter.files) - 1:
                document.ln(FILE_SPACING)

        document.ln(FILE_SPACING)

    def process_file(self, renderer: ElementRenderer, chapter: Chapter, path: Path) -> None:
        try:
            source = path.read_bytes()
        except OSError as e:
            raise BookIOError(f"failed to read file: {e}") from e

        body = self.converter.convert(source)
        renderer.context = RenderContext(root_dir=self.root_dir, chapter=chapter, current_file=path)
        renderer.render_body(body)
