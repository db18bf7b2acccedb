"""Discover Episode chapter directories under a book root."""

import logging
import os
import re
from pathlib import Path

from bookie.core.html_utils import is_image_file, is_markdown_file
from bookie.core.titles import EPISODE_PREFIX
from bookie.errors import BookIOError, InvalidConfigError, NoChaptersError
from bookie.models.book import Chapter

log = logging.getLogger(__name__)

EPISODE_NUMBER_PATTERN = re.compile(r"Episode\s*(\d+)")


def extract_episode_number(path: Path | str) -> int:
    """Episode number from the basename of ``path``, 0 when there is none."""
    if not path:
        return 0
    match = EPISODE_NUMBER_PATTERN.search(Path(path).name)
    if not match:
        return 0
    return int(match.group(1))


class ChapterScanner:
    """Build the ordered chapter list for a book root directory."""

    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir) if str(root_dir) else None

    def scan(self) -> list[Chapter]:
        """Return chapters sorted by episode number.

        Raises:
            InvalidConfigError: If the root is missing or not a directory
            NoChaptersError: If no Episode directory holds a markdown file
        """
        self.validate_root()

        chapters = []
        for entry in self._list_entries(self.root_dir):
            chapter = self._process_entry(entry)
            if chapter is not None:
                chapters.append(chapter)

        if not chapters:
            raise NoChaptersError()

        # sorted() is stable: equal numbers keep directory-name order
        return sorted(chapters, key=lambda c: extract_episode_number(c.path))

    def validate_root(self) -> None:
        if self.root_dir is None:
            raise InvalidConfigError("invalid root directory")
        try:
            is_dir = self.root_dir.is_dir()
            exists = self.root_dir.exists()
        except OSError as e:
            raise InvalidConfigError(f"failed to access root directory: {e}") from e
        if not exists:
            raise InvalidConfigError(f"root directory does not exist: {self.root_dir}")
        if not is_dir:
            raise InvalidConfigError(f"{self.root_dir} is not a directory")

    def _list_entries(self, path: Path) -> list[Path]:
        try:
            return sorted(path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise BookIOError(f"failed to read directory {path}: {e}") from e

    def _process_entry(self, entry: Path) -> Chapter | None:
        if EPISODE_PREFIX not in entry.name or not entry.is_dir():
            return None

        chapter_path = entry.absolute()
        try:
            files = self.markdown_files(chapter_path)
        except BookIOError as e:
            log.warning(f"Skipping chapter {entry.name}: {e}")
            return None
        if not files:
            log.warning(f"Skipping chapter {entry.name}: no markdown files found")
            return None

        return Chapter(path=chapter_path, files=tuple(files), images=self.image_index(chapter_path))

    def markdown_files(self, chapter_path: Path) -> list[Path]:
        """Markdown files directly inside ``chapter_path``, sorted by path."""
        files = []
        for entry in self._list_entries(chapter_path):
            if is_markdown_file(entry):
                log.debug(f"Found markdown file: {entry.name}")
                files.append(entry)
        return sorted(files, key=str)

    def image_index(self, chapter_path: Path) -> dict[str, Path]:
        """Map image basenames to paths anywhere below ``chapter_path``.

        The walk is lexical, so on a name collision the last file visited wins.
        """

        def on_error(error: OSError) -> None:
            log.warning(f"Skipping unreadable path in {chapter_path.name}: {error}")

        images: dict[str, Path] = {}
        for dirpath, dirnames, filenames in os.walk(chapter_path, onerror=on_error):
            dirnames.sort()
            for name in sorted(filenames):
                if is_image_file(name):
                    images[name] = Path(dirpath) / name
        return images
