"""Chapters command implementation."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from bookie.core.chapters import ChapterScanner, extract_episode_number
from bookie.core.titles import format_chapter_title


def execute_chapters(indir: Path, console: Console) -> None:
    """List the chapters that would be compiled, in book order."""
    chapters = ChapterScanner(indir).scan()

    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Episode", justify="right", style="green")
    table.add_column("Title", style="white")
    table.add_column("Files", justify="right")
    table.add_column("Images", justify="right", style="dim")

    for index, chapter in enumerate(chapters):
        table.add_row(
            str(index + 1),
            str(extract_episode_number(chapter.path)),
            format_chapter_title(chapter.path),
            str(len(chapter.files)),
            str(len(chapter.images)),
        )

    console.print()
    console.print(table)
    console.print()
