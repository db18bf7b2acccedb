"""Compile command implementation."""

import logging
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from bookie.api import new_compiler

log = logging.getLogger(__name__)


def resolve_output_path(
    indir: Path,
    outfile: Path,
    default_indir: Path,
    default_outfile: Path,
) -> Path:
    """Name the PDF after the input directory when only ``indir`` was changed."""
    if outfile == default_outfile and indir != default_indir:
        return Path(f"{indir}.pdf")
    return outfile


def execute_compile(
    indir: Path,
    outfile: Path,
    console: Console,
    toc_title: str | None = None,
    page_numbers: bool = True,
    chapter_font: str | None = None,
    text_font: str | None = None,
    quiet: bool = False,
) -> Path:
    """Execute the compile command."""
    compiler = new_compiler(indir, outfile)
    if toc_title is not None:
        compiler.set_toc_title(toc_title)
    compiler.set_page_numbers(page_numbers)
    if chapter_font:
        compiler.set_chapter_font(chapter_font)
    if text_font:
        compiler.set_text_font(text_font)

    if quiet:
        output = compiler.compile()
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Compiling book...", total=None)

            def on_file(path: Path) -> None:
                progress.update(task, description=f"Rendering {path.parent.name}/{path.name}")

            output = compiler.compile(on_file=on_file)

    log.info(f"Successfully compiled PDF: {output}")
    if not quiet:
        console.print(f"[green]Successfully compiled PDF:[/] {output}")
    return output
