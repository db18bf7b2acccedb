"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from bookie.commands.compile import execute_compile, resolve_output_path

app = typer.Typer(
    name="book",
    help="Compile Episode directories of markdown files into a paginated PDF book.",
    add_completion=False,
)

console = Console()

DEFAULT_INDIR = Path("tmp")
DEFAULT_OUTFILE = Path("tmp.pdf")
LOG_PREFIX = "[BookCompiler] "
LOG_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def setup_logging(debug: bool) -> None:
    """Prefix every record; debug mode adds the source location."""
    if debug:
        fmt = f"{LOG_PREFIX}%(asctime)s %(filename)s:%(lineno)d: %(levelname)s %(message)s"
    else:
        fmt = f"{LOG_PREFIX}%(asctime)s %(levelname)s %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=fmt,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def fail(error: Exception | str) -> None:
    """Print the single-line error message and exit non-zero."""
    console.print(
        f"{LOG_PREFIX}Error: {error}",
        style="red",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    raise typer.Exit(1)


def validate_indir(indir: Path) -> None:
    if not str(indir):
        fail("input directory cannot be empty")
    if not indir.exists():
        fail(f"cannot access input directory: {indir}")
    if not indir.is_dir():
        fail(f"input path is not a directory: {indir}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    indir: Annotated[
        Path,
        typer.Option(
            "-indir", "--indir",
            help="Input directory containing the Episode directories",
        ),
    ] = DEFAULT_INDIR,
    outfile: Annotated[
        Path,
        typer.Option(
            "-outfile", "--outfile",
            help="Output PDF file (default: <indir>.pdf when -indir is given)",
        ),
    ] = DEFAULT_OUTFILE,
    debug: Annotated[
        bool,
        typer.Option(
            "-debug", "--debug",
            help="Enable debug logging with source locations",
        ),
    ] = False,
    toc_title: Annotated[
        Optional[str],
        typer.Option(
            "--toc-title",
            help="Title of the table of contents",
        ),
    ] = None,
    page_numbers: Annotated[
        bool,
        typer.Option(
            "--page-numbers/--no-page-numbers",
            help="Print 'Page N' at the bottom of every page",
        ),
    ] = True,
    chapter_font: Annotated[
        Optional[str],
        typer.Option(
            "--chapter-font",
            help="Core font for chapter titles and headings (Helvetica, Times, Courier)",
        ),
    ] = None,
    text_font: Annotated[
        Optional[str],
        typer.Option(
            "--text-font",
            help="Core font for body text",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet", "-q",
            help="Suppress progress output",
        ),
    ] = False,
) -> None:
    """Compile Episode directories of markdown files into a paginated PDF book.

    Every directory under -indir whose name contains "Episode" becomes a
    chapter; its markdown files are rendered in alphabetical order.
    """
    setup_logging(debug)
    validate_indir(indir)
    ctx.obj = {"indir": indir}

    if ctx.invoked_subcommand is not None:
        return

    outfile = resolve_output_path(indir, outfile, DEFAULT_INDIR, DEFAULT_OUTFILE)
    try:
        outfile.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as e:
        fail(f"failed to create output directory: {e}")

    try:
        execute_compile(
            indir=indir,
            outfile=outfile,
            console=console,
            toc_title=toc_title,
            page_numbers=page_numbers,
            chapter_font=chapter_font,
            text_font=text_font,
            quiet=quiet,
        )
    except Exception as e:
        fail(e)


@app.command()
def chapters(ctx: typer.Context) -> None:
    """List the chapters found under -indir without rendering them."""
    from bookie.commands.chapters import execute_chapters

    try:
        execute_chapters(ctx.obj["indir"], console)
    except Exception as e:
        fail(e)


if __name__ == "__main__":
    app()
