"""Library entry points."""

from pathlib import Path

from bookie.core.compiler import BookCompiler
from bookie.models.config import BookConfig


def new_compiler(
    root_dir: Path | str,
    output_path: Path | str | None = None,
    config: BookConfig | None = None,
) -> BookCompiler:
    """Create a compiler for the chapters under ``root_dir``."""
    return BookCompiler(root_dir, output_path, config)


def directory_to_pdf(directory: Path | str, config: BookConfig | None = None) -> bytes:
    """Compile ``directory`` and return the PDF without writing a file."""
    return BookCompiler(directory, None, config).render()


def directory_to_pdf_file(
    directory: Path | str,
    output_path: Path | str,
    config: BookConfig | None = None,
) -> Path:
    """Compile ``directory`` into ``output_path``."""
    return BookCompiler(directory, output_path, config).compile()
