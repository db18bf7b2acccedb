"""End-to-end tests for bookie.core.compiler and bookie.api."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from bookie.api import directory_to_pdf, directory_to_pdf_file, new_compiler
from bookie.core.compiler import BookCompiler
from bookie.errors import (
    BookIOError,
    CompilationCancelledError,
    EmptyChapterError,
    InvalidConfigError,
    NoChaptersError,
    RenderError,
    UnsupportedImageFormatError,
)
from bookie.models.book import Chapter
from bookie.models.config import BookConfig
from bookie.models.style import TextStyle


def page_of(pages: list[str], text: str) -> int:
    """1-based number of the first page containing ``text``."""
    for number, page in enumerate(pages, start=1):
        if text in page:
            return number
    raise AssertionError(f"{text!r} not found in any page")


class TestScenarios:
    def test_single_file_single_heading(self, make_book, pdf_pages, tmp_path: Path):
        root = make_book({"Episode01/a.md": "# Hello\n\nWorld"})
        output = tmp_path / "out.pdf"

        new_compiler(root, output).compile()

        pages = pdf_pages(output.read_bytes())
        assert len(pages) >= 2
        assert "Contents" in pages[0]
        assert "Hello" in pages[0]
        assert page_of(pages, "Episode 01") > 1
        assert page_of(pages, "World") > 1

    def test_toc_shows_final_page_number(self, make_book, pdf_pages):
        root = make_book({"Episode01/a.md": "# Hello\n\nWorld"})
        compiler = BookCompiler(root, root.with_suffix(".pdf"))

        pages = pdf_pages(compiler.render())

        # ToC, chapter title page, then the h1 on its own page
        hello_page = page_of(pages[1:], "Hello") + 1
        assert hello_page == 3
        assert "Hello" in pages[0] and "3" in pages[0]

    def test_chapter_ordering(self, make_book, pdf_pages):
        root = make_book(
            {
                "Episode10/a.md": "ten",
                "Episode2/a.md": "two",
                "Episode01/a.md": "one",
            }
        )
        text = "\n".join(pdf_pages(directory_to_pdf(root)))
        assert text.index("Episode 01") < text.index("Episode 2") < text.index("Episode 10")

    def test_files_in_name_order(self, make_book, pdf_pages):
        root = make_book(
            {
                "Episode1/b.md": "second file",
                "Episode1/a.md": "first file",
                "Episode1/c.md": "third file",
            }
        )
        text = "\n".join(pdf_pages(directory_to_pdf(root)))
        assert text.index("first file") < text.index("second file") < text.index("third file")

    def test_table(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "| head | other |\n|---|---|\n| alpha | beta |"})
        text = "\n".join(pdf_pages(directory_to_pdf(root)))
        assert "head" in text
        assert "alpha" in text and "beta" in text

    def test_image_from_chapter_index(self, make_book, make_image, pdf_pages):
        root = make_book({"Episode01/a.md": "![cap](pic.jpg)"})
        make_image(root / "Episode01" / "images" / "pic.jpg")

        pages = pdf_pages(directory_to_pdf(root))
        assert page_of(pages, "cap") > 1

    def test_unsupported_image_aborts(self, make_book, make_image, tmp_path: Path):
        root = make_book({"Episode01/a.md": "![x](pic.png)"})
        make_image(root / "Episode01" / "pic.png")
        output = tmp_path / "out.pdf"

        with pytest.raises(RenderError) as exc_info:
            directory_to_pdf_file(root, output)

        assert isinstance(exc_info.value.root_cause, UnsupportedImageFormatError)
        assert str(exc_info.value).startswith(
            "failed to process chapter Episode01: failed to process file a.md: "
        )
        assert not output.exists()

    def test_root_without_chapters(self, tmp_path: Path):
        root = tmp_path / "empty"
        root.mkdir()
        output = tmp_path / "out.pdf"

        with pytest.raises(NoChaptersError):
            new_compiler(root, output).compile()
        assert not output.exists()


class TestPagination:
    def test_chapters_after_the_first_start_on_odd_pages(self, make_book, pdf_pages):
        root = make_book(
            {
                "Episode1/a.md": "one",
                "Episode2/a.md": "two",
                "Episode3/a.md": "three",
            }
        )
        pages = pdf_pages(directory_to_pdf(root))
        for title in ("Episode 2", "Episode 3"):
            assert page_of(pages, title) % 2 == 1

    def test_heading_pages_monotonic(self, make_book):
        root = make_book(
            {
                "Episode1/a.md": "# A\n\n## A.1\n\ntext\n\n# B",
                "Episode1/b.md": "## B.1\n\n### B.1.1",
                "Episode2/a.md": "# C\n\n## C.1",
            }
        )
        entries = BookCompiler(root, root.with_suffix(".pdf")).collect_toc()

        assert [e.title for e in entries] == ["A", "A.1", "B", "B.1", "B.1.1", "C", "C.1"]
        pages = [e.page_num for e in entries]
        assert pages == sorted(pages)
        h1_pages = [e.page_num for e in entries if e.level == 1]
        assert len(set(h1_pages)) == len(h1_pages)

    def test_page_numbers_in_footer(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "text"})
        pages = pdf_pages(directory_to_pdf(root))
        assert "Page 1" in pages[0]

    def test_page_numbers_disabled(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "text"})
        compiler = BookCompiler(root, root.with_suffix(".pdf"))
        compiler.set_page_numbers(False)
        pages = pdf_pages(compiler.render())
        assert not any("Page 1" in page for page in pages)


class TestTableOfContents:
    def test_custom_title(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "# Hello"})
        compiler = BookCompiler(root, root.with_suffix(".pdf"))
        compiler.set_toc_title("Inhalt")
        pages = pdf_pages(compiler.render())
        assert "Inhalt" in pages[0]

    def test_levels_outside_map_are_skipped(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "# Alpha\n\n## Beta"})
        compiler = BookCompiler(root, root.with_suffix(".pdf"))
        compiler.set_toc_levels({1: TextStyle(font_family="Helvetica", style="B", size_pt=14)})
        pages = pdf_pages(compiler.render())
        assert "Alpha" in pages[0]
        assert "Beta" not in pages[0]

    def test_empty_level_map_omits_toc(self, make_book, pdf_pages):
        root = make_book({"Episode1/a.md": "# Alpha"})
        compiler = BookCompiler(root, root.with_suffix(".pdf"))
        compiler.set_toc_levels({})
        pages = pdf_pages(compiler.render())
        assert "Contents" not in pages[0]
        assert "Episode 1" in pages[0]


class TestCompilerBehaviour:
    def test_deterministic_output(self, make_book, make_image):
        root = make_book({"Episode1/a.md": "# T\n\n![c](p.jpg)\n\n| a |\n|---|\n| b |"})
        make_image(root / "Episode1" / "p.jpg")
        assert directory_to_pdf(root) == directory_to_pdf(root)

    def test_cancelled_before_first_file(self, make_book, tmp_path: Path):
        root = make_book({"Episode1/a.md": "text"})
        output = tmp_path / "out.pdf"
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(CompilationCancelledError):
            new_compiler(root, output).compile(cancel=cancel)
        assert not output.exists()

    def test_on_file_called_in_order(self, make_book, tmp_path: Path):
        root = make_book({"Episode2/a.md": "x", "Episode1/b.md": "y", "Episode1/a.md": "z"})
        seen: list[Path] = []
        new_compiler(root, tmp_path / "out.pdf").compile(on_file=seen.append)

        first_layout = [(p.parent.name, p.name) for p in seen[:3]]
        assert first_layout == [("Episode1", "a.md"), ("Episode1", "b.md"), ("Episode2", "a.md")]

    def test_write_failure_is_io_error(self, make_book, tmp_path: Path):
        root = make_book({"Episode1/a.md": "x"})
        with pytest.raises(BookIOError):
            new_compiler(root, tmp_path / "missing" / "out.pdf").compile()

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(InvalidConfigError):
            new_compiler(tmp_path / "missing", tmp_path / "out.pdf").compile()

    def test_missing_output_path(self, make_book):
        root = make_book({"Episode1/a.md": "x"})
        with pytest.raises(InvalidConfigError):
            new_compiler(root, "").compile()

    def test_empty_chapter_rejected(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        chapter = Chapter(path=tmp_path / "Episode1", files=())
        with pytest.raises(RenderError) as exc_info:
            compiler.layout([chapter], None)
        assert isinstance(exc_info.value.root_cause, EmptyChapterError)

    def test_directory_to_pdf_file(self, make_book, tmp_path: Path):
        root = make_book({"Episode1/a.md": "x"})
        output = directory_to_pdf_file(root, tmp_path / "book.pdf")
        assert output.read_bytes().startswith(b"%PDF")

    def test_directory_to_pdf_returns_bytes(self, make_book, pdf_pages, tmp_path: Path):
        root = make_book({"Episode1/a.md": "# Hello"})
        pages = pdf_pages(directory_to_pdf(root))
        assert "Hello" in pages[0]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["book"]

    def test_directory_to_pdf_current_directory(self, make_book, pdf_pages, monkeypatch):
        root = make_book({"Episode1/a.md": "# Hello"})
        monkeypatch.chdir(root)
        assert "Hello" in pdf_pages(directory_to_pdf("."))[0]

    def test_render_needs_no_output_path(self, make_book):
        root = make_book({"Episode1/a.md": "x"})
        assert new_compiler(root).render().startswith(b"%PDF")

    def test_empty_root_rejected(self, make_book, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(make_book({"Episode1/a.md": "x"}))
        with pytest.raises(InvalidConfigError, match="input directory not set"):
            BookCompiler("", tmp_path / "out.pdf").render()


class TestSettings:
    def test_arial_is_helvetica(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        compiler.set_text_font("Arial")
        assert compiler.config.text_font == "Helvetica"

    def test_unknown_font_rejected(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        with pytest.raises(InvalidConfigError, match="unsupported font family"):
            compiler.set_chapter_font("Comic Sans")
        assert compiler.config.chapter_font == "Helvetica"

    def test_bad_toc_level_rejected(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        with pytest.raises(InvalidConfigError):
            compiler.set_toc_levels({7: TextStyle(font_family="Times")})

    def test_config_is_copied(self, tmp_path: Path):
        config = BookConfig(toc_title="Index")
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf", config)
        compiler.set_toc_title("Other")
        assert config.toc_title == "Index"

    def test_default_toc_styles_follow_font_setters(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        compiler.set_chapter_font("Times")
        compiler.set_text_font("Courier")

        levels = compiler.config.toc_styles
        assert levels[1] == TextStyle(font_family="Times", style="B", size_pt=14)
        assert levels[2].font_family == "Courier"
        assert levels[3].font_family == "Courier"

    def test_explicit_toc_levels_ignore_fonts(self, tmp_path: Path):
        compiler = BookCompiler(tmp_path, tmp_path / "out.pdf")
        compiler.set_toc_levels({1: TextStyle(font_family="Courier", size_pt=9)})
        compiler.set_chapter_font("Times")
        assert compiler.config.toc_styles == {1: TextStyle(font_family="Courier", size_pt=9)}
