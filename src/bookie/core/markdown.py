"""Markdown to HTML conversion and body extraction."""

from bs4 import BeautifulSoup, Tag
from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from bookie.errors import NoBodyError, ParseError


def build_markdown_parser() -> MarkdownIt:
    """CommonMark plus tables, strikethrough, autolinks, task lists and footnotes."""
    md = MarkdownIt("commonmark", {"linkify": True})
    md.enable(["table", "strikethrough", "linkify"])
    md.use(tasklists_plugin)
    md.use(footnote_plugin)
    return md


class MarkdownConverter:
    """Turn markdown source into a BeautifulSoup ``body`` element."""

    def __init__(self, parser: MarkdownIt | None = None):
        self.parser = parser or build_markdown_parser()

    def to_html(self, source: str | bytes) -> str:
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")
        try:
            return self.parser.render(source)
        except Exception as e:
            raise ParseError(f"failed to convert markdown: {e}") from e

    def parse_body(self, html: str) -> Tag:
        """Parse an HTML fragment and return its body element."""
        try:
            soup = BeautifulSoup(f"<html><body>{html}</body></html>", "lxml")
        except Exception as e:
            raise ParseError(f"failed to parse HTML: {e}") from e

        body = soup.body
        if body is None:
            raise NoBodyError()
        return body

    def convert(self, source: str | bytes) -> Tag:
        return self.parse_body(self.to_html(source))
