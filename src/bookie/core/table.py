"""Two-phase table layout: collect rows, then measure and draw."""

from dataclasses import dataclass, field

from bs4 import Tag

from bookie.core.document import BookDocument
from bookie.core.html_utils import clean_text, is_element, text_content
from bookie.core.layout import HEADER_FILL, TABLE_FONT_SIZE, TABLE_LINE_HEIGHT, TABLE_WIDTH
from bookie.core.text_wrap import split_text
from bookie.errors import EmptyTableError, InvalidTableError

ROW_GROUPS = ("thead", "tbody", "tfoot")


@dataclass
class TableData:
    """Header cells flattened into one list, data rows in source order."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        # header row decides; the first data row only counts for header-less tables
        if self.headers:
            return len(self.headers)
        if self.rows:
            return len(self.rows[0])
        return 0


def _table_rows(table: Tag) -> list[Tag]:
    """``tr`` elements owned by ``table``, including those inside row groups."""
    rows = []
    for child in table.children:
        if not is_element(child):
            continue
        if child.name == "tr":
            rows.append(child)
        elif child.name in ROW_GROUPS:
            rows.extend(c for c in child.children if is_element(c) and c.name == "tr")
    return rows


def parse_table(table: Tag) -> TableData:
    if not is_element(table) or table.name != "table":
        raise InvalidTableError()

    data = TableData()
    for tr in _table_rows(table):
        cells = []
        is_header = False
        for cell in tr.children:
            if not is_element(cell) or cell.name not in ("td", "th"):
                continue
            cells.append(clean_text(text_content(cell)).strip())
            is_header = is_header or cell.name == "th"

        if is_header:
            data.headers.extend(cells)
        elif cells:
            data.rows.append(cells)
    return data


class TableRenderer:
    """Draw a parsed table at the cursor with fixed total width."""

    def __init__(self, document: BookDocument, text_font: str):
        self.document = document
        self.text_font = text_font

    def render(self, table: Tag) -> None:
        data = parse_table(table)
        col_count = data.column_count
        if col_count == 0:
            raise EmptyTableError()

        col_width = TABLE_WIDTH / col_count
        if data.headers:
            self.render_headers(data.headers, col_width)
        self.render_rows(data.rows, col_width, col_count)

    def split_text(self, text: str, width: float) -> list[str]:
        return split_text(text, width, self.document.get_string_width)

    def row_height(self, row: list[str], col_width: float) -> float:
        height = TABLE_LINE_HEIGHT
        for cell in row:
            lines = self.split_text(cell, col_width)
            height = max(height, len(lines) * TABLE_LINE_HEIGHT)
        return height

    def render_headers(self, headers: list[str], col_width: float) -> None:
        doc = self.document
        if doc.will_page_break(TABLE_LINE_HEIGHT):
            doc.add_page()
        doc.set_font(self.text_font, "B", TABLE_FONT_SIZE)
        doc.set_fill_color(*HEADER_FILL)
        for header in headers:
            doc.rect(doc.get_x(), doc.get_y(), col_width, TABLE_LINE_HEIGHT, style="F")
            doc.cell(col_width, TABLE_LINE_HEIGHT, header)
        doc.ln(TABLE_LINE_HEIGHT)

    def render_rows(self, rows: list[list[str]], col_width: float, col_count: int) -> None:
        doc = self.document
        doc.set_font(self.text_font, "", TABLE_FONT_SIZE)
        for row in rows:
            row = row[:col_count]
            height = self.row_height(row, col_width)
            if doc.will_page_break(height):
                doc.add_page()
            self.render_row(row, col_width, height)

    def render_row(self, row: list[str], col_width: float, height: float) -> None:
        doc = self.document
        x, y = doc.get_x(), doc.get_y()
        for i, cell in enumerate(row):
            cell_x = x + i * col_width
            doc.rect(cell_x, y, col_width, height, style="D")
            for n, line in enumerate(self.split_text(cell, col_width)):
                doc.set_xy(cell_x, y + n * TABLE_LINE_HEIGHT)
                doc.cell(col_width, TABLE_LINE_HEIGHT, line)
            doc.set_xy(cell_x + col_width, y)
        doc.ln(height)
