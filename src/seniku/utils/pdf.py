# File: application/src/seniku/utils/pdf.py
from typing import List, Sequence

import fitz  # PyMuPDF

PAGE_WIDTH, PAGE_HEIGHT = fitz.paper_size("a4")
MARGIN = 50
REGULAR_FONT = "helv"
BOLD_FONT = "hebo"


class PdfWriter:
    """Top-to-bottom text layout on A4 pages with automatic page breaks."""

    def __init__(self):
        self.doc = fitz.open()
        self.page = None
        self.y = 0.0
        self.new_page()

    def new_page(self) -> None:
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = MARGIN

    def _ensure_space(self, height: float) -> None:
        if self.y + height > PAGE_HEIGHT - MARGIN:
            self.new_page()

    def text(self, value: str, size: float = 11, bold: bool = False, center: bool = False) -> None:
        self._ensure_space(size * 1.6)
        font = BOLD_FONT if bold else REGULAR_FONT
        x = MARGIN
        if center:
            width = fitz.get_text_length(value, fontname=font, fontsize=size)
            x = max(MARGIN, (PAGE_WIDTH - width) / 2)
        self.y += size
        self.page.insert_text((x, self.y), value, fontsize=size, fontname=font)
        self.y += size * 0.6

    def space(self, height: float = 10) -> None:
        self.y += height

    def table(self, headers: Sequence[str], rows: List[Sequence[str]], widths: Sequence[float], size: float = 9) -> None:
        """Draw a simple grid; the header row is repeated after every page break."""
        row_height = size * 1.9

        def draw_row(cells: Sequence[str], bold: bool) -> None:
            self._ensure_space(row_height)
            x = MARGIN
            for cell, width in zip(cells, widths):
                rect = fitz.Rect(x, self.y, x + width, self.y + row_height)
                self.page.draw_rect(rect, color=(0.75, 0.75, 0.75), width=0.5)
                self.page.insert_text(
                    (x + 3, self.y + row_height - size * 0.6),
                    str(cell),
                    fontsize=size,
                    fontname=BOLD_FONT if bold else REGULAR_FONT,
                )
                x += width
            self.y += row_height

        draw_row(headers, bold=True)
        for cells in rows:
            if self.y + row_height > PAGE_HEIGHT - MARGIN:
                self.new_page()
                draw_row(headers, bold=True)
            draw_row(cells, bold=False)

    def to_bytes(self) -> bytes:
        try:
            return self.doc.tobytes()
        finally:
            self.doc.close()


def truncate(value: str, length: int) -> str:
    if value is None:
        return "-"
    return value if len(value) <= length else value[: length - 3] + "..."
