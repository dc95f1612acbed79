"""Draw assembled sections onto a ReportLab canvas."""
from __future__ import annotations

from io import BytesIO

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas as _rl_canvas

from assembler import Cell, Section, is_spacer
from models import NAME_DETAIL, HeaderStyle

EXPORT_FILENAME = "songs_export.pdf"

MARGIN = 40
CELL_PAD = 6
LINE_SPACING = 1.25
# Non-name columns never take more than this share of the usable width
MAX_AUTO_COLUMN_SHARE = 0.3
HEADER_BOX_FILL = (0.878, 0.878, 0.878)  # #e0e0e0


# --- Helper: ReportLab canvas that writes the footer with "Page N of M" ---
class NumberedCanvas(_rl_canvas.Canvas):
    # Canvas that draws the footer text on the right and 'Page N of M' on the left of every page.
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self._footer_right = ""     # e.g., "Generated: 18.10.2026"
        self._margin = MARGIN
        self._page_width = letter[0]

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total_pages: int):
        self.setFont("Helvetica", 8)
        self.setFillColorRGB(0.4, 0.4, 0.4)
        y = 0.4 * inch
        if self._footer_right:
            self.drawRightString(self._page_width - self._margin, y, self._footer_right)
        self.drawString(self._margin, y, f"Page {self.getPageNumber()} of {total_pages}")
        self.setFillColorRGB(0, 0, 0)


def font_name(bold: bool, italic: bool) -> str:
    if bold and italic:
        return "Helvetica-BoldOblique"
    if bold:
        return "Helvetica-Bold"
    if italic:
        return "Helvetica-Oblique"
    return "Helvetica"


def _cell_font(cell: Cell) -> str:
    return font_name(cell.bold, cell.italic)


def column_widths(section: Section, usable_width: float) -> list[float]:
    """The name column takes whatever the content-sized columns leave over."""
    if not section.columns:
        return []
    cap = usable_width * MAX_AUTO_COLUMN_SHARE
    widths: list[float | None] = []
    for idx, column in enumerate(section.columns):
        if column == NAME_DETAIL:
            widths.append(None)
            continue
        widest = max(
            (stringWidth(row[idx].text, _cell_font(row[idx]), row[idx].font_size)
             for row in section.song_rows),
            default=0,
        )
        widths.append(min(widest + 2 * CELL_PAD, cap))

    fixed = sum(w for w in widths if w is not None)
    flexible = widths.count(None)
    if flexible:
        share = max(usable_width - fixed, 0) / flexible
        return [share if w is None else w for w in widths]
    # No name column: spread the leftover evenly
    extra = max(usable_width - fixed, 0) / len(widths)
    return [w + extra for w in widths]


def _wrap(cell: Cell, width: float) -> list[str]:
    return simpleSplit(cell.text, _cell_font(cell), cell.font_size, max(width - CELL_PAD, 1)) or [""]


def _row_height(row: list[Cell], widths: list[float]) -> float:
    if not row:
        return 0
    return max(len(_wrap(c, w)) * c.font_size * LINE_SPACING for c, w in zip(row, widths))


def _draw_header(c: NumberedCanvas, title: str, style: HeaderStyle, y: float, width: float) -> float:
    """Draw a section title at the top-down cursor ``y``; returns the new cursor."""
    fnt = font_name(style.bold, style.italic)
    size = style.font_size
    usable = width - 2 * MARGIN
    lines = simpleSplit(title, fnt, size, usable - 2 * CELL_PAD) or [""]
    line_h = size * LINE_SPACING
    block_h = len(lines) * line_h

    y -= 10
    if style.in_box:
        c.setFillColorRGB(*HEADER_BOX_FILL)
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(0.5)
        c.rect(MARGIN, y - block_h - 2 * CELL_PAD, usable, block_h + 2 * CELL_PAD, stroke=1, fill=1)
        c.setFillColorRGB(0, 0, 0)
        y -= CELL_PAD

    c.setFont(fnt, size)
    for line in lines:
        y -= line_h
        baseline = y + (line_h - size) / 2 + size * 0.2
        if style.alignment == "center":
            x = width / 2
            c.drawCentredString(x, baseline, line)
            line_w = stringWidth(line, fnt, size)
            x0 = x - line_w / 2
        else:
            x0 = MARGIN + (CELL_PAD if style.in_box else 0)
            c.drawString(x0, baseline, line)
            line_w = stringWidth(line, fnt, size)
        if style.underline:
            c.setLineWidth(max(size / 18, 0.5))
            c.line(x0, baseline - 2, x0 + line_w, baseline - 2)

    if style.in_box:
        y -= CELL_PAD
    return y - 5 - size * 0.5


def _draw_row(c: NumberedCanvas, row: list[Cell], widths: list[float], y: float) -> None:
    x = MARGIN
    for cell, w in zip(row, widths):
        line_h = cell.font_size * LINE_SPACING
        c.setFont(_cell_font(cell), cell.font_size)
        ly = y
        for line in _wrap(cell, w):
            ly -= line_h
            c.drawString(x, ly + cell.font_size * 0.25, line)
        x += w


def render_pdf(sections: list[Section], header_style: HeaderStyle, footer_text: str = "") -> bytes:
    """One section per page (tables flow onto continuation pages)."""
    buf = BytesIO()
    c = NumberedCanvas(buf, pagesize=letter)
    c._footer_right = footer_text
    c.setTitle("Song export")

    width, height = letter
    usable_width = width - 2 * MARGIN
    bottom = MARGIN + 20

    for idx, section in enumerate(sections):
        if idx > 0:
            c.showPage()
        y = _draw_header(c, section.title, header_style, height - MARGIN, width)
        widths = column_widths(section, usable_width)
        for row in section.rows:
            needed = _row_height(row, widths)
            if y - needed < bottom:
                c.showPage()
                y = height - MARGIN
                if is_spacer(row):
                    continue
            _draw_row(c, row, widths, y)
            y -= needed

    # Finalize the last page so NumberedCanvas.save() can render footers
    c.showPage()
    c.save()
    pdf_bytes = buf.getvalue()
    buf.close()
    return pdf_bytes
