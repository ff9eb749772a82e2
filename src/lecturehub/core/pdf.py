"""A4 PDF rendering of an exported lecture: header, TOC with page estimates, body text, footers"""

import html
import re
from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from lecturehub.core.export import FOOTER_TEXT, HUB_NAME
from lecturehub.core.models import ConvertResult, LectureMetadata, TocEntry


PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
BOTTOM_LIMIT = 25 * mm          # below this a new page is started
FOOTER_Y = 10 * mm

DARK_BLUE = (44, 62, 80)
BLUE = (52, 152, 219)
GRAY = (100, 100, 100)
LIGHT_GRAY = (150, 150, 150)
RULE_GRAY = (200, 200, 200)
BLACK = (0, 0, 0)

HEADING_SIZES = {1: 16, 2: 14, 3: 12, 4: 11}

_TAG_RE = re.compile(r'<[^>]+>')
_HEADING_RE = re.compile(r'^<h([1-4])[ >]')
_CELL_JOIN_RE = re.compile(r'</t[hd]>\s*<t[hd]>')


def text_blocks(fragment: str) -> list[tuple[str, int]]:
    """Flatten converted HTML into (text, heading level) lines; level 0 is body text.

    Table cells of one row are joined with ' | '; lines left empty after
    removing tags are dropped.
    """
    blocks = []
    for line in _CELL_JOIN_RE.sub(' | ', fragment).split('\n'):
        m = _HEADING_RE.match(line)
        text = html.unescape(_TAG_RE.sub('', line)).strip()
        if text:
            blocks.append((text, int(m.group(1)) if m else 0))
    return blocks


class _FooterCanvas(canvas.Canvas):
    """Canvas that holds finished pages back until save() so each footer knows the page total."""

    def __init__(self, *args, footer: str = FOOTER_TEXT, **kwargs):
        super().__init__(*args, **kwargs)
        self.footer = footer
        self._pages: list[dict] = []

    def showPage(self):
        self._pages.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._pages)
        for state in self._pages:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.setFont('Helvetica', 8)
        self.setFillColorRGB(*_rgb(LIGHT_GRAY))
        self.drawCentredString(PAGE_WIDTH / 2, FOOTER_Y, self.footer)
        self.drawString(MARGIN, FOOTER_Y, f"Page {self._pageNumber} of {total}")

    @property
    def page_count(self) -> int:
        return len(self._pages)


def _rgb(color: tuple[int, int, int]) -> tuple[float, float, float]:
    return tuple(c / 255 for c in color)


class LecturePdf:
    """Lays out one lecture top to bottom, breaking pages as the cursor runs low.

    Positions are tracked as ``y`` in points from the bottom edge, reportlab's
    native origin. Pages after the first carry a running header.
    """

    def __init__(self, hub_name: str = HUB_NAME, footer: str = FOOTER_TEXT, compress: bool = True):
        self.hub_name = hub_name
        self._buffer = BytesIO()
        self.canvas = _FooterCanvas(
            self._buffer, pagesize=A4, pageCompression=1 if compress else 0, footer=footer,
        )
        self.y = PAGE_HEIGHT - MARGIN

    @property
    def pages(self) -> int:
        return self.canvas.page_count

    def new_page(self) -> None:
        c = self.canvas
        c.showPage()
        self.y = PAGE_HEIGHT - MARGIN
        c.setFont('Helvetica-Oblique', 10)
        c.setFillColorRGB(*_rgb(LIGHT_GRAY))
        c.drawString(MARGIN, PAGE_HEIGHT - 10 * mm, f"{self.hub_name} - Lecture Notes")
        c.drawRightString(PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 10 * mm, f"Page {c.getPageNumber()}")

    def _ensure_space(self, height: float) -> None:
        if self.y - height < BOTTOM_LIMIT:
            self.new_page()

    def _rule(self) -> None:
        self.canvas.setStrokeColorRGB(*_rgb(RULE_GRAY))
        self.canvas.line(MARGIN, self.y, PAGE_WIDTH - MARGIN, self.y)

    def _centred(self, text: str, font: str, size: int, color, advance: float) -> None:
        self.canvas.setFont(font, size)
        self.canvas.setFillColorRGB(*_rgb(color))
        self.canvas.drawCentredString(PAGE_WIDTH / 2, self.y, text)
        self.y -= advance

    def text(self, text: str, font: str = 'Helvetica', size: int = 10, indent: float = 0, color=BLACK) -> None:
        """Draw wrapped text at the cursor, starting new pages as needed."""
        leading = size * 1.4
        width = PAGE_WIDTH - 2 * MARGIN - indent
        for line in simpleSplit(text, font, size, width):
            self._ensure_space(leading)
            self.canvas.setFont(font, size)
            self.canvas.setFillColorRGB(*_rgb(color))
            self.canvas.drawString(MARGIN + indent, self.y, line)
            self.y -= leading

    def header(self, meta: LectureMetadata, course_code: str = '') -> None:
        self._centred(self.hub_name, 'Helvetica-Bold', 16, DARK_BLUE, 8 * mm)
        if meta.course:
            self._centred(meta.course, 'Helvetica', 14, BLUE, 8 * mm)
        self._centred(meta.title, 'Helvetica-Bold', 18, BLACK, 12 * mm)

        c = self.canvas
        c.setFont('Helvetica', 10)
        rows = [
            ("Date:", meta.date),
            ("Duration:", meta.duration),
            ("Instructor:", meta.instructor),
            ("Course Code:", course_code),
        ]
        for label, value in rows:
            if not value:
                continue
            c.setFillColorRGB(*_rgb(GRAY))
            c.drawString(MARGIN, self.y, label)
            c.setFillColorRGB(*_rgb(BLACK))
            c.drawString(MARGIN + 25 * mm, self.y, value)
            self.y -= 6 * mm
        self.y -= 10 * mm
        self._rule()
        self.y -= 15 * mm

    def table_of_contents(self, toc: list[TocEntry]) -> None:
        """TOC rows with dot leaders and estimated page numbers; nothing for an empty TOC."""
        if not toc:
            return
        c = self.canvas
        c.setFont('Helvetica-Bold', 14)
        c.setFillColorRGB(*_rgb(DARK_BLUE))
        c.drawString(MARGIN, self.y, "Table of Contents")
        self.y -= 10 * mm

        for entry in toc:
            self._ensure_space(6 * mm)
            c.setFont('Helvetica', 10)
            c.setFillColorRGB(*_rgb(BLACK))
            x = MARGIN + (entry.level - 1) * 5 * mm
            c.drawString(x, self.y, entry.text)
            dot_start = x + c.stringWidth(entry.text, 'Helvetica', 10) + 2 * mm
            dot_end = PAGE_WIDTH - MARGIN - 15 * mm
            for i in range(max(int((dot_end - dot_start) / (2 * mm)), 0)):
                c.drawString(dot_start + i * 2 * mm, self.y, '.')
            c.drawRightString(PAGE_WIDTH - MARGIN - 10 * mm, self.y, str(entry.page))
            self.y -= 6 * mm
        self._ensure_space(15 * mm)
        self.y -= 15 * mm
        self._rule()
        self.y -= 20 * mm

    def body(self, fragment: str) -> None:
        for text, level in text_blocks(fragment):
            if level:
                self.y -= 2 * mm
                self.text(text, 'Helvetica-Bold', HEADING_SIZES[level], color=DARK_BLUE)
            else:
                self.text(text, 'Helvetica', 11)

    def render(self) -> bytes:
        """Close the last page, write footers, and return the PDF bytes."""
        self.canvas.showPage()
        self.canvas.save()
        return self._buffer.getvalue()


def build_pdf(
    meta: LectureMetadata,
    result: ConvertResult,
    toc: list[TocEntry],
    course_code: str = '',
    hub_name: str = HUB_NAME,
    ) -> bytes:
    """Render one lecture as an A4 PDF."""
    pdf = LecturePdf(hub_name)
    pdf.canvas.setTitle(meta.title)
    pdf.header(meta, course_code)
    pdf.table_of_contents(toc)
    pdf.body(result.html)
    return pdf.render()
