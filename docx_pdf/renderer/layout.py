"""Page geometry, layout defaults and the per-render cursor state.

All layout values are millimetres measured from the top-left corner of the
page; :class:`PageWriter` converts them to ReportLab's bottom-left points.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from docx_pdf.renderer.utils import RGB, BLACK, font_name_for

DEFAULT_PAGE_SIZE_PT = A4
DEFAULT_MARGIN_MM = 10.0
DEFAULT_BOTTOM_MARGIN_MM = 20.0
DEFAULT_FONT_FAMILY = "Helvetica"
DEFAULT_FONT_SIZE_PT = 12.0
DEFAULT_TABLE_FONT_SIZE_PT = 10.0
DEFAULT_LINE_HEIGHT_MM = 6.0
DEFAULT_PARAGRAPH_SPACING_MM = 4.0
DEFAULT_CELL_WIDTH_MM = 40.0
DEFAULT_CELL_HEIGHT_MM = 10.0
DEFAULT_CELL_MARGIN_MM = 1.0
DEFAULT_BORDER_WIDTH_MM = 0.2
# Images ignore their own position and extent and land in this box.
DEFAULT_IMAGE_BOX_MM = (10.0, 10.0, 50.0, 50.0)

READING_ORDER_GROUPED = "grouped"
READING_ORDER_DOCUMENT = "document"

# Baseline sits 0.3 font-size below the vertical centre of a line.
_BASELINE_FACTOR = 0.3


@dataclass(frozen=True, slots=True)
class LayoutSettings:
    """Tunable layout constants; the defaults reproduce the classic output.

    Helvetica, Times and Courier map to the standard PDF fonts, which only cover
    Latin-1 text. Any other ``font_family`` must name a TrueType font the caller
    registered beforehand with ``pdfmetrics.registerFont(TTFont(name, path))``.
    """

    page_size: Tuple[float, float] = DEFAULT_PAGE_SIZE_PT
    margin: float = DEFAULT_MARGIN_MM
    bottom_margin: float = DEFAULT_BOTTOM_MARGIN_MM
    font_family: str = DEFAULT_FONT_FAMILY
    body_font_size: float = DEFAULT_FONT_SIZE_PT
    table_font_size: float = DEFAULT_TABLE_FONT_SIZE_PT
    line_height: float = DEFAULT_LINE_HEIGHT_MM
    paragraph_spacing: float = DEFAULT_PARAGRAPH_SPACING_MM
    cell_width: float = DEFAULT_CELL_WIDTH_MM
    cell_height: float = DEFAULT_CELL_HEIGHT_MM
    cell_margin: float = DEFAULT_CELL_MARGIN_MM
    border_width: float = DEFAULT_BORDER_WIDTH_MM
    image_box: Tuple[float, float, float, float] = DEFAULT_IMAGE_BOX_MM
    reading_order: str = READING_ORDER_GROUPED

    def __post_init__(self) -> None:
        if self.reading_order not in (READING_ORDER_GROUPED, READING_ORDER_DOCUMENT):
            raise ValueError(f"Unknown reading order: {self.reading_order!r}")

    @property
    def page_width(self) -> float:
        return self.page_size[0] / mm

    @property
    def page_height(self) -> float:
        return self.page_size[1] / mm

    @property
    def page_break_trigger(self) -> float:
        return self.page_height - self.bottom_margin


@dataclass(slots=True)
class RenderState:
    """Mutable drawing context owned by a single render call."""

    font_family: str
    style: str = ""
    size: float = DEFAULT_FONT_SIZE_PT
    color: RGB = BLACK
    x: float = 0.0
    y: float = 0.0
    last_height: float = 0.0
    page: int = 1
    lines: int = 0
    cells: int = 0
    images: int = 0


class PageWriter:
    """Cursor-driven drawing primitives on top of a ReportLab canvas."""

    def __init__(self, canvas: Canvas, settings: LayoutSettings) -> None:
        self.canvas = canvas
        self.settings = settings
        self.state = RenderState(
            font_family=settings.font_family,
            size=settings.body_font_size,
            x=settings.margin,
            y=settings.margin,
        )
        self.canvas.setLineWidth(settings.border_width * mm)
        self.set_font("", settings.body_font_size)
        self.set_text_color(BLACK)

    # ------------------------------------------------------------------
    # State
    def set_font(self, style: str, size: float) -> None:
        self.state.style = style
        self.state.size = size
        self.canvas.setFont(font_name_for(self.state.font_family, style), size)

    def set_text_color(self, color: RGB) -> None:
        self.state.color = color
        red, green, blue = color
        self.canvas.setFillColorRGB(red / 255.0, green / 255.0, blue / 255.0)

    def new_page(self) -> None:
        """Close the current page and carry font and color onto the next one."""
        self.canvas.showPage()
        self.state.page += 1
        self.state.y = self.settings.margin
        self.canvas.setLineWidth(self.settings.border_width * mm)
        self.set_font(self.state.style, self.state.size)
        self.set_text_color(self.state.color)

    # ------------------------------------------------------------------
    # Drawing
    def cell(self, width: float, height: float, text: str, *, border: bool = False,
             new_line: bool = False, align: str = "L") -> None:
        """Draw a text cell at the cursor; ``width=0`` extends to the right margin."""
        settings = self.settings
        state = self.state
        if state.y + height > settings.page_break_trigger:
            x = state.x
            self.new_page()
            state.x = x

        if width == 0:
            width = settings.page_width - settings.margin - state.x

        if border:
            self.canvas.rect(
                state.x * mm,
                self._to_pdf_y(state.y + height),
                width * mm,
                height * mm,
                stroke=1,
                fill=0,
            )
            state.cells += 1

        if text:
            text_width = self.string_width(text)
            if align == "R":
                offset = width - settings.cell_margin - text_width
            elif align == "C":
                offset = (width - text_width) / 2
            else:
                offset = settings.cell_margin
            baseline = state.y + height / 2 + _BASELINE_FACTOR * state.size / mm
            self.canvas.drawString((state.x + offset) * mm, self._to_pdf_y(baseline), text)

        state.last_height = height
        if new_line:
            state.x = settings.margin
            state.y += height
            state.lines += 1
        else:
            state.x += width

    def line_break(self, height: Optional[float] = None) -> None:
        """Return to the left margin and advance by ``height`` or the last cell height."""
        self.state.x = self.settings.margin
        self.state.y += self.state.last_height if height is None else height

    def image(self, path: Path, box: Tuple[float, float, float, float]) -> None:
        x, y, width, height = box
        self.canvas.drawImage(str(path), x * mm, self._to_pdf_y(y + height), width=width * mm, height=height * mm)
        self.state.images += 1

    def string_width(self, text: str) -> float:
        name = font_name_for(self.state.font_family, self.state.style)
        return pdfmetrics.stringWidth(text, name, self.state.size) / mm

    def _to_pdf_y(self, y: float) -> float:
        return (self.settings.page_height - y) * mm
