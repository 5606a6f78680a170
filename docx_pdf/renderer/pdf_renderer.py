"""Render the document tree into a PDF byte stream using ReportLab."""
from __future__ import annotations

import io
from typing import Dict, Iterable, Optional

from reportlab.pdfgen.canvas import Canvas

from docx_pdf.exceptions import RenderError
from docx_pdf.model.elements import Block, DocumentTree, ImagePlacement, Paragraph, Table
from docx_pdf.parser.media_extractor import MediaIndex
from docx_pdf.renderer.layout import READING_ORDER_DOCUMENT, LayoutSettings, PageWriter, RenderState
from docx_pdf.renderer.utils import BLACK, alignment_code, parse_hex_color, resolve_font_size, resolve_style_flags
from docx_pdf.utils.logger import get_logger
from docx_pdf.utils.text_normalizer import TextNormalizer

LOGGER = get_logger(__name__)


class PdfRenderer:
    """Draw paragraphs, tables and images onto A4 pages."""

    def __init__(self, settings: Optional[LayoutSettings] = None) -> None:
        self._settings = settings or LayoutSettings()
        self._normalizer = TextNormalizer(preserve_whitespace=True)

    @property
    def settings(self) -> LayoutSettings:
        return self._settings

    def render(self, tree: DocumentTree, media: MediaIndex) -> bytes:
        """Return the finished PDF for ``tree``; any drawing failure is a RenderError."""
        buffer = io.BytesIO()
        try:
            pdf = Canvas(buffer, pagesize=self._settings.page_size)
            self._apply_metadata(pdf, tree.metadata)
            state = self.draw(pdf, tree, media)
            pdf.showPage()
            pdf.save()
        except Exception as exc:  # ReportLab and Pillow raise assorted types
            raise RenderError(f"Failed to render PDF: {exc}") from exc

        LOGGER.debug("Rendered %d page(s), %d lines, %d cells, %d images",
                     state.page, state.lines, state.cells, state.images)
        return buffer.getvalue()

    def draw(self, pdf: Canvas, tree: DocumentTree, media: MediaIndex) -> RenderState:
        """Draw ``tree`` onto ``pdf`` without finishing the page; return the final state."""
        writer = PageWriter(pdf, self._settings)
        for block in self._iter_blocks(tree):
            if isinstance(block, Paragraph):
                self._draw_paragraph(writer, block)
            elif isinstance(block, Table):
                self._draw_table(writer, block)
            elif isinstance(block, ImagePlacement):
                self._draw_image(writer, block, media)
        return writer.state

    def _iter_blocks(self, tree: DocumentTree) -> Iterable[Block]:
        if self._settings.reading_order == READING_ORDER_DOCUMENT:
            yield from tree.blocks
            return
        yield from tree.paragraphs
        yield from tree.tables
        yield from tree.images

    def _draw_paragraph(self, writer: PageWriter, paragraph: Paragraph) -> None:
        settings = self._settings
        align = alignment_code(paragraph.alignment)
        writer.set_font("", settings.body_font_size)
        writer.set_text_color(BLACK)

        for run in paragraph.runs:
            formatting = run.formatting
            writer.set_font(resolve_style_flags(formatting), resolve_font_size(formatting, settings.body_font_size))
            writer.set_text_color(parse_hex_color(formatting.color_hex))
            for text in run.texts:
                writer.cell(0, settings.line_height, self._normalizer.normalize_text(text), new_line=True, align=align)

        writer.line_break(settings.paragraph_spacing)

    def _draw_table(self, writer: PageWriter, table: Table) -> None:
        settings = self._settings
        writer.set_font("", settings.table_font_size)
        writer.set_text_color(BLACK)

        for row in table.rows:
            for cell in row.cells:
                writer.cell(
                    settings.cell_width,
                    settings.cell_height,
                    self._normalizer.normalize_text(cell.text),
                    border=True,
                    align="C",
                )
            writer.line_break()

    def _draw_image(self, writer: PageWriter, image: ImagePlacement, media: MediaIndex) -> None:
        path = media.lookup(image)
        if path is None:
            LOGGER.debug("No media entry for image %s; skipping", image.embed_id)
            return
        writer.image(path, self._settings.image_box)

    @staticmethod
    def _apply_metadata(pdf: Canvas, metadata: Dict[str, str]) -> None:
        if metadata.get("title"):
            pdf.setTitle(metadata["title"])
        if metadata.get("author"):
            pdf.setAuthor(metadata["author"])
