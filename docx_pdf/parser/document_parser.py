"""Parse document.xml into the paragraph/table/image document tree."""
from __future__ import annotations

import math
from typing import List, Optional
from xml.etree import ElementTree as ET

from docx_pdf.model.elements import (
    Alignment,
    DocumentTree,
    ImagePlacement,
    Paragraph,
    Run,
    RunFormatting,
    Table,
    TableCell,
    TableRow,
)
from docx_pdf.parser.docx_loader import DOCUMENT_XML_PATH
from docx_pdf.parser.rels_parser import Relationships
from docx_pdf.utils.logger import get_logger
from docx_pdf.utils.xml_utils import Namespaces, is_toggle_on, local_name, parse_xml, qualify, word_attr

LOGGER = get_logger(__name__)

_EMBED_ATTR = qualify("r:embed")


class DocumentParser:
    """Transforms Word body XML into model elements.

    Parsing is permissive: only a document that is not well-formed XML is an
    error, everything the model does not cover is skipped.
    """

    def __init__(self, document_xml: Optional[bytes], relationships: Optional[Relationships] = None) -> None:
        self._document_xml = document_xml
        self._relationships = relationships or Relationships.empty()

    def parse(self) -> DocumentTree:
        """Parse the document body into high-level block elements."""
        tree = DocumentTree()
        if self._document_xml is None:
            LOGGER.info("%s not present; producing an empty document", DOCUMENT_XML_PATH)
            return tree

        root = parse_xml(self._document_xml, DOCUMENT_XML_PATH)
        body = root.find("w:body", Namespaces.WORD)
        if body is None:
            LOGGER.warning("document.xml missing body element")
            return tree

        for child in list(body):
            tag = local_name(child.tag)
            if tag == "p":
                tree.add(self._parse_paragraph(child))
            elif tag == "tbl":
                tree.add(self._parse_table(child))
            elif tag != "drawing":
                LOGGER.debug("Skipping unsupported element: %s", tag)
                continue
            for image in self._collect_images(child):
                tree.add(image)

        LOGGER.debug(
            "Parsed %d paragraphs, %d tables, %d images",
            len(tree.paragraphs),
            len(tree.tables),
            len(tree.images),
        )
        return tree

    def _parse_paragraph(self, paragraph_el: ET.Element) -> Paragraph:
        runs: List[Run] = []
        for child in list(paragraph_el):
            tag = local_name(child.tag)
            if tag == "r":
                runs.append(self._parse_run(child))
            elif tag == "hyperlink":
                runs.extend(self._parse_run(run_el) for run_el in child.findall("w:r", Namespaces.WORD))
            elif tag != "pPr":
                LOGGER.debug("Skipping paragraph child element: %s", tag)

        jc = paragraph_el.find("w:pPr/w:jc", Namespaces.WORD)
        return Paragraph(runs=runs, alignment=Alignment.from_word(word_attr(jc)))

    def _parse_run(self, run_el: ET.Element) -> Run:
        texts = [text_el.text or "" for text_el in run_el.findall("w:t", Namespaces.WORD)]
        return Run(texts=texts, formatting=self._parse_run_formatting(run_el.find("w:rPr", Namespaces.WORD)))

    def _parse_run_formatting(self, rpr: Optional[ET.Element]) -> RunFormatting:
        if rpr is None:
            return RunFormatting()
        return RunFormatting(
            bold=is_toggle_on(rpr.find("w:b", Namespaces.WORD)),
            italic=is_toggle_on(rpr.find("w:i", Namespaces.WORD)),
            font_size_half_points=self._parse_half_points(word_attr(rpr.find("w:sz", Namespaces.WORD))),
            color_hex=self._parse_color(word_attr(rpr.find("w:color", Namespaces.WORD))),
        )

    def _parse_table(self, table_el: ET.Element) -> Table:
        rows: List[TableRow] = []
        for row_el in table_el.findall("w:tr", Namespaces.WORD):
            cells = [TableCell(text=self._cell_text(cell_el)) for cell_el in row_el.findall("w:tc", Namespaces.WORD)]
            rows.append(TableRow(cells=cells))
        return Table(rows=rows)

    def _cell_text(self, cell_el: ET.Element) -> str:
        paragraphs = []
        for paragraph_el in cell_el.findall("w:p", Namespaces.WORD):
            text = "".join(t.text or "" for t in paragraph_el.iter(qualify("w:t")))
            if text:
                paragraphs.append(text)
        return " ".join(paragraphs)

    def _collect_images(self, element: ET.Element) -> List[ImagePlacement]:
        images: List[ImagePlacement] = []
        for blip in element.iter(f"{{{Namespaces.DRAWING['a']}}}blip"):
            embed_id = blip.attrib.get(_EMBED_ATTR)
            if not embed_id:
                continue
            images.append(ImagePlacement(embed_id=embed_id, target=self._relationships.resolve_image(embed_id)))
        return images

    @staticmethod
    def _parse_half_points(value: Optional[str]) -> Optional[float]:
        if value is None:
            return None
        try:
            size = float(value)
        except ValueError:
            return None
        if not math.isfinite(size) or size <= 0:
            return None
        return size

    @staticmethod
    def _parse_color(value: Optional[str]) -> Optional[str]:
        if not value or value.lower() == "auto":
            return None
        return value
