"""Tests for document parser functionality."""
import unittest

from docx_pdf.exceptions import MalformedMarkupError
from docx_pdf.model.elements import Alignment, ImagePlacement, Paragraph, RunFormatting, Table
from docx_pdf.parser.document_parser import DocumentParser
from docx_pdf.parser.rels_parser import Relationships

NAMESPACES = (
    'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture"'
)

DRAWING = """
<w:r>
  <w:drawing>
    <wp:inline>
      <wp:extent cx="952500" cy="952500"/>
      <a:graphic>
        <a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">
          <pic:pic>
            <pic:blipFill><a:blip r:embed="{r_id}"/></pic:blipFill>
          </pic:pic>
        </a:graphicData>
      </a:graphic>
    </wp:inline>
  </w:drawing>
</w:r>
"""

DOC_RELS_XML = """
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId5" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/image" Target="media/image1.png"/>
</Relationships>
"""


def document(body: str) -> bytes:
    return f"<w:document {NAMESPACES}><w:body>{body}</w:body></w:document>".encode("utf-8")


def parse(body: str, relationships=None):
    return DocumentParser(document(body), relationships).parse()


class DocumentParserTest(unittest.TestCase):
    """Test document parsing functionality."""

    def test_parse_basic_paragraph(self) -> None:
        tree = parse("<w:p><w:r><w:t>Hello</w:t></w:r></w:p>")

        self.assertEqual(len(tree.paragraphs), 1)
        paragraph = tree.paragraphs[0]
        self.assertEqual(paragraph.alignment, Alignment.LEFT)
        self.assertEqual(len(paragraph.runs), 1)
        self.assertEqual(paragraph.runs[0].texts, ["Hello"])
        self.assertEqual(paragraph.runs[0].formatting, RunFormatting())

    def test_each_text_element_is_a_fragment(self) -> None:
        tree = parse("<w:p><w:r><w:t>One</w:t><w:tab/><w:t xml:space=\"preserve\"> two</w:t></w:r></w:p>")
        self.assertEqual(tree.paragraphs[0].runs[0].texts, ["One", " two"])

    def test_parse_run_formatting(self) -> None:
        tree = parse("""
            <w:p>
              <w:r>
                <w:rPr><w:b/><w:sz w:val="28"/><w:color w:val="FF0000"/></w:rPr>
                <w:t>Formatted</w:t>
              </w:r>
            </w:p>
        """)
        formatting = tree.paragraphs[0].runs[0].formatting
        self.assertTrue(formatting.bold)
        self.assertFalse(formatting.italic)
        self.assertEqual(formatting.font_size_half_points, 28.0)
        self.assertEqual(formatting.color_hex, "FF0000")

    def test_toggle_values_switch_formatting_off(self) -> None:
        tree = parse("""
            <w:p><w:r><w:rPr><w:b w:val="0"/><w:i w:val="true"/></w:rPr><w:t>x</w:t></w:r></w:p>
        """)
        formatting = tree.paragraphs[0].runs[0].formatting
        self.assertFalse(formatting.bold)
        self.assertTrue(formatting.italic)

    def test_invalid_size_and_auto_color_are_absent(self) -> None:
        tree = parse("""
            <w:p><w:r><w:rPr><w:sz w:val="large"/><w:color w:val="auto"/></w:rPr><w:t>x</w:t></w:r></w:p>
        """)
        formatting = tree.paragraphs[0].runs[0].formatting
        self.assertIsNone(formatting.font_size_half_points)
        self.assertIsNone(formatting.color_hex)

    def test_malformed_color_is_kept_for_the_renderer(self) -> None:
        tree = parse('<w:p><w:r><w:rPr><w:color w:val="zz0000"/></w:rPr><w:t>x</w:t></w:r></w:p>')
        self.assertEqual(tree.paragraphs[0].runs[0].formatting.color_hex, "zz0000")

    def test_paragraph_alignment(self) -> None:
        cases = {"center": Alignment.CENTER, "right": Alignment.RIGHT, "end": Alignment.RIGHT,
                 "both": Alignment.LEFT, "start": Alignment.LEFT}
        for value, expected in cases.items():
            with self.subTest(value=value):
                tree = parse(f'<w:p><w:pPr><w:jc w:val="{value}"/></w:pPr><w:r><w:t>x</w:t></w:r></w:p>')
                self.assertEqual(tree.paragraphs[0].alignment, expected)

    def test_hyperlink_runs_are_included(self) -> None:
        tree = parse("""
            <w:p>
              <w:r><w:t>See </w:t></w:r>
              <w:hyperlink r:id="rId9"><w:r><w:t>the site</w:t></w:r></w:hyperlink>
            </w:p>
        """)
        self.assertEqual(tree.paragraphs[0].text, "See the site")

    def test_parse_table(self) -> None:
        tree = parse("""
            <w:tbl>
              <w:tblPr><w:tblStyle w:val="TableGrid"/></w:tblPr>
              <w:tr>
                <w:tc><w:p><w:r><w:t>A</w:t></w:r></w:p></w:tc>
                <w:tc><w:p><w:r><w:t>B</w:t></w:r></w:p></w:tc>
              </w:tr>
              <w:tr>
                <w:tc><w:tcPr/><w:p><w:r><w:t>C</w:t></w:r></w:p></w:tc>
                <w:tc><w:p><w:r><w:t>D</w:t></w:r><w:r><w:t>1</w:t></w:r></w:p><w:p><w:r><w:t>2</w:t></w:r></w:p></w:tc>
              </w:tr>
            </w:tbl>
        """)
        self.assertEqual(len(tree.tables), 1)
        rows = [[cell.text for cell in row.cells] for row in tree.tables[0].rows]
        self.assertEqual(rows, [["A", "B"], ["C", "D1 2"]])
        self.assertEqual(tree.paragraphs, [])

    def test_images_resolve_through_relationships(self) -> None:
        relationships = Relationships.from_package({"word/_rels/document.xml.rels": DOC_RELS_XML.encode("utf-8")})
        tree = parse(f"<w:p>{DRAWING.format(r_id='rId5')}</w:p>", relationships)

        self.assertEqual(tree.images, [ImagePlacement(embed_id="rId5", target="word/media/image1.png")])

    def test_unresolved_image_keeps_embed_id(self) -> None:
        tree = parse(f"<w:p>{DRAWING.format(r_id='image7.png')}</w:p>")
        self.assertEqual(tree.images, [ImagePlacement(embed_id="image7.png", target=None)])

    def test_buckets_and_document_order(self) -> None:
        tree = parse(f"""
            <w:p><w:r><w:t>First</w:t></w:r></w:p>
            <w:tbl><w:tr><w:tc><w:p><w:r><w:t>Cell</w:t></w:r></w:p></w:tc></w:tr></w:tbl>
            <w:p><w:r><w:t>Second</w:t></w:r>{DRAWING.format(r_id='rId1')}</w:p>
            <w:sectPr/>
        """)
        self.assertEqual([p.text for p in tree.paragraphs], ["First", "Second"])
        self.assertEqual(len(tree.tables), 1)
        self.assertEqual(len(tree.images), 1)
        kinds = [type(block) for block in tree.blocks]
        self.assertEqual(kinds, [Paragraph, Table, Paragraph, ImagePlacement])

    def test_unknown_elements_are_ignored(self) -> None:
        body = """
            <w:customXml><w:p><w:r><w:t>hidden</w:t></w:r></w:p></w:customXml>
            <w:p><w:bookmarkStart w:id="0" w:name="x"/><w:r><w:t>Visible</w:t><w:br/></w:r></w:p>
        """
        tree = parse(body)
        self.assertEqual([p.text for p in tree.paragraphs], ["Visible"])

    def test_missing_document_gives_empty_tree(self) -> None:
        tree = DocumentParser(None).parse()
        self.assertTrue(tree.is_empty)

    def test_missing_body_gives_empty_tree(self) -> None:
        xml = f"<w:document {NAMESPACES}/>".encode("utf-8")
        self.assertTrue(DocumentParser(xml).parse().is_empty)

    def test_malformed_xml_raises(self) -> None:
        with self.assertRaises(MalformedMarkupError):
            DocumentParser(b"<w:document><w:body></w:document>").parse()

    def test_invalid_encoding_raises(self) -> None:
        xml = b'<?xml version="1.0" encoding="UTF-8"?><document>\xff\xfe</document>'
        with self.assertRaises(MalformedMarkupError):
            DocumentParser(xml).parse()

    def test_unknown_declared_encoding_raises(self) -> None:
        xml = b'<?xml version="1.0" encoding="x-bogus"?><document/>'
        with self.assertRaises(MalformedMarkupError) as ctx:
            DocumentParser(xml).parse()
        self.assertEqual(ctx.exception.part_name, "word/document.xml")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
