"""Entry-point for the DOCX to PDF conversion pipeline."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from docx_pdf.model.elements import DocumentTree
from docx_pdf.parser.docx_loader import DocxPackage
from docx_pdf.parser.document_parser import DocumentParser
from docx_pdf.parser.media_extractor import MediaExtractor
from docx_pdf.renderer.layout import READING_ORDER_DOCUMENT, READING_ORDER_GROUPED, LayoutSettings
from docx_pdf.renderer.pdf_renderer import PdfRenderer
from docx_pdf.utils.debug import DebugDumper
from docx_pdf.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)


def build_document_tree(package: DocxPackage) -> DocumentTree:
    """Parse the primary document part and attach the package properties."""
    tree = DocumentParser(package.document_xml, package.relationships).parse()
    tree.metadata.update(package.core_properties())
    return tree


def convert(input_bytes: bytes, settings: Optional[LayoutSettings] = None) -> bytes:
    """Convert the bytes of a .docx file into the bytes of a PDF.

    Raises a :class:`~docx_pdf.exceptions.ConversionError` subclass on failure;
    no temporary files outlive the call.
    """
    return render_package(DocxPackage.from_bytes(input_bytes), settings)


def render_package(package: DocxPackage, settings: Optional[LayoutSettings] = None,
                   tree: Optional[DocumentTree] = None) -> bytes:
    """Render an opened package, parsing it unless ``tree`` is supplied."""
    if tree is None:
        tree = build_document_tree(package)
    with MediaExtractor(package).extract() as media:
        output = PdfRenderer(settings).render(tree, media)
    LOGGER.info(
        "Converted %d paragraphs, %d tables, %d images into %d bytes",
        len(tree.paragraphs),
        len(tree.tables),
        len(tree.images),
        len(output),
    )
    return output


def main(docx_file: str, output_file: Optional[str] = None, *, settings: Optional[LayoutSettings] = None,
         dump_dir: Optional[str] = None) -> Path:
    """Convert ``docx_file`` on disk and write the PDF next to it or to ``output_file``."""
    docx_path = Path(docx_file).resolve()
    if not docx_path.exists():
        raise FileNotFoundError(f"DOCX file not found: {docx_path}")

    output_path = Path(output_file).resolve() if output_file else docx_path.with_suffix(".pdf")
    LOGGER.info("Converting %s -> %s", docx_path.name, output_path)
    package = DocxPackage.load(docx_path)
    tree = build_document_tree(package)

    if dump_dir is not None:
        DebugDumper(Path(dump_dir)).dump(tree)

    output_path.write_bytes(render_package(package, settings, tree))
    return output_path


def cli(argv: Optional[Sequence[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Render a DOCX file into a PDF")
    parser.add_argument("docx_file", help="Path to the input .docx file")
    parser.add_argument("--output", help="Path of the PDF to write (defaults to the input name with .pdf)")
    parser.add_argument(
        "--reading-order",
        choices=[READING_ORDER_GROUPED, READING_ORDER_DOCUMENT],
        default=READING_ORDER_GROUPED,
        help="Emit paragraphs, tables and images as groups or in source order",
    )
    parser.add_argument("--dump-tree", metavar="DIR", help="Write the parsed document tree as JSON into DIR")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    main(
        args.docx_file,
        args.output,
        settings=LayoutSettings(reading_order=args.reading_order),
        dump_dir=args.dump_tree,
    )


if __name__ == "__main__":  # pragma: no cover
    cli()
