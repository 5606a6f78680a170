"""Helper functions to work with XML namespaces and parsing."""
from __future__ import annotations

from typing import Dict, Optional
from xml.etree import ElementTree as ET

from docx_pdf.exceptions import MalformedMarkupError

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
DC_NS = "http://purl.org/dc/elements/1.1/"


class Namespaces:
    """Common OpenXML namespace prefixes used across parsers."""

    WORD: Dict[str, str] = {"w": WORD_NS}
    RELS: Dict[str, str] = {"rel": PACKAGE_REL_NS}
    DRAWING: Dict[str, str] = {"a": DRAWING_NS}
    CORE: Dict[str, str] = {"dc": DC_NS}

    def __init__(self) -> None:  # pragma: no cover
        raise RuntimeError("Namespaces should not be instantiated")


_FALSE_TOGGLES = {"0", "false", "off"}


def parse_xml(data: bytes, part_name: str = "<xml>") -> ET.Element:
    """Parse XML from raw bytes, raising MalformedMarkupError on failure."""
    try:
        return ET.fromstring(data)
    except (ET.ParseError, LookupError, ValueError) as exc:
        # expat reports an unknown declared encoding as LookupError
        raise MalformedMarkupError(part_name, str(exc)) from exc


def qualify(name: str) -> str:
    """Expand a ``w:val`` style name into Clark notation."""
    prefix, local = name.split(":", 1)
    namespace = {"w": WORD_NS, "r": OFFICE_REL_NS, "a": DRAWING_NS}[prefix]
    return f"{{{namespace}}}{local}"


def local_name(tag: str) -> str:
    """Return the tag without its namespace."""
    return tag.split("}", 1)[-1]


def word_attr(element: Optional[ET.Element], name: str = "val") -> Optional[str]:
    """Return a ``w:`` attribute of ``element`` or None."""
    if element is None:
        return None
    return element.attrib.get(f"{{{WORD_NS}}}{name}")


def is_toggle_on(element: Optional[ET.Element]) -> bool:
    """Evaluate an on/off property such as ``<w:b/>`` or ``<w:i w:val="0"/>``."""
    if element is None:
        return False
    value = word_attr(element)
    if value is None:
        return True
    return value.strip().lower() not in _FALSE_TOGGLES


def find_text(element: ET.Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Return trimmed text from the first element that matches the xpath."""
    found = element.find(xpath, namespaces or {})
    if found is None or found.text is None:
        return None
    return found.text.strip() or None
