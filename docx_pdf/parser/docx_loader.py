"""DOCX package loader responsible for unpacking the archive entries."""
from __future__ import annotations

import io
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from docx_pdf.exceptions import ContainerFormatError, MalformedMarkupError
from docx_pdf.parser.rels_parser import Relationships
from docx_pdf.utils.logger import get_logger
from docx_pdf.utils.xml_utils import Namespaces, find_text, parse_xml

LOGGER = get_logger(__name__)

DOCUMENT_XML_PATH = "word/document.xml"
MEDIA_PREFIX = "word/media/"
CORE_PROPS_PATH = "docProps/core.xml"

# General purpose flag bit 0: the entry is encrypted.
_ENCRYPTED_FLAG = 0x1


@dataclass(slots=True)
class DocxPackage:
    """Read-only view over the named byte blobs of a DOCX archive."""

    raw_parts: Mapping[str, bytes]
    relationships: Relationships = field(init=False)

    def __post_init__(self) -> None:
        self.raw_parts = MappingProxyType(dict(self.raw_parts))
        self.relationships = Relationships.from_package(self.raw_parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        """Open raw archive bytes, raising ContainerFormatError when unreadable."""
        parts: Dict[str, bytes] = {}
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as docx_zip:
                for info in docx_zip.infolist():
                    if info.is_dir():
                        continue
                    if info.flag_bits & _ENCRYPTED_FLAG:
                        raise ContainerFormatError(f"Archive entry is encrypted: {info.filename}")
                    parts[info.filename] = docx_zip.read(info)
        except NotImplementedError as exc:
            # Unsupported compression method inside an otherwise valid archive.
            raise ContainerFormatError(f"Unsupported archive entry: {exc}") from exc
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, ValueError, RuntimeError) as exc:
            raise ContainerFormatError(f"Input is not a valid DOCX archive: {exc}") from exc

        LOGGER.debug("Loaded %d parts from archive", len(parts))
        return cls(raw_parts=parts)

    @classmethod
    def load(cls, docx_path: Path) -> "DocxPackage":
        """Read a DOCX file from disk and open it."""
        return cls.from_bytes(Path(docx_path).read_bytes())

    # ------------------------------------------------------------------
    # Public helpers
    @property
    def document_xml(self) -> Optional[bytes]:
        """Raw bytes of the primary document part, or None when it is absent."""
        return self.raw_parts.get(DOCUMENT_XML_PATH)

    def iter_prefixed(self, prefix: str) -> Iterator[Tuple[str, bytes]]:
        """Yield ``(name, data)`` for every entry below ``prefix`` in archive order."""
        for name, data in self.raw_parts.items():
            if name.startswith(prefix):
                yield name, data

    def core_properties(self) -> Dict[str, str]:
        """Return title and author from ``docProps/core.xml`` when available."""
        data = self.raw_parts.get(CORE_PROPS_PATH)
        if data is None:
            return {}
        try:
            root = parse_xml(data, CORE_PROPS_PATH)
        except MalformedMarkupError as exc:
            LOGGER.warning("Ignoring core properties: %s", exc)
            return {}

        properties: Dict[str, str] = {}
        title = find_text(root, "dc:title", Namespaces.CORE)
        creator = find_text(root, "dc:creator", Namespaces.CORE)
        if title:
            properties["title"] = title
        if creator:
            properties["author"] = creator
        return properties
