"""Utilities for reading Open Packaging Convention relationship parts."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Mapping, Optional, Tuple

from docx_pdf.exceptions import MalformedMarkupError
from docx_pdf.utils.logger import get_logger
from docx_pdf.utils.xml_utils import OFFICE_REL_NS, Namespaces, parse_xml

LOGGER = get_logger(__name__)

RELTYPE_IMAGE = f"{OFFICE_REL_NS}/image"

MAIN_DOCUMENT_PART = "word/document.xml"


@dataclass(frozen=True)
class Relationship:
    """Represents a single OPC relationship."""

    source_part: str
    r_id: str
    target: str
    rel_type: str
    is_external: bool = False
    resolved_target: Optional[str] = None


class Relationships:
    """Relationship mappings keyed by source part and relationship id."""

    def __init__(self, relationships: Dict[str, Dict[str, Relationship]]) -> None:
        self._by_source = relationships

    @classmethod
    def empty(cls) -> "Relationships":
        return cls({})

    @classmethod
    def from_package(cls, parts: Mapping[str, bytes]) -> "Relationships":
        """Collect relationships from every ``.rels`` part; broken parts are skipped."""
        by_source: Dict[str, Dict[str, Relationship]] = {}
        for name, payload in parts.items():
            if not name.endswith(".rels"):
                continue
            source, base_dir = cls._source_and_base_from_rel_part(name)
            try:
                root = parse_xml(payload, name)
            except MalformedMarkupError as exc:
                LOGGER.warning("Ignoring relationship part: %s", exc)
                continue
            parsed = {}
            for rel_el in root.findall("rel:Relationship", Namespaces.RELS):
                rel = cls._build_relationship(source, base_dir, rel_el.attrib)
                if rel is not None:
                    parsed[rel.r_id] = rel
            if parsed:
                by_source[source] = parsed
        return cls(by_source)

    def find(self, part_name: str, r_id: str) -> Optional[Relationship]:
        """Return a relationship by source part and id if present."""
        return self._by_source.get(part_name, {}).get(r_id)

    def resolve_image(self, r_id: str, part_name: str = MAIN_DOCUMENT_PART) -> Optional[str]:
        """Return the archive name an internal image relationship points at."""
        rel = self.find(part_name, r_id)
        if rel is None or rel.is_external or rel.rel_type != RELTYPE_IMAGE:
            return None
        return rel.resolved_target

    @classmethod
    def _build_relationship(
        cls, source: str, base_dir: PurePosixPath, attrib: Mapping[str, str]
    ) -> Optional[Relationship]:
        r_id = attrib.get("Id")
        if not r_id:
            return None
        target = attrib.get("Target", "")
        is_external = attrib.get("TargetMode") == "External"
        return Relationship(
            source_part=source,
            r_id=r_id,
            target=target,
            rel_type=attrib.get("Type", ""),
            is_external=is_external,
            resolved_target=cls._resolve_target_path(base_dir, target, is_external),
        )

    @staticmethod
    def _source_and_base_from_rel_part(rel_part: str) -> Tuple[str, PurePosixPath]:
        # word/_rels/document.xml.rels describes word/document.xml, relative to word/
        if rel_part == "_rels/.rels":
            return "", PurePosixPath("")
        if "/_rels/" in rel_part:
            folder, suffix = rel_part.split("/_rels/", 1)
            return f"{folder}/{suffix[:-5]}", PurePosixPath(folder)
        if rel_part.startswith("_rels/"):
            return rel_part[len("_rels/") : -5], PurePosixPath("")
        return rel_part[:-5], PurePosixPath(rel_part).parent

    @staticmethod
    def _resolve_target_path(base_dir: PurePosixPath, target: str, is_external: bool) -> Optional[str]:
        if not target:
            return None
        if is_external:
            return target
        if target.startswith("/"):
            return posixpath.normpath(target.lstrip("/"))
        return posixpath.normpath(base_dir.joinpath(target).as_posix())
