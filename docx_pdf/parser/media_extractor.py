"""
DOCX media extractor.

Copies every ``word/media/`` entry of a package into a scoped temporary
directory so the renderer can reference images by path.
"""
from __future__ import annotations

import posixpath
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from docx_pdf.exceptions import MediaWriteError
from docx_pdf.model.elements import ImagePlacement
from docx_pdf.parser.docx_loader import MEDIA_PREFIX, DocxPackage
from docx_pdf.utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class MediaIndex:
    """Mapping from archive-internal media names to extracted file locations."""

    locations: Mapping[str, Path] = field(default_factory=dict)
    prefix: str = MEDIA_PREFIX

    def __post_init__(self) -> None:
        self.locations = MappingProxyType(dict(self.locations))

    def __len__(self) -> int:
        return len(self.locations)

    def lookup(self, image: ImagePlacement) -> Optional[Path]:
        """Resolve an image placement to its extracted file.

        The relationship-resolved target wins; otherwise the embed id is read as
        a file name below the media prefix.
        """
        if image.target:
            location = self.locations.get(image.target)
            if location is not None:
                return location
        return self.locations.get(self.prefix + image.embed_id)


class MediaExtractor:
    """Extracts media entries of a DOCX package into temporary storage."""

    def __init__(self, package: DocxPackage, prefix: str = MEDIA_PREFIX) -> None:
        self.package = package
        self.prefix = prefix

    @contextmanager
    def extract(self) -> Iterator[MediaIndex]:
        """Yield a MediaIndex whose files live until the context exits.

        A failure on any entry raises MediaWriteError and no index is produced;
        the temporary directory is removed on every exit path.
        """
        try:
            workdir = tempfile.TemporaryDirectory(prefix="docx_media_", ignore_cleanup_errors=True)
        except OSError as exc:
            raise MediaWriteError(None, str(exc)) from exc

        with workdir as root:
            index = MediaIndex(self._copy_entries(Path(root)), prefix=self.prefix)
            LOGGER.debug("Extracted %d media entries into %s", len(index), root)
            yield index

    def _copy_entries(self, root: Path) -> Dict[str, Path]:
        locations: Dict[str, Path] = {}
        for name, data in self.package.iter_prefixed(self.prefix):
            relative = posixpath.normpath(name[len(self.prefix) :])
            if relative.startswith("../") or relative in ("..", ".") or posixpath.isabs(relative):
                LOGGER.warning("Skipping media entry outside %s: %s", self.prefix, name)
                continue

            destination = root.joinpath(*relative.split("/"))
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_bytes(data)
            except OSError as exc:
                raise MediaWriteError(name, str(exc)) from exc
            locations[name] = destination
        return locations
