"""In-memory representation of parsed document content."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Alignment(str, Enum):
    """Horizontal paragraph alignment supported by the renderer."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @classmethod
    def from_word(cls, value: Optional[str]) -> "Alignment":
        """Map a ``w:jc`` value onto the three supported alignments."""
        if value == "center":
            return cls.CENTER
        if value in ("right", "end"):
            return cls.RIGHT
        return cls.LEFT


@dataclass(slots=True, frozen=True)
class RunFormatting:
    """Inline formatting of a run; absent values resolve to renderer defaults."""

    bold: bool = False
    italic: bool = False
    font_size_half_points: Optional[float] = None
    color_hex: Optional[str] = None


@dataclass(slots=True)
class Run:
    """Contiguous span of text fragments sharing one formatting set."""

    texts: List[str] = field(default_factory=list)
    formatting: RunFormatting = field(default_factory=RunFormatting)


@dataclass(slots=True)
class Paragraph:
    """Block-level paragraph made of runs."""

    runs: List[Run] = field(default_factory=list)
    alignment: Alignment = Alignment.LEFT

    @property
    def text(self) -> str:
        return "".join(text for run in self.runs for text in run.texts)


@dataclass(slots=True)
class TableCell:
    """Single table cell; only plain text is modeled."""

    text: str = ""


@dataclass(slots=True)
class TableRow:
    """Row with a sequence of cells."""

    cells: List[TableCell] = field(default_factory=list)


@dataclass(slots=True)
class Table:
    """Simple grid table extracted from ``w:tbl``."""

    rows: List[TableRow] = field(default_factory=list)


@dataclass(slots=True)
class ImagePlacement:
    """Reference from the document body to an embedded media entry."""

    embed_id: str
    target: Optional[str] = None


Block = Paragraph | Table | ImagePlacement


@dataclass(slots=True)
class DocumentTree:
    """Parsed body content.

    ``paragraphs``, ``tables`` and ``images`` keep each kind in its own ordered
    bucket; ``blocks`` holds the same objects interleaved in source order.
    """

    paragraphs: List[Paragraph] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    images: List[ImagePlacement] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def add(self, block: Block) -> None:
        """Append a block to its bucket and to the document-order sequence."""
        if isinstance(block, Paragraph):
            self.paragraphs.append(block)
        elif isinstance(block, Table):
            self.tables.append(block)
        elif isinstance(block, ImagePlacement):
            self.images.append(block)
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")
        self.blocks.append(block)

    @property
    def is_empty(self) -> bool:
        return not self.blocks
