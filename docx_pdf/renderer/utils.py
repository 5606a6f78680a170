"""Formatting resolution helpers shared by the renderer."""
from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from docx_pdf.model.elements import Alignment, RunFormatting

RGB = Tuple[int, int, int]
BLACK: RGB = (0, 0, 0)

_HEX_COLOR = re.compile(r"[0-9A-Fa-f]{6}")

_ALIGN_CODES: Dict[Alignment, str] = {
    Alignment.LEFT: "L",
    Alignment.CENTER: "C",
    Alignment.RIGHT: "R",
}

# Base-14 font names per family and style flags.
_STANDARD_FONTS: Dict[str, Dict[str, str]] = {
    "Helvetica": {"": "Helvetica", "B": "Helvetica-Bold", "I": "Helvetica-Oblique", "BI": "Helvetica-BoldOblique"},
    "Times": {"": "Times-Roman", "B": "Times-Bold", "I": "Times-Italic", "BI": "Times-BoldItalic"},
    "Courier": {"": "Courier", "B": "Courier-Bold", "I": "Courier-Oblique", "BI": "Courier-BoldOblique"},
}
_FAMILY_ALIASES = {"arial": "Helvetica", "helvetica": "Helvetica", "times": "Times", "courier": "Courier"}


def resolve_style_flags(formatting: RunFormatting) -> str:
    """Return the style flag string: ``""``, ``"B"``, ``"I"`` or ``"BI"``."""
    style = ""
    if formatting.bold:
        style += "B"
    if formatting.italic:
        style += "I"
    return style


def resolve_font_size(formatting: RunFormatting, default: float) -> float:
    """Convert the half-point run size to points, falling back to ``default``."""
    if formatting.font_size_half_points is None:
        return default
    return formatting.font_size_half_points / 2


def parse_hex_color(value: Optional[str]) -> RGB:
    """Parse ``RRGGBB`` into an RGB triplet; anything malformed yields black."""
    if not value:
        return BLACK
    value = value.strip().lstrip("#")
    if not _HEX_COLOR.fullmatch(value):
        return BLACK
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def alignment_code(alignment: Alignment) -> str:
    return _ALIGN_CODES.get(alignment, "L")


def font_name_for(family: str, style: str) -> str:
    """Map a family plus style flags onto a ReportLab font name.

    Families outside the standard set are returned unchanged and must be
    registered with ReportLab by the caller.
    """
    canonical = _FAMILY_ALIASES.get(family.lower(), family)
    variants = _STANDARD_FONTS.get(canonical)
    if variants is None:
        return family
    return variants.get(style, variants[""])
