"""Exception hierarchy raised by the conversion pipeline.

Every fatal condition aborts the whole conversion; callers can catch
:class:`ConversionError` to handle all of them at once.
"""
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""


class ContainerFormatError(ConversionError):
    """The input bytes are not a readable zip archive."""


class MalformedMarkupError(ConversionError):
    """An XML part is not well-formed."""

    def __init__(self, part_name: str, reason: str) -> None:
        self.part_name = part_name
        super().__init__(f"Malformed XML in {part_name}: {reason}")


class MediaWriteError(ConversionError):
    """An embedded media entry could not be copied to temporary storage."""

    def __init__(self, entry_name: Optional[str], reason: str) -> None:
        self.entry_name = entry_name
        target = entry_name or "media storage"
        super().__init__(f"Failed to extract {target}: {reason}")


class RenderError(ConversionError):
    """Drawing or serializing the PDF failed."""
