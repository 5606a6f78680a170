"""
Text normalization for drawing run text with the standard PDF fonts.

The base-14 fonts only cover a Latin-1 style repertoire, so invisible
characters and typographic spaces are folded before text reaches the canvas.
"""

import re
from typing import Optional


class TextNormalizer:
    """Normalizes text fragments extracted from WordprocessingML."""

    # Common Word special characters that need normalization
    SPECIAL_CHARS = {
        '\u00a0': ' ',      # Non-breaking space
        '\u2009': ' ',      # Thin space
        '\u2007': ' ',      # Figure space
        '\u2008': ' ',      # Punctuation space
        '\u202f': ' ',      # Narrow no-break space
        '\u200b': '',       # Zero-width space
        '\u200c': '',       # Zero-width non-joiner
        '\u200d': '',       # Zero-width joiner
        '\u2060': '',       # Word joiner
        '\ufeff': '',       # Byte order mark
        '\u00ad': '',       # Soft hyphen
        '\u2011': '-',      # Non-breaking hyphen
    }

    WHITESPACE_PATTERN = re.compile(r'\s+')

    # Control characters; tabs and line breaks are handled separately
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')

    LINE_BREAK_PATTERN = re.compile(r'\r\n|\r|\n')

    def __init__(self, preserve_whitespace: bool = True, tab_width: int = 4):
        """Initialize text normalizer.

        Args:
            preserve_whitespace: If True, keep runs of spaces as written.
                                If False, collapse whitespace to single spaces.
            tab_width: Number of spaces a tab expands to.
        """
        self.preserve_whitespace = preserve_whitespace
        self.tab_width = tab_width

    def normalize_text(self, text: Optional[str]) -> str:
        """Return ``text`` folded into a single drawable line."""
        if not text:
            return ""

        normalized = self._replace_special_chars(text)
        normalized = normalized.replace('\t', ' ' * self.tab_width)
        normalized = self.LINE_BREAK_PATTERN.sub(' ', normalized)
        normalized = self.CONTROL_CHARS_PATTERN.sub('', normalized)

        if not self.preserve_whitespace:
            normalized = self.WHITESPACE_PATTERN.sub(' ', normalized).strip()

        return normalized

    def _replace_special_chars(self, text: str) -> str:
        for original, replacement in self.SPECIAL_CHARS.items():
            text = text.replace(original, replacement)
        return text

