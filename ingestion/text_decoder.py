"""
Plain-text decoder.

Also serves as the guaranteed fallback for every other format, so it
never rejects input: invalid byte sequences are replaced.
"""

from __future__ import annotations

from .decoder import BaseDecoder, normalize_newlines, split_paragraphs
from .models import ContentUnit, DecodedDocument, FormatKind


class TextDecoder(BaseDecoder):
    format = FormatKind.TEXT

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def decode_text(self, data: bytes) -> str:
        """Decode bytes to normalised text."""
        text = data.decode(self.encoding, errors="replace")
        return normalize_newlines(text.lstrip("\ufeff"))

    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        text = self.decode_text(data)
        units = [ContentUnit(text=para) for para in split_paragraphs(text)]
        return DecodedDocument(
            format=self.format,
            source_name=source_name,
            units=units,
            full_text=text,
        )
