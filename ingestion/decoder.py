"""
Decoder base class and shared text helpers.

Every decoder turns raw bytes into a DecodedDocument. Parsing runs in a
worker thread so ``decode`` suspends the calling coroutine; any library
failure surfaces as DecodeError.
"""

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod

from .exceptions import DecodeError, IngestionError
from .models import DecodedDocument, FormatKind

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n{2,}")


def normalize_newlines(text: str) -> str:
    """Convert CRLF/CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank-line boundaries, dropping empty paragraphs."""
    paragraphs = []
    for part in PARAGRAPH_BREAK.split(text):
        part = part.strip()
        if part:
            paragraphs.append(part)
    return paragraphs


class BaseDecoder(ABC):
    """Common async contract for all decoders."""

    format: FormatKind

    async def decode(self, data: bytes, source_name: str = "") -> DecodedDocument:
        """
        Decode raw bytes into content units.

        Args:
            data: File content
            source_name: Original file name (informational)

        Returns:
            DecodedDocument with units in reading order

        Raises:
            UnsupportedLibraryError: If a required capability is unavailable
            DecodeError: If the content cannot be decoded
        """
        try:
            return await asyncio.to_thread(self._decode, data, source_name)
        except IngestionError:
            raise
        except Exception as exc:
            raise DecodeError(self.format.value, original_error=exc) from exc

    @abstractmethod
    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        ...
