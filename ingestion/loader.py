"""
Document Loader - format selection and decode with plain-text fallback

Routes a DocumentHandle to the matching decoder:
- application/pdf: PdfDecoder (page texts + raster previews)
- DOCX media type or .docx: DocxDecoder
- application/epub+zip or .epub: EpubDecoder
- image/*: ImageDecoder
- anything else: TextDecoder

If a specialised decoder fails (missing capability, malformed file,
library error) the raw bytes are decoded as plain text instead, so the
user always gets a paginated result.

Usage:
    loader = DocumentLoader()
    document = await loader.load(handle)
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional

from .capabilities import DecoderCapabilities
from .decoder import BaseDecoder
from .docx_decoder import DocxDecoder
from .epub_decoder import EpubDecoder
from .exceptions import IngestionError, format_error_chain
from .image_decoder import ImageDecoder
from .models import DecodedDocument, DecoderConfig, DocumentHandle, FormatKind
from .pdf_decoder import PdfDecoder
from .sniffer import classify
from .text_decoder import TextDecoder

logger = logging.getLogger(__name__)


def handle_from_path(path: str | Path, media_type: Optional[str] = None) -> DocumentHandle:
    """Read a file from disk into a DocumentHandle."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    if media_type is None:
        media_type, _ = mimetypes.guess_type(path.name)
    return DocumentHandle(
        source_bytes=path.read_bytes(),
        declared_media_type=media_type or "",
        file_name=path.name,
    )


class DocumentLoader:
    """Selects a decoder for each document and guarantees a result."""

    def __init__(
        self,
        config: Optional[DecoderConfig] = None,
        capabilities: Optional[DecoderCapabilities] = None,
    ):
        self.config = config or DecoderConfig()
        self.capabilities = capabilities or DecoderCapabilities.from_config(self.config)
        self.text_decoder = TextDecoder(encoding=self.config.text_encoding)

    def decoder_for(self, kind: FormatKind, media_type: str = "") -> BaseDecoder:
        if kind == FormatKind.PDF:
            return PdfDecoder(self.capabilities.pdf, render_previews=self.config.render_previews)
        if kind == FormatKind.DOCX:
            return DocxDecoder(self.capabilities.docx)
        if kind == FormatKind.EPUB:
            return EpubDecoder(self.capabilities.archive)
        if kind == FormatKind.IMAGE:
            return ImageDecoder(media_type.split(";", 1)[0].strip().lower() or "image/png")
        return self.text_decoder

    async def load(self, handle: DocumentHandle) -> DecodedDocument:
        """
        Decode a document, falling back to plain text on failure.

        Raises:
            DecodeError: Only if the plain-text decode itself fails
        """
        kind = classify(handle.declared_media_type, handle.file_name)
        logger.info(
            f"Decoding {handle.file_name or '<unnamed>'} as {kind.value} "
            f"({handle.size_bytes} bytes, declared '{handle.declared_media_type}')"
        )
        decoder = self.decoder_for(kind, handle.declared_media_type)
        if decoder is self.text_decoder:
            return await decoder.decode(handle.source_bytes, handle.file_name)

        try:
            return await decoder.decode(handle.source_bytes, handle.file_name)
        except IngestionError as exc:
            logger.warning(
                f"{kind.value} decode failed, falling back to plain text:\n"
                f"{format_error_chain(exc)}"
            )
            document = await self.text_decoder.decode(handle.source_bytes, handle.file_name)
            return document.model_copy(update={
                "fallback_used": True,
                "warnings": [*document.warnings, f"{kind.value} decode failed: {exc}"],
            })
