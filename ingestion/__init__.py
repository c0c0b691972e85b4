"""
Ingestion - Document decoding for page selection

Decodes uploaded documents (PDF, DOCX, EPUB, images, plain text) into
ordered content units that the pagination package turns into
selectable pages.

Features:
- Format sniffing from media type and file name
- One decoder per container format, each async
- Injected decode capabilities (PyMuPDF, python-docx, zipfile)
- EPUB reading order from the OPF manifest and spine
- Guaranteed plain-text fallback when a specialised decoder fails

Quick Start:
    import asyncio
    from ingestion import DocumentLoader, handle_from_path

    loader = DocumentLoader()
    document = asyncio.run(loader.load(handle_from_path("book.epub")))

    print(f"Format: {document.format.value}")
    print(f"Units: {document.total_units}")
"""

__version__ = "1.0.0"

from .capabilities import (
    DecoderCapabilities,
    PdfPageContent,
    Unavailable,
)
from .decoder import BaseDecoder, split_paragraphs
from .docx_decoder import DocxDecoder
from .epub_decoder import (
    EpubDecoder,
    fallback_reading_order,
    find_package_document,
    html_to_paragraphs,
    resolve_spine,
)
from .exceptions import (
    DecodeError,
    IngestionError,
    MalformedArchiveError,
    UnsupportedLibraryError,
    format_error_chain,
)
from .image_decoder import ImageDecoder
from .loader import DocumentLoader, handle_from_path
from .models import (
    ContentUnit,
    DecodedDocument,
    DecoderConfig,
    DocumentHandle,
    FormatKind,
)
from .pdf_decoder import PdfDecoder
from .sniffer import classify
from .text_decoder import TextDecoder

__all__ = [
    "__version__",
    # Loader
    "DocumentLoader",
    "handle_from_path",
    "classify",
    # Decoders
    "BaseDecoder",
    "TextDecoder",
    "PdfDecoder",
    "DocxDecoder",
    "EpubDecoder",
    "ImageDecoder",
    "split_paragraphs",
    "find_package_document",
    "resolve_spine",
    "fallback_reading_order",
    "html_to_paragraphs",
    # Capabilities
    "DecoderCapabilities",
    "PdfPageContent",
    "Unavailable",
    # Models
    "FormatKind",
    "DocumentHandle",
    "ContentUnit",
    "DecodedDocument",
    "DecoderConfig",
    # Exceptions
    "IngestionError",
    "UnsupportedLibraryError",
    "MalformedArchiveError",
    "DecodeError",
    "format_error_chain",
]
