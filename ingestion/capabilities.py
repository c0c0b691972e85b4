"""
Decode capabilities injected into the decoders.

Each format-specific library sits behind a small protocol so decoders
never look libraries up on their own:

    PdfEngine      - page texts and raster previews (PyMuPDF)
    DocxReader     - OOXML word-processing package reader (python-docx)
    ArchiveOpener  - ZIP container reader (zipfile)

``Unavailable`` implements all three protocols by raising
UnsupportedLibraryError, which the loader turns into a plain-text decode.

Usage:
    caps = DecoderCapabilities.default()
    caps = DecoderCapabilities.from_config(DecoderConfig(disabled_capabilities=["pdf"]))
"""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import docx
import fitz  # PyMuPDF

from .exceptions import UnsupportedLibraryError
from .models import DecoderConfig
from .pdf_to_images import PageImage, PDFToImages

logger = logging.getLogger(__name__)


# =============================================================================
# PROTOCOLS
# =============================================================================


@dataclass(frozen=True)
class PdfPageContent:
    """Text and optional preview of one PDF page."""
    page_number: int  # 1-indexed
    text: str
    preview: Optional[PageImage] = None


class PdfEngine(Protocol):
    def read_pages(self, data: bytes, render: bool = True) -> list[PdfPageContent]:
        ...


class DocxReader(Protocol):
    def open(self, data: bytes) -> Any:
        ...


class ArchiveReader(Protocol):
    def names(self) -> list[str]:
        ...

    def read(self, name: str) -> bytes:
        ...

    def close(self) -> None:
        ...


class ArchiveOpener(Protocol):
    def open(self, data: bytes) -> ArchiveReader:
        ...


# =============================================================================
# UNAVAILABLE VARIANT
# =============================================================================


class Unavailable:
    """Stand-in for a capability that is switched off or missing."""

    def __init__(self, name: str, reason: str | None = None):
        self.name = name
        self.reason = reason

    def read_pages(self, data: bytes, render: bool = True) -> list[PdfPageContent]:
        raise UnsupportedLibraryError(self.name, self.reason)

    def open(self, data: bytes) -> Any:
        raise UnsupportedLibraryError(self.name, self.reason)

    def __repr__(self) -> str:
        return f"Unavailable({self.name!r})"


# =============================================================================
# DEFAULT IMPLEMENTATIONS
# =============================================================================


class PyMuPDFEngine:
    """Reads PDF pages from memory with PyMuPDF."""

    def __init__(self, renderer: PDFToImages | None = None):
        self.renderer = renderer or PDFToImages()

    def read_pages(self, data: bytes, render: bool = True) -> list[PdfPageContent]:
        pages: list[PdfPageContent] = []
        with fitz.open(stream=data, filetype="pdf") as doc:
            for idx, page in enumerate(doc):
                page_number = idx + 1
                # words: (x0, y0, x1, y1, word, block_no, line_no, word_no)
                words = page.get_text("words", sort=True)
                text = " ".join(word[4] for word in words if word[4].strip())
                preview = (
                    self.renderer.render_page_object(page, page_number)
                    if render
                    else None
                )
                pages.append(PdfPageContent(
                    page_number=page_number,
                    text=text,
                    preview=preview,
                ))
        return pages


class PythonDocxReader:
    """Opens DOCX packages with python-docx."""

    def open(self, data: bytes) -> Any:
        return docx.Document(io.BytesIO(data))


class ZipArchiveReader:
    """Read-only view over an in-memory ZIP archive."""

    def __init__(self, data: bytes):
        self._zip = zipfile.ZipFile(io.BytesIO(data))

    def names(self) -> list[str]:
        return [info.filename for info in self._zip.infolist() if not info.is_dir()]

    def read(self, name: str) -> bytes:
        return self._zip.read(name)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ZipArchiveReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ZipArchiveOpener:
    def open(self, data: bytes) -> ZipArchiveReader:
        return ZipArchiveReader(data)


# =============================================================================
# CAPABILITY SET
# =============================================================================


@dataclass
class DecoderCapabilities:
    """The capabilities handed to the decoders."""
    pdf: PdfEngine = field(default_factory=PyMuPDFEngine)
    docx: DocxReader = field(default_factory=PythonDocxReader)
    archive: ArchiveOpener = field(default_factory=ZipArchiveOpener)

    @classmethod
    def default(cls) -> "DecoderCapabilities":
        return cls()

    @classmethod
    def from_config(cls, config: DecoderConfig) -> "DecoderCapabilities":
        """Build capabilities, replacing disabled ones with ``Unavailable``."""
        renderer = PDFToImages(
            dpi=config.render_dpi,
            image_format=config.image_format,
            max_dimension=config.max_dimension,
        )
        caps = cls(pdf=PyMuPDFEngine(renderer))
        disabled = {name.strip().lower() for name in config.disabled_capabilities}
        for name in sorted(disabled):
            if name not in ("pdf", "docx", "archive"):
                logger.warning(f"Ignoring unknown capability name: {name}")
                continue
            setattr(caps, name, Unavailable(name, "disabled by configuration"))
        return caps
