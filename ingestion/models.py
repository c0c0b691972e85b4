"""
Data Models for Document Ingestion.

This module defines the structures produced by the decode pipeline:

1. DocumentHandle - one uploaded file (bytes, media type, name)
2. ContentUnit - one paragraph/block/page-level piece of decoded content
3. DecodedDocument - ordered units plus whole-document plain text
4. DecoderConfig - knobs for preview rendering and capability selection

Architecture:
    DocumentHandle → [FormatSniffer] → FormatKind
                            ↓
                     [Decoder] → DecodedDocument(units, full_text)
                            ↓
                     [Paginator] (pagination package)

Design Principles:
    - Pydantic v2 for validation and serialization
    - Immutable value objects (frozen=True) for units and handles
    - Plain text is authoritative for extraction; markup is display-only
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field


# =============================================================================
# ENUMS
# =============================================================================


class FormatKind(str, Enum):
    """
    Container formats understood by the decoders.

    IMAGE covers raster uploads that are previewed as a single page.
    """

    PDF = "pdf"
    DOCX = "docx"
    EPUB = "epub"
    TEXT = "text"
    IMAGE = "image"


# =============================================================================
# INPUT
# =============================================================================


class DocumentHandle(BaseModel):
    """
    One uploaded document, owned by a single decode session.

    The handle is discarded once the user confirms or cancels the
    selection; nothing about it is persisted.
    """

    source_bytes: bytes = Field(
        ...,
        description="Raw file content",
        repr=False,
    )
    declared_media_type: str = Field(
        "",
        description="Media type reported by the upload (may be empty or wrong)",
    )
    file_name: str = Field(
        "",
        description="Original file name, used for extension fallback",
    )

    model_config = {"frozen": True}

    @computed_field
    @property
    def size_bytes(self) -> int:
        return len(self.source_bytes)


# =============================================================================
# DECODER OUTPUT
# =============================================================================


class ContentUnit(BaseModel):
    """
    One structural piece of decoded content prior to pagination.

    Examples:
        - A paragraph of a text file (markup is None)
        - A DOCX top-level block with its HTML rendering
        - A PDF page with a raster preview as data URL (standalone)
    """

    text: str = Field(
        ...,
        description="Plain text used for sizing and extraction",
    )
    markup: Optional[str] = Field(
        None,
        description="Display representation (HTML or data URL)",
    )
    image_count: int = Field(
        0,
        description="Number of embedded images within the unit",
        ge=0,
    )
    standalone: bool = Field(
        False,
        description="Unit must occupy a page of its own (raster source pages)",
    )

    model_config = {"frozen": True}


class DecodedDocument(BaseModel):
    """
    Complete result of decoding one document.

    The units are ordered in reading order. ``full_text`` is the
    document's whole plain text; joining the unit texts with blank
    lines reproduces it up to whitespace normalisation.
    """

    format: FormatKind = Field(
        ...,
        description="Format the content was decoded as",
    )
    source_name: str = Field(
        "",
        description="File name of the source document",
    )
    units: list[ContentUnit] = Field(
        default_factory=list,
        description="Content units in reading order",
    )
    full_text: str = Field(
        "",
        description="Whole-document plain text",
    )
    sections: list[str] = Field(
        default_factory=list,
        description="Content documents in reading order (EPUB only)",
    )
    fallback_used: bool = Field(
        False,
        description="True when the plain-text fallback replaced a failed decoder",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-fatal problems encountered while decoding",
    )

    @property
    def total_units(self) -> int:
        return len(self.units)

    @property
    def total_images(self) -> int:
        return sum(unit.image_count for unit in self.units)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save the decoded document to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "DecodedDocument":
        """Load a decoded document from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


# =============================================================================
# CONFIGURATION
# =============================================================================


class DecoderConfig(BaseModel):
    """
    Configuration for the decode pipeline.

    The render settings follow the preview scale used by the upload
    screen (1.5x of the PDF's 72 dpi base).
    """

    render_previews: bool = Field(
        True,
        description="Render raster previews for PDF pages",
    )
    render_dpi: int = Field(
        108,
        description="Resolution for PDF page previews",
        ge=36,
        le=600,
    )
    max_dimension: int = Field(
        2000,
        description="Maximum preview width/height in pixels",
        ge=100,
    )
    image_format: str = Field(
        "png",
        description="Preview image format ('png' or 'jpeg')",
    )
    text_encoding: str = Field(
        "utf-8",
        description="Encoding used by the plain-text decoder",
    )
    disabled_capabilities: list[str] = Field(
        default_factory=list,
        description="Capabilities to treat as unavailable ('pdf', 'docx', 'archive')",
    )
