"""
Data Models for the Pagination Pipeline

Defines:
1. PaginationConfig - Page budgets per format and the image weight
2. Page - One bounded, user-selectable unit of output
3. PaginationResult - All pages of a document with statistics
4. SelectionStats / SelectionOutput - What the selection screen shows and hands off
5. SelectionExport - Metadata of a selection, exported as JSON

Design Principles:
- Pydantic v2 for validation and serialization (consistent with ingestion)
- Pages are immutable; a new document always produces a new page list
- Save/load pattern matching DecodedDocument

Usage:
    config = PaginationConfig(text_char_budget=1000)
    result = DocumentPaginator(config).paginate_document(decoded)
    result.save("pages.json")
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from ingestion.models import FormatKind


class PageKind(str, Enum):
    """How a page's display content is to be interpreted."""

    IMAGE = "image"
    MARKUP = "markup"
    TEXT = "text"


KIND_BY_FORMAT: dict[FormatKind, PageKind] = {
    FormatKind.PDF: PageKind.IMAGE,
    FormatKind.IMAGE: PageKind.IMAGE,
    FormatKind.DOCX: PageKind.MARKUP,
    FormatKind.TEXT: PageKind.TEXT,
    FormatKind.EPUB: PageKind.TEXT,
}


class PaginationConfig(BaseModel):
    """
    Configuration for the pagination pipeline.

    The image weight and budgets were tuned by hand on the preview
    screens; they are kept as plain settings.
    """
    image_weight: int = Field(
        300,
        description="Character-equivalent footprint of one embedded image",
        ge=0,
    )
    text_char_budget: int = Field(
        1400,
        description="Characters per page for plain-text documents",
        ge=1,
    )
    docx_char_budget: int = Field(
        1400,
        description="Characters per page for DOCX documents",
        ge=1,
    )
    epub_char_budget: int = Field(
        2800,
        description="Characters per page for EPUB documents (chapters are long)",
        ge=1,
    )

    def budget_for(self, format: FormatKind) -> int:
        """Page budget for a decoded format."""
        if format == FormatKind.DOCX:
            return self.docx_char_budget
        if format == FormatKind.EPUB:
            return self.epub_char_budget
        # PDF pages and images are standalone; the budget never merges them
        return self.text_char_budget


class Page(BaseModel):
    """
    One page of paginated output.
    """
    index: int = Field(
        ...,
        description="1-based page number, contiguous within one pagination run",
        ge=1,
    )
    display_content: str = Field(
        ...,
        description="Markup, data URL or raw text for preview",
    )
    text_content: str = Field(
        ...,
        description="Exact plain text of this page (authoritative for extraction)",
    )
    kind: PageKind = Field(
        ...,
        description="Interpretation of display_content",
    )
    unit_count: int = Field(
        1,
        description="Number of content units merged into this page",
        ge=1,
    )
    image_count: int = Field(
        0,
        description="Embedded images on this page",
        ge=0,
    )
    effective_chars: int = Field(
        0,
        description="Characters plus weighted images",
        ge=0,
    )
    oversized: bool = Field(
        False,
        description="A single unit larger than the budget",
    )

    model_config = {"frozen": True}

    def matches(self, term: str) -> bool:
        """Search match: page number or page text contains the term."""
        term = term.strip().lower()
        if not term:
            return True
        return term in str(self.index) or term in self.text_content.lower()


class PaginationStats(BaseModel):
    """Statistics about the pagination run."""
    total_pages: int = 0
    total_units: int = 0
    total_chars: int = 0
    total_tokens: int = 0
    avg_page_chars: float = 0.0
    min_page_chars: int = 0
    max_page_chars: int = 0
    oversized_pages: int = 0


class PaginationResult(BaseModel):
    """
    Complete result of paginating a document.

    Contains all pages and statistics. The page list is immutable for
    the lifetime of a preview session.
    """
    source_file: str = Field(
        ...,
        description="File name of the source document",
    )
    format: FormatKind = Field(
        ...,
        description="Format the document was decoded as",
    )
    char_budget: int = Field(
        ...,
        description="Budget used for this run",
        ge=1,
    )
    config: PaginationConfig = Field(
        ...,
        description="Configuration used for pagination",
    )
    pages: list[Page] = Field(
        default_factory=list,
        description="All pages in index order",
    )
    stats: PaginationStats = Field(
        default_factory=PaginationStats,
        description="Pagination statistics",
    )
    fallback_used: bool = Field(
        False,
        description="The document was decoded by the plain-text fallback",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Warnings carried over from decoding",
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When pagination was performed",
    )

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def page_indices(self) -> list[int]:
        return [page.index for page in self.pages]

    def get_page(self, index: int) -> Optional[Page]:
        """Find a page by its index."""
        if 1 <= index <= len(self.pages) and self.pages[index - 1].index == index:
            return self.pages[index - 1]
        for page in self.pages:
            if page.index == index:
                return page
        return None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save pagination result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "PaginationResult":
        """Load pagination result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


class SelectionStats(BaseModel):
    """Counters shown next to the page grid."""
    total: int = 0
    selected: int = 0
    filtered_total: int = 0
    selected_in_filter: int = 0

    @computed_field
    @property
    def percentage(self) -> float:
        if not self.total:
            return 0.0
        return round(100.0 * self.selected / self.total, 1)


class SelectionOutput(BaseModel):
    """
    Payload handed to the quiz-generation collaborator.
    """
    selected_page_numbers: list[int] = Field(
        ...,
        description="Selected page indices, ascending, 1-based",
    )
    selected_content: str = Field(
        ...,
        description="Plain text of the selected pages in page order",
    )
    pages: list[Page] = Field(
        default_factory=list,
        description="The selected pages",
    )


class ConfirmResult(BaseModel):
    """Outcome of confirming a selection: output or a validation message."""
    output: Optional[SelectionOutput] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.output is not None


class SelectionExport(BaseModel):
    """Selection metadata, downloadable as JSON."""
    file_name: str
    file_type: str = ""
    total_pages: int = Field(..., ge=0)
    selected_pages: list[int] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        Path(path).write_text(self.to_json(), encoding="utf-8")
