"""
Pagination - Selectable pages and selected-text extraction

Splits decoded documents into bounded pages, tracks which pages the
user selected and reproduces the exact plain text of that selection
for quiz generation.

Quick Start:
    import asyncio
    from ingestion import handle_from_path
    from pagination import PreviewSession

    session = PreviewSession()
    result = asyncio.run(session.load(handle_from_path("skript.docx")))
    session.clear()
    session.toggle(1)
    outcome = session.confirm()
    print(outcome.output.selected_content)
"""

__version__ = "1.0.0"

from .config import PaginationServiceConfig
from .exceptions import EmptySelectionError, SelectionError
from .extractor import ContentExtractor
from .handoff import QuizGenerationClient, QuizGenerationRequest
from .models import (
    ConfirmResult,
    Page,
    PageKind,
    PaginationConfig,
    PaginationResult,
    PaginationStats,
    SelectionExport,
    SelectionOutput,
    SelectionStats,
)
from .paginator import DocumentPaginator, Paginator
from .selection import SelectionState, search_filter
from .service import PaginationService
from .session import PreviewSession
from .storage import PaginationStorage
from .token_counter import count_tokens

__all__ = [
    "__version__",
    # Core
    "Paginator",
    "DocumentPaginator",
    "SelectionState",
    "search_filter",
    "ContentExtractor",
    "PreviewSession",
    # Service
    "PaginationService",
    "PaginationServiceConfig",
    "PaginationStorage",
    "QuizGenerationClient",
    "QuizGenerationRequest",
    # Models
    "Page",
    "PageKind",
    "PaginationConfig",
    "PaginationResult",
    "PaginationStats",
    "SelectionStats",
    "SelectionOutput",
    "SelectionExport",
    "ConfirmResult",
    # Exceptions
    "SelectionError",
    "EmptySelectionError",
    # Utilities
    "count_tokens",
]
