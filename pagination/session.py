"""
Preview Session - one document on the page-selection screen

A session owns at most one DocumentHandle together with its pages and
selection. Loading a new document (or closing the session) releases
everything the previous document held, and a decode that finishes after
a newer load started is discarded instead of overwriting newer state.

Usage:
    session = PreviewSession()
    result = await session.load(handle)
    session.toggle(2)
    outcome = session.confirm()
    if outcome.ok:
        submit(outcome.output)
    session.close()
"""

import logging
from contextlib import ExitStack
from typing import Callable, Iterable, Optional

from ingestion.loader import DocumentLoader
from ingestion.models import DocumentHandle

from .exceptions import EmptySelectionError
from .extractor import ContentExtractor
from .models import (
    ConfirmResult,
    Page,
    PaginationResult,
    SelectionExport,
    SelectionStats,
)
from .paginator import DocumentPaginator
from .selection import SelectionState, search_filter

logger = logging.getLogger(__name__)


class PreviewSession:
    """
    Holds the document, pages and selection of one preview.

    Every load gets a new session id. Results are only applied when the
    id is still current once decoding finishes.
    """

    def __init__(
        self,
        loader: Optional[DocumentLoader] = None,
        paginator: Optional[DocumentPaginator] = None,
        extractor: Optional[ContentExtractor] = None,
    ):
        self.loader = loader or DocumentLoader()
        self.paginator = paginator or DocumentPaginator()
        self.extractor = extractor or ContentExtractor()

        self._session_id = 0
        self._resources = ExitStack()
        self.handle: Optional[DocumentHandle] = None
        self.result: Optional[PaginationResult] = None
        self.selection: Optional[SelectionState] = None

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def pages(self) -> list[Page]:
        return self.result.pages if self.result else []

    def register(self, callback: Callable[[], None]) -> None:
        """Run callback when the current document is released."""
        self._resources.callback(callback)

    async def load(
        self,
        handle: DocumentHandle,
        initial_selection: Optional[Iterable[int]] = None,
    ) -> Optional[PaginationResult]:
        """
        Decode and paginate a document, replacing the current one.

        Returns:
            The PaginationResult, or None if another load or close()
            superseded this one while it was decoding.
        """
        self._release()
        self._session_id += 1
        session_id = self._session_id
        self.handle = handle

        decoded = await self.loader.load(handle)

        if session_id != self._session_id:
            logger.info(
                f"Discarding stale decode of {handle.file_name or '<unnamed>'} "
                f"(session {session_id}, current {self._session_id})"
            )
            return None

        result = self.paginator.paginate_document(decoded)
        self.result = result
        self.selection = SelectionState.for_pages(result.pages, initial_selection)
        return result

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def _current_selection(self) -> SelectionState:
        return self.selection or SelectionState()

    def toggle(self, index: int) -> SelectionState:
        self.selection = self._current_selection().toggle(index)
        return self.selection

    def select_all(self, page_indices: Optional[Iterable[int]] = None) -> SelectionState:
        self.selection = self._current_selection().select_all(page_indices)
        return self.selection

    def clear(self) -> SelectionState:
        self.selection = self._current_selection().clear()
        return self.selection

    def search(self, term: str) -> list[Page]:
        """Pages matching a search term."""
        predicate = search_filter(term)
        return [page for page in self.pages if predicate(page)]

    def select_matching(self, term: str) -> SelectionState:
        """Select exactly the pages matching a search term."""
        self.selection = self._current_selection().select_by_predicate(
            self.pages, search_filter(term)
        )
        return self.selection

    def stats(self, term: Optional[str] = None) -> SelectionStats:
        predicate = search_filter(term) if term else None
        return self._current_selection().stats(self.pages, predicate)

    def confirm(self) -> ConfirmResult:
        """
        Build the output for the current selection.

        An empty selection yields a ConfirmResult carrying the message
        to show instead of raising.
        """
        try:
            output = self.extractor.build_output(self.pages, self._current_selection())
        except EmptySelectionError as exc:
            logger.info(f"Confirm rejected: {exc}")
            return ConfirmResult(error=exc.message)
        return ConfirmResult(output=output)

    def export_selection(self) -> SelectionExport:
        """Selection metadata of the current document."""
        handle = self.handle
        return SelectionExport(
            file_name=handle.file_name if handle else "",
            file_type=handle.declared_media_type if handle else "",
            total_pages=len(self.pages),
            selected_pages=self._current_selection().selected_sorted,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _release(self) -> None:
        self._resources.close()
        self._resources = ExitStack()
        self.handle = None
        self.result = None
        self.selection = None

    def close(self) -> None:
        """Release the current document and invalidate pending loads."""
        self._session_id += 1
        self._release()

    def __enter__(self) -> "PreviewSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
