"""
Content Extractor - plain text of the selected pages

Concatenates the text of selected pages in page order, separated by a
blank line. Only plain text is emitted; display markup never leaks into
the output.

Usage:
    extractor = ContentExtractor()
    text = extractor.extract(result.pages, state)
    output = extractor.build_output(result.pages, state)
"""

import logging
from typing import Iterable

from .exceptions import EmptySelectionError
from .models import Page, PageKind, SelectionOutput
from .paginator import PAGE_TEXT_SEPARATOR
from .selection import SelectionState

logger = logging.getLogger(__name__)


class ContentExtractor:
    """
    Turns a selection into the text handed to quiz generation.

    With image_placeholders enabled, image pages without any text
    contribute "[Image: Page N]" instead of an empty string.
    """

    def __init__(self, image_placeholders: bool = False):
        self.image_placeholders = image_placeholders

    def selected_pages(self, pages: Iterable[Page], selection: SelectionState) -> list[Page]:
        """Selected pages sorted by index."""
        return sorted(
            (page for page in pages if page.index in selection.selected),
            key=lambda page: page.index,
        )

    def page_text(self, page: Page) -> str:
        if self.image_placeholders and page.kind == PageKind.IMAGE and not page.text_content.strip():
            return f"[Image: Page {page.index}]"
        return page.text_content

    def extract(self, pages: Iterable[Page], selection: SelectionState) -> str:
        """
        Extract the plain text of all selected pages.

        Returns an empty string when nothing is selected.
        """
        return PAGE_TEXT_SEPARATOR.join(
            self.page_text(page) for page in self.selected_pages(pages, selection)
        )

    def build_output(self, pages: Iterable[Page], selection: SelectionState) -> SelectionOutput:
        """
        Build the handoff payload for a confirmed selection.

        Raises:
            EmptySelectionError: If no page is selected.
        """
        pages = list(pages)
        chosen = self.selected_pages(pages, selection)
        if not chosen:
            raise EmptySelectionError(total_pages=len(pages))

        content = PAGE_TEXT_SEPARATOR.join(self.page_text(page) for page in chosen)
        logger.info(
            f"Extracted {len(chosen)}/{len(pages)} pages ({len(content)} characters)"
        )
        return SelectionOutput(
            selected_page_numbers=[page.index for page in chosen],
            selected_content=content,
            pages=chosen,
        )
