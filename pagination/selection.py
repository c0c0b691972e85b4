"""
Selection State - which pages the user picked

SelectionState is an immutable value: every operation returns a new
instance and leaves the original untouched. Indices that are not part
of the current page list are ignored, since page lists are replaced
wholesale when a new document is loaded.

Usage:
    state = SelectionState.for_pages(result.pages)      # all selected
    state = state.clear().toggle(3).toggle(1)
    stats = state.stats(result.pages, search_filter("intro"))
"""

from typing import Callable, Iterable, Optional

from pydantic import BaseModel, Field

from .models import Page, SelectionStats

PagePredicate = Callable[[Page], bool]


def search_filter(term: str) -> PagePredicate:
    """
    Build the search predicate used by the page grid.

    A page matches when its number contains the term or its text
    contains it, ignoring case. An empty term matches every page.
    """
    def predicate(page: Page) -> bool:
        return page.matches(term)

    return predicate


class SelectionState(BaseModel):
    """
    Selected page indices for one paginated document.

    Invariant: selected is a subset of page_indices.
    """
    page_indices: frozenset[int] = Field(
        default_factory=frozenset,
        description="Indices of all pages in the current page list",
    )
    selected: frozenset[int] = Field(
        default_factory=frozenset,
        description="Indices the user selected",
    )

    model_config = {"frozen": True}

    @classmethod
    def for_pages(
        cls,
        pages: Iterable[Page],
        initial: Optional[Iterable[int]] = None,
    ) -> "SelectionState":
        """
        Create the selection for a fresh page list.

        Every page starts selected unless an initial selection is given;
        initial indices outside the page list are dropped.
        """
        indices = frozenset(page.index for page in pages)
        if initial is None:
            return cls(page_indices=indices, selected=indices)
        return cls(page_indices=indices, selected=indices & frozenset(initial))

    @property
    def selected_sorted(self) -> list[int]:
        return sorted(self.selected)

    def is_selected(self, index: int) -> bool:
        return index in self.selected

    def toggle(self, index: int) -> "SelectionState":
        """Flip one page. Unknown indices leave the state unchanged."""
        if index not in self.page_indices:
            return self
        return self.model_copy(update={"selected": self.selected ^ {index}})

    def select_all(self, page_indices: Optional[Iterable[int]] = None) -> "SelectionState":
        """Select every page, or exactly the given known pages."""
        if page_indices is None:
            return self.model_copy(update={"selected": self.page_indices})
        return self.model_copy(
            update={"selected": self.page_indices & frozenset(page_indices)}
        )

    def clear(self) -> "SelectionState":
        return self.model_copy(update={"selected": frozenset()})

    def select_by_predicate(
        self, pages: Iterable[Page], predicate: PagePredicate
    ) -> "SelectionState":
        """Replace the selection with the known pages matching the predicate."""
        matching = frozenset(page.index for page in pages if predicate(page))
        return self.model_copy(update={"selected": self.page_indices & matching})

    def stats(
        self,
        pages: Iterable[Page],
        filter_predicate: Optional[PagePredicate] = None,
    ) -> SelectionStats:
        """
        Counters for the page grid.

        Args:
            pages: The current page list.
            filter_predicate: Active filter (e.g. search_filter(term)).
                Without one every page counts as filtered in.
        """
        pages = [page for page in pages if page.index in self.page_indices]
        filtered = [
            page for page in pages
            if filter_predicate is None or filter_predicate(page)
        ]
        return SelectionStats(
            total=len(pages),
            selected=sum(1 for page in pages if page.index in self.selected),
            filtered_total=len(filtered),
            selected_in_filter=sum(1 for page in filtered if page.index in self.selected),
        )
