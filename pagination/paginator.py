"""
Paginator - Greedy page assembly from decoded content units

Takes a DecodedDocument (from ingestion) and produces a PaginationResult
with pages bounded by a character budget.

Algorithm:
1. Size each unit: len(text) + image_count * image_weight.
2. Accumulate units while the running size stays within the budget.
3. When the next unit would overflow a non-empty page, close the page
   and start a new one with that unit.
4. Standalone units (PDF pages, images) always get a page of their own.
5. A single unit larger than the budget is never split; its page is
   flagged as oversized.

Usage:
    from ingestion import DocumentLoader
    from pagination import DocumentPaginator, PaginationConfig

    decoded = await DocumentLoader().load(handle)
    result = DocumentPaginator(PaginationConfig()).paginate_document(decoded)
    result.save("pages.json")
"""

import html
import logging
from typing import Iterable, Optional

from ingestion.models import ContentUnit, DecodedDocument

from .models import (
    KIND_BY_FORMAT,
    Page,
    PageKind,
    PaginationConfig,
    PaginationResult,
    PaginationStats,
)
from .token_counter import count_tokens_batch

logger = logging.getLogger(__name__)

PAGE_TEXT_SEPARATOR = "\n\n"


class Paginator:
    """
    Groups content units into pages under a character budget.

    The same instance serves every format; only the budget and the
    page kind differ between calls.
    """

    def __init__(self, image_weight: int = 300):
        if image_weight < 0:
            raise ValueError(f"image_weight must be >= 0, got {image_weight}")
        self.image_weight = image_weight

    def effective_size(self, unit: ContentUnit) -> int:
        """Character-equivalent size of one unit."""
        return len(unit.text) + unit.image_count * self.image_weight

    def paginate(
        self,
        units: Iterable[ContentUnit],
        char_budget: int,
        kind: PageKind = PageKind.TEXT,
    ) -> list[Page]:
        """
        Split units into pages.

        Args:
            units: Content units in reading order.
            char_budget: Maximum effective characters per page.
            kind: Page kind for every emitted page.

        Returns:
            Pages indexed 1..N in reading order.

        Raises:
            ValueError: If char_budget is not positive.
        """
        if char_budget <= 0:
            raise ValueError(f"char_budget must be > 0, got {char_budget}")

        groups: list[list[ContentUnit]] = []
        current: list[ContentUnit] = []
        running = 0

        for unit in units:
            size = self.effective_size(unit)
            if unit.standalone:
                if current:
                    groups.append(current)
                groups.append([unit])
                current, running = [], 0
                continue
            if current and running + size > char_budget:
                groups.append(current)
                current, running = [], 0
            current.append(unit)
            running += size

        if current:
            groups.append(current)

        return [
            self._build_page(index, group, char_budget, kind)
            for index, group in enumerate(groups, start=1)
        ]

    def _build_page(
        self,
        index: int,
        group: list[ContentUnit],
        char_budget: int,
        kind: PageKind,
    ) -> Page:
        effective = sum(self.effective_size(unit) for unit in group)
        return Page(
            index=index,
            display_content=self._display_content(group, kind),
            text_content=PAGE_TEXT_SEPARATOR.join(unit.text for unit in group),
            kind=kind,
            unit_count=len(group),
            image_count=sum(unit.image_count for unit in group),
            effective_chars=effective,
            oversized=len(group) == 1 and effective > char_budget,
        )

    def _display_content(self, group: list[ContentUnit], kind: PageKind) -> str:
        if kind == PageKind.MARKUP:
            return "".join(
                unit.markup if unit.markup is not None
                else f"<p>{html.escape(unit.text)}</p>"
                for unit in group
            )
        if kind == PageKind.IMAGE:
            return PAGE_TEXT_SEPARATOR.join(
                unit.markup if unit.markup is not None else unit.text
                for unit in group
            )
        return PAGE_TEXT_SEPARATOR.join(unit.text for unit in group)


class DocumentPaginator:
    """
    Paginates decoded documents with per-format budgets.
    """

    def __init__(self, config: Optional[PaginationConfig] = None):
        self.config = config or PaginationConfig()
        self.paginator = Paginator(image_weight=self.config.image_weight)

    def paginate_document(self, decoded: DecodedDocument) -> PaginationResult:
        """
        Paginate a decoded document.

        Args:
            decoded: Output from the ingestion pipeline.

        Returns:
            PaginationResult with all pages and statistics.
        """
        budget = self.config.budget_for(decoded.format)
        kind = KIND_BY_FORMAT[decoded.format]
        pages = self.paginator.paginate(decoded.units, budget, kind)

        stats = self._compute_stats(pages, decoded)
        if stats.oversized_pages:
            logger.info(
                f"{decoded.source_name}: {stats.oversized_pages} page(s) exceed "
                f"the {budget} character budget"
            )
        logger.info(
            f"Paginated {decoded.source_name or '<unnamed>'}: "
            f"{decoded.total_units} units -> {len(pages)} pages ({kind.value})"
        )

        return PaginationResult(
            source_file=decoded.source_name,
            format=decoded.format,
            char_budget=budget,
            config=self.config,
            pages=pages,
            stats=stats,
            fallback_used=decoded.fallback_used,
            warnings=list(decoded.warnings),
        )

    def _compute_stats(
        self, pages: list[Page], decoded: DecodedDocument
    ) -> PaginationStats:
        """Compute statistics about the pagination result."""
        if not pages:
            return PaginationStats()

        char_counts = [len(page.text_content) for page in pages]
        token_counts = self._count_tokens([page.text_content for page in pages])
        return PaginationStats(
            total_pages=len(pages),
            total_units=decoded.total_units,
            total_chars=sum(char_counts),
            total_tokens=sum(token_counts),
            avg_page_chars=sum(char_counts) / len(char_counts),
            min_page_chars=min(char_counts),
            max_page_chars=max(char_counts),
            oversized_pages=sum(1 for page in pages if page.oversized),
        )

    @staticmethod
    def _count_tokens(texts: list[str]) -> list[int]:
        # the encoder fetches its BPE file on first use; stats fall back to 0
        try:
            return count_tokens_batch(texts)
        except Exception as e:
            logger.warning(f"Token counting unavailable, reporting 0 tokens: {e}")
            return [0] * len(texts)
