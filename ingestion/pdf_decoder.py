"""
PDF decoder.

One content unit per source page, in document order. The unit text is
the page's word tokens joined by single spaces; the markup is a raster
preview of the page as a data URL.
"""

from __future__ import annotations

import logging

from .capabilities import PdfEngine
from .decoder import BaseDecoder
from .models import ContentUnit, DecodedDocument, FormatKind

logger = logging.getLogger(__name__)


class PdfDecoder(BaseDecoder):
    format = FormatKind.PDF

    def __init__(self, engine: PdfEngine, render_previews: bool = True):
        self.engine = engine
        self.render_previews = render_previews

    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        pages = self.engine.read_pages(data, render=self.render_previews)
        logger.info(f"PDF has {len(pages)} pages: {source_name or '<bytes>'}")

        units: list[ContentUnit] = []
        warnings: list[str] = []
        for page in pages:
            if not page.text:
                warnings.append(f"Page {page.page_number}: no extractable text")
            units.append(ContentUnit(
                text=page.text,
                markup=page.preview.to_data_url() if page.preview else None,
                standalone=True,
            ))

        return DecodedDocument(
            format=self.format,
            source_name=source_name,
            units=units,
            full_text="\n\n".join(unit.text for unit in units),
            warnings=warnings,
        )
