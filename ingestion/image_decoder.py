"""
Image decoder.

A raster upload is previewed as a single page; it carries no text.
"""

from __future__ import annotations

import base64

from .decoder import BaseDecoder
from .models import ContentUnit, DecodedDocument, FormatKind

IMAGE_PLACEHOLDER_TEXT = "[Image file - no text content]"


class ImageDecoder(BaseDecoder):
    format = FormatKind.IMAGE

    def __init__(self, media_type: str = "image/png"):
        self.media_type = media_type

    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        encoded = base64.b64encode(data).decode("utf-8")
        unit = ContentUnit(
            text=IMAGE_PLACEHOLDER_TEXT,
            markup=f"data:{self.media_type};base64,{encoded}",
            image_count=1,
            standalone=True,
        )
        return DecodedDocument(
            format=self.format,
            source_name=source_name,
            units=[unit],
            full_text=unit.text,
        )
