"""
PDF to Images Converter

Renders PDF pages to base64-encoded images for page previews.
Uses PyMuPDF (fitz) for rendering; documents are read from memory.
"""

import base64
import fitz  # PyMuPDF
from dataclasses import dataclass


@dataclass(frozen=True)
class PageImage:
    """Represents a single page rendered as an image."""
    page_number: int  # 1-indexed
    image_base64: str
    width: int
    height: int
    mime_type: str = "image/png"

    def to_data_url(self) -> str:
        """Convert to data URL for embedding in HTML previews."""
        return f"data:{self.mime_type};base64,{self.image_base64}"


class PDFToImages:
    """
    Converts PDF pages to preview images.

    Features:
    - Configurable DPI (default matches a 1.5x preview scale)
    - Automatic downscaling of oversized pages
    """

    def __init__(
        self,
        dpi: int = 108,
        image_format: str = "png",
        max_dimension: int = 2000,
    ):
        """
        Initialize the converter.

        Args:
            dpi: Resolution for rendering (higher = better quality, larger previews)
            image_format: Output format ("png" or "jpeg")
            max_dimension: Maximum width/height in pixels
        """
        self.dpi = dpi
        self.image_format = image_format
        self.max_dimension = max_dimension
        self.zoom = dpi / 72  # 72 is the default PDF DPI

    def render_page(self, data: bytes, page_number: int) -> PageImage:
        """
        Render a single page of an in-memory PDF.

        Args:
            data: PDF file content
            page_number: Page number (1-indexed)

        Returns:
            PageImage with base64-encoded image data
        """
        with fitz.open(stream=data, filetype="pdf") as doc:
            if page_number < 1 or page_number > len(doc):
                raise ValueError(f"Page {page_number} out of range (1-{len(doc)})")

            page = doc[page_number - 1]  # 0-indexed internally
            return self.render_page_object(page, page_number)

    def render_page_object(self, page: fitz.Page, page_number: int) -> PageImage:
        """Render an already opened fitz.Page."""
        mat = fitz.Matrix(self.zoom, self.zoom)
        pix = page.get_pixmap(matrix=mat, alpha=False)

        # Re-render with an adjusted matrix if too large
        if pix.width > self.max_dimension or pix.height > self.max_dimension:
            scale = self.max_dimension / max(pix.width, pix.height)
            adjusted_zoom = self.zoom * scale
            mat = fitz.Matrix(adjusted_zoom, adjusted_zoom)
            pix = page.get_pixmap(matrix=mat, alpha=False)

        img_bytes = pix.tobytes(output=self.image_format)
        img_base64 = base64.b64encode(img_bytes).decode("utf-8")

        return PageImage(
            page_number=page_number,
            image_base64=img_base64,
            width=pix.width,
            height=pix.height,
            mime_type=f"image/{self.image_format}",
        )
