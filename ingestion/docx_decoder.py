"""
DOCX decoder.

Each top-level block of the document body (paragraph or table) becomes
one content unit. Two representations are built per block:

- markup: HTML for display, with embedded images as data URLs
- text: plain text read straight from the block's text nodes

The plain text is never derived from the markup, so extraction stays
lossless even when the HTML rendering drops something.
"""

from __future__ import annotations

import base64
import html
import logging
import re
from typing import Any

from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from .capabilities import DocxReader
from .decoder import BaseDecoder
from .models import ContentUnit, DecodedDocument, FormatKind

logger = logging.getLogger(__name__)

HEADING_STYLE = re.compile(r"^heading\s*([1-6])$", re.IGNORECASE)


class DocxDecoder(BaseDecoder):
    format = FormatKind.DOCX

    def __init__(self, reader: DocxReader):
        self.reader = reader

    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        document = self.reader.open(data)
        body = document.element.body

        units: list[ContentUnit] = []
        skipped = 0
        for element in body.iterchildren():
            if element.tag == qn("w:p"):
                unit = self._paragraph_unit(Paragraph(element, document), document.part)
            elif element.tag == qn("w:tbl"):
                unit = self._table_unit(Table(element, document), document.part)
            else:
                continue  # sectPr, bookmarks, ...
            if not unit.text.strip() and unit.image_count == 0:
                skipped += 1
                continue
            units.append(unit)

        logger.info(f"DOCX blocks: {len(units)} kept, {skipped} empty skipped")
        return DecodedDocument(
            format=self.format,
            source_name=source_name,
            units=units,
            full_text="\n\n".join(unit.text for unit in units),
        )

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def _paragraph_unit(self, paragraph: Paragraph, part: Any) -> ContentUnit:
        images = self._image_tags(paragraph._p, part)
        inner = self._runs_html(paragraph) + "".join(images)
        return ContentUnit(
            text=paragraph.text,
            markup=self._wrap_paragraph(paragraph, inner),
            image_count=self._count_images(paragraph._p),
        )

    def _table_unit(self, table: Table, part: Any) -> ContentUnit:
        text_rows: list[str] = []
        html_rows: list[str] = []
        seen: list = []
        for row in table.rows:
            cells = self._unique_cells(row.cells, seen)
            text_rows.append("\t".join(cell.text for cell in cells))
            html_cells = "".join(
                f"<td>{html.escape(cell.text)}{''.join(self._image_tags(cell._tc, part))}</td>"
                for cell in cells
            )
            html_rows.append(f"<tr>{html_cells}</tr>")
        return ContentUnit(
            text="\n".join(text_rows),
            markup=f"<table>{''.join(html_rows)}</table>",
            image_count=self._count_images(table._tbl),
        )

    # -------------------------------------------------------------------------
    # HTML helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _runs_html(paragraph: Paragraph) -> str:
        parts: list[str] = []
        for run in paragraph.runs:
            text = html.escape(run.text)
            if not text:
                continue
            if run.bold:
                text = f"<strong>{text}</strong>"
            if run.italic:
                text = f"<em>{text}</em>"
            parts.append(text)
        return "".join(parts)

    @staticmethod
    def _wrap_paragraph(paragraph: Paragraph, inner: str) -> str:
        style_name = paragraph.style.name if paragraph.style is not None else ""
        style_name = style_name or ""
        heading = HEADING_STYLE.match(style_name)
        if heading:
            level = heading.group(1)
            return f"<h{level}>{inner}</h{level}>"
        if style_name.lower() == "title":
            return f"<h1>{inner}</h1>"
        if style_name.lower().startswith("list"):
            return f"<ul><li>{inner}</li></ul>"
        return f"<p>{inner}</p>"

    @staticmethod
    def _count_images(element: Any) -> int:
        return len(element.xpath(".//w:drawing | .//w:pict"))

    @staticmethod
    def _image_tags(element: Any, part: Any) -> list[str]:
        tags: list[str] = []
        for blip in element.iter(qn("a:blip")):
            rel_id = blip.get(qn("r:embed"))
            try:
                image_part = part.related_parts[rel_id]
            except KeyError:
                continue
            encoded = base64.b64encode(image_part.blob).decode("utf-8")
            tags.append(f'<img src="data:{image_part.content_type};base64,{encoded}"/>')
        return tags

    @staticmethod
    def _unique_cells(cells: list, seen: list) -> list:
        # merged cells repeat once per grid column and once per row they span
        unique = []
        for cell in cells:
            if any(tc is cell._tc for tc in seen):
                continue
            seen.append(cell._tc)
            unique.append(cell)
        return unique
