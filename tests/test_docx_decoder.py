"""Tests for ingestion.docx_decoder."""

import asyncio
import io

import pytest

from conftest import build_docx, build_png
from ingestion import DecodeError, DocxDecoder, FormatKind, Unavailable, UnsupportedLibraryError
from ingestion.capabilities import PythonDocxReader


def decode(data: bytes):
    return asyncio.run(DocxDecoder(PythonDocxReader()).decode(data, "notes.docx"))


class TestParagraphs:
    def test_heading_and_body(self):
        def populate(document):
            document.add_heading("Overview", level=1)
            document.add_paragraph("Body text.")

        result = decode(build_docx(populate))
        assert result.format == FormatKind.DOCX
        assert [u.text for u in result.units] == ["Overview", "Body text."]
        assert result.units[0].markup == "<h1>Overview</h1>"
        assert result.units[1].markup == "<p>Body text.</p>"
        assert result.full_text == "Overview\n\nBody text."

    def test_title_style(self):
        result = decode(build_docx(lambda d: d.add_heading("Document", level=0)))
        assert result.units[0].markup == "<h1>Document</h1>"

    def test_subheading_level(self):
        result = decode(build_docx(lambda d: d.add_heading("Details", level=3)))
        assert result.units[0].markup == "<h3>Details</h3>"

    def test_run_formatting(self):
        def populate(document):
            paragraph = document.add_paragraph()
            paragraph.add_run("Bold").bold = True
            paragraph.add_run(" and ")
            paragraph.add_run("italic").italic = True

        unit = decode(build_docx(populate)).units[0]
        assert unit.text == "Bold and italic"
        assert unit.markup == "<p><strong>Bold</strong> and <em>italic</em></p>"

    def test_markup_is_escaped(self):
        unit = decode(build_docx(lambda d: d.add_paragraph("a < b & c"))).units[0]
        assert unit.text == "a < b & c"
        assert unit.markup == "<p>a &lt; b &amp; c</p>"

    def test_list_paragraph(self):
        result = decode(build_docx(lambda d: d.add_paragraph("Item", style="List Bullet")))
        assert result.units[0].markup == "<ul><li>Item</li></ul>"

    def test_empty_paragraphs_skipped(self):
        def populate(document):
            document.add_paragraph("One")
            document.add_paragraph("")
            document.add_paragraph("   ")
            document.add_paragraph("Two")

        result = decode(build_docx(populate))
        assert [u.text for u in result.units] == ["One", "Two"]


class TestImages:
    def test_picture_counted_and_embedded(self):
        png = build_png()

        def populate(document):
            document.add_paragraph("Before")
            document.add_picture(io.BytesIO(png))

        result = decode(build_docx(populate))
        assert len(result.units) == 2
        picture = result.units[1]
        assert picture.text == ""
        assert picture.image_count == 1
        assert '<img src="data:image/png;base64,' in picture.markup
        assert result.units[0].image_count == 0


class TestTables:
    def test_table_text_and_markup(self):
        def populate(document):
            table = document.add_table(rows=2, cols=2)
            for r, row in enumerate([["a", "b"], ["c", "d"]]):
                for c, value in enumerate(row):
                    table.cell(r, c).text = value

        unit = decode(build_docx(populate)).units[0]
        assert unit.text == "a\tb\nc\td"
        assert unit.markup == (
            "<table><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>"
        )

    def test_merged_cells_once(self):
        def populate(document):
            table = document.add_table(rows=2, cols=2)
            merged = table.cell(0, 0).merge(table.cell(0, 1))
            merged.text = "merged"
            table.cell(1, 0).text = "c"
            table.cell(1, 1).text = "d"

        unit = decode(build_docx(populate)).units[0]
        assert unit.text == "merged\nc\td"

    def test_vertically_merged_cells_once(self):
        def populate(document):
            table = document.add_table(rows=2, cols=2)
            merged = table.cell(0, 0).merge(table.cell(1, 0))
            merged.text = "MERGED"
            table.cell(0, 1).text = "b"
            table.cell(1, 1).text = "d"

        result = decode(build_docx(populate))
        unit = result.units[0]
        assert result.full_text.count("MERGED") == 1
        assert unit.markup.count("MERGED") == 1
        assert unit.text.split("\n")[0] == "MERGED\tb"
        assert unit.text.split("\n")[1].strip() == "d"

    def test_blocks_keep_document_order(self):
        def populate(document):
            document.add_paragraph("Intro")
            document.add_table(rows=1, cols=1).cell(0, 0).text = "cell"
            document.add_paragraph("Outro")

        result = decode(build_docx(populate))
        assert [u.text for u in result.units] == ["Intro", "cell", "Outro"]


class TestFailures:
    def test_unavailable_reader(self):
        decoder = DocxDecoder(Unavailable("docx"))
        with pytest.raises(UnsupportedLibraryError):
            asyncio.run(decoder.decode(b"whatever"))

    def test_not_a_docx(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(b"plain bytes, not a zip")
        assert exc_info.value.format == "docx"
