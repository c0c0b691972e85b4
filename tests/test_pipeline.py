"""
End-to-end tests: decode, paginate, select everything, extract.

Selecting every page must give back the decoded document's text,
up to whitespace, for every format.
"""

import asyncio

import pytest

from conftest import build_docx
from ingestion import DocumentHandle, DocumentLoader
from ingestion.sniffer import DOCX_MEDIA_TYPE, EPUB_MEDIA_TYPE, PDF_MEDIA_TYPE
from pagination import ContentExtractor, DocumentPaginator, PaginationConfig, SelectionState


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def populate_docx(document):
    document.add_heading("Overview", level=1)
    document.add_paragraph("First paragraph of the notes.")
    table = document.add_table(rows=2, cols=2)
    merged = table.cell(0, 0).merge(table.cell(1, 0))
    merged.text = "MERGED"
    table.cell(0, 1).text = "b"
    table.cell(1, 1).text = "d"
    document.add_paragraph("Closing paragraph.")


@pytest.fixture
def text_bytes() -> bytes:
    return "Erster Absatz.\r\n\r\nZweiter Absatz\nmit Umbruch.\n\n\nDritter.".encode("utf-8")


@pytest.fixture
def docx_bytes() -> bytes:
    return build_docx(populate_docx)


@pytest.fixture
def handles(text_bytes, docx_bytes, sample_epub, two_page_pdf) -> dict[str, DocumentHandle]:
    return {
        "text": DocumentHandle(source_bytes=text_bytes, declared_media_type="text/plain", file_name="notes.txt"),
        "docx": DocumentHandle(source_bytes=docx_bytes, declared_media_type=DOCX_MEDIA_TYPE, file_name="notes.docx"),
        "epub": DocumentHandle(source_bytes=sample_epub, declared_media_type=EPUB_MEDIA_TYPE, file_name="book.epub"),
        "pdf": DocumentHandle(source_bytes=two_page_pdf, declared_media_type=PDF_MEDIA_TYPE, file_name="slides.pdf"),
    }


def run_pipeline(handle: DocumentHandle, config: PaginationConfig):
    decoded = asyncio.run(DocumentLoader().load(handle))
    result = DocumentPaginator(config).paginate_document(decoded)
    selection = SelectionState.for_pages(result.pages)
    return decoded, result, ContentExtractor().extract(result.pages, selection)


class TestSelectAllIsLossless:
    @pytest.mark.parametrize("kind", ["text", "docx", "epub", "pdf"])
    @pytest.mark.parametrize("budget", [10, 1400])
    def test_extract_matches_full_text(self, handles, kind, budget):
        config = PaginationConfig(
            text_char_budget=budget, docx_char_budget=budget, epub_char_budget=budget
        )
        decoded, result, extracted = run_pipeline(handles[kind], config)

        assert decoded.fallback_used is False
        assert result.total_pages > 0
        assert normalize_whitespace(extracted) == normalize_whitespace(decoded.full_text)

    def test_small_budget_spreads_over_pages(self, handles):
        _, result, _ = run_pipeline(handles["docx"], PaginationConfig(docx_char_budget=10))
        assert result.total_pages > 1

    def test_merged_table_text_appears_once(self, handles):
        _, _, extracted = run_pipeline(handles["docx"], PaginationConfig())
        assert extracted.count("MERGED") == 1
        assert "Overview" in extracted and "Closing paragraph." in extracted
