"""Tests for ingestion.sniffer."""

import pytest

from ingestion import FormatKind, classify
from ingestion.sniffer import DOCX_MEDIA_TYPE, EPUB_MEDIA_TYPE, PDF_MEDIA_TYPE


class TestMediaType:
    @pytest.mark.parametrize("media_type,expected", [
        (PDF_MEDIA_TYPE, FormatKind.PDF),
        (DOCX_MEDIA_TYPE, FormatKind.DOCX),
        (EPUB_MEDIA_TYPE, FormatKind.EPUB),
    ])
    def test_exact_match(self, media_type, expected):
        assert classify(media_type, "upload.bin") == expected

    def test_parameters_and_case_ignored(self):
        assert classify("Application/PDF; charset=binary", "") == FormatKind.PDF

    def test_media_type_wins_over_extension(self):
        assert classify(PDF_MEDIA_TYPE, "notes.docx") == FormatKind.PDF

    def test_image_media_type(self):
        assert classify("image/jpeg", "scan.jpg") == FormatKind.IMAGE


class TestExtensionFallback:
    def test_docx_extension(self):
        assert classify("application/octet-stream", "report.docx") == FormatKind.DOCX

    def test_epub_extension_case_insensitive(self):
        assert classify("", "Book.EPUB") == FormatKind.EPUB

    def test_pdf_extension_without_media_type(self):
        assert classify(None, "slides.pdf") == FormatKind.PDF

    def test_windows_path(self):
        assert classify("", "C:\\Users\\me\\thesis.docx") == FormatKind.DOCX


class TestPlainTextDefault:
    def test_unknown_everything(self):
        assert classify("application/x-unknown", "data.xyz") == FormatKind.TEXT

    def test_nothing_given(self):
        assert classify(None, None) == FormatKind.TEXT

    def test_text_plain(self):
        assert classify("text/plain", "readme") == FormatKind.TEXT
