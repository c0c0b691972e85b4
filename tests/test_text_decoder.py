"""Tests for ingestion.text_decoder."""

import asyncio

import pytest

from ingestion import DecodeError, FormatKind, TextDecoder, split_paragraphs


def decode(data: bytes, **kwargs):
    return asyncio.run(TextDecoder(**kwargs).decode(data, "notes.txt"))


class TestSplitParagraphs:
    def test_blank_lines_separate(self):
        assert split_paragraphs("one\n\ntwo\n\n\nthree") == ["one", "two", "three"]

    def test_single_newlines_kept(self):
        assert split_paragraphs("line a\nline b") == ["line a\nline b"]

    def test_empty(self):
        assert split_paragraphs("\n\n  \n\n") == []


class TestTextDecoder:
    def test_paragraph_units(self):
        document = decode(b"First paragraph.\n\nSecond paragraph.")
        assert document.format == FormatKind.TEXT
        assert [u.text for u in document.units] == ["First paragraph.", "Second paragraph."]
        assert document.full_text == "First paragraph.\n\nSecond paragraph."
        assert document.source_name == "notes.txt"

    def test_crlf_normalized(self):
        document = decode(b"a\r\n\r\nb\rc")
        assert document.full_text == "a\n\nb\nc"
        assert [u.text for u in document.units] == ["a", "b\nc"]

    def test_bom_stripped(self):
        document = decode("\ufeffHallo".encode("utf-8"))
        assert document.full_text == "Hallo"

    def test_invalid_bytes_replaced(self):
        document = decode(b"abc\xffdef")
        assert document.full_text == "abc\ufffddef"

    def test_empty_input(self):
        document = decode(b"")
        assert document.units == []
        assert document.full_text == ""

    def test_units_have_no_markup(self):
        document = decode(b"x")
        assert document.units[0].markup is None
        assert document.units[0].standalone is False

    def test_custom_encoding(self):
        document = decode("Grüße".encode("latin-1"), encoding="latin-1")
        assert document.full_text == "Grüße"

    def test_unknown_encoding_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(b"abc", encoding="no-such-codec")
        assert exc_info.value.format == "text"
        assert isinstance(exc_info.value.original_error, LookupError)
