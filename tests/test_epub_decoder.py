"""Tests for ingestion.epub_decoder."""

import asyncio
import xml.etree.ElementTree as ET

import pytest

from conftest import CONTAINER_XML, build_epub, build_opf, xhtml
from ingestion import (
    DecodeError,
    EpubDecoder,
    FormatKind,
    MalformedArchiveError,
    Unavailable,
    UnsupportedLibraryError,
    fallback_reading_order,
    find_package_document,
    html_to_paragraphs,
    resolve_spine,
)
from ingestion.capabilities import ZipArchiveOpener
from ingestion.epub_decoder import resolve_href


def decode(data: bytes):
    return asyncio.run(EpubDecoder(ZipArchiveOpener()).decode(data, "book.epub"))


# ---------------------------------------------------------------------------
# Pure reading-order functions
# ---------------------------------------------------------------------------

class TestFindPackageDocument:
    def test_container_rootfile(self):
        container = ET.fromstring(CONTAINER_XML.format(opf_path="b/content.opf"))
        names = ["a/other.opf", "b/content.opf"]
        assert find_package_document(names, container) == "b/content.opf"

    def test_first_opf_without_container(self):
        names = ["mimetype", "x/first.opf", "y/second.opf"]
        assert find_package_document(names) == "x/first.opf"

    def test_container_points_to_missing_entry(self):
        container = ET.fromstring(CONTAINER_XML.format(opf_path="missing.opf"))
        assert find_package_document(["real.opf"], container) == "real.opf"

    def test_none(self):
        assert find_package_document(["a.xhtml"]) is None


class TestResolveHref:
    def test_relative_to_package(self):
        assert resolve_href("OEBPS/content.opf", "text/ch1.xhtml") == "OEBPS/text/ch1.xhtml"

    def test_root_package(self):
        assert resolve_href("content.opf", "ch1.xhtml") == "ch1.xhtml"

    def test_parent_fragment_and_escape(self):
        assert resolve_href("OEBPS/pkg/content.opf", "../Text/ch%201.xhtml#sec") == "OEBPS/Text/ch 1.xhtml"


class TestResolveSpine:
    def test_spine_order(self):
        package = ET.fromstring(build_opf({"a": "a.xhtml", "b": "b.xhtml"}, ["b", "a"]))
        order = resolve_spine(package, "OPS/content.opf", {"OPS/a.xhtml", "OPS/b.xhtml"})
        assert order == ["OPS/b.xhtml", "OPS/a.xhtml"]

    def test_skips_unknown_missing_and_duplicate(self):
        package = ET.fromstring(build_opf(
            {"a": "a.xhtml", "gone": "gone.xhtml"},
            ["nope", "gone", "a", "a"],
        ))
        assert resolve_spine(package, "content.opf", {"a.xhtml"}) == ["a.xhtml"]

    def test_empty_spine_raises(self):
        package = ET.fromstring(build_opf({"a": "a.xhtml"}, []))
        with pytest.raises(MalformedArchiveError):
            resolve_spine(package, "content.opf", {"a.xhtml"})


class TestFallbackReadingOrder:
    def test_html_entries_sorted(self):
        names = ["b.xhtml", "style.css", "a.xhtml", "c/index.HTML", "d.htm"]
        assert fallback_reading_order(names) == ["a.xhtml", "b.xhtml", "c/index.HTML", "d.htm"]


class TestHtmlToParagraphs:
    def test_blocks_and_noise(self):
        content = (
            "<html><head><title>T</title><style>p {color: red}</style></head>"
            "<body><h1>Title</h1><p>One   two</p><script>var x = 1;</script>"
            "<div><p>Nested</p></div><p>Three<br/>Four</p></body></html>"
        )
        assert html_to_paragraphs(content) == ["Title", "One two", "Nested", "Three Four"]

    def test_bytes_input(self):
        assert html_to_paragraphs(xhtml("Hallo Welt").encode("utf-8")) == ["Hallo Welt"]

    def test_empty_body(self):
        assert html_to_paragraphs("<html><body></body></html>") == []


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------

class TestEpubDecoder:
    def test_spine_reading_order(self, sample_epub):
        document = decode(sample_epub)
        assert document.format == FormatKind.EPUB
        assert document.sections == ["OEBPS/text/chapter2.xhtml", "OEBPS/text/chapter1.xhtml"]
        assert [u.text for u in document.units] == [
            "Chapter two comes first.",
            "Chapter one opens.",
            "It continues.",
        ]
        assert document.full_text == "Chapter two comes first.\n\nChapter one opens.\n\nIt continues."
        assert document.warnings == []

    def test_lexicographic_fallback_without_package(self):
        data = build_epub({
            "b.xhtml": xhtml("Second"),
            "a.xhtml": xhtml("First"),
        })
        document = decode(data)
        assert document.sections == ["a.xhtml", "b.xhtml"]
        assert document.full_text == "First\n\nSecond"
        assert any("package document" in w for w in document.warnings)

    def test_first_opf_without_container(self):
        data = build_epub({
            "content.opf": build_opf({"x": "x.xhtml", "y": "y.xhtml"}, ["y", "x"]),
            "x.xhtml": xhtml("X"),
            "y.xhtml": xhtml("Y"),
        })
        assert decode(data).full_text == "Y\n\nX"

    def test_malformed_package_falls_back(self):
        data = build_epub({
            "content.opf": "<package><manifest>",
            "b.xhtml": xhtml("B"),
            "a.xhtml": xhtml("A"),
        })
        document = decode(data)
        assert document.sections == ["a.xhtml", "b.xhtml"]
        assert any("well-formed" in w for w in document.warnings)

    def test_unresolvable_spine_falls_back(self):
        data = build_epub({
            "content.opf": build_opf({"x": "missing.xhtml"}, ["x"]),
            "z.xhtml": xhtml("Z"),
        })
        assert decode(data).sections == ["z.xhtml"]

    def test_no_html_at_all(self):
        document = decode(build_epub({"notes.txt": "nothing"}))
        assert document.units == []
        assert "EPUB contains no HTML content documents" in document.warnings

    def test_custom_xml_parser_used(self, sample_epub):
        seen = []

        def parser(data):
            seen.append(data)
            return ET.fromstring(data)

        asyncio.run(EpubDecoder(ZipArchiveOpener(), xml_parser=parser).decode(sample_epub))
        assert len(seen) == 2  # container + package

    def test_unavailable_archive(self, sample_epub):
        with pytest.raises(UnsupportedLibraryError):
            asyncio.run(EpubDecoder(Unavailable("archive")).decode(sample_epub))

    def test_not_a_zip(self):
        with pytest.raises(DecodeError):
            decode(b"definitely not a zip archive")
