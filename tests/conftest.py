"""
Pytest fixtures for ingestion and pagination tests.

Documents are built in memory with the same libraries the decoders use,
so no binary fixtures are checked in.
"""

import io
import zipfile
from typing import Callable, Optional

import docx
import fitz  # PyMuPDF
import pytest

from ingestion import ContentUnit, DecodedDocument, FormatKind
from pagination import Page, PageKind


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def build_pdf(page_texts: list[str]) -> bytes:
    """PDF with one page per entry; empty strings give blank pages."""
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def build_png(width: int = 8, height: int = 8) -> bytes:
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.clear_with(200)
    return pix.tobytes("png")


def build_docx(populate: Callable[[object], None]) -> bytes:
    document = docx.Document()
    populate(document)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def build_opf(manifest: dict[str, str], spine: list[str]) -> str:
    items = "\n".join(
        f'    <item id="{item_id}" href="{href}" media-type="application/xhtml+xml"/>'
        for item_id, href in manifest.items()
    )
    itemrefs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="id">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Test Book</dc:title>
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine>
{itemrefs}
  </spine>
</package>
"""


def xhtml(*paragraphs: str, title: str = "Chapter") -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<html xmlns="http://www.w3.org/1999/xhtml">'
        f"<head><title>{title}</title></head><body>{body}</body></html>"
    )


def build_epub(entries: dict[str, str | bytes], container_opf: Optional[str] = None) -> bytes:
    """ZIP archive with the given entries, in insertion order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip")
        if container_opf:
            archive.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=container_opf))
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def two_page_pdf() -> bytes:
    return build_pdf(["Hello world", "Second page text"])


@pytest.fixture
def png_bytes() -> bytes:
    return build_png()


@pytest.fixture
def sample_epub() -> bytes:
    """Spine lists chapter two before chapter one."""
    opf = build_opf(
        {"ch1": "text/chapter1.xhtml", "ch2": "text/chapter2.xhtml"},
        ["ch2", "ch1"],
    )
    return build_epub(
        {
            "OEBPS/content.opf": opf,
            "OEBPS/text/chapter1.xhtml": xhtml("Chapter one opens.", "It continues."),
            "OEBPS/text/chapter2.xhtml": xhtml("Chapter two comes first."),
        },
        container_opf="OEBPS/content.opf",
    )


@pytest.fixture
def make_units() -> Callable[..., list[ContentUnit]]:
    """Text units with the given lengths, each made of one repeated letter."""
    def factory(*lengths: int) -> list[ContentUnit]:
        letters = "abcdefghijklmnopqrstuvwxyz"
        return [
            ContentUnit(text=letters[i % len(letters)] * length)
            for i, length in enumerate(lengths)
        ]
    return factory


@pytest.fixture
def sample_pages() -> list[Page]:
    texts = [
        "Introduction to graph theory",
        "Vertices and edges",
        "Shortest paths with Dijkstra",
        "",
        "Appendix: exercises for chapter 12",
    ]
    pages = []
    for index, text in enumerate(texts, start=1):
        kind = PageKind.IMAGE if not text else PageKind.TEXT
        pages.append(Page(
            index=index,
            display_content=text or "data:image/png;base64,AAAA",
            text_content=text,
            kind=kind,
            effective_chars=len(text),
        ))
    return pages


@pytest.fixture
def sample_decoded() -> DecodedDocument:
    units = [
        ContentUnit(text="First paragraph of the script."),
        ContentUnit(text="Second paragraph."),
        ContentUnit(text="Third paragraph closes the chapter."),
    ]
    return DecodedDocument(
        format=FormatKind.TEXT,
        source_name="skript.txt",
        units=units,
        full_text="\n\n".join(unit.text for unit in units),
    )
