"""
EPUB decoder.

Reading order is resolved from the package document:

1. META-INF/container.xml names the package document (rootfile)
2. Otherwise the first ``*.opf`` entry of the archive is used
3. The manifest maps item ids to hrefs (relative to the package document)
4. The spine lists item ids in reading order

When no package document exists or the spine resolves to nothing, the
archive's HTML entries are read in lexicographic path order instead.

Each content document is stripped to plain text and split into
paragraph units. Chapters are far too long to be pages, so the
Paginator re-paginates these paragraphs with the EPUB page budget.

The manifest/spine resolution works on parsed XML trees only and can be
tested without any archive.
"""

from __future__ import annotations

import logging
import posixpath
import re
import xml.etree.ElementTree as ET
from typing import Callable, Collection, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup

from .capabilities import ArchiveOpener, ArchiveReader
from .decoder import BaseDecoder
from .exceptions import MalformedArchiveError
from .models import ContentUnit, DecodedDocument, FormatKind

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
HTML_SUFFIXES = (".html", ".xhtml", ".htm")

_NOISE_TAGS = ["script", "style", "noscript", "head"]
_BLOCK_TAGS = [
    "p", "div", "section", "article", "aside", "header", "footer", "nav",
    "blockquote", "pre", "li", "ul", "ol", "dl", "dt", "dd",
    "table", "tr", "figure", "figcaption", "hr",
    "h1", "h2", "h3", "h4", "h5", "h6",
]
_BLANK_LINE = re.compile(r"\n\s*\n")

XmlParser = Callable[[bytes], ET.Element]


def parse_xml(data: bytes) -> ET.Element:
    return ET.fromstring(data)


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element.iter() if _local_name(child.tag) == name]


# =============================================================================
# READING ORDER (pure functions)
# =============================================================================


def find_package_document(
    names: list[str],
    container: Optional[ET.Element] = None,
) -> Optional[str]:
    """
    Locate the package document path inside the archive.

    Args:
        names: Archive entry paths in archive order
        container: Parsed META-INF/container.xml, if present

    Returns:
        Path of the package document, or None if there is none
    """
    if container is not None:
        for rootfile in _children(container, "rootfile"):
            full_path = rootfile.get("full-path")
            if full_path and full_path in names:
                return full_path

    for name in names:
        if name.lower().endswith(".opf"):
            return name
    return None


def resolve_href(opf_path: str, href: str) -> str:
    """Resolve a manifest href against the package document's directory."""
    base = posixpath.dirname(opf_path)
    path = unquote(href.split("#", 1)[0])
    return posixpath.normpath(posixpath.join(base, path)) if base else posixpath.normpath(path)


def resolve_spine(
    package: ET.Element,
    opf_path: str,
    available: Collection[str],
) -> list[str]:
    """
    Resolve the spine of a package document to archive paths.

    Args:
        package: Parsed package document
        opf_path: Archive path of the package document
        available: Archive entry paths that exist

    Returns:
        Content document paths in reading order

    Raises:
        MalformedArchiveError: If the spine resolves to no content documents
    """
    manifest: dict[str, str] = {}
    for item in _children(package, "item"):
        item_id = item.get("id")
        href = item.get("href")
        if item_id and href:
            manifest[item_id] = resolve_href(opf_path, href)

    order: list[str] = []
    for itemref in _children(package, "itemref"):
        path = manifest.get(itemref.get("idref", ""))
        if path is None:
            logger.debug(f"Spine idref not in manifest: {itemref.get('idref')}")
            continue
        if path in available and path not in order:
            order.append(path)

    if not order:
        raise MalformedArchiveError(
            "Spine resolved to no content documents",
            details=opf_path,
        )
    return order


def fallback_reading_order(names: Collection[str]) -> list[str]:
    """All HTML-like entries sorted lexicographically by path."""
    return sorted(name for name in names if name.lower().endswith(HTML_SUFFIXES))


# =============================================================================
# MARKUP STRIPPING
# =============================================================================


def html_to_paragraphs(content: bytes | str) -> list[str]:
    """
    Strip an (X)HTML content document to plain-text paragraphs.

    Block-level elements delimit paragraphs; whitespace inside a
    paragraph is collapsed.
    """
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()

    root = soup.body or soup
    for tag in root.find_all(_BLOCK_TAGS):
        tag.insert_before("\n\n")
        tag.insert_after("\n\n")
    for br in root.find_all("br"):
        br.replace_with("\n")

    paragraphs = []
    for part in _BLANK_LINE.split(root.get_text()):
        collapsed = " ".join(part.split())
        if collapsed:
            paragraphs.append(collapsed)
    return paragraphs


# =============================================================================
# DECODER
# =============================================================================


class EpubDecoder(BaseDecoder):
    format = FormatKind.EPUB

    def __init__(self, opener: ArchiveOpener, xml_parser: XmlParser = parse_xml):
        self.opener = opener
        self.xml_parser = xml_parser

    def _decode(self, data: bytes, source_name: str) -> DecodedDocument:
        reader = self.opener.open(data)
        try:
            names = reader.names()
            warnings: list[str] = []
            order = self.reading_order(reader, names, warnings)

            units: list[ContentUnit] = []
            chapters: list[str] = []
            for path in order:
                paragraphs = html_to_paragraphs(reader.read(path))
                if not paragraphs:
                    continue
                units.extend(ContentUnit(text=para) for para in paragraphs)
                chapters.append("\n\n".join(paragraphs))
        finally:
            reader.close()

        if not order:
            warnings.append("EPUB contains no HTML content documents")
        full_text = "\n\n".join(chapters)
        logger.info(
            f"EPUB loaded: {len(units)} paragraphs from {len(order)} chapters "
            f"({round(len(full_text) / 1000)}K chars)"
        )
        return DecodedDocument(
            format=self.format,
            source_name=source_name,
            units=units,
            full_text=full_text,
            sections=order,
            warnings=warnings,
        )

    def reading_order(
        self,
        reader: ArchiveReader,
        names: list[str],
        warnings: list[str],
    ) -> list[str]:
        """Spine order if resolvable, else lexicographic HTML entries."""
        try:
            opf_path = find_package_document(names, self._read_container(reader, names))
            if opf_path is None:
                raise MalformedArchiveError("No package document (*.opf) found")
            try:
                package = self.xml_parser(reader.read(opf_path))
            except ET.ParseError as exc:
                raise MalformedArchiveError(
                    "Package document is not well-formed XML",
                    details=f"{opf_path}: {exc}",
                ) from exc
            return resolve_spine(package, opf_path, set(names))
        except MalformedArchiveError as exc:
            logger.warning(f"{exc}; using lexicographic reading order")
            warnings.append(str(exc))
            return fallback_reading_order(names)

    def _read_container(
        self,
        reader: ArchiveReader,
        names: list[str],
    ) -> Optional[ET.Element]:
        if CONTAINER_PATH not in names:
            return None
        try:
            return self.xml_parser(reader.read(CONTAINER_PATH))
        except ET.ParseError as exc:
            logger.debug(f"Ignoring malformed {CONTAINER_PATH}: {exc}")
            return None
