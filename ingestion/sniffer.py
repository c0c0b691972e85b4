"""
Format sniffing for uploaded documents.

Classification never fails: unknown or mislabelled files are treated as
plain text, and decode-time problems are handled by the loader's
fallback path.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from .models import FormatKind

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
EPUB_MEDIA_TYPE = "application/epub+zip"

MEDIA_TYPES: dict[str, FormatKind] = {
    PDF_MEDIA_TYPE: FormatKind.PDF,
    DOCX_MEDIA_TYPE: FormatKind.DOCX,
    EPUB_MEDIA_TYPE: FormatKind.EPUB,
}

EXTENSIONS: dict[str, FormatKind] = {
    ".docx": FormatKind.DOCX,
    ".epub": FormatKind.EPUB,
    ".pdf": FormatKind.PDF,
}


def _normalize_media_type(media_type: str | None) -> str:
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def classify(media_type: str | None, file_name: str | None) -> FormatKind:
    """
    Pick the format for a document from its media type and file name.

    Exact media type matches win, then image media types, then the
    file extension. Anything else is plain text.
    """
    normalized = _normalize_media_type(media_type)
    if normalized in MEDIA_TYPES:
        return MEDIA_TYPES[normalized]
    if normalized.startswith("image/"):
        return FormatKind.IMAGE

    # Windows uploads may carry backslashes in the name
    suffix = PurePosixPath((file_name or "").replace("\\", "/")).suffix.lower()
    return EXTENSIONS.get(suffix, FormatKind.TEXT)
