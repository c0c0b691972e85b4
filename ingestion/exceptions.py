"""
Custom Exceptions for Document Ingestion.

This module defines a hierarchy of exceptions for precise error handling
in the decode pipeline. Every decode-time error is recoverable: the
DocumentLoader converts them into a plain-text decode of the raw bytes.

Exception Hierarchy:
    IngestionError (base)
    ├── UnsupportedLibraryError
    ├── MalformedArchiveError
    └── DecodeError

Usage:
    from ingestion.exceptions import (
        IngestionError,
        UnsupportedLibraryError,
        DecodeError,
    )

    try:
        document = await decoder.decode(data)
    except UnsupportedLibraryError as e:
        print(f"Missing capability: {e.library}")
    except IngestionError as e:
        print(f"Decode failed: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class IngestionError(Exception):
    """
    Base exception for all ingestion-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "An ingestion error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# DECODE ERRORS
# =============================================================================


class UnsupportedLibraryError(IngestionError):
    """
    Raised when a format-specific decode capability is unavailable.

    Attributes:
        library: Name of the missing capability (e.g. "pdf", "docx", "archive")
    """

    def __init__(self, library: str, details: Optional[str] = None):
        self.library = library
        super().__init__(
            message=f"Decode capability unavailable: {library}",
            details=details,
        )


class MalformedArchiveError(IngestionError):
    """
    Raised when an EPUB has no resolvable package document or spine.

    The EPUB decoder handles this itself by falling back to the
    lexicographic order of the archive's HTML entries.
    """

    def __init__(
        self,
        message: str = "EPUB package document or spine could not be resolved",
        details: Optional[str] = None,
    ):
        super().__init__(message, details)


class DecodeError(IngestionError):
    """
    Raised when a decoder fails unexpectedly.

    Attributes:
        format: Format that was being decoded (e.g. "pdf")
        original_error: The underlying library error, if any
    """

    def __init__(
        self,
        format: str,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.format = format
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message=message or f"Failed to decode {format} document",
            details=details,
        )


# =============================================================================
# UTILITIES
# =============================================================================


def format_error_chain(error: Exception) -> str:
    """
    Format an exception with its cause chain for logging.

    Args:
        error: The exception to format

    Returns:
        Multi-line string with one line per exception in the chain
    """
    lines = []
    current = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")

        if getattr(current, "original_error", None):
            current = current.original_error
            depth += 1
        elif current.__cause__:
            current = current.__cause__
            depth += 1
        else:
            break

    return "\n".join(lines)
