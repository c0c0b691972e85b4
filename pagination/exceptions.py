"""
Exceptions raised while working with page selections.
"""

from typing import Any, Optional


class SelectionError(Exception):
    """Base exception for selection errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class EmptySelectionError(SelectionError):
    """Raised when content is requested for a selection with no pages."""

    def __init__(self, total_pages: int = 0):
        super().__init__(
            "Please select at least one page",
            {"total_pages": total_pages},
        )
        self.total_pages = total_pages

    def __str__(self) -> str:
        return self.message
