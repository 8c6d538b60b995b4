"""
Document model used by the document scenarios.
"""

from typing import Any, Dict, Optional

from configuration import BOOK_TITLE, DOCUMENT_KEY_PREFIX


def document_key(index: int) -> str:
    """Deterministic document key for a request index."""
    return f"{DOCUMENT_KEY_PREFIX}{index}"


class Book:
    """Basic document stored by the benchmark."""

    def __init__(self, no_pages: int, key: Optional[str] = None, title: str = BOOK_TITLE):
        self.key = key
        self.title = title
        self.no_pages = no_pages

    def to_document(self) -> Dict[str, Any]:
        """JSON body for the server; the key is omitted when empty."""
        document: Dict[str, Any] = {"title": self.title, "no_pages": self.no_pages}
        if self.key:
            document["_key"] = self.key
        return document

    def __repr__(self) -> str:
        return f"Book(key={self.key!r}, no_pages={self.no_pages})"
