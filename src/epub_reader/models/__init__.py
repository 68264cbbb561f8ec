"""Data models."""

from epub_reader.models.book import (
    Book,
    BookMetadata,
    ManifestItem,
    NavPoint,
    ReadableChapters,
    SpineItem,
    TocEntry,
)
from epub_reader.models.result import (
    EpubStructureError,
    ParseError,
    ParseErrorKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
)

__all__ = [
    # Book models
    "Book",
    "BookMetadata",
    "ManifestItem",
    "NavPoint",
    "SpineItem",
    "TocEntry",
    "ReadableChapters",
    # Result models
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
    "ParseErrorKind",
    "ParseError",
    "EpubStructureError",
]
