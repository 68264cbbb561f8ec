"""EPUB parsing, table-of-contents reconciliation and chapter text extraction."""

from epub_reader.core.epub_parser import (
    EpubParser,
    get_chapter_content,
    parse_from_archive,
    parse_from_directory,
    parse_from_path,
)
from epub_reader.core.reconciler import reconcile
from epub_reader.core.session import ReadingSession
from epub_reader.models import Book, ParseFailure, ParseResult, ParseSuccess

__all__ = [
    "EpubParser",
    "parse_from_archive",
    "parse_from_directory",
    "parse_from_path",
    "get_chapter_content",
    "reconcile",
    "ReadingSession",
    "Book",
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
]
