"""Reading session over a parsed book."""

import logging
from pathlib import Path

from epub_reader.core.epub_parser import EpubParser
from epub_reader.core.reconciler import reconcile
from epub_reader.models.book import Book, ReadableChapters
from epub_reader.models.result import ParseError, ParseErrorKind

log = logging.getLogger(__name__)


class ReadingSession:
    """Holds an open book, its readable chapters and the current position.

    Chapter positions are indices into the readable chapter list, not into
    the spine. Reconciliation happens once, when the session is created.
    """

    def __init__(self, book: Book, parser: EpubParser | None = None):
        self.book = book
        self.parser = parser or EpubParser()
        self.chapters: ReadableChapters = reconcile(book, self.parser.config)
        self.current = 0
        self._content_cache: dict[int, str] = {}

    @classmethod
    def open(cls, path: str | Path, parser: EpubParser | None = None) -> "ReadingSession":
        """Parse a book and start a session. Raises ParseError on failure."""
        parser = parser or EpubParser()
        book = parser.parse_from_path(path).unwrap()
        session = cls(book, parser)
        if session.total_chapters == 0:
            raise ParseError(
                ParseErrorKind.NO_READABLE_CHAPTERS,
                "No readable chapters found, try a different EPUB file",
            )
        return session

    @property
    def total_chapters(self) -> int:
        return len(self.chapters)

    @property
    def current_title(self) -> str:
        return self.title(self.current)

    def title(self, chapter: int) -> str:
        if 0 <= chapter < len(self.chapters.titles):
            return self.chapters.titles[chapter]
        return self.parser.config.numbered_chapter(chapter + 1)

    def content(self, chapter: int) -> str:
        """Text of a readable chapter; empty string when unavailable."""
        if not 0 <= chapter < self.total_chapters:
            log.warning("Chapter out of range: %d (total %d)", chapter, self.total_chapters)
            return ""

        spine_index = self.chapters.indices[chapter]
        if spine_index in self._content_cache:
            return self._content_cache[spine_index]

        text = self.parser.get_chapter_content(self.book, spine_index) or ""
        if text.strip():
            self._content_cache[spine_index] = text
        return text

    def current_content(self) -> str:
        return self.content(self.current)

    def go_to(self, chapter: int) -> bool:
        """Move to a chapter. Out-of-range requests are ignored."""
        if not 0 <= chapter < self.total_chapters:
            log.warning("go_to ignored: %d (total %d)", chapter, self.total_chapters)
            return False
        self.current = chapter
        log.debug("Moved to chapter %d: %s", chapter, self.title(chapter))
        return True

    def next(self) -> bool:
        return self.go_to(self.current + 1)

    def previous(self) -> bool:
        return self.go_to(self.current - 1)
