"""EPUB parsing entry points.

Every entry point is total: failures come back as ParseFailure, never as
exceptions.
"""

import logging
import zipfile
from pathlib import Path

from epub_reader.cache.manager import ExtractionCache
from epub_reader.config import DEFAULT_CONFIG, ReaderConfig
from epub_reader.core import content_processor
from epub_reader.core.archive import ArchiveAccessor, DirectoryArchive, ZipArchive
from epub_reader.core.container import CONTAINER_PATH, find_package_path
from epub_reader.core.content_processor import ContentProcessor
from epub_reader.core.cover import find_cover_entry
from epub_reader.core.navigation import load_toc
from epub_reader.core.package import (
    package_directory,
    parse_manifest,
    parse_metadata,
    parse_spine,
)
from epub_reader.core.xml_loader import load_xml
from epub_reader.models.book import Book
from epub_reader.models.result import (
    EpubStructureError,
    ParseError,
    ParseErrorKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
)

log = logging.getLogger(__name__)


class EpubParser:
    """Parse EPUB archives or extracted directories into Book structures."""

    def __init__(self, config: ReaderConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self.cache = ExtractionCache(self.config.scratch_root)
        self.processor = ContentProcessor()

    def parse_from_archive(self, path: str | Path) -> ParseResult:
        """Parse a zipped .epub, extracting it to the scratch directory."""
        path = Path(path)
        log.debug("Parsing archive: %s", path)
        if not path.is_file():
            return self._failure(
                ParseError(ParseErrorKind.NOT_FOUND, f"File not found: {path}")
            )

        try:
            with ZipArchive(path) as archive:
                book = self._parse(archive)
        except zipfile.BadZipFile as e:
            return self._failure(
                ParseError(
                    ParseErrorKind.BAD_ARCHIVE,
                    f"Cannot open EPUB archive {path.name}: {e}",
                    e,
                )
            )
        except ParseError as e:
            return self._failure(e)
        except Exception as e:
            return self._unexpected(path, e)

        return self._success(book)

    def parse_from_directory(self, path: str | Path) -> ParseResult:
        """Parse an already-extracted EPUB directory in place."""
        path = Path(path)
        log.debug("Parsing directory: %s", path)
        if not path.is_dir():
            return self._failure(
                ParseError(
                    ParseErrorKind.MISSING_BASE_DIRECTORY,
                    f"Extracted EPUB directory does not exist: {path}",
                )
            )

        try:
            book = self._parse(DirectoryArchive(path))
        except ParseError as e:
            return self._failure(e)
        except Exception as e:
            return self._unexpected(path, e)

        return self._success(book)

    def parse_from_path(self, path: str | Path) -> ParseResult:
        """Parse either form, depending on what the path points at."""
        path = Path(path)
        if not path.exists():
            return self._failure(
                ParseError(ParseErrorKind.NOT_FOUND, f"File not found: {path}")
            )
        if path.is_dir():
            return self.parse_from_directory(path)
        return self.parse_from_archive(path)

    def get_chapter_content(self, book: Book, spine_index: int) -> str | None:
        """Plain text of a spine item, or None when it cannot be read."""
        try:
            return content_processor.get_chapter_content(book, spine_index, self.processor)
        except Exception:
            log.exception("Unexpected error reading chapter %d", spine_index)
            return None

    def _parse(self, archive: ArchiveAccessor) -> Book:
        if not archive.exists(CONTAINER_PATH):
            raise EpubStructureError(
                ParseErrorKind.MISSING_CONTAINER,
                f"Invalid EPUB: missing {CONTAINER_PATH}",
            )
        container = load_xml(archive.read(CONTAINER_PATH), CONTAINER_PATH)

        package_path = find_package_path(container)
        if package_path is None:
            raise EpubStructureError(
                ParseErrorKind.MISSING_PACKAGE_PATH,
                "Invalid EPUB: cannot locate package document",
            )

        package_entry = archive.resolve(package_path)
        if package_entry is None:
            raise EpubStructureError(
                ParseErrorKind.MISSING_PACKAGE,
                f"Invalid EPUB: missing package document {package_path}",
            )
        package = load_xml(archive.read(package_entry), package_entry)
        package_dir = package_directory(package_path)

        metadata = parse_metadata(package, self.config)
        manifest = parse_manifest(package)
        # The spine decides reading order; the TOC is only for navigation
        spine = parse_spine(package, package_dir, manifest, self.config)
        toc = load_toc(archive, manifest, package_dir, self.config)

        base_dir = archive.prepare(self.cache).resolve()
        cover_path = None
        cover_entry = find_cover_entry(manifest, package_dir, archive)
        if cover_entry is not None:
            candidate = base_dir / cover_entry
            if candidate.is_file():
                cover_path = str(candidate)

        return Book(
            metadata=metadata,
            spine=spine,
            toc=toc,
            cover_image_path=cover_path,
            base_path=str(base_dir),
            package_path=package_path,
            manifest=manifest,
        )

    def _success(self, book: Book) -> ParseSuccess:
        log.debug(
            "Parsed %r: spine=%d toc=%d base=%s",
            book.metadata.title,
            len(book.spine),
            len(book.toc),
            book.base_path,
        )
        return ParseSuccess(book=book)

    def _failure(self, error: ParseError) -> ParseFailure:
        log.error("Parse failed (%s): %s", error.kind.value, error.message)
        return ParseFailure.from_error(error)

    def _unexpected(self, path: Path, error: Exception) -> ParseFailure:
        log.exception("Unexpected error parsing %s", path)
        return ParseFailure(
            kind=ParseErrorKind.UNEXPECTED,
            message=f"Failed to parse EPUB: {error}",
            cause=error,
        )


def parse_from_archive(path: str | Path, config: ReaderConfig | None = None) -> ParseResult:
    return EpubParser(config).parse_from_archive(path)


def parse_from_directory(path: str | Path, config: ReaderConfig | None = None) -> ParseResult:
    return EpubParser(config).parse_from_directory(path)


def parse_from_path(path: str | Path, config: ReaderConfig | None = None) -> ParseResult:
    return EpubParser(config).parse_from_path(path)


def get_chapter_content(book: Book, spine_index: int) -> str | None:
    return EpubParser().get_chapter_content(book, spine_index)
