"""Reconcile the table of contents with the spine.

TOC entries may point at anchors inside a chapter, at a subset of the spine,
or be missing altogether. The reconciler maps them back onto spine indices to
produce the list of chapters a reader actually navigates, with titles.
"""

import logging
from urllib.parse import unquote

from epub_reader.config import DEFAULT_CONFIG, ReaderConfig
from epub_reader.models.book import Book, NavPoint, ReadableChapters, TocEntry

log = logging.getLogger(__name__)

FILE_NAME_SUFFIXES = (".xhtml", ".html", ".htm", ".xml")


def normalize_href(href: str) -> str:
    """Decode, drop the #fragment and a leading './', trim."""
    return unquote(href).split("#", 1)[0].removeprefix("./").strip()


def _file_name(href: str) -> str:
    return href.rsplit("/", 1)[-1]


def looks_like_file_name(value: str) -> bool:
    """True for titles that are really paths or document names."""
    normalized = value.strip().lower()
    return (
        normalized.endswith(FILE_NAME_SUFFIXES)
        or "/" in normalized
        or "\\" in normalized
    )


def flatten_toc(toc: list[NavPoint]) -> list[TocEntry]:
    """Pre-order projection of the TOC tree, deduplicated by href."""
    result: list[TocEntry] = []
    seen: set[str] = set()

    def collect(nodes: list[NavPoint]) -> None:
        for node in nodes:
            href = normalize_href(node.href)
            if href and href not in seen:
                seen.add(href)
                result.append(TocEntry(href=href, title=node.title.strip()))
            collect(node.children)

    collect(toc)
    return result


def _spine_lookup(book: Book, indices: list[int]) -> dict[str, int]:
    """Map normalized href and bare file name to spine index, first wins."""
    lookup: dict[str, int] = {}
    for index in indices:
        href = normalize_href(book.spine[index].href)
        if href:
            lookup.setdefault(href, index)
        name = _file_name(href)
        if name:
            lookup.setdefault(name, index)
    return lookup


def _match(lookup: dict[str, int], href: str) -> int | None:
    if href in lookup:
        return lookup[href]
    return lookup.get(_file_name(href))


def build_readable_chapter_index(book: Book) -> list[int]:
    """Spine indices in TOC order, or the whole spine when the TOC is useless."""
    all_indices = list(range(len(book.spine)))
    if not all_indices:
        return []

    entries = flatten_toc(book.toc)
    if not entries:
        log.debug("TOC empty, using spine directly (%d items)", len(all_indices))
        return all_indices

    lookup = _spine_lookup(book, all_indices)
    matched: list[int] = []
    for entry in entries:
        index = _match(lookup, entry.href)
        if index is not None and index not in matched:
            matched.append(index)

    result = matched or all_indices
    log.debug(
        "Readable chapters: spine=%d toc=%d matched=%d final=%d",
        len(all_indices),
        len(entries),
        len(matched),
        len(result),
    )
    return result


def _toc_title_map(entries: list[TocEntry]) -> dict[str, str]:
    titles: dict[str, str] = {}
    for entry in entries:
        if entry.href and entry.title:
            titles.setdefault(entry.href, entry.title)
            titles.setdefault(_file_name(entry.href), entry.title)
    return titles


def build_chapter_titles(
    book: Book, indices: list[int], config: ReaderConfig = DEFAULT_CONFIG
) -> list[str]:
    """Display titles: TOC title, then spine title, then "Chapter N"."""
    entries = flatten_toc(book.toc)
    title_map = _toc_title_map(entries)
    lookup = _spine_lookup(book, indices)

    title_by_index: dict[int, str] = {}
    for entry in entries:
        index = _match(lookup, entry.href)
        if index is None:
            continue
        if entry.title.strip() and not looks_like_file_name(entry.title):
            title_by_index.setdefault(index, entry.title.strip())

    titles: list[str] = []
    for position, index in enumerate(indices):
        item = book.spine[index]
        href = normalize_href(item.href)

        toc_title = title_by_index.get(index)
        if toc_title is None:
            toc_title = title_map.get(href)
        if toc_title is None:
            toc_title = title_map.get(_file_name(href))

        if toc_title and toc_title.strip() and not looks_like_file_name(toc_title):
            preferred = toc_title
        elif (
            item.title.strip()
            and not looks_like_file_name(item.title)
            and not item.title.strip().lower().startswith("item")
        ):
            # Manifest ids like "item12" carry no meaning for a reader
            preferred = item.title
        else:
            preferred = config.numbered_chapter(position + 1)
        titles.append(preferred.strip())
    return titles


def reconcile(book: Book, config: ReaderConfig = DEFAULT_CONFIG) -> ReadableChapters:
    """Readable chapter indices and their titles for a parsed book."""
    indices = build_readable_chapter_index(book)
    return ReadableChapters(
        indices=indices,
        titles=build_chapter_titles(book, indices, config),
    )
