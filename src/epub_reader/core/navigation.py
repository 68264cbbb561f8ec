"""Table of contents parsing for NCX (EPUB2) and nav (EPUB3) documents."""

import logging
from collections.abc import Iterable

from lxml import etree

from epub_reader.config import DEFAULT_CONFIG, ReaderConfig
from epub_reader.core.archive import ArchiveAccessor
from epub_reader.core.package import join_package_path
from epub_reader.core.xml_loader import (
    children,
    find_all,
    find_first,
    get_attr,
    load_xml,
    local_name,
    text_content,
)
from epub_reader.models.book import ManifestItem, NavPoint
from epub_reader.models.result import ParseError

log = logging.getLogger(__name__)

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
XHTML_MEDIA_TYPE = "application/xhtml+xml"
EPUB_TYPE_ATTR = "{http://www.idpf.org/2007/ops}type"

NAV_ITEM_TAGS = ("navPoint", "li")
LABEL_TAGS = ("navLabel", "a", "span")


def find_toc_href(manifest: list[ManifestItem], package_dir: str) -> str | None:
    """Book-root path of the first NCX or nav manifest item.

    NCX and nav documents are never merged; whichever comes first wins.
    """
    for item in manifest:
        is_nav = item.media_type == XHTML_MEDIA_TYPE and "nav" in item.property_tokens
        if item.media_type == NCX_MEDIA_TYPE or is_nav:
            if item.href.strip():
                return join_package_path(package_dir, item.href)
    return None


def _clean_text(value: str) -> str:
    return " ".join(value.split())


def _extract_title(node: etree._Element) -> str:
    for child in children(node):
        if local_name(child) in LABEL_TAGS:
            value = _clean_text(text_content(child))
            if value:
                return value
    return ""


def _extract_href(node: etree._Element) -> str:
    for child in children(node):
        name = local_name(child)
        if name == "content":
            return get_attr(child, "src").strip()
        if name == "a":
            return get_attr(child, "href").strip()
    return ""


def _play_order(node: etree._Element) -> int:
    try:
        return int(get_attr(node, "playOrder").strip())
    except ValueError:
        return 0


def parse_nav_points(
    elements: Iterable[etree._Element],
    level: int = 0,
    config: ReaderConfig = DEFAULT_CONFIG,
) -> list[NavPoint]:
    """Recursively build NavPoints from navPoint/li elements.

    Wrapper elements (div, ol, ...) are descended into at the same level.
    Nodes with neither an href nor children are dropped.
    """
    result: list[NavPoint] = []
    for node in elements:
        if local_name(node) not in NAV_ITEM_TAGS:
            result.extend(parse_nav_points(children(node), level, config))
            continue

        title = _extract_title(node)
        href = _extract_href(node)
        nested = parse_nav_points(children(node), level + 1, config)

        if href or nested:
            result.append(
                NavPoint(
                    id=get_attr(node, "id"),
                    play_order=_play_order(node),
                    title=title or config.chapter_placeholder,
                    href=href,
                    level=level,
                    children=nested,
                )
            )
    return result


def parse_ncx(root: etree._Element, config: ReaderConfig = DEFAULT_CONFIG) -> list[NavPoint]:
    """Parse a legacy NCX document's navMap."""
    nav_map = find_first(root, "navMap")
    if nav_map is None:
        return []
    return parse_nav_points(children(nav_map), 0, config)


def _is_toc_nav(node: etree._Element) -> bool:
    for value in (node.get("type"), node.get("role"), node.get(EPUB_TYPE_ATTR)):
        if value and "toc" in value.lower():
            return True
    return False


def parse_nav(root: etree._Element, config: ReaderConfig = DEFAULT_CONFIG) -> list[NavPoint]:
    """Parse an EPUB3 nav document, preferring the nav marked as toc."""
    navs = find_all(root, "nav")
    if not navs:
        return []

    nav = next((node for node in navs if _is_toc_nav(node)), navs[0])
    ol = find_first(nav, "ol")
    elements = children(ol) if ol is not None else children(nav)
    return parse_nav_points(elements, 0, config)


def parse_toc(
    data: bytes, toc_path: str, config: ReaderConfig = DEFAULT_CONFIG
) -> list[NavPoint]:
    """Parse TOC bytes; NCX is chosen by the .ncx extension."""
    root = load_xml(data, toc_path)
    if toc_path.lower().endswith(".ncx"):
        return parse_ncx(root, config)
    return parse_nav(root, config)


def load_toc(
    archive: ArchiveAccessor,
    manifest: list[ManifestItem],
    package_dir: str,
    config: ReaderConfig = DEFAULT_CONFIG,
) -> list[NavPoint]:
    """Locate and parse the TOC. Missing or broken TOCs yield an empty forest."""
    toc_href = find_toc_href(manifest, package_dir)
    if toc_href is None:
        log.debug("No TOC document in manifest")
        return []

    entry = archive.resolve(toc_href)
    if entry is None:
        log.warning("TOC document not found: %s", toc_href)
        return []

    try:
        return parse_toc(archive.read(entry), entry, config)
    except (ParseError, OSError, ValueError) as e:
        log.warning("Failed to parse TOC %s: %s", entry, e)
        return []
