"""Package document (OPF) parsing: metadata, manifest and spine."""

import posixpath

from lxml import etree

from epub_reader.config import DEFAULT_CONFIG, ReaderConfig
from epub_reader.core.xml_loader import children, find_first, get_attr, local_name, text_content
from epub_reader.models.book import BookMetadata, ManifestItem, SpineItem

CONTENT_MEDIA_TYPES = ("application/xhtml+xml", "text/html")

# Element local name -> BookMetadata field
METADATA_FIELDS = {
    "title": "title",
    "creator": "author",
    "language": "language",
    "publisher": "publisher",
    "description": "description",
    "date": "publish_date",
    "identifier": "identifier",
}


def package_directory(package_path: str) -> str:
    """Directory of the package document inside the book, '' for the root."""
    if "/" not in package_path:
        return ""
    return package_path.rsplit("/", 1)[0]


def join_package_path(package_dir: str, href: str) -> str:
    """Resolve an href from the package document to a book-root path."""
    href = href.strip().removeprefix("./")
    if not package_dir:
        return href
    return posixpath.normpath(f"{package_dir}/{href}").removeprefix("./")


def parse_metadata(
    package_root: etree._Element, config: ReaderConfig = DEFAULT_CONFIG
) -> BookMetadata:
    """Read Dublin Core metadata; first non-empty occurrence of each field wins."""
    values: dict[str, str] = {}
    metadata = find_first(package_root, "metadata")

    if metadata is not None:
        for node in children(metadata):
            field = METADATA_FIELDS.get(local_name(node))
            if field is None or field in values:
                continue
            value = text_content(node).strip()
            if value:
                values[field] = value

    return BookMetadata(
        title=values.get("title", config.unknown_title),
        author=values.get("author", config.unknown_author),
        language=values.get("language", config.default_language),
        publisher=values.get("publisher", ""),
        description=values.get("description", ""),
        publish_date=values.get("publish_date", ""),
        identifier=values.get("identifier", ""),
    )


def parse_manifest(package_root: etree._Element) -> list[ManifestItem]:
    """Manifest items in document order."""
    manifest = find_first(package_root, "manifest")
    if manifest is None:
        return []

    return [
        ManifestItem(
            id=get_attr(node, "id"),
            href=get_attr(node, "href"),
            media_type=get_attr(node, "media-type"),
            properties=get_attr(node, "properties"),
        )
        for node in children(manifest)
        if local_name(node) == "item"
    ]


def is_navigation_document(properties: str, href: str) -> bool:
    """Whether a manifest item is a TOC/nav page rather than content.

    EPUB3 nav documents are not always flagged with properties="nav", so
    common file naming conventions count too.
    """
    if "nav" in properties.lower().split():
        return True

    lowered = href.lower()
    return (
        "/toc" in lowered
        or "toc." in lowered
        or lowered.endswith("nav.xhtml")
        or lowered.endswith("navigation.xhtml")
    )


def derive_chapter_title(
    item: ManifestItem, href: str, config: ReaderConfig = DEFAULT_CONFIG
) -> str:
    """Fallback chapter title: manifest id, then cleaned file name."""
    # Manifest ids are often machine tokens ("c1", "item3"); the reconciler
    # prefers TOC titles and filters "item*" ids.
    item_id = item.id.strip()
    if item_id:
        return item_id

    file_name = href.rsplit("/", 1)[-1]
    if "." in file_name:
        file_name = file_name.rsplit(".", 1)[0]
    title = file_name.replace("_", " ").replace("-", " ")
    return title if title.strip() else config.chapter_placeholder


def parse_spine(
    package_root: etree._Element,
    package_dir: str,
    manifest: list[ManifestItem] | None = None,
    config: ReaderConfig = DEFAULT_CONFIG,
) -> list[SpineItem]:
    """Linear reading order, filtered to primary-flow text documents.

    Order is spine document order and is never re-sorted.
    """
    if manifest is None:
        manifest = parse_manifest(package_root)

    by_id: dict[str, ManifestItem] = {}
    for item in manifest:
        by_id.setdefault(item.id, item)

    spine = find_first(package_root, "spine")
    if spine is None:
        return []

    result: list[SpineItem] = []
    for node in children(spine):
        if local_name(node) != "itemref":
            continue
        # linear="no" marks auxiliary documents (notes, indexes)
        if get_attr(node, "linear").strip().lower() == "no":
            continue

        idref = get_attr(node, "idref")
        item = by_id.get(idref)
        if item is None:
            continue
        if item.media_type not in CONTENT_MEDIA_TYPES:
            continue
        if not item.href.strip():
            continue
        if is_navigation_document(item.properties, item.href):
            continue

        result.append(
            SpineItem(
                id=idref,
                href=join_package_path(package_dir, item.href),
                media_type=item.media_type,
                title=derive_chapter_title(item, item.href, config),
            )
        )
    return result
