"""Cover image lookup."""

import logging

from epub_reader.core.archive import ArchiveAccessor
from epub_reader.core.package import join_package_path
from epub_reader.models.book import ManifestItem

log = logging.getLogger(__name__)


def is_cover_candidate(item: ManifestItem) -> bool:
    """cover-image property, "cover" in the id, or any image media type.

    The id test can match non-image items (e.g. a cover page document).
    """
    return (
        "cover-image" in item.property_tokens
        or "cover" in item.id.lower()
        or item.media_type.startswith("image/")
    )


def find_cover_entry(
    manifest: list[ManifestItem], package_dir: str, archive: ArchiveAccessor
) -> str | None:
    """Entry name of the first resolvable cover candidate, in manifest order."""
    for item in manifest:
        if not is_cover_candidate(item):
            continue
        entry = archive.resolve(join_package_path(package_dir, item.href))
        if entry is not None:
            return entry
    log.debug("No cover image found")
    return None
