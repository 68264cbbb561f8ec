"""Locate the package document through META-INF/container.xml."""

from lxml import etree

from epub_reader.core.xml_loader import find_first, get_attr

CONTAINER_PATH = "META-INF/container.xml"


def find_package_path(container_root: etree._Element) -> str | None:
    """Return the full-path of the first rootfile, or None."""
    rootfile = find_first(container_root, "rootfile")
    if rootfile is None:
        return None
    path = get_attr(rootfile, "full-path").strip()
    return path or None
