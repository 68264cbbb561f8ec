"""Namespace-aware XML loading for EPUB structural files."""

from collections.abc import Iterator

from lxml import etree

from epub_reader.models.result import ParseError, ParseErrorKind


class MalformedXmlError(ParseError):
    """A structural file is not well-formed XML."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(ParseErrorKind.MALFORMED_XML, message, cause)


def _make_parser() -> etree.XMLParser:
    # No recovery: EPUB structural files must be well-formed
    return etree.XMLParser(
        recover=False,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def load_xml(data: bytes, source: str = "document") -> etree._Element:
    """Parse bytes into an element tree root."""
    try:
        return etree.fromstring(data, parser=_make_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedXmlError(f"Malformed XML in {source}: {e}", e) from e


def local_name(element: etree._Element) -> str:
    """Tag name without namespace or prefix."""
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def children(element: etree._Element) -> Iterator[etree._Element]:
    """Element children, skipping comments and processing instructions."""
    for child in element:
        if isinstance(child.tag, str):
            yield child


def find_first(element: etree._Element, name: str) -> etree._Element | None:
    """First descendant (document order) with the given local name."""
    for node in element.iter():
        if local_name(node) == name:
            return node
    return None


def find_all(element: etree._Element, name: str) -> list[etree._Element]:
    """All descendants (document order) with the given local name."""
    return [node for node in element.iter() if local_name(node) == name]


def get_attr(element: etree._Element, name: str) -> str:
    """Attribute by local name, ignoring namespace. Empty string if absent."""
    value = element.get(name)
    if value is not None:
        return value
    for key, attr_value in element.attrib.items():
        if etree.QName(key).localname == name:
            return attr_value
    return ""


def text_content(element: etree._Element) -> str:
    """All descendant text, like DOM textContent."""
    return "".join(element.itertext())
