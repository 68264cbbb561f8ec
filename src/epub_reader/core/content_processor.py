"""Convert chapter markup into readable plain text."""

import logging
import re
import warnings
from pathlib import Path

from bs4 import BeautifulSoup, NavigableString, XMLParsedAsHTMLWarning

from epub_reader.core.archive import resolve_book_file
from epub_reader.models.book import Book

# Suppress XML parsing warnings - EPUB chapters are usually XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

# Closing tags that end a line, and how many newlines they leave behind
BLOCK_BREAKS = {
    "p": "\n\n",
    "h1": "\n\n",
    "h2": "\n\n",
    "h3": "\n\n",
    "h4": "\n\n",
    "h5": "\n\n",
    "h6": "\n\n",
    "div": "\n",
    "li": "\n",
}

_SOURCE_WHITESPACE = re.compile(r"[ \t\r\n\f]+")
_SPACES_AROUND_NEWLINE = re.compile(r"[ \t]*\n[ \t]*")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


class ContentProcessor:
    """Turn XHTML chapter documents into plain text with paragraph breaks."""

    def html_to_text(self, markup: str) -> str:
        """Convert markup to text. Steps run in a fixed order."""
        soup = BeautifulSoup(markup, "lxml")

        # 1. Only the body, when there is one
        root = soup.body if soup.body is not None else soup

        # 2. Embedded table of contents
        for nav in root.find_all("nav"):
            if nav.decomposed:
                continue
            if "toc" in nav.get("epub:type", "").lower().split():
                nav.decompose()

        # 3. Scripts and styles, contents included
        for tag in root.find_all(["script", "style"]):
            tag.decompose()

        # Source whitespace is not significant outside <pre>
        for string in root.find_all(string=True):
            if type(string) is NavigableString and string.find_parent("pre") is None:
                string.replace_with(_SOURCE_WHITESPACE.sub(" ", string))

        # 4. Structural line breaks
        for br in root.find_all("br"):
            br.replace_with("\n")
        for tag in root.find_all(list(BLOCK_BREAKS)):
            tag.insert_after(BLOCK_BREAKS[tag.name])

        # 5. Remaining markup; entities are already decoded by the parser
        text = root.get_text().replace("\xa0", " ")
        text = _SPACES_AROUND_NEWLINE.sub("\n", text)

        # 6. Whitespace normalization
        text = self._collapse_newlines(text)

        # 7. Plain-text chapters without markup
        if text:
            return text
        return self._collapse_newlines(markup)

    def _collapse_newlines(self, text: str) -> str:
        text = text.replace("\r\n", "\n")
        return _EXCESS_NEWLINES.sub("\n\n", text).strip()

    def get_stats(self, content: str) -> dict[str, int]:
        """Calculate content statistics."""
        words = content.split()
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(words),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }


def get_chapter_content(
    book: Book, spine_index: int, processor: ContentProcessor | None = None
) -> str | None:
    """Plain text of a spine item, or None when unavailable."""
    if not 0 <= spine_index < len(book.spine):
        log.warning(
            "Chapter index out of range: %d (spine size %d)", spine_index, len(book.spine)
        )
        return None

    item = book.spine[spine_index]
    chapter_path = item.href.split("#", 1)[0]
    chapter_file = resolve_book_file(Path(book.base_path), chapter_path)
    if chapter_file is None:
        log.warning("Chapter file missing: index=%d href=%s", spine_index, item.href)
        return None

    try:
        markup = chapter_file.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        log.warning("Cannot read chapter %s: %s", chapter_file, e)
        return None

    text = (processor or ContentProcessor()).html_to_text(markup)
    if not text.strip():
        log.warning("Chapter empty after parsing: index=%d href=%s", spine_index, item.href)
        return None

    log.debug("Loaded chapter %d: %d chars from %s", spine_index, len(text), chapter_file)
    return text
