"""Read command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from epub_reader.commands.info import load_book
from epub_reader.core.epub_parser import EpubParser
from epub_reader.core.session import ReadingSession
from epub_reader.models.result import ParseError, ParseErrorKind


def execute_read(
    book_path: Path,
    chapter: int,
    parser: EpubParser,
    console: Console,
    show_stats: bool = False,
) -> None:
    """Print one readable chapter (1-based)."""
    book = load_book(parser, book_path, console, quiet=True)
    session = ReadingSession(book, parser)

    if session.total_chapters == 0:
        raise ParseError(ParseErrorKind.NO_READABLE_CHAPTERS, "No readable chapters found")
    if not session.go_to(chapter - 1):
        raise ValueError(
            f"Chapter {chapter} out of range (book has {session.total_chapters} chapters)"
        )

    text = session.current_content()
    if not text:
        console.print(f"[yellow]Chapter {chapter} has no readable text[/]")
        return

    console.print(Panel(session.current_title, border_style="blue"))
    console.print(text, markup=False, highlight=False)

    if show_stats:
        stats = parser.processor.get_stats(text)
        console.print()
        console.print(
            f"[dim]{stats['word_count']:,} words, "
            f"{stats['paragraph_count']:,} paragraphs, "
            f"{stats['character_count']:,} characters[/]"
        )
