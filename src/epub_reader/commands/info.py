"""Info and toc command implementations."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from epub_reader.core.epub_parser import EpubParser
from epub_reader.core.reconciler import reconcile
from epub_reader.models.book import Book, NavPoint, ReadableChapters


def load_book(parser: EpubParser, book_path: Path, console: Console, quiet: bool = False) -> Book:
    """Parse a book with a spinner. Raises ParseError on failure."""
    if quiet:
        return parser.parse_from_path(book_path).unwrap()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Parsing EPUB...", total=None)
        result = parser.parse_from_path(book_path)
    return result.unwrap()


def display_chapters(book: Book, chapters: ReadableChapters, console: Console) -> None:
    """Display the reconciled chapter list."""
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("File", style="dim")

    for position, (index, title) in enumerate(zip(chapters.indices, chapters.titles)):
        table.add_row(str(position + 1), title, book.spine[index].href)

    console.print(table)


def execute_info(book_path: Path, parser: EpubParser, console: Console) -> None:
    """Execute the info command."""
    book = load_book(parser, book_path, console)
    chapters = reconcile(book, parser.config)
    meta = book.metadata

    info_lines = [
        f"[bold]{meta.title}[/]",
        "",
        f"[dim]Author:[/] {meta.author}",
        f"[dim]Language:[/] {meta.language}",
        f"[dim]Publisher:[/] {meta.publisher or 'Unknown'}",
        f"[dim]Published:[/] {meta.publish_date or 'Unknown'}",
        f"[dim]Identifier:[/] {meta.identifier or 'Unknown'}",
        f"[dim]Spine items:[/] {len(book.spine)}",
        f"[dim]Chapters:[/] {len(chapters)}",
        f"[dim]Cover:[/] {book.cover_image_path or 'None'}",
        f"[dim]Extracted to:[/] {book.base_path}",
    ]

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))
    console.print()
    display_chapters(book, chapters, console)
    console.print()


def _add_nav_points(tree: Tree, points: list[NavPoint]) -> None:
    for point in points:
        label = point.title
        if point.href:
            label += f" [dim]({point.href})[/]"
        branch = tree.add(label)
        _add_nav_points(branch, point.children)


def execute_toc(book_path: Path, parser: EpubParser, console: Console) -> None:
    """Execute the toc command."""
    book = load_book(parser, book_path, console)
    if not book.toc:
        console.print("[yellow]This book has no table of contents[/]")
        return

    tree = Tree(f"[bold]{book.metadata.title}[/]")
    _add_nav_points(tree, book.toc)
    console.print(tree)
