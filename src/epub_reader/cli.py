"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from epub_reader.cache.manager import ExtractionCache
from epub_reader.config import ReaderConfig
from epub_reader.core.epub_parser import EpubParser

app = typer.Typer(
    name="epub-reader",
    help="Inspect EPUB books: metadata, table of contents and chapter text.",
    add_completion=False,
)

console = Console()

# Cache subcommand group
cache_app = typer.Typer(help="Scratch extraction management commands")
app.add_typer(cache_app, name="cache")

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to an .epub file or an extracted EPUB directory",
        exists=True,
        file_okay=True,
        dir_okay=True,
        resolve_path=True,
    ),
]

ScratchDir = Annotated[
    Optional[Path],
    typer.Option(
        "--scratch-dir",
        help="Where archives are extracted (default: system temp directory)",
    ),
]


def _make_parser(scratch_dir: Path | None) -> EpubParser:
    if scratch_dir is None:
        return EpubParser()
    return EpubParser(ReaderConfig(scratch_root=scratch_dir.resolve()))


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Inspect EPUB books: metadata, table of contents and chapter text."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def info(book_path: BookPath, scratch_dir: ScratchDir = None) -> None:
    """Display book metadata and the reconciled chapter list."""
    from epub_reader.commands.info import execute_info

    try:
        execute_info(book_path, _make_parser(scratch_dir), console)
    except Exception as e:
        console.print(f"[red]Error reading book: {e}[/]")
        raise typer.Exit(1)


@app.command()
def toc(book_path: BookPath, scratch_dir: ScratchDir = None) -> None:
    """Display the table of contents as a tree."""
    from epub_reader.commands.info import execute_toc

    try:
        execute_toc(book_path, _make_parser(scratch_dir), console)
    except Exception as e:
        console.print(f"[red]Error reading book: {e}[/]")
        raise typer.Exit(1)


@app.command()
def read(
    book_path: BookPath,
    chapter: Annotated[
        int,
        typer.Argument(help="Chapter number (1-based, as listed by 'epub-reader info')", min=1),
    ] = 1,
    stats: Annotated[
        bool,
        typer.Option("--stats", help="Show word and paragraph counts"),
    ] = False,
    scratch_dir: ScratchDir = None,
) -> None:
    """Print the plain text of a chapter."""
    from epub_reader.commands.read import execute_read

    try:
        execute_read(book_path, chapter, _make_parser(scratch_dir), console, show_stats=stats)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@cache_app.command("list")
def cache_list(scratch_dir: ScratchDir = None) -> None:
    """List extracted books."""
    cache = ExtractionCache(_make_parser(scratch_dir).config.scratch_root)
    extracted = cache.list_extracted()

    if not extracted:
        console.print("[dim]No extracted books[/]")
        return

    table = Table(title="Extracted Books", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="white")

    for path in extracted:
        display_path = str(path)
        # Truncate path for display
        if len(display_path) >= 60:
            display_path = "..." + display_path[-57:]
        table.add_row(display_path)

    console.print(table)


@cache_app.command("clear")
def cache_clear(scratch_dir: ScratchDir = None) -> None:
    """Remove all extracted books."""
    cache = ExtractionCache(_make_parser(scratch_dir).config.scratch_root)
    count = cache.clear()

    if count > 0:
        console.print(f"[green]Cleared {count} extracted book(s)[/]")
    else:
        console.print("[dim]Nothing to clear[/]")


if __name__ == "__main__":
    app()
