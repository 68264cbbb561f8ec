from __future__ import annotations

from epub_reader.config import ReaderConfig
from epub_reader.core.reconciler import (
    build_chapter_titles,
    build_readable_chapter_index,
    flatten_toc,
    looks_like_file_name,
    normalize_href,
    reconcile,
)
from epub_reader.models.book import Book, BookMetadata, NavPoint, SpineItem


def _spine(*items: tuple[str, str]) -> list[SpineItem]:
    return [
        SpineItem(id=item_id, href=href, media_type="application/xhtml+xml", title=item_id)
        for item_id, href in items
    ]


def _book(spine: list[SpineItem], toc: list[NavPoint] | None = None) -> Book:
    return Book(metadata=BookMetadata(), spine=spine, toc=toc or [], base_path="/tmp/book")


def _nav(title: str, href: str, *children: NavPoint, level: int = 0) -> NavPoint:
    return NavPoint(title=title, href=href, level=level, children=list(children))


def test_normalize_href() -> None:
    assert normalize_href("./Text/Chapter%201.xhtml#p3") == "Text/Chapter 1.xhtml"
    assert normalize_href("  c1.xhtml  ") == "c1.xhtml"
    assert normalize_href("#only-fragment") == ""


def test_flatten_toc_preorder_and_dedup() -> None:
    toc = [
        _nav("One", "c1.xhtml#a", _nav("One A", "c1.xhtml#b", level=1), _nav("Sub", "c1b.xhtml", level=1)),
        _nav("Group", "", _nav("Two", "c2.xhtml", level=1)),
        _nav(" One again ", "./c1.xhtml"),
    ]
    entries = flatten_toc(toc)

    assert [(e.href, e.title) for e in entries] == [
        ("c1.xhtml", "One"),
        ("c1b.xhtml", "Sub"),
        ("c2.xhtml", "Two"),
    ]
    # The tree is untouched
    assert toc[0].children[0].title == "One A"


def test_empty_toc_uses_whole_spine() -> None:
    book = _book(_spine(("a", "OEBPS/a.xhtml"), ("b", "OEBPS/b.xhtml"), ("c", "OEBPS/c.xhtml")))
    assert build_readable_chapter_index(book) == [0, 1, 2]


def test_toc_without_hrefs_counts_as_empty() -> None:
    book = _book(_spine(("a", "a.xhtml"), ("b", "b.xhtml")), [_nav("Group", "", _nav("x", "#frag", level=1))])
    assert build_readable_chapter_index(book) == [0, 1]


def test_toc_matches_by_full_path_then_file_name() -> None:
    book = _book(
        _spine(
            ("cover", "OEBPS/cover.xhtml"),
            ("c1", "OEBPS/Text/c1.xhtml"),
            ("c2", "OEBPS/Text/c2.xhtml"),
            ("c3", "OEBPS/Text/c3.xhtml"),
        ),
        [
            _nav("Three", "OEBPS/Text/c3.xhtml"),
            _nav("One", "Text/c1.xhtml#start"),
            _nav("One again", "c1.xhtml#later"),
        ],
    )
    # TOC order, not spine order; duplicates collapse
    assert build_readable_chapter_index(book) == [3, 1]


def test_unmatched_toc_falls_back_to_whole_spine() -> None:
    book = _book(
        _spine(("a", "OEBPS/a.xhtml"), ("b", "OEBPS/b.xhtml")),
        [_nav("Elsewhere", "nowhere.xhtml")],
    )
    assert build_readable_chapter_index(book) == [0, 1]


def test_empty_spine_gives_empty_index() -> None:
    book = _book([], [_nav("One", "c1.xhtml")])
    chapters = reconcile(book)
    assert chapters.indices == []
    assert chapters.titles == []
    assert len(chapters) == 0


def test_single_ncx_entry_scenario() -> None:
    book = _book(_spine(("c1", "OEBPS/c1.xhtml")), [NavPoint(id="np1", play_order=1, title="Intro", href="c1.xhtml")])
    chapters = reconcile(book)
    assert chapters.indices == [0]
    assert chapters.titles == ["Intro"]


def test_titles_prefer_toc_then_spine_then_number() -> None:
    spine = _spine(
        ("c1", "OEBPS/c1.xhtml"),
        ("Prologue", "OEBPS/prologue.xhtml"),
        ("item7", "OEBPS/x7.xhtml"),
        ("OEBPS/odd.xhtml", "OEBPS/odd.xhtml"),
    )
    toc = [
        _nav("Chapter One", "c1.xhtml"),
        _nav("prologue.xhtml", "prologue.xhtml"),
        _nav("Text/x7.xhtml", "x7.xhtml"),
        _nav("", "odd.xhtml"),
    ]
    book = _book(spine, toc)
    chapters = reconcile(book)

    assert chapters.indices == [0, 1, 2, 3]
    assert chapters.titles == ["Chapter One", "Prologue", "Chapter 3", "Chapter 4"]


def test_titles_for_spine_only_book_use_spine_titles() -> None:
    spine = _spine(("Introduction", "a.xhtml"), ("ITEM2", "b.xhtml"), ("c3", "c.xhtml"))
    chapters = reconcile(_book(spine), ReaderConfig(numbered_chapter_format="Part {n}"))
    assert chapters.titles == ["Introduction", "Part 2", "c3"]


def test_toc_title_found_through_file_name_map() -> None:
    spine = _spine(("item1", "OEBPS/Text/a.xhtml"))
    book = _book(spine, [_nav("  Alpha  ", "Text/a.xhtml")])
    assert build_chapter_titles(book, [0]) == ["Alpha"]


def test_reconcile_is_idempotent() -> None:
    book = _book(
        _spine(("a", "OEBPS/a.xhtml"), ("b", "OEBPS/b.xhtml"), ("c", "OEBPS/c.xhtml")),
        [_nav("B", "b.xhtml", _nav("A", "a.xhtml#x", level=1))],
    )
    first = reconcile(book)
    second = reconcile(book)

    assert first == second
    assert first.indices == [1, 0]
    assert first.titles == ["B", "A"]


def test_looks_like_file_name() -> None:
    assert looks_like_file_name("chapter1.xhtml")
    assert looks_like_file_name(" Chapter1.HTML ")
    assert looks_like_file_name("index.htm")
    assert looks_like_file_name("Text/part")
    assert looks_like_file_name("Text\\part")
    assert not looks_like_file_name("Chapter One")
