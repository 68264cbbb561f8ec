from __future__ import annotations

from pathlib import Path

from builders import SAMPLE_NCX, nav_xhtml, ncx_xml, write_tree
from epub_reader.config import ReaderConfig
from epub_reader.core.archive import DirectoryArchive
from epub_reader.core.navigation import find_toc_href, load_toc, parse_toc
from epub_reader.models.book import ManifestItem


def _ncx(points: str) -> bytes:
    return ncx_xml(points).encode("utf-8")


def test_ncx_single_nav_point() -> None:
    toc = parse_toc(
        _ncx(
            """
    <navPoint id="np1" playOrder="1">
      <navLabel><text>Intro</text></navLabel>
      <content src="c1.xhtml"/>
    </navPoint>
"""
        ),
        "OEBPS/toc.ncx",
    )

    assert len(toc) == 1
    point = toc[0]
    assert point.id == "np1"
    assert point.play_order == 1
    assert point.title == "Intro"
    assert point.href == "c1.xhtml"
    assert point.level == 0
    assert point.children == []


def test_ncx_nested_levels() -> None:
    toc = parse_toc(SAMPLE_NCX.encode("utf-8"), "toc.ncx")

    assert [p.title for p in toc] == ["Chapter One", "Chapter Two"]
    child = toc[0].children[0]
    assert child.title == "Section 1.1"
    assert child.level == 1
    assert child.href == "Text/chapter_one.xhtml#s1"
    assert child.play_order == 2


def test_ncx_play_order_defaults_to_zero() -> None:
    toc = parse_toc(
        _ncx(
            """
    <navPoint id="a" playOrder="first"><navLabel><text>A</text></navLabel><content src="a.xhtml"/></navPoint>
    <navPoint id="b"><navLabel><text>B</text></navLabel><content src="b.xhtml"/></navPoint>
"""
        ),
        "toc.ncx",
    )
    assert [p.play_order for p in toc] == [0, 0]


def test_empty_leaves_are_dropped_and_groups_kept() -> None:
    toc = parse_toc(
        _ncx(
            """
    <navPoint id="empty"><navLabel><text>Nothing here</text></navLabel></navPoint>
    <navPoint id="group">
      <navLabel><text>Part One</text></navLabel>
      <navPoint id="inner"><navLabel><text></text></navLabel><content src="p1.xhtml"/></navPoint>
    </navPoint>
"""
        ),
        "toc.ncx",
    )

    assert [p.id for p in toc] == ["group"]
    group = toc[0]
    assert group.href == ""
    assert group.title == "Part One"
    # Blank titles get the placeholder
    assert group.children[0].title == "Chapter"


def test_nav_prefers_toc_nav_over_first_nav() -> None:
    doc = nav_xhtml(
        """
<nav epub:type="landmarks"><ol><li><a href="cover.xhtml">Cover</a></li></ol></nav>
<nav epub:type="toc" id="toc">
  <h1>Contents</h1>
  <ol>
    <li><a href="c1.xhtml">One</a></li>
    <li>
      <span>Part Two</span>
      <ol>
        <li><a href="c2.xhtml#start">Two</a></li>
      </ol>
    </li>
    <li><span>Empty heading</span></li>
  </ol>
</nav>
"""
    )
    toc = parse_toc(doc.encode("utf-8"), "OEBPS/nav.xhtml")

    assert [p.title for p in toc] == ["One", "Part Two"]
    assert toc[0].href == "c1.xhtml"
    assert toc[1].href == ""
    assert toc[1].children[0].title == "Two"
    assert toc[1].children[0].level == 1


def test_nav_toc_detection_by_role_and_type() -> None:
    doc = nav_xhtml(
        """
<nav><ol><li><a href="x.xhtml">Other</a></li></ol></nav>
<nav role="doc-toc"><ol><li><a href="c1.xhtml">By role</a></li></ol></nav>
"""
    )
    assert [p.title for p in parse_toc(doc.encode("utf-8"), "nav.xhtml")] == ["By role"]

    doc = nav_xhtml('<nav type="TOC"><ol><li><a href="c1.xhtml">By type</a></li></ol></nav>')
    assert [p.title for p in parse_toc(doc.encode("utf-8"), "nav.xhtml")] == ["By type"]


def test_nav_falls_back_to_first_nav_without_ol() -> None:
    doc = nav_xhtml(
        """
<nav>
  <div><li><a href="c1.xhtml">Loose item</a></li></div>
</nav>
"""
    )
    toc = parse_toc(doc.encode("utf-8"), "nav.xhtml")
    assert [p.title for p in toc] == ["Loose item"]
    assert toc[0].level == 0


def test_nav_without_nav_elements() -> None:
    assert parse_toc(nav_xhtml("<p>No nav</p>").encode("utf-8"), "nav.xhtml") == []


def test_custom_placeholder_title() -> None:
    toc = parse_toc(
        _ncx('<navPoint id="a"><content src="a.xhtml"/></navPoint>'),
        "toc.ncx",
        ReaderConfig(chapter_placeholder="Section"),
    )
    assert toc[0].title == "Section"


def test_find_toc_href_first_match_wins() -> None:
    manifest = [
        ManifestItem(id="c1", href="c1.xhtml", media_type="application/xhtml+xml"),
        ManifestItem(id="nav", href="nav.xhtml", media_type="application/xhtml+xml", properties="nav"),
        ManifestItem(id="ncx", href="toc.ncx", media_type="application/x-dtbncx+xml"),
    ]
    assert find_toc_href(manifest, "OEBPS") == "OEBPS/nav.xhtml"
    assert find_toc_href(manifest[2:], "") == "toc.ncx"
    assert find_toc_href(manifest[:1], "OEBPS") is None


def test_load_toc_degrades_to_empty_forest(tmp_path: Path) -> None:
    write_tree(tmp_path, {"OEBPS/toc.ncx": "<ncx><navMap><navPoint></ncx>"})
    archive = DirectoryArchive(tmp_path)
    manifest = [ManifestItem(id="ncx", href="toc.ncx", media_type="application/x-dtbncx+xml")]

    assert load_toc(archive, manifest, "OEBPS") == []
    # Referenced but missing
    assert load_toc(archive, manifest, "Other") == []
    # Nothing referenced at all
    assert load_toc(archive, [], "OEBPS") == []


def test_load_toc_reads_ncx_from_archive(tmp_path: Path) -> None:
    write_tree(tmp_path, {"OEBPS/toc.ncx": SAMPLE_NCX})
    manifest = [ManifestItem(id="ncx", href="toc.ncx", media_type="application/x-dtbncx+xml")]

    toc = load_toc(DirectoryArchive(tmp_path), manifest, "OEBPS")
    assert [p.title for p in toc] == ["Chapter One", "Chapter Two"]
