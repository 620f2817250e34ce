"""Tests for whatis/apropos lookup and section resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from manfinder.index.search import SearchResult, Searcher
from manfinder.models import IndexRecord


def _record(id: int, page: str, section: str, description: str = "", path: str | None = None):
    return IndexRecord(
        id=id,
        page_name=page,
        section_label=section,
        description=description,
        source_path=Path(path or f"/man/man{section[0]}/{page}.{section}.gz"),
    )


@pytest.fixture
def index() -> dict[int, IndexRecord]:
    records = [
        _record(1, "zcat", "1", "compress or expand files"),
        _record(2, "man", "7", "macros to format man pages"),
        _record(3, "xzcat", "1", "compress or decompress .xz and .lzma files"),
        _record(4, "bzcat", "1", "a block-sorting file compressor, v1.0.8"),
        _record(5, "man", "1", "an interface to the system reference manuals"),
        _record(6, "lzcat", "1", "compress or decompress .xz and .lzma files"),
        _record(7, "nodesc", "1", ""),
    ]
    return {r.id: r for r in records}


class TestSearchResult:
    def test_render_lines(self) -> None:
        assert SearchResult(term="x", lines=["a", "b"]).render() == ["a", "b"]

    def test_render_nothing_appropriate(self) -> None:
        result = SearchResult(term="manxcjgcj", lines=[])
        assert result.empty
        assert result.render() == ["manxcjgcj: nothing appropriate"]


class TestWhatis:
    """Exact page name matches."""

    def test_matches_every_section(self, index) -> None:
        result = Searcher(index).whatis("man")
        assert result.lines == [
            "man (1) - an interface to the system reference manuals",
            "man (7) - macros to format man pages",
        ]

    def test_no_partial_matches(self, index) -> None:
        assert Searcher(index).whatis("cat").empty

    def test_no_match_message(self, index) -> None:
        assert Searcher(index).whatis("manxcjgcj").render() == ["manxcjgcj: nothing appropriate"]

    def test_empty_description_formatting(self, index) -> None:
        assert Searcher(index).whatis("nodesc").lines == ["nodesc (1) - "]


class TestApropos:
    """Substring matches on names and descriptions."""

    def test_zcat_family(self, index) -> None:
        result = Searcher(index).apropos("zcat")
        assert result.lines == [
            "bzcat (1) - a block-sorting file compressor, v1.0.8",
            "lzcat (1) - compress or decompress .xz and .lzma files",
            "xzcat (1) - compress or decompress .xz and .lzma files",
            "zcat (1) - compress or expand files",
        ]

    def test_matches_description(self, index) -> None:
        result = Searcher(index).apropos("reference")
        assert result.lines == ["man (1) - an interface to the system reference manuals"]

    def test_empty_description_still_matches_name(self, index) -> None:
        assert Searcher(index).apropos("nodes").lines == ["nodesc (1) - "]

    def test_duplicates_removed(self) -> None:
        dup = {
            1: _record(1, "zcat", "1", "compress", path="/a/zcat.1.gz"),
            2: _record(2, "zcat", "1", "compress", path="/b/zcat.1.gz"),
        }
        assert Searcher(dup).apropos("zcat").lines == ["zcat (1) - compress"]

    def test_no_match_message(self, index) -> None:
        assert Searcher(index).apropos("qqq").render() == ["qqq: nothing appropriate"]

    def test_query_does_not_mutate_index(self, index) -> None:
        before = dict(index)
        Searcher(index).apropos("man")
        Searcher(index).whatis("man")
        assert index == before


class TestResolve:
    """Picking the page to display."""

    def test_single_record(self, index) -> None:
        assert Searcher(index).resolve("zcat") == Path("/man/man1/zcat.1.gz")

    def test_lowest_section_wins(self, index) -> None:
        assert Searcher(index).resolve("man") == Path("/man/man1/man.1.gz")

    def test_no_entry(self, index) -> None:
        assert Searcher(index).resolve("manxcjgcj") is None

    def test_numeric_order_beats_path_order(self) -> None:
        records = {
            1: _record(1, "ssl", "3ssl", path="/a/man3/ssl.3ssl.gz"),
            2: _record(2, "ssl", "5", path="/0/man5/ssl.5.gz"),
        }
        assert Searcher(records).resolve("ssl") == Path("/a/man3/ssl.3ssl.gz")

    def test_plain_section_before_suffixed(self) -> None:
        records = {
            1: _record(1, "ssl", "3ssl"),
            2: _record(2, "ssl", "3"),
        }
        assert Searcher(records).resolve("ssl") == Path("/man/man3/ssl.3.gz")

    def test_explicit_section(self, index) -> None:
        assert Searcher(index).resolve("man", "7") == Path("/man/man7/man.7.gz")

    def test_explicit_section_prefix(self) -> None:
        records = {1: _record(1, "ssl", "3ssl")}
        assert Searcher(records).resolve("ssl", "3") == Path("/man/man3/ssl.3ssl.gz")

    def test_explicit_section_missing(self, index) -> None:
        assert Searcher(index).resolve("man", "1gjopege") is None
        assert Searcher(index).resolve("man", "2") is None

    def test_matches_sorted(self, index) -> None:
        assert [r.section_label for r in Searcher(index).matches("man")] == ["1", "7"]
