"""Tests for chunked (incremental) parsing.

The central property: feeding a document in any number of chunks produces
exactly the output of distilling it in one piece.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from distiller import DistillConfig, Distiller, DistillerError, distill

DOCUMENTS = [
    "<b><i>text</b></i>",
    '<p class="x" style="color: red">Hello, <a href="http://x.org/">world</a>!</p>',
    "a<!-- comment --><![CDATA[<raw>]]><%= code %><?pi?><!DOCTYPE html>z",
    "caf&eacute; &amp; &#65;&#x42; &bogus; & <3 é",
    "line one\r\n\r\n\r\n\r\nline  two\r\rthree\n\n\n\tfour",
    "<div><p>unclosed <input type=checkbox checked><br/>tail",
    "x < y <!-- open",
]

CONFIGS = [
    DistillConfig(),
    DistillConfig(normalize_whitespace=True),
    DistillConfig(encode_non_ascii=False),
    DistillConfig(normalize_whitespace=True, encode_non_ascii=False),
    DistillConfig(balance_tags=False),
    DistillConfig(max_length=12),
]


def feed_chunks(chunks: list[str], config: DistillConfig) -> str:
    distiller = Distiller(config)
    distiller.begin_incremental()
    for chunk in chunks:
        distiller.feed(chunk)
    distiller.end_incremental()
    return distiller.sink.getvalue()


def split_at(source: str, points: list[int]) -> list[str]:
    bounds = [0, *sorted(points), len(source)]
    return [source[a:b] for a, b in zip(bounds, bounds[1:])]


class TestChunkEquivalence:
    """Test that chunking never changes the output."""

    @pytest.mark.parametrize("config", CONFIGS, ids=repr)
    @pytest.mark.parametrize("source", DOCUMENTS)
    def test_every_single_split(self, source: str, config: DistillConfig) -> None:
        expected = distill(source, config=config)
        for point in range(len(source) + 1):
            chunks = split_at(source, [point])
            assert feed_chunks(chunks, config) == expected, chunks

    @pytest.mark.parametrize("config", CONFIGS[:4], ids=repr)
    @pytest.mark.parametrize("source", DOCUMENTS)
    def test_one_char_at_a_time(self, source: str, config: DistillConfig) -> None:
        assert feed_chunks(list(source), config) == distill(source, config=config)

    @settings(max_examples=200, deadline=None)
    @given(
        fragments=st.lists(
            st.sampled_from(
                [
                    "<b>", "</b>", "<i>", "</i>", "<p>", "</p>", "<br/>",
                    '<a href="x.html">', "</a>", "<!-- c -->", "&amp;",
                    "&eacute;", "&#65;", "&bogus", "é", " ", "  ", "\n",
                    "\r\n", "\r", "text", "x", "<", "& ", "<![CDATA[z]]>",
                    "<%= v %>", '<span style="color:red">',
                ]
            ),
            max_size=20,
        ),
        normalize=st.booleans(),
        encode=st.booleans(),
        data=st.data(),
    )
    def test_random_splits(
        self,
        fragments: list[str],
        normalize: bool,
        encode: bool,
        data: st.DataObject,
    ) -> None:
        source = "".join(fragments)
        points = data.draw(
            st.lists(st.integers(min_value=0, max_value=len(source)), max_size=6)
        )
        config = DistillConfig(normalize_whitespace=normalize, encode_non_ascii=encode)
        assert feed_chunks(split_at(source, points), config) == distill(
            source, config=config
        )


class TestIncrementalState:
    """Test the incremental lifecycle."""

    def test_open_tags_close_only_at_end(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.feed("<b>bold")
        assert distiller.sink.getvalue() == "<b>bold"
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "<b>bold</b>"

    def test_partial_tag_is_held_back(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.feed("text <a hr")
        assert distiller.sink.getvalue() == "text "
        distiller.feed('ef="/x">link</a>')
        assert distiller.sink.getvalue() == 'text <a href="/x">link</a>'
        distiller.end_incremental()

    def test_unterminated_block_completed_at_end(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.feed("a<!-- never")
        distiller.feed(" closed")
        assert distiller.sink.getvalue() == "a"
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "a<!-- never closed-->"

    def test_is_incremental(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        assert distiller.is_incremental
        distiller.end_incremental()
        assert not distiller.is_incremental

    def test_empty_feeds(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.feed("")
        distiller.feed("x")
        distiller.feed("")
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "x"

    def test_begin_resets_state(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.feed("<b>one <i")
        distiller.begin_incremental()
        distiller.feed("two")
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "<b>one two"


class TestIncrementalTruncation:
    """Test max_length across chunks."""

    def test_indicator_written_once_at_end(self) -> None:
        distiller = Distiller(DistillConfig(max_length=5))
        distiller.begin_incremental()
        distiller.feed("hel")
        distiller.feed("lo world")
        assert distiller.sink.getvalue() == "hello"
        distiller.feed("more text")
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "hello&hellip;"

    def test_open_tags_closed_before_indicator(self) -> None:
        distiller = Distiller(DistillConfig(max_length=3))
        distiller.begin_incremental()
        distiller.feed("<b>ab")
        distiller.feed("cdef</b>")
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "<b>abc</b>&hellip;"


class TestIncrementalErrors:
    """Test misuse of the incremental API."""

    def test_feed_without_begin(self) -> None:
        with pytest.raises(DistillerError, match="begin_incremental"):
            Distiller().feed("x")

    def test_end_without_begin(self) -> None:
        with pytest.raises(DistillerError, match="begin_incremental"):
            Distiller().end_incremental()

    def test_end_twice(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.end_incremental()
        with pytest.raises(DistillerError):
            distiller.end_incremental()

    def test_parse_leaves_incremental_mode(self) -> None:
        distiller = Distiller()
        distiller.begin_incremental()
        distiller.parse("<b>x")
        assert not distiller.is_incremental
        with pytest.raises(DistillerError):
            distiller.feed("y")
