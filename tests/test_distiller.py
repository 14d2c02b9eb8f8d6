"""Tests for the Distiller engine: tokenizing, balancing, text handling."""

import logging

import pytest

from distiller import (
    ConcurrentUseError,
    ConfigError,
    DistillConfig,
    DistillerError,
    Distiller,
    distill,
)
from distiller.filters import BaseFilter, NullFilter, StrictFilter, WordBreakFilter
from distiller.tags import Tag, Taxonomy
from distiller.writers import HtmlWriter


def run(source: str, **options: object) -> str:
    """Distill source with NullFilter and the given config options."""
    return distill(source, config=DistillConfig(**options))


class TestRoundTrip:
    """Test that well-formed markup passes through unchanged."""

    @pytest.mark.parametrize(
        "source",
        [
            "",
            "plain text",
            "<p>para</p>",
            '<a href="http://x.org/">link</a>',
            "<ul><li>one</li><li>two</li></ul>",
            "line<br />break",
            "<img />",
            '<div class="a" title="b">x</div>',
        ],
    )
    def test_canonical_markup(self, source: str) -> None:
        assert run(source) == source

    @pytest.mark.parametrize(
        "source",
        [
            "<!-- comment -->",
            "<![CDATA[x < y]]>",
            "<!DOCTYPE html>",
            '<?xml version="1.0"?>',
            "<% code %>",
            "<%= value %>",
            "<%-- hidden --%>",
            "<%@ Page %>",
        ],
    )
    def test_unparsed_blocks(self, source: str) -> None:
        assert run(source) == source

    def test_block_content_is_not_parsed(self) -> None:
        assert run("<!-- <b> -->x") == "<!-- <b> -->x"

    def test_unterminated_block_is_closed(self) -> None:
        assert run("a<!-- open") == "a<!-- open-->"


class TestLiteralMarkup:
    """Test ``<`` that does not start a tag."""

    def test_encoded(self) -> None:
        assert run("a < b") == "a &lt; b"
        assert run("<3") == "&lt;3"
        assert run("x<") == "x&lt;"
        assert run("</ b>") == "&lt;/ b>"

    def test_passed_through_when_not_encoding(self) -> None:
        assert run("a < b", encode_non_ascii=False) == "a < b"

    def test_counts_as_text(self) -> None:
        assert run("a<b", max_length=2) == "a&lt;&hellip;"


class TestAttributes:
    """Test attribute and style parsing."""

    def test_quoting_styles(self) -> None:
        source = "<a href=x.html title='say \"hi\"' rel = \"nofollow\">x</a>"
        assert run(source) == (
            '<a href="x.html" title="say &quot;hi&quot;" rel="nofollow">x</a>'
        )

    def test_bare_attribute(self) -> None:
        assert run("<input type=checkbox checked>") == (
            '<input type="checkbox" checked />'
        )

    def test_self_closing_solidus(self) -> None:
        assert run("<div/>") == "<div />"
        assert run('<span class="x" />') == '<span class="x" />'

    def test_stray_less_than_ends_tag(self) -> None:
        assert run('<a href="x"<b>y') == '<a href="x"><b>y</b></a>'

    def test_code_block_value_becomes_tag(self) -> None:
        sink = HtmlWriter()
        captured: list[Tag] = []

        class Capture(BaseFilter):
            __slots__ = ()

            def filter_tag(self, tag: Tag) -> bool:
                captured.append(tag)
                return True

        Distiller(filter=Capture(), sink=sink).parse('<a href="<%= url %>">x</a>')
        assert sink.getvalue() == "<a>x</a>"
        value = captured[0].attributes["href"]
        assert isinstance(value, Tag)
        assert value.raw_name == "%="
        assert value.content == " url "

    def test_styles(self) -> None:
        source = '<p style="Color: red;; bogus; margin:0">x</p>'
        assert run(source) == '<p style="color:red;margin:0;">x</p>'

    def test_attribute_names_case_insensitive(self) -> None:
        assert run('<p Class="a" CLASS="b">x</p>') == '<p Class="b">x</p>'


class TestBalancing:
    """Test tag balancing and mismatch repair."""

    def test_closes_open_tags(self) -> None:
        assert run("<b>bold") == "<b>bold</b>"
        assert run("<ul><li>a") == "<ul><li>a</li></ul>"

    def test_drops_unmatched_end_tag(self) -> None:
        assert run("a</b>c") == "ac"
        assert run("<i>a</b>c</i>") == "<i>ac</i>"

    def test_repairs_misnested_tags(self) -> None:
        assert run("<b><i>text</b></i>") == "<b><i>text</i></b><i></i>"
        assert run("<div><p>x</div>") == "<div><p>x</p></div><p></p>"

    def test_case_insensitive_names(self) -> None:
        assert run("<B>x</b>") == "<B>x</b>"

    def test_void_and_unparsed_not_pushed(self) -> None:
        assert run("<p><br><!-- c -->x") == "<p><br /><!-- c -->x</p>"

    def test_disabled(self) -> None:
        assert run("<b>x</i>", balance_tags=False) == "<b>x</i>"
        assert run("<b>x", balance_tags=False) == "<b>x"

    def test_rejected_tags_still_balanced(self) -> None:
        assert distill("<div><b>x</div>", StrictFilter()) == "<b>x</b><b></b>"


class TestTaxonomy:
    """Test the content-category accumulator."""

    def test_accumulates_rendered_tags(self) -> None:
        distiller = Distiller()
        distiller.parse("<p><b>x</b></p><!-- c -->")
        expected = (
            Taxonomy.TEXT
            | Taxonomy.BLOCK
            | Taxonomy.STYLE
            | Taxonomy.INLINE
            | Taxonomy.COMMENT
        )
        assert distiller.taxonomy == expected

    def test_ignores_rejected_tags(self) -> None:
        distiller = Distiller(filter=StrictFilter())
        distiller.parse("<table><tr><td>x</td></tr></table>")
        assert distiller.taxonomy == Taxonomy.NONE

    def test_unknown_tag(self) -> None:
        distiller = Distiller()
        distiller.parse("<blah>x</blah>")
        assert Taxonomy.UNKNOWN in distiller.taxonomy

    def test_reset_per_parse(self) -> None:
        distiller = Distiller()
        distiller.parse("<table></table>")
        distiller.parse("<b></b>")
        assert Taxonomy.TABLE not in distiller.taxonomy


class TestCharacterReferences:
    """Test non-ASCII encoding and reference decoding."""

    def test_encodes_non_ascii(self) -> None:
        assert run("café") == "caf&#xE9;"
        assert run("…") == "&#x2026;"
        assert run("\U0001f600") == "&#x1F600;"

    def test_encodes_control_characters(self) -> None:
        assert run("a\x01b") == "a&#x01;b"

    def test_keeps_whitespace_controls(self) -> None:
        assert run("a\tb\nc") == "a\tb\nc"

    def test_references_pass_through_when_encoding(self) -> None:
        assert run("&eacute; &amp; &#65;") == "&eacute; &amp; &#65;"
        assert run("a & b &bogus;") == "a & b &bogus;"

    def test_decodes_when_not_encoding(self) -> None:
        source = "caf&eacute; &amp; &#65;&#x42; &bogus;"
        assert run(source, encode_non_ascii=False) == "café & AB &bogus;"

    def test_raw_non_ascii_kept_when_not_encoding(self) -> None:
        assert run("café", encode_non_ascii=False) == "café"

    @pytest.mark.parametrize("encode", [True, False])
    def test_overlong_numeric_reference_is_text(self, encode: bool) -> None:
        source = "a&#" + "1" * 5000 + ";b"
        assert run(source, encode_non_ascii=encode) == source


class TestTruncation:
    """Test max_length handling."""

    def test_truncates_text(self) -> None:
        assert run("hello world", max_length=5) == "hello&hellip;"

    def test_closes_open_tags_before_indicator(self) -> None:
        assert run("<b>hello world</b>", max_length=5) == "<b>hello</b>&hellip;"

    def test_markup_does_not_count(self) -> None:
        assert run('<a href="x">ab</a>cd', max_length=3) == '<a href="x">ab</a>c&hellip;'

    def test_exact_length_writes_indicator(self) -> None:
        assert run("hello", max_length=5) == "hello&hellip;"

    def test_shorter_text_untouched(self) -> None:
        assert run("hi", max_length=5) == "hi"

    def test_plain_indicator_when_not_encoding(self) -> None:
        assert run("hello world", max_length=5, encode_non_ascii=False) == "hello..."

    def test_custom_indicator(self) -> None:
        assert run("hello world", max_length=5, truncation_indicator=" [more]") == (
            "hello [more]"
        )

    def test_empty_indicator(self) -> None:
        assert run("hello world", max_length=5, truncation_indicator="") == "hello"

    def test_reference_counts_as_one_char(self) -> None:
        assert run("a&amp;b", max_length=2) == "a&amp;&hellip;"
        assert run("a&amp;b", max_length=2, encode_non_ascii=False) == "a&..."

    def test_encoded_char_counts_as_one(self) -> None:
        assert run("éé", max_length=1) == "&#xE9;&hellip;"


class TestWhitespaceNormalization:
    """Test normalize_whitespace."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("a\r\n\r\n\r\nb", "a\n\nb"),
            ("a\n\n\n\nb", "a\n\nb"),
            ("a\r\r\r\rb", "a\n\nb"),
            ("a\rb", "a\nb"),
            ("a\r\nb", "a\nb"),
            ("  a   b  ", "a b "),
            ("a\t\tb", "a\tb"),
            ("\n\nabc", "abc"),
            ("a\n\n", "a\n\n"),
        ],
    )
    def test_normalizes(self, source: str, expected: str) -> None:
        assert run(source, normalize_whitespace=True) == expected

    def test_across_tags(self) -> None:
        assert run("a <b>  c</b>", normalize_whitespace=True) == "a <b> c</b>"

    def test_disabled(self) -> None:
        assert run("a   \r\n\r\n\r\nb") == "a   \r\n\r\n\r\nb"

    def test_collapsed_whitespace_not_counted(self) -> None:
        assert run("a     bcd", normalize_whitespace=True, max_length=3) == "a b&hellip;"


class TestFilterErrors:
    """Test handling of failing filter hooks."""

    def test_error_marker_written(self, caplog: pytest.LogCaptureFixture) -> None:
        class Boom(BaseFilter):
            __slots__ = ()

            def filter_tag(self, tag: Tag) -> bool:
                raise ValueError("boom")

        with caplog.at_level(logging.WARNING, logger="distiller"):
            assert distill("a<b>c</b>", Boom()) == "a[ERROR: boom]c[ERROR: boom]"
        assert "Filter failed on Tag(BEGIN, 'b'): boom" in caplog.text

    @pytest.mark.parametrize(
        "error",
        [DistillerError("bad tag"), ConfigError("tag", "bad tag")],
        ids=["DistillerError", "ConfigError"],
    )
    def test_library_errors_do_not_abort(self, error: DistillerError) -> None:
        class Picky(BaseFilter):
            __slots__ = ()

            def filter_tag(self, tag: Tag) -> bool:
                raise error

        message = str(error)
        assert distill("a<b>c</b>", Picky()) == f"a[ERROR: {message}]c[ERROR: {message}]"


class HooksOnly:
    """Filter with the four hooks and no bind()."""

    def filter_tag(self, tag: Tag) -> bool:
        return tag.name == "b"

    def filter_attribute(self, tag_name: str, name: str, value: str) -> str | None:
        return value

    def filter_style(self, tag_name: str, name: str, value: str) -> str | None:
        return value

    def filter_literal(self, source: str, start: int, end: int) -> str | None:
        return None


class TestFilterWithoutBind:
    """Test filters that do not accept the sink."""

    def test_parse(self) -> None:
        assert distill("<b>x</b><i>y</i>", HooksOnly()) == "<b>x</b>y"

    def test_incremental(self) -> None:
        distiller = Distiller(filter=HooksOnly())
        distiller.begin_incremental()
        distiller.feed("<b>x</")
        distiller.feed("b>")
        distiller.end_incremental()
        assert distiller.sink.getvalue() == "<b>x</b>"

    def test_wrapped_in_decorator(self) -> None:
        html_filter = WordBreakFilter(HooksOnly(), 2)
        assert distill("<b>abcd</b>", html_filter) == "<b>ab<wbr />&shy;cd</b>"


class TestDistillerInstance:
    """Test instance state and re-entrancy."""

    def test_defaults(self) -> None:
        distiller = Distiller()
        assert isinstance(distiller.filter, NullFilter)
        assert isinstance(distiller.sink, HtmlWriter)
        assert not distiller.is_incremental

    def test_source_property(self) -> None:
        distiller = Distiller()
        distiller.parse("<b>x</b>")
        assert distiller.source == "<b>x</b>"

    def test_sink_accumulates_across_parses(self) -> None:
        distiller = Distiller()
        distiller.parse("<b>x")
        distiller.parse("y")
        assert distiller.sink.getvalue() == "<b>x</b>y"

    def test_reentrant_parse_raises(self) -> None:
        distiller = Distiller()

        class Reentrant(BaseFilter):
            __slots__ = ()

            def filter_tag(self, tag: Tag) -> bool:
                distiller.parse("nested")
                return True

        distiller._filter = Reentrant()
        with pytest.raises(ConcurrentUseError, match="already running"):
            distiller.parse("<b>x</b>")

        # The instance is usable again afterwards
        distiller._filter = NullFilter()
        distiller.parse("ok")
        assert distiller.sink.getvalue().endswith("ok")
