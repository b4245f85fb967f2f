"""Tests for the canonical writer.

Layout, escaping, and the round-trip and idempotence properties that make
the output canonical.
"""

import io

import pytest
from hypothesis import given, settings

from ftml import parse, write, write_string
from ftml.builder import a, b, code, doc, h1, h3, i, li, mark, ol, p, quote, s, seq, u, ul
from ftml.nodes import Link, PlainText, Sequence, Style, Styled, Text
from ftml.normalize import normalize_document
from ftml.renderers.canonical import CanonicalWriter

from strategies import documents


class TestLayout:
    """One textual form per document."""

    def test_empty_document(self) -> None:
        assert write_string(doc()) == ""

    def test_single_paragraph(self) -> None:
        assert write_string(doc(p("Hello ", b("world"), "!"))) == "<p>Hello <b>world</b>!</p>\n"

    def test_blank_line_between_top_level(self) -> None:
        assert write_string(doc(h1("T"), p("a"), p("b"))) == (
            "<h1>T</h1>\n\n<p>a</p>\n\n<p>b</p>\n"
        )

    def test_list(self) -> None:
        expected = (
            "<ul>\n"
            "  <li>\n"
            "    <p>one</p>\n"
            "  </li>\n"
            "  <li>\n"
            "    <p>two</p>\n"
            "  </li>\n"
            "</ul>\n"
        )
        assert write_string(doc(ul(li("one"), li("two")))) == expected

    def test_nested_containers(self) -> None:
        document = doc(quote(p("q"), ol(li(p("x"), quote(h3("y"))))))
        expected = (
            "<blockquote>\n"
            "  <p>q</p>\n"
            "  <ol>\n"
            "    <li>\n"
            "      <p>x</p>\n"
            "      <blockquote>\n"
            "        <h3>y</h3>\n"
            "      </blockquote>\n"
            "    </li>\n"
            "  </ol>\n"
            "</blockquote>\n"
        )
        assert write_string(document) == expected

    def test_all_styles(self) -> None:
        document = doc(p(b("b"), i("i"), u("u"), s("s"), mark("m"), code("c")))
        assert write_string(document) == (
            "<p><b>b</b><i>i</i><u>u</u><s>s</s><mark>m</mark><code>c</code></p>\n"
        )

    def test_link(self) -> None:
        document = doc(p(a("https://example.com/?q=1", "go ", i("now"))))
        assert write_string(document) == (
            '<p><a href="https://example.com/?q=1">go <i>now</i></a></p>\n'
        )

    def test_output_is_normalized(self) -> None:
        document = doc(
            p(
                seq("Hello\n   ", Styled(Style.ITALIC)),
                b(b("x")),
                Link("unused"),
            )
        )
        assert write_string(document) == "<p>Hello <b>x</b></p>\n"

    def test_document_not_modified(self) -> None:
        document = doc(p(seq("a", seq("b"))))
        before = document
        write_string(document)
        assert document is before
        assert document.children[0] == Text(Sequence((PlainText("a"), Sequence((PlainText("b"),)))))


class TestEscaping:
    """Text and attribute escaping."""

    def test_text_escaped(self) -> None:
        assert write_string(doc(p('a < b && c > "d" \'e\''))) == (
            "<p>a &lt; b &amp;&amp; c &gt; \"d\" 'e'</p>\n"
        )

    def test_attribute_escaped(self) -> None:
        document = doc(p(a('/x?a=1&b="2"<>', "x")))
        assert write_string(document) == (
            '<p><a href="/x?a=1&amp;b=&quot;2&quot;&lt;&gt;">x</a></p>\n'
        )

    def test_entity_like_text_survives(self) -> None:
        document = doc(p("&amp; &nbsp;"))
        output = write_string(document)
        assert output == "<p>&amp;amp; &amp;nbsp;</p>\n"
        assert parse(output) == document


class TestOutputs:
    """Stream and class entry points."""

    def test_write_to_stream(self) -> None:
        buffer = io.StringIO()
        write(buffer, doc(p("x")))
        assert buffer.getvalue() == "<p>x</p>\n"

    def test_stream_errors_propagate(self) -> None:
        buffer = io.StringIO()
        buffer.close()
        with pytest.raises(ValueError):
            write(buffer, doc(p("x")))

    def test_writer_class(self) -> None:
        assert CanonicalWriter().render(doc(p("x"))) == "<p>x</p>\n"


class TestRoundTrip:
    """parse(write(d)) == normalize(d); write is idempotent."""

    def test_known_document(self) -> None:
        document = doc(
            h1("Memo"),
            p("Hello ", b("world", i(" and ", code("x < y")))),
            ul(li("one"), li(p("two"), ol(li("nested")))),
            quote(p("quoted ", a("https://e.org", "link"))),
        )
        assert parse(write_string(document)) == normalize_document(document)

    @given(documents())
    @settings(max_examples=200, deadline=None)
    def test_round_trip(self, document) -> None:
        assert parse(write_string(document)) == normalize_document(document)

    @given(documents())
    @settings(max_examples=100, deadline=None)
    def test_idempotent(self, document) -> None:
        once = write_string(document)
        assert write_string(parse(once)) == once

    @given(documents())
    @settings(max_examples=100, deadline=None)
    def test_deterministic(self, document) -> None:
        assert write_string(document) == write_string(document)
