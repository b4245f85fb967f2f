"""Tests for the FTML tree builder.

Valid documents build the expected tree; every grammar violation raises
the right ParseError subclass at the right position.
"""

import io

import pytest

from ftml import parse
from ftml.builder import a, b, code, doc, h1, h2, h3, i, li, mark, ol, p, quote, s, u, ul
from ftml.config import ParseConfig, parse_config_context
from ftml.errors import (
    LexError,
    MissingRequiredAttributeError,
    ParseError,
    StructureError,
    UnbalancedTagError,
    UnknownTagError,
)
from ftml.nodes import Document, PlainText, Sequence, Style, Styled, Text
from ftml.parser import Parser


class TestValidDocuments:
    """Well-formed input builds the expected Document."""

    def test_empty_document(self) -> None:
        assert parse("") == Document()

    def test_whitespace_only_document(self) -> None:
        assert parse("  \n\t\n") == Document()

    def test_paragraph_with_bold(self) -> None:
        assert parse("<p>Hello <b>world</b>!</p>") == doc(p("Hello ", b("world"), "!"))

    def test_headings(self) -> None:
        source = "<h1>One</h1><h2>Two</h2><h3>Three</h3>"
        assert parse(source) == doc(h1("One"), h2("Two"), h3("Three"))

    def test_all_inline_styles(self) -> None:
        source = (
            "<p><b>b</b><i>i</i><u>u</u><s>s</s><mark>m</mark><code>c</code></p>"
        )
        assert parse(source) == doc(p(b("b"), i("i"), u("u"), s("s"), mark("m"), code("c")))

    def test_nested_styles(self) -> None:
        source = "<p><b>bold <i>both</i></b></p>"
        assert parse(source) == doc(p(b("bold ", i("both"))))

    def test_link(self) -> None:
        source = '<p>See <a href="https://example.com">the <b>docs</b></a>.</p>'
        assert parse(source) == doc(p("See ", a("https://example.com", "the ", b("docs")), "."))

    def test_link_with_bare_href(self) -> None:
        assert parse("<p><a href>x</a></p>") == doc(p(a("", "x")))

    def test_unordered_list(self) -> None:
        source = "<ul><li><p>one</p></li><li><p>two</p></li></ul>"
        assert parse(source) == doc(ul(li("one"), li("two")))

    def test_ordered_list(self) -> None:
        assert parse("<ol><li><p>x</p></li></ol>") == doc(ol(li("x")))

    def test_nested_list(self) -> None:
        source = """
        <ul>
          <li>
            <p>outer</p>
            <ol>
              <li><p>inner</p></li>
            </ol>
          </li>
        </ul>
        """
        assert parse(source) == doc(ul(li(p("outer"), ol(li("inner")))))

    def test_blockquote(self) -> None:
        source = "<blockquote><p>a</p><blockquote><h2>b</h2></blockquote></blockquote>"
        assert parse(source) == doc(quote(p("a"), quote(h2("b"))))

    def test_layout_whitespace_ignored(self) -> None:
        source = "<p>a</p>\n\n   <p>b</p>\n"
        assert parse(source) == doc(p("a"), p("b"))

    def test_whitespace_collapsed(self) -> None:
        result = parse("<p>Hello\n      world</p>")
        assert result == doc(p("Hello world"))

    def test_entities_decoded(self) -> None:
        assert parse("<p>a &lt; b &amp;&amp; c</p>") == doc(p("a < b && c"))

    def test_comments_ignored(self) -> None:
        assert parse("<!-- memo --><p>x<!-- y --></p>") == doc(p("x"))

    def test_uppercase_tags(self) -> None:
        assert parse("<P><B>x</B></P>") == doc(p(b("x")))

    def test_empty_span_dropped(self) -> None:
        assert parse("<p>a<b></b></p>") == doc(p("a"))

    def test_result_is_normalized(self) -> None:
        result = parse("<p><b><b>x</b></b></p>")
        assert result == Document((Text(Styled(Style.BOLD, (PlainText("x"),))),))

    def test_bytes_input(self) -> None:
        assert parse("<p>café</p>".encode()) == doc(p("café"))

    def test_stream_input(self) -> None:
        assert parse(io.StringIO("<p>x</p>")) == doc(p("x"))

    def test_parser_class(self) -> None:
        assert Parser("<p>x</p>").parse() == doc(p("x"))

    def test_content_is_single_sequence(self) -> None:
        content = parse("<p>a <i>b</i></p>").children[0].content
        assert isinstance(content, Sequence)
        assert content.children == (PlainText("a "), Styled(Style.ITALIC, (PlainText("b"),)))


class TestInlineListItems:
    """Inline content directly inside <li> becomes a text paragraph."""

    def test_text_item(self) -> None:
        assert parse("<ul><li>one</li></ul>") == doc(ul(li("one")))

    def test_styled_item(self) -> None:
        source = "<ul><li>one</li><li>two <b>x</b></li></ul>"
        assert parse(source) == doc(ul(li("one"), li("two ", b("x"))))

    def test_item_starting_with_inline_tag(self) -> None:
        source = '<ol><li><a href="/x">x</a> tail</li></ol>'
        assert parse(source) == doc(ol(li(a("/x", "x"), " tail")))

    def test_surrounding_whitespace_trimmed(self) -> None:
        source = "<ul>\n  <li>\n    one\n    two\n  </li>\n</ul>"
        assert parse(source) == doc(ul(li("one two")))

    def test_inline_then_nested_list(self) -> None:
        source = "<ul><li>one <i>a</i><ul><li>two</li></ul></li></ul>"
        assert parse(source) == doc(ul(li(p("one ", i("a")), ul(li("two")))))

    def test_inline_around_block(self) -> None:
        source = "<ul><li>before<p>middle</p>after</li></ul>"
        assert parse(source) == doc(ul(li(p("before"), p("middle"), p("after"))))

    def test_matches_paragraph_form(self) -> None:
        explicit = parse("<ul><li><p>one <b>x</b></p></li></ul>")
        assert parse("<ul><li>one <b>x</b></li></ul>") == explicit


class TestUnknownTags:
    """Tags outside the vocabulary."""

    def test_unknown_start_tag_position(self) -> None:
        with pytest.raises(UnknownTagError) as exc_info:
            parse("<p><span>x</span></p>")
        err = exc_info.value
        assert err.tag == "span"
        assert err.position == (1, 4)

    def test_unknown_end_tag(self) -> None:
        with pytest.raises(UnknownTagError) as exc_info:
            parse("<p>x</div></p>")
        assert exc_info.value.tag == "div"

    def test_unknown_self_closing(self) -> None:
        with pytest.raises(UnknownTagError) as exc_info:
            parse("<p>a<br/>b</p>")
        assert exc_info.value.tag == "br"

    def test_message(self) -> None:
        with pytest.raises(UnknownTagError, match=r"Unknown tag <img>"):
            parse("<img>")


class TestUnbalanced:
    """Mismatched, stray and missing end tags."""

    def test_mismatched_end_tag(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<p><b>x</i></p>")
        err = exc_info.value
        assert err.expected == "b"
        assert err.found == "i"
        assert err.position == (1, 8)

    def test_stray_end_tag(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<p>x</p></p>")
        err = exc_info.value
        assert err.expected is None
        assert err.found == "p"

    def test_unclosed_at_end_of_input(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<ul><li><p>x</p>")
        err = exc_info.value
        assert err.expected == "li"
        assert err.found is None
        assert err.position == (1, 17)

    def test_self_closing_vocabulary_tag(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<p/>")
        assert exc_info.value.expected == "p"

    def test_overlapping_inline_tags(self) -> None:
        with pytest.raises(UnbalancedTagError):
            parse("<p><b><i>x</b></i></p>")


class TestStructure:
    """Tags in contexts the grammar does not allow."""

    def test_block_inside_paragraph(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("<p><p>x</p></p>")
        err = exc_info.value
        assert err.tag == "p"
        assert err.position == (1, 4)

    def test_list_inside_heading(self) -> None:
        with pytest.raises(StructureError):
            parse("<h1><ul></ul></h1>")

    def test_li_outside_list(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("<li><p>x</p></li>")
        assert exc_info.value.tag == "li"

    def test_li_inside_li(self) -> None:
        with pytest.raises(StructureError):
            parse("<ul><li><li><p>x</p></li></li></ul>")

    def test_paragraph_directly_in_list(self) -> None:
        with pytest.raises(StructureError):
            parse("<ul><p>x</p></ul>")

    def test_inline_at_top_level(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("<b>x</b>")
        assert exc_info.value.tag == "b"

    def test_inline_in_blockquote(self) -> None:
        with pytest.raises(StructureError):
            parse("<blockquote><i>x</i></blockquote>")

    def test_text_at_top_level(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("loose text")
        assert exc_info.value.tag == "#text"
        assert exc_info.value.position == (1, 1)

    def test_text_in_list(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("<ul>x</ul>")
        assert exc_info.value.tag == "#text"

    def test_list_item_with_only_empty_inline(self) -> None:
        with pytest.raises(StructureError, match="empty <li> element"):
            parse("<ul><li> <b></b> </li></ul>")

    def test_inline_item_content_still_checked(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<ul><li>one <b>two</li></ul>")
        assert exc_info.value.expected == "b"
        assert exc_info.value.found == "li"

    def test_unclosed_item_with_inline_content(self) -> None:
        with pytest.raises(UnbalancedTagError) as exc_info:
            parse("<ul><li>one")
        assert exc_info.value.expected == "li"
        assert exc_info.value.found is None

    def test_tag_inside_code(self) -> None:
        with pytest.raises(StructureError) as exc_info:
            parse("<p><code>x <b>y</b></code></p>")
        assert exc_info.value.tag == "b"

    def test_nested_links(self) -> None:
        with pytest.raises(StructureError):
            parse('<p><a href="x"><b><a href="y">z</a></b></a></p>')

    @pytest.mark.parametrize(
        "source,tag",
        [
            ("<p></p>", "p"),
            ("<h2><b></b></h2>", "h2"),
            ("<ul></ul>", "ul"),
            ("<ol>\n</ol>", "ol"),
            ("<ul><li></li></ul>", "li"),
            ("<blockquote> </blockquote>", "blockquote"),
        ],
    )
    def test_empty_elements(self, source: str, tag: str) -> None:
        with pytest.raises(StructureError, match=f"empty <{tag}> element") as exc_info:
            parse(source)
        assert exc_info.value.tag == tag


class TestMissingAttribute:
    """``a`` requires ``href``."""

    def test_link_without_href(self) -> None:
        with pytest.raises(MissingRequiredAttributeError) as exc_info:
            parse('<p><a title="x">y</a></p>')
        err = exc_info.value
        assert err.tag == "a"
        assert err.attribute == "href"
        assert err.position == (1, 4)


class TestParseOptions:
    """Configuration and error reporting through parse()."""

    def test_source_file_in_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("<span>", source_file="memo.ftml")
        assert str(exc_info.value) == "memo.ftml:1:1 Unknown tag <span>"

    def test_strict_entities_flag(self) -> None:
        assert parse("<p>&copy;</p>") == doc(p("&copy;"))
        with pytest.raises(LexError):
            parse("<p>&copy;</p>", strict_entities=True)

    def test_strict_entities_from_context(self) -> None:
        with parse_config_context(ParseConfig(strict_entities=True)):
            with pytest.raises(LexError):
                parse("<p>&copy;</p>")

    def test_explicit_flag_overrides_context(self) -> None:
        with parse_config_context(ParseConfig(strict_entities=True)):
            assert parse("<p>&copy;</p>", strict_entities=False) == doc(p("&copy;"))

    def test_all_errors_are_parse_errors(self) -> None:
        for source in ["<span>", "<p>", "<b>x</b>", "<a>", "<"]:
            with pytest.raises(ParseError):
                parse(source)
