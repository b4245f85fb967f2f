"""Canonical FTML writer using StringBuilder pattern.

Serializes a Document back to FTML so that every semantic document has
exactly one textual form. The document is normalized first, then laid out
with a fixed policy:

- Text and Heading paragraphs are one line: ``<p>inline</p>``
- ``ul``/``ol``, ``li`` and ``blockquote`` open and close on their own lines
- Children are indented two spaces per nesting level
- One blank line separates top-level paragraphs; none inside containers
- Output ends with a newline; an empty document writes nothing

Thread Safety:
The writer holds no per-call state. Multiple threads can share one
CanonicalWriter instance and call render() concurrently.

"""

from __future__ import annotations

from typing import TextIO

from ftml.nodes import (
    Blockquote,
    Document,
    Heading,
    Link,
    List,
    Paragraph,
    PlainText,
    Sequence,
    Span,
    Styled,
    Text,
)
from ftml.normalize import normalize_document
from ftml.stringbuilder import StringBuilder
from ftml.tags import HREF, ITEM_TAG, LINK_TAG, QUOTE_TAG, STYLE_TAGS, heading_tag, ordered_attributes
from ftml.utils.logger import get_logger
from ftml.utils.text import escape_attribute, escape_text

logger = get_logger(__name__)

INDENT = "  "


class CanonicalWriter:
    """Render a Document to canonical FTML markup.

    Usage:
            >>> from ftml.builder import b, doc, p
            >>> CanonicalWriter().render(doc(p("Hello  ", b("world"))))
            '<p>Hello <b>world</b></p>\\n'

    """

    __slots__ = ()

    def render(self, document: Document) -> str:
        """Render document to canonical markup."""
        document = normalize_document(document)
        sb = StringBuilder()
        for index, paragraph in enumerate(document.children):
            if index > 0:
                sb.append_line()
            self._render_block(paragraph, 0, sb)
        result = sb.build()
        logger.debug(
            "Wrote %d top-level paragraphs (%d characters)",
            len(document.children),
            len(result),
        )
        return result

    def _render_block(self, block: Paragraph, level: int, sb: StringBuilder) -> None:
        indent = INDENT * level
        match block:
            case Text():
                sb.append(indent).append("<p>")
                self._render_inline(block.content, sb)
                sb.append_line("</p>")
            case Heading():
                tag = heading_tag(block.level)
                sb.append(indent).append(f"<{tag}>")
                self._render_inline(block.content, sb)
                sb.append_line(f"</{tag}>")
            case List():
                tag = "ol" if block.ordered else "ul"
                sb.append_line(f"{indent}<{tag}>")
                for item in block.items:
                    sb.append_line(f"{indent}{INDENT}<{ITEM_TAG}>")
                    for child in item.children:
                        self._render_block(child, level + 2, sb)
                    sb.append_line(f"{indent}{INDENT}</{ITEM_TAG}>")
                sb.append_line(f"{indent}</{tag}>")
            case Blockquote():
                sb.append_line(f"{indent}<{QUOTE_TAG}>")
                for child in block.children:
                    self._render_block(child, level + 1, sb)
                sb.append_line(f"{indent}</{QUOTE_TAG}>")
            case _:
                raise TypeError(f"not a paragraph: {type(block).__name__}")

    def _render_inline(self, span: Span, sb: StringBuilder) -> None:
        match span:
            case PlainText():
                sb.append(escape_text(span.content))
            case Styled():
                tag = STYLE_TAGS[span.style]
                sb.append(f"<{tag}>")
                for child in span.children:
                    self._render_inline(child, sb)
                sb.append(f"</{tag}>")
            case Link():
                sb.append(f"<{LINK_TAG}")
                for name, value in ordered_attributes({HREF: span.href}):
                    sb.append(f' {name}="{escape_attribute(value)}"')
                sb.append(">")
                for child in span.children:
                    self._render_inline(child, sb)
                sb.append(f"</{LINK_TAG}>")
            case Sequence():
                for child in span.children:
                    self._render_inline(child, sb)
            case _:
                raise TypeError(f"not a span: {type(span).__name__}")


_WRITER = CanonicalWriter()


def write_string(document: Document) -> str:
    """Canonical FTML for document.

    Example:
        >>> from ftml.builder import doc, p, ul, li
        >>> print(write_string(doc(p("a"), ul(li("b")))), end="")
        <p>a</p>
        <BLANKLINE>
        <ul>
          <li>
            <p>b</p>
          </li>
        </ul>

    """
    return _WRITER.render(document)


def write(output: TextIO, document: Document) -> None:
    """Write canonical FTML for document to a text stream.

    Stream errors propagate to the caller.
    """
    output.write(write_string(document))


__all__ = ["CanonicalWriter", "write", "write_string"]
