"""Programmatic document construction.

Helpers named after the FTML tags, so a document can be written in Python
the way it reads in markup. Plain strings become PlainText. Every helper
goes through the node constructors, so builders are held to the same
invariants as the parser.

Example:
    >>> from ftml.builder import a, b, doc, li, p, ul
    >>> memo = doc(
    ...     p("Hello ", b("world"), "!"),
    ...     ul(li("one"), li("two")),
    ...     p("See ", a("https://example.com", "the docs"), "."),
    ... )
    >>> len(memo.children)
    3

"""

from __future__ import annotations

from typing import TypeAlias

from ftml.nodes import (
    Blockquote,
    Document,
    Heading,
    Link,
    List,
    ListItem,
    Paragraph,
    PlainText,
    Sequence,
    Span,
    Style,
    Styled,
    Text,
)

Inline: TypeAlias = Span | str

_PARAGRAPH_TYPES = (Text, Heading, List, Blockquote)


def _span(item: Inline) -> Span:
    if isinstance(item, str):
        return PlainText(item)
    return item


def _content(items: tuple[Inline, ...]) -> Span:
    if len(items) == 1:
        return _span(items[0])
    return Sequence(tuple(_span(item) for item in items))


def doc(*paragraphs: Paragraph) -> Document:
    """Document of the given top-level paragraphs."""
    return Document(paragraphs)


def p(*inline: Inline) -> Text:
    """Text paragraph."""
    return Text(_content(inline))


def h1(*inline: Inline) -> Heading:
    return Heading(1, _content(inline))


def h2(*inline: Inline) -> Heading:
    return Heading(2, _content(inline))


def h3(*inline: Inline) -> Heading:
    return Heading(3, _content(inline))


def li(*content: Paragraph | Inline) -> ListItem:
    """List item.

    Accepts either paragraphs or inline content; inline content is wrapped
    in a single Text paragraph. Mixing the two is an error.
    """
    if content and all(isinstance(item, _PARAGRAPH_TYPES) for item in content):
        return ListItem(content)  # type: ignore[arg-type]
    if any(isinstance(item, _PARAGRAPH_TYPES) for item in content):
        raise TypeError("li() takes either paragraphs or inline content, not both")
    return ListItem((Text(_content(content)),))  # type: ignore[arg-type]


def ul(*items: ListItem) -> List:
    return List(items, ordered=False)


def ol(*items: ListItem) -> List:
    return List(items, ordered=True)


def quote(*paragraphs: Paragraph) -> Blockquote:
    return Blockquote(paragraphs)


def b(*inline: Inline) -> Styled:
    return Styled(Style.BOLD, tuple(_span(item) for item in inline))


def i(*inline: Inline) -> Styled:
    return Styled(Style.ITALIC, tuple(_span(item) for item in inline))


def u(*inline: Inline) -> Styled:
    return Styled(Style.UNDERLINE, tuple(_span(item) for item in inline))


def s(*inline: Inline) -> Styled:
    return Styled(Style.STRIKE, tuple(_span(item) for item in inline))


def mark(*inline: Inline) -> Styled:
    return Styled(Style.HIGHLIGHT, tuple(_span(item) for item in inline))


def code(*inline: Inline) -> Styled:
    return Styled(Style.CODE, tuple(_span(item) for item in inline))


def a(href: str, *inline: Inline) -> Link:
    """Link to href."""
    return Link(href, tuple(_span(item) for item in inline))


def seq(*inline: Inline) -> Sequence:
    """Unstyled grouping of inline runs."""
    return Sequence(tuple(_span(item) for item in inline))


__all__ = [
    "a",
    "b",
    "code",
    "doc",
    "h1",
    "h2",
    "h3",
    "i",
    "li",
    "mark",
    "ol",
    "p",
    "quote",
    "s",
    "seq",
    "u",
    "ul",
]
