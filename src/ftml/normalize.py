"""Span normalization.

Every Span tree has exactly one normal form. The canonical writer emits the
normal form, and the parser returns it, which is what makes
``parse(write(doc)) == normalize_document(doc)`` hold.

Rules, applied bottom-up:
- Sequence children are spliced into their parent's child list
- Whitespace runs inside PlainText collapse to a single space
- Adjacent PlainText siblings merge; empty PlainText is dropped
- Styled and Link spans left without children are dropped
- Styled{X} whose only child is Styled{X} becomes a single Styled{X}
- A Sequence of one span is that span; an empty result is ``Sequence(())``

Example:
    >>> from ftml.nodes import PlainText, Sequence, Style, Styled
    >>> normalize(Sequence((PlainText("a  "), Sequence((PlainText("b"),)))))
    PlainText(content='a b')
    >>> normalize(Styled(Style.BOLD, (Styled(Style.BOLD, (PlainText("x"),)),)))
    Styled(style=<Style.BOLD: 'bold'>, children=(PlainText(content='x'),))

"""

from __future__ import annotations

from collections.abc import Iterable

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
    Styled,
    Text,
)
from ftml.utils.text import collapse_whitespace


def normalize(span: Span) -> Span:
    """Return the normal form of span. Pure and idempotent."""
    runs = _normalize_span(span)
    if len(runs) == 1:
        return runs[0]
    return Sequence(tuple(runs))


def normalize_paragraph(paragraph: Paragraph) -> Paragraph:
    """Normalize the inline content of paragraph and of everything it contains."""
    match paragraph:
        case Text(content=content):
            return Text(normalize(content))
        case Heading(level=level, content=content):
            return Heading(level, normalize(content))
        case List(items=items, ordered=ordered):
            return List(
                tuple(ListItem(_normalize_paragraphs(item.children)) for item in items),
                ordered=ordered,
            )
        case Blockquote(children=children):
            return Blockquote(_normalize_paragraphs(children))
        case _:
            raise TypeError(f"not a paragraph: {type(paragraph).__name__}")


def normalize_document(document: Document) -> Document:
    """Return document with every paragraph's content normalized."""
    return Document(_normalize_paragraphs(document.children))


def _normalize_paragraphs(paragraphs: Iterable[Paragraph]) -> tuple[Paragraph, ...]:
    return tuple(normalize_paragraph(paragraph) for paragraph in paragraphs)


def _normalize_span(span: Span) -> list[Span]:
    """Normalize span into a flat list of sibling runs (possibly empty)."""
    match span:
        case PlainText(content=content):
            content = collapse_whitespace(content)
            return [PlainText(content)] if content else []
        case Sequence(children=children):
            return _normalize_children(children)
        case Styled(style=style, children=children):
            kids = _normalize_children(children)
            if not kids:
                return []
            if len(kids) == 1 and isinstance(kids[0], Styled) and kids[0].style is style:
                return [kids[0]]
            return [Styled(style, tuple(kids))]
        case Link(href=href, children=children):
            kids = _normalize_children(children)
            if not kids:
                return []
            return [Link(href, tuple(kids))]
        case _:
            raise TypeError(f"not a span: {type(span).__name__}")


def _normalize_children(children: Iterable[Span]) -> list[Span]:
    """Flatten, merge adjacent text, and drop empties."""
    result: list[Span] = []
    for child in children:
        for run in _normalize_span(child):
            if isinstance(run, PlainText) and result and isinstance(result[-1], PlainText):
                result[-1] = PlainText(collapse_whitespace(result[-1].content + run.content))
            else:
                result.append(run)
    return result


__all__ = ["normalize", "normalize_document", "normalize_paragraph"]
