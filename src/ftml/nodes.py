"""Typed document model for FTML.

All nodes are frozen dataclasses with slots:
- Immutability: a Document can be written and rendered concurrently
- Structural equality: a parsed document compares equal to a built one
- Pattern matching: Writer and Renderer dispatch with exhaustive match

Node Hierarchy:
Document
└── Paragraph (closed union)
    ├── Text        content: Span
    ├── Heading     level 1-3, content: Span
    ├── List        items: ListItem (each holding Paragraphs)
    └── Blockquote  children: Paragraph
Span (closed union)
├── PlainText   leaf string
├── Styled      one inline style over children
├── Link        href over children
└── Sequence    unstyled grouping of sibling runs

Invariants are checked in ``__post_init__`` and raise InvariantError, so the
parser and programmatic builders share one set of rules. Nodes carry no
source locations; positions live on tokens and parse errors.

Thread Safety:
All nodes are frozen (immutable) and own their children exclusively.

"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias

from ftml.errors import InvariantError


class Style(Enum):
    """Inline style carried by a Styled span."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    HIGHLIGHT = "highlight"
    CODE = "code"


def _freeze(node: object, name: str) -> None:
    """Store an iterable child field as a tuple on a frozen node."""
    value = getattr(node, name)
    if not isinstance(value, tuple):
        object.__setattr__(node, name, tuple(value))


# =============================================================================
# Spans
# =============================================================================


@dataclass(frozen=True, slots=True)
class PlainText:
    """Literal text."""

    content: str


@dataclass(frozen=True, slots=True)
class Styled:
    """Inline style applied to child spans.

    FTML: <b>, <i>, <u>, <s>, <mark>, <code>

    A ``CODE`` span may only hold PlainText children, matching ``<code>``
    where inner markup is literal text.

    """

    style: Style
    children: tuple["Span", ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "children")
        if self.style is Style.CODE:
            for child in self.children:
                if not isinstance(child, PlainText):
                    raise InvariantError(
                        f"code spans may only contain plain text, got {type(child).__name__}"
                    )


@dataclass(frozen=True, slots=True)
class Link:
    """Hyperlink.

    FTML: <a href="...">

    Links may contain styled text but never another link.

    """

    href: str
    children: tuple["Span", ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "children")
        for child in self.children:
            if contains_link(child):
                raise InvariantError(f"link to {self.href!r} contains a nested link")


@dataclass(frozen=True, slots=True)
class Sequence:
    """Unstyled grouping of sibling spans."""

    children: tuple["Span", ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "children")


# PEP 695 type alias for inline content
Span: TypeAlias = PlainText | Styled | Link | Sequence


def contains_link(span: Span) -> bool:
    """True if span is, or contains, a Link."""
    match span:
        case Link():
            return True
        case Styled() | Sequence():
            return any(contains_link(child) for child in span.children)
        case _:
            return False


def has_text(span: Span) -> bool:
    """True if span holds at least one character of text."""
    match span:
        case PlainText():
            return bool(span.content)
        case Styled() | Link() | Sequence():
            return any(has_text(child) for child in span.children)
        case _:
            return False


def plain_text(span: Span) -> str:
    """Concatenated text of span, markup removed."""
    match span:
        case PlainText():
            return span.content
        case Styled() | Link() | Sequence():
            return "".join(plain_text(child) for child in span.children)
        case _:
            return ""


# =============================================================================
# Paragraphs
# =============================================================================


def _require_text(kind: str, content: Span) -> None:
    if not has_text(content):
        raise InvariantError(f"{kind} paragraph must have text content")


@dataclass(frozen=True, slots=True)
class Text:
    """Text paragraph.

    FTML: <p>...</p>

    """

    content: Span

    def __post_init__(self) -> None:
        _require_text("text", self.content)


@dataclass(frozen=True, slots=True)
class Heading:
    """Heading, levels 1 to 3.

    FTML: <h1>...</h1>, <h2>...</h2>, <h3>...</h3>

    """

    level: Literal[1, 2, 3]
    content: Span

    def __post_init__(self) -> None:
        if self.level not in (1, 2, 3):
            raise InvariantError(f"heading level must be 1, 2 or 3, got {self.level!r}")
        _require_text("heading", self.content)


@dataclass(frozen=True, slots=True)
class ListItem:
    """One list entry; its content is a non-empty run of paragraphs.

    FTML: <li>...</li>

    """

    children: tuple["Paragraph", ...]

    def __post_init__(self) -> None:
        _freeze(self, "children")
        if not self.children:
            raise InvariantError("list item must contain at least one paragraph")


@dataclass(frozen=True, slots=True)
class List:
    """Ordered or unordered list.

    FTML: <ul>/<ol> with <li> children

    """

    items: tuple[ListItem, ...]
    ordered: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "items")
        if not self.items:
            raise InvariantError("list must contain at least one item")


@dataclass(frozen=True, slots=True)
class Blockquote:
    """Block quote, possibly of other quotes.

    FTML: <blockquote>...</blockquote>

    """

    children: tuple["Paragraph", ...]

    def __post_init__(self) -> None:
        _freeze(self, "children")
        if not self.children:
            raise InvariantError("blockquote must contain at least one paragraph")


Paragraph: TypeAlias = Text | Heading | List | Blockquote


@dataclass(frozen=True, slots=True)
class Document:
    """Root node: ordered top-level paragraphs. May be empty."""

    children: tuple[Paragraph, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "children")
