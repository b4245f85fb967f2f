"""Context stack for the FTML tree builder.

The parser is a pushdown automaton: each open element is a frame on this
stack, and every transition looks only at the incoming token and the top
frame. Frames collect their finished children until their end tag reduces
them into a node that is appended to the parent frame.

Usage:
    stack = ContextStack()  # Initializes with DOCUMENT frame

    stack.push(Frame(Context.BLOCK, "p", location))
    stack.current().children.append(PlainText("hi"))

    frame = stack.pop()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ftml.location import SourceLocation


class Context(Enum):
    """Kinds of open element on the parser stack."""

    DOCUMENT = auto()  # Root, collects top-level paragraphs
    BLOCK = auto()  # p, h1-h3 under construction, collects spans
    LIST = auto()  # ul/ol, collects list items
    ITEM = auto()  # li, collects paragraphs
    QUOTE = auto()  # blockquote, collects paragraphs
    SPAN = auto()  # open inline tag, collects spans

    @property
    def holds_paragraphs(self) -> bool:
        """Block tags may open directly inside this context."""
        return self in (Context.DOCUMENT, Context.ITEM, Context.QUOTE)

    @property
    def holds_inline(self) -> bool:
        """Text and inline tags may appear directly inside this context."""
        return self in (Context.BLOCK, Context.SPAN)


@dataclass(slots=True)
class Frame:
    """An open element on the context stack.

    Attributes:
        context: What kind of element this is
        tag: The element's tag name ("" for the document)
        location: Where its start tag began
        children: Finished child nodes, in order
        href: Link target, for ``a`` frames only
        implicit: Paragraph opened by inline content directly inside ``li``

    """

    context: Context
    tag: str
    location: SourceLocation | None = None
    children: list = field(default_factory=list)
    href: str | None = None
    implicit: bool = False


@dataclass
class ContextStack:
    """Stack of open elements during parsing.

    Invariant: stack[0] is always DOCUMENT, stack[-1] is the innermost
    open element.

    """

    _stack: list[Frame] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Initialize with DOCUMENT frame."""
        self._stack = [Frame(Context.DOCUMENT, "")]

    def push(self, frame: Frame) -> None:
        """Open an element."""
        self._stack.append(frame)

    def pop(self) -> Frame:
        """Close the innermost element.

        Raises:
            ValueError: If attempting to pop the document frame
        """
        if len(self._stack) <= 1:
            raise ValueError("Cannot pop document frame")
        return self._stack.pop()

    def current(self) -> Frame:
        """The innermost open element."""
        return self._stack[-1]

    def root(self) -> Frame:
        """The DOCUMENT frame."""
        return self._stack[0]

    def depth(self) -> int:
        """Current nesting depth (document = 0)."""
        return len(self._stack) - 1

    def is_open(self, tag: str) -> bool:
        """True if an element with this tag is open anywhere on the stack."""
        return any(frame.tag == tag for frame in self._stack)
