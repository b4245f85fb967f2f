"""Token and TokenType definitions for the FTML scanner.

The scanner produces a stream of Token objects that the parser consumes.
Each Token has a type, a tag name or text value, and a source location.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto

from ftml.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the scanner."""

    START_TAG = auto()  # <name attr="v"> or <name/>
    END_TAG = auto()  # </name>
    TEXT = auto()  # character data, entities decoded
    EOF = auto()  # end of input, carries the final position


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the scanner.

    Attributes:
        type: The token type (from TokenType enum)
        location: Position of the first character (``<`` for tags)
        name: Lower-cased tag name (tags only)
        value: Decoded text (TEXT only)
        attributes: ``(name, value)`` pairs in source order, first
            occurrence of each name only; ``value`` is None for bare
            attributes
        self_closing: True for ``<name/>`` syntax

    """

    type: TokenType
    location: SourceLocation
    name: str = ""
    value: str = ""
    attributes: tuple[tuple[str, str | None], ...] = ()
    self_closing: bool = False

    def attribute(self, name: str) -> str | None:
        """Value of attribute ``name``, or None when absent or bare."""
        for attr_name, attr_value in self.attributes:
            if attr_name == name:
                return attr_value
        return None

    def has_attribute(self, name: str) -> bool:
        """True if the tag carries ``name``, with or without a value."""
        return any(attr_name == name for attr_name, _ in self.attributes)

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        loc = f"{self.location.lineno}:{self.location.col_offset}"
        match self.type:
            case TokenType.START_TAG:
                slash = "/" if self.self_closing else ""
                return f"Token(START_TAG, <{self.name}{slash}>, {loc})"
            case TokenType.END_TAG:
                return f"Token(END_TAG, </{self.name}>, {loc})"
            case TokenType.TEXT:
                val = self.value
                if len(val) > 20:
                    val = val[:17] + "..."
                return f"Token(TEXT, {val!r}, {loc})"
            case _:
                return f"Token(EOF, {loc})"

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self.location.lineno

    @property
    def col_offset(self) -> int:
        """Column number (convenience accessor)."""
        return self.location.col_offset
