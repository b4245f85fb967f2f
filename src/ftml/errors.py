"""Exception classes for FTML.

Parse-time failures all derive from ParseError and carry the location of
the offending markup. Writer and renderer never raise validation errors;
a Document that reaches them has already passed its constructor checks.

Hierarchy:
FtmlError
├── ParseError
│   ├── LexError
│   ├── UnknownTagError
│   ├── UnbalancedTagError
│   ├── StructureError
│   └── MissingRequiredAttributeError
├── InvariantError
└── RenderError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ftml.location import SourceLocation


class FtmlError(Exception):
    """Base exception for all FTML errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(FtmlError):
    """Error during FTML parsing.

    Raised when the scanner or tree builder encounters input outside the
    FTML subset. Parsing stops at the first error.
    """

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            location: Where the error occurred (optional)
        """
        self.message = message
        self.location = location
        self.lineno = location.lineno if location is not None else None
        self.col_offset = location.col_offset if location is not None else None
        self.offset = location.offset if location is not None else None
        self.source_file = location.source_file if location is not None else None

        prefix = f"{location} " if location is not None else ""
        super().__init__(f"{prefix}{message}")

    @property
    def position(self) -> tuple[int, int] | None:
        """(line, column) of the error, or None when unknown."""
        if self.location is None:
            return None
        return self.location.position


class LexError(ParseError):
    """Malformed token syntax (unterminated tag, bad attribute, ...)."""

    pass


class UnknownTagError(ParseError):
    """Tag outside the fixed FTML vocabulary."""

    def __init__(self, tag: str, location: SourceLocation | None = None) -> None:
        self.tag = tag
        super().__init__(f"Unknown tag <{tag}>", location)


class UnbalancedTagError(ParseError):
    """Mismatched or missing closing tag.

    ``expected`` is the tag that should have been closed (None when nothing
    was open); ``found`` is what was seen instead (None at end of input).
    """

    def __init__(
        self,
        expected: str | None,
        found: str | None,
        location: SourceLocation | None = None,
        message: str | None = None,
    ) -> None:
        self.expected = expected
        self.found = found

        if message is None:
            if expected is None:
                message = f"Unexpected closing tag </{found}>: no element is open"
            elif found is None:
                message = f"Unterminated <{expected}>: reached end of input"
            else:
                message = f"Expected </{expected}>, found </{found}>"
        super().__init__(message, location)


class StructureError(ParseError):
    """Tag used in a context where the grammar does not allow it."""

    def __init__(
        self,
        tag: str,
        expected_context: str,
        location: SourceLocation | None = None,
        message: str | None = None,
    ) -> None:
        self.tag = tag
        self.expected_context = expected_context

        if message is None:
            message = f"<{tag}> is only allowed inside {expected_context}"
        super().__init__(message, location)


class MissingRequiredAttributeError(ParseError):
    """Required attribute absent (``a`` without ``href``)."""

    def __init__(
        self,
        tag: str,
        attribute: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.tag = tag
        self.attribute = attribute
        super().__init__(f"<{tag}> requires the '{attribute}' attribute", location)


class InvariantError(FtmlError, ValueError):
    """Document node constructed in violation of a model invariant.

    Raised from node constructors, so both the parser and programmatic
    builders are held to the same rules.
    """

    pass


class RenderError(FtmlError, ValueError):
    """Renderer called with arguments outside its contract (e.g. width < 1)."""

    pass
