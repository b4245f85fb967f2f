"""Source location tracking for error messages and debugging.

Provides the SourceLocation dataclass used by tokens and parse errors to
point at the offending markup.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a token in FTML source.

    Line and column are 1-indexed (the column counts characters, not bytes).
    The offset is the 0-indexed UTF-8 byte offset from the start of input,
    so tools that work on raw bytes can seek straight to the markup.

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column number (1-indexed, in characters)
        offset: Byte offset from the start of input (0-indexed)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(lineno=1, col_offset=4, offset=3)
            >>> str(loc)
            '1:4'

            >>> loc = SourceLocation(2, 1, 17, "memo.ftml")
            >>> str(loc)
            'memo.ftml:2:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "memo.ftml:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def position(self) -> tuple[int, int]:
        """(line, column) pair."""
        return (self.lineno, self.col_offset)
