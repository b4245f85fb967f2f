"""Single-pass tag scanner with O(n) performance.

Splits FTML source into start tags, end tags and text. The scanner knows
HTML tag syntax but not the FTML vocabulary: any well-formed tag name is
emitted, and the parser decides whether it is allowed.

Tag boundaries are found with str.find; regular expressions only run over
the already-delimited inside of a single tag, so no pattern can backtrack
across the document.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import IO

from ftml.config import get_parse_config
from ftml.errors import LexError
from ftml.location import SourceLocation
from ftml.tokens import Token, TokenType
from ftml.utils.text import WHITESPACE, decode_entities, find_unknown_entity

_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9-]*")
_END_TAG = re.compile(r"/([A-Za-z][A-Za-z0-9-]*)[ \t\n\r\f]*")
_ATTRIBUTE = re.compile(
    r"[ \t\n\r\f]+([^\s\"'<>/=]+)"
    r"(?:[ \t\n\r\f]*=[ \t\n\r\f]*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'=<>`]+)))?"
)

_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"


class Lexer:
    """Tag scanner for FTML source.

    Usage:
            >>> lexer = Lexer("<p>Hi &amp; bye</p>")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(START_TAG, <p>, 1:1)
        Token(TEXT, 'Hi & bye', 1:4)
        Token(END_TAG, </p>, 1:16)
        Token(EOF, 1:20)

    Thread Safety:
        Lexer instances are single-use. Create one per source string.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_source_file",
        "_strict_entities",
        "_pos",
        "_lineno",
        "_col",
        "_offset",  # UTF-8 byte offset of _pos
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        strict_entities: bool = False,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: FTML source text
            source_file: Optional source file path for error messages
            strict_entities: Reject unknown ``&name;`` entities
        """
        self._source = source
        self._source_len = len(source)
        self._source_file = source_file
        self._strict_entities = strict_entities
        self._pos = 0
        self._lineno = 1
        self._col = 1
        self._offset = 0

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into token stream.

        Yields:
            Token objects one at a time, ending with an EOF token

        Raises:
            LexError: On the first malformed construct
        """
        source = self._source
        source_len = self._source_len
        while self._pos < source_len:
            if source[self._pos] == "<":
                token = self._scan_markup()
                if token is not None:
                    yield token
            else:
                yield self._scan_text()

        yield Token(TokenType.EOF, self._location())

    # =========================================================================
    # Scanners
    # =========================================================================

    def _scan_text(self) -> Token:
        """Scan character data up to the next ``<`` (or end of input)."""
        end = self._source.find("<", self._pos)
        if end == -1:
            end = self._source_len
        raw = self._source[self._pos : end]
        location = self._location()

        if self._strict_entities:
            unknown = find_unknown_entity(raw)
            if unknown is not None:
                raise LexError(
                    f"Unknown entity {unknown.group(0)}",
                    self._location_at(self._pos + unknown.start()),
                )

        self._advance_to(end)
        return Token(TokenType.TEXT, location, value=decode_entities(raw))

    def _scan_markup(self) -> Token | None:
        """Scan a tag or comment starting at ``<``.

        Returns:
            The tag token, or None for a discarded comment.
        """
        source = self._source
        start = self._pos
        location = self._location()

        if source.startswith(_COMMENT_OPEN, start):
            close = source.find(_COMMENT_CLOSE, start + len(_COMMENT_OPEN))
            if close == -1:
                raise LexError("Unterminated comment", location)
            self._advance_to(close + len(_COMMENT_CLOSE))
            return None

        following = source[start + 1] if start + 1 < self._source_len else ""
        if following in ("!", "?"):
            raise LexError("Markup declarations are not supported", location)
        if not (following == "/" or (following.isascii() and following.isalpha())):
            raise LexError("'<' must be followed by a tag name, '/' or '!--'", location)

        end = self._find_tag_end(start + 1, location)
        inner = source[start + 1 : end]
        self._advance_to(end + 1)

        if following == "/":
            return self._end_tag(inner, location)
        return self._start_tag(inner, location)

    def _find_tag_end(self, pos: int, location: SourceLocation) -> int:
        """Find the ``>`` closing the tag opened just before pos.

        Quoted attribute values may contain ``<`` and ``>``; outside quotes a
        ``<`` means the tag was never closed.
        """
        source = self._source
        quote = ""
        while pos < self._source_len:
            char = source[pos]
            if quote:
                if char == quote:
                    quote = ""
            elif char == ">":
                return pos
            elif char in ("'", '"'):
                quote = char
            elif char == "<":
                break
            pos += 1

        if quote:
            raise LexError("Unterminated quoted attribute value", location)
        raise LexError("Unterminated tag", location)

    def _end_tag(self, inner: str, location: SourceLocation) -> Token:
        match = _END_TAG.fullmatch(inner)
        if match is None:
            raise LexError(f"Malformed end tag <{inner}>", location)
        return Token(TokenType.END_TAG, location, name=match.group(1).lower())

    def _start_tag(self, inner: str, location: SourceLocation) -> Token:
        match = _TAG_NAME.match(inner)
        if match is None:
            raise LexError(f"Malformed tag name <{inner}>", location)
        name = match.group(0).lower()
        rest = inner[match.end() :]

        self_closing = False
        trimmed = rest.rstrip(WHITESPACE)
        if trimmed.endswith("/"):
            self_closing = True
            rest = trimmed[:-1]

        if rest and rest[0] not in WHITESPACE:
            raise LexError(f"Malformed tag name <{name}{rest}>", location)

        return Token(
            TokenType.START_TAG,
            location,
            name=name,
            attributes=self._parse_attributes(name, rest, location),
            self_closing=self_closing,
        )

    def _parse_attributes(
        self, tag: str, text: str, location: SourceLocation
    ) -> tuple[tuple[str, str | None], ...]:
        """Parse the attribute list following a tag name.

        The first occurrence of a name wins; later duplicates are ignored.
        """
        attributes: list[tuple[str, str | None]] = []
        seen: set[str] = set()
        pos = 0
        while (match := _ATTRIBUTE.match(text, pos)) is not None:
            pos = match.end()
            name = match.group(1).lower()
            raw = next((g for g in match.group(2, 3, 4) if g is not None), None)
            if name in seen:
                continue
            seen.add(name)

            value: str | None = None
            if raw is not None:
                if self._strict_entities:
                    unknown = find_unknown_entity(raw)
                    if unknown is not None:
                        raise LexError(
                            f"Unknown entity {unknown.group(0)} in <{tag}> attribute {name!r}",
                            location,
                        )
                value = decode_entities(raw)
            attributes.append((name, value))

        if text[pos:].strip(WHITESPACE):
            raise LexError(f"Malformed attribute in <{tag}>: {text[pos:].strip()!r}", location)
        return tuple(attributes)

    # =========================================================================
    # Location tracking
    # =========================================================================

    def _location(self) -> SourceLocation:
        """Location of the current position."""
        return SourceLocation(
            lineno=self._lineno,
            col_offset=self._col,
            offset=self._offset,
            source_file=self._source_file,
        )

    def _location_at(self, index: int) -> SourceLocation:
        """Location of index (>= current position) without advancing."""
        lineno, col, offset = self._step(index)
        return SourceLocation(lineno, col, offset, self._source_file)

    def _advance_to(self, index: int) -> None:
        """Commit position to index, updating line, column and byte offset."""
        self._lineno, self._col, self._offset = self._step(index)
        self._pos = index

    def _step(self, index: int) -> tuple[int, int, int]:
        segment = self._source[self._pos : index]
        newline_count = segment.count("\n")
        if newline_count > 0:
            lineno = self._lineno + newline_count
            col = len(segment) - segment.rfind("\n")
        else:
            lineno = self._lineno
            col = self._col + len(segment)
        offset = self._offset + len(segment.encode("utf-8", "surrogatepass"))
        return lineno, col, offset


def scan(
    source: str,
    source_file: str | None = None,
    *,
    strict_entities: bool | None = None,
) -> Iterator[Token]:
    """Lazily tokenize source.

    ``strict_entities`` defaults to the active ParseConfig.

    Example:
        >>> [t.type.name for t in scan("<p>x</p>")]
        ['START_TAG', 'TEXT', 'END_TAG', 'EOF']

    """
    if strict_entities is None:
        strict_entities = get_parse_config().strict_entities
    return Lexer(source, source_file, strict_entities).tokenize()


def decode_source(
    source: str | bytes | IO[str] | IO[bytes],
    source_file: str | None = None,
) -> str:
    """Return source as text, reading streams and decoding UTF-8 bytes.

    Raises:
        LexError: If bytes are not valid UTF-8, located at the bad byte
    """
    if hasattr(source, "read"):
        source = source.read()  # type: ignore[union-attr]
    if isinstance(source, str):
        return source
    data = bytes(source)  # type: ignore[arg-type]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        prefix = data[: e.start].decode("utf-8")
        lineno = prefix.count("\n") + 1
        col = len(prefix) - prefix.rfind("\n")
        raise LexError(
            "Invalid UTF-8 byte sequence",
            SourceLocation(lineno, col, e.start, source_file),
        ) from e
