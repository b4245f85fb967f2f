"""
FTML: a strict, minimal subset of HTML5 for rich-text documents.

Parses FTML markup into an immutable typed Document, writes it back in a
single canonical form, and renders it for fixed-width terminals as ASCII
or ANSI-styled text. Zero runtime dependencies.

Quick Start:
    >>> from ftml import parse, render_terminal, write_string
    >>> doc = parse("<p>Hello <b>world</b>!</p>")
    >>> render_terminal(doc)
    'Hello **world**!\\n'
    >>> write_string(doc)
    '<p>Hello <b>world</b>!</p>\\n'

    >>> # Or use the high-level Ftml class
    >>> from ftml import Ftml
    >>> ftml = Ftml(width=40, ansi=True)
    >>> text = ftml("<h1>Memo</h1><p>Body</p>")

Building documents in code:
    >>> from ftml.builder import doc, p, b
    >>> write_string(doc(p("Hello ", b("world"))))
    '<p>Hello <b>world</b></p>\\n'
"""

from collections.abc import Iterable
from typing import IO, TypeAlias

from ftml.config import (
    ParseConfig,
    RenderConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from ftml.errors import (
    FtmlError,
    InvariantError,
    LexError,
    MissingRequiredAttributeError,
    ParseError,
    RenderError,
    StructureError,
    UnbalancedTagError,
    UnknownTagError,
)
from ftml.lexer import Lexer, decode_source, scan
from ftml.location import SourceLocation
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
from ftml.normalize import normalize, normalize_document
from ftml.parser import Parser
from ftml.renderers.canonical import CanonicalWriter, write, write_string
from ftml.renderers.protocol import DocumentRenderer
from ftml.renderers.terminal import TerminalRenderer, render_terminal
from ftml.serialization import from_dict, from_json, to_dict, to_json
from ftml.tokens import Token, TokenType

__version__ = "0.1.0"

Source: TypeAlias = str | bytes | IO[str] | IO[bytes]


def parse(
    source: Source,
    *,
    source_file: str | None = None,
    strict_entities: bool | None = None,
) -> Document:
    """Parse FTML source into a Document.

    Args:
        source: FTML text, UTF-8 bytes, or a readable text/binary stream
        source_file: Optional source file path for error messages
        strict_entities: Reject unknown ``&name;`` entities. None keeps the
            active ParseConfig setting.

    Returns:
        Normalized Document

    Raises:
        ParseError: On the first error; nothing is returned for invalid input

    Example:
        >>> doc = parse("<h1>Title</h1>")
        >>> doc.children[0].level
        1

    """
    config = get_parse_config()
    if strict_entities is not None:
        config = ParseConfig(strict_entities=strict_entities)

    with parse_config_context(config):
        text = decode_source(source, source_file)
        return Parser(text, source_file=source_file).parse()


class Ftml:
    """High-level FTML processor combining parser, writer and renderer.

    Usage:
        >>> ftml = Ftml(width=20)
        >>> ftml("<p>Hello <i>there</i></p>")
        'Hello _there_\\n'

        >>> # Access the Document
        >>> doc = ftml.parse("<h2>Heading</h2>")
        >>> doc.children[0].level
        2

    Thread Safety:
        Uses ContextVar for thread-local parse configuration and a stateless
        renderer. Safe to use one instance concurrently from different threads.

    """

    __slots__ = ("_parse_config", "_render_config", "_renderer")

    def __init__(
        self,
        *,
        strict_entities: bool = False,
        width: int = 80,
        ansi: bool = False,
        link_footnotes: bool = True,
        osc8_hyperlinks: bool = False,
        skip_mailto_footnotes: bool = False,
        link_references_in_place: bool = False,
    ) -> None:
        """Initialize FTML processor.

        Args:
            strict_entities: Reject unknown ``&name;`` entities when parsing
            width: Terminal width in columns (>= 1)
            ansi: Render with ANSI SGR escapes instead of ASCII sigils
            link_footnotes: Number links and list their targets
            osc8_hyperlinks: Make links clickable with OSC 8 (ANSI mode only)
            skip_mailto_footnotes: No footnote for a mailto link showing its address
            link_references_in_place: List link targets inside their container

        Raises:
            RenderError: If width < 1
        """
        # Build immutable configs once (thread-safe, reused across calls)
        self._parse_config = ParseConfig(strict_entities=strict_entities)
        self._render_config = RenderConfig(
            width=width,
            ansi=ansi,
            link_footnotes=link_footnotes,
            osc8_hyperlinks=osc8_hyperlinks,
            skip_mailto_footnotes=skip_mailto_footnotes,
            link_references_in_place=link_references_in_place,
        )
        self._renderer = TerminalRenderer(self._render_config)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Ftml":
        """Create a processor from a flat dictionary of options.

        Unknown keys are ignored.

        Example:
            >>> Ftml.from_dict({"width": 60, "ansi": True}).render_config.width
            60

        """
        parse_config = ParseConfig.from_dict(config_dict)
        render_config = RenderConfig.from_dict(config_dict)
        return cls(
            strict_entities=parse_config.strict_entities,
            width=render_config.width,
            ansi=render_config.ansi,
            link_footnotes=render_config.link_footnotes,
            osc8_hyperlinks=render_config.osc8_hyperlinks,
            skip_mailto_footnotes=render_config.skip_mailto_footnotes,
            link_references_in_place=render_config.link_references_in_place,
        )

    @property
    def parse_config(self) -> ParseConfig:
        return self._parse_config

    @property
    def render_config(self) -> RenderConfig:
        return self._render_config

    def __call__(self, source: Source) -> str:
        """Parse and render FTML for the terminal in one call."""
        return self.render(self.parse(source))

    def parse(self, source: Source, *, source_file: str | None = None) -> Document:
        """Parse FTML source into a Document with this processor's settings."""
        with parse_config_context(self._parse_config):
            text = decode_source(source, source_file)
            return Parser(text, source_file=source_file).parse()

    def parse_many(self, sources: Iterable[Source]) -> list[Document]:
        """Parse several sources with one configuration switch."""
        with parse_config_context(self._parse_config):
            return [Parser(decode_source(source)).parse() for source in sources]

    def write(self, document: Document) -> str:
        """Canonical FTML for document."""
        return write_string(document)

    def render(self, document: Document) -> str:
        """Terminal text for document."""
        return self._renderer.render(document)


__all__ = [
    # Entry points
    "Ftml",
    "parse",
    "render_terminal",
    "write",
    "write_string",
    "normalize",
    "normalize_document",
    # Configuration
    "ParseConfig",
    "RenderConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Nodes
    "Blockquote",
    "Document",
    "Heading",
    "Link",
    "List",
    "ListItem",
    "Paragraph",
    "PlainText",
    "Sequence",
    "Span",
    "Style",
    "Styled",
    "Text",
    # Pipeline
    "CanonicalWriter",
    "DocumentRenderer",
    "Lexer",
    "Parser",
    "SourceLocation",
    "TerminalRenderer",
    "Token",
    "TokenType",
    "scan",
    # Serialization
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
    # Errors
    "FtmlError",
    "InvariantError",
    "LexError",
    "MissingRequiredAttributeError",
    "ParseError",
    "RenderError",
    "StructureError",
    "UnbalancedTagError",
    "UnknownTagError",
    "__version__",
]
