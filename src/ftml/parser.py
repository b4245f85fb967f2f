"""Pushdown tree builder producing a typed Document.

Consumes the token stream from the Lexer and builds frozen document nodes.
Each token is checked against the innermost open element only; the first
violation raises a ParseError carrying the token's location, so the only
successful outcome is a complete, normalized Document.

Thread Safety:
- Parser produces an immutable Document (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share the Document across threads

"""

from __future__ import annotations

from ftml.config import ParseConfig, get_parse_config
from ftml.errors import (
    MissingRequiredAttributeError,
    ParseError,
    StructureError,
    UnbalancedTagError,
    UnknownTagError,
)
from ftml.lexer import scan
from ftml.nodes import (
    Blockquote,
    Document,
    Heading,
    Link,
    List,
    ListItem,
    PlainText,
    Sequence,
    Styled,
    Text,
    has_text,
)
from ftml.normalize import normalize
from ftml.parsing.contexts import Context, ContextStack, Frame
from ftml.tags import (
    BLOCK_TAGS,
    HEADING_LEVELS,
    HREF,
    INLINE_STYLE_TAGS,
    ITEM_TAG,
    LEAF_BLOCK_TAGS,
    LINK_TAG,
    LIST_TAGS,
    is_known,
)
from ftml.tokens import Token, TokenType
from ftml.utils.logger import get_logger
from ftml.utils.text import WHITESPACE, is_blank

logger = get_logger(__name__)

# Human-readable parent descriptions for StructureError
_BLOCK_PARENTS = "the document, <li> or <blockquote>"
_ITEM_PARENTS = "<ul> or <ol>"
_INLINE_PARENTS = "<p>, <h1>, <h2>, <h3>, <li> or an inline element"
_CODE_TAG = "code"
_TEXT_TAG = "#text"


class Parser:
    """Pushdown parser for FTML.

    Usage:
            >>> parser = Parser("<p>Hello <b>world</b>!</p>")
            >>> parser.parse()
        Document(children=(Text(content=Sequence(children=(PlainText(content='Hello '), ...)),))

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).
        The resulting Document is immutable and thread-safe.

    """

    __slots__ = ("_source", "_source_file", "_stack")

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Configuration is read from ContextVar, not passed as parameters.
        Use set_parse_config() or parse_config_context() before creating
        a Parser if you need non-default configuration.

        Args:
            source: FTML source text
            source_file: Optional source file path for error messages

        """
        self._source = source
        self._source_file = source_file
        self._stack = ContextStack()

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    def parse(self) -> Document:
        """Parse source into a Document.

        Raises:
            ParseError: On the first lexical, vocabulary or structural error
        """
        tokens = scan(
            self._source,
            self._source_file,
            strict_entities=self._config.strict_entities,
        )
        try:
            for token in tokens:
                match token.type:
                    case TokenType.START_TAG:
                        self._start_tag(token)
                    case TokenType.END_TAG:
                        self._end_tag(token)
                    case TokenType.TEXT:
                        self._text(token)
                    case TokenType.EOF:
                        self._end_of_input(token)
        except ParseError as e:
            logger.debug("Parse failed: %s", e)
            raise

        document = Document(self._stack.root().children)
        logger.debug(
            "Parsed %d characters into %d top-level paragraphs",
            len(self._source),
            len(document.children),
        )
        return document

    # =========================================================================
    # Transitions
    # =========================================================================

    def _start_tag(self, token: Token) -> None:
        name = token.name
        location = token.location
        if not is_known(name):
            raise UnknownTagError(name, location)
        if token.self_closing:
            raise UnbalancedTagError(
                name,
                name,
                location,
                message=f"Self-closing <{name}/> is not allowed; close it with </{name}>",
            )

        if self._stack.is_open(_CODE_TAG):
            raise StructureError(
                name,
                "text",
                location,
                message=f"<{name}> is not allowed inside <code>, which holds only text",
            )

        if name in BLOCK_TAGS or name == ITEM_TAG:
            self._close_implicit()

        top = self._stack.current()
        if name in BLOCK_TAGS:
            if not top.context.holds_paragraphs:
                raise StructureError(name, _BLOCK_PARENTS, location)
            if name in LEAF_BLOCK_TAGS:
                context = Context.BLOCK
            elif name in LIST_TAGS:
                context = Context.LIST
            else:
                context = Context.QUOTE
            self._stack.push(Frame(context, name, location))
        elif name == ITEM_TAG:
            if top.context is not Context.LIST:
                raise StructureError(name, _ITEM_PARENTS, location)
            self._stack.push(Frame(Context.ITEM, name, location))
        else:
            if top.context is Context.ITEM:
                top = self._open_implicit(token)
            if not top.context.holds_inline:
                raise StructureError(name, _INLINE_PARENTS, location)
            href = None
            if name == LINK_TAG:
                if self._stack.is_open(LINK_TAG):
                    raise StructureError(
                        name,
                        _INLINE_PARENTS,
                        location,
                        message="<a> cannot be nested inside another <a>",
                    )
                if not token.has_attribute(HREF):
                    raise MissingRequiredAttributeError(name, HREF, location)
                href = token.attribute(HREF) or ""
            self._stack.push(Frame(Context.SPAN, name, location, href=href))

    def _end_tag(self, token: Token) -> None:
        name = token.name
        if not is_known(name):
            raise UnknownTagError(name, token.location)

        self._close_implicit()
        top = self._stack.current()
        if top.context is Context.DOCUMENT:
            raise UnbalancedTagError(None, name, token.location)
        if name != top.tag:
            raise UnbalancedTagError(top.tag, name, token.location)

        frame = self._stack.pop()
        self._stack.current().children.append(self._reduce(frame))

    def _text(self, token: Token) -> None:
        top = self._stack.current()
        if top.context.holds_inline:
            top.children.append(PlainText(token.value))
        elif top.context is Context.ITEM and not is_blank(token.value):
            self._open_implicit(token).children.append(
                PlainText(token.value.lstrip(WHITESPACE))
            )
        elif not is_blank(token.value):
            where = "the document" if top.context is Context.DOCUMENT else f"<{top.tag}>"
            preview = token.value.strip()
            if len(preview) > 20:
                preview = preview[:17] + "..."
            raise StructureError(
                _TEXT_TAG,
                _INLINE_PARENTS,
                token.location,
                message=f"Text {preview!r} is not allowed directly inside {where}",
            )

    def _end_of_input(self, token: Token) -> None:
        self._close_implicit()
        if self._stack.depth() > 0:
            raise UnbalancedTagError(self._stack.current().tag, None, token.location)

    def _open_implicit(self, token: Token) -> Frame:
        """Start a text paragraph for inline content placed directly in ``li``."""
        frame = Frame(Context.BLOCK, ITEM_TAG, token.location, implicit=True)
        self._stack.push(frame)
        return frame

    def _close_implicit(self) -> None:
        """Reduce an open implicit paragraph; one without text is dropped."""
        if not self._stack.current().implicit:
            return
        frame = self._stack.pop()
        children = frame.children
        if children and isinstance(children[-1], PlainText):
            children[-1] = PlainText(children[-1].content.rstrip(WHITESPACE))
        content = normalize(Sequence(tuple(children)))
        if has_text(content):
            self._stack.current().children.append(Text(content))

    # =========================================================================
    # Reductions
    # =========================================================================

    def _reduce(self, frame: Frame) -> object:
        """Build the node for a just-closed element."""
        match frame.context:
            case Context.BLOCK:
                content = normalize(Sequence(tuple(frame.children)))
                if not has_text(content):
                    raise self._empty(frame)
                if frame.tag in HEADING_LEVELS:
                    return Heading(HEADING_LEVELS[frame.tag], content)  # type: ignore[arg-type]
                return Text(content)
            case Context.LIST:
                if not frame.children:
                    raise self._empty(frame)
                return List(tuple(frame.children), ordered=frame.tag == "ol")
            case Context.ITEM:
                if not frame.children:
                    raise self._empty(frame)
                return ListItem(tuple(frame.children))
            case Context.QUOTE:
                if not frame.children:
                    raise self._empty(frame)
                return Blockquote(tuple(frame.children))
            case Context.SPAN:
                if frame.tag == LINK_TAG:
                    return Link(frame.href or "", tuple(frame.children))
                return Styled(INLINE_STYLE_TAGS[frame.tag], tuple(frame.children))
            case _:
                raise ValueError(f"Cannot reduce {frame.context.name} frame")

    def _empty(self, frame: Frame) -> StructureError:
        return StructureError(
            frame.tag,
            "content",
            frame.location,
            message=f"empty <{frame.tag}> element",
        )


__all__ = ["Parser"]
