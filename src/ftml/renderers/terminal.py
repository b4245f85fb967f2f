"""Fixed-width terminal renderer.

Lays a Document out as plain ASCII text (styles shown as sigils) or as
ANSI-escaped text (styles shown with SGR codes), greedily word-wrapped to a
given width.

Pipeline per paragraph:
1. Flatten the Span tree into fragments ``(text, styles)``, styles ordered
   outermost to innermost
2. Split fragments into words on HTML whitespace; whitespace itself is never
   styled, so a style boundary next to a space moves onto the neighbouring word
3. Turn each word into a cell: its text plus the style markers needed to get
   from the styles left open by the previous word to those the next word
   starts with. Shared styles stay open across the separating space.
4. Greedy wrap the cells into lines under the container prefix

ANSI Style Stack:
Entering a style emits ``ESC[<code>m``. Leaving one emits ``ESC[0m`` and
replays what is still open, outermost first. A line that ends with styles
open is terminated with ``ESC[0m`` and the next line replays the stack after
its prefix, so quote bars and bullets are never styled. With OSC 8
hyperlinks enabled, an open link sits on the same stack: it is closed at the
end of each line and reopened after the next prefix.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for
each render() call. Multiple threads can safely share a single
TerminalRenderer instance.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias

from ftml.config import RenderConfig
from ftml.nodes import (
    Blockquote,
    Document,
    Heading,
    Link,
    List,
    Paragraph,
    PlainText,
    Sequence,
    Span,
    Style,
    Styled,
    Text,
    plain_text,
)
from ftml.normalize import normalize_document
from ftml.utils.logger import get_logger
from ftml.utils.text import split_words, visible_len

logger = get_logger(__name__)

ESC = "\x1b["
RESET = f"{ESC}0m"

SGR_CODES: MappingProxyType[Style, int] = MappingProxyType(
    {
        Style.BOLD: 1,
        Style.ITALIC: 3,
        Style.UNDERLINE: 4,
        Style.STRIKE: 9,
        Style.HIGHLIGHT: 7,
    }
)

# (open, close) markers; CODE uses backticks in both modes
ASCII_SIGILS: MappingProxyType[Style, tuple[str, str]] = MappingProxyType(
    {
        Style.BOLD: ("**", "**"),
        Style.ITALIC: ("_", "_"),
        Style.UNDERLINE: ("_[u]", "[/u]_"),
        Style.STRIKE: ("~~", "~~"),
        Style.HIGHLIGHT: ("[hl]", "[/hl]"),
        Style.CODE: ("`", "`"),
    }
)

# Base styles of heading text in ANSI mode
HEADING_STYLES: MappingProxyType[int, tuple[Style, ...]] = MappingProxyType(
    {
        1: (Style.BOLD,),
        2: (Style.BOLD, Style.UNDERLINE),
        3: (Style.UNDERLINE,),
    }
)

# Rule characters drawn under headings in ASCII mode
HEADING_RULES: MappingProxyType[int, str] = MappingProxyType({1: "=", 2: "-"})

BULLET = "- "
QUOTE_PREFIX = "> "
MAILTO = "mailto:"

OSC8_END = "\x1b]8;;\x1b\\"


@dataclass(frozen=True, slots=True)
class Hyperlink:
    """An OSC 8 hyperlink held open on the style stack."""

    id: int
    target: str

    @property
    def start(self) -> str:
        return f"\x1b]8;id={self.id};{self.target}\x1b\\"


Marker: TypeAlias = Style | Hyperlink
Fragment: TypeAlias = tuple[str, tuple[Marker, ...]]


@dataclass(frozen=True, slots=True)
class Cell:
    """A word ready for layout.

    Attributes:
        text: Word text including its style markers
        width: Visible width of text
        carried: Styles open before the word starts

    """

    text: str
    width: int
    carried: tuple[Marker, ...]


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render() call, so a TerminalRenderer can be
    shared across threads.
    """

    config: RenderConfig
    lines: list[str] = field(default_factory=list)
    link_indices: dict[str, int] = field(default_factory=dict)
    pending_links: list[tuple[int, str]] = field(default_factory=list)
    hyperlink_count: int = 0

    @property
    def osc8(self) -> bool:
        return self.config.ansi and self.config.osc8_hyperlinks

    def hyperlink(self, target: str) -> Hyperlink:
        """A new OSC 8 hyperlink; ids are unique within one render."""
        self.hyperlink_count += 1
        return Hyperlink(self.hyperlink_count, target)

    def link_index(self, href: str) -> int:
        """Footnote number for href; a new href is queued for listing."""
        index = self.link_indices.get(href)
        if index is None:
            index = len(self.link_indices) + 1
            self.link_indices[href] = index
            self.pending_links.append((index, href))
        return index


class TerminalRenderer:
    """Render a Document as fixed-width terminal text.

    Usage:
            >>> from ftml import parse
            >>> TerminalRenderer().render(parse("<p>Hello <b>world</b>!</p>"))
            'Hello **world**!\\n'

    """

    __slots__ = ("_config",)

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config if config is not None else RenderConfig()

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, document: Document) -> str:
        """Render document to terminal text."""
        document = normalize_document(document)
        ctx = RenderContext(self._config)

        for index, paragraph in enumerate(document.children):
            if index > 0:
                ctx.lines.append("")
            self._render_block(paragraph, "", "", ctx)
            if ctx.pending_links:
                self._render_link_references(ctx)

        if not ctx.lines:
            return ""
        result = "\n".join(ctx.lines) + "\n"
        logger.debug(
            "Rendered %d top-level paragraphs into %d lines (width=%d, ansi=%s)",
            len(document.children),
            len(ctx.lines),
            self._config.width,
            self._config.ansi,
        )
        return result

    # =========================================================================
    # Blocks
    # =========================================================================

    def _render_block(
        self, block: Paragraph, first_prefix: str, rest_prefix: str, ctx: RenderContext
    ) -> None:
        """Render block; its first line starts with first_prefix, others rest_prefix."""
        match block:
            case Text():
                self._render_text(block.content, first_prefix, rest_prefix, ctx)
                if ctx.config.link_references_in_place and ctx.pending_links:
                    self._render_link_references(ctx, rest_prefix)
            case Heading():
                self._render_heading(block, first_prefix, rest_prefix, ctx)
                if ctx.config.link_references_in_place and ctx.pending_links:
                    self._render_link_references(ctx, rest_prefix)
            case List():
                for number, item in enumerate(block.items, 1):
                    bullet = f"{number}. " if block.ordered else BULLET
                    head = (first_prefix if number == 1 else rest_prefix) + bullet
                    hanging = rest_prefix + " " * len(bullet)
                    self._render_children(item.children, head, hanging, ctx)
            case Blockquote():
                self._render_children(
                    block.children,
                    first_prefix + QUOTE_PREFIX,
                    rest_prefix + QUOTE_PREFIX,
                    ctx,
                )
            case _:
                raise TypeError(f"not a paragraph: {type(block).__name__}")

    def _render_children(
        self,
        children: tuple[Paragraph, ...],
        first_prefix: str,
        rest_prefix: str,
        ctx: RenderContext,
    ) -> None:
        """Render sibling paragraphs of one container, blank-line separated."""
        for index, child in enumerate(children):
            if index > 0:
                ctx.lines.append(rest_prefix.rstrip())
            self._render_block(child, first_prefix if index == 0 else rest_prefix, rest_prefix, ctx)

    def _render_heading(
        self, heading: Heading, first_prefix: str, rest_prefix: str, ctx: RenderContext
    ) -> None:
        if ctx.config.ansi:
            base = HEADING_STYLES[heading.level]
            self._render_text(heading.content, first_prefix, rest_prefix, ctx, base)
            return

        widest = self._render_text(heading.content, first_prefix, rest_prefix, ctx)
        rule = HEADING_RULES.get(heading.level)
        if rule is not None:
            ctx.lines.append(rest_prefix + rule * widest)

    def _render_link_references(self, ctx: RenderContext, prefix: str = "") -> None:
        """List ``[n] href`` for the links not yet listed.

        Labels are right-aligned; a wrapped target hangs under its first line.
        """
        ctx.lines.append(prefix.rstrip())
        label_width = len(f"[{ctx.pending_links[-1][0]}]")
        for index, href in ctx.pending_links:
            label = f"[{index}]".rjust(label_width) + " "
            markers: tuple[Marker, ...] = (ctx.hyperlink(href),) if ctx.osc8 else ()
            cells = self._cells(self._words([(href, markers)]), ctx)
            self._wrap(cells, prefix + label, prefix + " " * len(label), ctx)
        ctx.pending_links.clear()

    # =========================================================================
    # Inline content
    # =========================================================================

    def _render_text(
        self,
        content: Span,
        first_prefix: str,
        rest_prefix: str,
        ctx: RenderContext,
        base: tuple[Marker, ...] = (),
    ) -> int:
        """Wrap inline content into lines. Returns the widest line's text width."""
        fragments: list[Fragment] = []
        self._flatten(content, base, ctx, fragments)
        cells = self._cells(self._words(fragments), ctx)
        return self._wrap(cells, first_prefix, rest_prefix, ctx)

    def _flatten(
        self,
        span: Span,
        styles: tuple[Marker, ...],
        ctx: RenderContext,
        out: list[Fragment],
    ) -> None:
        match span:
            case PlainText():
                out.append((span.content, styles))
            case Styled():
                inner = (*styles, span.style)
                for child in span.children:
                    self._flatten(child, inner, ctx, out)
            case Link():
                inner = (*styles, ctx.hyperlink(span.href)) if ctx.osc8 else styles
                for child in span.children:
                    self._flatten(child, inner, ctx, out)
                if ctx.config.link_footnotes and not (
                    ctx.config.skip_mailto_footnotes and _shows_mailto_address(span)
                ):
                    out.append((f"[{ctx.link_index(span.href)}]", styles))
            case Sequence():
                for child in span.children:
                    self._flatten(child, styles, ctx, out)
            case _:
                raise TypeError(f"not a span: {type(span).__name__}")

    def _words(self, fragments: list[Fragment]) -> list[list[Fragment]]:
        """Group fragments into words; whitespace only separates."""
        words: list[list[Fragment]] = []
        current: list[Fragment] = []
        for text, styles in fragments:
            for part in split_words(text):
                if part == " ":
                    if current:
                        words.append(current)
                        current = []
                else:
                    current.append((part, styles))
        if current:
            words.append(current)
        return words

    def _cells(self, words: list[list[Fragment]], ctx: RenderContext) -> list[Cell]:
        """Attach style markers to each word.

        Styles the next word starts with stay open after this word; all
        others are closed at its end.
        """
        ansi = ctx.config.ansi
        cells: list[Cell] = []
        stack: list[Marker] = []
        for index, word in enumerate(words):
            carried = tuple(stack)
            parts: list[str] = []
            for text, styles in word:
                keep = _shared_depth(stack, styles)
                while len(stack) > keep:
                    _pop_style(stack, parts, ansi)
                for style in styles[keep:]:
                    stack.append(style)
                    parts.append(_open_marker(style, ansi))
                parts.append(text)

            upcoming = words[index + 1][0][1] if index + 1 < len(words) else ()
            keep = _shared_depth(stack, upcoming)
            while len(stack) > keep:
                _pop_style(stack, parts, ansi)

            text = "".join(parts)
            cells.append(Cell(text, visible_len(text), carried))
        return cells

    def _wrap(
        self, cells: list[Cell], first_prefix: str, rest_prefix: str, ctx: RenderContext
    ) -> int:
        """Greedy-wrap cells into ctx.lines. Returns the widest line's text width."""
        ansi = ctx.config.ansi
        width = ctx.config.width

        if not cells:
            ctx.lines.append(first_prefix.rstrip())
            return 0

        prefix = first_prefix
        limit = max(1, width - visible_len(prefix))
        parts: list[str] = []
        used = 0
        widest = 0
        for cell in cells:
            if used > 0 and used + 1 + cell.width > limit:
                line = "".join(parts)
                if ansi:
                    line = _close_line(line, cell.carried)
                ctx.lines.append(prefix + line)
                widest = max(widest, used)

                prefix = rest_prefix
                limit = max(1, width - visible_len(prefix))
                parts = []
                used = 0
                if ansi:
                    parts.append(_reopen(cell.carried))
            if used > 0:
                parts.append(" ")
                used += 1
            parts.append(cell.text)
            used += cell.width

        ctx.lines.append(prefix + "".join(parts))
        return max(widest, used)


def _shared_depth(stack: list[Marker], styles: tuple[Marker, ...]) -> int:
    """Length of the common prefix of the open stack and styles."""
    depth = 0
    for open_style, style in zip(stack, styles):
        if open_style is not style:
            break
        depth += 1
    return depth


def _open_marker(style: Marker, ansi: bool) -> str:
    if isinstance(style, Hyperlink):
        return style.start
    if ansi and style in SGR_CODES:
        return f"{ESC}{SGR_CODES[style]}m"
    return ASCII_SIGILS[style][0]


def _pop_style(stack: list[Marker], parts: list[str], ansi: bool) -> None:
    """Close the innermost open style."""
    style = stack.pop()
    if isinstance(style, Hyperlink):
        parts.append(OSC8_END)
    elif ansi and style in SGR_CODES:
        parts.append(RESET)
        parts.append(_replay(stack))
    else:
        parts.append(ASCII_SIGILS[style][1])


def _replay(styles: list[Marker] | tuple[Marker, ...]) -> str:
    """SGR sequence re-entering styles, outermost first."""
    return "".join(f"{ESC}{SGR_CODES[style]}m" for style in styles if style in SGR_CODES)


def _reopen(carried: tuple[Marker, ...]) -> str:
    """Hyperlinks and SGR codes open at the start of a continuation line."""
    return "".join(
        style.start if isinstance(style, Hyperlink) else f"{ESC}{SGR_CODES[style]}m"
        for style in carried
        if isinstance(style, Hyperlink) or style in SGR_CODES
    )


def _close_line(line: str, carried: tuple[Marker, ...]) -> str:
    """Terminate a line flushed while carried is still open.

    A line whose last cell already reset and replayed the carried styles
    drops that replay instead of resetting a second time.
    """
    replay = _replay(carried)
    if replay:
        if line.endswith(RESET + replay):
            line = line[: -len(replay)]
        else:
            line += RESET
    hyperlinks = sum(1 for style in carried if isinstance(style, Hyperlink))
    return line + OSC8_END * hyperlinks


def _shows_mailto_address(link: Link) -> bool:
    """True for a ``mailto:`` link whose text is exactly its address."""
    if not link.href.startswith(MAILTO):
        return False
    text = plain_text(link).strip()
    return bool(text) and text == link.href[len(MAILTO) :].strip()


def render_terminal(
    document: Document,
    width: int = 80,
    ansi: bool = False,
    *,
    link_footnotes: bool = True,
    osc8_hyperlinks: bool = False,
    skip_mailto_footnotes: bool = False,
    link_references_in_place: bool = False,
) -> str:
    """Render document as fixed-width terminal text.

    Args:
        document: Document to render
        width: Total output width in columns (>= 1)
        ansi: Use ANSI SGR escapes instead of ASCII sigils
        link_footnotes: Number links and list their targets
        osc8_hyperlinks: Make links clickable with OSC 8 (ANSI mode only)
        skip_mailto_footnotes: No footnote for a mailto link showing its address
        link_references_in_place: List targets under the paragraph that
            introduced them, inside its container

    Raises:
        RenderError: If width < 1

    Example:
        >>> from ftml import parse
        >>> print(render_terminal(parse("<ul><li><p>one</p></li><li><p>two</p></li></ul>")), end="")
        - one
        - two

    """
    config = RenderConfig(
        width=width,
        ansi=ansi,
        link_footnotes=link_footnotes,
        osc8_hyperlinks=osc8_hyperlinks,
        skip_mailto_footnotes=skip_mailto_footnotes,
        link_references_in_place=link_references_in_place,
    )
    return TerminalRenderer(config).render(document)


__all__ = ["RenderContext", "TerminalRenderer", "render_terminal"]
