"""Text processing utilities for FTML.

Canonical implementations of the escaping, entity decoding and whitespace
rules shared by the scanner, the canonical writer and the terminal renderer.

Example:
    >>> from ftml.utils.text import escape_text, visible_len
    >>> escape_text("a < b & c")
    'a &lt; b &amp; c'
    >>> visible_len("\\x1b[1mbold\\x1b[0m")
    4
"""

from __future__ import annotations

import re

# HTML's definition of whitespace. Unicode spaces such as U+00A0 are content.
WHITESPACE = " \t\n\r\f"

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")
# SGR codes and OSC 8 hyperlink sequences (ST-terminated)
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m|\x1b\]8;[^\x1b]*\x1b\\")
_ENTITY = re.compile(r"&(#?[A-Za-z0-9]+);")

ENTITIES: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
}


def is_blank(text: str) -> bool:
    """True if text is empty or consists only of HTML whitespace."""
    return not text.strip(WHITESPACE)


def collapse_whitespace(text: str) -> str:
    """Collapse every run of HTML whitespace into a single space.

    Examples:
        >>> collapse_whitespace("Hello\\n   world")
        'Hello world'
        >>> collapse_whitespace("a\\u00a0 b")
        'a\\xa0 b'
    """
    return _WHITESPACE_RUN.sub(" ", text)


def split_words(text: str) -> list[str]:
    """Split text on HTML whitespace, keeping separators as " " items.

    Examples:
        >>> split_words("one  two")
        ['one', ' ', 'two']
        >>> split_words(" x")
        [' ', 'x']
    """
    parts: list[str] = []
    pos = 0
    for match in _WHITESPACE_RUN.finditer(text):
        if match.start() > pos:
            parts.append(text[pos : match.start()])
        parts.append(" ")
        pos = match.end()
    if pos < len(text):
        parts.append(text[pos:])
    return parts


def find_unknown_entity(text: str) -> re.Match[str] | None:
    """Return the first ``&name;`` sequence that is not a known entity."""
    for match in _ENTITY.finditer(text):
        if match.group(1) not in ENTITIES:
            return match
    return None


def decode_entities(text: str) -> str:
    """Decode the five XML-safe entities; leave anything else literal.

    Decoding is single-pass, so ``&amp;lt;`` becomes ``&lt;``, not ``<``.

    Examples:
        >>> decode_entities("&lt;b&gt; &amp;amp; &nbsp;")
        '<b> &amp; &nbsp;'
    """
    if "&" not in text:
        return text
    return _ENTITY.sub(lambda m: ENTITIES.get(m.group(1), m.group(0)), text)


def escape_text(text: str) -> str:
    """Escape text content: ``&``, ``<`` and ``>``."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes."""
    return escape_text(value).replace('"', "&quot;")


def strip_ansi(text: str) -> str:
    """Remove ``ESC[...m`` and OSC 8 hyperlink sequences."""
    return _ANSI_ESCAPE.sub("", text)


def visible_len(text: str) -> int:
    """Column width of text: Unicode scalar count, escape sequences excluded.

    No grapheme-cluster or East-Asian width handling.
    """
    if "\x1b" not in text:
        return len(text)
    return len(strip_ansi(text))
