"""FTML tag vocabulary and grammar tables.

The vocabulary is fixed. The parser consults these tables to decide
whether a tag is known and which kind of element it opens; the canonical
writer uses the reverse style map to emit tags for Styled spans.

Tag Kinds:
- Leaf blocks (p, h1-h3): hold inline content
- Lists (ul, ol): hold li items
- Items (li): hold paragraphs
- Quotes (blockquote): hold paragraphs
- Inline styles (b, i, u, s, mark, code): hold inline content
- Links (a): hold inline content, require ``href``

"""

from types import MappingProxyType

from ftml.nodes import Style

LEAF_BLOCK_TAGS: frozenset[str] = frozenset({"p", "h1", "h2", "h3"})
LIST_TAGS: frozenset[str] = frozenset({"ul", "ol"})
ITEM_TAG = "li"
QUOTE_TAG = "blockquote"
LINK_TAG = "a"
HREF = "href"

BLOCK_TAGS: frozenset[str] = LEAF_BLOCK_TAGS | LIST_TAGS | {QUOTE_TAG}

HEADING_LEVELS: MappingProxyType[str, int] = MappingProxyType({"h1": 1, "h2": 2, "h3": 3})

INLINE_STYLE_TAGS: MappingProxyType[str, Style] = MappingProxyType(
    {
        "b": Style.BOLD,
        "i": Style.ITALIC,
        "u": Style.UNDERLINE,
        "s": Style.STRIKE,
        "mark": Style.HIGHLIGHT,
        "code": Style.CODE,
    }
)

# Reverse map for the writer
STYLE_TAGS: MappingProxyType[Style, str] = MappingProxyType(
    {style: tag for tag, style in INLINE_STYLE_TAGS.items()}
)

INLINE_TAGS: frozenset[str] = frozenset(INLINE_STYLE_TAGS) | {LINK_TAG}

VOCABULARY: frozenset[str] = BLOCK_TAGS | {ITEM_TAG} | INLINE_TAGS

# Attributes the writer emits before all others
PRIORITY_ATTRIBUTES: tuple[str, ...] = (HREF,)


def is_known(tag: str) -> bool:
    """True if tag belongs to the FTML vocabulary."""
    return tag in VOCABULARY


def heading_tag(level: int) -> str:
    """Tag name for a heading level (1-3)."""
    return f"h{level}"


def ordered_attributes(attributes: dict[str, str]) -> list[tuple[str, str]]:
    """Attributes in canonical order: ``href`` first, then alphabetical.

    Example:
        >>> ordered_attributes({"title": "t", "href": "/x", "class": "c"})
        [('href', '/x'), ('class', 'c'), ('title', 't')]

    """
    first = [(name, attributes[name]) for name in PRIORITY_ATTRIBUTES if name in attributes]
    rest = sorted(
        (name, value) for name, value in attributes.items() if name not in PRIORITY_ATTRIBUTES
    )
    return first + rest


__all__ = [
    "BLOCK_TAGS",
    "HEADING_LEVELS",
    "HREF",
    "INLINE_STYLE_TAGS",
    "INLINE_TAGS",
    "ITEM_TAG",
    "LEAF_BLOCK_TAGS",
    "LINK_TAG",
    "LIST_TAGS",
    "QUOTE_TAG",
    "STYLE_TAGS",
    "VOCABULARY",
    "heading_tag",
    "is_known",
    "ordered_attributes",
]
