"""Document serialization: JSON round-trip for FTML nodes.

Converts document nodes to/from JSON-compatible dicts. Useful for:
- Caching parsed documents to disk
- Handing documents to tools that do not speak FTML
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from ftml import parse
    from ftml.serialization import to_json, from_json

    doc = parse("<h1>Hello <b>World</b></h1>")
    json_str = to_json(doc)
    restored = from_json(json_str)
    assert doc == restored

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any, TypeAlias

from ftml.nodes import (
    Blockquote,
    Document,
    Heading,
    Link,
    List,
    ListItem,
    PlainText,
    Sequence,
    Style,
    Styled,
    Text,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type] = {
    "Document": Document,
    "Text": Text,
    "Heading": Heading,
    "List": List,
    "ListItem": ListItem,
    "Blockquote": Blockquote,
    "PlainText": PlainText,
    "Styled": Styled,
    "Link": Link,
    "Sequence": Sequence,
}

_NODE_CLASSES = tuple(_NODE_TYPES.values())

Node: TypeAlias = (
    Document | Text | Heading | List | ListItem | Blockquote | PlainText | Styled | Link | Sequence
)


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.
    Styles are stored by their value (``"bold"``, ``"code"``, ...).

    Args:
        node: Any FTML document node.

    Returns:
        Dict with ``_type`` and all node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}

    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, _NODE_CLASSES):
        return to_dict(value)
    if isinstance(value, Style):
        return value.value
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a typed node from a dict.

    Node constructors run as usual, so a dict describing an invalid
    document raises InvariantError.

    Args:
        data: Dict with ``_type`` and node fields (as produced by to_dict).

    Returns:
        Typed node (frozen dataclass).

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized node"
        raise ValueError(msg)

    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name == "style":
            kwargs[f.name] = Style(raw)
        else:
            kwargs[f.name] = _deserialize_value(raw)

    return node_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Serialize a Document to a JSON string.

    Output is deterministic (sorted keys) for cache-key stability.

    Args:
        doc: Document to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent)


def from_json(data: str) -> Document:
    """Deserialize a Document from a JSON string.

    Args:
        data: JSON string (as produced by to_json).

    Returns:
        Document node.

    Raises:
        ValueError: If the JSON doesn't represent a Document.

    """
    raw = json.loads(data)
    node = from_dict(raw)
    if not isinstance(node, Document):
        msg = f"Expected Document, got {type(node).__name__}"
        raise ValueError(msg)
    return node


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
