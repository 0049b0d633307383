"""Output serialization: JSON round-trip for grammar output.

Converts node sequences to/from JSON-compatible structures. Useful for:
- Inspecting what a grammar produced before rendering
- Golden-file tests of parse output
- Caching parses on disk

A sequence serializes to a list whose items are either plain strings
(literal TeX) or dicts with a ``_type`` discriminator. Output is
deterministic (sorted keys).

Example:
    from chemtex import parse
    from chemtex.serialization import to_json, from_json

    nodes = parse("H2O", "equation")
    assert from_json(to_json(nodes)) == nodes

Thread Safety:
    All functions are pure: safe to call from any thread.

"""

import json
from collections.abc import Sequence
from dataclasses import fields
from enum import Enum
from typing import Any

from chemtex.nodes import (
    Arrow,
    Bond,
    ChemFive,
    Color,
    Color0,
    CommaEnumeration,
    FirstLevelEscape,
    Frac,
    FracCe,
    Mark,
    MarkKind,
    Node,
    Operator,
    Overset,
    Parse,
    Parsed,
    PuFrac,
    Rm,
    RomanNumeral,
    StateOfAggregation,
    TexMath,
    Text,
    Underbrace,
    Underset,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Arrow,
        Bond,
        ChemFive,
        Color,
        Color0,
        CommaEnumeration,
        FirstLevelEscape,
        Frac,
        FracCe,
        Mark,
        Operator,
        Overset,
        PuFrac,
        Rm,
        RomanNumeral,
        StateOfAggregation,
        TexMath,
        Text,
        Underbrace,
        Underset,
    )
}


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.
    Nested sub-parses become lists.

    Args:
        node: Any chemtex output node.

    Returns:
        Dict with ``_type`` and all node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}
    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, bool, None
    return value


def to_list(nodes: Sequence[Parsed]) -> list[Any]:
    """Convert a node sequence to a JSON-compatible list."""
    return [_serialize_value(item) for item in nodes]


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a node from a dict.

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
        if f.name in data:
            kwargs[f.name] = _deserialize_value(data[f.name])
    if node_cls is Mark:
        kwargs["kind"] = MarkKind(kwargs["kind"])
    return node_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def from_list(data: list[Any]) -> Parse:
    """Reconstruct a node sequence from a list produced by to_list."""
    return tuple(_deserialize_value(item) for item in data)


def to_json(nodes: Sequence[Parsed], *, indent: int | None = None) -> str:
    """Serialize a node sequence to a JSON string.

    Args:
        nodes: Grammar output.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(to_list(nodes), sort_keys=True, indent=indent)


def from_json(data: str) -> Parse:
    """Deserialize a node sequence from a JSON string.

    Raises:
        ValueError: If the JSON is not a list of strings and nodes.

    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a list, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_list(raw)


__all__ = ["from_dict", "from_json", "from_list", "to_dict", "to_json", "to_list"]
