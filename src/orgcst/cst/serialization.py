#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/cst/serialization.py
"""Dictionary, JSON and structural views of a CST.

The JSON format preserves every node kind, span, property and child, so a
tree survives the trip CST → JSON → CST unchanged. The structural view drops
what canonicalization is allowed to change (spans, syntax tokens and
formatting-only properties) and is what idempotence is checked against.

Examples
--------
Serialize a CST to JSON:

    >>> from orgcst import parse
    >>> from orgcst.cst.serialization import cst_to_json, json_to_cst
    >>> doc = parse("* A\\n")
    >>> json_str = cst_to_json(doc, indent=2)
    >>> json_to_cst(json_str) == doc
    True

Compare structure:

    >>> structurally_equal(parse("*  A\\n"), parse("* A"))
    True

"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from typing import Any, Hashable

from orgcst.cst.nodes import NODE_CLASSES_BY_KIND, AffiliatedKeyword, Node, Span, Token

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _serialize_value(value: Any) -> Any:
    if isinstance(value, AffiliatedKeyword):
        return {"key": value.key, "value": value.value, "option": value.option}
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    return value


def cst_to_dict(node: Node) -> dict[str, Any]:
    """Convert a CST node to a dictionary representation.

    Parameters
    ----------
    node : Node
        The node to convert

    Returns
    -------
    dict
        ``kind``, ``span``, the node properties and ``children``

    Examples
    --------
    >>> cst_to_dict(PlainText(Span(0, 2), value="hi"))
    {'kind': 'plain_text', 'span': [0, 2], 'value': 'hi', 'children': []}

    """
    # Iterative post-order so that deep trees do not exhaust the call stack
    results: dict[int, dict[str, Any]] = {}
    stack: list[tuple[Node, bool]] = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if not expanded:
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(current.children))
            continue
        result: dict[str, Any] = {"kind": current.kind, "span": [current.span.start, current.span.end]}
        for name, value in current.properties.items():
            result[name] = _serialize_value(value)
        result["children"] = [results.pop(id(child)) for child in current.children]
        results[id(current)] = result
    return results[id(node)]


def _deserialize_properties(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for field in fields(cls):
        if field.name in ("span", "children") or field.name not in data:
            continue
        value = data[field.name]
        if field.name == "affiliated":
            value = tuple(AffiliatedKeyword(**item) for item in value)
        elif isinstance(value, list):
            value = tuple(value)
        kwargs[field.name] = value
    return kwargs


def dict_to_cst(data: dict[str, Any]) -> Node:
    """Convert a dictionary representation back to a CST node.

    Parameters
    ----------
    data : dict
        Dictionary produced by ``cst_to_dict``

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValueError
        If the dictionary has no ``kind`` or an unknown one

    """
    kind = data.get("kind")
    if not kind:
        raise ValueError("Dictionary must contain a 'kind' field")
    cls = NODE_CLASSES_BY_KIND.get(kind)
    if cls is None:
        raise ValueError(f"Unknown node kind: {kind}")
    start, end = data["span"]
    children = tuple(dict_to_cst(child) for child in data.get("children", ()))
    return cls(Span(start, end), children=children, **_deserialize_properties(cls, data))


def cst_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a CST node to a JSON string with a schema version.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON text of the form ``{"schema_version": 1, "kind": ..., ...}``

    """
    versioned = {"schema_version": SCHEMA_VERSION, **cst_to_dict(node)}
    return json.dumps(versioned, indent=indent, ensure_ascii=False)


def json_to_cst(json_str: str) -> Node:
    """Deserialize a JSON string produced by ``cst_to_json``.

    Raises
    ------
    ValueError
        If the schema version is unsupported or a node kind is unknown
    json.JSONDecodeError
        If the JSON text is malformed

    """
    data = json.loads(json_str)
    version = data.pop("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {version}")
    return dict_to_cst(data)


def structure(node: Node) -> tuple[Hashable, ...]:
    """Return the structural projection of a node.

    The projection is a nested tuple of ``(kind, properties, children)``
    where properties are the structural properties sorted by name and
    children are the projections of every non-token child. Spans, tokens
    and formatting-only properties are left out, and CRLF terminators inside
    string properties compare equal to LF.
    """
    properties = tuple(
        sorted(
            (name, value.replace("\r\n", "\n") if isinstance(value, str) else value)
            for name, value in node.structural_properties.items()
        )
    )
    children = tuple(structure(child) for child in node.children if not isinstance(child, Token))
    return node.kind, properties, children


def structurally_equal(left: Node, right: Node) -> bool:
    """Whether two trees have the same shape and structural properties.

    Examples
    --------
        >>> structurally_equal(parse("#+title: A\\n"), parse("#+TITLE: A\\n"))
        True

    """
    equal = structure(left) == structure(right)
    if not equal:
        logger.debug("Trees rooted at %s and %s differ structurally", left.kind, right.kind)
    return equal
