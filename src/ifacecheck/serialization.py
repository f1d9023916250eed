"""Serialization of descriptor trees and suites to JSON-compatible data.

Every node serializes as a dict with a "tag" field naming its kind plus one
entry per dataclass field, so suites can be produced by an external
generator and loaded here:

    {"tag": "iface", "bases": [], "props": [
        {"tag": "prop", "name": "size", "type": {"tag": "name", "name": "number"},
         "optional": false}
    ], "index_type": null}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import MISSING as MISSING_FIELD
from dataclasses import fields
from typing import Any

from ifacecheck.types import BasicType, EnumType, TNode, TType

_TAG_KEY = "tag"
_MAX_TAGS_IN_ERROR = 10  # Maximum number of tags to show in error messages


def to_dict(node: TNode) -> dict[str, Any]:
    """Serialize a descriptor node to a dictionary.

    Raises:
        ValueError: If the node is a basic type (those are referenced by name)

    """
    if isinstance(node, BasicType):
        msg = f"Cannot serialize basic type '{node.name}'; reference it by name"
        raise ValueError(msg)
    if isinstance(node, EnumType):
        return {_TAG_KEY: node.tag, "members": dict(node.members)}
    result: dict[str, Any] = {_TAG_KEY: node.tag}
    for field in fields(node):
        result[field.name] = _serialize_value(getattr(node, field.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, TNode):
        return to_dict(value)
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    return value


def from_dict(data: Mapping[str, Any]) -> TNode:
    """Deserialize a descriptor node from a dictionary.

    Raises:
        KeyError: If the required 'tag' field is missing
        ValueError: If the tag is not recognized or a required field is missing

    """
    if _TAG_KEY not in data:
        msg = f"Missing required '{_TAG_KEY}' field in data"
        raise KeyError(msg)

    tag = data[_TAG_KEY]
    node_cls = TNode.registry.get(tag)
    if node_cls is None or node_cls is BasicType:
        available = [t for t in TNode.registry if t != BasicType.tag]
        suffix = "..." if len(available) > _MAX_TAGS_IN_ERROR else ""
        msg = f"Unknown tag '{tag}'. Available tags: {available[:_MAX_TAGS_IN_ERROR]}{suffix}"
        raise ValueError(msg)

    if node_cls is EnumType:
        if not isinstance(data.get("members"), Mapping):
            msg = "Enum data requires a 'members' object"
            raise ValueError(msg)
        return EnumType(members=tuple(data["members"].items()))

    field_values = {
        field.name: _deserialize_value(data[field.name])
        for field in fields(node_cls)
        if field.name in data
    }
    missing = [
        field.name
        for field in fields(node_cls)
        if field.name not in data
        and field.default is MISSING_FIELD
        and field.default_factory is MISSING_FIELD
    ]
    if missing:
        msg = f"Missing required field(s) {missing} for tag '{tag}'"
        raise ValueError(msg)
    return node_cls(**field_values)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, Mapping) and _TAG_KEY in value:
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def suite_to_dict(suite: Mapping[str, TType]) -> dict[str, Any]:
    return {type_name: to_dict(ttype) for type_name, ttype in suite.items()}


def suite_from_dict(data: Mapping[str, Any]) -> dict[str, TType]:
    """Deserialize a suite, checking that every entry is a type."""
    suite: dict[str, TType] = {}
    for type_name, node_data in data.items():
        node = from_dict(node_data)
        if not isinstance(node, TType):
            msg = f"Suite entry '{type_name}' is a {node.tag}, not a type"
            raise ValueError(msg)
        suite[type_name] = node
    return suite


def to_json(suite: Mapping[str, TType], *, indent: int | None = 2) -> str:
    """Serialize a suite to a JSON string.

    Args:
        suite: Mapping of type name to descriptor
        indent: JSON indentation level (default 2, None for compact)

    Returns:
        JSON string representation

    """
    return json.dumps(suite_to_dict(suite), indent=indent)


def from_json(s: str) -> dict[str, TType]:
    """Deserialize a suite from a JSON string.

    Raises:
        json.JSONDecodeError: If the string is not valid JSON
        ValueError: If the JSON is not an object of tagged descriptors

    """
    data = json.loads(s)
    if not isinstance(data, dict):
        msg = "Expected JSON object mapping type names to descriptors"
        raise ValueError(msg)
    return suite_from_dict(data)
