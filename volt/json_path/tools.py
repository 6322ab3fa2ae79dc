"""
JSON helpers for response bodies.

Formatting, validation and metadata used by the response viewer and by
bulk path extraction.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .resolver import Found, JSONValue, canonical_json, parse_json, resolve


@dataclass
class JsonInfo:
    """Size and shape metadata for a JSON document."""
    valid: bool
    size: int
    type: str | None = None
    depth: int | None = None
    keys: int | None = None
    length: int | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.valid:
            return {"valid": False, "size": self.size}
        return {
            "valid": True,
            "size": self.size,
            "type": self.type,
            "depth": self.depth,
            "keys": self.keys,
            "length": self.length,
        }


def format_json(text: str) -> str:
    """Pretty-print JSON with a 2-space indent; invalid input is returned as-is."""
    try:
        value = parse_json(text)
    except ValueError:
        return text
    return json.dumps(value, indent=2, ensure_ascii=False)


def minify_json(text: str) -> str:
    """Strip insignificant whitespace; invalid input is returned as-is."""
    try:
        value = parse_json(text)
    except ValueError:
        return text
    return canonical_json(value)


def is_valid_json(text: str) -> bool:
    try:
        parse_json(text)
    except ValueError:
        return False
    return True


def json_type_name(value: JSONValue) -> str:
    """JSON type name of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def json_depth(value: JSONValue) -> int:
    """Nesting depth; scalars are 0, an empty container is 1."""
    deepest = 0
    stack = [(value, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            continue
        deepest = max(deepest, depth + 1)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def json_info(text: str) -> JsonInfo:
    """
    Describe a JSON document without returning its content.

    ``size`` is the UTF-8 byte length of the text, reported even when the
    text is not valid JSON.
    """
    size = len(text.encode("utf-8"))
    try:
        value = parse_json(text)
    except ValueError:
        return JsonInfo(valid=False, size=size)

    return JsonInfo(
        valid=True,
        size=size,
        type=json_type_name(value),
        depth=json_depth(value),
        keys=len(value) if isinstance(value, dict) else 0,
        length=len(value) if isinstance(value, list) else 0,
    )


def extract_json(text: str, path: str) -> str:
    """Serialized value at ``path``, or ``"undefined"`` if it cannot be resolved."""
    try:
        value = parse_json(text)
    except ValueError:
        return "undefined"

    resolution = resolve(value, path)
    if isinstance(resolution, Found):
        return canonical_json(resolution.value)
    return "undefined"


def extract_json_batch(text: str, paths: list[str]) -> dict[str, JSONValue]:
    """
    Resolve several paths against one parse of ``text``.

    Only paths that resolve appear in the result. Invalid JSON yields an
    empty mapping.
    """
    try:
        value = parse_json(text)
    except ValueError:
        return {}

    results: dict[str, JSONValue] = {}
    for path in paths:
        resolution = resolve(value, path)
        if isinstance(resolution, Found):
            results[path] = resolution.value
    return results
