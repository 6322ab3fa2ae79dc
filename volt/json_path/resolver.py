"""
JSON path resolution for parsed response bodies.

This module implements the dot/bracket path language used by assertions
and extraction rules:

    data.users[0].name
    items[2]
    token

Segments are separated by ``.``; a segment may end in ``[N]`` to index
into an array held by the named member. Resolution never raises: every
navigation failure yields the ``NOT_FOUND`` sentinel, which is distinct
from a JSON ``null`` that is actually present in the document.
"""

from __future__ import annotations

import json
import math
import re
import sys
from dataclasses import dataclass
from typing import Any, Union

# A parsed JSON value: dict, list, str, int, float, bool or None.
JSONValue = Any

_INDEXED_SEGMENT = re.compile(r"(.+)\[([0-9]+)\]")

# Floats at or above this magnitude keep exponent notation
_EXPONENT_THRESHOLD = 1e21


# ─────────────────────────────────────────────────────────────────────────────
# Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Found:
    """A path that resolved to a value (which may itself be ``None``)."""
    value: JSONValue


class NotFound:
    """Sentinel type for a path that did not resolve."""

    _instance: NotFound | None = None

    def __new__(cls) -> NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Resolution = Union[Found, NotFound]


@dataclass(frozen=True)
class PathSegment:
    """One step of a path: a member name, optionally followed by an index."""
    key: str
    index: int | None = None

    def __str__(self) -> str:
        if self.index is None:
            return self.key
        return f"{self.key}[{self.index}]"


# ─────────────────────────────────────────────────────────────────────────────
# Parsing and Serialization
# ─────────────────────────────────────────────────────────────────────────────

def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _json_number(text: str) -> int | float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {text}")
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return int(value)
    return value


def parse_index(digits: str) -> int:
    """Array index from ASCII digits; indexes too long to convert can never be in range."""
    try:
        return int(digits)
    except ValueError:
        return sys.maxsize


def parse_json(text: str) -> JSONValue:
    """
    Parse JSON text strictly.

    ``NaN``/``Infinity`` literals and numbers that overflow to infinity
    are rejected so every parsed value can be serialized back. Integral
    fractional literals such as ``10.0`` parse as integers, so they
    serialize as ``10``. Nesting too deep for the decoder is reported as
    invalid JSON.

    Raises:
        ValueError: If the text is not valid JSON
    """
    try:
        return json.loads(text, parse_float=_json_number, parse_constant=_reject_constant)
    except RecursionError:
        raise ValueError("Invalid JSON: nesting too deep") from None


def canonical_json(value: JSONValue) -> str:
    """Serialize a value compactly, keeping member order and non-ASCII text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def stringify_value(value: JSONValue) -> str:
    """String form of a resolved value: strings raw, everything else as JSON."""
    if isinstance(value, str):
        return value
    return canonical_json(value)


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """
    Split a path into segments.

    An empty path has no segments and therefore addresses the root.
    """
    if not path:
        return ()

    segments = []
    for part in path.split("."):
        match = _INDEXED_SEGMENT.fullmatch(part)
        if match:
            segments.append(PathSegment(key=match.group(1), index=parse_index(match.group(2))))
        else:
            segments.append(PathSegment(key=part))
    return tuple(segments)


# ─────────────────────────────────────────────────────────────────────────────
# Resolution
# ─────────────────────────────────────────────────────────────────────────────

def resolve_segments(value: JSONValue, segments: tuple[PathSegment, ...]) -> Resolution:
    """Walk pre-parsed segments from ``value``."""
    current = value
    for segment in segments:
        if not isinstance(current, dict) or segment.key not in current:
            return NOT_FOUND
        current = current[segment.key]

        if segment.index is not None:
            if not isinstance(current, list) or segment.index >= len(current):
                return NOT_FOUND
            current = current[segment.index]

    return Found(current)


def resolve(value: JSONValue, path: str) -> Resolution:
    """
    Resolve a dot/bracket path against a parsed JSON value.

    Args:
        value: The parsed JSON document
        path: Path expression such as ``data.items[0].id``

    Returns:
        ``Found(value)`` when every segment resolves, otherwise ``NOT_FOUND``

    Example:
        >>> resolve({"data": {"items": [{"id": 7}]}}, "data.items[0].id")
        Found(value=7)
        >>> resolve({"data": {}}, "data.items[0]")
        NOT_FOUND
    """
    return resolve_segments(value, parse_path(path))
