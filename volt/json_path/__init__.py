"""
JSON Path Resolution

This package provides safe dot/bracket path traversal over parsed JSON
plus the helpers built on it (formatting, validation, bulk extraction).

Path grammar:
    - Segments are separated by "."
    - A segment may end in "[N]" to index into an array member
    - An empty path addresses the whole document

Usage:
    from volt.json_path import parse_json, resolve, Found, NOT_FOUND

    doc = parse_json('{"data": {"users": [{"name": "john"}]}}')

    result = resolve(doc, "data.users[0].name")
    if isinstance(result, Found):
        print(result.value)   # john

    resolve(doc, "data.missing") is NOT_FOUND   # True
"""

# Resolver
from .resolver import (
    NOT_FOUND,
    Found,
    JSONValue,
    NotFound,
    PathSegment,
    Resolution,
    canonical_json,
    parse_index,
    parse_json,
    parse_path,
    resolve,
    resolve_segments,
    stringify_value,
)

# Tools
from .tools import (
    JsonInfo,
    extract_json,
    extract_json_batch,
    format_json,
    is_valid_json,
    json_info,
    minify_json,
)

__all__ = [
    # Resolver
    "NOT_FOUND",
    "Found",
    "JSONValue",
    "NotFound",
    "PathSegment",
    "Resolution",
    "canonical_json",
    "parse_index",
    "parse_json",
    "parse_path",
    "resolve",
    "resolve_segments",
    "stringify_value",
    # Tools
    "JsonInfo",
    "extract_json",
    "extract_json_batch",
    "format_json",
    "is_valid_json",
    "json_info",
    "minify_json",
]
