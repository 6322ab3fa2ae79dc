"""
Accelerated evaluation kernel.

Loaded on demand by ``volt.accel.loader``. Differs from the reference
modules in how the work is done, not in what it returns:

- ``evaluate_batch`` parses the response body as JSON at most once per
  call and shares the parsed document across every ``bodyJson``
  assertion in the batch.
- Path segments and user regexes are compiled once and cached.
- Operator semantics and messages are table driven.

Results must be identical, element for element, to the reference tier.
"""

from __future__ import annotations

import logging
import operator
import re
from functools import lru_cache
from typing import Any, Callable, Mapping

from ..assertions import (
    Assertion,
    AssertionResult,
    AssertionType,
    BodyContainsOperator,
    BodyJsonOperator,
    HeaderEqualsOperator,
    HeaderExistsOperator,
    ResponseTimeOperator,
    StatusOperator,
)
from ..extraction import ExtractionConfig, ExtractionType
from ..json_path import (
    NOT_FOUND,
    Found,
    JSONValue,
    Resolution,
    canonical_json,
    parse_index,
    parse_json,
    stringify_value,
)
from ..response import ResponseData

logger = logging.getLogger(__name__)

KERNEL_VERSION = "1"

_TEMPLATE = re.compile(r"\{\{([^}]+)\}\}")
_INDEXED = re.compile(r"(.+)\[([0-9]+)\]")
_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")
_PREVIEW_LENGTH = 100

_SKIPPED = "Skipped (disabled)"


# ─────────────────────────────────────────────────────────────────────────────
# Compiled caches
# ─────────────────────────────────────────────────────────────────────────────

@lru_cache(maxsize=1024)
def _segments(path: str) -> tuple[tuple[str, int | None], ...]:
    if not path:
        return ()
    compiled = []
    for part in path.split("."):
        match = _INDEXED.fullmatch(part)
        if match:
            compiled.append((match.group(1), parse_index(match.group(2))))
        else:
            compiled.append((part, None))
    return tuple(compiled)


@lru_cache(maxsize=256)
def _pattern(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except (re.error, OverflowError):
        return None


def _walk(document: JSONValue, path: str) -> Resolution:
    current = document
    for key, index in _segments(path):
        if not isinstance(current, dict) or key not in current:
            return NOT_FOUND
        current = current[key]
        if index is not None:
            if not isinstance(current, list) or index >= len(current):
                return NOT_FOUND
            current = current[index]
    return Found(current)


def _to_int(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        return None


class _Document:
    """Lazily parsed response body, shared by one batch."""

    __slots__ = ("_body", "_parsed", "_value")

    def __init__(self, body: str):
        self._body = body
        self._parsed: bool | None = None
        self._value: JSONValue = None

    def get(self) -> tuple[bool, JSONValue]:
        if self._parsed is None:
            try:
                self._value = parse_json(self._body)
                self._parsed = True
            except ValueError:
                self._parsed = False
        return self._parsed, self._value


# ─────────────────────────────────────────────────────────────────────────────
# Operator tables
# ─────────────────────────────────────────────────────────────────────────────

# op -> (compare, result when expected is not an integer, pass message, fail message)
_NumericRule = tuple[Callable[[int, int], bool], bool, str, str]

_STATUS_RULES: dict[Any, _NumericRule] = {
    StatusOperator.EQUALS: (
        operator.eq, False, "Status code is {actual}", "Expected {expected}, got {actual}",
    ),
    StatusOperator.NOT_EQUALS: (
        operator.ne, True, "Status code is not {expected}", "Expected not {expected}, got {actual}",
    ),
    StatusOperator.LESS_THAN: (
        operator.lt, False, "Status code {actual} < {expected}", "Expected < {expected}, got {actual}",
    ),
    StatusOperator.GREATER_THAN: (
        operator.gt, False, "Status code {actual} > {expected}", "Expected > {expected}, got {actual}",
    ),
}

_RESPONSE_TIME_RULES: dict[Any, _NumericRule] = {
    ResponseTimeOperator.LESS_THAN: (
        operator.lt, False,
        "Response time {actual}ms < {expected}ms", "Expected < {expected}ms, got {actual}ms",
    ),
    ResponseTimeOperator.GREATER_THAN: (
        operator.gt, False,
        "Response time {actual}ms > {expected}ms", "Expected > {expected}ms, got {actual}ms",
    ),
}

_BODY_TEXT_RULES: dict[Any, tuple[Callable[[str, str], bool], str, str]] = {
    BodyContainsOperator.CONTAINS: (
        lambda body, expected: expected in body,
        'Body contains "{expected}"', 'Body does not contain "{expected}"',
    ),
    BodyContainsOperator.NOT_CONTAINS: (
        lambda body, expected: expected not in body,
        'Body does not contain "{expected}"', 'Body contains "{expected}"',
    ),
}

_HEADER_PRESENCE_RULES: dict[Any, tuple[bool, str, str]] = {
    HeaderExistsOperator.EXISTS: (
        True, 'Header "{name}" exists', 'Header "{name}" not found',
    ),
    HeaderExistsOperator.NOT_EXISTS: (
        False, 'Header "{name}" does not exist', 'Header "{name}" exists',
    ),
}

_HEADER_VALUE_RULES: dict[Any, tuple[Callable[[str, str], bool], str, str]] = {
    HeaderEqualsOperator.EQUALS: (
        operator.eq,
        'Header "{name}" equals "{expected}"', 'Expected "{expected}", got "{value}"',
    ),
    HeaderEqualsOperator.NOT_EQUALS: (
        operator.ne,
        'Header "{name}" does not equal "{expected}"', 'Expected not "{expected}", got "{value}"',
    ),
    HeaderEqualsOperator.CONTAINS: (
        lambda value, expected: expected in value,
        'Header "{name}" contains "{expected}"', 'Header does not contain "{expected}"',
    ),
}

_JSON_PRESENCE_RULES: dict[Any, tuple[bool, str, str]] = {
    BodyJsonOperator.EXISTS: (
        True, 'Property "{prop}" exists', 'Property "{prop}" does not exist',
    ),
    BodyJsonOperator.NOT_EXISTS: (
        False, 'Property "{prop}" does not exist', 'Property "{prop}" exists',
    ),
}

_JSON_EQUALITY_RULES: dict[Any, tuple[bool, str, str]] = {
    BodyJsonOperator.EQUALS: (
        True, "{prop} equals {expected}", "Expected {expected}, got {actual}",
    ),
    BodyJsonOperator.NOT_EQUALS: (
        False, "{prop} does not equal {expected}", "Expected not {expected}, got {actual}",
    ),
}


# ─────────────────────────────────────────────────────────────────────────────
# Per-type handlers
# ─────────────────────────────────────────────────────────────────────────────

def _numeric(assertion: Assertion, observed: int, actual: str, rules: dict) -> AssertionResult:
    compare, when_invalid, pass_msg, fail_msg = rules[assertion.operator]
    expected = _to_int(assertion.expected)
    passed = when_invalid if expected is None else compare(observed, expected)
    shown = assertion.expected if expected is None else expected
    template = pass_msg if passed else fail_msg
    return AssertionResult(
        assertion.id, passed, actual, template.format(actual=observed, expected=shown)
    )


def _status(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    code = response.status_code
    return _numeric(assertion, code, str(code), _STATUS_RULES)


def _response_time(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    ms = response.timing_ms
    return _numeric(assertion, ms, f"{ms}ms", _RESPONSE_TIME_RULES)


def _body_contains(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    body = response.body
    expected = assertion.expected
    actual = body if len(body) <= _PREVIEW_LENGTH else body[:_PREVIEW_LENGTH] + "..."

    if assertion.operator == BodyContainsOperator.MATCHES:
        pattern = _pattern(expected)
        if pattern is None:
            return AssertionResult(assertion.id, False, actual, f"Invalid regex pattern: {expected}")
        passed = pattern.search(body) is not None
        template = 'Body matches pattern "{expected}"' if passed else 'Body does not match pattern "{expected}"'
    else:
        test, pass_msg, fail_msg = _BODY_TEXT_RULES[assertion.operator]
        passed = test(body, expected)
        template = pass_msg if passed else fail_msg

    return AssertionResult(assertion.id, passed, actual, template.format(expected=expected))


def _body_json(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    ok, value = document.get()
    if not ok:
        return AssertionResult(assertion.id, False, "Invalid JSON", "Response body is not valid JSON")

    prop = assertion.property
    expected = assertion.expected
    resolution = _walk(value, prop)
    found = resolution is not NOT_FOUND
    actual = canonical_json(resolution.value) if found else "undefined"
    op = assertion.operator

    if op in _JSON_PRESENCE_RULES:
        want, pass_msg, fail_msg = _JSON_PRESENCE_RULES[op]
        passed = found is want
    elif op in _JSON_EQUALITY_RULES:
        try:
            expected_json = canonical_json(parse_json(expected))
        except ValueError:
            return AssertionResult(
                assertion.id, False, actual, f"Expected value is not valid JSON: {expected}"
            )
        want, pass_msg, fail_msg = _JSON_EQUALITY_RULES[op]
        passed = (found and actual == expected_json) is want
    else:  # contains
        passed = found and expected in stringify_value(resolution.value)
        pass_msg, fail_msg = '{prop} contains "{expected}"', '{prop} does not contain "{expected}"'

    template = pass_msg if passed else fail_msg
    return AssertionResult(
        assertion.id, passed, actual, template.format(prop=prop, expected=expected, actual=actual)
    )


def _header_exists(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    name = assertion.property
    exists = name in response.headers
    want, pass_msg, fail_msg = _HEADER_PRESENCE_RULES[assertion.operator]
    passed = exists is want
    template = pass_msg if passed else fail_msg
    return AssertionResult(
        assertion.id, passed, "exists" if exists else "not found", template.format(name=name)
    )


def _header_equals(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    name = assertion.property
    value = response.headers.get(name)
    if value is None:
        return AssertionResult(assertion.id, False, "not found", f'Header "{name}" not found')

    expected = assertion.expected
    test, pass_msg, fail_msg = _HEADER_VALUE_RULES[assertion.operator]
    passed = test(value, expected)
    template = pass_msg if passed else fail_msg
    return AssertionResult(
        assertion.id, passed, value, template.format(name=name, expected=expected, value=value)
    )


_HANDLERS: dict[AssertionType, Callable[[Assertion, ResponseData, _Document], AssertionResult]] = {
    AssertionType.STATUS: _status,
    AssertionType.RESPONSE_TIME: _response_time,
    AssertionType.BODY_CONTAINS: _body_contains,
    AssertionType.BODY_JSON: _body_json,
    AssertionType.HEADER_EXISTS: _header_exists,
    AssertionType.HEADER_EQUALS: _header_equals,
}


def _run(assertion: Assertion, response: ResponseData, document: _Document) -> AssertionResult:
    if not assertion.enabled:
        return AssertionResult(assertion.id, True, "", _SKIPPED)
    handler = _HANDLERS.get(getattr(assertion, "type", None))
    if handler is None:
        return AssertionResult(
            getattr(assertion, "id", ""), False, "",
            f"Unknown assertion type: {type(assertion).__name__}",
        )
    return handler(assertion, response, document)


# ─────────────────────────────────────────────────────────────────────────────
# Kernel entry points
# ─────────────────────────────────────────────────────────────────────────────

def evaluate_batch(assertions: list[Assertion], response: ResponseData) -> list[AssertionResult]:
    """Evaluate assertions in order, parsing the JSON body at most once."""
    document = _Document(response.body)
    return [_run(assertion, response, document) for assertion in assertions]


def evaluate(assertion: Assertion, response: ResponseData) -> AssertionResult:
    return _run(assertion, response, _Document(response.body))


def _replacer(variables: Mapping[str, str]) -> Callable[[re.Match[str]], str]:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name in variables:
            return str(variables[name])
        return match.group(0)
    return replace


def substitute(text: str, variables: Mapping[str, str]) -> str:
    if not text or "{{" not in text or not variables:
        return text
    return _TEMPLATE.sub(_replacer(variables), text)


def substitute_batch(texts: list[str], variables: Mapping[str, str]) -> list[str]:
    """Substitute many strings with one replacement closure."""
    if not variables:
        return list(texts)
    replace = _replacer(variables)
    sub = _TEMPLATE.sub
    return [sub(replace, text) if text and "{{" in text else text for text in texts]


def substitute_headers(headers: Mapping[str, str], variables: Mapping[str, str]) -> dict[str, str]:
    items = list(headers.items())
    flat = substitute_batch([part for item in items for part in item], variables)
    return dict(zip(flat[0::2], flat[1::2]))


def find_variables(text: str) -> list[str]:
    if not text or "{{" not in text:
        return []
    return list(dict.fromkeys(m.group(1).strip() for m in _TEMPLATE.finditer(text)))


def has_variables(text: str) -> bool:
    return bool(text) and _TEMPLATE.search(text) is not None


def resolve(value: JSONValue, path: str) -> Resolution:
    return _walk(value, path)


def extract(config: ExtractionConfig, response: ResponseData) -> Resolution:
    kind = config.type
    if kind == ExtractionType.JSON:
        ok, value = _Document(response.body).get()
        if not ok:
            return NOT_FOUND
        resolution = _walk(value, config.path)
        if resolution is NOT_FOUND:
            return NOT_FOUND
        return Found(stringify_value(resolution.value))
    if kind == ExtractionType.HEADER:
        header = response.headers.get(config.path)
        return NOT_FOUND if header is None else Found(header)
    if kind == ExtractionType.REGEX:
        pattern = _pattern(config.path)
        match = pattern.search(response.body) if pattern is not None else None
        if match is None:
            return NOT_FOUND
        if pattern.groups and match.group(1) is not None:
            return Found(match.group(1))
        return Found(match.group(0))
    if kind == ExtractionType.STATUS:
        return Found(str(response.status_code))
    return Found(response.body)


def warm_up() -> None:
    """Prime the caches so the first real call pays no compile cost."""
    _segments.cache_clear()
    _pattern.cache_clear()
    _segments("data.items[0]")
    _TEMPLATE.search("{{warm}}")
    logger.debug(f"Accelerated kernel v{KERNEL_VERSION} ready")
