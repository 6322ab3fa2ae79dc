"""
Assertion engine for evaluating checks on HTTP responses.

This module is the reference implementation: always importable, pure and
synchronous. Each ``bodyJson`` assertion parses the body on its own; the
accelerated kernel in ``volt.accel`` shares one parse across a batch and
must produce exactly the same results.
"""

from __future__ import annotations

import re

from ..json_path import Found, canonical_json, parse_json, resolve, stringify_value
from ..response import ResponseData
from .models import (
    Assertion,
    AssertionResult,
    AssertionSummary,
    BodyContainsAssertion,
    BodyContainsOperator,
    BodyJsonAssertion,
    BodyJsonOperator,
    HeaderEqualsAssertion,
    HeaderEqualsOperator,
    HeaderExistsAssertion,
    HeaderExistsOperator,
    ResponseTimeAssertion,
    ResponseTimeOperator,
    StatusAssertion,
    StatusOperator,
    summarize_results,
)

BODY_PREVIEW_LENGTH = 100

_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")


class AssertionEngine:
    """
    Engine for running assertions against a response.

    Supports the six assertion types:
    - status: compare the status code numerically
    - responseTime: compare the request time in ms
    - bodyContains: substring / regex checks on the raw body
    - bodyJson: checks on a value found by JSON path
    - headerExists: case-insensitive header presence
    - headerEquals: case-insensitive header value comparison

    Example:
        engine = AssertionEngine()
        response = ResponseData(status_code=200, body='{"ok": true}')

        result = engine.evaluate(
            StatusAssertion(id="a1", operator="equals", expected="200"), response
        )
        result.passed  # True
    """

    def evaluate(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        """
        Evaluate a single assertion.

        Args:
            assertion: The assertion to check
            response: The response snapshot

        Returns:
            AssertionResult; never raises for bad patterns, JSON or paths
        """
        if not assertion.enabled:
            return AssertionResult(
                assertion_id=assertion.id,
                passed=True,
                actual="",
                message="Skipped (disabled)",
            )

        if isinstance(assertion, StatusAssertion):
            return self._status(assertion, response.status_code)
        elif isinstance(assertion, ResponseTimeAssertion):
            return self._response_time(assertion, response.timing_ms)
        elif isinstance(assertion, BodyContainsAssertion):
            return self._body_contains(assertion, response.body)
        elif isinstance(assertion, BodyJsonAssertion):
            return self._body_json(assertion, response.body)
        elif isinstance(assertion, HeaderExistsAssertion):
            return self._header_exists(assertion, response)
        elif isinstance(assertion, HeaderEqualsAssertion):
            return self._header_equals(assertion, response)
        else:
            return AssertionResult(
                assertion_id=getattr(assertion, "id", ""),
                passed=False,
                actual="",
                message=f"Unknown assertion type: {type(assertion).__name__}",
            )

    def evaluate_batch(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        """Evaluate assertions in order, one result per assertion."""
        return [self.evaluate(assertion, response) for assertion in assertions]

    def summarize(self, results: list[AssertionResult]) -> AssertionSummary:
        return summarize_results(results)

    # ─────────────────────────────────────────────────────────────────────
    # Per-type checks
    # ─────────────────────────────────────────────────────────────────────

    def _status(self, assertion: StatusAssertion, status_code: int) -> AssertionResult:
        expected = _parse_int(assertion.expected)
        shown = assertion.expected if expected is None else str(expected)
        op = assertion.operator

        if op == StatusOperator.EQUALS:
            passed = expected is not None and status_code == expected
            message = (
                f"Status code is {status_code}" if passed
                else f"Expected {shown}, got {status_code}"
            )
        elif op == StatusOperator.NOT_EQUALS:
            passed = expected is None or status_code != expected
            message = (
                f"Status code is not {shown}" if passed
                else f"Expected not {shown}, got {status_code}"
            )
        elif op == StatusOperator.LESS_THAN:
            passed = expected is not None and status_code < expected
            message = (
                f"Status code {status_code} < {shown}" if passed
                else f"Expected < {shown}, got {status_code}"
            )
        else:  # greaterThan
            passed = expected is not None and status_code > expected
            message = (
                f"Status code {status_code} > {shown}" if passed
                else f"Expected > {shown}, got {status_code}"
            )

        return AssertionResult(assertion.id, passed, str(status_code), message)

    def _response_time(self, assertion: ResponseTimeAssertion, timing_ms: int) -> AssertionResult:
        expected = _parse_int(assertion.expected)
        shown = assertion.expected if expected is None else str(expected)

        if assertion.operator == ResponseTimeOperator.LESS_THAN:
            passed = expected is not None and timing_ms < expected
            message = (
                f"Response time {timing_ms}ms < {shown}ms" if passed
                else f"Expected < {shown}ms, got {timing_ms}ms"
            )
        else:  # greaterThan
            passed = expected is not None and timing_ms > expected
            message = (
                f"Response time {timing_ms}ms > {shown}ms" if passed
                else f"Expected > {shown}ms, got {timing_ms}ms"
            )

        return AssertionResult(assertion.id, passed, f"{timing_ms}ms", message)

    def _body_contains(self, assertion: BodyContainsAssertion, body: str) -> AssertionResult:
        expected = assertion.expected
        actual = _preview(body)
        op = assertion.operator

        if op == BodyContainsOperator.CONTAINS:
            passed = expected in body
            message = (
                f'Body contains "{expected}"' if passed
                else f'Body does not contain "{expected}"'
            )
        elif op == BodyContainsOperator.NOT_CONTAINS:
            passed = expected not in body
            message = (
                f'Body does not contain "{expected}"' if passed
                else f'Body contains "{expected}"'
            )
        else:  # matches
            pattern = compile_pattern(expected)
            if pattern is None:
                return AssertionResult(
                    assertion.id, False, actual, f"Invalid regex pattern: {expected}"
                )
            passed = pattern.search(body) is not None
            message = (
                f'Body matches pattern "{expected}"' if passed
                else f'Body does not match pattern "{expected}"'
            )

        return AssertionResult(assertion.id, passed, actual, message)

    def _body_json(self, assertion: BodyJsonAssertion, body: str) -> AssertionResult:
        try:
            document = parse_json(body)
        except ValueError:
            return AssertionResult(
                assertion.id, False, "Invalid JSON", "Response body is not valid JSON"
            )

        prop = assertion.property
        expected = assertion.expected
        resolution = resolve(document, prop)
        found = isinstance(resolution, Found)
        actual = canonical_json(resolution.value) if found else "undefined"
        op = assertion.operator

        if op == BodyJsonOperator.EXISTS:
            passed = found
            message = (
                f'Property "{prop}" exists' if passed
                else f'Property "{prop}" does not exist'
            )
        elif op == BodyJsonOperator.NOT_EXISTS:
            passed = not found
            message = (
                f'Property "{prop}" does not exist' if passed
                else f'Property "{prop}" exists'
            )
        elif op in (BodyJsonOperator.EQUALS, BodyJsonOperator.NOT_EQUALS):
            try:
                expected_json = canonical_json(parse_json(expected))
            except ValueError:
                return AssertionResult(
                    assertion.id, False, actual, f"Expected value is not valid JSON: {expected}"
                )
            equal = found and actual == expected_json
            if op == BodyJsonOperator.EQUALS:
                passed = equal
                message = (
                    f"{prop} equals {expected}" if passed
                    else f"Expected {expected}, got {actual}"
                )
            else:
                passed = not equal
                message = (
                    f"{prop} does not equal {expected}" if passed
                    else f"Expected not {expected}, got {actual}"
                )
        else:  # contains
            passed = found and expected in stringify_value(resolution.value)
            message = (
                f'{prop} contains "{expected}"' if passed
                else f'{prop} does not contain "{expected}"'
            )

        return AssertionResult(assertion.id, passed, actual, message)

    def _header_exists(self, assertion: HeaderExistsAssertion, response: ResponseData) -> AssertionResult:
        name = assertion.property
        exists = response.has_header(name)
        actual = "exists" if exists else "not found"

        if assertion.operator == HeaderExistsOperator.EXISTS:
            passed = exists
            message = (
                f'Header "{name}" exists' if passed
                else f'Header "{name}" not found'
            )
        else:  # notExists
            passed = not exists
            message = (
                f'Header "{name}" does not exist' if passed
                else f'Header "{name}" exists'
            )

        return AssertionResult(assertion.id, passed, actual, message)

    def _header_equals(self, assertion: HeaderEqualsAssertion, response: ResponseData) -> AssertionResult:
        name = assertion.property
        expected = assertion.expected
        value = response.header(name)

        if value is None:
            return AssertionResult(assertion.id, False, "not found", f'Header "{name}" not found')

        op = assertion.operator
        if op == HeaderEqualsOperator.EQUALS:
            passed = value == expected
            message = (
                f'Header "{name}" equals "{expected}"' if passed
                else f'Expected "{expected}", got "{value}"'
            )
        elif op == HeaderEqualsOperator.NOT_EQUALS:
            passed = value != expected
            message = (
                f'Header "{name}" does not equal "{expected}"' if passed
                else f'Expected not "{expected}", got "{value}"'
            )
        else:  # contains
            passed = expected in value
            message = (
                f'Header "{name}" contains "{expected}"' if passed
                else f'Header does not contain "{expected}"'
            )

        return AssertionResult(assertion.id, passed, value, message)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a user-supplied regex, returning None if it is malformed."""
    try:
        return re.compile(pattern)
    except (re.error, OverflowError):
        return None


def _parse_int(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # More digits than int() will convert
        return None


def _preview(body: str) -> str:
    if len(body) > BODY_PREVIEW_LENGTH:
        return body[:BODY_PREVIEW_LENGTH] + "..."
    return body


# Convenience functions for quick evaluation
def evaluate_assertion(assertion: Assertion, response: ResponseData) -> AssertionResult:
    """Evaluate one assertion with the reference engine."""
    return AssertionEngine().evaluate(assertion, response)


def evaluate_assertions(
    assertions: list[Assertion], response: ResponseData
) -> list[AssertionResult]:
    """Evaluate a batch of assertions with the reference engine."""
    return AssertionEngine().evaluate_batch(assertions, response)
