"""Tests for assertion models and the reference evaluator."""

import pytest

from volt.assertions import (
    AssertionEngine,
    AssertionResult,
    AssertionType,
    BodyContainsAssertion,
    BodyJsonAssertion,
    HeaderEqualsAssertion,
    HeaderExistsAssertion,
    InvalidAssertionError,
    ResponseTimeAssertion,
    StatusAssertion,
    StatusOperator,
    assertion_from_dict,
    create_empty_assertion,
    evaluate_assertion,
    evaluate_assertions,
    operator_display_name,
    operators_for_type,
    summarize_results,
    type_display_name,
)
from volt.response import ResponseData

engine = AssertionEngine()


def response(**kwargs) -> ResponseData:
    kwargs.setdefault("status_code", 200)
    return ResponseData(**kwargs)


# --- concrete scenarios ---


def test_status_equals_pass():
    result = evaluate_assertion(
        StatusAssertion(id="s", operator="equals", expected="200"), response(status_code=200)
    )
    assert result.passed is True
    assert result.actual == "200"
    assert result.message == "Status code is 200"


def test_status_equals_fail_message():
    result = evaluate_assertion(
        StatusAssertion(id="s", operator="equals", expected="200"), response(status_code=404)
    )
    assert result.passed is False
    assert "Expected 200, got 404" in result.message


def test_body_json_equals_string():
    result = evaluate_assertion(
        BodyJsonAssertion(id="j", operator="equals", property="data.name", expected='"john"'),
        response(body='{"data":{"name":"john"}}'),
    )
    assert result.passed is True
    assert result.actual == '"john"'
    assert result.message == 'data.name equals "john"'


def test_header_equals_contains_case_insensitive():
    result = evaluate_assertion(
        HeaderEqualsAssertion(id="h", operator="contains", property="content-type", expected="json"),
        response(headers={"Content-Type": "application/json"}),
    )
    assert result.passed is True
    assert result.actual == "application/json"


# --- disabled ---


@pytest.mark.parametrize(
    "assertion",
    [
        StatusAssertion(id="a", operator="equals", expected="999", enabled=False),
        BodyContainsAssertion(id="b", operator="matches", expected="([", enabled=False),
        BodyJsonAssertion(id="c", operator="equals", property="x", expected="{", enabled=False),
        HeaderEqualsAssertion(id="d", operator="equals", property="Nope", expected="x", enabled=False),
    ],
)
def test_disabled_always_passes(assertion):
    result = engine.evaluate(assertion, response(body="not json"))
    assert result == AssertionResult(assertion.id, True, "", "Skipped (disabled)")


# --- status and response time ---


@pytest.mark.parametrize(
    "operator,expected,passed,message",
    [
        ("notEquals", "200", False, "Expected not 200, got 200"),
        ("notEquals", "201", True, "Status code is not 201"),
        ("lessThan", "300", True, "Status code 200 < 300"),
        ("lessThan", "200", False, "Expected < 200, got 200"),
        ("greaterThan", "199", True, "Status code 200 > 199"),
        ("greaterThan", " 500 ", False, "Expected > 500, got 200"),
    ],
)
def test_status_operators(operator, expected, passed, message):
    result = engine.evaluate(StatusAssertion(id="s", operator=operator, expected=expected), response())
    assert result.passed is passed
    assert result.message == message


def test_status_identity_for_many_codes():
    for code in (100, 204, 301, 418, 503):
        assertion = StatusAssertion(id="s", operator="equals", expected=str(code))
        assert engine.evaluate(assertion, response(status_code=code)).passed


def test_status_non_numeric_expected():
    equals = engine.evaluate(StatusAssertion(id="s", operator="equals", expected="ok"), response())
    not_equals = engine.evaluate(StatusAssertion(id="s", operator="notEquals", expected="ok"), response())
    assert equals.passed is False
    assert equals.message == "Expected ok, got 200"
    assert not_equals.passed is True


def test_response_time():
    fast = response(timing_ms=120)
    result = engine.evaluate(ResponseTimeAssertion(id="t", operator="lessThan", expected="500"), fast)
    assert result.passed is True
    assert result.actual == "120ms"
    assert result.message == "Response time 120ms < 500ms"

    result = engine.evaluate(ResponseTimeAssertion(id="t", operator="greaterThan", expected="500"), fast)
    assert result.passed is False
    assert result.message == "Expected > 500ms, got 120ms"


# --- bodyContains ---


def test_body_contains_and_not_contains():
    r = response(body="hello world")
    assert engine.evaluate(BodyContainsAssertion(id="b", operator="contains", expected="world"), r).passed
    result = engine.evaluate(BodyContainsAssertion(id="b", operator="notContains", expected="world"), r)
    assert result.passed is False
    assert result.message == 'Body contains "world"'


def test_body_matches_regex_searches_full_body():
    r = response(body="x" * 200 + "id=42")
    result = engine.evaluate(BodyContainsAssertion(id="b", operator="matches", expected=r"id=\d+"), r)
    assert result.passed is True
    assert result.actual == "x" * 100 + "..."


def test_body_matches_invalid_regex():
    result = engine.evaluate(
        BodyContainsAssertion(id="b", operator="matches", expected="(unclosed"), response(body="abc")
    )
    assert result.passed is False
    assert result.message == "Invalid regex pattern: (unclosed"


# --- bodyJson ---


BODY = '{"data": {"count": 3, "items": [{"id": 1}], "tag": "release-1", "nothing": null}}'


@pytest.mark.parametrize(
    "operator,prop,expected,passed,actual",
    [
        ("exists", "data.items[0].id", "", True, "1"),
        ("exists", "data.items[1]", "", False, "undefined"),
        ("notExists", "data.missing", "", True, "undefined"),
        ("exists", "data.nothing", "", True, "null"),
        ("equals", "data.count", "3", True, "3"),
        ("equals", "data.items", '[{"id": 1}]', True, '[{"id":1}]'),
        ("notEquals", "data.count", "4", True, "3"),
        ("notEquals", "data.missing", "4", True, "undefined"),
        ("contains", "data.tag", "release", True, '"release-1"'),
        ("contains", "data.items", '"id"', True, '[{"id":1}]'),
        ("contains", "data.missing", "x", False, "undefined"),
    ],
)
def test_body_json_operators(operator, prop, expected, passed, actual):
    assertion = BodyJsonAssertion(id="j", operator=operator, property=prop, expected=expected)
    result = engine.evaluate(assertion, response(body=BODY))
    assert result.passed is passed
    assert result.actual == actual


def test_body_json_equality_is_key_order_sensitive():
    r = response(body='{"obj": {"a": 1, "b": 2}}')
    same = BodyJsonAssertion(id="j", operator="equals", property="obj", expected='{"a": 1, "b": 2}')
    swapped = BodyJsonAssertion(id="j", operator="equals", property="obj", expected='{"b": 2, "a": 1}')
    assert engine.evaluate(same, r).passed is True
    assert engine.evaluate(swapped, r).passed is False


def test_body_json_invalid_body():
    result = engine.evaluate(
        BodyJsonAssertion(id="j", operator="exists", property="a"), response(body="<html>")
    )
    assert result == AssertionResult("j", False, "Invalid JSON", "Response body is not valid JSON")


def test_body_json_invalid_expected():
    for operator in ("equals", "notEquals"):
        result = engine.evaluate(
            BodyJsonAssertion(id="j", operator=operator, property="data.count", expected="three"),
            response(body=BODY),
        )
        assert result.passed is False
        assert result.message == "Expected value is not valid JSON: three"


# --- headers ---


def test_header_exists():
    r = response(headers={"X-Trace": "1"})
    result = engine.evaluate(HeaderExistsAssertion(id="h", operator="exists", property="x-trace"), r)
    assert result.passed is True
    assert result.actual == "exists"

    result = engine.evaluate(HeaderExistsAssertion(id="h", operator="notExists", property="X-Trace"), r)
    assert result.passed is False
    assert result.message == 'Header "X-Trace" exists'


@pytest.mark.parametrize("operator", ["equals", "notEquals", "contains"])
def test_header_equals_missing_header_always_fails(operator):
    result = engine.evaluate(
        HeaderEqualsAssertion(id="h", operator=operator, property="X-Nope", expected="x"), response()
    )
    assert result.passed is False
    assert result.actual == "not found"
    assert result.message == 'Header "X-Nope" not found'


# --- models ---


def test_invalid_operator_for_type_is_rejected():
    with pytest.raises(InvalidAssertionError):
        StatusAssertion(id="s", operator="matches", expected="200")
    with pytest.raises(ValueError):
        HeaderExistsAssertion(id="h", operator="lessThan", property="X")


def test_operator_is_coerced_to_enum():
    assertion = StatusAssertion(id="s", operator="equals", expected=200)
    assert assertion.operator is StatusOperator.EQUALS
    assert assertion.expected == "200"


def test_assertion_from_dict_round_trip():
    record = {
        "id": "a1",
        "type": "headerEquals",
        "property": "Content-Type",
        "operator": "contains",
        "expected": "json",
        "enabled": False,
    }
    assertion = assertion_from_dict(record)
    assert isinstance(assertion, HeaderEqualsAssertion)
    assert assertion.to_dict() == record


def test_assertion_from_dict_unknown_type():
    with pytest.raises(InvalidAssertionError):
        assertion_from_dict({"type": "cookie", "operator": "equals"})


def test_create_empty_assertion():
    assertion = create_empty_assertion()
    assert assertion.type is AssertionType.STATUS
    assert assertion.expected == "200"
    assert assertion.enabled


def test_catalog_helpers():
    assert [op.value for op in operators_for_type("responseTime")] == ["lessThan", "greaterThan"]
    assert type_display_name("bodyJson") == "JSON Value"
    assert operator_display_name("matches") == "matches regex"


# --- batch and summary ---


def test_batch_preserves_order_and_summarizes():
    assertions = [
        StatusAssertion(id="1", operator="equals", expected="200"),
        StatusAssertion(id="2", operator="equals", expected="500"),
        BodyContainsAssertion(id="3", operator="contains", expected="ok"),
    ]
    results = evaluate_assertions(assertions, response(body="ok"))
    assert [r.assertion_id for r in results] == ["1", "2", "3"]

    summary = summarize_results(results)
    assert (summary.passed, summary.failed, summary.total) == (2, 1, 3)
    assert summary.all_passed is False
    assert engine.summarize(results) == summary


def test_result_str():
    assert str(AssertionResult("a", True, "200", "Status code is 200")) == "✅ Status code is 200"


# --- hostile input ---


DEEP_BODY = "[" * 100000 + "]" * 100000


def test_deeply_nested_body_is_invalid_json():
    assertion = BodyJsonAssertion(id="j", operator="exists", property="x")
    expected = AssertionResult("j", False, "Invalid JSON", "Response body is not valid JSON")
    assert engine.evaluate(assertion, response(body=DEEP_BODY)) == expected
    assert evaluate_assertions([assertion], response(body=DEEP_BODY)) == [expected]


def test_integral_float_equals_integer():
    r = response(body='{"price": 10.0, "ratio": 0.5}')
    result = engine.evaluate(
        BodyJsonAssertion(id="j", operator="equals", property="price", expected="10"), r
    )
    assert result.passed is True
    assert result.actual == "10"

    result = engine.evaluate(
        BodyJsonAssertion(id="j", operator="equals", property="ratio", expected="0.50"), r
    )
    assert result.passed is True


@pytest.mark.parametrize("expected", ["1" * 5000, "٢٠٠", "2OO"])
def test_unusable_numeric_expected_compares_false(expected):
    equals = engine.evaluate(StatusAssertion(id="s", operator="equals", expected=expected), response())
    assert equals.passed is False
    assert equals.message == f"Expected {expected}, got 200"

    not_equals = engine.evaluate(
        StatusAssertion(id="s", operator="notEquals", expected=expected), response()
    )
    assert not_equals.passed is True

    timing = engine.evaluate(
        ResponseTimeAssertion(id="t", operator="greaterThan", expected=expected), response()
    )
    assert timing.passed is False
