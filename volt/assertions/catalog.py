"""Display names and operator lists for building assertion editors."""

from __future__ import annotations

from enum import Enum

from .models import ASSERTION_CLASSES, AssertionType

TYPE_DISPLAY_NAMES: dict[AssertionType, str] = {
    AssertionType.STATUS: "Status Code",
    AssertionType.RESPONSE_TIME: "Response Time",
    AssertionType.BODY_CONTAINS: "Body Contains",
    AssertionType.BODY_JSON: "JSON Value",
    AssertionType.HEADER_EXISTS: "Header Exists",
    AssertionType.HEADER_EQUALS: "Header Value",
}

OPERATOR_DISPLAY_NAMES: dict[str, str] = {
    "equals": "equals",
    "notEquals": "not equals",
    "contains": "contains",
    "notContains": "not contains",
    "lessThan": "less than",
    "greaterThan": "greater than",
    "exists": "exists",
    "notExists": "not exists",
    "matches": "matches regex",
}


def operators_for_type(assertion_type: AssertionType | str) -> list[Enum]:
    """Operators allowed for an assertion type, in editor order."""
    cls = ASSERTION_CLASSES[AssertionType(assertion_type)]
    return list(cls.operators)


def type_display_name(assertion_type: AssertionType | str) -> str:
    try:
        return TYPE_DISPLAY_NAMES[AssertionType(assertion_type)]
    except ValueError:
        return str(assertion_type)


def operator_display_name(operator: Enum | str) -> str:
    value = operator.value if isinstance(operator, Enum) else operator
    return OPERATOR_DISPLAY_NAMES.get(value, value)
