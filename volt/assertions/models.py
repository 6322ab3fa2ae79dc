"""
Assertion models.

Each assertion type is its own dataclass carrying only the operators
that make sense for it, so a status check can never be built with
``matches`` and a header-exists check can never be built with
``lessThan``. Invalid combinations are rejected when the object is
constructed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class InvalidAssertionError(ValueError):
    """Raised when an assertion is built with an unknown type or operator."""


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class AssertionType(str, Enum):
    """Aspect of the response an assertion checks."""
    STATUS = "status"
    RESPONSE_TIME = "responseTime"
    BODY_CONTAINS = "bodyContains"
    BODY_JSON = "bodyJson"
    HEADER_EXISTS = "headerExists"
    HEADER_EQUALS = "headerEquals"


class StatusOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    LESS_THAN = "lessThan"
    GREATER_THAN = "greaterThan"


class ResponseTimeOperator(str, Enum):
    LESS_THAN = "lessThan"
    GREATER_THAN = "greaterThan"


class BodyContainsOperator(str, Enum):
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    MATCHES = "matches"


class BodyJsonOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    EXISTS = "exists"
    NOT_EXISTS = "notExists"


class HeaderExistsOperator(str, Enum):
    EXISTS = "exists"
    NOT_EXISTS = "notExists"


class HeaderEqualsOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"


def new_assertion_id() -> str:
    return uuid.uuid4().hex[:12]


# ─────────────────────────────────────────────────────────────────────────────
# Assertions
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BaseAssertion:
    """
    Fields shared by every assertion variant.

    Attributes:
        id: Identifier echoed back in the result
        operator: Operator, coerced to the variant's operator enum
        expected: Expected value as text, parsed per type at evaluation
        property: JSON path or header name (unused by status/responseTime)
        enabled: Disabled assertions always pass with a "skipped" message
    """
    id: str
    operator: Enum
    expected: str = ""
    property: str = ""
    enabled: bool = True

    type: ClassVar[AssertionType]
    operators: ClassVar[type[Enum]]

    def __post_init__(self) -> None:
        try:
            operator = self.operators(self.operator)
        except ValueError:
            valid = ", ".join(op.value for op in self.operators)
            raise InvalidAssertionError(
                f"Operator {_raw(self.operator)!r} is not valid for "
                f"{self.type.value} assertions (valid: {valid})"
            ) from None
        object.__setattr__(self, "operator", operator)
        if not isinstance(self.expected, str):
            object.__setattr__(self, "expected", str(self.expected))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the application's camelCase record."""
        return {
            "id": self.id,
            "type": self.type.value,
            "property": self.property,
            "operator": self.operator.value,
            "expected": self.expected,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class StatusAssertion(BaseAssertion):
    """Numeric comparison against the status code."""
    type: ClassVar[AssertionType] = AssertionType.STATUS
    operators: ClassVar[type[Enum]] = StatusOperator


@dataclass(frozen=True)
class ResponseTimeAssertion(BaseAssertion):
    """Numeric comparison against the total request time in ms."""
    type: ClassVar[AssertionType] = AssertionType.RESPONSE_TIME
    operators: ClassVar[type[Enum]] = ResponseTimeOperator


@dataclass(frozen=True)
class BodyContainsAssertion(BaseAssertion):
    """Substring or regex test on the raw body."""
    type: ClassVar[AssertionType] = AssertionType.BODY_CONTAINS
    operators: ClassVar[type[Enum]] = BodyContainsOperator


@dataclass(frozen=True)
class BodyJsonAssertion(BaseAssertion):
    """Check on the value found at ``property`` in the JSON body."""
    type: ClassVar[AssertionType] = AssertionType.BODY_JSON
    operators: ClassVar[type[Enum]] = BodyJsonOperator


@dataclass(frozen=True)
class HeaderExistsAssertion(BaseAssertion):
    """Presence of the header named by ``property``."""
    type: ClassVar[AssertionType] = AssertionType.HEADER_EXISTS
    operators: ClassVar[type[Enum]] = HeaderExistsOperator


@dataclass(frozen=True)
class HeaderEqualsAssertion(BaseAssertion):
    """Comparison against the value of the header named by ``property``."""
    type: ClassVar[AssertionType] = AssertionType.HEADER_EQUALS
    operators: ClassVar[type[Enum]] = HeaderEqualsOperator


# Union type for all assertion variants
Assertion = Union[
    StatusAssertion,
    ResponseTimeAssertion,
    BodyContainsAssertion,
    BodyJsonAssertion,
    HeaderExistsAssertion,
    HeaderEqualsAssertion,
]

ASSERTION_CLASSES: dict[AssertionType, type[BaseAssertion]] = {
    AssertionType.STATUS: StatusAssertion,
    AssertionType.RESPONSE_TIME: ResponseTimeAssertion,
    AssertionType.BODY_CONTAINS: BodyContainsAssertion,
    AssertionType.BODY_JSON: BodyJsonAssertion,
    AssertionType.HEADER_EXISTS: HeaderExistsAssertion,
    AssertionType.HEADER_EQUALS: HeaderEqualsAssertion,
}


def assertion_from_dict(data: dict[str, Any]) -> Assertion:
    """
    Build the typed assertion for an application record.

    Args:
        data: Mapping with ``type``, ``operator`` and optionally ``id``,
            ``property``, ``expected`` and ``enabled``

    Raises:
        InvalidAssertionError: If the type is unknown or the operator is
            not allowed for it
    """
    raw_type = data.get("type")
    try:
        cls = ASSERTION_CLASSES[AssertionType(raw_type)]
    except ValueError:
        valid = ", ".join(t.value for t in AssertionType)
        raise InvalidAssertionError(
            f"Unknown assertion type {raw_type!r} (valid: {valid})"
        ) from None

    expected = data.get("expected", "")
    return cls(
        id=str(data.get("id") or new_assertion_id()),
        operator=data.get("operator"),
        expected="" if expected is None else str(expected),
        property=data.get("property") or "",
        enabled=bool(data.get("enabled", True)),
    )


def create_empty_assertion() -> StatusAssertion:
    """A fresh, enabled ``status equals 200`` assertion."""
    return StatusAssertion(
        id=new_assertion_id(),
        operator=StatusOperator.EQUALS,
        expected="200",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AssertionResult:
    """
    Outcome of evaluating one assertion.

    Attributes:
        assertion_id: Id of the evaluated assertion
        passed: Whether the check held
        actual: Human-readable observed value, also filled on failure
        message: Sentence explaining the outcome
    """
    assertion_id: str
    passed: bool
    actual: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "assertionId": self.assertion_id,
            "passed": self.passed,
            "actual": self.actual,
            "message": self.message,
        }

    def __str__(self) -> str:
        icon = "✅" if self.passed else "❌"
        return f"{icon} {self.message}"


@dataclass(frozen=True)
class AssertionSummary:
    """Pass/fail counts over a batch of results."""
    passed: int
    failed: int
    total: int

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, int]:
        return {"passed": self.passed, "failed": self.failed, "total": self.total}


def summarize_results(results: list[AssertionResult]) -> AssertionSummary:
    passed = sum(1 for r in results if r.passed)
    return AssertionSummary(passed=passed, failed=len(results) - passed, total=len(results))


def _raw(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
