"""
Assertion Engine for HTTP Response Validation

This package provides the typed assertion model and the reference
evaluator that decides pass/fail for each check.

Supported assertion types:
    - status: equals, notEquals, lessThan, greaterThan
    - responseTime: lessThan, greaterThan
    - bodyContains: contains, notContains, matches
    - bodyJson: exists, notExists, equals, notEquals, contains
    - headerExists: exists, notExists
    - headerEquals: equals, notEquals, contains

Usage:
    from volt.assertions import AssertionEngine, StatusAssertion, BodyJsonAssertion
    from volt.response import ResponseData

    response = ResponseData(status_code=200, body='{"data": {"name": "john"}}')
    engine = AssertionEngine()

    results = engine.evaluate_batch([
        StatusAssertion(id="s", operator="equals", expected="200"),
        BodyJsonAssertion(id="n", operator="equals", property="data.name", expected='"john"'),
    ], response)

    summary = engine.summarize(results)
    print(f"{summary.passed}/{summary.total} passed")
"""

# Models
from .models import (
    ASSERTION_CLASSES,
    Assertion,
    AssertionResult,
    AssertionSummary,
    AssertionType,
    BaseAssertion,
    BodyContainsAssertion,
    BodyContainsOperator,
    BodyJsonAssertion,
    BodyJsonOperator,
    HeaderEqualsAssertion,
    HeaderEqualsOperator,
    HeaderExistsAssertion,
    HeaderExistsOperator,
    InvalidAssertionError,
    ResponseTimeAssertion,
    ResponseTimeOperator,
    StatusAssertion,
    StatusOperator,
    assertion_from_dict,
    create_empty_assertion,
    new_assertion_id,
    summarize_results,
)

# Engine
from .engine import (
    AssertionEngine,
    compile_pattern,
    evaluate_assertion,
    evaluate_assertions,
)

# Catalog
from .catalog import (
    operator_display_name,
    operators_for_type,
    type_display_name,
)

__all__ = [
    # Models
    "ASSERTION_CLASSES",
    "Assertion",
    "AssertionResult",
    "AssertionSummary",
    "AssertionType",
    "BaseAssertion",
    "BodyContainsAssertion",
    "BodyContainsOperator",
    "BodyJsonAssertion",
    "BodyJsonOperator",
    "HeaderEqualsAssertion",
    "HeaderEqualsOperator",
    "HeaderExistsAssertion",
    "HeaderExistsOperator",
    "InvalidAssertionError",
    "ResponseTimeAssertion",
    "ResponseTimeOperator",
    "StatusAssertion",
    "StatusOperator",
    "assertion_from_dict",
    "create_empty_assertion",
    "new_assertion_id",
    "summarize_results",
    # Engine
    "AssertionEngine",
    "compile_pattern",
    "evaluate_assertion",
    "evaluate_assertions",
    # Catalog
    "operator_display_name",
    "operators_for_type",
    "type_display_name",
]
