"""
Volt - Declarative HTTP Response Checks

This package provides the response assertion and data-extraction engine
behind the ``volt`` CLI, plus the suite runner that drives it.

Subpackages:
    - json_path: dot/bracket path resolver and JSON utilities
    - variables: {{name}} template substitution
    - assertions: assertion models and the reference evaluator
    - extraction: value extraction and chain variables
    - accel: reference and accelerated execution tiers
    - suite: parse and validate suite YAML files
    - transport: aiohttp request sender
    - reporting: run reports and result tracking

Usage:
    import asyncio
    from volt import (
        ResponseData, StatusAssertion, evaluate_batch,
        ensure_acceleration_loaded, is_acceleration_loaded,
    )

    response = ResponseData(status_code=200, body='{"ok": true}')
    results = evaluate_batch(
        [StatusAssertion(id="s", operator="equals", expected="200")], response
    )

    # Switch to the accelerated tier
    tier = asyncio.run(ensure_acceleration_loaded())
    assert is_acceleration_loaded()
    assert tier.evaluate_batch(assertions, response) == results
"""

__version__ = "0.1.0"

# Response snapshot
from .response import ResponseData, freeze_headers

# JSON paths
from .json_path import NOT_FOUND, Found, NotFound, Resolution, parse_json, resolve

# Variables
from .variables import (
    find_variables,
    has_variables,
    preview_substitution,
    substitute,
    substitute_batch,
    substitute_headers,
)

# Assertions
from .assertions import (
    Assertion,
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
    assertion_from_dict,
    evaluate_assertion as evaluate,
    evaluate_assertions as evaluate_batch,
)

# Extraction
from .extraction import (
    ChainVariable,
    ChainVariableStore,
    ExtractionConfig,
    ExtractionType,
    create_chain_variable,
    extract,
)

# Dual-tier execution
from .accel import (
    AccelerationLoadError,
    Accelerator,
    ExecutionTier,
    ModuleNotLoadedError,
    ReferenceTier,
    ensure_acceleration_loaded,
    is_acceleration_loaded,
)

# Suites, transport and reporting
from .suite import Suite, load_suite, validate_suite_yaml
from .transport import HTTPRequest, HTTPTransport, TransportError
from .reporting import Reporter, RunReport
from .runner import SuiteRunner, run_suite

__all__ = [
    # Package info
    "__version__",
    # Response
    "ResponseData",
    "freeze_headers",
    # JSON paths
    "NOT_FOUND",
    "Found",
    "NotFound",
    "Resolution",
    "parse_json",
    "resolve",
    # Variables
    "find_variables",
    "has_variables",
    "preview_substitution",
    "substitute",
    "substitute_batch",
    "substitute_headers",
    # Assertions
    "Assertion",
    "AssertionEngine",
    "AssertionResult",
    "AssertionType",
    "BodyContainsAssertion",
    "BodyJsonAssertion",
    "HeaderEqualsAssertion",
    "HeaderExistsAssertion",
    "InvalidAssertionError",
    "ResponseTimeAssertion",
    "StatusAssertion",
    "assertion_from_dict",
    "evaluate",
    "evaluate_batch",
    # Extraction
    "ChainVariable",
    "ChainVariableStore",
    "ExtractionConfig",
    "ExtractionType",
    "create_chain_variable",
    "extract",
    # Dual-tier execution
    "AccelerationLoadError",
    "Accelerator",
    "ExecutionTier",
    "ModuleNotLoadedError",
    "ReferenceTier",
    "ensure_acceleration_loaded",
    "is_acceleration_loaded",
    # Suites, transport and reporting
    "Suite",
    "load_suite",
    "validate_suite_yaml",
    "HTTPRequest",
    "HTTPTransport",
    "TransportError",
    "Reporter",
    "RunReport",
    "run_suite",
    "SuiteRunner",
]
