"""
Check Suites

This package provides tools for parsing, validating, and working with
YAML check-suite files: a list of requests, each with assertions and
extraction rules whose captured values feed later requests.

Usage:
    from volt.suite import load_suite, validate_suite_yaml

    # Load from file
    suite, result = load_suite("checks/users.yaml")
    if not result.is_valid:
        print(result)

    # Or validate from string
    suite, result = validate_suite_yaml(yaml_string)
"""

# Public API
from .loader import load_suite, validate_suite_yaml

# Models (for type hints and isinstance checks)
from .models import (
    AuthConfig,
    AuthType,
    Defaults,
    EngineName,
    HTTPMethod,
    RequestSpec,
    Suite,
)

# Parsing
from .parser import SuiteParser, scalar_text

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Models
    "Suite",
    "RequestSpec",
    "Defaults",
    "AuthConfig",
    "AuthType",
    "EngineName",
    "HTTPMethod",
    # Parsing
    "SuiteParser",
    "scalar_text",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]
