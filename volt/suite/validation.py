"""
Schema validation for check suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..assertions import ASSERTION_CLASSES, AssertionType
from ..extraction import ExtractionType
from ..variables import has_variables
from .models import AuthType, EngineName, HTTPMethod


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "requests[0].assertions[1].operator"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "requests"}
    OPTIONAL_TOP_LEVEL = {"env", "defaults"}
    REQUEST_KEYS = {"id", "method", "url", "headers", "body", "auth", "assertions", "extract"}
    VALID_METHODS = {m.value for m in HTTPMethod}
    VALID_ENGINES = {e.value for e in EngineName}
    VALID_AUTH_TYPES = {t.value for t in AuthType}
    VALID_ASSERTION_TYPES = {t.value for t in AssertionType}
    VALID_EXTRACTION_TYPES = {t.value for t in ExtractionType}
    # Extraction types whose rule needs a path
    PATH_EXTRACTIONS = {"json", "header", "regex"}

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.request_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_env()
        self._validate_defaults()
        self._validate_requests()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown, key=str):
            self.result.add_error(
                str(key),
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_env(self) -> None:
        env = self.data.get("env")
        if env is None:
            return
        if not isinstance(env, dict):
            self.result.add_error(
                "env",
                "Must be an object (key-value pairs)",
                value=env
            )
            return

        for key, value in env.items():
            if not isinstance(key, str):
                self.result.add_error(
                    f"env.{key}",
                    "Variable names must be strings",
                    value=key
                )
            elif isinstance(value, (dict, list)):
                self.result.add_error(
                    f"env.{key}",
                    "Variable values must be scalars",
                    value=value
                )

    def _validate_defaults(self) -> None:
        defaults = self.data.get("defaults")
        if defaults is None:
            return
        if not isinstance(defaults, dict):
            self.result.add_error(
                "defaults",
                "Must be an object",
                value=defaults
            )
            return

        timeout = defaults.get("timeout_ms")
        if timeout is not None:
            if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout < 0:
                self.result.add_error(
                    "defaults.timeout_ms",
                    "Must be a non-negative integer (milliseconds)",
                    value=timeout
                )

        follow = defaults.get("follow_redirects")
        if follow is not None and not isinstance(follow, bool):
            self.result.add_error(
                "defaults.follow_redirects",
                "Must be true or false",
                value=follow
            )

        engine = defaults.get("engine")
        if engine is not None and engine not in self.VALID_ENGINES:
            self.result.add_error(
                "defaults.engine",
                "Invalid engine",
                value=engine,
                suggestion=f"Valid engines: {', '.join(sorted(self.VALID_ENGINES))}"
            )

    def _validate_requests(self) -> None:
        requests = self.data.get("requests")
        if not isinstance(requests, list):
            self.result.add_error(
                "requests",
                "Must be a list",
                value=requests
            )
            return

        if len(requests) == 0:
            self.result.add_error(
                "requests",
                "Must contain at least one request",
                suggestion="Add a request with at least an 'id' and a 'url'"
            )
            return

        for i, request in enumerate(requests):
            self._validate_request(i, request)

    def _validate_request(self, index: int, request: Any) -> None:
        path = f"requests[{index}]"

        if not isinstance(request, dict):
            self.result.add_error(
                path,
                "Request must be an object",
                value=request
            )
            return

        for key in sorted(set(request) - self.REQUEST_KEYS, key=str):
            self.result.add_error(
                f"{path}.{key}",
                f"Unknown request field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUEST_KEYS))}"
            )

        request_id = request.get("id")
        if not request_id:
            self.result.add_error(
                f"{path}.id",
                "Request must have an 'id' field",
                suggestion="Add a unique identifier like 'id: login'"
            )
        elif not isinstance(request_id, str):
            self.result.add_error(
                f"{path}.id",
                "Request id must be a string",
                value=request_id
            )
        elif request_id in self.request_ids:
            self.result.add_error(
                f"{path}.id",
                "Duplicate request id",
                value=request_id,
                suggestion="Each request must have a unique id"
            )
        else:
            self.request_ids.add(request_id)

        method = request.get("method", "GET")
        if not isinstance(method, str) or method.upper() not in self.VALID_METHODS:
            self.result.add_error(
                f"{path}.method",
                "Invalid HTTP method",
                value=method,
                suggestion=f"Valid methods: {', '.join(sorted(self.VALID_METHODS))}"
            )

        self._validate_url(path, request.get("url"))

        headers = request.get("headers")
        if headers is not None and not isinstance(headers, dict):
            self.result.add_error(
                f"{path}.headers",
                "Headers must be an object",
                value=headers
            )

        body = request.get("body")
        if body is not None and not isinstance(body, str):
            self.result.add_error(
                f"{path}.body",
                "Body must be a string",
                value=body,
                suggestion="Use a YAML block scalar ('body: |') for JSON payloads"
            )

        auth = request.get("auth")
        if auth is not None:
            self._validate_auth(f"{path}.auth", auth)

        self._validate_assertions(path, request.get("assertions"))
        self._validate_extract(path, request.get("extract"))

    def _validate_url(self, path: str, url: Any) -> None:
        if not url:
            self.result.add_error(
                f"{path}.url",
                "Request must have a 'url' field",
                suggestion="Add 'url: \"https://...\"'"
            )
        elif not isinstance(url, str):
            self.result.add_error(
                f"{path}.url",
                "Must be a string",
                value=url
            )
        elif not (url.startswith("http://") or url.startswith("https://") or url.startswith("{{")):
            self.result.add_error(
                f"{path}.url",
                "Must be a valid HTTP(S) URL",
                value=url,
                suggestion="URL should start with 'http://', 'https://' or a {{variable}}"
            )

    def _validate_assertions(self, path: str, assertions: Any) -> None:
        if assertions is None:
            return
        if not isinstance(assertions, list):
            self.result.add_error(
                f"{path}.assertions",
                "Must be a list",
                value=assertions
            )
            return

        for i, assertion in enumerate(assertions):
            item_path = f"{path}.assertions[{i}]"
            if not isinstance(assertion, dict):
                self.result.add_error(
                    item_path,
                    "Assertion must be an object",
                    value=assertion
                )
                continue

            assertion_type = assertion.get("type")
            if assertion_type not in self.VALID_ASSERTION_TYPES:
                self.result.add_error(
                    f"{item_path}.type",
                    "Invalid assertion type",
                    value=assertion_type,
                    suggestion=f"Valid types: {', '.join(sorted(self.VALID_ASSERTION_TYPES))}"
                )
                continue

            operators = ASSERTION_CLASSES[AssertionType(assertion_type)].operators
            valid_ops = {op.value for op in operators}
            operator = assertion.get("operator")
            if operator not in valid_ops:
                self.result.add_error(
                    f"{item_path}.operator",
                    f"Invalid operator for '{assertion_type}'",
                    value=operator,
                    suggestion=f"Valid operators: {', '.join(sorted(valid_ops))}"
                )

            needs_property = assertion_type in {"bodyJson", "headerExists", "headerEquals"}
            prop = assertion.get("property")
            if needs_property and not prop:
                self.result.add_error(
                    f"{item_path}.property",
                    f"'{assertion_type}' assertions require a 'property'",
                    suggestion="Give a JSON path like 'data.items[0].id' or a header name"
                )
            elif prop is not None and not isinstance(prop, str):
                self.result.add_error(
                    f"{item_path}.property",
                    "Must be a string",
                    value=prop
                )

            expected = assertion.get("expected")
            if isinstance(expected, (dict, list)):
                self.result.add_error(
                    f"{item_path}.expected",
                    "Must be a scalar",
                    value=expected,
                    suggestion="Quote JSON values, e.g. expected: '{\"a\": 1}'"
                )

            enabled = assertion.get("enabled")
            if enabled is not None and not isinstance(enabled, bool):
                self.result.add_error(
                    f"{item_path}.enabled",
                    "Must be true or false",
                    value=enabled
                )

    def _validate_extract(self, path: str, rules: Any) -> None:
        if rules is None:
            return
        if not isinstance(rules, list):
            self.result.add_error(
                f"{path}.extract",
                "Must be a list",
                value=rules
            )
            return

        for i, rule in enumerate(rules):
            item_path = f"{path}.extract[{i}]"
            if not isinstance(rule, dict):
                self.result.add_error(
                    item_path,
                    "Extraction rule must be an object",
                    value=rule
                )
                continue

            rule_type = rule.get("type")
            if rule_type not in self.VALID_EXTRACTION_TYPES:
                self.result.add_error(
                    f"{item_path}.type",
                    "Invalid extraction type",
                    value=rule_type,
                    suggestion=f"Valid types: {', '.join(sorted(self.VALID_EXTRACTION_TYPES))}"
                )
            elif rule_type in self.PATH_EXTRACTIONS and not rule.get("path"):
                self.result.add_error(
                    f"{item_path}.path",
                    f"'{rule_type}' extraction requires a 'path'"
                )

            variable = rule.get("variable")
            if not isinstance(variable, str) or not variable.strip():
                self.result.add_error(
                    f"{item_path}.variable",
                    "Extraction requires a variable name",
                    value=variable,
                    suggestion="Add 'variable: token' to reference it later as {{token}}"
                )
            elif has_variables(variable):
                self.result.add_error(
                    f"{item_path}.variable",
                    "Variable name must not contain a {{placeholder}}",
                    value=variable
                )

    def _validate_auth(self, path: str, auth: Any) -> None:
        """Validate auth configuration for a request."""
        if not isinstance(auth, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=auth
            )
            return

        auth_type = auth.get("type")
        if auth_type not in self.VALID_AUTH_TYPES:
            self.result.add_error(
                f"{path}.type",
                "Invalid auth type",
                value=auth_type,
                suggestion=f"Valid types: {', '.join(sorted(self.VALID_AUTH_TYPES))}"
            )
            return

        if auth_type == "bearer":
            required = {"token": "Add 'token: \"{{token}}\"'"}
        elif auth_type == "api_key":
            required = {"key": "Add 'key: \"{{API_KEY}}\"'"}
            header = auth.get("header")
            if header is not None and not isinstance(header, str):
                self.result.add_error(
                    f"{path}.header",
                    "Must be a string",
                    value=header,
                    suggestion="Default is 'X-API-Key'"
                )
        else:
            required = {
                "username": "Add 'username: \"user\"'",
                "password": "Add 'password: \"{{PASSWORD}}\"'",
            }

        for field_name, suggestion in required.items():
            value = auth.get(field_name)
            if not value:
                self.result.add_error(
                    f"{path}.{field_name}",
                    f"Required for {auth_type} auth",
                    suggestion=suggestion
                )
            elif not isinstance(value, str):
                self.result.add_error(
                    f"{path}.{field_name}",
                    "Must be a string",
                    value=value
                )
