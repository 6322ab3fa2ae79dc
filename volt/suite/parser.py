"""
Schema parser for check suites.

This module converts validated YAML data into typed Suite structures.
"""

from __future__ import annotations

from typing import Any

from ..assertions import Assertion, assertion_from_dict
from ..extraction import ExtractionConfig
from .models import (
    AuthConfig,
    AuthType,
    Defaults,
    EngineName,
    HTTPMethod,
    RequestSpec,
    Suite,
)


def scalar_text(value: Any) -> str:
    """
    Text form of a YAML scalar.

    Booleans and null are spelled the JSON way so that ``expected: true``
    compares equal to a JSON ``true`` in the body.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SuiteParser:
    """Parses and converts validated YAML to typed Suite structure."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def parse(self) -> Suite:
        """Convert validated data to typed Suite."""
        return Suite(
            version=self.data["version"],
            name=self.data["name"],
            env={str(k): scalar_text(v) for k, v in (self.data.get("env") or {}).items()},
            defaults=self._parse_defaults(),
            requests=[self._parse_request(r) for r in self.data["requests"]],
        )

    def _parse_defaults(self) -> Defaults:
        defaults = self.data.get("defaults") or {}
        return Defaults(
            timeout_ms=defaults.get("timeout_ms", 30000),
            follow_redirects=defaults.get("follow_redirects", True),
            engine=EngineName(defaults.get("engine", EngineName.REFERENCE.value)),
        )

    def _parse_request(self, request: dict) -> RequestSpec:
        return RequestSpec(
            id=request["id"],
            url=request["url"],
            method=HTTPMethod(request.get("method", "GET").upper()),
            headers={
                str(k): scalar_text(v) for k, v in (request.get("headers") or {}).items()
            },
            body=request.get("body") or "",
            auth=self._parse_auth(request.get("auth")),
            assertions=[
                self._parse_assertion(a, f"{request['id']}-{i}")
                for i, a in enumerate(request.get("assertions") or [])
            ],
            extract=[self._parse_extraction(e) for e in request.get("extract") or []],
        )

    def _parse_auth(self, auth_data: dict | None) -> AuthConfig | None:
        """Parse auth configuration if present."""
        if auth_data is None:
            return None

        return AuthConfig(
            type=AuthType(auth_data["type"]),
            token=auth_data.get("token"),
            header=auth_data.get("header", "X-API-Key"),
            key=auth_data.get("key"),
            username=auth_data.get("username"),
            password=auth_data.get("password"),
        )

    def _parse_assertion(self, data: dict, default_id: str) -> Assertion:
        record = dict(data)
        record.setdefault("id", default_id)
        if "expected" in record:
            record["expected"] = scalar_text(record["expected"])
        return assertion_from_dict(record)

    def _parse_extraction(self, data: dict) -> ExtractionConfig:
        return ExtractionConfig(
            type=data["type"],
            path=data.get("path") or "",
            variable_name=data["variable"].strip(),
        )
