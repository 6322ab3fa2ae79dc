"""
Reference execution tier.

Thin adapter exposing the pure Python modules through the
``ExecutionTier`` interface. Always available, no loading step.
"""

from __future__ import annotations

from typing import Mapping

from ..assertions import Assertion, AssertionEngine, AssertionResult
from ..extraction import ExtractionConfig, extract
from ..json_path import JSONValue, Resolution, resolve
from ..response import ResponseData
from ..variables import (
    find_variables,
    has_variables,
    substitute,
    substitute_batch,
    substitute_headers,
)
from .base import ExecutionTier


class ReferenceTier(ExecutionTier):
    """The always-resident, pure implementation."""

    name = "reference"

    def __init__(self) -> None:
        self._engine = AssertionEngine()

    def evaluate(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        return self._engine.evaluate(assertion, response)

    def evaluate_batch(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        return self._engine.evaluate_batch(assertions, response)

    def substitute(self, text: str, variables: Mapping[str, str]) -> str:
        return substitute(text, variables)

    def substitute_batch(self, texts: list[str], variables: Mapping[str, str]) -> list[str]:
        return substitute_batch(texts, variables)

    def substitute_headers(
        self, headers: Mapping[str, str], variables: Mapping[str, str]
    ) -> dict[str, str]:
        return substitute_headers(headers, variables)

    def find_variables(self, text: str) -> list[str]:
        return find_variables(text)

    def has_variables(self, text: str) -> bool:
        return has_variables(text)

    def extract(self, config: ExtractionConfig, response: ResponseData) -> Resolution:
        return extract(config, response)

    def resolve(self, value: JSONValue, path: str) -> Resolution:
        return resolve(value, path)
