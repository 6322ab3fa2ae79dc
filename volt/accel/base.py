"""
Execution tier interface.

Both the reference tier and the loaded accelerated kernel expose this
surface, so callers can switch between them without changing code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from ..assertions import Assertion, AssertionResult
    from ..extraction import ExtractionConfig
    from ..json_path import JSONValue, Resolution
    from ..response import ResponseData


class ExecutionTier(ABC):
    """
    Abstract base class for evaluation tiers.

    Every implementation must return identical results for identical
    inputs, in the same order.
    """

    name: str = "tier"

    @abstractmethod
    def evaluate(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        """Evaluate one assertion."""
        pass

    @abstractmethod
    def evaluate_batch(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        """Evaluate assertions in order."""
        pass

    @abstractmethod
    def substitute(self, text: str, variables: Mapping[str, str]) -> str:
        pass

    @abstractmethod
    def substitute_batch(self, texts: list[str], variables: Mapping[str, str]) -> list[str]:
        pass

    @abstractmethod
    def substitute_headers(
        self, headers: Mapping[str, str], variables: Mapping[str, str]
    ) -> dict[str, str]:
        pass

    @abstractmethod
    def find_variables(self, text: str) -> list[str]:
        pass

    @abstractmethod
    def has_variables(self, text: str) -> bool:
        pass

    @abstractmethod
    def extract(self, config: ExtractionConfig, response: ResponseData) -> Resolution:
        pass

    @abstractmethod
    def resolve(self, value: JSONValue, path: str) -> Resolution:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
