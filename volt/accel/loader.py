"""
Lazy loading of the accelerated kernel.

The kernel module is imported (and warmed up) off the event loop the first
time anyone awaits ``Accelerator.ensure_loaded()``. Exactly one load is in
flight at a time; every concurrent waiter sees the outcome of that load.
After a failure the next call starts a fresh attempt.

Synchronous ``*_sync`` methods are only valid after the load completed and
raise ``ModuleNotLoadedError`` otherwise. The async methods load first and
then call through.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from types import ModuleType
from typing import Callable, Mapping

from ..assertions import Assertion, AssertionResult
from ..extraction import ExtractionConfig
from ..json_path import JSONValue, Resolution
from ..response import ResponseData
from .base import ExecutionTier

logger = logging.getLogger(__name__)

KERNEL_MODULE = "volt.accel.kernel"


class ModuleNotLoadedError(RuntimeError):
    """A synchronous accelerated call was made before the kernel was loaded."""


class AccelerationLoadError(RuntimeError):
    """Loading the accelerated kernel failed."""


def import_kernel() -> ModuleType:
    """Import the kernel module and prime its caches."""
    module = importlib.import_module(KERNEL_MODULE)
    module.warm_up()
    return module


class AccelerationHandle(ExecutionTier):
    """``ExecutionTier`` view over a loaded kernel module."""

    name = "accelerated"

    def __init__(self, kernel: ModuleType):
        self.kernel = kernel

    def evaluate(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        return self.kernel.evaluate(assertion, response)

    def evaluate_batch(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        return self.kernel.evaluate_batch(assertions, response)

    def substitute(self, text: str, variables: Mapping[str, str]) -> str:
        return self.kernel.substitute(text, variables)

    def substitute_batch(self, texts: list[str], variables: Mapping[str, str]) -> list[str]:
        return self.kernel.substitute_batch(texts, variables)

    def substitute_headers(
        self, headers: Mapping[str, str], variables: Mapping[str, str]
    ) -> dict[str, str]:
        return self.kernel.substitute_headers(headers, variables)

    def find_variables(self, text: str) -> list[str]:
        return self.kernel.find_variables(text)

    def has_variables(self, text: str) -> bool:
        return self.kernel.has_variables(text)

    def extract(self, config: ExtractionConfig, response: ResponseData) -> Resolution:
        return self.kernel.extract(config, response)

    def resolve(self, value: JSONValue, path: str) -> Resolution:
        return self.kernel.resolve(value, path)


class Accelerator:
    """
    Owner of the accelerated kernel's load state.

    Create one per application (or per test). The ``loader`` callable runs
    in a worker thread and must return the kernel module; tests can pass a
    fake to simulate slow or failing loads.

    Example:
        accelerator = Accelerator()
        tier = await accelerator.ensure_loaded()
        results = tier.evaluate_batch(assertions, response)

        # later, on the same thread, without awaiting
        accelerator.evaluate_batch_sync(assertions, response)
    """

    def __init__(self, loader: Callable[[], ModuleType] = import_kernel):
        self._loader = loader
        self._handle: AccelerationHandle | None = None
        self._loading: asyncio.Future[AccelerationHandle] | None = None
        self.load_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._handle is not None

    async def ensure_loaded(self) -> AccelerationHandle:
        """
        Load the kernel if needed and return its handle.

        Concurrent callers share the single in-flight load.

        Raises:
            AccelerationLoadError: If the in-flight load failed
        """
        if self._handle is not None:
            return self._handle

        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._loading)

    async def _load(self) -> AccelerationHandle:
        self.load_count += 1
        logger.debug(f"Loading accelerated kernel (attempt {self.load_count})")
        try:
            kernel = await asyncio.to_thread(self._loader)
            self._handle = AccelerationHandle(kernel)
            logger.info("Accelerated kernel loaded")
            return self._handle
        except Exception as e:
            logger.warning(f"Failed to load accelerated kernel: {e}")
            raise AccelerationLoadError(f"Failed to load accelerated kernel: {e}") from e
        finally:
            self._loading = None

    def require(self) -> AccelerationHandle:
        """
        Handle of the loaded kernel.

        Raises:
            ModuleNotLoadedError: If the kernel has not been loaded yet
        """
        if self._handle is None:
            raise ModuleNotLoadedError(
                "Accelerated kernel is not loaded. Await ensure_loaded() first."
            )
        return self._handle

    # ─────────────────────────────────────────────────────────────────────
    # Synchronous fast path (kernel must already be loaded)
    # ─────────────────────────────────────────────────────────────────────

    def evaluate_sync(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        return self.require().evaluate(assertion, response)

    def evaluate_batch_sync(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        return self.require().evaluate_batch(assertions, response)

    def substitute_sync(self, text: str, variables: Mapping[str, str]) -> str:
        return self.require().substitute(text, variables)

    def substitute_batch_sync(self, texts: list[str], variables: Mapping[str, str]) -> list[str]:
        return self.require().substitute_batch(texts, variables)

    def substitute_headers_sync(
        self, headers: Mapping[str, str], variables: Mapping[str, str]
    ) -> dict[str, str]:
        return self.require().substitute_headers(headers, variables)

    def find_variables_sync(self, text: str) -> list[str]:
        return self.require().find_variables(text)

    def has_variables_sync(self, text: str) -> bool:
        return self.require().has_variables(text)

    def extract_sync(self, config: ExtractionConfig, response: ResponseData) -> Resolution:
        return self.require().extract(config, response)

    # ─────────────────────────────────────────────────────────────────────
    # Async path (load, then call)
    # ─────────────────────────────────────────────────────────────────────

    async def evaluate(self, assertion: Assertion, response: ResponseData) -> AssertionResult:
        return (await self.ensure_loaded()).evaluate(assertion, response)

    async def evaluate_batch(
        self, assertions: list[Assertion], response: ResponseData
    ) -> list[AssertionResult]:
        return (await self.ensure_loaded()).evaluate_batch(assertions, response)

    async def substitute(self, text: str, variables: Mapping[str, str]) -> str:
        return (await self.ensure_loaded()).substitute(text, variables)

    async def substitute_batch(self, texts: list[str], variables: Mapping[str, str]) -> list[str]:
        return (await self.ensure_loaded()).substitute_batch(texts, variables)

    async def substitute_headers(
        self, headers: Mapping[str, str], variables: Mapping[str, str]
    ) -> dict[str, str]:
        return (await self.ensure_loaded()).substitute_headers(headers, variables)

    async def find_variables(self, text: str) -> list[str]:
        return (await self.ensure_loaded()).find_variables(text)

    async def has_variables(self, text: str) -> bool:
        return (await self.ensure_loaded()).has_variables(text)

    async def extract(self, config: ExtractionConfig, response: ResponseData) -> Resolution:
        return (await self.ensure_loaded()).extract(config, response)


# Process-wide default instance, used by the top-level volt API
_default_accelerator = Accelerator()


def get_accelerator() -> Accelerator:
    return _default_accelerator


async def ensure_acceleration_loaded() -> AccelerationHandle:
    """Load the default accelerator's kernel (idempotent)."""
    return await _default_accelerator.ensure_loaded()


def is_acceleration_loaded() -> bool:
    return _default_accelerator.is_loaded
