"""
Dual-Tier Execution

Two interchangeable implementations of evaluation, substitution and
extraction:

    - ReferenceTier: always resident, pure and synchronous
    - Accelerated kernel: loaded on demand, parses the body once per batch

Usage:
    import asyncio
    from volt.accel import Accelerator, ReferenceTier

    reference = ReferenceTier()
    results = reference.evaluate_batch(assertions, response)

    accelerator = Accelerator()
    tier = asyncio.run(accelerator.ensure_loaded())
    assert tier.evaluate_batch(assertions, response) == results

    # After loading, the synchronous fast path is available
    accelerator.evaluate_batch_sync(assertions, response)
"""

# Interface
from .base import ExecutionTier

# Reference tier
from .reference import ReferenceTier

# Loader
from .loader import (
    KERNEL_MODULE,
    AccelerationHandle,
    AccelerationLoadError,
    Accelerator,
    ModuleNotLoadedError,
    ensure_acceleration_loaded,
    get_accelerator,
    import_kernel,
    is_acceleration_loaded,
)

__all__ = [
    # Interface
    "ExecutionTier",
    # Reference tier
    "ReferenceTier",
    # Loader
    "KERNEL_MODULE",
    "AccelerationHandle",
    "AccelerationLoadError",
    "Accelerator",
    "ModuleNotLoadedError",
    "ensure_acceleration_loaded",
    "get_accelerator",
    "import_kernel",
    "is_acceleration_loaded",
]
