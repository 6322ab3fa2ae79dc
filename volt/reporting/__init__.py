"""
Run Reporting

This package provides tools for capturing and persisting the outcome of
a suite run.

Usage:
    from volt.reporting import Reporter, RunReport

    reporter = Reporter.from_suite(suite)
    reporter.start_run()
    # ... execute requests ...
    report = reporter.finish_run()

    print(report.summary())
    reporter.save_json("reports/run.json")
"""

from .models import (
    RequestRecord,
    RequestStatus,
    RunReport,
    RunStatus,
    compute_suite_hash,
)
from .reporter import Reporter

__all__ = [
    # Models
    "RunReport",
    "RequestRecord",
    "RunStatus",
    "RequestStatus",
    "compute_suite_hash",
    # Reporter
    "Reporter",
]
