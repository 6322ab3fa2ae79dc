"""
Report data models for suite runs.

This module defines the data structures for capturing complete
run records including metadata, per-request results, and timing.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..assertions import AssertionResult, AssertionSummary, summarize_results


class RequestStatus(str, Enum):
    """Status of an individual request execution."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class RequestRecord:
    """
    Record of a single request execution.

    Captures what was sent, what came back, every assertion outcome and
    the chain variables the request produced.
    """
    request_id: str
    method: str
    url: str
    status: RequestStatus = RequestStatus.PENDING

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # What was actually sent
    resolved_url: str | None = None

    # Response
    status_code: int | None = None
    response_time_ms: int | None = None

    # Evaluation
    assertion_results: list[AssertionResult] = field(default_factory=list)
    extracted: dict[str, str] = field(default_factory=dict)
    extraction_failures: list[str] = field(default_factory=list)

    # Errors and messages
    error_message: str | None = None
    error_details: dict[str, Any] | None = None

    @property
    def assertion_summary(self) -> AssertionSummary:
        return summarize_results(self.assertion_results)

    @property
    def failed_assertions(self) -> list[AssertionResult]:
        return [r for r in self.assertion_results if not r.passed]

    def start(self) -> None:
        """Mark the request as started."""
        self.status = RequestStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: RequestStatus) -> None:
        """Mark the request as completed with given status."""
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "request_id": self.request_id,
            "method": self.method,
            "url": self.url,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "resolved_url": self.resolved_url,
            "status_code": self.status_code,
            "response_time_ms": self.response_time_ms,
            "assertions": self.assertion_summary.to_dict(),
            "assertion_results": [r.to_dict() for r in self.assertion_results],
            "extracted": dict(self.extracted),
            "extraction_failures": list(self.extraction_failures),
            "error_message": self.error_message,
            "error_details": self.error_details,
        }


@dataclass
class RunReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite being executed,
    and detailed records for each request.
    """
    # Run identification
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""
    engine: str = "reference"

    # Overall status
    status: RunStatus = RunStatus.PENDING

    # Request records
    requests: list[RequestRecord] = field(default_factory=list)

    # Chain variables at the end of the run
    variables: dict[str, str] = field(default_factory=dict)

    # Summary stats
    total_requests: int = 0
    passed_requests: int = 0
    failed_requests: int = 0
    error_requests: int = 0
    skipped_requests: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        # Calculate summary stats
        self.total_requests = len(self.requests)
        self.passed_requests = sum(1 for r in self.requests if r.status == RequestStatus.PASSED)
        self.failed_requests = sum(1 for r in self.requests if r.status == RequestStatus.FAILED)
        self.error_requests = sum(1 for r in self.requests if r.status == RequestStatus.ERROR)
        self.skipped_requests = sum(1 for r in self.requests if r.status == RequestStatus.SKIPPED)

        # Determine overall status
        if self.error_requests > 0:
            self.status = RunStatus.ERROR
        elif self.failed_requests > 0 or self.skipped_requests > 0:
            self.status = RunStatus.FAILED
        else:
            self.status = RunStatus.PASSED

    @property
    def all_passed(self) -> bool:
        return self.status == RunStatus.PASSED

    def add_request(self, record: RequestRecord) -> None:
        """Add a request record to the run."""
        self.requests.append(record)

    def get_request(self, request_id: str) -> RequestRecord | None:
        """Get a request record by ID."""
        for record in self.requests:
            if record.request_id == request_id:
                return record
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "engine": self.engine,
            "status": self.status.value,
            "summary": {
                "total": self.total_requests,
                "passed": self.passed_requests,
                "failed": self.failed_requests,
                "errors": self.error_requests,
                "skipped": self.skipped_requests,
            },
            "variables": dict(self.variables),
            "requests": [record.to_dict() for record in self.requests],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str, ensure_ascii=False)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        rule = "═" * 59
        thin = "─" * 59
        lines = [
            rule,
            f"  Run Report: {self.suite_name}",
            rule,
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Engine:     {self.engine}",
            f"  Duration:   {self.duration_ms:.0f}ms" if self.duration_ms else "  Duration:   N/A",
            thin,
            f"  Requests: {self.passed_requests} passed, {self.failed_requests} failed, "
            f"{self.error_requests} errors, {self.skipped_requests} skipped",
            thin,
        ]

        for record in self.requests:
            icon = _request_icon(record.status)
            code = record.status_code if record.status_code is not None else "---"
            timing = f"{record.response_time_ms}ms" if record.response_time_ms is not None else "N/A"
            lines.append(f"  {icon} [{record.request_id}] {record.method} {code} - {timing}")

            for result in record.failed_assertions:
                lines.append(f"      └─ {result.message}")
            for name in record.extraction_failures:
                lines.append(f"      └─ {name}: Could not extract value")
            if record.error_message:
                lines.append(f"      └─ Error: {record.error_message}")

        lines.append(rule)
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Args:
        suite_dict: The suite data as a dict

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()[:12]


def _status_icon(status: RunStatus) -> str:
    """Get icon for run status."""
    return {
        RunStatus.PENDING: "⏳",
        RunStatus.RUNNING: "🔄",
        RunStatus.PASSED: "✅",
        RunStatus.FAILED: "❌",
        RunStatus.ERROR: "⚠️",
    }.get(status, "❓")


def _request_icon(status: RequestStatus) -> str:
    """Get icon for request status."""
    return {
        RequestStatus.PENDING: "⏳",
        RequestStatus.RUNNING: "🔄",
        RequestStatus.PASSED: "✅",
        RequestStatus.FAILED: "❌",
        RequestStatus.ERROR: "⚠️",
        RequestStatus.SKIPPED: "⏭️",
    }.get(status, "❓")
