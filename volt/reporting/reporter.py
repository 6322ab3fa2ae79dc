"""
Reporter for building and managing run reports.

This module provides the Reporter class which helps construct
run reports from suite executions.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .models import (
    RequestRecord,
    RequestStatus,
    RunReport,
    compute_suite_hash,
)

if TYPE_CHECKING:
    from ..assertions import AssertionResult
    from ..response import ResponseData
    from ..suite import Suite


class Reporter:
    """
    Builds and manages run reports.

    The Reporter provides a convenient interface for creating reports
    from Suite objects and recording request outcomes.

    Example:
        from volt.suite import load_suite
        from volt.reporting import Reporter

        suite, _ = load_suite("checks/users.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()

        reporter.start_request("login", resolved_url="https://api.example.com/login")
        reporter.complete_request("login", response, results, extracted={"token": "abc"})

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport):
        """
        Initialize with a RunReport.

        Use Reporter.from_suite() for the typical case.
        """
        self.report = report

    @classmethod
    def from_suite(
        cls,
        suite: Suite,
        engine: str | None = None,
        run_id: str | None = None,
    ) -> Reporter:
        """
        Create a Reporter from a parsed Suite.

        Args:
            suite: The parsed suite to create a report for
            engine: Execution tier name (defaults to the suite's setting)
            run_id: Optional custom run ID (auto-generated if not provided)

        Returns:
            Reporter instance ready to record request results
        """
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(suite.to_dict()),
            engine=engine or suite.defaults.engine.value,
        )

        if run_id:
            report.run_id = run_id

        # Pre-populate request records from the suite
        for request in suite.requests:
            report.add_request(
                RequestRecord(
                    request_id=request.id,
                    method=request.method.value,
                    url=request.url,
                )
            )

        return cls(report)

    def start_run(self) -> None:
        """Mark the run as started."""
        self.report.start()

    def finish_run(self, variables: dict[str, str] | None = None) -> RunReport:
        """
        Mark the run as completed and return the final report.

        Args:
            variables: Chain variables captured during the run

        Returns:
            The completed RunReport with summary stats
        """
        if variables is not None:
            self.report.variables = dict(variables)
        self.report.complete()
        return self.report

    def start_request(self, request_id: str, resolved_url: str | None = None) -> RequestRecord | None:
        """
        Mark a request as started.

        Returns:
            The RequestRecord, or None if request not found
        """
        record = self.report.get_request(request_id)
        if record:
            record.resolved_url = resolved_url
            record.start()
        return record

    def complete_request(
        self,
        request_id: str,
        response: ResponseData,
        results: list[AssertionResult],
        extracted: dict[str, str] | None = None,
        extraction_failures: list[str] | None = None,
    ) -> RequestRecord | None:
        """
        Record a completed request.

        The request passes when every assertion passed and every
        extraction rule produced a value.

        Args:
            request_id: The ID of the request
            response: The response snapshot
            results: Assertion results, in assertion order
            extracted: Chain variables the request produced
            extraction_failures: Names of variables that could not be extracted

        Returns:
            The RequestRecord, or None if request not found
        """
        record = self.report.get_request(request_id)
        if record:
            record.status_code = response.status_code
            record.response_time_ms = response.timing_ms
            record.assertion_results = list(results)
            record.extracted = dict(extracted or {})
            record.extraction_failures = list(extraction_failures or [])
            failed = bool(record.failed_assertions or record.extraction_failures)
            record.complete(RequestStatus.FAILED if failed else RequestStatus.PASSED)
        return record

    def complete_request_error(
        self,
        request_id: str,
        error_message: str,
        error_details: dict[str, Any] | None = None,
    ) -> RequestRecord | None:
        """
        Mark a request as errored (no response was received).

        Args:
            request_id: The ID of the request
            error_message: Error description
            error_details: Additional error context

        Returns:
            The RequestRecord, or None if request not found
        """
        record = self.report.get_request(request_id)
        if record:
            record.error_message = error_message
            record.error_details = error_details
            record.complete(RequestStatus.ERROR)
        return record

    def skip_request(self, request_id: str, reason: str | None = None) -> RequestRecord | None:
        """
        Mark a request as skipped.

        Args:
            request_id: The ID of the request
            reason: Optional reason for skipping

        Returns:
            The RequestRecord, or None if request not found
        """
        record = self.report.get_request(request_id)
        if record:
            if reason:
                record.error_message = f"Skipped: {reason}"
            record.complete(RequestStatus.SKIPPED)
        return record

    def save_json(self, path: str | Path) -> None:
        """
        Save the report to a JSON file.

        Args:
            path: Path to save the JSON file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json(), encoding="utf-8")

    def get_summary(self) -> str:
        """Get a human-readable summary of the run."""
        return self.report.summary()
