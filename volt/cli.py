#!/usr/bin/env python3
"""
Volt CLI - HTTP Response Checking Tool

Usage:
    volt run <suite.yaml> [OPTIONS]
    volt validate <suite.yaml>
    volt check-json <file.json> --path data.items[0].id
    volt --version
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .accel import AccelerationLoadError
from .assertions import operator_display_name, type_display_name
from .json_path import extract_json, json_info
from .reporting import RequestRecord, RequestStatus
from .runner import run_suite
from .suite import EngineName, load_suite

app = typer.Typer(
    name="volt",
    help="⚡ Volt - declarative HTTP response checks",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"⚡ Volt v{__version__}")
        raise typer.Exit()


def setup_logging(debug: bool) -> None:
    """Route the volt loggers through rich when debugging."""
    logger = logging.getLogger("volt")
    if not debug:
        logger.setLevel(logging.WARNING)
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(
        False, "--debug",
        help="Enable debug logging"
    ),
):
    """
    ⚡ Volt - declarative HTTP response checks

    Send requests from a YAML suite, check the responses and chain
    extracted values into later requests.
    """
    setup_logging(debug)


def print_record(record: RequestRecord) -> None:
    """Print one finished request in verbose mode."""
    icon = {
        RequestStatus.PASSED: "[green]✅",
        RequestStatus.FAILED: "[red]❌",
        RequestStatus.ERROR: "[red]⚠️ ",
        RequestStatus.SKIPPED: "[yellow]⏭️ ",
    }.get(record.status, "[white]❓")
    code = record.status_code if record.status_code is not None else "---"
    console.print(f"▶ [bold]{escape(record.request_id)}[/bold] {record.method} {escape(record.resolved_url or record.url)}")
    console.print(f"  {icon} {record.status.value}[/] ({code})")

    for result in record.assertion_results:
        style = "green" if result.passed else "red"
        console.print(f"    [{style}]{escape(str(result))}[/{style}]", highlight=False)
    for name, value in record.extracted.items():
        console.print(f"    📎 {escape(name)} = {escape(value[:60])}", highlight=False)
    for name in record.extraction_failures:
        console.print(f"    [red]📎 {escape(name)}: Could not extract value[/red]")
    if record.error_message:
        console.print(f"    [red]{escape(record.error_message)}[/red]")


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    engine: Optional[EngineName] = typer.Option(
        None, "--engine", "-e",
        help="Execution tier (defaults to the suite's setting)"
    ),
    verbose: bool = typer.Option(
        True, "--verbose/--no-verbose", "-V",
        help="Show detailed request output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
):
    """
    Run a check suite.

    Send every request in order, evaluate its assertions, capture
    chain variables and generate a run report.
    """
    if output not in ("text", "json"):
        console.print(f"[red]❌ Unknown output format:[/red] {output} (use text or json)")
        raise typer.Exit(code=2)

    if not quiet:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    if not quiet:
        console.print(f"   [green]✅ Valid suite:[/green] {escape(suite.name)} ({len(suite.requests)} requests)\n")

    show_records = verbose and not quiet and output == "text"
    try:
        reporter = asyncio.run(
            run_suite(suite, engine=engine, on_record=print_record if show_records else None)
        )
    except AccelerationLoadError as e:
        console.print(f"\n[red]❌ {e}[/red]")
        raise typer.Exit(code=1)

    report = reporter.report

    # Output results
    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + report.summary(), highlight=False)

    # Save report
    if not no_report:
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if not quiet:
            console.print(f"\n📁 Report saved: {report_path}")

    raise typer.Exit(code=0 if report.all_passed else 1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and report any errors without sending requests.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Valid suite:[/green] {escape(suite.name)}")
    console.print(f"   Engine: {suite.defaults.engine.value}")
    console.print(f"   Requests: {len(suite.requests)}")

    table = Table(title="Requests")
    table.add_column("ID", style="cyan")
    table.add_column("Request", style="magenta")
    table.add_column("Assertions")
    table.add_column("Extracts")

    for request in suite.requests:
        checks = "\n".join(
            f"{type_display_name(a.type)} {a.property} {operator_display_name(a.operator)} {a.expected}".replace("  ", " ").strip()
            + ("" if a.enabled else " (disabled)")
            for a in request.assertions
        )
        extracts = ", ".join(e.variable_name for e in request.extract)
        table.add_row(
            escape(request.id),
            escape(f"{request.method.value} {request.url}"),
            escape(checks) or "-",
            escape(extracts) or "-",
        )

    console.print()
    console.print(table)


@app.command("check-json")
def check_json(
    json_file: Path = typer.Argument(
        ...,
        help="Path to a JSON document",
        exists=True,
        readable=True,
    ),
    path: str = typer.Option(
        "", "--path", "-p",
        help="Dot/bracket path such as data.items[0].id (empty for the root)"
    ),
):
    """
    Resolve a path in a JSON file.

    Shows what a bodyJson assertion or json extraction would see.
    """
    text = json_file.read_text(encoding="utf-8")
    info_ = json_info(text)
    if not info_.valid:
        console.print(f"[red]❌ Not valid JSON:[/red] {json_file}")
        raise typer.Exit(code=1)

    console.print(f"📄 {json_file}: {info_.type}, {info_.size} bytes, depth {info_.depth}")

    value = extract_json(text, path)
    if value == "undefined":
        console.print(f"[red]❌ Path not found:[/red] {escape(path)}")
        raise typer.Exit(code=1)

    console.print(f"[green]✅ {escape(path) or '(root)'}[/green] = {escape(value)}", highlight=False)


@app.command()
def info():
    """
    Show information about Volt.
    """
    console.print(f"""
⚡ [bold]Volt[/bold] v{__version__}

Declarative HTTP response checks

[bold]Features:[/bold]
  • YAML check suites with {{{{variable}}}} templates
  • Status, timing, body, JSON path and header assertions
  • Chain variables extracted from JSON, headers, regex, status or body
  • Reference and accelerated evaluation engines
  • Authentication support (Bearer, API Key, Basic)
  • Detailed JSON run reports

[bold]Quick Start:[/bold]
  volt run checks/users.yaml
  volt validate checks/users.yaml
  volt check-json response.json --path data.items[0].id
""")


if __name__ == "__main__":
    app()
