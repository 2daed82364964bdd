"""Commit gate: validate a persisted dependency report against thresholds."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config_manager import load_config
from .errors import ConfigError, MalformedReportError, MissingReportError
from .validator import Finding, Severity, ValidationConfig, ValidationResult, Verdict, load_and_validate

console = Console()
err_console = Console(stderr=True)

DETAIL_LIMIT = 5
RULE = "=" * 60


def _print_finding(finding: Finding) -> None:
    if finding.severity is Severity.CRITICAL:
        err_console.print(f"[red]❌ CRITICAL:[/red] {escape(finding.message)}")
    else:
        err_console.print(f"[yellow]⚠️  WARNING:[/yellow] {escape(finding.message)}")
    shown = finding.details[:DETAIL_LIMIT]
    for detail in shown:
        err_console.print(f"      - {escape(detail)}")
    if len(finding.details) > len(shown):
        err_console.print(f"      ... and {len(finding.details) - len(shown)} more")


def _print_metrics(result: ValidationResult) -> None:
    table = Table(title="Graph Metrics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    labels = {
        "nodes": "Nodes (files)",
        "edges": "Edges (imports)",
        "avg_imports_per_file": "Average imports per file",
        "cycles": "Cyclic dependencies",
        "unused_exports": "Unused exports",
        "age_hours": "Report age (hours)",
        "type_files": "Type definition files",
    }
    for key, label in labels.items():
        if key in result.metrics:
            table.add_row(label, str(result.metrics[key]))
    console.print(table)


def _print_verdict(result: ValidationResult, quiet: bool) -> None:
    console.print(RULE)
    verdict = result.verdict
    if verdict is Verdict.FAILED:
        err_console.print("[bold red]❌ DEPENDENCY VALIDATION: FAILED[/bold red]")
        err_console.print(f"   Critical errors: {len(result.criticals)}")
        err_console.print("   Commit blocked - fix critical issues first")
    elif verdict is Verdict.PASSED_WITH_WARNINGS:
        console.print("[bold yellow]⚠️  DEPENDENCY VALIDATION: PASSED WITH WARNINGS[/bold yellow]")
        console.print(f"   Warnings: {len(result.warnings)}")
        console.print("   Commit allowed but consider fixing warnings")
    elif not quiet:
        console.print("[bold green]✅ DEPENDENCY VALIDATION: PASSED[/bold green]")
        console.print("   Graph is healthy and ready for commit")
    console.print(RULE)


def validate(
    report_path: Optional[Path] = typer.Option(
        None, "--report-path", "-r", help="Path to DEPENDENCIES.json (default: report_path from depgraph.toml)."
    ),
    cycles_threshold: Optional[int] = typer.Option(
        None, "--cycles-threshold", min=0, help="Maximum allowed cycles (default: 0)."
    ),
    unused_threshold: Optional[int] = typer.Option(
        None, "--unused-threshold", min=0, help="Warning threshold for unused exports (default: 10)."
    ),
    max_imports: Optional[float] = typer.Option(
        None, "--max-imports", min=0, help="Warning threshold for average imports per file (default: 20)."
    ),
    stale_hours: Optional[float] = typer.Option(
        None, "--stale-hours", min=0, help="Hours before the report counts as stale (default: 24)."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Explicit depgraph.toml to read settings from."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print problems and the verdict."),
):
    """🛡️ Validate a dependency report for commits and CI.

    Exit code 0 when the report passes (with or without warnings), 1 on any
    critical finding or when the report is missing or malformed.

    Example:
      dg validate
      dg validate --unused-threshold 20 --quiet
    """
    try:
        analysis, settings = load_config(Path.cwd(), config_file)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))

    if report_path is None:
        report_path = Path.cwd() / analysis.report_path

    thresholds = ValidationConfig(
        cycles_threshold=settings.cycles_threshold if cycles_threshold is None else cycles_threshold,
        unused_threshold=settings.unused_threshold if unused_threshold is None else unused_threshold,
        max_avg_imports_per_file=(
            settings.max_avg_imports_per_file if max_imports is None else max_imports
        ),
        stale_hours=settings.stale_hours if stale_hours is None else stale_hours,
    )

    if not quiet:
        console.print("[bold cyan]🛡️  Dependency Graph Validator[/bold cyan]\n")
        console.print(f"   Report path: {escape(str(report_path))}")
        console.print(f"   Cycles threshold: {thresholds.cycles_threshold}")
        console.print(f"   Unused threshold: {thresholds.unused_threshold}")
        console.print(f"   Max imports per file: {thresholds.max_avg_imports_per_file:g}")
        console.print(f"   Stale hours: {thresholds.stale_hours:g}\n")

    try:
        result = load_and_validate(report_path, thresholds)
    except MissingReportError as exc:
        err_console.print(f"[red]❌ {escape(str(exc))}[/red]")
        err_console.print("   💡 Run: dg analyze   (then commit your changes)")
        raise typer.Exit(1)
    except MalformedReportError as exc:
        err_console.print(f"[red]❌ {escape(str(exc))}[/red]")
        err_console.print(f"   💡 Delete {escape(str(exc.path))} and run: dg analyze")
        raise typer.Exit(1)

    for finding in result.findings:
        _print_finding(finding)

    if not quiet:
        _print_metrics(result)

    _print_verdict(result, quiet)
    raise typer.Exit(result.exit_code)
