"""Threshold-based gate over a persisted dependency report.

Every rule is evaluated, never fail-fast, and the findings are combined into
one verdict:

- too many cycles, an empty graph, or a graph without edges are critical;
- unused exports, import density, report age and export-less type files
  only produce warnings and never change the exit code on their own.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import (
    DEFAULT_CYCLES_THRESHOLD,
    DEFAULT_MAX_AVG_IMPORTS,
    DEFAULT_STALE_HOURS,
    DEFAULT_UNUSED_THRESHOLD,
)
from .errors import MalformedReportError
from .storage import ReportStore


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"


class Verdict(str, Enum):
    PASSED = "PASSED"
    PASSED_WITH_WARNINGS = "PASSED WITH WARNINGS"
    FAILED = "FAILED"


@dataclass
class ValidationConfig:
    cycles_threshold: int = DEFAULT_CYCLES_THRESHOLD
    unused_threshold: int = DEFAULT_UNUSED_THRESHOLD
    max_avg_imports_per_file: float = DEFAULT_MAX_AVG_IMPORTS
    stale_hours: float = DEFAULT_STALE_HOURS


@dataclass
class Finding:
    severity: Severity
    code: str
    message: str
    details: List[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    findings: List[Finding] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def criticals(self) -> List[Finding]:
        return [f for f in self.findings if f.severity is Severity.CRITICAL]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.severity is Severity.WARNING]

    @property
    def verdict(self) -> Verdict:
        if self.criticals:
            return Verdict.FAILED
        if self.warnings:
            return Verdict.PASSED_WITH_WARNINGS
        return Verdict.PASSED

    @property
    def exit_code(self) -> int:
        return 1 if self.verdict is Verdict.FAILED else 0

    def codes(self) -> List[str]:
        return [f.code for f in self.findings]


def _is_node_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_structure(report: Dict[str, Any]) -> Optional[str]:
    """Return a reason string when *report* lacks the fields the gate reads."""
    summary = report.get("summary")
    if not isinstance(summary, dict):
        return "missing 'summary' object"
    for key in ("totalNodes", "totalEdges"):
        value = summary.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return f"'summary.{key}' must be an integer"
    for key in ("cycles", "unusedExports", "typeNodes"):
        if key in report and not isinstance(report[key], list):
            return f"'{key}' must be a list"
    graph = report.get("graph")
    if graph is not None and (not isinstance(graph, dict) or not isinstance(graph.get("nodes", []), list)):
        return "'graph.nodes' must be a list"
    for cycle in report.get("cycles", []):
        if not isinstance(cycle, list) or not all(_is_node_id(member) for member in cycle):
            return "'cycles' entries must be lists of node ids"
    for node in (graph or {}).get("nodes", []):
        if isinstance(node, dict) and "id" in node and not _is_node_id(node["id"]):
            return "'graph.nodes[].id' must be an integer"
    if "timestamp" in report and not isinstance(report["timestamp"], str):
        return "'timestamp' must be a string"
    return None


def parse_timestamp(value: str) -> datetime:
    moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _node_labels(report: Dict[str, Any]) -> Dict[Any, str]:
    labels: Dict[Any, str] = {}
    for node in (report.get("graph") or {}).get("nodes", []):
        if isinstance(node, dict) and "id" in node:
            name = str(node.get("name", "unknown"))
            labels[node["id"]] = posixpath.splitext(name)[0]
    return labels


def _count(report: Dict[str, Any], list_key: str, summary_key: str) -> int:
    items = report.get(list_key)
    if isinstance(items, list):
        return len(items)
    return int(report["summary"].get(summary_key, 0) or 0)


def _check_cycles(report: Dict[str, Any], config: ValidationConfig, result: ValidationResult) -> None:
    cycles_count = _count(report, "cycles", "cyclesCount")
    result.metrics["cycles"] = cycles_count
    if cycles_count <= config.cycles_threshold:
        return
    labels = _node_labels(report)
    details = [
        " → ".join(labels.get(node_id, "unknown") for node_id in cycle)
        for cycle in report.get("cycles") or []
        if isinstance(cycle, list)
    ]
    result.findings.append(Finding(
        severity=Severity.CRITICAL,
        code="cycles",
        message=f"{cycles_count} cyclic dependencies found (threshold: {config.cycles_threshold})",
        details=details,
    ))


def _check_structure(report: Dict[str, Any], config: ValidationConfig, result: ValidationResult) -> None:
    summary = report["summary"]
    total_nodes = summary["totalNodes"]
    total_edges = summary["totalEdges"]
    result.metrics["nodes"] = total_nodes
    result.metrics["edges"] = total_edges

    if total_nodes == 0:
        result.findings.append(Finding(
            severity=Severity.CRITICAL,
            code="empty_graph",
            message="Graph contains no nodes (files); the project may have no analyzable files",
        ))
        return
    if total_edges == 0:
        result.findings.append(Finding(
            severity=Severity.CRITICAL,
            code="no_edges",
            message="Graph contains no edges (imports); files may not import each other or analysis failed",
        ))
        return

    avg_imports = round(total_edges / total_nodes, 2)
    result.metrics["avg_imports_per_file"] = avg_imports
    if avg_imports > config.max_avg_imports_per_file:
        result.findings.append(Finding(
            severity=Severity.WARNING,
            code="import_density",
            message=(
                f"High average imports per file ({avg_imports:.2f}, "
                f"threshold: {config.max_avg_imports_per_file:g})"
            ),
        ))


def _check_unused(report: Dict[str, Any], config: ValidationConfig, result: ValidationResult) -> None:
    unused_count = _count(report, "unusedExports", "unusedExportsCount")
    result.metrics["unused_exports"] = unused_count
    if unused_count <= config.unused_threshold:
        return
    details = [
        f"{posixpath.basename(str(u.get('file', '')))}: '{u.get('export')}' (line {u.get('line')})"
        for u in report.get("unusedExports") or []
        if isinstance(u, dict)
    ]
    result.findings.append(Finding(
        severity=Severity.WARNING,
        code="unused_exports",
        message=f"{unused_count} unused exports (threshold: {config.unused_threshold})",
        details=details,
    ))


def _check_freshness(
    report: Dict[str, Any],
    config: ValidationConfig,
    result: ValidationResult,
    now: datetime,
) -> None:
    timestamp = report.get("timestamp")
    if not timestamp:
        return
    try:
        generated = parse_timestamp(timestamp)
    except ValueError:
        result.findings.append(Finding(
            severity=Severity.WARNING,
            code="stale",
            message=f"Report timestamp '{timestamp}' is unreadable; re-run the analysis",
        ))
        return
    age_hours = (now - generated).total_seconds() / 3600
    result.metrics["age_hours"] = round(age_hours, 1)
    if age_hours > config.stale_hours:
        result.findings.append(Finding(
            severity=Severity.WARNING,
            code="stale",
            message=f"Report is stale ({age_hours:.1f} hours old, threshold: {config.stale_hours:g})",
        ))


def _check_type_nodes(report: Dict[str, Any], result: ValidationResult) -> None:
    type_nodes = [t for t in report.get("typeNodes") or [] if isinstance(t, dict)]
    result.metrics["type_files"] = len(type_nodes)
    empty = [t for t in type_nodes if not t.get("exports")]
    if empty:
        result.findings.append(Finding(
            severity=Severity.WARNING,
            code="empty_type_files",
            message=f"{len(empty)} type files have no exports",
            details=[str(t.get("fileName", "unknown")) for t in empty],
        ))


def validate_report(
    report: Dict[str, Any],
    config: Optional[ValidationConfig] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Apply every rule to an already loaded, structurally checked report."""
    config = config or ValidationConfig()
    now = now or datetime.now(timezone.utc)
    result = ValidationResult()

    _check_cycles(report, config, result)
    _check_unused(report, config, result)
    _check_structure(report, config, result)
    _check_freshness(report, config, result, now)
    _check_type_nodes(report, result)

    return result


def load_and_validate(
    report_path: Path,
    config: Optional[ValidationConfig] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Load a persisted report and validate it.

    Raises:
        MissingReportError: no report at *report_path*.
        MalformedReportError: the report cannot be parsed or lacks required fields.
    """
    report = ReportStore(report_path).load_raw()
    reason = check_structure(report)
    if reason is not None:
        raise MalformedReportError(report_path, reason)
    return validate_report(report, config, now)
