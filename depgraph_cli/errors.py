"""Error types raised by the analysis pipeline and the report gate."""

from __future__ import annotations

from pathlib import Path


class DepGraphError(Exception):
    """Base class for DepGraph failures that should stop a command."""


class ConfigError(DepGraphError):
    """A ``depgraph.toml`` file could not be parsed or holds bad values."""


class ReportError(DepGraphError):
    """Base class for problems with a persisted dependency report."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class MissingReportError(ReportError):
    """The report file does not exist; it must be regenerated."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Dependency report not found: {path}")


class MalformedReportError(ReportError):
    """The report file exists but is not a structurally valid report."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, f"Invalid dependency report format: {reason}")
        self.reason = reason


class ExtractionFailure(DepGraphError):
    """A source file could not be read; the file is dropped from the graph."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not analyze file {path}: {reason}")
        self.path = path
        self.reason = reason
