"""Persistence for dependency reports.

A report is a single JSON document. Every analysis run replaces the previous
file entirely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .errors import MalformedReportError, MissingReportError
from .models import Report

logger = logging.getLogger(__name__)


class ReportStore:
    """Read and write ``DEPENDENCIES.json`` style report files."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, report: Union[Report, Dict[str, Any]]) -> Path:
        payload = report.to_dict() if isinstance(report, Report) else report
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Report saved to %s", self.path)
        return self.path

    def load_raw(self) -> Dict[str, Any]:
        """Load the report as a plain dict.

        Raises:
            MissingReportError: the file does not exist.
            MalformedReportError: the file is not a JSON object.
        """
        if not self.exists():
            raise MissingReportError(self.path)
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedReportError(self.path, str(exc)) from exc
        except OSError as exc:
            raise MalformedReportError(self.path, f"unreadable: {exc}") from exc
        if not isinstance(payload, dict):
            raise MalformedReportError(self.path, "top-level value is not an object")
        return payload

    def load(self) -> Report:
        payload = self.load_raw()
        try:
            return Report.from_dict(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedReportError(self.path, f"unexpected structure ({exc!r})") from exc
