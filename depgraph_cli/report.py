"""Assemble analysis results into a single report and hand it off."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import ANALYZER_NAME
from .graph import DependencyGraph
from .models import Cycle, FileAnalysis, ProjectInfo, Report, ReportSummary, UnusedExportRecord
from .storage import ReportStore

logger = logging.getLogger(__name__)

Publisher = Callable[[Report], None]


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReportAssembler:
    """Build a :class:`Report` and optionally publish it to an external sink.

    ``publish`` is an optional capability: when it is ``None`` publishing is
    simply skipped.
    """

    def __init__(self, publish: Optional[Publisher] = None) -> None:
        self.publish = publish

    def assemble(
        self,
        project_root: Path,
        total_files: int,
        analyses: Sequence[FileAnalysis],
        graph: DependencyGraph,
        cycles: List[Cycle],
        unused_exports: List[UnusedExportRecord],
        timestamp: Optional[str] = None,
        analyzer: str = ANALYZER_NAME,
    ) -> Report:
        root = project_root.resolve()
        return Report(
            timestamp=timestamp or utc_timestamp(),
            project=ProjectInfo(name=root.name, root=str(root), analyzer=analyzer),
            summary=ReportSummary(
                total_files=total_files,
                analyzed_files=len(analyses),
                total_nodes=len(graph.nodes),
                total_edges=len(graph.edges),
                cycles_count=len(cycles),
                unused_exports_count=len(unused_exports),
            ),
            type_nodes=[a for a in analyses if a.category == "type"],
            nodes=list(graph.nodes),
            edges=list(graph.edges),
            cycles=[list(c) for c in cycles],
            unused_exports=list(unused_exports),
        )

    def finalize(self, report: Report, store: Optional[ReportStore] = None) -> Optional[Path]:
        """Persist *report* (replacing any previous one) and publish it."""
        saved: Optional[Path] = None
        if store is not None:
            saved = store.save(report)

        if self.publish is not None:
            try:
                self.publish(report)
            except Exception as exc:
                logger.warning("Knowledge-graph publish failed: %s", exc)

        return saved
