"""Pipeline orchestration: discover, extract, build, detect, assemble."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config_manager import AnalysisConfig
from .discovery import DiscoveryResult, discover_sources, file_category, to_relative
from .errors import ExtractionFailure
from .extractor import DeclarationExtractor, PatternExtractor
from .graph import DependencyGraph, build_dependency_graph, find_cycles
from .models import FileAnalysis, Report
from .report import Publisher, ReportAssembler
from .resolver import PathResolver
from .storage import ReportStore
from .unused import find_unused_exports, segments_for_subtrees

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRun:
    """Everything one run produced, for callers that want more than the report."""

    report: Report
    discovery: DiscoveryResult
    analyses: List[FileAnalysis]
    graph: DependencyGraph
    report_path: Optional[Path] = None


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ExtractionFailure(path, str(exc)) from exc


class DependencyAnalyzer:
    """Run the full analysis for one project root."""

    def __init__(
        self,
        project_root: Path,
        settings: Optional[AnalysisConfig] = None,
        extractor: Optional[DeclarationExtractor] = None,
        publish: Optional[Publisher] = None,
    ) -> None:
        self.project_root = project_root.resolve()
        self.settings = settings or AnalysisConfig()
        self.extractor = extractor or PatternExtractor(self.settings.alias_prefixes)
        self.assembler = ReportAssembler(publish=publish)

    @property
    def source_dir(self) -> Path:
        return self.project_root / self.settings.source_root

    @property
    def report_path(self) -> Path:
        return self.project_root / self.settings.report_path

    def analyze_file(self, path: Path, category: Optional[str] = None) -> Optional[FileAnalysis]:
        """Extract declarations from one file, or None if it cannot be read.

        Without an explicit *category* the file is classified by its location
        under the configured source root.
        """
        try:
            content = read_source(path)
        except ExtractionFailure as exc:
            logger.warning("%s", exc)
            return None

        rel_path = to_relative(path, self.project_root)
        imports, exports = self.extractor.extract(content, rel_path)
        return FileAnalysis(
            file_name=path.name,
            file_path=rel_path,
            category=category or file_category(rel_path, self.settings.source_root),
            imports=imports,
            exports=exports,
        )

    def run(self, persist: bool = True) -> AnalysisRun:
        discovery = discover_sources(self.project_root, self.settings.subtrees, self.settings.exclude)
        logger.info("Discovered %d candidate file(s) under %s", discovery.total, self.project_root)

        analyses: List[FileAnalysis] = []
        for path in discovery.files:
            analysis = self.analyze_file(path, discovery.categories.get(path))
            if analysis is not None:
                analyses.append(analysis)

        resolver = PathResolver(
            (a.file_path for a in analyses),
            extensions=self.settings.extensions,
            alias_prefixes=self.settings.alias_prefixes,
            source_root=self.settings.source_root,
        )
        graph = build_dependency_graph(analyses, resolver)
        cycles = find_cycles(graph)
        segments = segments_for_subtrees(self.settings.subtrees, self.settings.source_root)
        unused = find_unused_exports(analyses, resolver, segments)

        report = self.assembler.assemble(
            project_root=self.project_root,
            total_files=discovery.total,
            analyses=analyses,
            graph=graph,
            cycles=cycles,
            unused_exports=unused,
        )
        store = ReportStore(self.report_path) if persist else None
        saved = self.assembler.finalize(report, store)

        return AnalysisRun(
            report=report,
            discovery=discovery,
            analyses=analyses,
            graph=graph,
            report_path=saved,
        )
