"""Usage statistics for exported type aliases and interfaces.

Scans the types subtree for ``export type`` / ``export interface``
declarations and counts, for each one, the project files that import it by
name. Produces the ``TYPES_REPORT.json`` document.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from statistics import mean
from typing import Any, Dict, Iterable, List, Optional

from .config import ANALYZER_NAME, EXCLUDED_DIRS
from .discovery import find_files, to_relative
from .extractor import line_number_of
from .report import utc_timestamp

logger = logging.getLogger(__name__)

TYPE_EXPORT_RE = re.compile(r"export\s+(type|interface)\s+([A-Z][a-zA-Z0-9_]*)")
COMPLEX_NAME_MARKERS = ("Config", "Options", "Props", "State")
USAGE_SAMPLE_LIMIT = 10
SEARCH_EXTENSIONS = (".ts", ".tsx")
TYPE_SCAN_EXCLUDE = tuple(EXCLUDED_DIRS) + ("build",)


@dataclass
class TypeDefinition:
    name: str
    kind: str
    file_name: str
    file_path: str
    line: int
    usages: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def usage_count(self) -> int:
        return len(self.usages)

    @property
    def is_used(self) -> bool:
        return bool(self.usages)

    @property
    def is_complex(self) -> bool:
        return any(marker in self.name for marker in COMPLEX_NAME_MARKERS) or len(self.name) > 20

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "fileName": self.file_name,
            "filePath": self.file_path,
            "line": self.line,
            "usageCount": self.usage_count,
            "usages": self.usages[:USAGE_SAMPLE_LIMIT],
            "isUsed": self.is_used,
        }


def is_type_source(path: Path) -> bool:
    name = path.name
    return (
        name.endswith(".ts")
        and not name.endswith(".d.ts")
        and ".test." not in name
        and ".spec." not in name
    )


def parse_type_definitions(content: str, file_name: str, file_path: str) -> List[TypeDefinition]:
    return [
        TypeDefinition(
            name=match.group(2),
            kind=match.group(1),
            file_name=file_name,
            file_path=file_path,
            line=line_number_of(content, match.group(0)),
        )
        for match in TYPE_EXPORT_RE.finditer(content)
    ]


def usage_pattern(type_name: str) -> "re.Pattern[str]":
    name = re.escape(type_name)
    return re.compile(
        rf"import\s*(?:type\s*)?\{{[^}}]*\b{name}\b[^}}]*\}}\s*from\s+['\"]([^'\"]+)['\"]"
        rf"|import\s+{name}\s+from\s+['\"]([^'\"]+)['\"]"
    )


def find_type_usages(type_name: str, sources: Dict[str, str]) -> List[Dict[str, Any]]:
    """Files (by relative path) whose imports mention *type_name*."""
    pattern = usage_pattern(type_name)
    usages: List[Dict[str, Any]] = []
    for rel_path, content in sources.items():
        count = len(pattern.findall(content))
        if count:
            usages.append({"filePath": rel_path, "importCount": count})
    return usages


def _load_sources(project_root: Path, paths: Iterable[Path]) -> Dict[str, str]:
    sources: Dict[str, str] = {}
    for path in paths:
        try:
            sources[to_relative(path, project_root)] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
    return sources


def summarize(types: List[TypeDefinition], total_files: int) -> Dict[str, Any]:
    used = [t for t in types if t.is_used]
    complex_count = sum(1 for t in types if t.is_complex)
    summary: Dict[str, Any] = {
        "totalFiles": total_files,
        "totalTypes": len(types),
        "usedTypes": len(used),
        "unusedTypes": len(types) - len(used),
        "usageRate": (len(used) / len(types) * 100) if types else 0.0,
        "usageDistribution": {},
        "complexity": {
            "simpleTypes": len(types) - complex_count,
            "complexTypes": complex_count,
            "complexityRatio": (complex_count / len(types)) if types else 0.0,
        },
    }
    counts = sorted(t.usage_count for t in used)
    if counts:
        summary["usageDistribution"] = {
            "min": counts[0],
            "max": counts[-1],
            "average": mean(counts),
            "median": counts[len(counts) // 2],
        }
    return summary


def build_type_report(
    project_root: Path,
    types_dir: Optional[Path] = None,
    exclude: Iterable[str] = TYPE_SCAN_EXCLUDE,
) -> Dict[str, Any]:
    """Analyze type definitions under *types_dir* (default ``src/types``).

    Raises ``FileNotFoundError`` when the types directory does not exist.
    """
    project_root = project_root.resolve()
    types_dir = types_dir or project_root / "src" / "types"
    if not types_dir.is_dir():
        raise FileNotFoundError(f"types directory not found: {types_dir}")

    excluded = list(exclude)
    type_files = [p for p in find_files(types_dir, [".ts"], excluded) if is_type_source(p)]
    type_sources = _load_sources(project_root, type_files)
    project_sources = _load_sources(project_root, find_files(project_root, SEARCH_EXTENSIONS, excluded))

    types: List[TypeDefinition] = []
    for rel_path, content in type_sources.items():
        definitions = parse_type_definitions(content, Path(rel_path).name, rel_path)
        for definition in definitions:
            definition.usages = find_type_usages(definition.name, project_sources)
        types.extend(definitions)
        logger.debug("%s: %d type export(s)", rel_path, len(definitions))

    types.sort(key=lambda t: t.usage_count, reverse=True)
    return {
        "timestamp": utc_timestamp(),
        "project": {
            "name": project_root.name,
            "root": str(project_root),
            "analyzer": f"{ANALYZER_NAME}-types",
        },
        "summary": summarize(types, len(type_files)),
        "types": [t.to_dict() for t in types],
        "unusedTypes": [
            {"name": t.name, "kind": t.kind, "file": t.file_name, "line": t.line}
            for t in types
            if not t.is_used
        ],
    }
