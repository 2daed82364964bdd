"""Heuristic detection of exports that no other file imports.

Usage is matched by *name*: an export counts as used when some import of
the same name plausibly points at the exporting file. Two unrelated symbols
that share a name can therefore mark each other as used.
"""

from __future__ import annotations

import logging
import posixpath
from collections import defaultdict
from typing import Dict, List, Mapping, Sequence

from .config import CATEGORY_SEGMENTS
from .discovery import SubtreeConfig
from .models import FileAnalysis, ImportDeclaration, UnusedExportRecord
from .resolver import PathResolver

logger = logging.getLogger(__name__)


def category_from_segment(segment: str, segments: Mapping[str, str] = CATEGORY_SEGMENTS) -> str:
    """Map a leading alias segment (``types``) to a category (``type``).

    Unknown segments map to themselves.
    """
    return segments.get(segment, segment)


def segments_for_subtrees(
    subtrees: Sequence[SubtreeConfig],
    source_root: str,
    base: Mapping[str, str] = CATEGORY_SEGMENTS,
) -> Dict[str, str]:
    """Extend *base* with the leading directory of each subtree under *source_root*.

    Existing entries win, so ``app`` keeps mapping to ``page`` even though the
    ``api`` subtree also lives under ``app/``.
    """
    segments = dict(base)
    root = source_root.strip("/")
    for subtree in subtrees:
        rel = subtree.path.strip("/")
        if root:
            if not rel.startswith(root + "/"):
                continue
            rel = rel[len(root) + 1:]
        leading = rel.split("/")[0]
        if leading:
            segments.setdefault(leading, subtree.category)
    return segments


def build_import_index(analyses: Sequence[FileAnalysis]) -> Dict[str, List[ImportDeclaration]]:
    """Index every import across the project by imported name."""
    index: Dict[str, List[ImportDeclaration]] = defaultdict(list)
    for analysis in analyses:
        for imp in analysis.imports:
            index[imp.name].append(imp)
    return dict(index)


def _strip_extension(file_name: str) -> str:
    stem, _ = posixpath.splitext(file_name)
    return stem


def _alias_matches(
    imp: ImportDeclaration,
    prefix: str,
    exporter: FileAnalysis,
    segments: Mapping[str, str],
) -> bool:
    parts = imp.path[len(prefix):].split("/")
    target_category = category_from_segment(parts[0], segments)
    target_name = parts[-1]
    if exporter.category != target_category:
        return False
    return target_name in (exporter.file_name, _strip_extension(exporter.file_name))


def _relative_matches(
    imp: ImportDeclaration,
    exporter: FileAnalysis,
    resolver: PathResolver,
) -> bool:
    candidates = resolver.candidates(imp.path, posixpath.dirname(imp.file))
    return exporter.file_path in candidates


def is_export_used(
    export_name: str,
    exporter: FileAnalysis,
    index: Mapping[str, List[ImportDeclaration]],
    resolver: PathResolver,
    segments: Mapping[str, str] = CATEGORY_SEGMENTS,
) -> bool:
    for imp in index.get(export_name, []):
        if not imp.is_relative:
            continue
        prefix = resolver.alias_prefix_of(imp.path)
        if prefix is not None:
            if _alias_matches(imp, prefix, exporter, segments):
                return True
        elif imp.path.startswith("."):
            if _relative_matches(imp, exporter, resolver):
                return True
    return False


def find_unused_exports(
    analyses: Sequence[FileAnalysis],
    resolver: PathResolver,
    segments: Mapping[str, str] = CATEGORY_SEGMENTS,
) -> List[UnusedExportRecord]:
    index = build_import_index(analyses)
    unused: List[UnusedExportRecord] = []

    for analysis in analyses:
        for exp in analysis.exports:
            if not is_export_used(exp.name, analysis, index, resolver, segments):
                unused.append(UnusedExportRecord(
                    file=analysis.file_path,
                    export=exp.name,
                    line=exp.line,
                ))

    logger.info("Unused exports: %d", len(unused))
    return unused
