"""Source file discovery over the configured project subtrees."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .config import CATEGORY_LOCATIONS, SOURCE_ROOT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubtreeConfig:
    """A named part of the project tree and the files it contributes."""

    label: str
    path: str
    category: str
    extensions: Sequence[str]


@dataclass
class DiscoveryResult:
    by_subtree: Dict[str, List[Path]] = field(default_factory=dict)
    files: List[Path] = field(default_factory=list)
    # Category of the first subtree each file was found in.
    categories: Dict[Path, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.files)


def find_files(
    directory: Path,
    extensions: Iterable[str],
    exclude: Iterable[str],
) -> List[Path]:
    """Recursively list files under *directory* with an allowed extension.

    Entries whose basename is in *exclude* are skipped. Directories that
    cannot be read are skipped as well; the rest of the tree is still
    returned. Order follows the directory listing and is not stable across
    platforms.
    """
    allowed = set(extensions)
    excluded = set(exclude)
    files: List[Path] = []

    try:
        entries = list(os.scandir(directory))
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return files

    for entry in entries:
        if entry.name in excluded:
            continue
        if entry.is_dir():
            files.extend(find_files(Path(entry.path), allowed, excluded))
        elif os.path.splitext(entry.name)[1] in allowed:
            files.append(Path(entry.path))

    return files


def discover_sources(
    project_root: Path,
    subtrees: Sequence[SubtreeConfig],
    exclude: Iterable[str],
) -> DiscoveryResult:
    """Collect candidate files from every configured subtree of *project_root*."""
    excluded = list(exclude)
    result = DiscoveryResult()
    seen = set()

    for subtree in subtrees:
        found = find_files(project_root / subtree.path, subtree.extensions, excluded)
        result.by_subtree[subtree.label] = found
        for path in found:
            if path in seen:
                continue
            seen.add(path)
            result.files.append(path)
            result.categories[path] = subtree.category
        logger.debug("Subtree %s: %d file(s)", subtree.label, len(found))

    return result


def to_relative(path: Path, project_root: Path) -> str:
    """Project-relative POSIX path used as the file's identity in the graph."""
    try:
        rel = path.relative_to(project_root)
    except ValueError:
        rel = Path(os.path.relpath(path, project_root))
    return rel.as_posix()


def file_category(rel_path: str, source_root: str = SOURCE_ROOT) -> str:
    """Classify a file by where it lives under the source root."""
    normalized = "/" + rel_path.replace("\\", "/").lstrip("/")
    root = source_root.strip("/")
    prefix = f"/{root}/" if root else "/"
    for location, category in CATEGORY_LOCATIONS:
        if f"{prefix}{location}/" in normalized:
            return category
    return "other"
