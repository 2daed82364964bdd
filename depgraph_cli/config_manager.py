"""Project-level configuration for DepGraph using TOML files.

Settings live in an optional ``depgraph.toml`` at the project root (or at the
path named by ``DEPGRAPH_CONFIG``). Missing files and missing keys fall back
to the defaults in :mod:`depgraph_cli.config`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import toml

from . import config
from .discovery import SubtreeConfig
from .errors import ConfigError
from .validator import ValidationConfig


def _default_subtrees() -> List[SubtreeConfig]:
    return [
        SubtreeConfig(label=label, path=path, category=category, extensions=list(exts))
        for label, (path, category, exts) in config.DEFAULT_SUBTREES.items()
    ]


@dataclass
class AnalysisConfig:
    source_root: str = config.SOURCE_ROOT
    alias_prefixes: List[str] = field(default_factory=lambda: list(config.ALIAS_PREFIXES))
    extensions: List[str] = field(default_factory=lambda: list(config.RESOLVE_EXTENSIONS))
    exclude: List[str] = field(default_factory=lambda: list(config.EXCLUDED_DIRS))
    report_path: str = config.REPORT_PATH.as_posix()
    subtrees: List[SubtreeConfig] = field(default_factory=_default_subtrees)


def _string_list(section: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    value = section.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _string(section: Dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value


def _number(section: Dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number")
    if value < 0:
        raise ConfigError(f"'{key}' must not be negative")
    return value


def _parse_subtrees(raw: Any) -> List[SubtreeConfig]:
    if not isinstance(raw, list):
        raise ConfigError("'analysis.subtrees' must be an array of tables")
    subtrees: List[SubtreeConfig] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError("each entry of 'analysis.subtrees' must be a table")
        path = _string(entry, "path", "")
        subtrees.append(SubtreeConfig(
            label=entry.get("label") or Path(path).name,
            path=path,
            category=_string(entry, "category", "other"),
            extensions=_string_list(entry, "extensions", list(config.RESOLVE_EXTENSIONS)),
        ))
    return subtrees


def parse_config(data: Dict[str, Any]) -> Tuple[AnalysisConfig, ValidationConfig]:
    """Build typed settings from a decoded TOML document."""
    analysis = data.get("analysis", {})
    validation = data.get("validation", {})
    if not isinstance(analysis, dict) or not isinstance(validation, dict):
        raise ConfigError("'analysis' and 'validation' must be tables")

    defaults = AnalysisConfig()
    analysis_cfg = AnalysisConfig(
        source_root=_string(analysis, "source_root", defaults.source_root),
        alias_prefixes=_string_list(analysis, "alias_prefixes", defaults.alias_prefixes),
        extensions=_string_list(analysis, "extensions", defaults.extensions),
        exclude=_string_list(analysis, "exclude", defaults.exclude),
        report_path=_string(analysis, "report_path", defaults.report_path),
        subtrees=(
            _parse_subtrees(analysis["subtrees"]) if "subtrees" in analysis else defaults.subtrees
        ),
    )

    base = ValidationConfig()
    validation_cfg = ValidationConfig(
        cycles_threshold=int(_number(validation, "cycles_threshold", base.cycles_threshold)),
        unused_threshold=int(_number(validation, "unused_threshold", base.unused_threshold)),
        max_avg_imports_per_file=float(
            _number(validation, "max_avg_imports_per_file", base.max_avg_imports_per_file)
        ),
        stale_hours=float(_number(validation, "stale_hours", base.stale_hours)),
    )
    return analysis_cfg, validation_cfg


def load_config(project_root: Path, config_file: Optional[Path] = None) -> Tuple[AnalysisConfig, ValidationConfig]:
    """Load settings for *project_root*.

    Returns defaults when no config file exists. Raises
    :class:`~depgraph_cli.errors.ConfigError` when the file is present but
    cannot be used.
    """
    path = config_file or config.config_file_for(project_root)
    if not path.exists():
        return AnalysisConfig(), ValidationConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (toml.TomlDecodeError, OSError) as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc
    return parse_config(data)


def default_config_document() -> Dict[str, Any]:
    analysis = AnalysisConfig()
    validation = ValidationConfig()
    return {
        "analysis": {
            "source_root": analysis.source_root,
            "alias_prefixes": analysis.alias_prefixes,
            "extensions": analysis.extensions,
            "exclude": analysis.exclude,
            "report_path": analysis.report_path,
            "subtrees": [
                {
                    "label": s.label,
                    "path": s.path,
                    "category": s.category,
                    "extensions": list(s.extensions),
                }
                for s in analysis.subtrees
            ],
        },
        "validation": {
            "cycles_threshold": validation.cycles_threshold,
            "unused_threshold": validation.unused_threshold,
            "max_avg_imports_per_file": validation.max_avg_imports_per_file,
            "stale_hours": validation.stale_hours,
        },
    }


def save_default_config(project_root: Path, overwrite: bool = False) -> Optional[Path]:
    """Write a ``depgraph.toml`` with the default settings.

    Returns the written path, or None when a file already exists and
    *overwrite* is False.
    """
    path = project_root / config.CONFIG_FILE_NAME
    if path.exists() and not overwrite:
        return None
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(default_config_document(), f)
    return path
