"""Default analysis settings and configuration paths for DepGraph."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Tuple

ANALYZER_NAME = "depgraph-cli"

CONFIG_FILE_NAME = "depgraph.toml"
# Explicit config file override; otherwise <project root>/depgraph.toml is used.
CONFIG_FILE_ENV = "DEPGRAPH_CONFIG"

SOURCE_ROOT = "src"
ALIAS_PREFIXES: Tuple[str, ...] = ("@/",)
RESOLVE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx")
EXCLUDED_DIRS: Tuple[str, ...] = ("node_modules", ".next", "dist", ".git")

REPORT_PATH = Path("docs") / "DEPENDENCIES.json"
TYPES_REPORT_PATH = Path("docs") / "TYPES_REPORT.json"

# label -> (subtree path relative to project root, category, allowed extensions)
DEFAULT_SUBTREES: Dict[str, Tuple[str, str, List[str]]] = {
    "types": ("src/types", "type", [".ts"]),
    "components": ("src/components", "component", [".tsx"]),
    "hooks": ("src/hooks", "hook", [".ts"]),
    "store": ("src/store", "store", [".ts", ".tsx"]),
    "lib": ("src/lib", "utility", [".ts"]),
    "api": ("src/app/api", "api", [".ts"]),
}

# Location under the source root -> category. Ordered: the first matching
# location wins, so app/api must precede app.
CATEGORY_LOCATIONS: Tuple[Tuple[str, str], ...] = (
    ("types", "type"),
    ("components", "component"),
    ("hooks", "hook"),
    ("store", "store"),
    ("lib", "utility"),
    ("app/api", "api"),
    ("app", "page"),
)

# Leading alias segment -> category, used by the unused-export locality check.
CATEGORY_SEGMENTS: Dict[str, str] = {
    "types": "type",
    "components": "component",
    "store": "store",
    "hooks": "hook",
    "lib": "utility",
    "app": "page",
}

DEFAULT_CYCLES_THRESHOLD = 0
DEFAULT_UNUSED_THRESHOLD = 10
DEFAULT_MAX_AVG_IMPORTS = 20.0
DEFAULT_STALE_HOURS = 24.0

# Knowledge-graph projection only carries the first N import relations.
SINK_RELATION_LIMIT = 100


def config_file_for(project_root: Path) -> Path:
    """Return the config file to load for *project_root*."""
    override = os.environ.get(CONFIG_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return project_root / CONFIG_FILE_NAME
