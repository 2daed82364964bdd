"""Pytest configuration and fixtures for DepGraph CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

from depgraph_cli.report import utc_timestamp


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample TypeScript project (read-only)."""
    return Path(__file__).parent / "fixtures" / "ts_project"


@pytest.fixture
def ts_project(temp_dir: Path, sample_project_path: Path) -> Path:
    """Writable copy of the sample project, so reports can be written next to it."""
    target = temp_dir / "ts_project"
    shutil.copytree(sample_project_path, target)
    return target


@pytest.fixture
def make_project(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Build a project tree from a mapping of relative path -> file content."""

    def _make(files: Dict[str, str]) -> Path:
        root = temp_dir / "project"
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        (root / "src").mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture(autouse=True)
def _isolate_config():
    """Keep a developer's DEPGRAPH_CONFIG from leaking into tests."""
    # Own MonkeyPatch instance so a test's `monkeypatch` fixture is undone
    # before temp_dir teardown runs shutil.rmtree.
    mp = pytest.MonkeyPatch()
    mp.delenv("DEPGRAPH_CONFIG", raising=False)
    yield
    mp.undo()


@pytest.fixture
def healthy_report() -> dict:
    """Minimal persisted report that passes every rule."""
    return {
        "timestamp": utc_timestamp(),
        "project": {"name": "demo", "root": "/tmp/demo", "analyzer": "depgraph-cli"},
        "summary": {
            "totalFiles": 2,
            "analyzedFiles": 2,
            "totalNodes": 2,
            "totalEdges": 1,
            "cyclesCount": 0,
            "unusedExportsCount": 0,
        },
        "typeNodes": [],
        "graph": {
            "nodes": [
                {"id": 0, "name": "a.ts", "path": "src/lib/a.ts", "category": "utility", "imports": 1, "exports": 1},
                {"id": 1, "name": "b.ts", "path": "src/lib/b.ts", "category": "utility", "imports": 0, "exports": 1},
            ],
            "edges": [
                {"from": 0, "to": 1, "importName": "b", "importPath": "./b", "line": 1},
            ],
        },
        "cycles": [],
        "unusedExports": [],
    }
