"""Tests for DOT and Mermaid export."""

from pathlib import Path

import pytest

from depgraph_cli.graph_export import cycle_edges, export_graph, to_dot, to_mermaid
from depgraph_cli.models import Report


@pytest.fixture
def cyclic_report(healthy_report) -> Report:
    healthy_report["graph"]["edges"].append(
        {"from": 1, "to": 0, "importName": "a", "importPath": "./a", "line": 2}
    )
    healthy_report["cycles"] = [[0, 1]]
    return Report.from_dict(healthy_report)


def test_cycle_edges_close_the_loop(cyclic_report):
    assert cycle_edges(cyclic_report) == {(0, 1), (1, 0)}


def test_dot_output(healthy_report):
    dot = to_dot(Report.from_dict(healthy_report))

    assert dot.startswith("digraph Dependencies {")
    assert 'n0 [label="a.ts\\nutility"' in dot
    assert 'n0 -> n1 [label="b"];' in dot
    assert "red" not in dot


def test_dot_highlights_cycles(cyclic_report):
    dot = to_dot(cyclic_report)
    assert 'n1 -> n0 [label="a", color="red", penwidth=2];' in dot


def test_mermaid_output(cyclic_report):
    text = to_mermaid(cyclic_report)

    assert text.startswith("graph LR\n")
    assert '  n0["a.ts"]' in text
    assert "  n0 -->|b| n1" in text
    assert "linkStyle 0,1 stroke:red" in text


def test_parallel_edges_are_merged(healthy_report):
    healthy_report["graph"]["edges"].append(
        {"from": 0, "to": 1, "importName": "c", "importPath": "./b", "line": 1}
    )
    dot = to_dot(Report.from_dict(healthy_report))
    assert 'n0 -> n1 [label="b, c"];' in dot


def test_export_graph_writes_file(temp_dir: Path, healthy_report):
    out = export_graph(Report.from_dict(healthy_report), temp_dir / "out" / "g.mmd", "mermaid")
    assert out.read_text(encoding="utf-8").startswith("graph LR")


def test_export_graph_rejects_unknown_format(temp_dir: Path, healthy_report):
    with pytest.raises(ValueError):
        export_graph(Report.from_dict(healthy_report), temp_dir / "g.svg", "svg")
