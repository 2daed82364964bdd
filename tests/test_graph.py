"""Tests for graph construction and cycle detection."""

from typing import Dict, List

import pytest

from depgraph_cli.extractor import extract_declarations
from depgraph_cli.graph import DependencyGraph, build_dependency_graph, find_cycles
from depgraph_cli.models import DependencyEdge, FileAnalysis, SourceFile
from depgraph_cli.resolver import PathResolver


def _analyses(files: Dict[str, str]) -> List[FileAnalysis]:
    result = []
    for path, content in files.items():
        imports, exports = extract_declarations(content, path)
        result.append(FileAnalysis(
            file_name=path.rsplit("/", 1)[-1],
            file_path=path,
            category="utility",
            imports=imports,
            exports=exports,
        ))
    return result


def _build(files: Dict[str, str]) -> DependencyGraph:
    analyses = _analyses(files)
    return build_dependency_graph(analyses, PathResolver(a.file_path for a in analyses))


def _graph(node_count: int, edges: List[tuple]) -> DependencyGraph:
    nodes = [SourceFile(i, f"n{i}.ts", f"src/n{i}.ts", "utility", 0, 0) for i in range(node_count)]
    return DependencyGraph(
        nodes=nodes,
        edges=[DependencyEdge(a, b, "x", "./x", 1) for a, b in edges],
    )


def test_files_without_cross_imports_have_no_edges_or_cycles():
    graph = _build({
        "src/lib/a.ts": "import x from 'lodash';\nexport const a = 1;\n",
        "src/lib/b.ts": "export const b = 2;\n",
    })

    assert [n.id for n in graph.nodes] == [0, 1]
    assert graph.edges == []
    assert find_cycles(graph) == []


def test_node_ids_follow_analysis_order_and_counts():
    graph = _build({
        "src/lib/a.ts": "import { b } from './b';\nexport const a = b;\n",
        "src/lib/b.ts": "export const b = 2;\nexport const c = 3;\n",
    })

    a, b = graph.nodes
    assert (a.id, a.path, a.imports, a.exports) == (0, "src/lib/a.ts", 1, 1)
    assert (b.id, b.path, b.imports, b.exports) == (1, "src/lib/b.ts", 0, 2)


def test_edge_per_resolving_import():
    graph = _build({
        "src/lib/a.ts": (
            "import { b, bb } from './b';\n"
            "import { missing } from './nowhere';\n"
            "import React from 'react';\n"
        ),
        "src/lib/b.ts": "export const b = 1;\nexport const bb = 2;\n",
    })

    assert [(e.from_id, e.to_id, e.import_name, e.line) for e in graph.edges] == [
        (0, 1, "b", 1),
        (0, 1, "bb", 1),
    ]


def test_alias_imports_create_edges():
    graph = _build({
        "src/hooks/useA.ts": "import { a } from '@/lib/a';\n",
        "src/lib/a.ts": "export const a = 1;\n",
    })

    assert [(e.from_id, e.to_id, e.import_path) for e in graph.edges] == [(0, 1, "@/lib/a")]


@pytest.mark.parametrize("order", [["a", "b", "c"], ["c", "a", "b"], ["b", "c", "a"]])
def test_three_node_cycle_found_regardless_of_scan_order(order):
    sources = {
        "a": "import { b } from './b';\nexport const a = 1;\n",
        "b": "import { c } from './c';\nexport const b = 1;\n",
        "c": "import { a } from './a';\nexport const c = 1;\n",
    }
    graph = _build({f"src/lib/{name}.ts": sources[name] for name in order})

    cycles = find_cycles(graph)

    assert len(cycles) >= 1
    paths = {graph.node_by_id(i).path for i in cycles[0]}
    assert paths == {"src/lib/a.ts", "src/lib/b.ts", "src/lib/c.ts"}


def test_cycle_is_recorded_from_reentry_node():
    # 0 -> 1 -> 2 -> 1: the cycle starts at node 1, not at the root.
    cycles = find_cycles(_graph(3, [(0, 1), (1, 2), (2, 1)]))
    assert cycles == [[1, 2]]


def test_self_import_is_a_cycle():
    cycles = find_cycles(_graph(2, [(0, 0), (0, 1)]))
    assert cycles == [[0]]


def test_visited_nodes_are_not_explored_again():
    # Root 2 only reaches node 1, which the first traversal already covered.
    graph = _graph(4, [(0, 1), (1, 0), (2, 1), (1, 3), (3, 1)])

    cycles = find_cycles(graph)

    assert cycles == [[0, 1], [1, 3]]
    assert not any(2 in c for c in cycles)


def test_acyclic_diamond():
    graph = _graph(4, [(0, 1), (0, 2), (1, 3), (2, 3)])
    assert find_cycles(graph) == []


def test_adjacency_keeps_parallel_edges():
    graph = _graph(2, [(0, 1), (0, 1)])
    assert graph.adjacency() == {0: [1, 1], 1: []}
    assert graph.node_by_id(5) is None
