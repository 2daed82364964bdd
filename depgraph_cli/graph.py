"""Dependency graph construction and import-cycle detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .models import Cycle, DependencyEdge, FileAnalysis, SourceFile
from .resolver import PathResolver

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    nodes: List[SourceFile] = field(default_factory=list)
    edges: List[DependencyEdge] = field(default_factory=list)

    def node_by_id(self, node_id: int) -> Optional[SourceFile]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def adjacency(self) -> Dict[int, List[int]]:
        """Outgoing targets per node, one entry per edge, in edge order."""
        adj: Dict[int, List[int]] = {node.id: [] for node in self.nodes}
        for edge in self.edges:
            adj.setdefault(edge.from_id, []).append(edge.to_id)
        return adj


def build_dependency_graph(
    analyses: Sequence[FileAnalysis],
    resolver: PathResolver,
) -> DependencyGraph:
    """One node per analyzed file, one edge per import that resolves to a node."""
    graph = DependencyGraph()
    ids_by_path: Dict[str, int] = {}

    for node_id, analysis in enumerate(analyses):
        graph.nodes.append(SourceFile(
            id=node_id,
            name=analysis.file_name,
            path=analysis.file_path,
            category=analysis.category,
            imports=len(analysis.imports),
            exports=len(analysis.exports),
        ))
        ids_by_path.setdefault(analysis.file_path, node_id)

    for analysis in analyses:
        from_id = ids_by_path[analysis.file_path]
        for imp in analysis.imports:
            if not imp.is_relative:
                continue
            target = resolver.resolve_from_file(imp.path, analysis.file_path)
            if target is None or target not in ids_by_path:
                continue
            graph.edges.append(DependencyEdge(
                from_id=from_id,
                to_id=ids_by_path[target],
                import_name=imp.name,
                import_path=imp.path,
                line=imp.line,
            ))

    logger.info("Built graph: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
    return graph


def find_cycles(graph: DependencyGraph) -> List[Cycle]:
    """Find import cycles with a depth-first search.

    Every node is a traversal root unless it was already visited. Reaching a
    node that is on the current path records the path suffix starting at that
    node. Visited nodes are never explored again, even from a later root, so
    the result holds at least one cycle per cyclic region reachable from an
    unvisited start but is not a full cycle census.
    """
    adjacency = graph.adjacency()
    cycles: List[Cycle] = []
    visited: Set[int] = set()

    for root in (node.id for node in graph.nodes):
        if root in visited:
            continue

        visited.add(root)
        path: List[int] = [root]
        on_path: Set[int] = {root}
        # (node, index of next outgoing edge to follow)
        stack: List[Tuple[int, int]] = [(root, 0)]

        while stack:
            current, index = stack[-1]
            targets = adjacency.get(current, [])
            if index >= len(targets):
                stack.pop()
                path.pop()
                on_path.discard(current)
                continue

            stack[-1] = (current, index + 1)
            target = targets[index]

            if target in on_path:
                cycles.append(path[path.index(target):])
                continue
            if target in visited:
                continue

            visited.add(target)
            path.append(target)
            on_path.add(target)
            stack.append((target, 0))

    return cycles
