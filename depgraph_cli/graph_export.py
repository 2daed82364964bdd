"""Graph export helpers for Graphviz DOT and Mermaid outputs."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Set, Tuple

from .models import Report

CATEGORY_COLORS: Dict[str, str] = {
    "type": "#8ecae6",
    "component": "#ffb703",
    "hook": "#90be6d",
    "store": "#f28482",
    "utility": "#cdb4db",
    "api": "#f4a261",
    "page": "#a8dadc",
    "other": "#e0e0e0",
}


def cycle_edges(report: Report) -> Set[Tuple[int, int]]:
    """Directed node pairs that belong to a reported cycle."""
    pairs: Set[Tuple[int, int]] = set()
    for cycle in report.cycles:
        for i, node_id in enumerate(cycle):
            pairs.add((node_id, cycle[(i + 1) % len(cycle)]))
    return pairs


def _unique_edges(report: Report) -> Dict[Tuple[int, int], List[str]]:
    """Collapse parallel edges, keeping every imported name as a label."""
    merged: Dict[Tuple[int, int], List[str]] = {}
    for edge in report.edges:
        names = merged.setdefault((edge.from_id, edge.to_id), [])
        if edge.import_name not in names:
            names.append(edge.import_name)
    return merged


def to_dot(report: Report, highlight_cycles: bool = True) -> str:
    in_cycle = cycle_edges(report) if highlight_cycles else set()

    lines = ["digraph Dependencies {"]
    lines.append("  rankdir=LR;")
    lines.append('  node [shape=box, style=filled, fontname="Helvetica"];')

    for node in report.nodes:
        color = CATEGORY_COLORS.get(node.category, CATEGORY_COLORS["other"])
        label = f"{node.name}\\n{node.category}"
        lines.append(f'  n{node.id} [label="{_esc(label)}", fillcolor="{color}", tooltip="{_esc(node.path)}"];')

    for (src, dst), names in _unique_edges(report).items():
        attrs = [f'label="{_esc(", ".join(names))}"']
        if (src, dst) in in_cycle:
            attrs.append('color="red"')
            attrs.append("penwidth=2")
        lines.append(f"  n{src} -> n{dst} [{', '.join(attrs)}];")

    lines.append("}")
    return "\n".join(lines) + "\n"


def to_mermaid(report: Report, highlight_cycles: bool = True) -> str:
    in_cycle = cycle_edges(report) if highlight_cycles else set()

    lines = ["graph LR"]
    for node in report.nodes:
        lines.append(f'  n{node.id}["{_mermaid_text(node.name)}"]')

    link_index = 0
    red_links: List[int] = []
    for (src, dst), names in _unique_edges(report).items():
        lines.append(f"  n{src} -->|{_mermaid_text(', '.join(names))}| n{dst}")
        if (src, dst) in in_cycle:
            red_links.append(link_index)
        link_index += 1

    if red_links:
        lines.append(f"  linkStyle {','.join(str(i) for i in red_links)} stroke:red,stroke-width:2px")
    return "\n".join(lines) + "\n"


def export_graph(report: Report, output_file: Path, fmt: str = "dot") -> Path:
    fmt = fmt.lower()
    if fmt == "dot":
        text = to_dot(report)
    elif fmt == "mermaid":
        text = to_mermaid(report)
    else:
        raise ValueError(f"Unsupported export format: {fmt}")
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(text, encoding="utf-8")
    return output_file


def _esc(text: str) -> str:
    return text.replace('"', '\\"')


def _mermaid_text(text: str) -> str:
    return text.replace('"', "'").replace("|", "/")
