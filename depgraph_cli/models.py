"""Core data models shared by extraction, graph building, and reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

Cycle = List[int]


@dataclass(frozen=True)
class ImportDeclaration:
    file: str
    name: str
    path: str
    is_relative: bool
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "isRelative": self.is_relative,
            "line": self.line,
        }


@dataclass(frozen=True)
class ExportDeclaration:
    file: str
    name: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "line": self.line}


@dataclass
class FileAnalysis:
    """Declarations extracted from one successfully read source file."""

    file_name: str
    file_path: str
    category: str
    imports: List[ImportDeclaration] = field(default_factory=list)
    exports: List[ExportDeclaration] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "filePath": self.file_path,
            "category": self.category,
            "imports": [imp.to_dict() for imp in self.imports],
            "exports": [exp.to_dict() for exp in self.exports],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileAnalysis":
        path = data["filePath"]
        return cls(
            file_name=data["fileName"],
            file_path=path,
            category=data["category"],
            imports=[
                ImportDeclaration(
                    file=path,
                    name=imp["name"],
                    path=imp["path"],
                    is_relative=bool(imp["isRelative"]),
                    line=int(imp["line"]),
                )
                for imp in data.get("imports", [])
            ],
            exports=[
                ExportDeclaration(file=path, name=exp["name"], line=int(exp["line"]))
                for exp in data.get("exports", [])
            ],
        )


@dataclass(frozen=True)
class SourceFile:
    """Graph node for one analyzed file. Ids are only meaningful within a run."""

    id: int
    name: str
    path: str
    category: str
    imports: int
    exports: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "category": self.category,
            "imports": self.imports,
            "exports": self.exports,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceFile":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            path=data["path"],
            category=data["category"],
            imports=int(data["imports"]),
            exports=int(data["exports"]),
        )


@dataclass(frozen=True)
class DependencyEdge:
    from_id: int
    to_id: int
    import_name: str
    import_path: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "importName": self.import_name,
            "importPath": self.import_path,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyEdge":
        return cls(
            from_id=int(data["from"]),
            to_id=int(data["to"]),
            import_name=data["importName"],
            import_path=data["importPath"],
            line=int(data["line"]),
        )


@dataclass(frozen=True)
class UnusedExportRecord:
    file: str
    export: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "export": self.export, "line": self.line}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnusedExportRecord":
        return cls(file=data["file"], export=data["export"], line=int(data["line"]))


@dataclass
class ProjectInfo:
    name: str
    root: str
    analyzer: str


@dataclass
class ReportSummary:
    total_files: int
    analyzed_files: int
    total_nodes: int
    total_edges: int
    cycles_count: int
    unused_exports_count: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "totalNodes": self.total_nodes,
            "totalEdges": self.total_edges,
            "cyclesCount": self.cycles_count,
            "unusedExportsCount": self.unused_exports_count,
        }


@dataclass
class Report:
    """Full output of one analysis run, persisted as ``DEPENDENCIES.json``."""

    timestamp: str
    project: ProjectInfo
    summary: ReportSummary
    type_nodes: List[FileAnalysis]
    nodes: List[SourceFile]
    edges: List[DependencyEdge]
    cycles: List[Cycle]
    unused_exports: List[UnusedExportRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "project": {
                "name": self.project.name,
                "root": self.project.root,
                "analyzer": self.project.analyzer,
            },
            "summary": self.summary.to_dict(),
            "typeNodes": [t.to_dict() for t in self.type_nodes],
            "graph": {
                "nodes": [n.to_dict() for n in self.nodes],
                "edges": [e.to_dict() for e in self.edges],
            },
            "cycles": [list(c) for c in self.cycles],
            "unusedExports": [u.to_dict() for u in self.unused_exports],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        """Rebuild a report from its JSON form.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` when the payload
        does not have the report shape; callers translate these into
        :class:`~depgraph_cli.errors.MalformedReportError`.
        """
        project = data["project"]
        summary = data["summary"]
        graph = data["graph"]
        return cls(
            timestamp=data["timestamp"],
            project=ProjectInfo(
                name=project["name"],
                root=project["root"],
                analyzer=project["analyzer"],
            ),
            summary=ReportSummary(
                total_files=int(summary["totalFiles"]),
                analyzed_files=int(summary["analyzedFiles"]),
                total_nodes=int(summary["totalNodes"]),
                total_edges=int(summary["totalEdges"]),
                cycles_count=int(summary["cyclesCount"]),
                unused_exports_count=int(summary["unusedExportsCount"]),
            ),
            type_nodes=[FileAnalysis.from_dict(t) for t in data.get("typeNodes", [])],
            nodes=[SourceFile.from_dict(n) for n in graph["nodes"]],
            edges=[DependencyEdge.from_dict(e) for e in graph["edges"]],
            cycles=[[int(i) for i in c] for c in data.get("cycles", [])],
            unused_exports=[UnusedExportRecord.from_dict(u) for u in data.get("unusedExports", [])],
        )
