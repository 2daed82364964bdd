"""Knowledge-graph projection of a report, plus a JSON-lines memory sink.

The projection follows the entity/relation/observation vocabulary of
memory-graph servers: one entity per type file, one ``imports`` relation per
dependency edge (capped), and a set of aggregate observations attached to a
``Project_Dependency_Graph`` entity.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .config import SINK_RELATION_LIMIT
from .models import Report

logger = logging.getLogger(__name__)

GRAPH_ENTITY = "Project_Dependency_Graph"


@dataclass
class Entity:
    name: str
    entity_type: str
    observations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "entity",
            "name": self.name,
            "entityType": self.entity_type,
            "observations": list(self.observations),
        }


@dataclass
class Relation:
    source: str
    target: str
    relation_type: str
    observations: List[str] = field(default_factory=list)

    def key(self) -> Tuple[str, str, str]:
        return (self.source, self.target, self.relation_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "relation",
            "from": self.source,
            "to": self.target,
            "relationType": self.relation_type,
            "observations": list(self.observations),
        }


@dataclass
class KnowledgeGraphProjection:
    entities: List[Entity] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    observations: Dict[str, List[str]] = field(default_factory=dict)


def project_report(report: Report, relation_limit: int = SINK_RELATION_LIMIT) -> KnowledgeGraphProjection:
    projection = KnowledgeGraphProjection()

    for type_file in report.type_nodes:
        name = type_file.exports[0].name if type_file.exports else type_file.file_name
        projection.entities.append(Entity(
            name=f"Type_{name}",
            entity_type="typescript_type",
            observations=[
                f"Defined in: {type_file.file_name}",
                f"Category: {type_file.category}",
                f"Exports: {len(type_file.exports)} items",
                f"Imports: {len(type_file.imports)} items",
                f"File path: {type_file.file_path}",
            ],
        ))

    names = {node.id: node.name for node in report.nodes}
    for edge in report.edges[:relation_limit]:
        projection.relations.append(Relation(
            source=f"File_{names.get(edge.from_id, 'unknown')}",
            target=f"File_{names.get(edge.to_id, 'unknown')}",
            relation_type="imports",
            observations=[
                f"Import: {edge.import_name}",
                f"From line: {edge.line}",
                f"Path: {edge.import_path}",
            ],
        ))

    projection.observations[GRAPH_ENTITY] = [
        f"Total nodes: {len(report.nodes)}",
        f"Total edges: {len(report.edges)}",
        f"Cyclic dependencies: {len(report.cycles)}",
        f"Unused exports: {len(report.unused_exports)}",
        f"Analysis timestamp: {report.timestamp}",
        f"Project root: {report.project.root}",
    ]
    return projection


class JsonlMemorySink:
    """``publish(report)`` capability that keeps a memory graph in a JSONL file.

    Entities are merged by name (the newest observations win) and relations
    are de-duplicated on ``(from, to, relationType)``.
    """

    def __init__(self, path: Path, relation_limit: int = SINK_RELATION_LIMIT) -> None:
        self.path = path
        self.relation_limit = relation_limit

    def _load(self) -> Tuple[Dict[str, Entity], Dict[Tuple[str, str, str], Relation]]:
        entities: Dict[str, Entity] = {}
        relations: Dict[Tuple[str, str, str], Relation] = {}
        if not self.path.exists():
            return entities, relations
        for line_no, line in enumerate(self.path.read_text(encoding="utf-8").splitlines(), 1):
            if not line.strip():
                continue
            try:
                item = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Ignoring unreadable memory line %d in %s", line_no, self.path)
                continue
            if item.get("type") == "entity":
                entities[item["name"]] = Entity(
                    item["name"], item.get("entityType", ""), list(item.get("observations", []))
                )
            elif item.get("type") == "relation":
                rel = Relation(
                    item["from"], item["to"], item.get("relationType", ""), list(item.get("observations", []))
                )
                relations[rel.key()] = rel
        return entities, relations

    def __call__(self, report: Report) -> None:
        projection = project_report(report, self.relation_limit)
        entities, relations = self._load()

        for entity in projection.entities:
            entities[entity.name] = entity
        for name, observations in projection.observations.items():
            entities[name] = Entity(name, "dependency_graph", observations)
        for relation in projection.relations:
            relations[relation.key()] = relation

        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(e.to_dict()) for e in entities.values()]
        lines.extend(json.dumps(r.to_dict()) for r in relations.values())
        self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.info(
            "Memory graph updated: %d entities, %d relations (%s)",
            len(entities), len(relations), self.path,
        )
