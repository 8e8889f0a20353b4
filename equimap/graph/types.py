"""Core graph types: node levels, typed identity keys, nodes, edges and the built graph.

Identity keys are frozen dataclasses, so equality and hashing are by field
value. Node ids are derived from them with ``stable_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from equimap.models import RelatedContent
from equimap.utils import stable_id


class NodeType(str, Enum):
    """Map layer of a node, inner to outer."""

    tool = "Tool"
    discipline = "Discipline"
    knowledge_area = "KnowledgeArea"

    @property
    def level(self) -> int:
        return _LEVELS[self]

    @property
    def id_prefix(self) -> str:
        return _PREFIXES[self]

    @classmethod
    def from_layer_name(cls, layer: str) -> "NodeType | None":
        """Map a curated layer name ("Knowledge Area", "Tool/Technology", ...) to a type."""
        normalized = "".join(ch for ch in layer.lower() if ch.isalpha())
        return _LAYER_NAMES.get(normalized)


_LEVELS = {NodeType.tool: 1, NodeType.discipline: 2, NodeType.knowledge_area: 3}
_PREFIXES = {NodeType.tool: "tool", NodeType.discipline: "disc", NodeType.knowledge_area: "ka"}
_LAYER_NAMES = {
    "tool": NodeType.tool,
    "tooltechnology": NodeType.tool,
    "technology": NodeType.tool,
    "discipline": NodeType.discipline,
    "knowledgearea": NodeType.knowledge_area,
}


# ---------------------------------------------------------------------------
# Identity keys
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KnowledgeAreaKey:
    knowledge_area: str

    node_type = NodeType.knowledge_area

    def node_id(self) -> str:
        return stable_id(self.node_type.id_prefix, self.knowledge_area)


@dataclass(frozen=True)
class DisciplineKey:
    # Disciplines merge by bare name across knowledge areas.
    discipline: str

    node_type = NodeType.discipline

    def node_id(self) -> str:
        return stable_id(self.node_type.id_prefix, self.discipline)


@dataclass(frozen=True)
class ToolKey:
    # Tools are distinct per (discipline, knowledge area) context.
    tool_technology: str
    discipline: str
    knowledge_area: str

    node_type = NodeType.tool

    def node_id(self) -> str:
        return stable_id(
            self.node_type.id_prefix,
            self.tool_technology,
            self.discipline,
            self.knowledge_area,
        )


IdentityKey = Union[KnowledgeAreaKey, DisciplineKey, ToolKey]


@dataclass(frozen=True, order=True)
class EdgeKey:
    """Order-independent key of an undirected edge."""

    a: str
    b: str

    def __post_init__(self) -> None:
        if self.a > self.b:
            first, second = self.b, self.a
            object.__setattr__(self, "a", first)
            object.__setattr__(self, "b", second)

    @classmethod
    def of(cls, node_a: str, node_b: str) -> "EdgeKey":
        return cls(node_a, node_b)

    @property
    def edge_id(self) -> str:
        return f"{self.a}--{self.b}"

    def other(self, node_id: str) -> str:
        return self.b if node_id == self.a else self.a

    def touches(self, node_id: str) -> bool:
        return node_id in (self.a, self.b)


# ---------------------------------------------------------------------------
# Nodes and edges
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    id: str
    name: str
    type: NodeType
    has_content: bool = False

    @property
    def level(self) -> int:
        return self.type.level

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "level": self.level,
            "hasContent": self.has_content,
        }


@dataclass(frozen=True)
class Edge:
    """Undirected edge between adjacent levels, stored inner to outer."""

    source_id: str
    target_id: str

    @property
    def key(self) -> EdgeKey:
        return EdgeKey.of(self.source_id, self.target_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.key.edge_id,
            "source": self.source_id,
            "target": self.target_id,
        }


@dataclass
class NodeDetail:
    """Side-panel data for a node."""

    node_id: str
    name: str
    type: NodeType
    description: str = ""
    voice_hook: str | None = None
    related_content: list[RelatedContent] = field(default_factory=list)

    @property
    def related_work_count(self) -> int:
        return len(self.related_content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "voiceHook": self.voice_hook,
            "relatedContent": [
                {
                    "id": c.id,
                    "title": c.title,
                    "contentType": c.content_type,
                    "moderationStatus": c.moderation_status,
                }
                for c in self.related_content
            ],
        }


# ---------------------------------------------------------------------------
# Built graph
# ---------------------------------------------------------------------------

@dataclass
class MapGraph:
    """Result of a graph build: nodes, edges, edge labels and lookups.

    Treated as immutable once returned by the builder.
    """

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    labels: dict[EdgeKey, str] = field(default_factory=dict)
    details: dict[str, NodeDetail] = field(default_factory=dict)
    skipped_records: int = 0
    _by_id: dict[str, Node] = field(default_factory=dict, init=False, repr=False)
    _adjacency: dict[str, set[str]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_id = {n.id: n for n in self.nodes}
        self._adjacency = {n.id: set() for n in self.nodes}
        for edge in self.edges:
            self._adjacency.setdefault(edge.source_id, set()).add(edge.target_id)
            self._adjacency.setdefault(edge.target_id, set()).add(edge.source_id)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def edge_keys(self) -> list[EdgeKey]:
        return [e.key for e in self.edges]

    def has_node(self, node_id: str | None) -> bool:
        return node_id is not None and node_id in self._by_id

    def get_node(self, node_id: str) -> Node | None:
        return self._by_id.get(node_id)

    def neighbors(self, node_id: str) -> frozenset[str]:
        return frozenset(self._adjacency.get(node_id, ()))

    def label_for(self, node_a: str, node_b: str) -> str | None:
        return self.labels.get(EdgeKey.of(node_a, node_b))

    def nodes_of_type(self, node_type: NodeType) -> list[Node]:
        return [n for n in self.nodes if n.type == node_type]

    def find_by_name(self, name: str, node_type: NodeType | None = None) -> list[Node]:
        """Nodes whose name matches case-insensitively, optionally filtered by type."""
        wanted = name.strip().lower()
        return [
            n for n in self.nodes
            if n.name.lower() == wanted and (node_type is None or n.type == node_type)
        ]

    def detail(self, node_id: str) -> NodeDetail | None:
        return self.details.get(node_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [
                {**e.to_dict(), "label": self.labels.get(e.key)}
                for e in self.edges
            ],
            "skippedRecords": self.skipped_records,
        }
