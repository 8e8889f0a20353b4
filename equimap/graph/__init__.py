"""EQUIMAP graph module - identity keys, graph construction and validation."""

from equimap.graph.types import (
    DisciplineKey,
    Edge,
    EdgeKey,
    KnowledgeAreaKey,
    MapGraph,
    Node,
    NodeDetail,
    NodeType,
    ToolKey,
)
from equimap.graph.builder import GraphBuilder, build_graph
from equimap.graph.validation import check_invariants, graph_statistics, validate_graph

__all__ = [
    "DisciplineKey",
    "Edge",
    "EdgeKey",
    "KnowledgeAreaKey",
    "MapGraph",
    "Node",
    "NodeDetail",
    "NodeType",
    "ToolKey",
    "GraphBuilder",
    "build_graph",
    "check_invariants",
    "graph_statistics",
    "validate_graph",
]
