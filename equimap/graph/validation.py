"""Graph validation - statistics and structural invariant checks for a built MapGraph."""

from __future__ import annotations

import logging
from collections import Counter

from equimap.graph.types import MapGraph, NodeType

logger = logging.getLogger(__name__)


def graph_statistics(graph: MapGraph) -> dict:
    """Node counts by type, edge counts by level pair, labels and orphans."""
    node_counts = Counter(n.type.value for n in graph.nodes)
    edge_counts: Counter[str] = Counter()
    for edge in graph.edges:
        source = graph.get_node(edge.source_id)
        target = graph.get_node(edge.target_id)
        if source is None or target is None:
            edge_counts["dangling"] += 1
            continue
        pair = sorted([source, target], key=lambda n: n.level)
        edge_counts[f"{pair[0].type.value}-{pair[1].type.value}"] += 1

    orphans = [n.id for n in graph.nodes if not graph.neighbors(n.id)]

    return {
        "node_counts": {t.value: node_counts.get(t.value, 0) for t in NodeType},
        "total_nodes": len(graph.nodes),
        "edge_counts": dict(edge_counts),
        "total_edges": len(graph.edges),
        "labelled_edges": len(graph.labels),
        "distinct_labels": len(set(graph.labels.values())),
        "tools_with_content": sum(1 for n in graph.nodes if n.has_content),
        "orphan_nodes": orphans,
        "skipped_records": graph.skipped_records,
    }


def check_invariants(graph: MapGraph) -> list[str]:
    """Return a list of human-readable invariant violations (empty when valid)."""
    issues: list[str] = []
    seen_ids: set[str] = set()

    for node in graph.nodes:
        if node.id in seen_ids:
            issues.append(f"duplicate node id {node.id}")
        seen_ids.add(node.id)

    seen_edges = set()
    for edge in graph.edges:
        if edge.key in seen_edges:
            issues.append(f"duplicate edge {edge.key.edge_id}")
        seen_edges.add(edge.key)

        if edge.source_id == edge.target_id:
            issues.append(f"self-loop on {edge.source_id}")
            continue
        source = graph.get_node(edge.source_id)
        target = graph.get_node(edge.target_id)
        if source is None or target is None:
            issues.append(f"edge {edge.key.edge_id} references a missing node")
            continue
        if abs(source.level - target.level) != 1:
            issues.append(
                f"edge {edge.key.edge_id} skips levels "
                f"({source.type.value} to {target.type.value})"
            )

    for node in graph.nodes_of_type(NodeType.tool):
        disciplines = [
            n for n in graph.neighbors(node.id)
            if (other := graph.get_node(n)) is not None and other.type == NodeType.discipline
        ]
        if len(disciplines) != 1:
            issues.append(f"tool {node.name!r} has {len(disciplines)} discipline neighbours")

    for key in graph.labels:
        if key not in seen_edges:
            issues.append(f"label attached to unknown edge {key.edge_id}")

    return issues


def validate_graph(graph: MapGraph, verbose: bool = False) -> dict:
    """Run statistics and invariant checks; return a combined results dict."""
    stats = graph_statistics(graph)
    issues = check_invariants(graph)

    if verbose:
        for node_type, count in stats["node_counts"].items():
            logger.info("%s nodes: %d", node_type, count)
        for issue in issues:
            logger.warning("Invariant violated: %s", issue)

    return {"statistics": stats, "issues": issues, "passed": not issues}
