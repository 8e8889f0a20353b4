"""Highlight derivation: which nodes, edges and labels are emphasized for a focus."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from equimap.graph.types import EdgeKey, MapGraph
from equimap.interaction.state import InteractionState, Phase


@dataclass(frozen=True)
class HighlightSnapshot:
    """Render-ready view of the current interaction focus."""

    phase: Phase = Phase.idle
    focus_node_id: str | None = None
    hovered_node_id: str | None = None
    selected_node_id: str | None = None
    highlighted_node_ids: frozenset[str] = frozenset()
    neighbor_ids: frozenset[str] = frozenset()
    active_edge_ids: frozenset[EdgeKey] = frozenset()
    visible_label_edge_ids: frozenset[EdgeKey] = frozenset()
    labels_to_show: dict[EdgeKey, str] = field(default_factory=dict)

    @property
    def is_idle(self) -> bool:
        return self.focus_node_id is None

    def is_node_highlighted(self, node_id: str) -> bool:
        return node_id in self.highlighted_node_ids

    def is_edge_active(self, node_a: str, node_b: str) -> bool:
        return EdgeKey.of(node_a, node_b) in self.active_edge_ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "focusNodeId": self.focus_node_id,
            "hoveredNodeId": self.hovered_node_id,
            "selectedNodeId": self.selected_node_id,
            "highlightedNodeIds": sorted(self.highlighted_node_ids),
            "neighborIds": sorted(self.neighbor_ids),
            "activeEdgeIds": sorted(k.edge_id for k in self.active_edge_ids),
            "visibleLabelEdgeIds": sorted(k.edge_id for k in self.visible_label_edge_ids),
            "labelsToShow": {
                k.edge_id: label for k, label in sorted(self.labels_to_show.items())
            },
        }


IDLE_SNAPSHOT = HighlightSnapshot()


def derive_highlight(graph: MapGraph, state: InteractionState) -> HighlightSnapshot:
    """Compute the highlight for ``state`` over ``graph``.

    The focus node and its direct neighbours are highlighted. An edge is
    active when both endpoints are highlighted, so edges between two
    neighbours of the focus light up as well. Labels show only on active
    edges that carry one.
    """
    focus = state.focus
    if not graph.has_node(focus):
        return IDLE_SNAPSHOT

    neighbors = graph.neighbors(focus)
    highlighted = neighbors | {focus}
    active = frozenset(
        key for key in graph.edge_keys
        if key.a in highlighted and key.b in highlighted
    )
    labels = {key: graph.labels[key] for key in active if key in graph.labels}

    return HighlightSnapshot(
        phase=state.phase,
        focus_node_id=focus,
        hovered_node_id=state.hovered,
        selected_node_id=state.selected,
        highlighted_node_ids=frozenset(highlighted),
        neighbor_ids=neighbors,
        active_edge_ids=active,
        visible_label_edge_ids=frozenset(labels),
        labels_to_show=labels,
    )
