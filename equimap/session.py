"""Map session: owns the current graph, layout and interaction machine.

A rebuild computes the new graph, layout and interaction state first and
swaps them in together; observers are notified only after the swap, so a
listener always sees a consistent view.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from equimap.graph.builder import GraphBuilder
from equimap.graph.types import MapGraph, NodeDetail
from equimap.interaction.highlight import HighlightSnapshot
from equimap.interaction.machine import InteractionMachine
from equimap.interaction.state import Click, Close, InteractionEvent, PointerEnter, PointerLeave
from equimap.layout.engine import Canvas, LayoutEngine, LayoutResult
from equimap.models import LayerDescription, MapRecord
from equimap.settings import EquimapSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapView:
    """Everything the render surface needs for one frame."""

    graph: MapGraph
    layout: LayoutResult
    highlight: HighlightSnapshot

    def to_dict(self) -> dict[str, Any]:
        highlight = self.highlight
        nodes = []
        for position in self.layout.positions:
            item = position.to_dict()
            item["highlighted"] = highlight.is_node_highlighted(position.id)
            nodes.append(item)

        edges = []
        for edge in self.graph.edges:
            key = edge.key
            item = edge.to_dict()
            item["label"] = self.graph.labels.get(key)
            item["active"] = key in highlight.active_edge_ids
            item["labelVisible"] = key in highlight.visible_label_edge_ids
            edges.append(item)

        return {
            "canvas": {"width": self.layout.canvas.width, "height": self.layout.canvas.height},
            "maxRadius": self.layout.max_radius,
            "nodes": nodes,
            "edges": edges,
            "highlight": highlight.to_dict(),
            "skippedRecords": self.graph.skipped_records,
        }


Listener = Callable[[MapView], None]


class MapSession:
    """Application layer tying graph building, layout and interaction together.

    Example:
        session = MapSession()
        session.subscribe(render)
        session.rebuild(records, canvas=(1200, 800))
        session.hover(node_id)
    """

    def __init__(
        self,
        settings: Optional[EquimapSettings] = None,
        engine: Optional[LayoutEngine] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or LayoutEngine(self.settings.layout_config())
        self._canvas = self.settings.canvas
        self._layer_descriptions: list[LayerDescription | Mapping[str, Any]] = []
        self._listeners: list[Listener] = []

        graph = MapGraph()
        self._machine = InteractionMachine(graph)
        self._layout = LayoutResult(canvas=self._canvas)

    # ------------------------------------------------------------------
    # Current view
    # ------------------------------------------------------------------

    @property
    def graph(self) -> MapGraph:
        return self._machine.graph

    @property
    def layout(self) -> LayoutResult:
        return self._layout

    @property
    def snapshot(self) -> HighlightSnapshot:
        return self._machine.snapshot

    @property
    def view(self) -> MapView:
        return MapView(graph=self.graph, layout=self._layout, highlight=self._machine.snapshot)

    def node_detail(self, node_id: str) -> NodeDetail | None:
        """Side-panel details for a node in the current graph."""
        return self.graph.detail(node_id)

    # ------------------------------------------------------------------
    # Rebuilds
    # ------------------------------------------------------------------

    def rebuild(
        self,
        records: Iterable[MapRecord | Mapping[str, Any]],
        canvas: Canvas | Mapping[str, Any] | Sequence[float] | None = None,
        layer_descriptions: Iterable[LayerDescription | Mapping[str, Any]] | None = None,
    ) -> MapView:
        """Rebuild graph and layout from scratch for a new record set."""
        records = list(records)
        if layer_descriptions is not None:
            layer_descriptions = list(layer_descriptions)
        else:
            layer_descriptions = self._layer_descriptions
        new_canvas = Canvas.coerce(canvas) if canvas is not None else self._canvas

        graph = GraphBuilder(layer_descriptions).build(records)
        new_layout = self.engine.layout(graph.nodes, new_canvas)
        machine = self._machine.with_graph(graph)

        self._layer_descriptions = layer_descriptions
        self._canvas = new_canvas
        self._machine = machine
        self._layout = new_layout

        view = self.view
        self._notify(view)
        return view

    def resize(self, canvas: Canvas | Mapping[str, Any] | Sequence[float]) -> MapView:
        """Re-derive the layout for a new canvas; graph and focus are kept."""
        new_canvas = Canvas.coerce(canvas)
        new_layout = self.engine.layout(self.graph.nodes, new_canvas)
        self._canvas = new_canvas
        self._layout = new_layout

        view = self.view
        self._notify(view)
        return view

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def dispatch(self, event: InteractionEvent) -> HighlightSnapshot:
        """Apply a pointer event; observers are told only when the state changes."""
        before = self._machine.state
        snapshot = self._machine.dispatch(event)
        if self._machine.state != before:
            self._notify(self.view)
        return snapshot

    def hover(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(PointerEnter(node_id))

    def leave(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(PointerLeave(node_id))

    def click(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(Click(node_id))

    def close(self) -> HighlightSnapshot:
        return self.dispatch(Close())

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, view: MapView) -> None:
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Map listener %r failed", listener)
