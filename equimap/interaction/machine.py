"""Stateful wrapper that applies events and keeps the highlight in step."""

from __future__ import annotations

import logging

from equimap.graph.types import MapGraph
from equimap.interaction.highlight import HighlightSnapshot, derive_highlight
from equimap.interaction.state import (
    IDLE,
    Click,
    Close,
    InteractionEvent,
    InteractionState,
    Phase,
    PointerEnter,
    PointerLeave,
    apply,
    retarget,
)

logger = logging.getLogger(__name__)


class InteractionMachine:
    """Holds the interaction state for one graph.

    ``dispatch`` applies the transition and recomputes the snapshot before
    returning, so callers never see a state without its matching highlight.
    """

    def __init__(self, graph: MapGraph, state: InteractionState = IDLE) -> None:
        self._graph = graph
        self._state = retarget(state, graph)
        self._snapshot = derive_highlight(graph, self._state)

    @property
    def graph(self) -> MapGraph:
        return self._graph

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def snapshot(self) -> HighlightSnapshot:
        return self._snapshot

    def dispatch(self, event: InteractionEvent) -> HighlightSnapshot:
        new_state = apply(self._state, event, self._graph)
        if new_state == self._state:
            logger.debug("Ignored %s in phase %s", event, self._state.phase.value)
            return self._snapshot
        self._state = new_state
        self._snapshot = derive_highlight(self._graph, new_state)
        logger.debug("%s -> phase %s", event, new_state.phase.value)
        return self._snapshot

    def hover(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(PointerEnter(node_id))

    def leave(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(PointerLeave(node_id))

    def click(self, node_id: str) -> HighlightSnapshot:
        return self.dispatch(Click(node_id))

    def close(self) -> HighlightSnapshot:
        return self.dispatch(Close())

    def with_graph(self, graph: MapGraph) -> "InteractionMachine":
        """New machine over ``graph`` carrying over focus on surviving node ids."""
        return InteractionMachine(graph, self._state)
