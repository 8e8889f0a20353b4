"""Interaction states, pointer events and the pure transition function.

Hover and selection are tracked independently. The reported phase is
Hovering while a node is hovered, else Selected while a node is selected,
else Idle. Selection is cleared only by an explicit Close event; clicking
empty space produces no event at all.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from equimap.graph.types import MapGraph


class Phase(str, Enum):
    idle = "idle"
    hovering = "hovering"
    selected = "selected"


@dataclass(frozen=True)
class PointerEnter:
    node_id: str


@dataclass(frozen=True)
class PointerLeave:
    node_id: str


@dataclass(frozen=True)
class Click:
    node_id: str


@dataclass(frozen=True)
class Close:
    """Side panel closed by the user."""


InteractionEvent = Union[PointerEnter, PointerLeave, Click, Close]


@dataclass(frozen=True)
class InteractionState:
    hovered: str | None = None
    selected: str | None = None

    @property
    def phase(self) -> Phase:
        if self.hovered is not None:
            return Phase.hovering
        if self.selected is not None:
            return Phase.selected
        return Phase.idle

    @property
    def focus(self) -> str | None:
        """Node driving the highlight: hover wins over selection."""
        return self.hovered if self.hovered is not None else self.selected


IDLE = InteractionState()


def apply(state: InteractionState, event: InteractionEvent, graph: MapGraph) -> InteractionState:
    """Return the state after ``event``.

    Events naming a node that is not in ``graph`` leave the state unchanged.
    """
    if isinstance(event, Close):
        return replace(state, selected=None) if state.selected is not None else state

    if not graph.has_node(event.node_id):
        return state

    if isinstance(event, PointerEnter):
        return replace(state, hovered=event.node_id)
    if isinstance(event, PointerLeave):
        # Enter on the new target may arrive before leave on the old one.
        if state.hovered == event.node_id:
            return replace(state, hovered=None)
        return state
    if isinstance(event, Click):
        return replace(state, selected=event.node_id)
    return state


def retarget(state: InteractionState, graph: MapGraph) -> InteractionState:
    """Drop hover/selection on nodes that no longer exist in ``graph``."""
    hovered = state.hovered if graph.has_node(state.hovered) else None
    selected = state.selected if graph.has_node(state.selected) else None
    if hovered == state.hovered and selected == state.selected:
        return state
    return InteractionState(hovered=hovered, selected=selected)
