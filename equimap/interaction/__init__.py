"""EQUIMAP interaction module - hover/select state machine and highlight derivation."""

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
from equimap.interaction.highlight import IDLE_SNAPSHOT, HighlightSnapshot, derive_highlight
from equimap.interaction.machine import InteractionMachine

__all__ = [
    "IDLE",
    "Click",
    "Close",
    "InteractionEvent",
    "InteractionState",
    "Phase",
    "PointerEnter",
    "PointerLeave",
    "apply",
    "retarget",
    "IDLE_SNAPSHOT",
    "HighlightSnapshot",
    "derive_highlight",
    "InteractionMachine",
]
