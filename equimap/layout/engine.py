"""Radial band layout with randomized collision-free placement.

Nodes are placed group by group, inner band first (tools, then
disciplines, then knowledge areas). For each node an angular slot is
chosen from ``2*pi / max(group_size, min_slots)``. Up to ``max_trials``
candidate positions are sampled with a bounded angular jitter and a
uniform radius inside the band. The first candidate clearing every
already-placed node by ``r_self + r_other + min_spacing`` wins. When all
trials fail the node gets a deterministic fallback position on its slot
angle, which may overlap.

Coordinates are relative to the canvas centre. Randomness comes only from
the numpy Generator handed in (or one seeded from the config), so the same
inputs and seed always give the same layout.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from equimap.graph.types import Node, NodeType
from equimap.layout.config import LayoutConfig

logger = logging.getLogger(__name__)

# Inner to outer placement order.
_BAND_ORDER = (NodeType.tool, NodeType.discipline, NodeType.knowledge_area)


@dataclass(frozen=True)
class Canvas:
    width: float
    height: float

    @classmethod
    def coerce(cls, value: "Canvas | Mapping[str, Any] | Sequence[float]") -> "Canvas":
        """Accept a Canvas, a {"width", "height"} mapping or a (width, height) pair.

        Anything unreadable becomes a zero-size canvas, which lays out empty.
        """
        if isinstance(value, Canvas):
            return value
        try:
            if isinstance(value, Mapping):
                return cls(float(value.get("width", 0.0)), float(value.get("height", 0.0)))
            width, height = value
            return cls(float(width), float(height))
        except (TypeError, ValueError) as e:
            logger.warning("Unreadable canvas %r: %s", value, e)
            return cls(0.0, 0.0)

    @property
    def is_degenerate(self) -> bool:
        return not (
            math.isfinite(self.width) and math.isfinite(self.height)
            and self.width > 0 and self.height > 0
        )


@dataclass(frozen=True)
class PositionedNode:
    """A node with its centre-relative position and placement metadata."""

    node: Node
    x: float
    y: float
    radius: float
    angle: float
    band_radius: float
    fallback: bool = False

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.node.to_dict(),
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
            "fallback": self.fallback,
        }


@dataclass
class LayoutResult:
    canvas: Canvas
    max_radius: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    positions: list[PositionedNode] = field(default_factory=list)
    fallback_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.positions

    def by_id(self) -> dict[str, PositionedNode]:
        return {p.id: p for p in self.positions}

    def to_canvas(self, position: PositionedNode) -> tuple[float, float]:
        """Translate a centre-relative position to top-left canvas coordinates."""
        return position.x + self.canvas.width / 2, position.y + self.canvas.height / 2

    def to_dict(self) -> dict[str, Any]:
        return {
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "maxRadius": self.max_radius,
            "scale": {"x": self.scale_x, "y": self.scale_y},
            "fallbackCount": self.fallback_count,
            "nodes": [p.to_dict() for p in self.positions],
        }


class LayoutEngine:
    """Stateless radial layout. Holds only its configuration."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def layout(
        self,
        nodes: Sequence[Node],
        canvas: Canvas | Mapping[str, Any] | Sequence[float],
        rng: np.random.Generator | None = None,
    ) -> LayoutResult:
        """Assign every node a position inside its band.

        Args:
            nodes: Nodes to place. Output keeps input order.
            canvas: Canvas size in abstract units.
            rng: Random generator. Defaults to one seeded from config.seed.

        Returns:
            LayoutResult; empty for zero nodes or a degenerate canvas.
        """
        canvas = Canvas.coerce(canvas)
        if not nodes or canvas.is_degenerate:
            return LayoutResult(canvas=canvas)

        cfg = self.config
        max_radius = min(canvas.width, canvas.height) / 2 - cfg.margin
        if max_radius <= 0:
            logger.warning(
                "Canvas %.1fx%.1f leaves no room inside margin %.1f",
                canvas.width, canvas.height, cfg.margin,
            )
            return LayoutResult(canvas=canvas)

        # The outer band never stretches past the canvas edge horizontally.
        scale_x = min(cfg.scale_x, (canvas.width / 2 - cfg.margin) / max_radius)
        scale_y = cfg.scale_y

        if rng is None:
            rng = np.random.default_rng(cfg.seed)

        slots: list[PositionedNode | None] = [None] * len(nodes)
        placed_x: list[float] = []
        placed_y: list[float] = []
        placed_r: list[float] = []
        fallbacks = 0

        for node_type in _BAND_ORDER:
            group = [(i, n) for i, n in enumerate(nodes) if n.type == node_type]
            if not group:
                continue

            band = cfg.band_for(node_type)
            min_r, max_r = cfg.radius_bounds(node_type, max_radius)
            angle_step = 2 * math.pi / max(len(group), cfg.min_slots)

            for slot, (index, node) in enumerate(group):
                positioned = self._place(
                    node, slot, angle_step, min_r, max_r, band.min_spacing,
                    placed_x, placed_y, placed_r, rng, (scale_x, scale_y),
                )
                if positioned.fallback:
                    fallbacks += 1
                    logger.debug(
                        "Fallback placement for %s after %d trials", node.id, cfg.max_trials
                    )
                slots[index] = positioned
                placed_x.append(positioned.x)
                placed_y.append(positioned.y)
                placed_r.append(positioned.radius)

        positions = [p for p in slots if p is not None]
        logger.info(
            "Laid out %d nodes on %.0fx%.0f canvas (%d fallbacks)",
            len(positions), canvas.width, canvas.height, fallbacks,
        )
        return LayoutResult(
            canvas=canvas,
            max_radius=max_radius,
            scale_x=scale_x,
            scale_y=scale_y,
            positions=positions,
            fallback_count=fallbacks,
        )

    def _place(
        self,
        node: Node,
        slot: int,
        angle_step: float,
        min_r: float,
        max_r: float,
        min_spacing: float,
        placed_x: list[float],
        placed_y: list[float],
        placed_r: list[float],
        rng: np.random.Generator,
        scale: tuple[float, float],
    ) -> PositionedNode:
        cfg = self.config
        radius = cfg.node_radius(node)
        base_angle = cfg.start_angle + slot * angle_step
        max_jitter = cfg.jitter_fraction * angle_step

        xs = np.asarray(placed_x, dtype=float)
        ys = np.asarray(placed_y, dtype=float)
        clearance = np.asarray(placed_r, dtype=float) + radius + min_spacing

        for _ in range(cfg.max_trials):
            angle = base_angle + float(rng.uniform(-max_jitter, max_jitter))
            band_radius = float(rng.uniform(min_r, max_r))
            x, y = self._project(angle, band_radius, scale)
            if xs.size == 0 or bool(np.all(np.hypot(xs - x, ys - y) > clearance)):
                return PositionedNode(node, x, y, radius, angle, band_radius)

        band_radius = min(min_r + cfg.max_trials * cfg.fallback_radius_step, max_r)
        x, y = self._project(base_angle, band_radius, scale)
        return PositionedNode(node, x, y, radius, base_angle, band_radius, fallback=True)

    @staticmethod
    def _project(angle: float, band_radius: float, scale: tuple[float, float]) -> tuple[float, float]:
        return (
            math.cos(angle) * band_radius * scale[0],
            math.sin(angle) * band_radius * scale[1],
        )


def layout(
    nodes: Sequence[Node],
    canvas: Canvas | Mapping[str, Any] | Sequence[float],
    rng: np.random.Generator | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Functional entry point: ``LayoutEngine(config).layout(nodes, canvas, rng)``."""
    return LayoutEngine(config).layout(nodes, canvas, rng)
