"""Pydantic v2 models for layout geometry: bands, node sizes and placement tuning."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from equimap.graph.types import Node, NodeType


class Band(BaseModel):
    """Annular region reserved for one node level.

    Fractions are of the shared max radius. ``node_radius`` and
    ``min_spacing`` feed the collision test for nodes placed in this band.
    """

    model_config = ConfigDict(frozen=True)

    min_fraction: float = Field(ge=0.0, le=1.0)
    max_fraction: float = Field(ge=0.0, le=1.0)
    node_radius: float = Field(gt=0.0)
    min_spacing: float = Field(ge=0.0)

    @model_validator(mode="after")
    def check_range(self) -> "Band":
        if self.min_fraction > self.max_fraction:
            raise ValueError("Band min_fraction must not exceed max_fraction")
        return self


class LayoutConfig(BaseModel):
    """Geometry and search parameters for the radial layout."""

    model_config = ConfigDict(frozen=True)

    margin: float = Field(default=20.0, ge=0.0)
    # The canvas is wider than tall: stretch horizontally, squash vertically.
    scale_x: float = Field(default=1.4, gt=1.0)
    scale_y: float = Field(default=0.85, gt=0.0, lt=1.0)

    tool_band: Band = Band(min_fraction=0.15, max_fraction=0.42, node_radius=8.0, min_spacing=4.0)
    discipline_band: Band = Band(min_fraction=0.50, max_fraction=0.72, node_radius=12.0, min_spacing=8.0)
    knowledge_area_band: Band = Band(min_fraction=0.80, max_fraction=1.00, node_radius=16.0, min_spacing=12.0)
    content_radius_bonus: float = Field(default=2.0, ge=0.0)

    max_trials: int = Field(default=50, ge=1)
    jitter_fraction: float = Field(default=0.3, ge=0.0, le=0.3)
    min_slots: int = Field(default=8, ge=1)
    fallback_radius_step: float = Field(default=2.0, ge=0.0)
    start_angle: float = -math.pi / 2
    seed: int | None = 42

    @model_validator(mode="after")
    def check_bands_disjoint(self) -> "LayoutConfig":
        ordered = [self.tool_band, self.discipline_band, self.knowledge_area_band]
        for inner, outer in zip(ordered, ordered[1:]):
            if inner.max_fraction >= outer.min_fraction:
                raise ValueError(
                    "Bands must not overlap: "
                    f"{inner.max_fraction} >= {outer.min_fraction}"
                )
        return self

    def band_for(self, node_type: NodeType) -> Band:
        if node_type == NodeType.tool:
            return self.tool_band
        if node_type == NodeType.discipline:
            return self.discipline_band
        return self.knowledge_area_band

    def node_radius(self, node: Node) -> float:
        radius = self.band_for(node.type).node_radius
        if node.has_content:
            radius += self.content_radius_bonus
        return radius

    def radius_bounds(self, node_type: NodeType, max_radius: float) -> tuple[float, float]:
        band = self.band_for(node_type)
        return band.min_fraction * max_radius, band.max_fraction * max_radius
