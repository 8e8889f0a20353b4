"""EQUIMAP layout module - concentric elliptical bands with collision-checked placement."""

from equimap.layout.config import Band, LayoutConfig
from equimap.layout.engine import Canvas, LayoutEngine, LayoutResult, PositionedNode, layout

__all__ = [
    "Band",
    "LayoutConfig",
    "Canvas",
    "LayoutEngine",
    "LayoutResult",
    "PositionedNode",
    "layout",
]
