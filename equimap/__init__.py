"""
EQUIMAP - Internet Equalities toolkit map engine

Turns curated knowledge area / discipline / tool records into a three-ring
node-link map: graph construction, radial band layout and hover/select
highlighting.
"""

__version__ = "0.1.0"

from equimap.graph import GraphBuilder, MapGraph, NodeType, build_graph, validate_graph
from equimap.interaction import HighlightSnapshot, InteractionMachine, InteractionState
from equimap.layout import Canvas, LayoutConfig, LayoutEngine, LayoutResult
from equimap.models import MapRecord, parse_record
from equimap.session import MapSession, MapView
from equimap.settings import EquimapSettings, get_settings

__all__ = [
    "__version__",
    "GraphBuilder",
    "MapGraph",
    "NodeType",
    "build_graph",
    "validate_graph",
    "HighlightSnapshot",
    "InteractionMachine",
    "InteractionState",
    "Canvas",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutResult",
    "MapRecord",
    "parse_record",
    "MapSession",
    "MapView",
    "EquimapSettings",
    "get_settings",
]
