from cryml.compiler.graph_builder import build_layout_graph
from cryml.compiler.layout import GridLayoutEngine, LayoutEngine, apply_layout
from cryml.compiler.types import LayoutEdge, LayoutGraph, LayoutNode

__all__ = [
    "GridLayoutEngine",
    "LayoutEdge",
    "LayoutEngine",
    "LayoutGraph",
    "LayoutNode",
    "apply_layout",
    "build_layout_graph",
]
