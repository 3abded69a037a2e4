from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from cryml import config
from cryml.compiler.types import LayoutGraph


Positions = Dict[str, Tuple[float, float]]


class LayoutEngine(ABC):
    """
    Black-box layout service.

    Must:
    - read node ids, dimensions and edges from the graph
    - return a position for every node it places
    - NEVER mutate the graph
    """

    name: str

    @abstractmethod
    def layout(self, graph: LayoutGraph) -> Positions:
        pass


class GridLayoutEngine(LayoutEngine):
    name = "grid"

    def __init__(self, columns: int = 4, spacing: float = 400, origin: float = 50):
        self.columns = columns
        self.spacing = spacing
        self.origin = origin

    def layout(self, graph: LayoutGraph) -> Positions:
        positions: Positions = {}
        for index, node in enumerate(graph.nodes):
            col = index % self.columns
            row = index // self.columns
            positions[node.id] = (col * self.spacing + self.origin, row * self.spacing + self.origin)
        return positions


def apply_layout(graph: LayoutGraph, engine: Optional[LayoutEngine] = None) -> LayoutGraph:
    """Write engine positions back onto the graph.

    A graph carrying manual positions (flow ``position`` keys, the fixed
    sequence root) is returned untouched.
    """
    if graph.has_manual_positions():
        return graph

    engine = engine or GridLayoutEngine()
    positions = engine.layout(graph)
    for node in graph.nodes:
        if node.id in positions:
            node.x, node.y = positions[node.id]

    if config.DEBUG:
        print(f"[Layout] {engine.name}: placed {len(positions)} of {len(graph.nodes)} {graph.diagram_kind} nodes")
    return graph
