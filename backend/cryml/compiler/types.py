from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class LayoutNode:
    id: str
    kind: str           # model | enum | <flow node type> | sequence
    label: str
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0
    fixed: bool = False     # manual position from the document
    shape: Optional[str] = None
    group: Optional[str] = None
    color: Optional[str] = None


@dataclass
class LayoutEdge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: Optional[str] = None
    dashed: bool = False


@dataclass
class LayoutGraph:
    diagram_kind: str
    nodes: List[LayoutNode] = field(default_factory=list)
    edges: List[LayoutEdge] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[LayoutNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_manual_positions(self) -> bool:
        return any(node.fixed for node in self.nodes)
