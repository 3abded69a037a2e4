from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .diagram import DiagramMetadata


FLOW_NODE_TYPES = (
    "start",
    "end",
    "process",
    "decision",
    "note",
    "data",
    "database",
    "document",
    "fork",
    "join",
)


@dataclass
class Position:
    x: float
    y: float


@dataclass
class FlowNode:
    id: str
    type: str                               # one of FLOW_NODE_TYPES
    label: str
    description: Optional[str] = None
    group: Optional[str] = None
    position: Optional[Position] = None
    color: str = "#3b82f6"


@dataclass
class FlowEdge:
    id: str
    source: str
    target: str
    label: Optional[str] = None
    condition: Optional[str] = None
    source_handle: Optional[str] = None    # routing hint for decision ports


@dataclass
class FlowGroup:
    id: str
    label: str
    nodes: List[str] = field(default_factory=list)
    color: Optional[str] = None


@dataclass
class FlowDiagram:
    metadata: DiagramMetadata
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)
    groups: List[FlowGroup] = field(default_factory=list)
    style: Dict[str, Any] = field(default_factory=dict)

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def outgoing(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self.edges if e.source == node_id]

    def start_nodes(self) -> List[FlowNode]:
        return [n for n in self.nodes if n.type == "start"]

    def has_manual_positions(self) -> bool:
        return any(
            n.position is not None and (n.position.x != 0 or n.position.y != 0)
            for n in self.nodes
        )
