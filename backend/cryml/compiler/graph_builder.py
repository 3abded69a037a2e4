"""
Layout graph builder.

Turns a canonical diagram into the request a layout engine consumes: nodes
with id and dimensions, edges with source/target and port handles.
"""

import math
from typing import Any, Dict, Optional, Tuple

from cryml.ir.erd_ir import ERDDiagram, Model
from cryml.ir.flow_ir import FlowDiagram, FlowNode
from cryml.ir.sequence_ir import SequenceDiagram
from cryml.compiler.types import LayoutEdge, LayoutGraph, LayoutNode
from cryml.visual.visual_style import ERD_COLORS, FLOW_NODE_SHAPES, FLOW_SIZE_MULTIPLIERS, color_to_hex


# ------------------------------------------------------------------ #
# ERD
# ------------------------------------------------------------------ #

MODEL_WIDTH = 400
MODEL_HEADER_HEIGHT = 50
MODEL_FIELD_HEIGHT = 35
ENUM_WIDTH = 200
ENUM_HEADER_HEIGHT = 50
ENUM_VALUE_HEIGHT = 30
NODE_FOOTER_HEIGHT = 20


def model_dimensions(model: Model) -> Tuple[int, int]:
    return MODEL_WIDTH, MODEL_HEADER_HEIGHT + len(model.fields) * MODEL_FIELD_HEIGHT + NODE_FOOTER_HEIGHT


def _counterpart_field(target: Model, source: Model, relation_name: Optional[str]) -> Optional[str]:
    for candidate in target.fields.values():
        if candidate.relation_to_model == source.name:
            return candidate.name
        if candidate.relation_name and candidate.relation_name == relation_name:
            return candidate.name
    return None


def build_erd_graph(diagram: ERDDiagram) -> LayoutGraph:
    graph = LayoutGraph(diagram_kind="erd")
    enum_names = set(diagram.enum_names())

    for model in diagram.models:
        width, height = model_dimensions(model)
        graph.nodes.append(LayoutNode(
            id=model.name,
            kind="model",
            label=model.name,
            width=width,
            height=height,
            group=model.group,
            color=color_to_hex(model.color, ERD_COLORS),
        ))

    for enum in diagram.enums:
        graph.nodes.append(LayoutNode(
            id=enum.name,
            kind="enum",
            label=enum.name,
            width=ENUM_WIDTH,
            height=ENUM_HEADER_HEIGHT + len(enum.values) * ENUM_VALUE_HEIGHT + NODE_FOOTER_HEIGHT,
            group=enum.group,
            color=color_to_hex(enum.color, ERD_COLORS),
        ))

    for model in diagram.models:
        for field in model.fields.values():
            target = diagram.get_model(field.relation_to_model) if field.relation_to_model else None
            if target is not None and target.name != model.name:
                counterpart = _counterpart_field(target, model, field.relation_name)
                graph.edges.append(LayoutEdge(
                    id=f"{model.name}-{field.name}-{target.name}",
                    source=model.name,
                    target=target.name,
                    source_handle=f"{field.name}-target" if field.is_foreign_key else f"{field.name}-source",
                    target_handle=f"{counterpart}-source" if counterpart else None,
                ))
            elif field.relation_to_model is None and field.type in enum_names:
                graph.edges.append(LayoutEdge(
                    id=f"{model.name}-{field.name}-{field.type}",
                    source=model.name,
                    target=field.type,
                    source_handle=f"{field.name}-source",
                    dashed=True,
                ))

    return graph


# ------------------------------------------------------------------ #
# Flow
# ------------------------------------------------------------------ #

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def flow_node_dimensions(node: FlowNode, node_size: Any = None) -> Tuple[int, int]:
    """Content-sized dimensions per node type, scaled by ``style.node_size``."""
    multiplier = FLOW_SIZE_MULTIPLIERS.get(node_size, 1.0) if isinstance(node_size, str) else 1.0
    label_length = len(node.label)
    description_length = len(node.description or "")
    total_length = label_length + description_length

    if node.type in ("start", "end"):
        width, height = _clamp(80 + label_length * 8, 120, 200), 60
    elif node.type == "decision":
        width = height = _clamp(100 + math.ceil(label_length / 3) * 10, 120, 160)
    elif node.type == "process":
        width = _clamp(100 + label_length * 9, 140, 300)
        height = 100 if description_length > 0 else 80
    elif node.type == "note":
        width = _clamp(140 + math.ceil(total_length / 15) * 20, 180, 350)
        lines = math.ceil(total_length / 25) + (1 if description_length > 0 else 0)
        height = _clamp(60 + lines * 20, 80, 180)
    else:
        width, height = 160, 80

    return round(width * multiplier), round(height * multiplier)


def build_flow_graph(diagram: FlowDiagram) -> LayoutGraph:
    graph = LayoutGraph(diagram_kind="flow")
    node_size = diagram.style.get("node_size")

    for node in diagram.nodes:
        width, height = flow_node_dimensions(node, node_size)
        manual = node.position is not None and (node.position.x != 0 or node.position.y != 0)
        graph.nodes.append(LayoutNode(
            id=node.id,
            kind=node.type,
            label=node.label,
            width=width,
            height=height,
            x=node.position.x if manual else 0.0,
            y=node.position.y if manual else 0.0,
            fixed=manual,
            shape=FLOW_NODE_SHAPES.get(node.type),
            group=node.group,
            color=node.color,
        ))

    for edge in diagram.edges:
        graph.edges.append(LayoutEdge(
            id=edge.id,
            source=edge.source,
            target=edge.target,
            source_handle=edge.source_handle,
            label=edge.label,
        ))

    return graph


# ------------------------------------------------------------------ #
# Sequence
# ------------------------------------------------------------------ #

SEQUENCE_START_X = 50
SEQUENCE_START_Y = 80
SEQUENCE_HEADER_HEIGHT = 70
SEQUENCE_MESSAGE_SPACING = 60
SEQUENCE_HORIZONTAL_GAP = 100
DEFAULT_PARTICIPANT_WIDTH = 150


def sequence_dimensions(diagram: SequenceDiagram) -> Tuple[float, float]:
    participant_width = diagram.style.get("participant_width", DEFAULT_PARTICIPANT_WIDTH)
    if isinstance(participant_width, bool) or not isinstance(participant_width, (int, float)):
        participant_width = DEFAULT_PARTICIPANT_WIDTH

    width = SEQUENCE_START_X + len(diagram.participants) * (participant_width + SEQUENCE_HORIZONTAL_GAP) + 50
    height = SEQUENCE_START_Y + SEQUENCE_HEADER_HEIGHT + len(diagram.messages) * SEQUENCE_MESSAGE_SPACING + 100
    return width, height


def build_sequence_graph(diagram: SequenceDiagram) -> LayoutGraph:
    """A sequence diagram lays out as one fixed root node."""
    width, height = sequence_dimensions(diagram)
    return LayoutGraph(
        diagram_kind="sequence",
        nodes=[LayoutNode(
            id="sequence-root",
            kind="sequence",
            label=diagram.metadata.name,
            width=width,
            height=height,
            fixed=True,
        )],
    )


BUILDERS: Dict[type, Any] = {
    ERDDiagram: build_erd_graph,
    FlowDiagram: build_flow_graph,
    SequenceDiagram: build_sequence_graph,
}


def build_layout_graph(diagram) -> LayoutGraph:
    builder = BUILDERS.get(type(diagram))
    if builder is None:
        raise TypeError(f"Cannot build a layout graph for {type(diagram).__name__}")
    return builder(diagram)
