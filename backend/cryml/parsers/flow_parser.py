"""
Flow diagram parser.

Nodes, edges and groups may be YAML lists of entries carrying ``id`` or
mappings keyed by id. Edges name their endpoints ``source``/``target`` or
``from``/``to``.
"""

from typing import Any, Dict, List

from cryml import config
from cryml.dialect import as_text, edge_endpoint, iter_entries
from cryml.ir.diagram import DiagramKind
from cryml.ir.errors import DiagramParseError
from cryml.ir.flow_ir import FlowDiagram, FlowEdge, FlowGroup, FlowNode, Position
from cryml.parsers.yaml_loader import (
    expect_kind,
    load_document,
    optional_text,
    parse_metadata,
    require_section,
    to_number,
)
from cryml.visual.edge_rules import source_handle_for
from cryml.visual.visual_style import DEFAULT_HEX, FLOW_COLORS, color_to_hex


def _entry_id(entry, path: str) -> str:
    if entry.id is None or entry.id == "":
        raise DiagramParseError("Missing required field: id", f"{path}.id")
    return as_text(entry.id)


def parse_groups(raw_groups: Any) -> List[FlowGroup]:
    groups = []
    for entry in iter_entries(raw_groups, "groups"):
        raw = entry.raw if isinstance(entry.raw, dict) else {}
        group_id = _entry_id(entry, entry.path)
        members = raw.get("nodes") if isinstance(raw.get("nodes"), list) else []
        groups.append(FlowGroup(
            id=group_id,
            label=optional_text(raw.get("label")) or group_id,
            nodes=[as_text(m) for m in members if m is not None],
            color=optional_text(raw.get("color")),
        ))
    return groups


def node_color(group_id: Any, groups: List[FlowGroup], style: Dict[str, Any]) -> str:
    """``style.default_color`` wins, then the group's colour, then blue."""
    if style.get("default_color"):
        return color_to_hex(style["default_color"], FLOW_COLORS)

    for group in groups:
        if group.id == group_id and group.color:
            return color_to_hex(group.color, FLOW_COLORS)
    return DEFAULT_HEX


def parse_nodes(raw_nodes: Any, groups: List[FlowGroup], style: Dict[str, Any]) -> List[FlowNode]:
    nodes = []
    for entry in iter_entries(raw_nodes, "nodes"):
        if not isinstance(entry.raw, dict):
            raise DiagramParseError("Node must be a mapping", entry.path)
        raw = entry.raw

        position = None
        if isinstance(raw.get("position"), dict):
            position = Position(
                x=float(to_number(raw["position"].get("x"), f"{entry.path}.position.x")),
                y=float(to_number(raw["position"].get("y"), f"{entry.path}.position.y")),
            )

        group = optional_text(raw.get("group"))
        nodes.append(FlowNode(
            id=_entry_id(entry, entry.path),
            type=as_text(raw.get("type")) or "process",
            label=as_text(raw.get("label")) or "",
            description=optional_text(raw.get("description")),
            group=group,
            position=position,
            color=node_color(group, groups, style),
        ))
    return nodes


def parse_edges(raw_edges: Any, nodes: List[FlowNode]) -> List[FlowEdge]:
    node_types = {node.id: node.type for node in nodes}
    edges = []

    for i, entry in enumerate(iter_entries(raw_edges, "edges")):
        if not isinstance(entry.raw, dict):
            raise DiagramParseError("Edge must be a mapping", entry.path)
        raw = entry.raw

        _, source = edge_endpoint(raw, "source")
        _, target = edge_endpoint(raw, "target")
        if source is None or target is None:
            raise DiagramParseError("Edge must have a source and a target", entry.path)

        source = as_text(source)
        label = optional_text(raw.get("label"))
        edges.append(FlowEdge(
            id=as_text(entry.id) if entry.id not in (None, "") else f"edge-{i}",
            source=source,
            target=as_text(target),
            label=label,
            condition=optional_text(raw.get("condition")),
            source_handle=source_handle_for(node_types.get(source), label),
        ))
    return edges


def build_flow(doc: Dict[str, Any]) -> FlowDiagram:
    """Build a ``FlowDiagram`` from an already-loaded document."""
    expect_kind(doc, DiagramKind.FLOW)
    metadata = parse_metadata(doc)
    raw_nodes = require_section(doc, "nodes")

    style = doc.get("style") if isinstance(doc.get("style"), dict) else {}
    groups = parse_groups(doc.get("groups"))
    nodes = parse_nodes(raw_nodes, groups, style)
    edges = parse_edges(doc.get("edges"), nodes)

    if config.DEBUG:
        print(f"[FlowParser] {metadata.name}: {len(nodes)} nodes, {len(edges)} edges, {len(groups)} groups")

    return FlowDiagram(metadata=metadata, nodes=nodes, edges=edges, groups=groups, style=dict(style))


def parse_flow(yaml_text: str) -> FlowDiagram:
    return build_flow(load_document(yaml_text))
