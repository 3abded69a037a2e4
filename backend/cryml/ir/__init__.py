"""
Canonical in-memory models produced by the cryml parsers.
"""

from cryml.ir.diagram import DiagramKind, DiagramMetadata
from cryml.ir.errors import DiagramParseError
from cryml.ir.erd_ir import ERDDiagram, Enum, EnumValue, Field, Index, Model, UniqueConstraint
from cryml.ir.flow_ir import FlowDiagram, FlowEdge, FlowGroup, FlowNode, Position
from cryml.ir.sequence_ir import Block, Message, Note, Participant, SequenceDiagram

__all__ = [
    "DiagramKind",
    "DiagramMetadata",
    "DiagramParseError",
    "ERDDiagram",
    "Enum",
    "EnumValue",
    "Field",
    "Index",
    "Model",
    "UniqueConstraint",
    "FlowDiagram",
    "FlowEdge",
    "FlowGroup",
    "FlowNode",
    "Position",
    "Block",
    "Message",
    "Note",
    "Participant",
    "SequenceDiagram",
]
