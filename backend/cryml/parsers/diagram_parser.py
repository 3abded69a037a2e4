from typing import Any, Dict, Union

from cryml.ir.diagram import DiagramKind
from cryml.ir.erd_ir import ERDDiagram
from cryml.ir.flow_ir import FlowDiagram
from cryml.ir.sequence_ir import SequenceDiagram
from cryml.parsers.erd_parser import build_erd
from cryml.parsers.flow_parser import build_flow
from cryml.parsers.sequence_parser import build_sequence
from cryml.parsers.yaml_loader import document_kind, load_document


Diagram = Union[ERDDiagram, FlowDiagram, SequenceDiagram]

BUILDERS = {
    DiagramKind.ERD: build_erd,
    DiagramKind.FLOW: build_flow,
    DiagramKind.SEQUENCE: build_sequence,
}


def build_diagram(doc: Dict[str, Any]) -> Diagram:
    return BUILDERS[document_kind(doc)](doc)


def parse_diagram(yaml_text: str) -> Diagram:
    """Parse any cryml document, dispatching on ``diagram_type``."""
    return build_diagram(load_document(yaml_text))


def diagram_kind_of(diagram: Diagram) -> DiagramKind:
    if isinstance(diagram, ERDDiagram):
        return DiagramKind.ERD
    if isinstance(diagram, FlowDiagram):
        return DiagramKind.FLOW
    return DiagramKind.SEQUENCE
