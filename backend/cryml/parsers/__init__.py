from cryml.parsers.diagram_parser import build_diagram, diagram_kind_of, parse_diagram
from cryml.parsers.erd_parser import decode_camel_case_field, decode_snake_case_field, parse_erd
from cryml.parsers.flow_parser import parse_flow
from cryml.parsers.prisma_parser import parse_prisma_schema
from cryml.parsers.relation_linker import link_relations
from cryml.parsers.sequence_parser import parse_sequence

__all__ = [
    "build_diagram",
    "decode_camel_case_field",
    "decode_snake_case_field",
    "diagram_kind_of",
    "link_relations",
    "parse_diagram",
    "parse_erd",
    "parse_flow",
    "parse_prisma_schema",
    "parse_sequence",
]
