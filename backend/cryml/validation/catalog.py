"""
Error / warning catalog.

Static registry mapping issue codes to a message template and a remediation
hint. Phases never spell messages themselves; they call ``create_error`` or
``create_warning`` with a code, a path and optional details.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from cryml.validation.issues import ValidationIssue, ValidationSeverity


@dataclass(frozen=True)
class CatalogEntry:
    message: str
    suggestion: str


ERROR_CATALOG: Dict[str, CatalogEntry] = {
    # Document
    "YAML_PARSE_ERROR": CatalogEntry(
        "Failed to parse YAML",
        "Check YAML syntax for errors",
    ),
    "INVALID_DOCUMENT": CatalogEntry(
        "Document must be a YAML mapping",
        "Start the file with top-level keys such as diagram_type and metadata",
    ),
    "INVALID_DIAGRAM_TYPE": CatalogEntry(
        "Invalid diagram_type. Must be one of: erd, sequence, flow",
        "Use one of: erd, sequence, flow",
    ),
    "MISSING_METADATA": CatalogEntry(
        "Missing required field: metadata",
        'Add: metadata: { name: "Diagram Name" }',
    ),
    "MISSING_METADATA_NAME": CatalogEntry(
        "Missing required field: metadata.name",
        'Add: metadata.name: "Diagram Name"',
    ),
    "MISSING_FIELD": CatalogEntry(
        "Missing required field",
        "Add the missing field",
    ),
    "INVALID_TYPE": CatalogEntry(
        "Field has the wrong type",
        "Check the value type against the cryml format",
    ),
    "INVALID_VALUE": CatalogEntry(
        "Field value is not allowed",
        "Use one of the allowed values",
    ),
    # ERD
    "INVALID_COLOR_RULE": CatalogEntry(
        "Color rule pattern is not a valid regular expression",
        "Fix the regular expression in colors.rules[].pattern",
    ),
    "FK_TABLE_NOT_FOUND": CatalogEntry(
        "Foreign key references non-existent table",
        "Check the table name or create the referenced table",
    ),
    "FK_COLUMN_NOT_FOUND": CatalogEntry(
        "Foreign key references non-existent column",
        "Check the column name or create the referenced column",
    ),
    "CIRCULAR_DEPENDENCY": CatalogEntry(
        "Circular foreign key dependency detected",
        "Redesign your schema to avoid circular references",
    ),
    # Sequence
    "PARTICIPANT_NOT_FOUND": CatalogEntry(
        "Message references non-existent participant",
        "Check participant ID or add the participant",
    ),
    "MESSAGE_NOT_FOUND": CatalogEntry(
        "Block references non-existent message",
        "Check message ID in block.messages array",
    ),
    "BLOCK_NOT_FOUND": CatalogEntry(
        "Block references non-existent parent block",
        "Check parent_block or declare the parent block",
    ),
    "NOTE_TARGET_NOT_FOUND": CatalogEntry(
        "Note references non-existent participant or message",
        "Attach the note to a declared participant or message ID",
    ),
    "INVALID_SEQUENCE_ORDER": CatalogEntry(
        "sequence_order must be sequential starting from 1",
        "Ensure sequence_order values are 1, 2, 3, ...",
    ),
    "DUPLICATE_SEQUENCE_ORDER": CatalogEntry(
        "Duplicate sequence_order values detected",
        "Give every message its own sequence_order",
    ),
    "DUPLICATE_PARTICIPANT_ID": CatalogEntry(
        "Duplicate participant ID",
        "Use unique IDs for each participant",
    ),
    "DUPLICATE_MESSAGE_ID": CatalogEntry(
        "Duplicate message ID",
        "Use unique IDs for each message",
    ),
    "MISSING_BLOCK_CONDITION": CatalogEntry(
        "Block type requires a condition",
        'Add: condition: "some condition"',
    ),
    # Flow
    "NODE_NOT_FOUND": CatalogEntry(
        "Edge references non-existent node",
        "Check node ID in edge source/target",
    ),
    "UNREACHABLE_NODE": CatalogEntry(
        "Node is not reachable from any start node",
        "Ensure all nodes are reachable from start nodes",
    ),
    "DECISION_FEW_BRANCHES": CatalogEntry(
        "Decision node should have at least 2 outgoing edges",
        "Add at least 2 outgoing edges for decision branches",
    ),
    "DUPLICATE_NODE_ID": CatalogEntry(
        "Duplicate node ID",
        "Use unique IDs for each node",
    ),
    "DUPLICATE_EDGE_ID": CatalogEntry(
        "Duplicate edge ID",
        "Use unique IDs for each edge",
    ),
    "MULTIPLE_START_NODES": CatalogEntry(
        "Multiple start nodes detected",
        "Use only one start node in your flow",
    ),
    "NO_START_NODE": CatalogEntry(
        "No start node found",
        "Add a node with type: start",
    ),
}


WARNING_CATALOG: Dict[str, CatalogEntry] = {
    # ERD
    "MISSING_PRIMARY_KEY": CatalogEntry(
        "Model does not have a primary key",
        "Add a field with attributes.primary_key: true",
    ),
    "FK_WITHOUT_INDEX": CatalogEntry(
        "Foreign key field lacks an index",
        "Consider adding an index for better query performance",
    ),
    "AMBIGUOUS_RELATION": CatalogEntry(
        "Model has several unnamed relations to the same model",
        "Add relation_name to each side so the relations can be paired",
    ),
    # Sequence
    "UNUSED_PARTICIPANT": CatalogEntry(
        "Participant has no messages",
        "Remove unused participants or add messages involving them",
    ),
    # Flow
    "MISSING_CONDITION": CatalogEntry(
        "Decision node has edges without conditions",
        'Add condition to edges: condition: "condition text"',
    ),
    "FORK_JOIN_MISMATCH": CatalogEntry(
        "Fork nodes count does not match join nodes count",
        "Ensure each fork has a corresponding join node",
    ),
    "COMPLEX_DIAGRAM": CatalogEntry(
        "Flow diagram has many nodes - consider using groups",
        "Break down complex flows into smaller groups",
    ),
}


def _build(
    catalog: Dict[str, CatalogEntry],
    severity: ValidationSeverity,
    code: str,
    path: str,
    details: Optional[str],
) -> ValidationIssue:
    entry = catalog[code]
    message = f"{entry.message}: {details}" if details else entry.message
    return ValidationIssue(
        severity=severity,
        code=code,
        message=message,
        path=path,
        suggestion=entry.suggestion,
    )


def create_error(code: str, path: str, details: Optional[str] = None) -> ValidationIssue:
    return _build(ERROR_CATALOG, ValidationSeverity.ERROR, code, path, details)


def create_warning(code: str, path: str, details: Optional[str] = None) -> ValidationIssue:
    return _build(WARNING_CATALOG, ValidationSeverity.WARNING, code, path, details)
