"""
Shared loading and coercion helpers for the diagram parsers.

YAML is untyped at the boundary: labels may load as booleans or numbers and
positions may load as strings, so every parser goes through these helpers.
"""

from typing import Any, Dict, Optional, Union

import yaml

from cryml.dialect import as_text, is_label
from cryml.ir.diagram import DiagramKind, DiagramMetadata
from cryml.ir.errors import DiagramParseError


def load_document(yaml_text: str) -> Dict[str, Any]:
    """``yaml.safe_load`` the text and require a top-level mapping."""
    try:
        doc = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        raise DiagramParseError(f"Invalid YAML: {exc}") from exc

    if not isinstance(doc, dict):
        raise DiagramParseError("Document must be a YAML mapping")
    return doc


def document_kind(doc: Dict[str, Any]) -> DiagramKind:
    raw_kind = doc.get("diagram_type")
    kind = DiagramKind.from_value(raw_kind) if raw_kind is None or isinstance(raw_kind, str) else None
    if kind is None:
        raise DiagramParseError(
            f"Invalid diagram_type {raw_kind!r}. Must be one of: erd, sequence, flow", "diagram_type",
        )
    return kind


def expect_kind(doc: Dict[str, Any], expected: DiagramKind) -> None:
    kind = document_kind(doc)
    if kind != expected:
        raise DiagramParseError(
            f'Invalid diagram_type. Expected "{expected.value}", got "{kind.value}"', "diagram_type",
        )


def parse_metadata(doc: Dict[str, Any]) -> DiagramMetadata:
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict) or not is_label(metadata.get("name")):
        raise DiagramParseError("Missing required field: metadata.name", "metadata.name")

    return DiagramMetadata(
        name=as_text(metadata["name"]),
        description=optional_text(metadata.get("description")),
        version=optional_text(metadata.get("version", doc.get("version"))),
    )


def require_section(doc: Dict[str, Any], key: str) -> Any:
    value = doc.get(key)
    if value is None:
        raise DiagramParseError(f"Missing required field: {key}", key)
    return value


def optional_text(value: Any) -> Optional[str]:
    """Stringify a scalar; empty or absent values become None."""
    if value is None or value == "":
        return None
    return as_text(value)


def to_number(value: Any, path: str) -> Union[int, float]:
    """Numify a YAML scalar; integral values stay ints."""
    if isinstance(value, bool) or value is None:
        raise DiagramParseError(f"Expected a number, got {value!r}", path)
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError as exc:
        raise DiagramParseError(f"Expected a number, got {value!r}", path) from exc
    return int(number) if number.is_integer() else number
