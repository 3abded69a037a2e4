"""
Prisma schema parser.

Reads ``model`` and ``enum`` blocks from ``.prisma`` text into the same
canonical ERD model as the YAML parser, then runs the same relation linker
and colour cascade. ``datasource`` and ``generator`` blocks are skipped.
"""

import re
from typing import List, Optional

from cryml.ir.diagram import DiagramMetadata
from cryml.ir.erd_ir import ERDDiagram, Enum, EnumValue, Field, Index, Model, UniqueConstraint
from cryml.ir.errors import DiagramParseError
from cryml.parsers.erd_parser import finalize_erd


MODEL_RE = re.compile(r"^model\s+(\w+)\s*\{")
ENUM_RE = re.compile(r"^enum\s+(\w+)\s*\{")
SKIPPED_BLOCK_RE = re.compile(r"^(datasource|generator|type|view)\s+\w+\s*\{")
FIELD_RE = re.compile(r"^(\w+)\s+([\w\[\]!?]+)(.*)$")
ENUM_VALUE_RE = re.compile(r"^(\w+)\b")
ATTRIBUTE_RE = re.compile(r"(?<![@\w])@(\w+(?:\.\w+)?)")
BLOCK_ATTRIBUTE_RE = re.compile(r"^@@(\w+)\((.*)\)\s*$")

RELATION_NAME_RE = re.compile(r'^\s*(?:name:\s*)?"([^"]+)"')
RELATION_FIELDS_RE = re.compile(r"fields:\s*\[([\w\s,]+)\]")
RELATION_REFERENCES_RE = re.compile(r"references:\s*\[([\w\s,]+)\]")
REFERENTIAL_ACTION_RE = re.compile(r"(onDelete|onUpdate):\s*(\w+)")
COLUMN_LIST_RE = re.compile(r"\[([^\]]*)\]")
NAMED_ARG_RE = re.compile(r'(?:name|map):\s*"([^"]+)"')


def _strip_comment(line: str) -> str:
    return line.split("//", 1)[0].strip()


def _split_names(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _call_args(rest: str, attribute: str) -> Optional[str]:
    """Return the text between the balanced parentheses of ``@attribute(...)``."""
    start = rest.find(f"@{attribute}(")
    if start == -1:
        return None
    i = start + len(attribute) + 2
    depth = 1
    for j in range(i, len(rest)):
        if rest[j] == "(":
            depth += 1
        elif rest[j] == ")":
            depth -= 1
            if depth == 0:
                return rest[i:j]
    return rest[i:]


def parse_prisma_field(line: str) -> Optional[Field]:
    """Parse one field line; returns None for lines that are not fields."""
    match = FIELD_RE.match(line)
    if not match:
        return None

    name, raw_type, rest = match.groups()
    field = Field(
        name=name,
        type=raw_type.replace("?", "").replace("[]", ""),
        is_required="?" not in raw_type,
        is_list="[]" in raw_type,
    )

    for attr_name in ATTRIBUTE_RE.findall(rest):
        if attr_name == "id":
            field.is_id = True
        elif attr_name == "unique":
            field.is_unique = True
        elif attr_name == "default":
            field.has_default = True
            field.default_value = _call_args(rest, "default") or None
        elif attr_name == "updatedAt":
            field.type = "DateTime"
        elif attr_name.startswith("db."):
            field.db_type = attr_name[len("db."):]
        elif attr_name == "relation":
            field.relation_to_model = field.type

    relation_args = _call_args(rest, "relation")
    if relation_args is not None:
        name_match = RELATION_NAME_RE.match(relation_args)
        if name_match:
            field.relation_name = name_match.group(1)
        if RELATION_FIELDS_RE.search(relation_args):
            field.is_foreign_key = True
            references = RELATION_REFERENCES_RE.search(relation_args)
            if references:
                field.references_field = _split_names(references.group(1))[0]
        for action, value in REFERENTIAL_ACTION_RE.findall(relation_args):
            if action == "onDelete":
                field.on_delete = value
            else:
                field.on_update = value

    return field


def _apply_block_attribute(model: Model, line: str) -> None:
    match = BLOCK_ATTRIBUTE_RE.match(line)
    if not match:
        return
    attr_name, args = match.groups()
    columns_match = COLUMN_LIST_RE.search(args)
    columns = _split_names(columns_match.group(1)) if columns_match else []
    named = NAMED_ARG_RE.search(args)

    if attr_name == "index":
        name = named.group(1) if named else f"{model.name}_{'_'.join(columns)}_idx"
        model.indexes.append(Index(name=name, columns=columns))
    elif attr_name == "unique":
        name = named.group(1) if named else f"{model.name}_{'_'.join(columns)}_key"
        model.unique_constraints.append(UniqueConstraint(name=name, columns=columns))
    elif attr_name == "id":
        for column in columns:
            if column in model.fields:
                model.fields[column].is_id = True
    elif attr_name == "map":
        quoted = re.search(r'"([^"]+)"', args)
        if quoted:
            model.table_name = quoted.group(1)
    elif attr_name == "schema":
        quoted = re.search(r'"([^"]+)"', args)
        if quoted:
            model.schema_name = quoted.group(1)


def parse_prisma_schema(text: str, name: str = "Prisma Schema") -> ERDDiagram:
    """Parse ``.prisma`` text into an ``ERDDiagram``."""
    if not isinstance(text, str):
        raise DiagramParseError("Prisma schema must be text")

    diagram = ERDDiagram(metadata=DiagramMetadata(name=name))
    current_model: Optional[Model] = None
    current_enum: Optional[Enum] = None
    skipping = False

    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw_line)
        if not line:
            continue

        if line == "}":
            if current_model is not None:
                diagram.models.append(current_model)
            elif current_enum is not None:
                diagram.enums.append(current_enum)
            current_model, current_enum, skipping = None, None, False
            continue

        if skipping:
            continue

        if SKIPPED_BLOCK_RE.match(line):
            skipping = True
            continue

        model_match = MODEL_RE.match(line)
        if model_match:
            current_model = Model(name=model_match.group(1))
            continue

        enum_match = ENUM_RE.match(line)
        if enum_match:
            current_enum = Enum(name=enum_match.group(1))
            continue

        if current_enum is not None:
            value_match = ENUM_VALUE_RE.match(line)
            if value_match:
                current_enum.values.append(EnumValue(name=value_match.group(1)))
            continue

        if current_model is not None:
            if line.startswith("@@"):
                _apply_block_attribute(current_model, line)
                continue
            field = parse_prisma_field(line)
            if field is not None:
                current_model.fields[field.name] = field
            continue

    if current_model is not None or current_enum is not None:
        unclosed = current_model.name if current_model is not None else current_enum.name
        raise DiagramParseError(f"Unclosed block: {unclosed}", f"line {line_no}")

    return finalize_erd(diagram)
