"""
ERD parser.

Two historical field shapes are accepted and decoded into the same canonical
``Field``:

    snake_case                      camelCase
    ----------                      ---------
    field_type: String              type: String
    constraints: {not_null: true}   constraints: {notNull: true}
    attributes:                     attributes:
      primary_key: true               primaryKey: true
      foreign_key:                    foreignKey:
        table: User                     table: User
        column: id                      column: id
        on_delete: CASCADE              onDelete: CASCADE

The shape is sniffed per field: ``field_type`` means snake_case, otherwise a
``type`` key means camelCase. Only the type key follows the sniffed shape;
every other key is read in either spelling.
"""

from typing import Any, Dict, List

from cryml import config
from cryml.dialect import (
    ATTRIBUTE_KEYS,
    CONSTRAINT_KEYS,
    ENUM_VALUE_KEYS,
    FIELD_KEYS,
    FOREIGN_KEY_KEYS,
    INDEX_KEYS,
    MODEL_KEYS,
    UNIQUE_CONSTRAINT_KEYS,
    as_text,
    is_camel_case_field,
    lookup,
)
from cryml.ir.diagram import DiagramKind
from cryml.ir.erd_ir import ERDDiagram, Enum, EnumValue, Field, Index, Model, UniqueConstraint
from cryml.ir.errors import DiagramParseError
from cryml.parsers.relation_linker import link_relations
from cryml.parsers.yaml_loader import (
    expect_kind,
    load_document,
    optional_text,
    parse_metadata,
    require_section,
)
from cryml.visual.grouping import ENUM_FALLBACK, default_color, resolve_model_style, rules_from_document


# ------------------------------------------------------------------ #
# Field decoders
# ------------------------------------------------------------------ #

def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _build_field(name: str, raw: Dict[str, Any], type_key: str) -> Field:
    """Fill a ``Field`` from the shape-neutral keys.

    Constraint, attribute and foreign key entries accept either spelling, the
    same way the validators read them, so a field that mixes the two shapes
    keeps its primary key and relations.
    """
    constraints = _mapping(lookup(raw, "constraints", FIELD_KEYS)[1])
    attrs = _mapping(lookup(raw, "attributes", FIELD_KEYS)[1])

    def attr(canonical: str) -> Any:
        return lookup(attrs, canonical, ATTRIBUTE_KEYS)[1]

    default_value = attr("default_value")
    field = Field(
        name=name,
        type=as_text(raw.get(type_key)) or "",
        is_id=attr("primary_key") is True,
        is_unique=attr("unique") is True,
        is_required=lookup(constraints, "not_null", CONSTRAINT_KEYS)[1] is True,
        is_list=attr("is_list") is True,
        has_default=default_value is not None,
        is_virtual=attr("virtual") is True,
        db_type=optional_text(lookup(raw, "db_type", FIELD_KEYS)[1]),
        default_value=optional_text(default_value),
        relation_name=optional_text(attr("relation_name")),
    )

    fk = attr("foreign_key")
    if isinstance(fk, dict):
        field.is_foreign_key = True
        field.relation_to_model = optional_text(lookup(fk, "table", FOREIGN_KEY_KEYS)[1])
        field.references_field = optional_text(lookup(fk, "column", FOREIGN_KEY_KEYS)[1])
        field.on_delete = optional_text(lookup(fk, "on_delete", FOREIGN_KEY_KEYS)[1])
        field.on_update = optional_text(lookup(fk, "on_update", FOREIGN_KEY_KEYS)[1])

    if field.is_virtual:
        field.relation_to_model = field.type

    return field


def decode_snake_case_field(name: str, raw: Dict[str, Any]) -> Field:
    return _build_field(name, raw, "field_type")


def decode_camel_case_field(name: str, raw: Dict[str, Any]) -> Field:
    return _build_field(name, raw, "type")


def decode_field(name: str, raw: Any, path: str) -> Field:
    if not isinstance(raw, dict):
        raise DiagramParseError(f"Field {name} must be a mapping", path)
    if is_camel_case_field(raw):
        return decode_camel_case_field(name, raw)
    return decode_snake_case_field(name, raw)


# ------------------------------------------------------------------ #
# Models & enums
# ------------------------------------------------------------------ #

def _column_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [as_text(c) for c in value if c is not None]


def _entry_list(value: Any, path: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DiagramParseError(f"{path} must be a list", path)
    return value


def decode_model(name: str, raw: Any) -> Model:
    path = f"models.{name}"
    if not isinstance(raw, dict):
        raise DiagramParseError(f"Model {name} must be a mapping", path)
    if not isinstance(raw.get("fields"), dict):
        raise DiagramParseError(f"Model {name} must have a fields mapping", f"{path}.fields")

    model = Model(
        name=name,
        color=optional_text(raw.get("color")),
        group=optional_text(raw.get("group")),
        table_name=optional_text(lookup(raw, "table_name", MODEL_KEYS)[1]),
        schema_name=optional_text(lookup(raw, "schema_name", MODEL_KEYS)[1]),
    )

    for field_name, raw_field in raw["fields"].items():
        field_name = str(field_name)
        model.fields[field_name] = decode_field(field_name, raw_field, f"{path}.fields.{field_name}")

    index_key, raw_indexes = lookup(raw, "indexes", MODEL_KEYS)
    for i, raw_index in enumerate(_entry_list(raw_indexes, f"{path}.{index_key}")):
        if not isinstance(raw_index, dict):
            continue
        model.indexes.append(Index(
            name=as_text(lookup(raw_index, "index_name", INDEX_KEYS)[1]) or f"{name}_idx_{i}",
            columns=_column_list(raw_index.get("columns")),
            unique=raw_index.get("unique") is True,
        ))

    uc_key, raw_constraints = lookup(raw, "unique_constraints", MODEL_KEYS)
    for i, raw_constraint in enumerate(_entry_list(raw_constraints, f"{path}.{uc_key}")):
        if not isinstance(raw_constraint, dict):
            continue
        model.unique_constraints.append(UniqueConstraint(
            name=as_text(lookup(raw_constraint, "constraint_name", UNIQUE_CONSTRAINT_KEYS)[1]) or f"{name}_key_{i}",
            columns=_column_list(raw_constraint.get("columns")),
        ))

    return model


def decode_enum(name: str, raw: Any) -> Enum:
    if not isinstance(raw, dict):
        raise DiagramParseError(f"Enum {name} must be a mapping", f"enums.{name}")

    values = []
    for raw_value in _entry_list(raw.get("values"), f"enums.{name}.values"):
        if isinstance(raw_value, dict):
            value_name = lookup(raw_value, "value_name", ENUM_VALUE_KEYS)[1]
            if value_name is not None:
                values.append(EnumValue(name=as_text(value_name), description=optional_text(raw_value.get("description"))))
        elif raw_value is not None:
            values.append(EnumValue(name=as_text(raw_value)))

    return Enum(
        name=name,
        values=values,
        color=optional_text(raw.get("color")),
        group=optional_text(raw.get("group")),
    )


# ------------------------------------------------------------------ #
# Post-processing shared with the Prisma parser
# ------------------------------------------------------------------ #

def resolve_field_kinds(diagram: ERDDiagram) -> None:
    """Mark enum-typed fields and point model-typed fields at their model."""
    model_names = set(diagram.model_names())
    enum_names = set(diagram.enum_names())

    for model in diagram.models:
        for field in model.fields.values():
            if field.type in enum_names:
                field.is_enum = True
            elif field.type in model_names and field.relation_to_model is None:
                field.relation_to_model = field.type


def assign_styles(diagram: ERDDiagram, colors: Any = None) -> None:
    """Run the colour/group cascade over models, then colour enums by first use."""
    document_rules = rules_from_document(colors)
    fallback = default_color(colors)

    for model in diagram.models:
        model.color, model.group = resolve_model_style(
            model.name,
            document_rules,
            own_color=model.color,
            own_group=model.group,
            fallback_color=fallback,
        )

    for enum in diagram.enums:
        if enum.color and enum.group:
            continue
        user = next((m for m in diagram.models if any(f.type == enum.name for f in m.fields.values())), None)
        color, group = (user.color, user.group) if user is not None else ENUM_FALLBACK
        enum.color = enum.color or color
        enum.group = enum.group or group


def finalize_erd(diagram: ERDDiagram, colors: Any = None) -> ERDDiagram:
    resolve_field_kinds(diagram)
    linked = link_relations(diagram.models)
    assign_styles(diagram, colors)
    if config.DEBUG:
        print(
            f"[ERDParser] {diagram.metadata.name}: {len(diagram.models)} models, "
            f"{len(diagram.enums)} enums, {linked} linked relation pairs"
        )
    return diagram


# ------------------------------------------------------------------ #
# Entry points
# ------------------------------------------------------------------ #

def build_erd(doc: Dict[str, Any]) -> ERDDiagram:
    """Build an ``ERDDiagram`` from an already-loaded document."""
    expect_kind(doc, DiagramKind.ERD)
    metadata = parse_metadata(doc)

    models = require_section(doc, "models")
    if not isinstance(models, dict):
        raise DiagramParseError("models must be a mapping", "models")

    enums = doc.get("enums") or {}
    if not isinstance(enums, dict):
        raise DiagramParseError("enums must be a mapping", "enums")

    diagram = ERDDiagram(
        metadata=metadata,
        models=[decode_model(str(name), raw) for name, raw in models.items()],
        enums=[decode_enum(str(name), raw) for name, raw in enums.items()],
    )
    return finalize_erd(diagram, doc.get("colors"))


def parse_erd(yaml_text: str) -> ERDDiagram:
    return build_erd(load_document(yaml_text))
