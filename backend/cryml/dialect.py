"""
cryml dialect shapes.

The dialect accumulated several spellings for the same concept:

- ERD documents come in a snake_case shape (``field_type``, ``primary_key``,
  ``foreign_key``) and a camelCase shape (``type``, ``primaryKey``,
  ``foreignKey``).
- Flow and sequence collections are either YAML lists of entries carrying an
  ``id`` or mappings keyed by id.
- Flow edges name their endpoints ``source``/``target`` or ``from``/``to``.

Validators and parsers both go through these helpers so that every phase
reads a document the same way.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple


# ------------------------------------------------------------------ #
# ERD key aliases: canonical name -> (snake_case, camelCase)
# ------------------------------------------------------------------ #

FIELD_KEYS: Dict[str, Tuple[str, str]] = {
    "field_type": ("field_type", "type"),
    "db_type": ("db_type", "dbType"),
    "constraints": ("constraints", "constraints"),
    "attributes": ("attributes", "attributes"),
}

CONSTRAINT_KEYS: Dict[str, Tuple[str, str]] = {
    "not_null": ("not_null", "notNull"),
}

ATTRIBUTE_KEYS: Dict[str, Tuple[str, str]] = {
    "primary_key": ("primary_key", "primaryKey"),
    "unique": ("unique", "unique"),
    "default_value": ("default_value", "default"),
    "foreign_key": ("foreign_key", "foreignKey"),
    "virtual": ("virtual", "virtual"),
    "referenced_by": ("referenced_by", "referencedBy"),
    "is_list": ("is_list", "list"),
    "map": ("map", "map"),
    "relation_name": ("relation_name", "relationName"),
}

BOOLEAN_ATTRIBUTES = ("primary_key", "unique", "virtual", "is_list")

FOREIGN_KEY_KEYS: Dict[str, Tuple[str, str]] = {
    "table": ("table", "table"),
    "column": ("column", "column"),
    "on_delete": ("on_delete", "onDelete"),
    "on_update": ("on_update", "onUpdate"),
}

MODEL_KEYS: Dict[str, Tuple[str, str]] = {
    "table_name": ("table_name", "tableName"),
    "schema_name": ("schema_name", "schema"),
    "indexes": ("indexes", "indexes"),
    "unique_constraints": ("unique_constraints", "uniqueConstraints"),
}

INDEX_KEYS: Dict[str, Tuple[str, str]] = {
    "index_name": ("index_name", "name"),
}

UNIQUE_CONSTRAINT_KEYS: Dict[str, Tuple[str, str]] = {
    "constraint_name": ("constraint_name", "name"),
}

ENUM_VALUE_KEYS: Dict[str, Tuple[str, str]] = {
    "value_name": ("value_name", "name"),
}


def lookup(mapping: Any, canonical: str, table: Dict[str, Tuple[str, str]]) -> Tuple[str, Any]:
    """Return ``(key, value)`` for the first spelling of *canonical* present.

    A key holding ``None`` counts as absent. When nothing is found the
    snake_case key is returned with a ``None`` value so callers can still
    build a path.
    """
    aliases = table[canonical]
    if isinstance(mapping, dict):
        for key in aliases:
            if mapping.get(key) is not None:
                return key, mapping[key]
    return aliases[0], None


def is_camel_case_field(raw_field: Any) -> bool:
    """Shape sniffing: ``field_type`` marks snake_case, a bare ``type`` marks camelCase."""
    if not isinstance(raw_field, dict):
        return False
    return "field_type" not in raw_field and "type" in raw_field


def field_attributes(raw_field: Any) -> Dict[str, Any]:
    _, attributes = lookup(raw_field, "attributes", FIELD_KEYS)
    return attributes if isinstance(attributes, dict) else {}


def field_attribute(raw_field: Any, canonical: str) -> Any:
    return lookup(field_attributes(raw_field), canonical, ATTRIBUTE_KEYS)[1]


def field_type(raw_field: Any) -> Any:
    return lookup(raw_field, "field_type", FIELD_KEYS)[1]


def foreign_key(raw_field: Any) -> Optional[Dict[str, Any]]:
    fk = field_attribute(raw_field, "foreign_key")
    return fk if isinstance(fk, dict) else None


def model_fields(raw_model: Any) -> Dict[str, Any]:
    if isinstance(raw_model, dict) and isinstance(raw_model.get("fields"), dict):
        return raw_model["fields"]
    return {}


def document_models(doc: Any) -> Dict[str, Any]:
    if isinstance(doc, dict) and isinstance(doc.get("models"), dict):
        return doc["models"]
    return {}


# ------------------------------------------------------------------ #
# Collections (list-of-entries or mapping keyed by id)
# ------------------------------------------------------------------ #

@dataclass
class Entry:
    path: str
    id: Any
    raw: Any
    keyed: bool = False         # id comes from the mapping key


def is_collection(value: Any) -> bool:
    return isinstance(value, (list, dict))


def iter_entries(collection: Any, name: str) -> Iterator[Entry]:
    if isinstance(collection, list):
        for i, raw in enumerate(collection):
            entry_id = raw.get("id") if isinstance(raw, dict) else None
            yield Entry(path=f"{name}[{i}]", id=entry_id, raw=raw)
    elif isinstance(collection, dict):
        for key, raw in collection.items():
            yield Entry(path=f"{name}.{key}", id=str(key), raw=raw, keyed=True)


def collect_ids(collection: Any, name: str) -> set:
    return {
        entry.id
        for entry in iter_entries(collection, name)
        if isinstance(entry.raw, dict) and isinstance(entry.id, str) and entry.id
    }


def edge_endpoint(raw_edge: Any, end: str) -> Tuple[str, Any]:
    """Return ``(key, value)`` for an edge's ``source``/``target`` (or ``from``/``to``)."""
    alias = {"source": "from", "target": "to"}[end]
    if isinstance(raw_edge, dict):
        if raw_edge.get(end) is not None:
            return end, raw_edge[end]
        if raw_edge.get(alias) is not None:
            return alias, raw_edge[alias]
    return end, None


# ------------------------------------------------------------------ #
# Primitive checks (YAML is untyped at the boundary)
# ------------------------------------------------------------------ #

def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_label(value: Any) -> bool:
    """Labels may be any YAML scalar; a bare ``yes`` loads as a boolean."""
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float, bool))


def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
