"""
Structure phase - required fields, primitive types and allowed values.

Never looks across entities (that is the reference phase) and never stops at
the first problem: every structural violation in the document is collected.
"""

import re
from typing import Any, Dict, List

from cryml.dialect import (
    ATTRIBUTE_KEYS,
    BOOLEAN_ATTRIBUTES,
    CONSTRAINT_KEYS,
    ENUM_VALUE_KEYS,
    FIELD_KEYS,
    FOREIGN_KEY_KEYS,
    INDEX_KEYS,
    MODEL_KEYS,
    UNIQUE_CONSTRAINT_KEYS,
    edge_endpoint,
    is_collection,
    is_label,
    is_non_empty_string,
    is_number,
    iter_entries,
    lookup,
)
from cryml.ir.diagram import DiagramKind
from cryml.ir.flow_ir import FLOW_NODE_TYPES
from cryml.ir.sequence_ir import (
    BLOCK_TYPES,
    CONDITIONAL_BLOCK_TYPES,
    MESSAGE_TYPES,
    PARTICIPANT_TYPES,
)
from cryml.validation.catalog import create_error
from cryml.validation.issues import ValidationIssue
from cryml.validation.phase import ValidationPhase


def _shape_error(value: Any, path: str, details: str) -> ValidationIssue:
    """MISSING_FIELD when the value is absent, INVALID_TYPE otherwise."""
    code = "MISSING_FIELD" if value is None else "INVALID_TYPE"
    return create_error(code, path, details)


def _choice_error(value: Any, path: str, choices) -> ValidationIssue:
    code = "MISSING_FIELD" if value is None else "INVALID_VALUE"
    return create_error(code, path, f"must be one of: {', '.join(choices)}")


class StructurePhase(ValidationPhase):
    name = "structure"

    def run(self, doc: Dict[str, Any], kind: DiagramKind) -> List[ValidationIssue]:
        errors = self._check_metadata(doc)
        errors.extend(super().run(doc, kind))
        return errors

    # ------------------------------------------------------------------ #
    # Common
    # ------------------------------------------------------------------ #

    def _check_metadata(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        metadata = doc.get("metadata")
        if metadata is None:
            return [create_error("MISSING_METADATA", "metadata")]
        if not isinstance(metadata, dict):
            return [create_error("INVALID_TYPE", "metadata", "metadata must be a mapping")]
        if not is_label(metadata.get("name")):
            return [create_error("MISSING_METADATA_NAME", "metadata.name")]
        return []

    # ------------------------------------------------------------------ #
    # ERD
    # ------------------------------------------------------------------ #

    def validate_erd(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        models = doc.get("models")
        if not isinstance(models, dict):
            errors.append(_shape_error(models, "models", 'ERD diagrams require a "models" mapping'))
            return errors

        for model_name, raw_model in models.items():
            errors.extend(self._check_model(f"models.{model_name}", raw_model))

        errors.extend(self._check_enums(doc.get("enums")))
        errors.extend(self._check_colors(doc.get("colors")))
        return errors

    def _check_model(self, model_path: str, raw_model: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        if not isinstance(raw_model, dict):
            errors.append(_shape_error(raw_model, model_path, "Model must be a mapping"))
            return errors

        fields = raw_model.get("fields")
        if not isinstance(fields, dict):
            errors.append(_shape_error(fields, f"{model_path}.fields", 'Model must have a "fields" mapping'))
            return errors

        for field_name, raw_field in fields.items():
            errors.extend(self._check_field(f"{model_path}.fields.{field_name}", raw_field))

        index_key, indexes = lookup(raw_model, "indexes", MODEL_KEYS)
        if indexes is not None:
            errors.extend(self._check_column_sets(
                f"{model_path}.{index_key}", indexes, INDEX_KEYS, "index_name", "Index", check_unique=True,
            ))

        uc_key, unique_constraints = lookup(raw_model, "unique_constraints", MODEL_KEYS)
        if unique_constraints is not None:
            errors.extend(self._check_column_sets(
                f"{model_path}.{uc_key}", unique_constraints, UNIQUE_CONSTRAINT_KEYS,
                "constraint_name", "Unique constraint",
            ))

        return errors

    def _check_field(self, field_path: str, raw_field: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        if not isinstance(raw_field, dict):
            return [_shape_error(raw_field, field_path, "Field must be a mapping")]

        type_key, type_value = lookup(raw_field, "field_type", FIELD_KEYS)
        if not is_non_empty_string(type_value):
            errors.append(_shape_error(type_value, f"{field_path}.{type_key}", 'Field must have a "field_type" string'))

        _, constraints = lookup(raw_field, "constraints", FIELD_KEYS)
        if constraints is not None:
            if not isinstance(constraints, dict):
                errors.append(create_error("INVALID_TYPE", f"{field_path}.constraints", "constraints must be a mapping"))
            else:
                nn_key, not_null = lookup(constraints, "not_null", CONSTRAINT_KEYS)
                if not_null is not None and not isinstance(not_null, bool):
                    errors.append(create_error(
                        "INVALID_TYPE", f"{field_path}.constraints.{nn_key}", f"{nn_key} must be a boolean",
                    ))

        _, attributes = lookup(raw_field, "attributes", FIELD_KEYS)
        if attributes is not None:
            if not isinstance(attributes, dict):
                errors.append(create_error("INVALID_TYPE", f"{field_path}.attributes", "attributes must be a mapping"))
            else:
                errors.extend(self._check_attributes(f"{field_path}.attributes", attributes))

        return errors

    def _check_attributes(self, attrs_path: str, attributes: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        fk_key, fk = lookup(attributes, "foreign_key", ATTRIBUTE_KEYS)
        if fk is not None:
            fk_path = f"{attrs_path}.{fk_key}"
            if not isinstance(fk, dict):
                errors.append(create_error("INVALID_TYPE", fk_path, f"{fk_key} must be a mapping"))
            else:
                for part in ("table", "column"):
                    _, value = lookup(fk, part, FOREIGN_KEY_KEYS)
                    if not is_non_empty_string(value):
                        errors.append(_shape_error(value, f"{fk_path}.{part}", f'{fk_key} must have a "{part}" string'))

        for canonical in BOOLEAN_ATTRIBUTES:
            key, value = lookup(attributes, canonical, ATTRIBUTE_KEYS)
            if value is not None and not isinstance(value, bool):
                errors.append(create_error("INVALID_TYPE", f"{attrs_path}.{key}", f"{key} must be a boolean"))

        rn_key, relation_name = lookup(attributes, "relation_name", ATTRIBUTE_KEYS)
        if relation_name is not None and not is_non_empty_string(relation_name):
            errors.append(create_error("INVALID_TYPE", f"{attrs_path}.{rn_key}", f"{rn_key} must be a string"))

        return errors

    def _check_column_sets(
        self,
        base_path: str,
        entries: Any,
        name_keys,
        name_field: str,
        what: str,
        check_unique: bool = False,
    ) -> List[ValidationIssue]:
        """Shared check for indexes and unique constraints: name + columns list."""
        if not isinstance(entries, list):
            return [create_error("INVALID_TYPE", base_path, f"{base_path.rsplit('.', 1)[-1]} must be a list")]

        errors: List[ValidationIssue] = []
        for i, entry in enumerate(entries):
            entry_path = f"{base_path}[{i}]"
            if not isinstance(entry, dict):
                errors.append(_shape_error(entry, entry_path, f"{what} must be a mapping"))
                continue

            name_key, name = lookup(entry, name_field, name_keys)
            if not is_non_empty_string(name):
                errors.append(_shape_error(name, f"{entry_path}.{name_key}", f'{what} must have a "{name_field}" string'))

            columns = entry.get("columns")
            if not isinstance(columns, list):
                errors.append(_shape_error(columns, f"{entry_path}.columns", f'{what} must have a "columns" list'))

            if check_unique and entry.get("unique") is not None and not isinstance(entry["unique"], bool):
                errors.append(create_error("INVALID_TYPE", f"{entry_path}.unique", f"{what} unique must be a boolean"))
        return errors

    def _check_enums(self, enums: Any) -> List[ValidationIssue]:
        if enums is None:
            return []
        if not isinstance(enums, dict):
            return [create_error("INVALID_TYPE", "enums", "enums must be a mapping")]

        errors: List[ValidationIssue] = []
        for enum_name, raw_enum in enums.items():
            enum_path = f"enums.{enum_name}"
            if not isinstance(raw_enum, dict):
                errors.append(_shape_error(raw_enum, enum_path, "Enum must be a mapping"))
                continue

            values = raw_enum.get("values")
            if not isinstance(values, list):
                errors.append(_shape_error(values, f"{enum_path}.values", 'Enum must have a "values" list'))
                continue

            for i, value in enumerate(values):
                value_path = f"{enum_path}.values[{i}]"
                if not isinstance(value, dict):
                    errors.append(_shape_error(value, value_path, "Enum value must be a mapping"))
                    continue
                key, value_name = lookup(value, "value_name", ENUM_VALUE_KEYS)
                if not is_non_empty_string(value_name):
                    errors.append(_shape_error(value_name, f"{value_path}.{key}", 'Enum value must have a "value_name" string'))
        return errors

    def _check_colors(self, colors: Any) -> List[ValidationIssue]:
        if colors is None:
            return []
        if not isinstance(colors, dict):
            return [create_error("INVALID_TYPE", "colors", "colors must be a mapping")]

        rules = colors.get("rules")
        if rules is None:
            return []
        if not isinstance(rules, list):
            return [create_error("INVALID_TYPE", "colors.rules", "colors.rules must be a list")]

        errors: List[ValidationIssue] = []
        for i, rule in enumerate(rules):
            rule_path = f"colors.rules[{i}]"
            if not isinstance(rule, dict):
                errors.append(_shape_error(rule, rule_path, "Color rule must be a mapping"))
                continue
            pattern = rule.get("pattern")
            if not is_non_empty_string(pattern):
                errors.append(_shape_error(pattern, f"{rule_path}.pattern", 'Color rule must have a "pattern" string'))
                continue
            try:
                re.compile(pattern)
            except re.error as exc:
                errors.append(create_error("INVALID_COLOR_RULE", f"{rule_path}.pattern", f"{pattern} ({exc})"))
        return errors

    # ------------------------------------------------------------------ #
    # Flow
    # ------------------------------------------------------------------ #

    def validate_flow(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        nodes = doc.get("nodes")
        if not is_collection(nodes):
            errors.append(_shape_error(nodes, "nodes", 'Flow diagrams require a "nodes" collection'))
        else:
            errors.extend(self._check_flow_nodes(nodes))

        edges = doc.get("edges")
        if edges is not None:
            if not is_collection(edges):
                errors.append(create_error("INVALID_TYPE", "edges", "edges must be a list"))
            else:
                errors.extend(self._check_flow_edges(edges))

        groups = doc.get("groups")
        if groups is not None:
            if not is_collection(groups):
                errors.append(create_error("INVALID_TYPE", "groups", "groups must be a list or mapping"))
            else:
                for entry in iter_entries(groups, "groups"):
                    if not isinstance(entry.raw, dict):
                        errors.append(_shape_error(entry.raw, entry.path, "Group must be a mapping"))
                        continue
                    members = entry.raw.get("nodes")
                    if members is not None and not isinstance(members, list):
                        errors.append(create_error("INVALID_TYPE", f"{entry.path}.nodes", "Group nodes must be a list"))

        return errors

    def _check_flow_nodes(self, nodes: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        seen_ids = set()
        start_count = 0

        for entry in iter_entries(nodes, "nodes"):
            node = entry.raw
            if not isinstance(node, dict):
                errors.append(_shape_error(node, entry.path, "Node must be a mapping"))
                continue

            if not entry.keyed:
                if not is_non_empty_string(entry.id):
                    errors.append(_shape_error(entry.id, f"{entry.path}.id", 'Node must have an "id" string'))
                elif entry.id in seen_ids:
                    errors.append(create_error("DUPLICATE_NODE_ID", f"{entry.path}.id", entry.id))
                else:
                    seen_ids.add(entry.id)

            node_type = node.get("type")
            if node_type not in FLOW_NODE_TYPES:
                errors.append(_choice_error(node_type, f"{entry.path}.type", FLOW_NODE_TYPES))
            elif node_type == "start":
                start_count += 1

            if not is_label(node.get("label")):
                errors.append(_shape_error(node.get("label"), f"{entry.path}.label", 'Node must have a "label"'))

            position = node.get("position")
            if position is not None:
                if not isinstance(position, dict):
                    errors.append(create_error("INVALID_TYPE", f"{entry.path}.position", "position must be a mapping"))
                else:
                    for axis in ("x", "y"):
                        if not is_number(position.get(axis)):
                            errors.append(_shape_error(
                                position.get(axis), f"{entry.path}.position.{axis}", f"position.{axis} must be a number",
                            ))

        if start_count == 0:
            errors.append(create_error("NO_START_NODE", "nodes", "Flow diagram must have at least one node with type: start"))
        elif start_count > 1:
            errors.append(create_error("MULTIPLE_START_NODES", "nodes", f"found {start_count} start nodes"))

        return errors

    def _check_flow_edges(self, edges: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        seen_ids = set()

        for entry in iter_entries(edges, "edges"):
            edge = entry.raw
            if not isinstance(edge, dict):
                errors.append(_shape_error(edge, entry.path, "Edge must be a mapping"))
                continue

            if not entry.keyed and entry.id is not None:
                if not is_non_empty_string(entry.id):
                    errors.append(create_error("INVALID_TYPE", f"{entry.path}.id", "Edge id must be a string"))
                elif entry.id in seen_ids:
                    errors.append(create_error("DUPLICATE_EDGE_ID", f"{entry.path}.id", entry.id))
                else:
                    seen_ids.add(entry.id)

            for end in ("source", "target"):
                key, value = edge_endpoint(edge, end)
                if not is_non_empty_string(value):
                    errors.append(_shape_error(value, f"{entry.path}.{key}", f'Edge must have a "{end}" string'))

        return errors

    # ------------------------------------------------------------------ #
    # Sequence
    # ------------------------------------------------------------------ #

    def validate_sequence(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        participants = doc.get("participants")
        if not is_collection(participants):
            errors.append(_shape_error(participants, "participants", 'Sequence diagrams require a "participants" collection'))
        else:
            errors.extend(self._check_participants(participants))

        messages = doc.get("messages")
        if not is_collection(messages):
            errors.append(_shape_error(messages, "messages", 'Sequence diagrams require a "messages" collection'))
        else:
            errors.extend(self._check_messages(messages))

        blocks = doc.get("blocks")
        if blocks is not None:
            if not is_collection(blocks):
                errors.append(create_error("INVALID_TYPE", "blocks", "blocks must be a list"))
            else:
                errors.extend(self._check_blocks(blocks))

        notes = doc.get("notes")
        if notes is not None:
            if not is_collection(notes):
                errors.append(create_error("INVALID_TYPE", "notes", "notes must be a list"))
            else:
                errors.extend(self._check_notes(notes))

        return errors

    def _check_participants(self, participants: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        seen_ids = set()

        for entry in iter_entries(participants, "participants"):
            participant = entry.raw
            if not isinstance(participant, dict):
                errors.append(_shape_error(participant, entry.path, "Participant must be a mapping"))
                continue

            if not entry.keyed:
                if not is_non_empty_string(entry.id):
                    errors.append(_shape_error(entry.id, f"{entry.path}.id", 'Participant must have an "id" string'))
                elif entry.id in seen_ids:
                    errors.append(create_error("DUPLICATE_PARTICIPANT_ID", f"{entry.path}.id", entry.id))
                else:
                    seen_ids.add(entry.id)

            if participant.get("type") not in PARTICIPANT_TYPES:
                errors.append(_choice_error(participant.get("type"), f"{entry.path}.type", PARTICIPANT_TYPES))

            if not is_label(participant.get("label")):
                errors.append(_shape_error(participant.get("label"), f"{entry.path}.label", 'Participant must have a "label"'))

            order = participant.get("order")
            if order is not None and not is_number(order):
                errors.append(create_error("INVALID_TYPE", f"{entry.path}.order", "order must be a number"))

        return errors

    def _check_messages(self, messages: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        seen_ids = set()

        for entry in iter_entries(messages, "messages"):
            message = entry.raw
            if not isinstance(message, dict):
                errors.append(_shape_error(message, entry.path, "Message must be a mapping"))
                continue

            if not entry.keyed:
                if not is_non_empty_string(entry.id):
                    errors.append(_shape_error(entry.id, f"{entry.path}.id", 'Message must have an "id" string'))
                elif entry.id in seen_ids:
                    errors.append(create_error("DUPLICATE_MESSAGE_ID", f"{entry.path}.id", entry.id))
                else:
                    seen_ids.add(entry.id)

            for end in ("from", "to"):
                if not is_non_empty_string(message.get(end)):
                    errors.append(_shape_error(message.get(end), f"{entry.path}.{end}", f'Message must have a "{end}" string'))

            if not is_label(message.get("label")):
                errors.append(_shape_error(message.get("label"), f"{entry.path}.label", 'Message must have a "label"'))

            if message.get("type") not in MESSAGE_TYPES:
                errors.append(_choice_error(message.get("type"), f"{entry.path}.type", MESSAGE_TYPES))

            return_message = message.get("return_message")
            if return_message is not None and not isinstance(return_message, str):
                errors.append(create_error("INVALID_TYPE", f"{entry.path}.return_message", "return_message must be a string"))

            if not is_number(message.get("sequence_order")):
                errors.append(_shape_error(
                    message.get("sequence_order"), f"{entry.path}.sequence_order", 'Message must have a "sequence_order" number',
                ))

        return errors

    def _check_blocks(self, blocks: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        for entry in iter_entries(blocks, "blocks"):
            block = entry.raw
            if not isinstance(block, dict):
                errors.append(_shape_error(block, entry.path, "Block must be a mapping"))
                continue

            block_type = block.get("type")
            if block_type not in BLOCK_TYPES:
                errors.append(_choice_error(block_type, f"{entry.path}.type", BLOCK_TYPES))
            elif block_type in CONDITIONAL_BLOCK_TYPES and not is_label(block.get("condition")):
                errors.append(create_error(
                    "MISSING_BLOCK_CONDITION", f"{entry.path}.condition", f'block type "{block_type}" requires a "condition"',
                ))

            if not isinstance(block.get("messages"), list):
                errors.append(_shape_error(block.get("messages"), f"{entry.path}.messages", 'Block must have a "messages" list'))

            parent = block.get("parent_block")
            if parent is not None and not is_non_empty_string(parent):
                errors.append(create_error("INVALID_TYPE", f"{entry.path}.parent_block", "parent_block must be a string"))

        return errors

    def _check_notes(self, notes: Any) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []

        for entry in iter_entries(notes, "notes"):
            note = entry.raw
            if not isinstance(note, dict):
                errors.append(_shape_error(note, entry.path, "Note must be a mapping"))
                continue

            if not is_label(note.get("text")):
                errors.append(_shape_error(note.get("text"), f"{entry.path}.text", 'Note must have a "text"'))

            attached = note.get("attached_to")
            if attached is not None and not isinstance(attached, (str, list)):
                errors.append(create_error("INVALID_TYPE", f"{entry.path}.attached_to", "attached_to must be a list of IDs"))

        return errors


def validate_structure(doc: Dict[str, Any], kind: DiagramKind) -> List[ValidationIssue]:
    return StructurePhase().run(doc, kind)
