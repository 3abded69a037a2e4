"""
Reference phase - every cross-entity identifier must resolve inside the
same document.

Precondition: the structure phase passed. The checks still tolerate odd
shapes and skip them instead of raising.
"""

from typing import Any, Dict, List, Set

from cryml.dialect import (
    ATTRIBUTE_KEYS,
    FOREIGN_KEY_KEYS,
    collect_ids,
    document_models,
    edge_endpoint,
    field_attributes,
    foreign_key,
    iter_entries,
    lookup,
    model_fields,
)
from cryml.validation.catalog import create_error
from cryml.validation.issues import ValidationIssue
from cryml.validation.phase import ValidationPhase


class ReferencePhase(ValidationPhase):
    name = "references"

    def validate_erd(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        models = document_models(doc)

        for model_name, raw_model in models.items():
            for field_name, raw_field in model_fields(raw_model).items():
                fk = foreign_key(raw_field)
                if fk is None:
                    continue

                fk_key, _ = lookup(field_attributes(raw_field), "foreign_key", ATTRIBUTE_KEYS)
                fk_path = f"models.{model_name}.fields.{field_name}.attributes.{fk_key}"
                _, table = lookup(fk, "table", FOREIGN_KEY_KEYS)
                _, column = lookup(fk, "column", FOREIGN_KEY_KEYS)

                if table not in models:
                    errors.append(create_error(
                        "FK_TABLE_NOT_FOUND",
                        f"{fk_path}.table",
                        f'"{table}" (referenced by {model_name}.{field_name})',
                    ))
                    continue

                if column not in model_fields(models[table]):
                    errors.append(create_error(
                        "FK_COLUMN_NOT_FOUND",
                        f"{fk_path}.column",
                        f'"{table}.{column}" (referenced by {model_name}.{field_name})',
                    ))

        return errors

    def validate_flow(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        node_ids = collect_ids(doc.get("nodes"), "nodes")

        for entry in iter_entries(doc.get("edges"), "edges"):
            if not isinstance(entry.raw, dict):
                continue
            for end in ("source", "target"):
                key, value = edge_endpoint(entry.raw, end)
                if value not in node_ids:
                    errors.append(create_error(
                        "NODE_NOT_FOUND", f"{entry.path}.{key}", f'{end} "{value}"',
                    ))

        for entry in iter_entries(doc.get("groups"), "groups"):
            if not isinstance(entry.raw, dict) or not isinstance(entry.raw.get("nodes"), list):
                continue
            for i, member in enumerate(entry.raw["nodes"]):
                if not isinstance(member, str) or member not in node_ids:
                    errors.append(create_error(
                        "NODE_NOT_FOUND", f"{entry.path}.nodes[{i}]", f'group member "{member}"',
                    ))

        return errors

    def validate_sequence(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        participant_ids = collect_ids(doc.get("participants"), "participants")
        message_ids = collect_ids(doc.get("messages"), "messages")
        block_ids = collect_ids(doc.get("blocks"), "blocks")

        for entry in iter_entries(doc.get("messages"), "messages"):
            if not isinstance(entry.raw, dict):
                continue
            for end in ("from", "to"):
                value = entry.raw.get(end)
                if value not in participant_ids:
                    errors.append(create_error(
                        "PARTICIPANT_NOT_FOUND", f"{entry.path}.{end}", f'"{value}"',
                    ))

        for entry in iter_entries(doc.get("blocks"), "blocks"):
            if not isinstance(entry.raw, dict):
                continue
            for i, message_id in enumerate(entry.raw.get("messages") or []):
                if not isinstance(message_id, str) or message_id not in message_ids:
                    errors.append(create_error(
                        "MESSAGE_NOT_FOUND", f"{entry.path}.messages[{i}]", f'"{message_id}"',
                    ))
            parent = entry.raw.get("parent_block")
            if parent is not None and (not isinstance(parent, str) or parent not in block_ids):
                errors.append(create_error(
                    "BLOCK_NOT_FOUND", f"{entry.path}.parent_block", f'"{parent}"',
                ))

        errors.extend(self._check_note_targets(doc.get("notes"), participant_ids | message_ids))
        return errors

    def _check_note_targets(self, notes: Any, targets: Set[str]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        for entry in iter_entries(notes, "notes"):
            if not isinstance(entry.raw, dict):
                continue
            attached = entry.raw.get("attached_to")
            if attached is None:
                continue
            if isinstance(attached, str):
                if attached not in targets:
                    errors.append(create_error(
                        "NOTE_TARGET_NOT_FOUND", f"{entry.path}.attached_to", f'"{attached}"',
                    ))
                continue
            for i, target in enumerate(attached):
                if not isinstance(target, str) or target not in targets:
                    errors.append(create_error(
                        "NOTE_TARGET_NOT_FOUND", f"{entry.path}.attached_to[{i}]", f'"{target}"',
                    ))
        return errors


def validate_references(doc: Dict[str, Any], kind) -> List[ValidationIssue]:
    return ReferencePhase().run(doc, kind)
