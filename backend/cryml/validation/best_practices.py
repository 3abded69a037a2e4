"""
Best-practices phase - non-blocking heuristics.

Only warnings come out of here; nothing in this module affects validity.
"""

from collections import defaultdict
from typing import Any, Dict, List

from cryml import config
from cryml.dialect import (
    MODEL_KEYS,
    document_models,
    edge_endpoint,
    field_attribute,
    field_type,
    foreign_key,
    is_label,
    iter_entries,
    lookup,
    model_fields,
)
from cryml.validation.catalog import create_warning
from cryml.validation.issues import ValidationIssue
from cryml.validation.phase import ValidationPhase


class BestPracticesPhase(ValidationPhase):
    name = "best_practices"

    # ------------------------------------------------------------------ #
    # ERD
    # ------------------------------------------------------------------ #

    def validate_erd(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        warnings: List[ValidationIssue] = []
        models = document_models(doc)

        for model_name, raw_model in models.items():
            fields = model_fields(raw_model)
            warnings.extend(self._check_primary_key(model_name, fields))
            warnings.extend(self._check_fk_indexes(model_name, raw_model, fields))
            warnings.extend(self._check_ambiguous_relations(model_name, fields, models))

        return warnings

    def _check_primary_key(self, model_name: str, fields: Dict[str, Any]) -> List[ValidationIssue]:
        if any(field_attribute(raw, "primary_key") is True for raw in fields.values()):
            return []
        return [create_warning("MISSING_PRIMARY_KEY", f"models.{model_name}", model_name)]

    def _check_fk_indexes(self, model_name: str, raw_model: Any, fields: Dict[str, Any]) -> List[ValidationIssue]:
        _, indexes = lookup(raw_model, "indexes", MODEL_KEYS)
        if not isinstance(indexes, list):
            return []

        indexed = set()
        for index in indexes:
            if isinstance(index, dict) and isinstance(index.get("columns"), list):
                indexed.update(c for c in index["columns"] if isinstance(c, str))

        return [
            create_warning(
                "FK_WITHOUT_INDEX", f"models.{model_name}.fields.{field_name}", f"{model_name}.{field_name}",
            )
            for field_name, raw_field in fields.items()
            if foreign_key(raw_field) is not None and field_name not in indexed
        ]

    def _check_ambiguous_relations(
        self, model_name: str, fields: Dict[str, Any], models: Dict[str, Any],
    ) -> List[ValidationIssue]:
        by_target: Dict[str, List[str]] = defaultdict(list)
        for field_name, raw_field in fields.items():
            target = field_type(raw_field)
            if not isinstance(target, str) or target == model_name or target not in models:
                continue
            if field_attribute(raw_field, "relation_name") is not None:
                continue
            if foreign_key(raw_field) is not None:
                continue
            by_target[target].append(field_name)

        return [
            create_warning(
                "AMBIGUOUS_RELATION",
                f"models.{model_name}",
                f"{model_name} -> {target} via {', '.join(names)}",
            )
            for target, names in by_target.items()
            if len(names) > 1
        ]

    # ------------------------------------------------------------------ #
    # Flow
    # ------------------------------------------------------------------ #

    def validate_flow(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        warnings: List[ValidationIssue] = []
        nodes = [e for e in iter_entries(doc.get("nodes"), "nodes") if isinstance(e.raw, dict)]

        forks = sum(1 for e in nodes if e.raw.get("type") == "fork")
        joins = sum(1 for e in nodes if e.raw.get("type") == "join")
        if forks != joins:
            warnings.append(create_warning(
                "FORK_JOIN_MISMATCH", "nodes", f"{forks} fork node(s), {joins} join node(s)",
            ))

        threshold = config.COMPLEX_FLOW_THRESHOLD
        if len(nodes) > threshold:
            warnings.append(create_warning(
                "COMPLEX_DIAGRAM", "nodes", f"{len(nodes)} nodes (threshold {threshold})",
            ))

        outgoing: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for entry in iter_entries(doc.get("edges"), "edges"):
            _, source = edge_endpoint(entry.raw, "source")
            if isinstance(source, str):
                outgoing[source].append(entry.raw)

        for entry in nodes:
            if entry.raw.get("type") != "decision":
                continue
            edges = outgoing.get(entry.id, [])
            if len(edges) < 2:
                continue
            if any(not is_label(e.get("condition")) and not is_label(e.get("label")) for e in edges):
                warnings.append(create_warning("MISSING_CONDITION", entry.path, f'"{entry.id}"'))

        return warnings

    # ------------------------------------------------------------------ #
    # Sequence
    # ------------------------------------------------------------------ #

    def validate_sequence(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        used = set()
        for entry in iter_entries(doc.get("messages"), "messages"):
            if isinstance(entry.raw, dict):
                used.add(entry.raw.get("from"))
                used.add(entry.raw.get("to"))

        return [
            create_warning("UNUSED_PARTICIPANT", entry.path, f'"{entry.id}"')
            for entry in iter_entries(doc.get("participants"), "participants")
            if isinstance(entry.raw, dict) and entry.id not in used
        ]


def validate_best_practices(doc: Dict[str, Any], kind) -> List[ValidationIssue]:
    return BestPracticesPhase().run(doc, kind)
