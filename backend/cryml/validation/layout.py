"""
Layout phase - graph properties of the document.

- ERD: circular foreign key dependencies (report one, then stop)
- Flow: reachability from start nodes (report every unreachable node) and
  decision fan-out
- Sequence: contiguous 1..N message ordering (report first break) and
  duplicate orders

All traversals are iterative and own their visited sets, so deep chains
never hit the recursion limit and concurrent validations share nothing.
"""

from collections import defaultdict, deque
from typing import Any, Dict, List, Optional, Set

from cryml.dialect import (
    FOREIGN_KEY_KEYS,
    document_models,
    edge_endpoint,
    foreign_key,
    is_number,
    iter_entries,
    lookup,
    model_fields,
)
from cryml.validation.catalog import create_error
from cryml.validation.issues import ValidationIssue
from cryml.validation.phase import ValidationPhase


def _fmt_order(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def find_cycle_member(adjacency: Dict[str, Set[str]], roots: List[str]) -> Optional[str]:
    """Return the first node found on a cycle, or None for an acyclic graph.

    Depth-first search with an explicit stack of neighbour iterators; the
    ``on_stack`` set plays the role of the recursion stack.
    """
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    for root in roots:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(sorted(adjacency.get(root, ()))))]

        while stack:
            node, neighbours = stack[-1]
            advanced = False
            for neighbour in neighbours:
                if neighbour in on_stack:
                    return neighbour
                if neighbour not in visited:
                    visited.add(neighbour)
                    on_stack.add(neighbour)
                    stack.append((neighbour, iter(sorted(adjacency.get(neighbour, ())))))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                on_stack.discard(node)

    return None


def reachable_from(adjacency: Dict[str, Set[str]], sources: List[str]) -> Set[str]:
    """Multi-source breadth-first traversal."""
    seen: Set[str] = set(sources)
    queue = deque(sources)
    while queue:
        node = queue.popleft()
        for neighbour in adjacency.get(node, ()):
            if neighbour not in seen:
                seen.add(neighbour)
                queue.append(neighbour)
    return seen


class LayoutPhase(ValidationPhase):
    name = "layout"

    def validate_erd(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        models = document_models(doc)
        adjacency: Dict[str, Set[str]] = defaultdict(set)

        for model_name, raw_model in models.items():
            for raw_field in model_fields(raw_model).values():
                fk = foreign_key(raw_field)
                if fk is None:
                    continue
                _, table = lookup(fk, "table", FOREIGN_KEY_KEYS)
                if isinstance(table, str) and table != model_name and table in models:
                    adjacency[model_name].add(table)

        member = find_cycle_member(adjacency, list(models))
        if member is None:
            return []
        return [create_error("CIRCULAR_DEPENDENCY", f"models.{member}", f"model {member} is part of a cycle")]

    def validate_flow(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        nodes = [
            entry for entry in iter_entries(doc.get("nodes"), "nodes")
            if isinstance(entry.raw, dict) and isinstance(entry.id, str)
        ]

        adjacency: Dict[str, Set[str]] = defaultdict(set)
        out_degree: Dict[str, int] = defaultdict(int)
        for entry in iter_entries(doc.get("edges"), "edges"):
            _, source = edge_endpoint(entry.raw, "source")
            _, target = edge_endpoint(entry.raw, "target")
            if isinstance(source, str) and isinstance(target, str):
                adjacency[source].add(target)
                out_degree[source] += 1

        starts = [entry.id for entry in nodes if entry.raw.get("type") == "start"]
        if starts:
            reached = reachable_from(adjacency, starts)
            for entry in nodes:
                if entry.raw.get("type") != "start" and entry.id not in reached:
                    errors.append(create_error(
                        "UNREACHABLE_NODE", entry.path, f'"{entry.id}" cannot be reached from a start node',
                    ))

        for entry in nodes:
            if entry.raw.get("type") == "decision" and out_degree[entry.id] < 2:
                errors.append(create_error(
                    "DECISION_FEW_BRANCHES", entry.path,
                    f'"{entry.id}" has {out_degree[entry.id]} outgoing edge(s)',
                ))

        return errors

    def validate_sequence(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        errors: List[ValidationIssue] = []
        ordered = [
            (entry.raw["sequence_order"], entry)
            for entry in iter_entries(doc.get("messages"), "messages")
            if isinstance(entry.raw, dict) and is_number(entry.raw.get("sequence_order"))
        ]
        ordered.sort(key=lambda item: item[0])

        for i, (order, entry) in enumerate(ordered):
            if order != i + 1:
                errors.append(create_error(
                    "INVALID_SEQUENCE_ORDER",
                    f"{entry.path}.sequence_order",
                    f"(expected {i + 1}, found {_fmt_order(order)} at position {i})",
                ))
                break

        counts: Dict[Any, int] = defaultdict(int)
        for order, _ in ordered:
            counts[order] += 1
        duplicates = sorted(order for order, count in counts.items() if count > 1)
        if duplicates:
            errors.append(create_error(
                "DUPLICATE_SEQUENCE_ORDER",
                "messages",
                ", ".join(_fmt_order(order) for order in duplicates),
            ))

        return errors


def validate_layout(doc: Dict[str, Any], kind) -> List[ValidationIssue]:
    return LayoutPhase().run(doc, kind)
