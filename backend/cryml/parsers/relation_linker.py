"""
Relation linker.

Pairs the two sides of a relation so that back-reference ("virtual") fields
without foreign key attributes still point at the model on the other side.

Group-by-then-reconcile: one pass over every field builds a multimap from
relation key to ``(owner, field)`` members, a second pass links groups of
exactly two. Anything else is ambiguous and left untouched.
"""

from collections import defaultdict
from typing import Dict, FrozenSet, Hashable, List, Optional, Tuple

from cryml import config
from cryml.ir.erd_ir import Field, Model


Member = Tuple[str, Field]


def relation_key(owner: str, field: Field, model_names: FrozenSet[str]) -> Optional[Hashable]:
    """Key a field joins in the multimap, or None when it is not a relation side.

    Named relations group by ``relation_name``. Unnamed fields whose type is
    a model group by the unordered pair of model names.
    """
    if field.relation_name:
        return ("name", field.relation_name)
    if field.type in model_names:
        return ("pair", frozenset((owner, field.type)))
    return None


def _is_pair(key: Hashable, members: List[Member]) -> bool:
    if len(members) != 2:
        return False
    if key[0] == "name":
        return True
    # Two unnamed fields on the same model pointing elsewhere are two
    # separate relations, not the two ends of one.
    owners = frozenset(owner for owner, _ in members)
    return owners == key[1]


def link_relations(models: List[Model]) -> int:
    """Link relation pairs in place and return how many pairs were linked."""
    model_names = frozenset(m.name for m in models)
    groups: Dict[Hashable, List[Member]] = defaultdict(list)

    for model in models:
        for field in model.fields.values():
            key = relation_key(model.name, field, model_names)
            if key is not None:
                groups[key].append((model.name, field))

    linked = 0
    for key, members in groups.items():
        if not _is_pair(key, members):
            if config.DEBUG and len(members) > 2:
                print(f"[RelationLinker] Leaving {len(members)} fields unlinked for {key}")
            continue

        (owner_a, field_a), (owner_b, field_b) = members
        field_a.relation_to_model = owner_b
        field_b.relation_to_model = owner_a
        linked += 1

    return linked
