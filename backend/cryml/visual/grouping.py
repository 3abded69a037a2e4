"""
ERD colour / group cascade.

An ordered list of ``(predicate, outcome)`` rules evaluated first-match-wins.
Iteration order is the list order, so the result is reproducible for a
given document.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from cryml import config


@dataclass(frozen=True)
class GroupRule:
    predicate: Callable[[str], bool]
    color: str
    group: Optional[str]
    name: str = ""

    def matches(self, model_name: str) -> bool:
        return self.predicate(model_name)


def pattern_rule(pattern: str, color: str, group: Optional[str]) -> GroupRule:
    """Case-insensitive regex search against the model name."""
    regex = re.compile(pattern, re.IGNORECASE)
    return GroupRule(predicate=lambda name: regex.search(name) is not None, color=color, group=group, name=pattern)


def prefix_rule(prefix: str, color: str = "red") -> GroupRule:
    """Business prefix: ``OrderItem`` joins ``Order``, a bare ``Order`` does not."""
    lowered = prefix.lower()
    return GroupRule(
        predicate=lambda name: name.lower().startswith(lowered) and len(name) > len(prefix),
        color=color,
        group=prefix,
        name=prefix,
    )


BUSINESS_PREFIXES = (
    "Order",
    "Product",
    "Customer",
    "Invoice",
    "Payment",
    "Category",
    "Tag",
    "Subscription",
)

BUILTIN_RULES: List[GroupRule] = [
    pattern_rule(r"^(User|Account|Session|Verification|Auth)", "yellow", "Authentication"),
    pattern_rule(r"^(Post|Comment|Article|Blog|Content|Page|Media)", "red", "Content"),
    pattern_rule(r"^(Setting|Config|Preference|System|Permission|Role)", "teal", "Configuration"),
] + [prefix_rule(prefix) for prefix in BUSINESS_PREFIXES]

DEFAULT_GROUP = "Other"
ENUM_FALLBACK = ("teal", "Configuration")


def rules_from_document(colors: Any) -> List[GroupRule]:
    """Build rules from a document's ``colors.rules``; bad patterns are skipped."""
    if not isinstance(colors, dict) or not isinstance(colors.get("rules"), list):
        return []

    rules = []
    for raw in colors["rules"]:
        if not isinstance(raw, dict) or not isinstance(raw.get("pattern"), str):
            continue
        try:
            rules.append(pattern_rule(raw["pattern"], raw.get("color") or default_color(colors), raw.get("group")))
        except re.error as exc:
            if config.DEBUG:
                print(f"[Grouping] Skipping invalid color rule {raw['pattern']!r}: {exc}")
    return rules


def default_color(colors: Any) -> str:
    if isinstance(colors, dict) and isinstance(colors.get("default"), str):
        return colors["default"]
    return config.DEFAULT_ERD_COLOR


def first_match(model_name: str, rules: List[GroupRule]) -> Optional[GroupRule]:
    for rule in rules:
        if rule.matches(model_name):
            return rule
    return None


def resolve_model_style(
    model_name: str,
    document_rules: List[GroupRule],
    own_color: Optional[str] = None,
    own_group: Optional[str] = None,
    fallback_color: Optional[str] = None,
) -> Tuple[str, str]:
    """Return ``(color, group)`` for a model.

    Cascade: document rules, then the model's own ``color``/``group``, then
    the built-in name heuristics, then the default bucket. A model that
    declares only one of ``color``/``group`` gets the other from the rest of
    the cascade.
    """
    rule = first_match(model_name, document_rules)
    if rule is not None:
        return rule.color, rule.group or own_group or DEFAULT_GROUP

    builtin = first_match(model_name, BUILTIN_RULES)
    if builtin is not None:
        color, group = builtin.color, builtin.group
    else:
        color, group = fallback_color or config.DEFAULT_ERD_COLOR, DEFAULT_GROUP

    return own_color or color, own_group or group
