"""
Edge routing hints for flow diagrams.

Edges leaving a decision node are routed to a specific output port based on
their label. The hint is a pure string classification; it never changes the
validated model.
"""

from typing import Any, Optional


# ------------------------------------------------------------------ #
# Label classification
# ------------------------------------------------------------------ #

# Labels routed to the "yes" port (right side of the diamond).
_YES_LABELS = {"yes", "true", "valid", "ship", "ok"}

# Labels routed to the "no" port.
_NO_LABELS = {"no", "false", "invalid", "damaged", "error"}

# Labels that continue straight down.
_BOTTOM_LABELS = {"bottom", "continue", "next", "retry"}


def _normalize(label: Any) -> str:
    if label is None:
        return ""
    if isinstance(label, bool):
        return "true" if label else "false"
    return str(label).strip().lower()


def is_yes_label(label: Any) -> bool:
    return _normalize(label) in _YES_LABELS


def is_no_label(label: Any) -> bool:
    return _normalize(label) in _NO_LABELS


def is_bottom_label(label: Any) -> bool:
    return _normalize(label) in _BOTTOM_LABELS


# ------------------------------------------------------------------ #
# Handle assignment
# ------------------------------------------------------------------ #

def decision_handle(label: Any) -> Optional[str]:
    """Return the decision port for *label*, or None for an unrecognised label."""
    if is_yes_label(label):
        return "yes"
    if is_no_label(label):
        return "no"
    if is_bottom_label(label):
        return "bottom"
    return None


def source_handle_for(source_type: Optional[str], label: Any) -> Optional[str]:
    """Only edges leaving a decision node carry a source handle."""
    if source_type != "decision" or label is None:
        return None
    return decision_handle(label)
