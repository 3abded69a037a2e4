# Visual hints module
# Palettes, the ERD colour/group cascade and flow edge routing hints

from cryml.visual.edge_rules import decision_handle, source_handle_for
from cryml.visual.grouping import BUILTIN_RULES, GroupRule, resolve_model_style
from cryml.visual.visual_style import ERD_COLORS, FLOW_COLORS, SEQUENCE_COLORS, color_to_hex

__all__ = [
    "BUILTIN_RULES",
    "ERD_COLORS",
    "FLOW_COLORS",
    "GroupRule",
    "SEQUENCE_COLORS",
    "color_to_hex",
    "decision_handle",
    "resolve_model_style",
    "source_handle_for",
]
