DEFAULT_HEX = "#3b82f6"

ERD_COLORS = {
    "yellow": "#fbbf24",
    "red": "#ef4444",
    "teal": "#14b8a6",
}

FLOW_COLORS = {
    "blue": "#3b82f6",
    "green": "#10b981",
    "red": "#ef4444",
    "orange": "#f97316",
    "purple": "#8b5cf6",
    "gray": "#6b7280",
}

# Sequence diagrams accept the flow palette plus the ERD accents
SEQUENCE_COLORS = {
    **FLOW_COLORS,
    "yellow": "#fbbf24",
    "teal": "#14b8a6",
}

FLOW_NODE_SHAPES = {
    "start": "pill",
    "end": "pill",
    "process": "rounded_rect",
    "decision": "diamond",
    "note": "note",
    "data": "parallelogram",
    "database": "cylinder",
    "document": "document",
    "fork": "bar",
    "join": "bar",
}

FLOW_SIZE_MULTIPLIERS = {
    "small": 0.8,
    "medium": 1.0,
    "large": 1.2,
}


def color_to_hex(color, palette=None) -> str:
    """Resolve a palette colour name to hex; unknown names fall back to blue."""
    palette = FLOW_COLORS if palette is None else palette
    if not isinstance(color, str):
        return DEFAULT_HEX
    return palette.get(color, DEFAULT_HEX)
