from enum import Enum
from typing import Any


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_ir(obj: Any):
    """
    Serialize canonical diagram models into JSON-compatible structures.
    Deterministic: dict and dataclass field order is preserved.
    Tolerant to primitives.
    """

    # Primitive values pass through
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    # Enum members (DiagramKind, ValidationSeverity) serialize as their value
    if isinstance(obj, Enum):
        return obj.value

    # Lists and tuples: serialize each element
    if isinstance(obj, (list, tuple)):
        return [serialize_ir(item) for item in obj]

    # Dicts: serialize values
    if isinstance(obj, dict):
        return {str(k): serialize_ir(v) for k, v in obj.items()}

    # Dataclass models
    if hasattr(obj, "__dict__"):
        return {
            key: serialize_ir(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    # Fallback (sets, frozensets and other stray values)
    return str(obj)
