from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DiagramKind(Enum):
    ERD = "erd"
    FLOW = "flow"
    SEQUENCE = "sequence"

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional["DiagramKind"]:
        """Map a ``diagram_type`` value to a kind; absent means ERD."""
        if value is None or value == "":
            return cls.ERD
        for kind in cls:
            if kind.value == value:
                return kind
        return None


@dataclass
class DiagramMetadata:
    name: str
    description: Optional[str] = None
    version: Optional[str] = None
