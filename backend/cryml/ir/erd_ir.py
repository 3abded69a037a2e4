from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .diagram import DiagramMetadata


# -------------------------
# Fields
# -------------------------

@dataclass
class Field:
    name: str
    type: str
    is_id: bool = False
    is_unique: bool = False
    is_required: bool = False
    is_list: bool = False
    has_default: bool = False
    is_foreign_key: bool = False
    relation_to_model: Optional[str] = None
    references_field: Optional[str] = None
    relation_name: Optional[str] = None
    is_enum: bool = False
    is_virtual: bool = False
    db_type: Optional[str] = None
    default_value: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


@dataclass
class Index:
    name: str
    columns: List[str] = field(default_factory=list)
    unique: bool = False


@dataclass
class UniqueConstraint:
    name: str
    columns: List[str] = field(default_factory=list)


# -------------------------
# Models & Enums
# -------------------------

@dataclass
class Model:
    name: str
    fields: Dict[str, Field] = field(default_factory=dict)  # declaration order
    color: Optional[str] = None
    group: Optional[str] = None
    table_name: Optional[str] = None
    schema_name: Optional[str] = None
    indexes: List[Index] = field(default_factory=list)
    unique_constraints: List[UniqueConstraint] = field(default_factory=list)

    @property
    def primary_key(self) -> List[str]:
        return [f.name for f in self.fields.values() if f.is_id]


@dataclass
class EnumValue:
    name: str
    description: Optional[str] = None


@dataclass
class Enum:
    name: str
    values: List[EnumValue] = field(default_factory=list)
    color: Optional[str] = None
    group: Optional[str] = None


@dataclass
class ERDDiagram:
    metadata: DiagramMetadata
    models: List[Model] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)

    def get_model(self, name: str) -> Optional[Model]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def model_names(self) -> List[str]:
        return [m.name for m in self.models]

    def enum_names(self) -> List[str]:
        return [e.name for e in self.enums]
