from abc import ABC, abstractmethod
from typing import Any, Dict, List

from cryml.ir.diagram import DiagramKind
from cryml.validation.issues import ValidationIssue


class ValidationPhase(ABC):
    """
    One step of the validation pipeline.

    Must:
    - read the parsed document only
    - return a (possibly empty) list of issues
    - NEVER raise on malformed input and NEVER call other phases
    """

    name: str

    def run(self, doc: Dict[str, Any], kind: DiagramKind) -> List[ValidationIssue]:
        if kind == DiagramKind.ERD:
            return self.validate_erd(doc)
        if kind == DiagramKind.FLOW:
            return self.validate_flow(doc)
        return self.validate_sequence(doc)

    @abstractmethod
    def validate_erd(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        pass

    @abstractmethod
    def validate_flow(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        pass

    @abstractmethod
    def validate_sequence(self, doc: Dict[str, Any]) -> List[ValidationIssue]:
        pass
