from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from cryml.ir.diagram import DiagramKind


class ValidationSeverity(Enum):
    ERROR = "error"      # Diagram must not be rendered
    WARNING = "warning"  # Diagram renders but has quality issues


@dataclass
class ValidationIssue:
    """A single validation issue found in a cryml document"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    path: str = ""      # Dotted/bracketed locator, e.g. models.User.fields.id
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ValidationSeverity.ERROR

    def to_dict(self) -> dict:
        return {
            "level": self.severity.value,
            "code": self.code,
            "message": self.message,
            "path": self.path,
            "suggestion": self.suggestion,
        }


@dataclass
class DiagramValidationResult:
    """Result of validating one cryml document"""
    is_valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    diagram_kind: Optional[DiagramKind] = None

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def codes(self) -> List[str]:
        return [i.code for i in self.errors + self.warnings]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "diagram_kind": self.diagram_kind.value if self.diagram_kind else None,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "errors": [i.to_dict() for i in self.errors],
            "warnings": [i.to_dict() for i in self.warnings],
        }

    def get_summary(self) -> str:
        """Get human-readable summary"""
        status = "Valid" if self.is_valid else "Invalid"
        kind = self.diagram_kind.value.upper() if self.diagram_kind else "UNKNOWN"
        return f"{status} {kind} diagram | Errors: {self.error_count}, Warnings: {self.warning_count}"


def aggregate_results(
    errors: List[ValidationIssue],
    warnings: List[ValidationIssue],
    diagram_kind: Optional[DiagramKind],
    strict: bool = False,
) -> DiagramValidationResult:
    is_valid = not errors
    if strict:
        is_valid = not errors and not warnings
    return DiagramValidationResult(
        is_valid=is_valid,
        errors=errors,
        warnings=warnings,
        diagram_kind=diagram_kind,
    )
