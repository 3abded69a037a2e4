from cryml.validation.best_practices import validate_best_practices
from cryml.validation.diagram_validator import (
    DiagramValidationError,
    DiagramValidator,
    get_validation_summary,
    raise_on_errors,
    validate_diagram,
)
from cryml.validation.issues import DiagramValidationResult, ValidationIssue, ValidationSeverity
from cryml.validation.layout import validate_layout
from cryml.validation.references import validate_references
from cryml.validation.structure import validate_structure

__all__ = [
    "DiagramValidationError",
    "DiagramValidationResult",
    "DiagramValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "get_validation_summary",
    "raise_on_errors",
    "validate_best_practices",
    "validate_diagram",
    "validate_layout",
    "validate_references",
    "validate_structure",
]
