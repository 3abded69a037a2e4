"""
Diagram Validator - runs the four validation phases over a cryml document.

Phases:
- structure       required fields, primitive types, allowed values
- references      cross-entity ids resolve
- layout          cycles, reachability, message ordering
- best_practices  non-blocking warnings

A structural failure short-circuits the remaining phases; reference and
layout errors accumulate independently.
"""

from typing import Any, List, Optional

import yaml

from cryml import config
from cryml.ir.diagram import DiagramKind
from cryml.validation.best_practices import validate_best_practices
from cryml.validation.catalog import create_error
from cryml.validation.issues import DiagramValidationResult, ValidationIssue, aggregate_results
from cryml.validation.layout import validate_layout
from cryml.validation.references import validate_references
from cryml.validation.structure import validate_structure


class DiagramValidationError(ValueError):
    """Raised by ``raise_on_errors`` when a document does not validate."""

    def __init__(self, result: DiagramValidationResult):
        self.result = result
        issues = result.errors if result.errors else result.warnings
        lines = [f"[{i.code}] {i.path}: {i.message}" for i in issues]
        super().__init__(
            f"Diagram validation failed with {result.error_count} errors, "
            f"{result.warning_count} warnings:\n" + "\n".join(lines)
        )


class DiagramValidator:
    """
    Validates cryml YAML text.

    Usage:
        validator = DiagramValidator()
        result = validator.validate(yaml_text)

        if not result.is_valid:
            for issue in result.errors:
                print(f"[{issue.code}] {issue.path}: {issue.message}")
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, yaml_text: str) -> DiagramValidationResult:
        """Validate a whole document."""
        try:
            doc = yaml.safe_load(yaml_text)
        except yaml.YAMLError as exc:
            return self._fail(create_error("YAML_PARSE_ERROR", "", str(exc)))

        if not isinstance(doc, dict):
            return self._fail(create_error("INVALID_DOCUMENT", ""))

        return self.validate_document(doc)

    def validate_document(self, doc: Any) -> DiagramValidationResult:
        """Validate an already-loaded document."""
        if not isinstance(doc, dict):
            return self._fail(create_error("INVALID_DOCUMENT", ""))

        raw_kind = doc.get("diagram_type")
        kind = DiagramKind.from_value(raw_kind) if raw_kind is None or isinstance(raw_kind, str) else None
        if kind is None:
            return self._fail(create_error("INVALID_DIAGRAM_TYPE", "diagram_type", f'got "{raw_kind}"'))

        structure_errors = validate_structure(doc, kind)
        if structure_errors:
            if config.DEBUG:
                print(f"[DiagramValidator] {kind.value}: {len(structure_errors)} structural errors, skipping later phases")
            return aggregate_results(structure_errors, [], kind, strict=self.strict_mode)

        errors: List[ValidationIssue] = []
        errors.extend(validate_references(doc, kind))
        errors.extend(validate_layout(doc, kind))
        warnings = validate_best_practices(doc, kind)

        if config.DEBUG:
            print(f"[DiagramValidator] {kind.value}: {len(errors)} errors, {len(warnings)} warnings")

        return aggregate_results(errors, warnings, kind, strict=self.strict_mode)

    def _fail(self, issue: ValidationIssue) -> DiagramValidationResult:
        if config.DEBUG:
            print(f"[DiagramValidator] {issue.code}: {issue.message}")
        return aggregate_results([issue], [], None, strict=self.strict_mode)


def validate_diagram(yaml_text: str, strict: bool = False) -> DiagramValidationResult:
    """Convenience function to validate a document."""
    validator = DiagramValidator(strict_mode=strict)
    return validator.validate(yaml_text)


def get_validation_summary(yaml_text: str) -> str:
    """Get a quick validation summary string."""
    result = validate_diagram(yaml_text)
    return result.get_summary()


def raise_on_errors(yaml_text: str, strict: bool = False) -> Optional[DiagramValidationResult]:
    """Validate a document and raise ``DiagramValidationError`` if it is invalid."""
    result = validate_diagram(yaml_text, strict=strict)
    if not result.is_valid:
        raise DiagramValidationError(result)
    return result
