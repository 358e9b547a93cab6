"""JSON Schema validation with critical/advisory classification.

Only the essential fields decide whether a generated challenge is usable;
everything else can be patched at display time, so violations elsewhere are
reported as warnings in lenient mode.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation

from challenge_generator.exceptions import SchemaLoadError
from challenge_generator.logging_config import get_logger

logger = get_logger(__name__)

CRITICAL_FIELDS = frozenset({"id", "title", "language", "level", "statement"})

ValidationMode = Literal["strict", "lenient"]


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    severity: ValidationMode
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def load_schema_validator(schema_path: Path) -> Draft7Validator:
    """Load and compile the challenge schema. Raises SchemaLoadError."""
    try:
        schema = json.loads(Path(schema_path).read_text(encoding="utf-8"))
        Draft7Validator.check_schema(schema)
    except (OSError, ValueError, SchemaError) as e:
        logger.error("challenge_schema_load_failed", path=str(schema_path), error=str(e))
        raise SchemaLoadError(f"Could not load challenge schema from {schema_path}: {e}") from e

    logger.info("challenge_schema_loaded", path=str(schema_path))
    return Draft7Validator(schema, format_checker=FormatChecker())


def missing_properties(violations: list[SchemaViolation]) -> dict[int, str]:
    """
    Map each top-level ``required`` violation (by id) to the property it names.

    jsonschema reports one violation per absent name, in the order the
    schema's ``required`` list gives them.
    """
    required = [v for v in violations if v.validator == "required" and not v.absolute_path]
    if not required:
        return {}
    instance = required[0].instance if isinstance(required[0].instance, dict) else {}
    absent = [name for name in required[0].validator_value if name not in instance]
    return {id(violation): name for violation, name in zip(required, absent)}


def is_critical(violation: SchemaViolation, missing: str | None = None) -> bool:
    path = list(violation.absolute_path)
    if not path:
        if violation.validator == "required":
            return missing in CRITICAL_FIELDS
        # The document itself is not an object
        return violation.validator == "type"
    return path[0] in CRITICAL_FIELDS


def format_violation(violation: SchemaViolation) -> str:
    instance_path = "".join(f"/{part}" for part in violation.absolute_path)
    return f"{instance_path} {violation.message}".strip()


def validate_challenge(
    validator: Draft7Validator,
    challenge: Any,
    mode: ValidationMode = "lenient",
) -> ValidationResult:
    """
    Validate ``challenge`` against the compiled schema.

    lenient: valid as long as no critical field is affected.
    strict: any violation invalidates. Critical violations are the errors;
    if there are none, the advisory ones are promoted so an invalid result
    always says why.
    """
    critical: list[str] = []
    advisory: list[str] = []
    violations = list(validator.iter_errors(challenge))
    missing = missing_properties(violations)
    for violation in sorted(violations, key=format_violation):
        if is_critical(violation, missing.get(id(violation))):
            critical.append(format_violation(violation))
        else:
            advisory.append(format_violation(violation))

    if not critical and not advisory:
        return ValidationResult(valid=True, severity=mode)

    if mode == "lenient":
        if critical:
            return ValidationResult(valid=False, severity=mode, errors=critical, warnings=advisory)
        return ValidationResult(valid=True, severity=mode, warnings=advisory)

    if critical:
        return ValidationResult(valid=False, severity=mode, errors=critical, warnings=advisory)
    return ValidationResult(valid=False, severity=mode, errors=advisory)
