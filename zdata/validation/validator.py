"""Schema validation gate.

Validates values against JSON Schema shape descriptors and turns every
violated constraint into a ValidationFailureDetail. All violations are
collected (not just the first), in the order the schema evaluates them.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional

from jsonschema import FormatChecker
from jsonschema.validators import validator_for

from ..errors import ApiError, ValidationFailureDetail, detail_from_schema_error

logger = logging.getLogger(__name__)

Shape = Mapping[str, Any]


@dataclass
class ValidationResult:
    """Result of a non-raising validation."""

    ok: bool
    value: Any = None
    error: Optional[ApiError] = None


@lru_cache(maxsize=128)
def _compile(schema_json: str):
    schema = json.loads(schema_json)
    cls = validator_for(schema)
    cls.check_schema(schema)
    return cls(schema, format_checker=FormatChecker())


def _validator(shape: Shape):
    # Schemas are plain dicts, so key the compiled validator on their JSON text
    return _compile(json.dumps(shape, sort_keys=False))


def collect_failures(shape: Shape, value: Any) -> list[ValidationFailureDetail]:
    """List every constraint value violates.

    Args:
        shape: JSON Schema describing the expected shape
        value: Value to check

    Returns:
        One detail per violation, empty if value conforms

    Raises:
        jsonschema.SchemaError: If shape is not a valid schema
    """
    return [detail_from_schema_error(e) for e in _validator(shape).iter_errors(value)]


def validate(shape: Shape, value: Any) -> Any:
    """Check value against shape.

    Args:
        shape: JSON Schema describing the expected shape
        value: Value to check

    Returns:
        value itself, unchanged

    Raises:
        ApiError: VALIDATION error carrying one detail per violation
    """
    failures = collect_failures(shape, value)
    if failures:
        logger.debug(f"Validation failed with {len(failures)} violation(s)")
        raise ApiError.validation(failures)
    return value


def validate_safely(shape: Shape, value: Any) -> ValidationResult:
    """Check value against shape without raising on violations.

    Args:
        shape: JSON Schema describing the expected shape
        value: Value to check

    Returns:
        ValidationResult with ok=True and the value, or ok=False and the error
    """
    failures = collect_failures(shape, value)
    if failures:
        return ValidationResult(ok=False, error=ApiError.validation(failures))
    return ValidationResult(ok=True, value=value)
