"""Override validator for client configuration.

Only type constraints are checked. Values such as a negative
``max_retries`` are legal and handled by the retry executor.
"""

from typing import Any, Mapping

from .schema import (
    FLAG_FIELDS,
    HOOK_FIELDS,
    INT_FIELDS,
    NUMBER_FIELDS,
    OPTIONAL_NUMBER_FIELDS,
    VALID_FIELDS,
    ValidationError,
    ValidationResult,
)


def validate_overrides(overrides: Mapping[str, Any]) -> ValidationResult:
    """Validate a mapping of configuration overrides.

    Args:
        overrides: Field name -> value. Absent fields keep their defaults.

    Returns:
        ValidationResult listing every problem found.
    """
    errors: list[ValidationError] = []

    for name, value in overrides.items():
        if name not in VALID_FIELDS:
            errors.append(ValidationError(
                path=str(name),
                message=f"Unknown option. Must be one of: {', '.join(sorted(VALID_FIELDS))}",
            ))
        elif name in INT_FIELDS:
            if not _is_int(value):
                errors.append(_type_error(name, "an integer", value))
        elif name in NUMBER_FIELDS:
            if not _is_number(value):
                errors.append(_type_error(name, "a number", value))
        elif name in OPTIONAL_NUMBER_FIELDS:
            if value is not None and not _is_number(value):
                errors.append(_type_error(name, "a number or null", value))
        elif name in FLAG_FIELDS:
            if not isinstance(value, bool):
                errors.append(_type_error(name, "a boolean", value))
        elif name in HOOK_FIELDS:
            if value is not None and not callable(value):
                errors.append(_type_error(name, "callable", value))

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def _is_int(value: Any) -> bool:
    # bool is an int subclass; reject it explicitly.
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_error(name: str, expected: str, value: Any) -> ValidationError:
    return ValidationError(
        path=name,
        message=f"Must be {expected}, got {type(value).__name__}.",
    )
