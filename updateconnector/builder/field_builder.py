"""
Field Builder - Scalar field value checks and coercion

Used both when raw data is added to an object tree (errors are
InvalidInputError) and when elements are validated for output (errors are
ValidationError subclasses).
"""

import re
from decimal import Decimal
from typing import Any

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.errors import FieldTypeError, InvalidInputError, ValidationError
from updateconnector.schema.models import FieldDefinition

SCALAR_TYPES = (str, int, float, Decimal, bool)

NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

FALSY_STRINGS = ("", "0")


def is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def is_identifier(value: Any) -> bool:
    """Identifiers are strings or integers (not booleans)."""
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    return isinstance(value, str) and bool(NUMERIC_PATTERN.match(value))


def to_boolean(value: Any) -> bool:
    """Truthiness as the remote API sees it: "" and "0" are false."""
    if isinstance(value, str):
        return value not in FALSY_STRINGS
    return bool(value)


def build_field_value(
    value: Any,
    definition: FieldDefinition,
    change: ChangeBehavior,
    validation: ValidationBehavior,
    label: str = "field",
    for_input: bool = False,
) -> Any:
    """
    Check and convert a field value

    Args:
        value: Value to check; None is passed through unchanged
        definition: Field definition (its kind decides coercion)
        change: Change behavior; allow_reformat trims strings
        validation: Validation behavior; essential enables type checks
        label: Field/element description for error messages
        for_input: Raise InvalidInputError instead of validation errors

    Returns:
        The (possibly converted) value
    """
    if value is None:
        return None

    if validation.essential:
        if not is_scalar(value):
            error_class = InvalidInputError if for_input else FieldTypeError
            raise error_class(f"{label} value must be scalar, got {type(value).__name__}.")

        kind = definition.kind
        if kind == "boolean":
            value = to_boolean(value)
        elif kind in ("integer", "decimal"):
            error_class = InvalidInputError if for_input else ValidationError
            if not is_numeric(value):
                raise error_class(f"{label} value must be numeric, got {value!r}.")
            if kind == "integer" and "." in str(value):
                raise error_class(f"{label} value must be an integer value, got {value!r}.")
        # Dates are passed through as-is.

    if isinstance(value, str) and change.allow_reformat:
        value = value.strip()

    return value
