"""Exceptions raised while building, validating and rendering payloads."""
from typing import Iterable, Optional


class UpdateConnectorError(Exception):
    """Base class for all payload engine errors."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        element_index: Optional[int] = None,
        property_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.type_name = type_name
        self.element_index = element_index
        self.property_name = property_name


class SchemaError(UpdateConnectorError):
    """The registry has no (or an invalid) definition for a type."""


class InvalidInputError(UpdateConnectorError, ValueError):
    """Caller data has the wrong shape or conflicting values."""


class UnmappedFieldsError(InvalidInputError):
    """Raw element keys that match no identifier, field or reference."""

    def __init__(self, message: str, keys: Iterable[str] = (), **kwargs):
        super().__init__(message, **kwargs)
        self.keys = list(keys)


class InvalidActionError(InvalidInputError):
    """Unknown action tag."""


class ValidationError(UpdateConnectorError, ValueError):
    """A validation rule was violated."""


class UnknownPropertyError(ValidationError):
    """A field, reference or element key is not declared by the schema."""


class MissingFieldError(ValidationError):
    """A required field has no value."""


class MissingReferenceError(ValidationError):
    """A required embedded object has no value."""


class MissingIdentifierError(ValidationError):
    """An element that is not being inserted has no identifier."""


class TooManyElementsError(ValidationError):
    """A single-valued reference holds more than one element."""


class FieldTypeError(ValidationError, TypeError):
    """A field or identifier value is not a scalar of an accepted type."""


class InvalidFormatError(ValidationError):
    """A field value does not match the expected format."""


class AmbiguousActionError(UpdateConnectorError):
    """Several different actions are set and no element index was given."""


class ElementIndexError(UpdateConnectorError, IndexError):
    """No element (or action) exists at the requested index."""
