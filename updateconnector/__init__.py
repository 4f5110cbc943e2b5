"""
Update Connector payload engine

Turns loosely structured input into validated Update Connector payloads
(JSON or XML), driven by per-type schema definitions.

Usage:
```python
from updateconnector import ObjectTreeFactory

tree = ObjectTreeFactory.create("KnSubject", {"type": 1, "description": "Note"}, "insert")
print(tree.render("json", {"pretty": True}))
```
"""

__version__ = "0.1.0"

from .errors import (
    AmbiguousActionError,
    ElementIndexError,
    FieldTypeError,
    InvalidActionError,
    InvalidFormatError,
    InvalidInputError,
    MissingFieldError,
    MissingIdentifierError,
    MissingReferenceError,
    SchemaError,
    TooManyElementsError,
    UnknownPropertyError,
    UnmappedFieldsError,
    UpdateConnectorError,
    ValidationError,
)
from .behavior import ChangeBehavior, ValidationBehavior
from .schema import SchemaRegistry, default_registry
# builder before validator: the validator imports the tree module.
from .builder import ObjectTree, ObjectTreeFactory, create
from .validator import ElementValidator
from .exporter import render

__all__ = [
    "AmbiguousActionError",
    "ElementIndexError",
    "FieldTypeError",
    "InvalidActionError",
    "InvalidFormatError",
    "InvalidInputError",
    "MissingFieldError",
    "MissingIdentifierError",
    "MissingReferenceError",
    "SchemaError",
    "TooManyElementsError",
    "UnknownPropertyError",
    "UnmappedFieldsError",
    "UpdateConnectorError",
    "ValidationError",
    "ChangeBehavior",
    "ValidationBehavior",
    "SchemaRegistry",
    "default_registry",
    "ObjectTree",
    "ObjectTreeFactory",
    "create",
    "ElementValidator",
    "render",
]
