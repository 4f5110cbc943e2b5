"""
Builder Module

Builds in-memory object trees from raw input:
- ObjectTree: elements of one type, with their action(s)
- Normalization of raw data keyed by names or aliases
- Field value coercion
- ObjectTreeFactory: type specific tree classes
"""

# object_tree must be loaded before factory, which imports the type modules.
from .object_tree import ACTIONS, ObjectTree, normalize_action
from .field_builder import build_field_value
from .factory import ObjectTreeFactory, create

__all__ = [
    "ACTIONS",
    "ObjectTree",
    "normalize_action",
    "build_field_value",
    "ObjectTreeFactory",
    "create",
]
