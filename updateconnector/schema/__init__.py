"""
Schema Module

Type definitions consumed by the normalizer and validator:
- FieldDefinition / ReferenceDefinition / TypeDefinition models
- SchemaRegistry lookups, loadable from dicts or JSON files
- Built-in definition table
"""

from .models import NO_DEFAULT, FieldDefinition, ReferenceDefinition, TypeDefinition
from .registry import SchemaRegistry, default_registry

__all__ = [
    "NO_DEFAULT",
    "FieldDefinition",
    "ReferenceDefinition",
    "TypeDefinition",
    "SchemaRegistry",
    "default_registry",
]
