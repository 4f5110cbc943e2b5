"""
Validator Module

Validates object tree elements for output: requiredness, defaults,
embedded objects and field value types.
"""

from .element_validator import ElementValidator

__all__ = ["ElementValidator"]
