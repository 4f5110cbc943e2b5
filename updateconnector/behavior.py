"""
Behavior options for validating and rendering object trees.

Two small value objects control what happens during validation:

- ChangeBehavior: which changes the validator may apply to the output
  (defaults, trimming, type specific conversions) and how the output is
  structured (flattening, wrapping, keeping embedded trees).
- ValidationBehavior: which checks are performed.

Usage:
```python
change = ChangeBehavior(allow_defaults_on_update=True)
validation = ValidationBehavior(required=False)

tree.validate(change, validation)
```
"""

from dataclasses import dataclass, fields, replace

from updateconnector.errors import InvalidInputError


def _check_booleans(instance) -> None:
    for option in fields(instance):
        value = getattr(instance, option.name)
        if not isinstance(value, bool):
            raise InvalidInputError(
                f"{type(instance).__name__}.{option.name} must be a boolean, "
                f"got {value!r}."
            )


@dataclass(frozen=True)
class ChangeBehavior:
    """Changes allowed while validating, plus output structure options."""

    # Keep embedded ObjectTree values instead of replacing them by their
    # rendered {"Element": ...} structure.
    keep_embedded_as_trees: bool = False
    # Wrap the validated element(s) in {"Element": ...}.
    wrap_in_element_container: bool = False
    # Return a single element without its enclosing list.
    flatten_single: bool = True
    # Let the change options below also apply to embedded objects.
    allow_embedded_changes: bool = True
    allow_defaults_on_insert: bool = True
    allow_defaults_on_update: bool = False
    # Trim whitespace from string values.
    allow_reformat: bool = True
    # Type specific conversions (street name splitting, name derivation).
    allow_changes: bool = False

    def __post_init__(self):
        _check_booleans(self)

    @classmethod
    def no_changes(cls) -> "ChangeBehavior":
        """Structural defaults only; nothing in the data gets changed."""
        return cls().read_only()

    def read_only(self) -> "ChangeBehavior":
        """Same structural options, with every mutation option turned off."""
        return replace(
            self,
            allow_embedded_changes=False,
            allow_defaults_on_insert=False,
            allow_defaults_on_update=False,
            allow_reformat=False,
            allow_changes=False,
        )

    def defaults_allowed(self, action: str) -> bool:
        """Whether default values may be set for an element with this action."""
        return (action == "insert" and self.allow_defaults_on_insert) or (
            action == "update" and self.allow_defaults_on_update
        )


@dataclass(frozen=True)
class ValidationBehavior:
    """Checks performed while validating."""

    # Requiredness rules marked critical, and field value types.
    essential: bool = True
    # All requiredness rules.
    required: bool = True
    # Reject fields/objects/element keys that the schema does not declare.
    no_unknown: bool = True
    # Format checks done by specific types (e.g. phone numbers).
    format: bool = False

    def __post_init__(self):
        _check_booleans(self)

    @classmethod
    def nothing(cls) -> "ValidationBehavior":
        return cls(essential=False, required=False, no_unknown=False, format=False)

    @classmethod
    def for_input(cls) -> "ValidationBehavior":
        """Checks applied when raw data is added to a tree."""
        return cls(essential=True, required=False, no_unknown=True, format=False)

    @property
    def is_nothing(self) -> bool:
        return not (self.essential or self.required or self.no_unknown or self.format)

    def demands(self, required: bool, critical: bool) -> bool:
        """Whether a property with these markers must have a value."""
        return (required or critical) and (
            self.required or (critical and self.essential)
        )
