"""
Schema Registry - Per-type field and reference definitions

Definitions are plain data. They are loaded from Python dicts (see
definitions.py for the built-in table) or from JSON files using the same
structure:

```json
{
    "KnSubject": {
        "id_property": "SbId",
        "objects": {"KnSubjectLink": {"alias": "subject_link"}},
        "fields": {"StId": {"alias": "type", "type": "integer", "required": true}}
    }
}
```
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from updateconnector.errors import SchemaError
from .models import TypeDefinition

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Read-only lookup of type definitions by type name."""

    def __init__(self, definitions: Optional[Dict[str, TypeDefinition]] = None):
        self._definitions: Dict[str, TypeDefinition] = dict(definitions or {})

    def register(self, name: str, definition: Union[TypeDefinition, Dict[str, Any]]) -> None:
        """Add or replace the definition for a type."""
        if isinstance(definition, dict):
            definition = TypeDefinition.from_dict(name, definition)
        if not isinstance(definition, TypeDefinition):
            raise SchemaError(f"Definition for '{name}' must be a TypeDefinition or a mapping.")
        self._definitions[name] = definition

    def update(self, data: Mapping[str, Dict[str, Any]]) -> None:
        for name, definition in data.items():
            self.register(name, definition)

    def has_type(self, name: str) -> bool:
        return name in self._definitions

    def type_names(self) -> List[str]:
        return sorted(self._definitions)

    def get_definition(
        self,
        type_name: str,
        parent_type: str = "",
        element: Optional[Dict[str, Any]] = None,
        element_index: Optional[int] = None,
    ) -> TypeDefinition:
        """
        Get the definition for a type

        The registry holds static data, so parent_type/element/element_index
        do not change the result here; they are passed on by object trees
        whose type has a conditional definition (see updateconnector.types).

        Returns:
            A copy of the definition, safe to modify by the caller

        Raises:
            SchemaError: If no definition is registered for the type
        """
        try:
            definition = self._definitions[type_name]
        except KeyError:
            raise SchemaError(
                f"No property definitions found for '{type_name}' object.",
                type_name=type_name,
            ) from None
        return definition.copy()

    @classmethod
    def from_dict(cls, data: Mapping[str, Dict[str, Any]]) -> "SchemaRegistry":
        registry = cls()
        registry.update(data)
        return registry

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "SchemaRegistry":
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SchemaError(f"Cannot load schema file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SchemaError(f"Schema file {path} must contain a JSON object.")

        registry = cls.from_dict(data)
        logger.info(f"Loaded {len(data)} type definitions from {path}")
        return registry

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: d.to_dict() for name, d in sorted(self._definitions.items())}


def default_registry(schema_file: Optional[Union[str, Path]] = None) -> SchemaRegistry:
    """
    Registry with the built-in definitions

    Args:
        schema_file: Optional JSON file whose definitions are added to (and
            override) the built-in ones
    """
    from .definitions import DEFINITIONS

    registry = SchemaRegistry.from_dict(DEFINITIONS)
    if schema_file:
        extra = SchemaRegistry.from_json_file(schema_file)
        for name in extra.type_names():
            registry.register(name, extra.get_definition(name))
    return registry
