"""
Object Tree - In-memory representation of one Update Connector object

An ObjectTree holds one or more elements of a single type. Each element is
a plain dict shaped like the JSON that is eventually sent:

```python
{
    "@SbId": 5,                       # identifier, if the type has one
    "Fields": {"StId": 1, "Ds": "x"},  # canonical field name -> scalar/None
    "Objects": {"KnSubjectLink": ObjectTree(...)},
}
```

Raw input is keyed by field names or aliases; add_elements() normalizes it
into this structure, recursively creating embedded ObjectTrees (of the
concrete class registered for their type in ObjectTreeFactory).
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.errors import (
    AmbiguousActionError,
    ElementIndexError,
    InvalidActionError,
    InvalidInputError,
    SchemaError,
    UnknownPropertyError,
    UnmappedFieldsError,
)
from updateconnector.schema.models import ReferenceDefinition, TypeDefinition
from updateconnector.schema.registry import SchemaRegistry, default_registry
from .field_builder import build_field_value, is_identifier

logger = logging.getLogger(__name__)

ACTIONS = ("", "insert", "update", "delete")

# Accepted on input, case insensitive.
ACTION_SYNONYMS = {
    "put": "update",
    "post": "insert",
}

ID_ALIAS = "#id"


def normalize_action(action: Any) -> str:
    """Returns the canonical action tag; raises InvalidActionError."""
    if not isinstance(action, str):
        raise InvalidActionError(f"Unknown action value {action!r}.")
    normalized = action.lower()
    normalized = ACTION_SYNONYMS.get(normalized, normalized)
    if normalized not in ACTIONS:
        raise InvalidActionError(f"Unknown action value {action!r}.")
    return normalized


def _is_element_collection(data: Mapping) -> bool:
    """A mapping whose values are all mappings/lists holds several elements."""
    if not data:
        return False
    return all(isinstance(value, (Mapping, list, tuple)) for value in data.values())


class ObjectTree:
    """
    Elements of one object type, plus their action(s)

    Usage:
    ```python
    tree = ObjectTree("KnSubject", {"type": 1, "description": "Note"}, "insert")
    tree.get_field("Ds")   # "Note"
    tree.render("xml", {"pretty": True})
    ```
    """

    # Validator class used for this tree; None means ElementValidator.
    validator_class = None

    def __init__(
        self,
        type_name: str,
        elements: Any = None,
        action: str = "",
        validation: Optional[ValidationBehavior] = None,
        parent_type: str = "",
        registry: Optional[SchemaRegistry] = None,
    ):
        """
        Initialize ObjectTree

        Args:
            type_name: Object type, a key in the schema registry
            elements: Raw element data; one element or a list/mapping of them
            action: "insert", "update", "delete" or ""; "post"/"put" accepted
            validation: Checks done while adding elements
            parent_type: Type of the object this one is embedded in
            registry: Schema registry; defaults to the built-in definitions
        """
        if not type_name or not isinstance(type_name, str):
            raise InvalidInputError("Object type must be a non-empty string.")
        self._type_name = type_name
        self._parent_type = parent_type or ""
        self.registry = registry if registry is not None else default_registry()
        self._actions: Dict[int, str] = {}
        self._elements: List[Dict[str, Any]] = []

        # Fail early for unknown types.
        self.get_definition()
        self.set_action(action)
        if elements is not None:
            self.add_elements(elements, validation)

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def parent_type(self) -> str:
        return self._parent_type

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._type_name}: {len(self._elements)} element(s)>"

    def __deepcopy__(self, memo):
        clone = self.__class__.__new__(self.__class__)
        memo[id(self)] = clone
        for key, value in self.__dict__.items():
            # The registry is read-only and shared.
            setattr(clone, key, value if key == "registry" else copy.deepcopy(value, memo))
        return clone

    def describe_element(self, element_index: Optional[int] = None) -> str:
        descr = f"'{self._type_name}' element"
        if element_index:
            descr += f" with index {element_index + 1}"
        return descr

    # ========================================================================
    # SCHEMA
    # ========================================================================

    def get_definition(
        self,
        element: Optional[Dict[str, Any]] = None,
        element_index: Optional[int] = None,
    ) -> TypeDefinition:
        """
        Get the definition for this tree's type

        Subclasses override this for definitions that depend on the parent
        type, the action or the values in an element.

        Args:
            element: Element being validated, if any
            element_index: Index of that element
        """
        return self.registry.get_definition(
            self._type_name, self._parent_type, element, element_index
        )

    # ========================================================================
    # ACTIONS
    # ========================================================================

    def get_action(self, element_index: Optional[int] = None) -> str:
        """
        Get the action for an element

        Raises:
            ElementIndexError: No action or element exists at the index
            AmbiguousActionError: No index given while different actions are set
        """
        if not self._actions:
            return ""
        if element_index is not None and element_index in self._actions:
            return self._actions[element_index]
        if element_index is not None and not 0 <= element_index < len(self._elements):
            raise ElementIndexError(
                f"No action or element defined for index {element_index}.",
                type_name=self._type_name,
                element_index=element_index,
            )

        unique = set(self._actions.values())
        if len(unique) > 1:
            raise AmbiguousActionError(
                "Multiple different action values are set, so get_action() "
                "has to be called with a valid index.",
                type_name=self._type_name,
            )
        return unique.pop()

    def get_actions(self) -> Dict[int, str]:
        return dict(self._actions)

    def set_action(
        self,
        action: str,
        set_embedded: bool = True,
        element_index: Optional[int] = None,
    ) -> None:
        """
        Set the action for all elements or for one element

        Args:
            action: "insert", "update", "delete" or ""
            set_embedded: Also set the action in embedded objects of the
                targeted element(s), recursively
            element_index: Only set the action for this element
        """
        action = normalize_action(action)
        if element_index is not None and (
            not isinstance(element_index, int) or element_index < 0
        ):
            raise ElementIndexError(
                f"Invalid element index {element_index!r}.",
                type_name=self._type_name,
            )

        if element_index is None:
            if not self._actions:
                self._actions = {0: action}
            else:
                for index in self._actions:
                    self._actions[index] = action
        else:
            self._actions[element_index] = action

        if set_embedded:
            for index, element in enumerate(self._elements):
                if element_index is None or index == element_index:
                    for embedded in element.get("Objects", {}).values():
                        if isinstance(embedded, ObjectTree):
                            embedded.set_action(action, True)

    # ========================================================================
    # ELEMENT ACCESS
    # ========================================================================

    def _check_element(
        self,
        element_index: int = 0,
        allow_zero_index: bool = False,
        allow_next_index: bool = False,
    ) -> Dict[str, Any]:
        if 0 <= element_index < len(self._elements):
            return self._elements[element_index]
        if element_index == 0 and allow_zero_index:
            return {}
        if allow_next_index and element_index == len(self._elements):
            return {}
        raise ElementIndexError(
            f"No element present with index {element_index}.",
            type_name=self._type_name,
            element_index=element_index,
        )

    def _element_for_update(self, element_index: int) -> Dict[str, Any]:
        """Existing element, or a new empty one appended at the next index."""
        if element_index == len(self._elements):
            self._elements.append({"Fields": {}})
        return self._elements[element_index]

    def _resolve_field(self, name: str, definition: TypeDefinition) -> str:
        canonical = definition.resolve_field_name(name)
        if canonical is None:
            raise UnknownPropertyError(
                f"'{self._type_name}' object has no '{name}' field definition.",
                type_name=self._type_name,
                property_name=name,
            )
        return canonical

    def _resolve_reference(self, name: str, definition: TypeDefinition) -> str:
        canonical = definition.resolve_reference_name(name)
        if canonical is None:
            raise UnknownPropertyError(
                f"'{self._type_name}' object has no '{name}' (embedded-)object definition.",
                type_name=self._type_name,
                property_name=name,
            )
        return canonical

    def get_id(self, element_index: int = 0) -> Any:
        element = self._check_element(element_index)
        definition = self.get_definition(element, element_index)
        if not definition.id_property:
            raise SchemaError(
                f"'{self._type_name}' object has no 'id_property' definition.",
                type_name=self._type_name,
            )
        return element.get(definition.id_key)

    def set_id(self, value: Any, element_index: int = 0) -> None:
        if not is_identifier(value):
            raise InvalidInputError("Identifier value must be an integer or string.")
        element = self._check_element(element_index, allow_next_index=True)
        definition = self.get_definition(element, element_index)
        if not definition.id_property:
            raise SchemaError(
                f"'{self._type_name}' object has no 'id_property' definition.",
                type_name=self._type_name,
            )
        element = self._element_for_update(element_index)
        key = definition.id_key
        # Keep the identifier as the first key.
        rest = {k: v for k, v in element.items() if k != key}
        self._elements[element_index] = {key: value, **rest}

    def get_field(self, name: str, element_index: int = 0, return_default: bool = False) -> Any:
        """
        Get a field value

        Args:
            name: Field name or alias
            element_index: Element index
            return_default: Return the field's default if no value is set
                (also when no element exists yet at index 0)
        """
        element = self._check_element(element_index, allow_zero_index=return_default)
        definition = self.get_definition(element or None, element_index)
        name = self._resolve_field(name, definition)

        fields = element.get("Fields", {})
        if name in fields:
            return fields[name]
        field_definition = definition.fields[name]
        if return_default and field_definition.has_default:
            return field_definition.default
        return None

    def set_field(
        self,
        name: str,
        value: Any,
        element_index: int = 0,
        validation: Optional[ValidationBehavior] = None,
    ) -> None:
        element = self._check_element(element_index, allow_next_index=True)
        definition = self.get_definition(element or None, element_index)
        name = self._resolve_field(name, definition)
        value = build_field_value(
            value,
            definition.fields[name],
            ChangeBehavior.no_changes(),
            validation or ValidationBehavior.for_input(),
            label=f"'{name}' field of {self.describe_element(element_index)}",
            for_input=True,
        )
        self._element_for_update(element_index)["Fields"][name] = value

    def get_object(self, name: str, element_index: int = 0, return_default: bool = False):
        """
        Get an embedded object

        Args:
            name: Reference name or alias
            element_index: Element index
            return_default: Create the reference's default object if none is
                set (a new tree every call)

        Returns:
            ObjectTree or None
        """
        element = self._check_element(element_index, allow_zero_index=return_default)
        definition = self.get_definition(element or None, element_index)
        name = self._resolve_reference(name, definition)

        embedded = element.get("Objects", {}).get(name)
        if embedded is not None:
            return embedded
        if return_default and definition.references[name].default is not None:
            return self.create_default_object(name, definition.references[name], element_index)
        return None

    def set_object(
        self,
        name: str,
        data: Any,
        action: Optional[str] = None,
        element_index: int = 0,
        validation: Optional[ValidationBehavior] = None,
    ) -> None:
        """
        Set an embedded object

        Args:
            name: Reference name or alias
            data: Raw element data, or an ObjectTree
            action: Action for the embedded object; defaults to this
                element's action
            element_index: Element index
            validation: Checks done while adding the embedded elements
        """
        element = self._check_element(element_index, allow_next_index=True)
        definition = self.get_definition(element or None, element_index)
        name = self._resolve_reference(name, definition)

        if isinstance(data, ObjectTree):
            embedded = data
        else:
            if action is None:
                action = self.resolve_action(element_index)
            embedded = self._create_embedded(
                definition.target_type(name), data, action, validation or ValidationBehavior.for_input()
            )
        self._element_for_update(element_index).setdefault("Objects", {})[name] = embedded

    def create_default_object(
        self, name: str, reference: ReferenceDefinition, element_index: int = 0
    ) -> "ObjectTree":
        """New embedded object from a reference's default value."""
        default = reference.default
        if isinstance(default, ObjectTree):
            return copy.deepcopy(default)
        if not isinstance(default, (Mapping, list, tuple)):
            raise SchemaError(
                f"Default value for '{name}' object embedded in "
                f"{self.describe_element(element_index)} must be a mapping or list.",
                type_name=self._type_name,
                property_name=name,
            )
        try:
            return self._create_embedded(
                reference.target_type or name,
                default,
                self.resolve_action(element_index),
                ValidationBehavior.for_input(),
            )
        except InvalidInputError as e:
            raise SchemaError(f"Invalid default for '{name}' object: {e}") from e

    def resolve_action(self, element_index: Optional[int] = None) -> str:
        """Action at the index if set there, otherwise the single action."""
        try:
            return self.get_action(element_index)
        except ElementIndexError:
            return self.get_action()

    def _create_embedded(self, type_name: str, data: Any, action: str, validation: ValidationBehavior):
        from .factory import ObjectTreeFactory

        return ObjectTreeFactory.create(
            type_name,
            data,
            action,
            validation,
            parent_type=self._type_name,
            registry=self.registry,
        )

    # ========================================================================
    # NORMALIZATION
    # ========================================================================

    def set_elements(self, data: Any, validation: Optional[ValidationBehavior] = None) -> None:
        """Replace all elements by new raw data."""
        self._elements = []
        self.add_elements(data, validation)

    def add_elements(self, data: Any, validation: Optional[ValidationBehavior] = None) -> None:
        """
        Add raw element data

        Args:
            data: One raw element (a mapping keyed by field/reference names
                or aliases) or a list/mapping of raw elements
            validation: Checks done while adding; no_unknown rejects keys that
                match no identifier/field/reference (UnmappedFieldsError),
                essential checks field value types

        Raises:
            InvalidInputError: If the data has the wrong shape
        """
        if validation is None:
            validation = ValidationBehavior.for_input()

        definition = self.get_definition()
        for key, raw_element in self._split_elements(data):
            element = self._normalize_element(raw_element, key, definition, validation)
            self._elements.append(element)
            logger.debug(
                f"Normalized {self.describe_element(len(self._elements) - 1)}: "
                f"{len(element['Fields'])} field(s), {len(element.get('Objects', {}))} object(s)"
            )

    def _split_elements(self, data: Any) -> List[Tuple[Any, Any]]:
        if isinstance(data, (list, tuple)):
            return list(enumerate(data))
        if isinstance(data, Mapping):
            if _is_element_collection(data):
                return list(data.items())
            return [(None, data)]
        raise InvalidInputError(
            f"Data for '{self._type_name}' object must be a mapping or list, "
            f"got {type(data).__name__}.",
            type_name=self._type_name,
        )

    def _normalize_element(
        self,
        raw_element: Any,
        key: Any,
        definition: TypeDefinition,
        validation: ValidationBehavior,
    ) -> Dict[str, Any]:
        descr = f"'{self._type_name}' element" + (f" with key {key}" if key else "")
        if not isinstance(raw_element, Mapping):
            raise InvalidInputError(f"{descr} must be a mapping.", type_name=self._type_name)

        raw = dict(raw_element)
        next_index = len(self._elements)
        element: Dict[str, Any] = {}

        if definition.id_property:
            id_key = definition.id_key
            if id_key in raw:
                value = raw.pop(id_key)
                if ID_ALIAS in raw:
                    alias_value = raw.pop(ID_ALIAS)
                    if alias_value != value:
                        raise InvalidInputError(
                            f"{descr} has the ID field provided by both its field name "
                            f"{id_key} and alias {ID_ALIAS}.",
                            type_name=self._type_name,
                            property_name=id_key,
                        )
                    logger.warning(f"{descr} has equal ID values in {id_key} and {ID_ALIAS}")
                element[id_key] = value
            elif ID_ALIAS in raw:
                element[id_key] = raw.pop(ID_ALIAS)

            if id_key in element and not is_identifier(element[id_key]):
                raise InvalidInputError(
                    f"'{id_key}' property in {descr} must hold integer/string value.",
                    type_name=self._type_name,
                    property_name=id_key,
                )

        element["Fields"] = {}
        objects: Dict[str, Any] = {}

        for name, reference in definition.references.items():
            present, value = self._take_value(raw, name, reference.alias, descr)
            if present:
                objects[name] = self._normalize_object_value(
                    value, name, reference, next_index, validation, descr
                )

        for name, field_definition in definition.fields.items():
            present, value = self._take_value(raw, name, field_definition.alias, descr)
            if present:
                element["Fields"][name] = build_field_value(
                    value,
                    field_definition,
                    ChangeBehavior.no_changes(),
                    validation,
                    label=f"{self._label(name, field_definition.alias)} field of {descr}",
                    for_input=True,
                )

        if raw:
            keys = list(raw)
            if validation.no_unknown:
                raise UnmappedFieldsError(
                    f"Unmapped element values provided for {descr}: keys are "
                    f"'{', '.join(str(k) for k in keys)}'.",
                    keys=keys,
                    type_name=self._type_name,
                )
            logger.debug(f"Keeping unmapped keys in {descr}: {keys}")
            element["Fields"].update(raw)

        if objects:
            element["Objects"] = objects
        return element

    @staticmethod
    def _label(name: str, alias: Optional[str]) -> str:
        return f"'{name}'" + (f" ({alias})" if alias else "")

    def _take_value(self, raw: Dict[str, Any], name: str, alias: Optional[str], descr: str):
        by_alias = alias is not None and alias != name and alias in raw
        if name in raw:
            if by_alias:
                raise InvalidInputError(
                    f"{descr} has a value provided by both its property name {name} and alias {alias}.",
                    type_name=self._type_name,
                    property_name=name,
                )
            return True, raw.pop(name)
        if by_alias:
            return True, raw.pop(alias)
        return False, None

    def _normalize_object_value(
        self,
        value: Any,
        name: str,
        reference: ReferenceDefinition,
        element_index: int,
        validation: ValidationBehavior,
        descr: str,
    ) -> "ObjectTree":
        if isinstance(value, ObjectTree):
            return value
        if not isinstance(value, (Mapping, list, tuple)):
            raise InvalidInputError(
                f"Value for {self._label(name, reference.alias)} object embedded in {descr} "
                f"must be a mapping or list.",
                type_name=self._type_name,
                property_name=name,
            )
        # The element does not exist yet; its action may have been set anyway.
        action = self.resolve_action(element_index)
        return self._create_embedded(reference.target_type or name, value, action, validation)

    # ========================================================================
    # VALIDATION / OUTPUT
    # ========================================================================

    def validator(self):
        """Validator for this tree (an ElementValidator or subclass)."""
        validator_class = self.validator_class
        if validator_class is None:
            from updateconnector.validator.element_validator import ElementValidator

            validator_class = ElementValidator
        return validator_class(self)

    def get_elements(
        self,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get the elements

        Without arguments, returns copies of the elements as stored (embedded
        objects are still ObjectTrees). With a change behavior, returns the
        validated elements as a list; flattening/wrapping is not applied.
        """
        if change is None:
            if validation is not None:
                raise InvalidInputError("A validation behavior can only be passed together with a change behavior.")
            return [self._copy_element(element) for element in self._elements]
        return self.validator().get_elements(change, validation)

    @staticmethod
    def _copy_element(element: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(element)
        if isinstance(result.get("Fields"), dict):
            result["Fields"] = dict(result["Fields"])
        if isinstance(result.get("Objects"), dict):
            result["Objects"] = dict(result["Objects"])
        return result

    def validate(
        self,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ):
        """Validated element(s), flattened/wrapped as the change behavior says."""
        return self.validator().validate(change, validation)

    def render(
        self,
        format: str = "json",
        format_options: Optional[Dict[str, Any]] = None,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> str:
        from updateconnector.exporter import render

        return render(self, format, format_options, change, validation)
