"""
Element Validator - Validates object tree elements for output

Validation is depth first: embedded objects are validated (and rendered)
before the fields of the element embedding them, so that type specific
field logic can rely on valid embedded data.

The elements stored in the tree are never changed; defaults, trimmed values
and rendered embedded objects only end up in the returned copies.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.builder.field_builder import build_field_value, is_identifier, is_scalar
from updateconnector.builder.object_tree import ObjectTree
from updateconnector.errors import (
    FieldTypeError,
    InvalidInputError,
    MissingFieldError,
    MissingIdentifierError,
    MissingReferenceError,
    TooManyElementsError,
    UnknownPropertyError,
    ValidationError,
)
from updateconnector.schema.models import ReferenceDefinition, TypeDefinition

logger = logging.getLogger(__name__)

ELEMENT_KEYS = ("Fields", "Objects")


class ElementValidator:
    """
    Validates the elements of one ObjectTree

    Subclasses (see updateconnector.types) override validate_fields() or
    validate_reference_fields() for type specific behavior.
    """

    def __init__(self, tree: ObjectTree):
        self.tree = tree

    @property
    def type_name(self) -> str:
        return self.tree.type_name

    def validate(
        self,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Validate all elements

        Args:
            change: Change behavior (default ChangeBehavior())
            validation: Validation behavior (default ValidationBehavior())

        Returns:
            A single element if flatten_single is set and there is one
            element, otherwise a list; wrapped in {"Element": ...} if
            wrap_in_element_container is set
        """
        change = change if change is not None else ChangeBehavior()
        elements = self.get_elements(change, validation)

        result: Any = elements
        if change.flatten_single and len(elements) == 1:
            result = elements[0]
        if change.wrap_in_element_container:
            result = {"Element": result}
        return result

    def get_elements(
        self,
        change: ChangeBehavior,
        validation: Optional[ValidationBehavior] = None,
    ) -> List[Dict[str, Any]]:
        """Validated copies of all elements, as a list."""
        validation = validation if validation is not None else ValidationBehavior()
        if not isinstance(change, ChangeBehavior):
            raise InvalidInputError(f"Change behavior must be a ChangeBehavior, got {change!r}.")
        if not isinstance(validation, ValidationBehavior):
            raise InvalidInputError(f"Validation behavior must be a ValidationBehavior, got {validation!r}.")

        return [
            self.validate_element(element, index, change, validation)
            for index, element in enumerate(self.tree.get_elements())
        ]

    # ========================================================================
    # ELEMENT
    # ========================================================================

    def validate_element(
        self,
        element: Dict[str, Any],
        element_index: int,
        change: ChangeBehavior,
        validation: ValidationBehavior,
    ) -> Dict[str, Any]:
        """
        Validate one element

        Args:
            element: Copy of a stored element (may be changed)
            element_index: Index of the element
            change: Change behavior
            validation: Validation behavior

        Returns:
            The validated element
        """
        descr = self.tree.describe_element(element_index)
        if not isinstance(element.get("Fields"), dict):
            raise ValidationError(f"{descr} has a missing or non-mapping 'Fields' property value.", type_name=self.type_name, element_index=element_index)
        if "Objects" in element and not isinstance(element["Objects"], dict):
            raise ValidationError(f"{descr} has a non-mapping 'Objects' property value.", type_name=self.type_name, element_index=element_index)

        definition = self.tree.get_definition(element, element_index)

        element = self.validate_reference_fields(element, element_index, definition, change, validation)
        element = self.validate_fields(element, element_index, definition, change, validation)

        if not validation.is_nothing:
            for name, value in element["Fields"].items():
                if value is not None and not is_scalar(value):
                    raise FieldTypeError(
                        f"'{name}' field value of {descr} must be scalar.",
                        type_name=self.type_name,
                        element_index=element_index,
                        property_name=name,
                    )
            self.validate_identifier(element, element_index, definition)

        if validation.no_unknown:
            self.validate_known_properties(element, element_index, definition)

        logger.debug(f"Validated {descr}")
        return element

    def validate_identifier(
        self, element: Dict[str, Any], element_index: int, definition: TypeDefinition
    ) -> None:
        """An identifier must be a string/int; only inserts may lack one."""
        if not definition.id_property:
            return
        id_key = definition.id_key
        descr = self.tree.describe_element(element_index)
        if element.get(id_key) is not None:
            if not is_identifier(element[id_key]):
                raise FieldTypeError(
                    f"'{id_key}' property in {descr} must hold integer/string value.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=id_key,
                )
            return

        # Inserts may be auto-numbered.
        action = self.tree.get_action(element_index)
        if action != "insert":
            raise MissingIdentifierError(
                f"'{id_key}' property in {descr} must have a value, or Action '{action}' must be set to 'insert'.",
                type_name=self.type_name,
                element_index=element_index,
                property_name=id_key,
            )

    def validate_known_properties(
        self, element: Dict[str, Any], element_index: int, definition: TypeDefinition
    ) -> None:
        descr = self.tree.describe_element(element_index)
        unknown = [name for name in element["Fields"] if name not in definition.fields]
        if unknown:
            raise UnknownPropertyError(
                f"Unknown field(s) encountered in {descr}: {', '.join(unknown)}",
                type_name=self.type_name,
                element_index=element_index,
                property_name=unknown[0],
            )
        unknown = [name for name in element.get("Objects", {}) if name not in definition.references]
        if unknown:
            raise UnknownPropertyError(
                f"Unknown object(s) encountered in {descr}: {', '.join(unknown)}",
                type_name=self.type_name,
                element_index=element_index,
                property_name=unknown[0],
            )
        known = set(ELEMENT_KEYS)
        if definition.id_property:
            known.add(definition.id_key)
        unknown = [str(key) for key in element if key not in known]
        if unknown:
            raise UnknownPropertyError(
                f"Unknown properties encountered in {descr}: {', '.join(unknown)}",
                type_name=self.type_name,
                element_index=element_index,
                property_name=unknown[0],
            )

    # ========================================================================
    # EMBEDDED OBJECTS
    # ========================================================================

    def validate_reference_fields(
        self,
        element: Dict[str, Any],
        element_index: int,
        definition: TypeDefinition,
        change: ChangeBehavior,
        validation: ValidationBehavior,
    ) -> Dict[str, Any]:
        """
        Check requiredness of embedded objects, set defaults and validate them

        Unless keep_embedded_as_trees is set, each embedded ObjectTree is
        replaced by {"Element": <validated element(s)>}.
        """
        if not definition.references:
            return element

        action = self.tree.get_action(element_index)
        defaults_allowed = change.defaults_allowed(action)
        descr = self.tree.describe_element(element_index)
        objects = dict(element.get("Objects", {}))

        for name, reference in definition.references.items():
            # A None default means 'no default'.
            default_available = defaults_allowed and reference.default is not None
            if (
                validation.demands(reference.required, reference.critical)
                and objects.get(name) is None
                and (not default_available or name in objects)
            ):
                raise MissingReferenceError(
                    f"No value given for required {self._label(name, reference.alias)} object embedded in {descr}.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=name,
                )

            if default_available and (
                name not in objects or (reference.is_required and objects[name] is None)
            ):
                objects[name] = self.tree.create_default_object(name, reference, element_index)

            if objects.get(name) is not None:
                rendered = self.validate_object_value(
                    objects[name], name, reference, element_index, change, validation
                )
                if not change.keep_embedded_as_trees:
                    objects[name] = {"Element": rendered}

        if objects:
            element["Objects"] = objects
        return element

    def validate_object_value(
        self,
        value: Any,
        name: str,
        reference: ReferenceDefinition,
        element_index: int,
        change: ChangeBehavior,
        validation: ValidationBehavior,
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Validate an embedded object

        Returns:
            The single validated element for single-valued references, or
            the list of validated elements for references allowing multiple
        """
        descr = self.tree.describe_element(element_index)
        label = self._label(name, reference.alias)
        if not isinstance(value, ObjectTree):
            raise ValidationError(
                f"{label} object embedded in {descr} must be an ObjectTree.",
                type_name=self.type_name,
                element_index=element_index,
                property_name=name,
            )

        embedded_change = change if change.allow_embedded_changes else change.read_only()
        elements = value.get_elements(embedded_change, validation)

        if reference.multiple:
            return elements
        if len(elements) > 1:
            raise TooManyElementsError(
                f"{label} object embedded in {descr} contains {len(elements)} elements "
                f"but can only contain a single element.",
                type_name=self.type_name,
                element_index=element_index,
                property_name=name,
            )
        if not elements:
            raise ValidationError(
                f"{label} object embedded in {descr} contains no elements.",
                type_name=self.type_name,
                element_index=element_index,
                property_name=name,
            )
        return elements[0]

    # ========================================================================
    # FIELDS
    # ========================================================================

    def validate_fields(
        self,
        element: Dict[str, Any],
        element_index: int,
        definition: TypeDefinition,
        change: ChangeBehavior,
        validation: ValidationBehavior,
    ) -> Dict[str, Any]:
        """
        Check required fields, set defaults and validate field values

        - Requiredness is only checked for action "insert".
        - An absent value gets the default (if defaults are allowed for the
          action). A None value only gets it if the field is required; a
          required field holding None fails unless the default is None too.
        """
        action = self.tree.get_action(element_index)
        defaults_allowed = change.defaults_allowed(action)
        descr = self.tree.describe_element(element_index)
        fields = element["Fields"]

        for name, field_definition in definition.fields.items():
            default_available = defaults_allowed and field_definition.has_default
            if (
                action == "insert"
                and validation.demands(field_definition.required, field_definition.critical)
                and fields.get(name) is None
                and (
                    not default_available
                    or (name in fields and field_definition.default is not None)
                )
            ):
                raise MissingFieldError(
                    f"No value given for required {self._label(name, field_definition.alias)} field of {descr}.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=name,
                )

            if default_available and (
                name not in fields or (field_definition.is_required and fields[name] is None)
            ):
                fields[name] = field_definition.default

            if fields.get(name) is not None:
                fields[name] = self.validate_field_value(
                    fields[name], name, field_definition, element_index, change, validation
                )

        return element

    def validate_field_value(
        self,
        value: Any,
        name: str,
        field_definition,
        element_index: int,
        change: ChangeBehavior,
        validation: ValidationBehavior,
    ) -> Any:
        return build_field_value(
            value,
            field_definition,
            change,
            validation,
            label=f"{self._label(name, field_definition.alias)} field of {self.tree.describe_element(element_index)}",
        )

    @staticmethod
    def _label(name: str, alias: Optional[str]) -> str:
        return f"'{name}'" + (f" ({alias})" if alias else "")
