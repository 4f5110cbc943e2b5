"""Models describing the schema of one object type."""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from updateconnector.errors import SchemaError


class _NoDefault:
    """Marker for 'no default value'; None is a valid field default."""

    def __repr__(self):
        return "NO_DEFAULT"

    def __deepcopy__(self, memo):
        return self


NO_DEFAULT = _NoDefault()

FIELD_KINDS = ("boolean", "integer", "decimal", "date")


@dataclass(frozen=True)
class FieldDefinition:
    """Represents a field of an object type."""

    alias: Optional[str] = None
    kind: Optional[str] = None  # "boolean", "integer", "decimal", "date"
    required: bool = False
    critical: bool = False  # required even when only essential checks run
    default: Any = NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_required(self) -> bool:
        return self.required or self.critical

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDefinition":
        kind = data.get("type")
        if kind is not None and kind not in FIELD_KINDS:
            raise SchemaError(f"Unknown field type '{kind}'.")
        return cls(
            alias=data.get("alias"),
            kind=kind,
            required=bool(data.get("required", False)),
            critical=bool(data.get("critical", False)),
            default=data["default"] if "default" in data else NO_DEFAULT,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.alias:
            result["alias"] = self.alias
        if self.kind:
            result["type"] = self.kind
        if self.required:
            result["required"] = True
        if self.critical:
            result["critical"] = True
        if self.has_default:
            result["default"] = self.default
        return result


@dataclass(frozen=True)
class ReferenceDefinition:
    """Represents a reference to an embedded object."""

    target_type: Optional[str] = None  # defaults to the reference name
    alias: Optional[str] = None
    multiple: bool = False
    required: bool = False
    critical: bool = False
    default: Any = None  # raw element data or an ObjectTree; None = no default

    @property
    def is_required(self) -> bool:
        return self.required or self.critical

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReferenceDefinition":
        return cls(
            target_type=data.get("type"),
            alias=data.get("alias"),
            multiple=bool(data.get("multiple", False)),
            required=bool(data.get("required", False)),
            critical=bool(data.get("critical", False)),
            default=data.get("default"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.target_type:
            result["type"] = self.target_type
        if self.alias:
            result["alias"] = self.alias
        if self.multiple:
            result["multiple"] = True
        if self.required:
            result["required"] = True
        if self.critical:
            result["critical"] = True
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass
class TypeDefinition:
    """Represents the complete schema of an object type."""

    name: str
    id_property: Optional[str] = None
    fields: Dict[str, FieldDefinition] = field(default_factory=dict)
    references: Dict[str, ReferenceDefinition] = field(default_factory=dict)
    # Fake ISO country code field -> real country code field.
    country_fields: Dict[str, str] = field(default_factory=dict)

    @property
    def id_key(self) -> Optional[str]:
        """Element key holding the identifier, e.g. '@SbId'."""
        return f"@{self.id_property}" if self.id_property else None

    def resolve_field_name(self, name: str) -> Optional[str]:
        """Returns the canonical field name for a name or alias."""
        if name in self.fields:
            return name
        for real_name, definition in self.fields.items():
            if definition.alias == name:
                return real_name
        return None

    def resolve_reference_name(self, name: str) -> Optional[str]:
        """Returns the canonical reference name for a name or alias."""
        if name in self.references:
            return name
        for real_name, definition in self.references.items():
            if definition.alias == name:
                return real_name
        return None

    def target_type(self, reference_name: str) -> str:
        return self.references[reference_name].target_type or reference_name

    def copy(self) -> "TypeDefinition":
        """Copy whose field/reference tables can be changed independently."""
        return replace(
            self,
            fields=dict(self.fields),
            references=dict(self.references),
            country_fields=dict(self.country_fields),
        )

    def set_field(self, name: str, **changes) -> None:
        """Changes properties of one field, adding the field if needed."""
        current = self.fields.get(name, FieldDefinition())
        self.fields[name] = replace(current, **changes)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "TypeDefinition":
        if not isinstance(data, dict):
            raise SchemaError(f"Definition for '{name}' must be a mapping.")
        raw_fields = data.get("fields")
        if not isinstance(raw_fields, dict):
            raise SchemaError(f"'{name}' object has no / a non-mapping 'fields' definition.")
        raw_references = data.get("objects", {})
        if not isinstance(raw_references, dict):
            raise SchemaError(f"'{name}' object has a non-mapping 'objects' definition.")

        fields_ = {}
        for field_name, properties in raw_fields.items():
            if not isinstance(properties, dict):
                raise SchemaError(f"'{name}' object has a non-mapping definition for field '{field_name}'.")
            fields_[field_name] = FieldDefinition.from_dict(properties)

        references = {}
        for ref_name, properties in raw_references.items():
            if not isinstance(properties, dict):
                raise SchemaError(f"'{name}' object has a non-mapping definition for object '{ref_name}'.")
            references[ref_name] = ReferenceDefinition.from_dict(properties)

        return cls(
            name=name,
            id_property=data.get("id_property") or None,
            fields=fields_,
            references=references,
            country_fields=dict(data.get("iso_country_fields", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.id_property:
            result["id_property"] = self.id_property
        if self.country_fields:
            result["iso_country_fields"] = dict(self.country_fields)
        if self.references:
            result["objects"] = {name: ref.to_dict() for name, ref in self.references.items()}
        result["fields"] = {name: f.to_dict() for name, f in self.fields.items()}
        return result
