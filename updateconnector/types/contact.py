"""
KnContact, KnPerson, KnOrganisation

These three types share one tree class because their definitions depend on
each other: which fields and embedded objects exist (and which defaults
apply) depends on the parent type, the action and the element's values.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

from updateconnector.behavior import ChangeBehavior
from updateconnector.errors import AmbiguousActionError, InvalidFormatError, SchemaError
from updateconnector.schema.models import FieldDefinition, ReferenceDefinition, TypeDefinition
from .country import CountryTree, CountryValidator

logger = logging.getLogger(__name__)

# Last name prefixes split off into 'Is'. Order matters: 'van de ' before 'van '.
NAME_PREFIXES = (
    "de ",
    "v.",
    "v ",
    "v/d ",
    "v.d.",
    "van de ",
    "van der ",
    "van ",
    "'t ",
)

INITIALS_NAME_PATTERN = re.compile(r"^[A-Za-z \-]+$")

# Area code (0, +31 or '+31 (0)' prefixed; non-mobile codes may be between
# brackets) plus local number. Tried in order: mobile, 3-digit and 4-digit
# area codes.
DUTCH_PHONE_PATTERNS = [
    re.compile(
        r"""^\s*
        ((?:\+31[-\s]?(?:\(0\))?\s?|0)6)
        [-\s]* ([1-9]\s*(?:[0-9]\s*){7})
        \s*$""",
        re.VERBOSE,
    ),
    re.compile(
        r"""^\s*
        ((?:\+31[-\s]?(?:\(0\))?\s?|0)[1-5789][0-9]
        | \(0[1-5789][0-9]\))
        [-\s]* ([1-9]\s*(?:[0-9]\s*){6})
        \s*$""",
        re.VERBOSE,
    ),
    re.compile(
        r"""^\s*
        ((?:\+31[-\s]?(?:\(0\))?\s?|0)[1-5789][0-9]{2}
        | \(0[1-5789][0-9]{2}\))
        [-\s]* ([1-9]\s*(?:[0-9]\s*){5})
        \s*$""",
        re.VERBOSE,
    ),
]

PHONE_FIELDS = ("TeNr", "TeN2", "MbNr", "MbN2", "FaNr")

# Fields that are 'operation modifiers' rather than data; their default is
# also sent for actions other than insert.
MATCH_FIELDS = ("MatchOga", "MatchPer")


def convert_name_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Derive prefix, initials and search name from first / last name

    Values that are already set are left alone.

    Returns:
        New fields dict
    """
    fields = dict(fields)

    if fields.get("LaNm") and not fields.get("Is"):
        fields["LaNm"] = str(fields["LaNm"]).strip()
        name = fields["LaNm"].lower()
        for prefix in NAME_PREFIXES:
            if name.startswith(prefix):
                fields["Is"] = prefix.rstrip()
                fields["LaNm"] = fields["LaNm"][len(prefix):].strip()
                break

    if fields.get("FiNm") and not fields.get("In"):
        first_name = str(fields["FiNm"]).strip()
        fields["FiNm"] = first_name
        if len(first_name) == 1 or (
            len(first_name) < 16 and "." in first_name and " " not in first_name
        ):
            # Only initials; move them.
            fields["In"] = first_name.upper() + "." if len(first_name) == 1 else first_name
            del fields["FiNm"]
        elif INITIALS_NAME_PATTERN.match(first_name):
            fields["In"] = "".join(
                part[0].upper() + "." for part in re.split(r"[- ]+", first_name) if part
            )

    if fields.get("LaNm") and not fields.get("SeNm"):
        fields["SeNm"] = str(fields["LaNm"]).upper()[:10]

    return fields


def validate_dutch_phone_number(phone_number: str) -> Optional[Tuple[str, str]]:
    """
    Check if a string is a valid Dutch phone number

    Accepts e.g. "06-12345678", "+31 (0)10-1234567", "(020) 123 4567",
    "0221 123 456"; rejects e.g. "010-12345678", "061-2345678",
    "+31 010-1234567".

    Returns:
        (area code, local number) with the area code normalized to start
        with 0 and without separators; the local number is not reformatted.
        None if not recognized.
    """
    for pattern in DUTCH_PHONE_PATTERNS:
        match = pattern.match(phone_number)
        if match:
            area = match.group(1).replace("+31", "0").replace("(0)", "")
            area = re.sub(r"\D", "", area)
            if not area.startswith("0"):
                area = "0" + area
            return area, match.group(2).strip()
    return None


class OrgPersonContactValidator(CountryValidator):

    def validate_fields(self, element, element_index, definition, change, validation):
        if self.type_name == "KnPerson" and change.allow_changes:
            element["Fields"] = convert_name_fields(element["Fields"])
            # Requiredness of FiNm depends on In.
            definition = self.tree.get_definition(element, element_index)

        element = super().validate_fields(element, element_index, definition, change, validation)

        if validation.format:
            self.validate_phone_numbers(element, element_index, change)

        if self.tree.get_action(element_index) != "insert":
            fields = element["Fields"]
            for name in MATCH_FIELDS:
                if name in definition.fields and fields.get(name) is None:
                    if not definition.fields[name].has_default:
                        raise SchemaError(
                            f"No default value found for '{name}' property in '{self.type_name}' object.",
                            type_name=self.type_name,
                            property_name=name,
                        )
                    fields[name] = definition.fields[name].default
        return element

    def validate_phone_numbers(
        self, element: Dict[str, Any], element_index: int, change: ChangeBehavior
    ) -> None:
        """Dutch looking phone numbers must be valid; reformatted if changes are allowed."""
        fields = element["Fields"]
        for name in PHONE_FIELDS:
            value = fields.get(name)
            if not isinstance(value, str) or not value.strip():
                continue
            number = value.strip()
            if number.startswith("+") and not number.startswith("+31"):
                continue

            parts = validate_dutch_phone_number(number)
            if parts is None:
                raise InvalidFormatError(
                    f"'{name}' field of {self.tree.describe_element(element_index)} "
                    f"holds an invalid phone number '{value}'.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=name,
                )
            if change.allow_changes:
                local = re.sub(r"\s", "", parts[1])
                fields[name] = f"{parts[0]}-{local}"
                logger.debug(f"Reformatted phone number '{value}' to '{fields[name]}'")


class OrgPersonContactTree(CountryTree):
    """Tree for KnContact, KnPerson and KnOrganisation objects."""

    validator_class = OrgPersonContactValidator

    def get_definition(self, element=None, element_index=None) -> TypeDefinition:
        definition = super().get_definition(element, element_index)
        element = element or {}
        fields = element.get("Fields", {})
        objects = element.get("Objects", {})
        try:
            action = self.resolve_action(element_index)
        except AmbiguousActionError:
            # Normalizing without an index; action dependent defaults do not matter.
            action = ""

        if self.type_name == "KnContact":
            self._contact_definition(definition, objects)
        elif self.type_name == "KnPerson":
            self._person_definition(definition, fields, action)
        elif self.type_name == "KnOrganisation":
            definition.set_field("MatchOga", default=self._match_organisation(fields, action))

        # An object cannot contain its parent type.
        definition.references.pop(self.parent_type, None)

        if "AutoNum" in definition.fields and "BcCo" not in fields and action == "insert":
            definition.set_field("AutoNum", default=True)

        # An address without a postal address: postal address is address.
        # (The field is called PbAd in KnOrganisation.)
        if (
            "KnBasicAddressAdr" in definition.references
            and "KnBasicAddressPad" in definition.references
            and objects.get("KnBasicAddressAdr")
            and not objects.get("KnBasicAddressPad")
        ):
            for name in ("PadAdr", "PbAd"):
                if name in definition.fields:
                    definition.set_field(name, default=True)

        return definition

    def _contact_definition(self, definition: TypeDefinition, objects: Dict[str, Any]) -> None:
        if self.parent_type not in ("KnOrganisation", "KnPerson"):
            return
        for name in ("BcCoOga", "BcCoPer", "AddToPortal", "EmailPortal"):
            definition.fields.pop(name, None)
        # AFD: department, AFL: delivery address, PRS: person (only with KnPerson).
        definition.fields["ViKc"] = FieldDefinition(alias="contact_type")

        # Only a contact within an organisation can contain a person.
        if self.parent_type == "KnOrganisation":
            definition.references["KnPerson"] = ReferenceDefinition(alias="person")
            if objects.get("KnPerson"):
                definition.set_field("ViKc", default="PRS")

    def _person_definition(self, definition: TypeDefinition, fields: Dict[str, Any], action: str) -> None:
        if fields.get("In"):
            definition.set_field("FiNm", required=False)

        if self.parent_type == "KnContact":
            # Country of legislation
            definition.fields["CoLw"] = FieldDefinition()
            definition.fields["regul_country_iso"] = FieldDefinition()
            definition.country_fields["regul_country_iso"] = "CoLw"

        definition.set_field("MatchPer", default=self._match_person(fields, action))

    @staticmethod
    def _match_person(fields: Dict[str, Any], action: str) -> str:
        """
        Default MatchPer value

        7: always insert; 0: match on code (BcCo); 1: match on social
        security number. Without either, "0" makes an update without code
        fail instead of silently overwriting another record.
        """
        if action == "insert":
            return "7"
        if fields.get("BcCo"):
            return "0"
        if fields.get("SoSe"):
            return "1"
        return "0"

    @staticmethod
    def _match_organisation(fields: Dict[str, Any], action: str) -> str:
        """
        Default MatchOga value

        6: always insert; 0: match on code; 1: on chamber of commerce
        number; 2: on fiscal number.
        """
        if action == "insert":
            return "6"
        if fields.get("BcCo"):
            return "0"
        if fields.get("CcNr"):
            return "1"
        if fields.get("FiNr"):
            return "2"
        return "0"
