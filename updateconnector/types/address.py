"""KnBasicAddress: street name splitting and BeginDate handling."""
import re
from datetime import date
from typing import Any, Dict

from .country import CountryTree, CountryValidator

# Street, house number and optional extension of at most 30 characters.
# Non-greedy so that for "STREET NR1 NR2", NR1 becomes the house number.
STREET_PATTERN = re.compile(r"^(.*?\S)\s+(\d+)(?:\s+)?(\S.{0,29})?\s*$")

HOUSE_NUMBER_PATTERN = re.compile(r"^\s*(\d+)(?:\s+)?(\S.{0,29})?\s*$")

# Countries where the house number follows the street name.
NUMBER_AFTER_STREET_COUNTRIES = ("B", "D", "DK", "F", "FIN", "H", "NL", "NO", "S")


def convert_street_name(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Split a street name containing a house number (and extension)

    Only done if house number and extension are both empty, and the country
    is unknown or one where the number follows the street name. A house
    number containing an extension is also split.

    Returns:
        New fields dict
    """
    fields = dict(fields)
    street = fields.get("Ad")
    if (
        isinstance(street, str)
        and street
        and not fields.get("HmNr")
        and not fields.get("HmAd")
        and (not fields.get("CoId") or fields["CoId"] in NUMBER_AFTER_STREET_COUNTRIES)
    ):
        match = STREET_PATTERN.match(street)
        if match:
            fields["Ad"] = match.group(1).lstrip()
            fields["HmNr"] = int(match.group(2))
            if match.group(3):
                fields["HmAd"] = match.group(3).rstrip()
    elif isinstance(fields.get("HmNr"), str) and fields["HmNr"] and not fields.get("HmAd"):
        match = HOUSE_NUMBER_PATTERN.match(fields["HmNr"])
        if match and match.group(2):
            fields["HmNr"] = int(match.group(1))
            fields["HmAd"] = match.group(2).rstrip()
    return fields


class AddressValidator(CountryValidator):

    def validate_fields(self, element, element_index, definition, change, validation):
        if change.allow_changes:
            # Convert the country first; splitting depends on it.
            element = self.convert_country_fields(element, element_index, definition)
            element["Fields"] = convert_street_name(element["Fields"])

        element = super().validate_fields(element, element_index, definition, change, validation)

        # BeginDate must not be sent for new addresses; other actions need it.
        if self.tree.get_action(element_index) == "insert":
            element["Fields"].pop("BeginDate", None)
        elif not element["Fields"].get("BeginDate"):
            element["Fields"]["BeginDate"] = date.today().isoformat()
        return element


class AddressTree(CountryTree):
    validator_class = AddressValidator
