"""
Type specific behavior

Object trees for types whose definition or validation depends on the
parent type, the action or the element values.
"""

from .country import CountryTree, CountryValidator, convert_country_name, convert_iso_country_code
from .address import AddressTree, AddressValidator, convert_street_name
from .contact import (
    OrgPersonContactTree,
    OrgPersonContactValidator,
    convert_name_fields,
    validate_dutch_phone_number,
)
from .sales import SalesLinesTree

__all__ = [
    "CountryTree",
    "CountryValidator",
    "convert_country_name",
    "convert_iso_country_code",
    "AddressTree",
    "AddressValidator",
    "convert_street_name",
    "OrgPersonContactTree",
    "OrgPersonContactValidator",
    "convert_name_fields",
    "validate_dutch_phone_number",
    "SalesLinesTree",
]
