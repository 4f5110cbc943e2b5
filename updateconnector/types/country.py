"""
Objects with ISO country code fields.

Some types define a 'fake' field that takes an ISO country code (e.g.
"country_iso"); on validation its value is converted to the code the remote
system uses, and stored in the real field (e.g. "CoId").
"""

import logging
from typing import Any, Dict

from updateconnector.builder.object_tree import ObjectTree
from updateconnector.errors import ValidationError
from updateconnector.schema.models import TypeDefinition
from updateconnector.validator.element_validator import ElementValidator

logger = logging.getLogger(__name__)

# ISO 3166 alpha-2 codes whose remote country code differs.
ISO_COUNTRY_CODES = {
    "AN": "NA",
    "AS": "ASM",
    "AT": "A",
    "BE": "B",
    "BF": "BU",
    "BH": "BRN",
    "BI": "RU",
    "BJ": "DY",
    "BW": "RB",
    "BZ": "BH",
    "CL": "RCH",
    "CM": "TC",
    "DE": "D",
    "DM": "WD",
    "EG": "ET",
    "ET": "ETH",
    "ES": "E",
    "FI": "FIN",
    "FR": "F",
    "GD": "WG",
    "GQ": "CQ",
    "HU": "H",
    "HT": "RH",
    "IN": "RI",
    "IT": "I",
    "JM": "JA",
    "JP": "J",
    "KP": "KO",
    "KR": "ROK",
    "LB": "RL",
    "LC": "WL",
    "LI": "FL",
    "LK": "CL",
    "LR": "LB",
    "LU": "L",
    "MS": "MSR",
    "MU": "MS",
    "NA": "SWA",
    "NE": "RN",
    "NO": "N",
    "PH": "RP",
    "PT": "P",
    "RU": "RUS",
    "SA": "AS",
    "SC": "SY",
    "SD": "SUD",
    "SE": "S",
    "SI": "SLO",
    "SO": "SP",
    "SR": "SME",
    "SV": "EL",
    "SY": "SYR",
    "SZ": "SD",
    "TC": "TCA",
    "TW": "RC",
    "US": "USA",
    "VC": "WV",
    "VE": "YV",
}

# Remote country codes and names. Codes are 1-3 letters; 2-letter codes are
# not necessarily the ISO code of the same country.
COUNTRY_NAMES = {
    "AFG": "Afghanistan",
    "AL": "Albania",
    "DZ": "Algeria",
    "ASM": "American Samoa",
    "AND": "Andorra",
    "AO": "Angola",
    "AIA": "Anguilla",
    "AG": "Antigua and Barbuda",
    "RA": "Argentina",
    "AM": "Armenia",
    "AUS": "Australia",
    "A": "Austria",
    "AZ": "Azerbaijan",
    "BS": "Bahamas",
    "BRN": "Bahrain",
    "BD": "Bangladesh",
    "BDS": "Barbados",
    "BY": "Belarus",
    "B": "België",
    "BH": "Belize",
    "BM": "Bermuda",
    "DY": "Benin",
    "BT": "Bhutan",
    "BOL": "Bolivia",
    "BA": "Bosnia and Herzegowina",
    "RB": "Botswana",
    "BR": "Brazil",
    "BRU": "Brunei Darussalam",
    "BG": "Bulgaria",
    "BU": "Burkina Faso",
    "RU": "Burundi",
    "K": "Cambodia",
    "TC": "Cameroon",
    "CDN": "Canada",
    "CV": "Cape Verde",
    "RCA": "Central African Republic",
    "TD": "Chad",
    "RCH": "Chile",
    "CN": "China",
    "CO": "Colombia",
    "KM": "Comoros",
    "RCB": "Congo",
    "CR": "Costa Rica",
    "CI": "Cote D'Ivoire",
    "HR": "Croatia",
    "C": "Cuba",
    "CY": "Cyprus",
    "CZ": "Czech Republic",
    "DK": "Denmark",
    "DJI": "Djibouti",
    "WD": "Dominica",
    "DOM": "Dominican Republic",
    "TLS": "East Timor",
    "EC": "Ecuador",
    "ET": "Egypt",
    "EL": "El Salvador",
    "CQ": "Equatorial Guinea",
    "ERI": "Eritrea",
    "EE": "Estonia",
    "ETH": "Ethiopia",
    "FLK": "Falkland Islands (Malvinas)",
    "FRO": "Faroe Islands",
    "FJI": "Fiji",
    "FIN": "Finland",
    "F": "France",
    "GF": "French Guiana",
    "PYF": "French Polynesia",
    "ATF": "French Southern Territories",
    "GA": "Gabon",
    "WAG": "Gambia",
    "GE": "Georgia",
    "D": "Germany",
    "GH": "Ghana",
    "GIB": "Gibraltar",
    "GR": "Greece",
    "GRO": "Greenland",
    "WG": "Grenada",
    "GP": "Guadeloupe",
    "GUM": "Guam",
    "GCA": "Guatemala",
    "GN": "Guinea",
    "GW": "Guinea-bissau",
    "GUY": "Guyana",
    "RH": "Haiti",
    "HMD": "Heard and Mc Donald Islands",
    "HON": "Honduras",
    "HK": "Hong Kong",
    "H": "Hungary",
    "IS": "Iceland",
    "IND": "India",
    "RI": "Indonesia",
    "IR": "Iran (Islamic Republic of)",
    "IRQ": "Iraq",
    "IRL": "Ireland",
    "IL": "Israel",
    "I": "Italy",
    "JA": "Jamaica",
    "J": "Japan",
    "HKJ": "Jordan",
    "KZ": "Kazakhstan",
    "EAK": "Kenya",
    "KIR": "Kiribati",
    "KO": "Korea, Democratic People's Republic of",
    "ROK": "Korea, Republic of",
    "KWT": "Kuwait",
    "KG": "Kyrgyzstan",
    "LAO": "Lao People's Democratic Republic",
    "LV": "Latvia",
    "RL": "Lebanon",
    "LS": "Lesotho",
    "LB": "Liberia",
    "LAR": "Libyan Arab Jamahiriya",
    "FL": "Liechtenstein",
    "LT": "Lithuania",
    "L": "Luxembourg",
    "MO": "Macau",
    "MK": "Macedonia, The Former Yugoslav Republic of",
    "RM": "Madagascar",
    "MW": "Malawi",
    "MAL": "Malaysia",
    "MV": "Maldives",
    "RMM": "Mali",
    "M": "Malta",
    "MAR": "Marshall Islands",
    "MQ": "Martinique",
    "RIM": "Mauritania",
    "MS": "Mauritius",
    "MYT": "Mayotte",
    "MEX": "Mexico",
    "MIC": "Micronesia, Federated States of",
    "MD": "Moldova, Republic of",
    "MC": "Monaco",
    "MON": "Mongolia",
    "MSR": "Montserrat",
    "MA": "Morocco",
    "MOC": "Mozambique",
    "BUR": "Myanmar",
    "SWA": "Namibia",
    "NR": "Nauru",
    "NL": "Nederland",
    "NPL": "Nepal",
    "NA": "Netherlands Antilles",
    "NCL": "New Caledonia",
    "NZ": "New Zealand",
    "NIC": "Nicaragua",
    "RN": "Niger",
    "WAN": "Nigeria",
    "NIU": "Niue",
    "NFK": "Norfolk Island",
    "MNP": "Northern Mariana Islands",
    "N": "Norway",
    "OMA": "Oman",
    "PK": "Pakistan",
    "PLW": "Palau",
    "PSE": "Palestina",
    "PA": "Panama",
    "PNG": "Papua New Guinea",
    "PY": "Paraguay",
    "PE": "Peru",
    "RP": "Philippines",
    "PCN": "Pitcairn",
    "PL": "Poland",
    "P": "Portugal",
    "PR": "Puerto Rico",
    "QA": "Qatar",
    "REU": "Reunion",
    "RO": "Romania",
    "RUS": "Russian Federation",
    "RWA": "Rwanda",
    "KN": "Saint Kitts and Nevis",
    "WL": "Saint Lucia",
    "WV": "Saint Vincent and the Grenadines",
    "WSM": "Samoa",
    "RSM": "San Marino",
    "ST": "Sao Tome and Principe",
    "AS": "Saudi Arabia",
    "SN": "Senegal",
    "SRB": "Serbia",
    "SY": "Seychelles",
    "WAL": "Sierra Leone",
    "SGP": "Singapore",
    "SK": "Slovakia (Slovak Republic)",
    "SLO": "Slovenia",
    "SB": "Solomon Islands",
    "SP": "Somalia",
    "ZA": "South Africa",
    "GS": "South Georgia and the South Sandwich Islands",
    "E": "Spain",
    "CL": "Sri Lanka",
    "SHN": "St. Helena",
    "SPM": "St. Pierre and Miquelon",
    "SUD": "Sudan",
    "SME": "Suriname",
    "SJM": "Svalbard and Jan Mayen Islands",
    "SD": "Swaziland",
    "S": "Sweden",
    "CH": "Switzerland",
    "SYR": "Syrian Arab Republic",
    "RC": "Taiwan",
    "TAD": "Tajikistan",
    "EAT": "Tanzania, United Republic of",
    "T": "Thailand",
    "TG": "Togo",
    "TK": "Tokelau",
    "TO": "Tonga",
    "TT": "Trinidad and Tobago",
    "TN": "Tunisia",
    "TR": "Turkey",
    "TMN": "Turkmenistan",
    "TCA": "Turks and Caicos Islands",
    "TV": "Tuvalu",
    "EAU": "Uganda",
    "UA": "Ukraine",
    "AE": "United Arab Emirates",
    "GB": "United Kingdom",
    "USA": "United States",
    "UMI": "United States Minor Outlying Islands",
    "ROU": "Uruguay",
    "OEZ": "Uzbekistan",
    "VU": "Vanuatu",
    "VAT": "Vatican City State (Holy See)",
    "YV": "Venezuela",
    "VN": "Viet Nam",
    "VGB": "Virgin Islands (British)",
    "VIR": "Virgin Islands (U.S.)",
    "WLF": "Wallis and Futuna Islands",
    "ESH": "Western Sahara",
    "YMN": "Yemen",
    "Z": "Zambia",
    "ZW": "Zimbabwe",
}

COUNTRY_CODES_BY_NAME = {name.lower(): code for code, name in COUNTRY_NAMES.items()}

# Default behaviors for convert_country_name(); can be combined.
ACCEPT_COUNTRY_CODE = 1
RETURN_INPUT = 2
RETURN_NL = 4


def convert_country_name(name: Any, default_behavior: int = 0) -> str:
    """
    Remote country code for a country name

    Args:
        name: Country name as in COUNTRY_NAMES (case insensitive)
        default_behavior: What to return for an unknown name:
            ACCEPT_COUNTRY_CODE: the name itself (uppercased) if it is a
                remote country code,
            RETURN_INPUT: the name unchanged,
            RETURN_NL: "NL";
            "" otherwise
    """
    if not isinstance(name, str):
        return ""
    key = name.strip()
    if key.lower() in COUNTRY_CODES_BY_NAME:
        return COUNTRY_CODES_BY_NAME[key.lower()]
    if default_behavior & ACCEPT_COUNTRY_CODE and key.upper() in COUNTRY_NAMES:
        return key.upper()
    if default_behavior & RETURN_INPUT:
        return name
    if default_behavior & RETURN_NL:
        return "NL"
    return ""


def convert_iso_country_code(iso_code: Any) -> str:
    """Remote country code for an ISO code; "" if unknown."""
    if not isinstance(iso_code, str):
        return ""
    code = iso_code.strip().upper()
    if code in ISO_COUNTRY_CODES:
        return ISO_COUNTRY_CODES[code]
    # Codes that differ were handled above, so a remote code equal to the
    # ISO code belongs to the same country.
    return convert_country_name(code, ACCEPT_COUNTRY_CODE)


class CountryValidator(ElementValidator):
    """Converts ISO country code fields before validating fields."""

    def validate_fields(self, element, element_index, definition, change, validation):
        element = self.convert_country_fields(element, element_index, definition)
        return super().validate_fields(element, element_index, definition, change, validation)

    def convert_country_fields(
        self,
        element: Dict[str, Any],
        element_index: int,
        definition: TypeDefinition,
    ) -> Dict[str, Any]:
        # The ISO + real field pair is regarded as one value, so converting
        # is not a change; it is done regardless of the change behavior.
        fields = element["Fields"]
        descr = self.tree.describe_element(element_index)
        for iso_field, code_field in definition.country_fields.items():
            iso_value = fields.get(iso_field)
            if not iso_value:
                continue

            code = convert_iso_country_code(iso_value)
            if not code:
                raise ValidationError(
                    f"Unknown ISO country code '{iso_value}' in {descr}.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=iso_field,
                )
            current = fields.get(code_field)
            if current and str(current).strip().upper() != code:
                raise ValidationError(
                    f"Inconsistent ISO country code '{iso_value}' and country code '{current}' found in {descr}.",
                    type_name=self.type_name,
                    element_index=element_index,
                    property_name=code_field,
                )
            fields[code_field] = code
            del fields[iso_field]
            logger.debug(f"Converted ISO country code '{iso_value}' to '{code}' in {descr}")
        return element


class CountryTree(ObjectTree):
    validator_class = CountryValidator
