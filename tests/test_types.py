"""
Unit tests for type specific behavior

Tests:
- ObjectTreeFactory: class lookup and registration
- ISO country code conversion (KnBasicAddress, FbSales)
- KnBasicAddress: street splitting, BeginDate
- KnPerson / KnOrganisation / KnContact: conditional definitions, match
  methods, name derivation, phone numbers
- FbSalesLines: article defaults and requiredness
"""

import json
from datetime import date

import pytest

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.builder.factory import ObjectTreeFactory, create
from updateconnector.builder.object_tree import ObjectTree
from updateconnector.errors import (
    InvalidFormatError,
    MissingFieldError,
    UnmappedFieldsError,
    ValidationError,
)
from updateconnector.types.address import AddressTree, convert_street_name
from updateconnector.types.contact import (
    OrgPersonContactTree,
    convert_name_fields,
    validate_dutch_phone_number,
)
from updateconnector.types.country import (
    ACCEPT_COUNTRY_CODE,
    RETURN_INPUT,
    RETURN_NL,
    convert_country_name,
    convert_iso_country_code,
)
from updateconnector.types.sales import SalesLinesTree


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def address_data():
    """Raw KnBasicAddress data"""
    return {
        "street": "Dorpsstraat 12 a",
        "zip_code": "1234 AB",
        "town": "Amsterdam",
        "country_iso": "NL",
    }


@pytest.fixture
def allow_changes():
    return ChangeBehavior(allow_changes=True)


# ============================================================================
# TEST: ObjectTreeFactory
# ============================================================================


class TestObjectTreeFactory:
    """Tests for ObjectTreeFactory"""

    def test_registered_classes(self):
        """Test type specific classes are used"""
        assert ObjectTreeFactory.get_class("KnBasicAddress") is AddressTree
        assert ObjectTreeFactory.get_class("KnPerson") is OrgPersonContactTree
        assert ObjectTreeFactory.get_class("FbSalesLines") is SalesLinesTree
        assert ObjectTreeFactory.get_class("KnSubject") is ObjectTree

    def test_create(self):
        """Test create() returns an instance of the registered class"""
        tree = create("KnBasicAddress", {"street": "x"}, "insert")

        assert isinstance(tree, AddressTree)
        assert tree.get_action() == "insert"

    def test_register(self, registry, monkeypatch):
        """Test registering a custom class"""

        class CustomTree(ObjectTree):
            pass

        monkeypatch.setitem(ObjectTreeFactory.TYPE_MAP, "C", CustomTree)
        tree = ObjectTree("T", {"name": "a", "child": {"code": "x"}}, registry=registry)

        assert isinstance(tree.get_object("child"), CustomTree)

    def test_register_invalid_class(self):
        """Test only ObjectTree subclasses can be registered"""
        with pytest.raises(TypeError):
            ObjectTreeFactory.register("KnSubject", dict)


# ============================================================================
# TEST: Country codes
# ============================================================================


class TestCountryCodes:
    """Tests for ISO country code conversion"""

    @pytest.mark.parametrize(
        "iso_code, expected",
        [
            ("DE", "D"),
            ("de", "D"),
            ("NL", "NL"),
            ("US", "USA"),
            ("CN", "CN"),
            ("br", "BR"),
            ("NZ", "NZ"),
            ("ZA", "ZA"),
            ("IL", "IL"),
            ("ZZ", ""),
            (None, ""),
        ],
    )
    def test_convert_iso_country_code(self, iso_code, expected):
        """Test ISO codes map to remote country codes"""
        assert convert_iso_country_code(iso_code) == expected

    @pytest.mark.parametrize(
        "name, default_behavior, expected",
        [
            ("Germany", 0, "D"),
            ("nederland", 0, "NL"),
            ("D", 0, ""),
            ("d", ACCEPT_COUNTRY_CODE, "D"),
            ("Atlantis", ACCEPT_COUNTRY_CODE, ""),
            ("Atlantis", RETURN_INPUT, "Atlantis"),
            ("Atlantis", RETURN_NL, "NL"),
        ],
    )
    def test_convert_country_name(self, name, default_behavior, expected):
        """Test country names and codes map to remote country codes"""
        assert convert_country_name(name, default_behavior) == expected

    def test_iso_field_converted(self, address_data):
        """Test the ISO field is replaced by the country code field"""
        fields = create("KnBasicAddress", address_data, "insert").validate()["Fields"]

        assert fields["CoId"] == "NL"
        assert "country_iso" not in fields

    def test_non_european_iso_field(self, address_data):
        """Test ISO codes equal to the remote code are accepted"""
        address_data["country_iso"] = "CN"

        fields = create("KnBasicAddress", address_data, "insert").validate()["Fields"]

        assert fields["CoId"] == "CN"

    def test_unknown_iso_code(self, address_data):
        """Test unknown ISO codes fail validation"""
        address_data["country_iso"] = "XX"
        tree = create("KnBasicAddress", address_data, "insert")

        with pytest.raises(ValidationError, match="Unknown ISO country code"):
            tree.validate()

    def test_inconsistent_codes(self, address_data):
        """Test an ISO code conflicting with the country code fails"""
        address_data["country"] = "D"
        tree = create("KnBasicAddress", address_data, "insert")

        with pytest.raises(ValidationError, match="Inconsistent"):
            tree.validate()

    def test_converted_without_changes(self, address_data):
        """Test conversion is done even if no changes are allowed"""
        address_data["is_po_box"] = False
        tree = create("KnBasicAddress", address_data, "insert")

        fields = tree.validate(ChangeBehavior.no_changes())["Fields"]

        assert fields["CoId"] == "NL"
        assert "country_iso" not in fields

    def test_converted_in_read_only_embedded_object(self, address_data):
        """Test embedded objects without changes allowed are converted too"""
        address_data["is_po_box"] = False
        tree = create("KnOrganisation", {"name": "Acme", "address": address_data}, "insert")

        data = json.loads(tree.render("json", change=ChangeBehavior(allow_embedded_changes=False)))

        address = data["KnOrganisation"]["Element"]["Objects"]["KnBasicAddressAdr"]["Element"]
        assert address["Fields"]["CoId"] == "NL"
        assert "country_iso" not in address["Fields"]

    def test_sales_destination_country(self):
        """Test FbSales converts its destination country"""
        tree = create("FbSales", {"OrNu": "1", "dest_country_iso": "BE"}, "insert")

        assert tree.validate()["Fields"]["CoId"] == "B"


# ============================================================================
# TEST: KnBasicAddress
# ============================================================================


class TestAddress:
    """Tests for KnBasicAddress"""

    def test_street_split(self, address_data, allow_changes):
        """Test house number and extension are split off the street"""
        fields = create("KnBasicAddress", address_data, "insert").validate(allow_changes)["Fields"]

        assert fields["Ad"] == "Dorpsstraat"
        assert fields["HmNr"] == 12
        assert fields["HmAd"] == "a"

    def test_street_not_split_without_allow_changes(self, address_data):
        """Test the street is left alone by default"""
        fields = create("KnBasicAddress", address_data, "insert").validate()["Fields"]

        assert fields["Ad"] == "Dorpsstraat 12 a"
        assert "HmNr" not in fields

    def test_defaults_on_insert(self, address_data):
        """Test PbAd / ResZip defaults and no BeginDate on insert"""
        tree = create("KnBasicAddress", dict(address_data, BeginDate="2020-01-01"), "insert")

        fields = tree.validate()["Fields"]

        assert fields["PbAd"] is False
        assert fields["ResZip"] is False
        assert "BeginDate" not in fields

    def test_begin_date_on_update(self, address_data):
        """Test BeginDate defaults to today for other actions"""
        fields = create("KnBasicAddress", address_data, "update").validate()["Fields"]

        assert fields["BeginDate"] == date.today().isoformat()

    def test_begin_date_kept_on_update(self, address_data):
        """Test a given BeginDate is kept"""
        tree = create("KnBasicAddress", dict(address_data, BeginDate="2020-01-01"), "update")

        assert tree.validate()["Fields"]["BeginDate"] == "2020-01-01"

    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"Ad": "Dorpsstraat 5"}, {"Ad": "Dorpsstraat", "HmNr": 5}),
            ({"Ad": "Laan 1940 45 B"}, {"Ad": "Laan", "HmNr": 1940, "HmAd": "45 B"}),
            ({"Ad": "Dorpsstraat 5", "CoId": "GB"}, {"Ad": "Dorpsstraat 5", "CoId": "GB"}),
            ({"Ad": "Dorpsstraat", "HmNr": "5-7"}, {"Ad": "Dorpsstraat", "HmNr": 5, "HmAd": "-7"}),
            ({"Ad": "Dorpsstraat"}, {"Ad": "Dorpsstraat"}),
        ],
    )
    def test_convert_street_name(self, fields, expected):
        """Test street name splitting"""
        assert convert_street_name(fields) == expected


# ============================================================================
# TEST: KnPerson / KnOrganisation / KnContact
# ============================================================================


class TestOrgPersonContact:
    """Tests for organisations, persons and contacts"""

    def test_person_insert_defaults(self):
        """Test KnPerson defaults on insert"""
        tree = create("KnPerson", {"first_name": "Jan", "last_name": "Smit"}, "insert")

        fields = tree.validate()["Fields"]

        assert fields["MatchPer"] == "7"
        assert fields["AutoNum"] is True
        assert fields["ViGe"] == "O"

    def test_person_no_autonum_with_code(self):
        """Test AutoNum has no default when a code is given"""
        tree = create("KnPerson", {"code": "P1", "first_name": "Jan", "last_name": "Smit"}, "insert")

        assert "AutoNum" not in tree.validate()["Fields"]

    def test_person_first_name_required(self):
        """Test FiNm is required on insert"""
        tree = create("KnPerson", {"last_name": "Smit"}, "insert")

        with pytest.raises(MissingFieldError, match="FiNm"):
            tree.validate()

    def test_person_initials_instead_of_first_name(self):
        """Test FiNm is not required when initials are given"""
        tree = create("KnPerson", {"initials": "J.", "last_name": "Smit"}, "insert")

        assert tree.validate()["Fields"]["In"] == "J."

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"code": "P1"}, "0"),
            ({"bsn": "123456782"}, "1"),
            ({"last_name": "Smit"}, "0"),
        ],
    )
    def test_person_match_method_on_update(self, data, expected):
        """Test MatchPer is filled for update"""
        fields = create("KnPerson", data, "update").validate()["Fields"]

        assert fields["MatchPer"] == expected

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"code": "O1"}, "0"),
            ({"coc_number": "1234"}, "1"),
            ({"fiscal_number": "NL1"}, "2"),
            ({"name": "Acme"}, "0"),
        ],
    )
    def test_organisation_match_method_on_update(self, data, expected):
        """Test MatchOga is filled for update"""
        fields = create("KnOrganisation", data, "update").validate()["Fields"]

        assert fields["MatchOga"] == expected

    def test_explicit_match_method_kept(self):
        """Test a given match method is not overwritten"""
        fields = create("KnOrganisation", {"code": "O1", "match_method": "3"}, "update").validate()["Fields"]

        assert fields["MatchOga"] == "3"

    def test_postal_address_default(self):
        """Test postal address is address if only an address is embedded"""
        data = {
            "first_name": "Jan",
            "last_name": "Smit",
            "address": {"street": "Laan 1", "zip_code": "1234", "town": "Ede"},
        }
        fields = create("KnPerson", data, "insert").validate()["Fields"]

        assert fields["PadAdr"] is True

    def test_organisation_postal_address_default(self):
        """Test KnOrganisation uses PbAd for the same default"""
        data = {"name": "Acme", "address": {"street": "Laan 1", "zip_code": "1234", "town": "Ede"}}

        fields = create("KnOrganisation", data, "insert").validate()["Fields"]

        assert fields["PbAd"] is True

    def test_contact_with_person_in_organisation(self):
        """Test a contact in an organisation can hold a person"""
        data = {
            "name": "Acme",
            "contact": {"job_title": "CEO", "person": {"first_name": "Jan", "last_name": "Smit"}},
        }
        tree = create("KnOrganisation", data, "insert")

        output = json.loads(tree.render("json"))

        contact = output["KnOrganisation"]["Element"]["Objects"]["KnContact"]["Element"]
        assert contact["Fields"]["ViKc"] == "PRS"
        person = contact["Objects"]["KnPerson"]["Element"]
        assert person["Fields"]["FiNm"] == "Jan"
        assert person["Fields"]["MatchPer"] == "7"

    def test_standalone_contact_has_no_contact_type(self):
        """Test ViKc only exists for embedded contacts"""
        with pytest.raises(UnmappedFieldsError):
            create("KnContact", {"ViKc": "AFD", "job_title": "x"}, "insert")

    def test_standalone_contact_has_no_person(self):
        """Test a standalone contact cannot hold a person"""
        with pytest.raises(UnmappedFieldsError):
            create("KnContact", {"job_title": "x", "person": {"last_name": "Smit"}}, "insert")

    def test_person_cannot_hold_parent_type(self):
        """Test a person in a contact cannot hold a contact"""
        data = {"job_title": "x", "person": {"last_name": "Smit", "contact": {"job_title": "y"}}}

        with pytest.raises(UnmappedFieldsError):
            create("KnOrganisation", {"name": "Acme", "contact": data}, "insert")

    def test_name_derivation(self, allow_changes):
        """Test prefix, initials and search name derivation"""
        tree = create("KnPerson", {"first_name": "Jan Piet", "last_name": "van der Berg"}, "insert")

        fields = tree.validate(allow_changes)["Fields"]

        assert fields["Is"] == "van der"
        assert fields["LaNm"] == "Berg"
        assert fields["In"] == "J.P."
        assert fields["SeNm"] == "BERG"

    def test_first_name_moved_to_initials(self, allow_changes):
        """Test a first name of only initials is moved, and is then not required"""
        tree = create("KnPerson", {"first_name": "J.P.", "last_name": "Smit"}, "insert")

        fields = tree.validate(allow_changes)["Fields"]

        assert fields["In"] == "J.P."
        assert "FiNm" not in fields

    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"FiNm": "j"}, {"In": "J."}),
            ({"FiNm": "Anne-Marie"}, {"FiNm": "Anne-Marie", "In": "A.M."}),
            ({"FiNm": "A. Jan"}, {"FiNm": "A. Jan"}),
            ({"LaNm": "de Vries", "SeNm": "X"}, {"LaNm": "Vries", "Is": "de", "SeNm": "X"}),
            ({"LaNm": "Vandenberghehuis"}, {"LaNm": "Vandenberghehuis", "SeNm": "VANDENBERG"}),
        ],
    )
    def test_convert_name_fields(self, fields, expected):
        """Test name field derivation"""
        assert convert_name_fields(fields) == expected

    @pytest.mark.parametrize(
        "number, expected",
        [
            ("06-12345678", ("06", "12345678")),
            ("+31 10-1234567", ("010", "1234567")),
            ("+31 (0)10-1234567", ("010", "1234567")),
            ("(020) 123 4567", ("020", "123 4567")),
            ("010-12345678", None),
            ("061-2345678", None),
            ("+31 010-1234567", None),
            ("123 456 7890", None),
        ],
    )
    def test_validate_dutch_phone_number(self, number, expected):
        """Test Dutch phone number recognition"""
        assert validate_dutch_phone_number(number) == expected

    def test_phone_format_checked(self):
        """Test invalid phone numbers fail with format validation on"""
        tree = create("KnOrganisation", {"name": "Acme", "phone": "010-12345678"}, "insert")

        assert tree.validate()["Fields"]["TeNr"] == "010-12345678"
        with pytest.raises(InvalidFormatError, match="TeNr"):
            tree.validate(validation=ValidationBehavior(format=True))

    def test_phone_reformatted(self, allow_changes):
        """Test valid phone numbers are reformatted with allow_changes"""
        tree = create("KnOrganisation", {"name": "Acme", "phone": "(010) 123 4567"}, "insert")

        fields = tree.validate(allow_changes, ValidationBehavior(format=True))["Fields"]

        assert fields["TeNr"] == "010-1234567"

    def test_foreign_phone_not_checked(self):
        """Test non-Dutch international numbers are skipped"""
        tree = create("KnOrganisation", {"name": "Acme", "phone": "+44 20 7946 0000"}, "insert")

        fields = tree.validate(validation=ValidationBehavior(format=True))["Fields"]

        assert fields["TeNr"] == "+44 20 7946 0000"


# ============================================================================
# TEST: FbSalesLines
# ============================================================================


class TestSalesLines:
    """Tests for FbSalesLines"""

    def test_article_defaults(self):
        """Test unit and quantity defaults for articles"""
        data = {"OrNu": "1", "line_items": [{"item_code": "A1", "unit_price": 10}]}
        output = json.loads(create("FbSales", data, "insert").render("json"))

        lines = output["FbSales"]["Element"]["Objects"]["FbSalesLines"]["Element"]
        assert lines == [
            {"Fields": {"ItCd": "A1", "Upri": 10, "VaIt": 2, "BiUn": "Stk", "QuUn": 1}},
        ]

    def test_article_requires_item_code(self):
        """Test articles need an item code"""
        tree = create("FbSales", {"OrNu": "1", "line_items": [{"unit_price": 10}]}, "insert")

        with pytest.raises(MissingFieldError, match="ItCd"):
            tree.validate()

    def test_text_line(self):
        """Test other item types have no unit defaults or requirements"""
        data = {"OrNu": "1", "line_items": [{"item_type": 3, "description": "Note"}]}
        tree = create("FbSales", data, "insert")

        lines = tree.validate()["Objects"]["FbSalesLines"]["Element"]

        assert lines == [{"Fields": {"VaIt": 3, "Ds": "Note"}}]

    def test_definition_depends_on_item_type(self):
        """Test get_definition for article and text lines"""
        tree = create("FbSalesLines", [{"item_type": 2}, {"item_type": "3"}], "insert")

        article = tree.get_definition(tree.get_elements()[0], 0)
        text = tree.get_definition(tree.get_elements()[1], 1)

        assert article.fields["ItCd"].required
        assert article.fields["BiUn"].default == "Stk"
        assert not text.fields["ItCd"].required
        assert not text.fields["BiUn"].has_default
