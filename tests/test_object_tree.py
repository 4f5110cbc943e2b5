"""
Unit tests for ObjectTree (normalization, element access, actions)

Tests:
- Normalization: aliases, identifiers, element collections, coercion
- Unknown key handling at normalization
- Field / object / identifier accessors
- Action Manager: synonyms, per-element actions, propagation
"""

import pytest

from updateconnector.behavior import ValidationBehavior
from updateconnector.builder.object_tree import ObjectTree, normalize_action
from updateconnector.errors import (
    AmbiguousActionError,
    ElementIndexError,
    InvalidActionError,
    InvalidInputError,
    SchemaError,
    UnknownPropertyError,
    UnmappedFieldsError,
)


# ============================================================================
# TEST: Normalization
# ============================================================================


class TestNormalization:
    """Tests for turning raw data into elements"""

    def test_alias_and_name_give_same_element(self, registry):
        """Test that a value under an alias equals one under the field name"""
        by_alias = ObjectTree("T", {"name": "Acme", "#id": 3}, "insert", registry=registry)
        by_name = ObjectTree("T", {"Name": "Acme", "@TId": 3}, "insert", registry=registry)

        assert by_alias.get_elements() == by_name.get_elements()
        assert by_alias.get_elements() == [{"@TId": 3, "Fields": {"Name": "Acme"}}]

    def test_name_and_alias_both_given(self, registry):
        """Test that a field given under name and alias is rejected"""
        with pytest.raises(InvalidInputError, match="both its property name"):
            ObjectTree("T", {"Name": "X", "name": "Y"}, "insert", registry=registry)

    def test_name_and_alias_both_given_equal_values(self, registry):
        """Test that equal values under name and alias are rejected too"""
        with pytest.raises(InvalidInputError):
            ObjectTree("T", {"Name": "X", "name": "X"}, "insert", registry=registry)

    def test_identifier_both_forms_differing(self, registry):
        """Test that differing @TId / #id values are rejected"""
        with pytest.raises(InvalidInputError, match="ID field"):
            ObjectTree("T", {"@TId": 1, "#id": 2, "name": "a"}, registry=registry)

    def test_identifier_both_forms_equal(self, registry):
        """Test that equal @TId / #id values are tolerated"""
        tree = ObjectTree("T", {"@TId": 1, "#id": 1, "name": "a"}, registry=registry)

        assert tree.get_id() == 1

    def test_identifier_must_be_scalar(self, registry):
        """Test that a non-scalar identifier is rejected"""
        with pytest.raises(InvalidInputError):
            ObjectTree("T", {"#id": [1], "name": "a"}, registry=registry)

    def test_unknown_key_rejected(self, registry):
        """Test unknown raw keys fail with UnmappedFieldsError"""
        with pytest.raises(UnmappedFieldsError) as exc_info:
            ObjectTree("T", {"name": "a", "bogus": 1}, "insert", registry=registry)

        assert exc_info.value.keys == ["bogus"]
        assert isinstance(exc_info.value, InvalidInputError)

    def test_unknown_key_kept_when_allowed(self, registry):
        """Test unknown raw keys are kept in Fields without no_unknown"""
        tree = ObjectTree("T", registry=registry)
        tree.add_elements({"name": "a", "bogus": 1}, ValidationBehavior(no_unknown=False))

        assert tree.get_elements()[0]["Fields"] == {"Name": "a", "bogus": 1}

    def test_list_of_elements(self, registry):
        """Test a list of raw elements"""
        tree = ObjectTree("T", [{"name": "a"}, {"name": "b"}], registry=registry)

        assert len(tree) == 2
        assert tree.get_field("name", 1) == "b"

    def test_mapping_of_elements(self, registry):
        """Test a mapping whose values are all mappings holds several elements"""
        tree = ObjectTree("T", {"first": {"name": "a"}, "second": {"name": "b"}}, registry=registry)

        assert len(tree) == 2

    def test_empty_element(self, registry):
        """Test an empty mapping is one element without fields"""
        tree = ObjectTree("T", {}, "insert", registry=registry)

        assert tree.get_elements() == [{"Fields": {}}]

    def test_no_data(self, registry):
        """Test a tree without data has no elements"""
        assert len(ObjectTree("T", registry=registry)) == 0

    def test_invalid_data_shape(self, registry):
        """Test non-mapping data is rejected"""
        with pytest.raises(InvalidInputError):
            ObjectTree("T", "name", registry=registry)
        with pytest.raises(InvalidInputError):
            ObjectTree("T", ["name"], registry=registry)

    def test_unknown_type(self, registry):
        """Test an unknown type fails with SchemaError"""
        with pytest.raises(SchemaError, match="No property definitions found for 'Nope'"):
            ObjectTree("Nope", registry=registry)

    def test_empty_type_name(self, registry):
        """Test an empty type name is rejected"""
        with pytest.raises(InvalidInputError):
            ObjectTree("", registry=registry)

    def test_embedded_object_created(self, registry):
        """Test an embedded value becomes an ObjectTree of the target type"""
        tree = ObjectTree("T", {"name": "a", "child": {"code": "x"}}, "insert", registry=registry)
        child = tree.get_object("child")

        assert isinstance(child, ObjectTree)
        assert child.type_name == "C"
        assert child.parent_type == "T"
        assert child.get_field("Code") == "x"
        assert child.get_action() == "insert"

    def test_embedded_object_scalar_rejected(self, registry):
        """Test an embedded object must be a mapping or list"""
        with pytest.raises(InvalidInputError, match="must be a mapping or list"):
            ObjectTree("T", {"name": "a", "child": "x"}, registry=registry)

    def test_embedded_tree_stored_as_is(self, registry):
        """Test an ObjectTree value is stored without copying"""
        child = ObjectTree("C", {"code": "x"}, registry=registry)
        tree = ObjectTree("T", {"name": "a", "child": child}, registry=registry)

        assert tree.get_object("Child") is child

    def test_boolean_coercion(self, registry):
        """Test boolean fields are coerced on input"""
        tree = ObjectTree(
            "T", [{"name": "a", "active": "0"}, {"name": "b", "active": "yes"}], registry=registry
        )

        assert tree.get_field("active", 0) is False
        assert tree.get_field("active", 1) is True

    def test_integer_rejects_non_numeric(self, registry):
        """Test integer fields reject non-numeric values"""
        with pytest.raises(InvalidInputError, match="numeric"):
            ObjectTree("T", {"name": "a", "size": "big"}, registry=registry)

    def test_integer_rejects_decimal_point(self, registry):
        """Test integer fields reject values with a decimal point"""
        with pytest.raises(InvalidInputError, match="integer"):
            ObjectTree("T", {"name": "a", "size": "1.5"}, registry=registry)

    def test_decimal_accepts_numeric_string(self, registry):
        """Test decimal fields accept numeric strings unchanged"""
        tree = ObjectTree("T", {"name": "a", "price": "1.50"}, registry=registry)

        assert tree.get_field("price") == "1.50"

    def test_field_value_must_be_scalar(self, registry):
        """Test non-scalar field values are rejected"""
        with pytest.raises(InvalidInputError, match="scalar"):
            ObjectTree("T", {"name": ["a"], "size": 1}, registry=registry)

    def test_values_not_trimmed_on_input(self, registry):
        """Test strings are stored as given"""
        tree = ObjectTree("T", {"name": "  a "}, registry=registry)

        assert tree.get_field("name") == "  a "


# ============================================================================
# TEST: Element access
# ============================================================================


class TestElementAccess:
    """Tests for field / object / identifier accessors"""

    def test_get_field_default(self, registry):
        """Test return_default gives the schema default"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        assert tree.get_field("kind") is None
        assert tree.get_field("kind", return_default=True) == "A"

    def test_get_field_default_without_elements(self, registry):
        """Test return_default works before any element exists"""
        tree = ObjectTree("T", registry=registry)

        assert tree.get_field("Kind", return_default=True) == "A"

    def test_get_field_unknown(self, registry):
        """Test unknown field names are rejected"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        with pytest.raises(UnknownPropertyError):
            tree.get_field("bogus")

    def test_get_field_missing_element(self, registry):
        """Test accessing a missing element"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        with pytest.raises(ElementIndexError):
            tree.get_field("name", 3)

    def test_set_field(self, registry):
        """Test setting a field by alias"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)
        tree.set_field("name", "b")

        assert tree.get_field("Name") == "b"

    def test_set_field_next_index_adds_element(self, registry):
        """Test setting a field at the next index appends an element"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)
        tree.set_field("name", "b", 1)

        assert len(tree) == 2
        with pytest.raises(ElementIndexError):
            tree.set_field("name", "c", 5)

    def test_set_field_checks_value(self, registry):
        """Test set_field applies input checks"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        with pytest.raises(InvalidInputError):
            tree.set_field("size", "x")

    def test_set_id(self, registry):
        """Test set_id stores the identifier as first key"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)
        tree.set_id(7)

        assert tree.get_id() == 7
        assert list(tree.get_elements()[0])[0] == "@TId"

    def test_set_id_invalid(self, registry):
        """Test identifiers must be integers or strings"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        with pytest.raises(InvalidInputError):
            tree.set_id(True)

    def test_id_without_id_property(self, registry):
        """Test types without id_property have no identifier"""
        tree = ObjectTree("C", {"code": "x"}, registry=registry)

        with pytest.raises(SchemaError):
            tree.get_id()

    def test_set_object(self, registry):
        """Test set_object creates an embedded tree with the element action"""
        tree = ObjectTree("T", {"name": "a"}, "update", registry=registry)
        tree.set_object("children", [{"code": "x"}, {"code": "y"}])

        children = tree.get_object("Children")
        assert len(children) == 2
        assert children.get_action() == "update"

    def test_get_object_default(self, registry):
        """Test get_object without value or default"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        assert tree.get_object("child") is None
        assert tree.get_object("child", return_default=True) is None

    def test_get_elements_returns_copies(self, registry):
        """Test changing returned elements does not change the tree"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)
        tree.get_elements()[0]["Fields"]["Name"] = "changed"

        assert tree.get_field("name") == "a"


# ============================================================================
# TEST: Actions
# ============================================================================


class TestActions:
    """Tests for the Action Manager"""

    @pytest.mark.parametrize(
        "action, expected",
        [
            ("insert", "insert"),
            ("POST", "insert"),
            ("put", "update"),
            ("Update", "update"),
            ("DELETE", "delete"),
            ("", ""),
        ],
    )
    def test_normalize_action(self, action, expected):
        """Test action synonyms are normalized"""
        assert normalize_action(action) == expected

    @pytest.mark.parametrize("action", ["bogus", None, 1])
    def test_invalid_action(self, action):
        """Test unknown actions are rejected"""
        with pytest.raises(InvalidActionError):
            normalize_action(action)

    def test_no_action(self, registry):
        """Test the action of a tree without action is empty"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        assert tree.get_action() == ""
        assert tree.get_action(0) == ""

    def test_per_element_actions(self, registry):
        """Test different actions per element"""
        tree = ObjectTree("T", [{"name": "a"}, {"name": "b"}], "insert", registry=registry)
        tree.set_action("update", element_index=1)

        assert tree.get_action(0) == "insert"
        assert tree.get_action(1) == "update"
        assert tree.get_actions() == {0: "insert", 1: "update"}

    def test_ambiguous_action(self, registry):
        """Test get_action without index fails for differing actions"""
        tree = ObjectTree("T", [{"name": "a"}, {"name": "b"}], "insert", registry=registry)
        tree.set_action("delete", element_index=1)

        with pytest.raises(AmbiguousActionError):
            tree.get_action()

    def test_action_index_out_of_range(self, registry):
        """Test get_action for a nonexistent index"""
        tree = ObjectTree("T", [{"name": "a"}, {"name": "b"}], "insert", registry=registry)
        tree.set_action("update", element_index=1)

        with pytest.raises(IndexError):
            tree.get_action(5)

    def test_invalid_element_index(self, registry):
        """Test set_action rejects negative indexes"""
        tree = ObjectTree("T", {"name": "a"}, registry=registry)

        with pytest.raises(ElementIndexError):
            tree.set_action("insert", element_index=-1)

    def test_set_action_all_overwrites(self, registry):
        """Test set_action without index overwrites every action"""
        tree = ObjectTree("T", [{"name": "a"}, {"name": "b"}], "insert", registry=registry)
        tree.set_action("update", element_index=1)
        tree.set_action("delete")

        assert tree.get_action() == "delete"

    def test_action_propagates_to_embedded(self, registry):
        """Test set_action is pushed into embedded objects"""
        tree = ObjectTree("T", {"name": "a", "child": {"code": "x"}}, "insert", registry=registry)
        tree.set_action("update")

        assert tree.get_object("child").get_action() == "update"

    def test_action_not_propagated(self, registry):
        """Test set_embedded=False leaves embedded objects alone"""
        tree = ObjectTree("T", {"name": "a", "child": {"code": "x"}}, "insert", registry=registry)
        tree.set_action("update", set_embedded=False)

        assert tree.get_object("child").get_action() == "insert"


# ============================================================================
# TEST: Package exports
# ============================================================================


class TestPackageExports:
    """Tests for the names exported by the package and its subpackages"""

    def test_top_level_exports(self):
        """Test every name in __all__ is importable from the package"""
        import updateconnector

        for name in updateconnector.__all__:
            assert getattr(updateconnector, name) is not None

    def test_subpackage_exports(self):
        """Test subpackages export the objects defined in their modules"""
        from updateconnector import builder, exporter, schema, types, validator
        from updateconnector.builder.factory import ObjectTreeFactory
        from updateconnector.exporter.renderer import render
        from updateconnector.schema.registry import SchemaRegistry
        from updateconnector.types.country import CountryTree
        from updateconnector.validator.element_validator import ElementValidator

        assert builder.ObjectTree is ObjectTree
        assert builder.ObjectTreeFactory is ObjectTreeFactory
        assert exporter.render is render
        assert schema.SchemaRegistry is SchemaRegistry
        assert types.CountryTree is CountryTree
        assert validator.ElementValidator is ElementValidator
