"""Shared fixtures."""

import pytest

from updateconnector.schema.registry import SchemaRegistry

TEST_SCHEMA = {
    "T": {
        "id_property": "TId",
        "objects": {
            "Child": {"type": "C", "alias": "child"},
            "Children": {"type": "C", "alias": "children", "multiple": True},
        },
        "fields": {
            "Name": {"alias": "name", "required": True},
            "Active": {"alias": "active", "type": "boolean"},
            "Size": {"alias": "size", "type": "integer"},
            "Price": {"alias": "price", "type": "decimal"},
            "Kind": {"alias": "kind", "required": True, "default": "A"},
        },
    },
    "C": {
        "fields": {
            "Code": {"alias": "code"},
            "Level": {"alias": "level", "type": "integer", "default": 1},
        },
    },
}


@pytest.fixture
def registry():
    """Registry holding the small T / C test schema"""
    return SchemaRegistry.from_dict(TEST_SCHEMA)
