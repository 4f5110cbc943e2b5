"""Factory for creating the ObjectTree class registered for a type."""
import logging
from typing import Any, Dict, Optional, Type

from updateconnector.behavior import ValidationBehavior
from updateconnector.schema.registry import SchemaRegistry
from updateconnector.types.address import AddressTree
from updateconnector.types.contact import OrgPersonContactTree
from updateconnector.types.country import CountryTree
from updateconnector.types.sales import SalesLinesTree
from .object_tree import ObjectTree

logger = logging.getLogger(__name__)


class ObjectTreeFactory:
    """Factory for creating object trees."""

    # Types with their own behavior; all other types use ObjectTree.
    TYPE_MAP: Dict[str, Type[ObjectTree]] = {
        "FbSales": CountryTree,
        "FbSalesLines": SalesLinesTree,
        "KnBasicAddress": AddressTree,
        "KnContact": OrgPersonContactTree,
        "KnOrganisation": OrgPersonContactTree,
        "KnPerson": OrgPersonContactTree,
    }

    @staticmethod
    def get_class(type_name: str) -> Type[ObjectTree]:
        return ObjectTreeFactory.TYPE_MAP.get(type_name, ObjectTree)

    @staticmethod
    def register(type_name: str, tree_class: Type[ObjectTree]) -> None:
        """
        Use a custom ObjectTree subclass for a type.

        Raises:
            TypeError: If tree_class is not an ObjectTree subclass
        """
        if not (isinstance(tree_class, type) and issubclass(tree_class, ObjectTree)):
            raise TypeError(f"{tree_class!r} is not an ObjectTree subclass.")
        ObjectTreeFactory.TYPE_MAP[type_name] = tree_class

    @staticmethod
    def create(
        type_name: str,
        data: Any = None,
        action: str = "",
        validation: Optional[ValidationBehavior] = None,
        parent_type: str = "",
        registry: Optional[SchemaRegistry] = None,
    ) -> ObjectTree:
        """
        Create an object tree for a type.

        Args:
            type_name: Object type
            data: Raw element data
            action: Action for all elements (and embedded objects)
            validation: Checks done while adding elements
            parent_type: Type of the embedding object, "" for a root object
            registry: Schema registry

        Returns:
            ObjectTree: Instance of the class registered for the type

        Raises:
            SchemaError: If the type has no definition
            InvalidInputError: If the data has the wrong shape
        """
        tree_class = ObjectTreeFactory.get_class(type_name)
        logger.debug(f"Creating {tree_class.__name__} for '{type_name}' (parent '{parent_type}')")
        return tree_class(type_name, data, action, validation, parent_type, registry)


def create(
    type_name: str,
    data: Any = None,
    action: str = "",
    validation: Optional[ValidationBehavior] = None,
    parent_type: str = "",
    registry: Optional[SchemaRegistry] = None,
) -> ObjectTree:
    """Shortcut for ObjectTreeFactory.create()."""
    return ObjectTreeFactory.create(type_name, data, action, validation, parent_type, registry)
