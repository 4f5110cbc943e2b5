"""FbSalesLines: defaults and requiredness depending on the item type."""
from updateconnector.builder.object_tree import ObjectTree
from updateconnector.schema.models import NO_DEFAULT, TypeDefinition

# Item types (VaIt) for which unit, quantity and price apply: 2 article,
# 7 composition.
ARTICLE_ITEM_TYPES = ("2", "7")


class SalesLinesTree(ObjectTree):

    def get_definition(self, element=None, element_index=None) -> TypeDefinition:
        definition = super().get_definition(element, element_index)
        fields = (element or {}).get("Fields", {})

        item_type = fields.get("VaIt")
        if item_type is None and "VaIt" in definition.fields and definition.fields["VaIt"].has_default:
            item_type = definition.fields["VaIt"].default
        is_article = item_type is not None and str(item_type).strip() in ARTICLE_ITEM_TYPES

        if is_article:
            definition.set_field("BiUn", default="Stk")
            definition.set_field("QuUn", default=1)
        else:
            for name in ("BiUn", "QuUn"):
                if name in definition.fields:
                    definition.set_field(name, default=NO_DEFAULT)
        for name in ("ItCd", "BiUn", "QuUn", "Upri"):
            if name in definition.fields:
                definition.set_field(name, required=is_article)
        return definition
