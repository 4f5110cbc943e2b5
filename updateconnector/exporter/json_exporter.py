"""JSON exporter."""
import json
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.errors import InvalidInputError

logger = logging.getLogger(__name__)


class JsonExporter:
    """
    Render an object tree as Update Connector JSON.

    Output structure: {"<Type>": {"Element": <element or list of elements>}}
    """

    def __init__(self, pretty: bool = False, indent: int = 4):
        self.pretty = pretty
        self.indent = indent

    @classmethod
    def from_options(cls, format_options: Optional[Dict[str, Any]] = None) -> "JsonExporter":
        options = format_options or {}
        indent = options.get("indent", 4)
        if not isinstance(indent, int) or isinstance(indent, bool) or indent <= 0:
            indent = 4
        return cls(pretty=bool(options.get("pretty")), indent=indent)

    def build(
        self,
        tree,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> Dict[str, Any]:
        """Validated data structure, before encoding."""
        change = change if change is not None else ChangeBehavior()
        if change.keep_embedded_as_trees:
            raise InvalidInputError("keep_embedded_as_trees cannot be used for JSON output.")

        # The {"Element": ...} wrapper is always there; flatten_single is
        # up to the caller.
        data = tree.validate(replace(change, wrap_in_element_container=True), validation)
        return {tree.type_name: data}

    def export(
        self,
        tree,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> str:
        data = self.build(tree, change, validation)
        if self.pretty:
            output = json.dumps(data, indent=self.indent, default=str)
        else:
            output = json.dumps(data, separators=(",", ":"), default=str)
        logger.debug(f"Rendered '{tree.type_name}' as JSON ({len(output)} chars)")
        return output
