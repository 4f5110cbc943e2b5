"""Render object trees to the supported output formats."""
from typing import Any, Dict, Optional

from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.errors import InvalidInputError
from .json_exporter import JsonExporter
from .xml_exporter import XmlExporter

# Format name -> exporter class
EXPORTERS = {
    "json": JsonExporter,
    "xml": XmlExporter,
}


def render(
    tree,
    format: str = "json",
    format_options: Optional[Dict[str, Any]] = None,
    change: Optional[ChangeBehavior] = None,
    validation: Optional[ValidationBehavior] = None,
) -> str:
    """
    Validate an object tree and render it

    Args:
        tree: ObjectTree to render
        format: "json" or "xml" (case insensitive)
        format_options: "pretty" (both formats), "indent" and "indent_start"
            (XML; "indent" is also used for pretty JSON)
        change: Change behavior (default ChangeBehavior())
        validation: Validation behavior (default ValidationBehavior())

    Returns:
        The payload string

    Raises:
        InvalidInputError: If the format is unknown
        ValidationError: If the data does not validate
    """
    if not isinstance(format, str) or format.lower() not in EXPORTERS:
        raise InvalidInputError(f"Invalid format {format!r}.")

    exporter = EXPORTERS[format.lower()].from_options(format_options)
    return exporter.export(tree, change, validation)
