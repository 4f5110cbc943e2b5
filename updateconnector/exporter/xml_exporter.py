"""
XML exporter.

Root objects get a wrapper tag named after their type; embedded objects
only render their <Element> tags, inside the reference tag written by the
embedding object:

```xml
<KnOrganisation xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <Element>
    <Fields Action="insert">
      <Nm>Acme</Nm>
    </Fields>
    <Objects>
      <KnBasicAddressAdr>
        <Element>
          <Fields Action="insert">
  ...
```
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from updateconnector.behavior import ChangeBehavior, ValidationBehavior

logger = logging.getLogger(__name__)

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

DEFAULT_INDENT = 2

QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_text(value: Any) -> str:
    """Escape text content/attribute values, including quotes."""
    return escape(str(value), QUOTE_ENTITIES)


def render_field(name: str, value: Any) -> str:
    if value is None:
        return f'<{name} xsi:nil="true"/>'
    if isinstance(value, bool):
        value = "1" if value else "0"
    return f"<{name}>{escape_text(value)}</{name}>"


class XmlExporter:
    """Render an object tree as Update Connector XML."""

    def __init__(self, pretty: bool = False, indent: Any = DEFAULT_INDENT, indent_start: str = ""):
        """
        Args:
            pretty: Add newlines and indentation
            indent: Spaces per level; pretty printing is disabled if this is
                not a positive integer
            indent_start: Prefix for every line; used when rendering
                embedded objects
        """
        valid_indent = isinstance(indent, int) and not isinstance(indent, bool) and indent > 0
        self.pretty = bool(pretty) and valid_indent
        self.indent = indent if valid_indent else DEFAULT_INDENT
        self.indent_start = indent_start if isinstance(indent_start, str) else ""

    @classmethod
    def from_options(cls, format_options: Optional[Dict[str, Any]] = None) -> "XmlExporter":
        options = format_options or {}
        return cls(
            pretty=options.get("pretty", False),
            indent=options.get("indent", DEFAULT_INDENT),
            indent_start=options.get("indent_start") or "",
        )

    def options(self) -> Dict[str, Any]:
        return {"pretty": self.pretty, "indent": self.indent, "indent_start": self.indent_start}

    def export(
        self,
        tree,
        change: Optional[ChangeBehavior] = None,
        validation: Optional[ValidationBehavior] = None,
    ) -> str:
        change = change if change is not None else ChangeBehavior()
        is_root = not tree.parent_type

        # Line prefixes: before the closing type tag, <Element>, <Fields> /
        # <Objects>, and individual fields.
        nl_type = nl_element = nl_group = nl_field = ""
        if self.pretty:
            step = " " * self.indent
            if is_root:
                nl_type = "\n" + self.indent_start
                nl_element = nl_type + step
            else:
                nl_element = "\n" + self.indent_start
            nl_group = nl_element + step
            nl_field = nl_group + step

        parts: List[str] = [self.indent_start]
        # The first embedded <Element> continues the line started by the caller.
        skip_start = bool(self.indent_start)
        if is_root:
            parts.append(f'<{tree.type_name} xmlns:xsi="{XSI_NAMESPACE}">')
            skip_start = False

        # Never flatten, and keep embedded trees: each embedded object renders
        # its own action and identifier attributes.
        xml_change = replace(
            change,
            flatten_single=False,
            wrap_in_element_container=False,
            keep_embedded_as_trees=True,
        )
        embedded_change = xml_change if change.allow_embedded_changes else xml_change.read_only()

        for index, element in enumerate(tree.get_elements(xml_change, validation)):
            action = tree.get_action(index)
            action_attribute = f' Action="{escape_text(action)}"' if action else ""

            id_attribute = ""
            definition = tree.get_definition(element, index)
            if definition.id_property and element.get(definition.id_key) is not None:
                id_attribute = f' {definition.id_property}="{escape_text(element[definition.id_key])}"'

            if skip_start:
                skip_start = False
            else:
                parts.append(nl_element)
            parts.append(f"<Element{id_attribute}>")

            parts.append(f"{nl_group}<Fields{action_attribute}>")
            for name, value in element["Fields"].items():
                parts.append(nl_field + render_field(name, value))
            parts.append(f"{nl_group}</Fields>")

            if element.get("Objects"):
                parts.append(f"{nl_group}<Objects>")
                embedded_options = self.options()
                if self.pretty:
                    embedded_options["indent_start"] = self.indent_start + " " * (
                        self.indent * (4 if is_root else 3)
                    )
                for name, embedded in element["Objects"].items():
                    parts.append(f"{nl_field}<{name}>" + ("\n" if self.pretty else ""))
                    parts.append(embedded.render("xml", embedded_options, embedded_change, validation))
                    parts.append(f"{nl_field}</{name}>")
                parts.append(f"{nl_group}</Objects>")

            parts.append(f"{nl_element}</Element>")

        if is_root:
            # No trailing newline, also when pretty printing.
            parts.append(f"{nl_type}</{tree.type_name}>")
            logger.debug(f"Rendered '{tree.type_name}' as XML")
        return "".join(parts)
