"""
Exporter Module

Renders validated object trees as Update Connector payloads:
- JSON: {"<Type>": {"Element": ...}}
- XML: <Type> / <Element> / <Fields Action="..."> / <Objects>
"""

from .json_exporter import JsonExporter
from .xml_exporter import XmlExporter
from .renderer import EXPORTERS, render

__all__ = [
    "JsonExporter",
    "XmlExporter",
    "EXPORTERS",
    "render",
]
