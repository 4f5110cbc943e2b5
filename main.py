#!/usr/bin/env python3
"""Update Connector payload tool - Entry point."""
import json
import logging
import os
import sys

# Add the package root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import click
from colorama import Fore, Style, init

from config import app_config
from updateconnector.behavior import ChangeBehavior, ValidationBehavior
from updateconnector.builder.factory import ObjectTreeFactory
from updateconnector.errors import UpdateConnectorError
from updateconnector.exporter import EXPORTERS
from updateconnector.schema.registry import default_registry

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Update Connector Payload Tool{Fore.CYAN}        ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def fail(message: str):
    """Print an error and exit with status 1."""
    click.echo(f"{Fore.RED}❌ {message}", err=True)
    sys.exit(1)


def load_registry(schema_file):
    try:
        return default_registry(schema_file)
    except UpdateConnectorError as e:
        fail(str(e))


@click.group()
@click.version_option(version="0.1.0")
@click.option("--log-level", default=None, help="Logging level (default from UPDATE_CONNECTOR_LOG_LEVEL)")
def cli(log_level):
    """Build and validate Update Connector payloads."""
    logging.basicConfig(
        level=(log_level or app_config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--type", "type_name", required=True, help="Object type, e.g. KnOrganisation")
@click.option("--action", default=None, help="insert, update, delete (default from config)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(EXPORTERS), case_sensitive=False),
    default=None,
    help="Output format (default from config)",
)
@click.option("--pretty", is_flag=True, help="Pretty print the output")
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False), help="JSON file with extra type definitions")
@click.option("--no-defaults", is_flag=True, help="Do not set default values on insert")
@click.option("--no-validate-required", is_flag=True, help="Skip required field / object checks")
@click.option("--allow-changes", is_flag=True, help="Allow type specific conversions (names, streets)")
@click.option("--validate-format", is_flag=True, help="Check formats, e.g. phone numbers")
def render(
    input_file,
    type_name,
    action,
    output_format,
    pretty,
    schema_file,
    no_defaults,
    no_validate_required,
    allow_changes,
    validate_format,
):
    """Render INPUT_FILE (JSON element data) as a payload."""
    settings = app_config.render
    registry = load_registry(schema_file or settings.schema_file)

    try:
        with open(input_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON in {input_file}: {e}")

    change = ChangeBehavior(
        allow_defaults_on_insert=not no_defaults,
        allow_changes=allow_changes,
    )
    validation = ValidationBehavior(required=not no_validate_required, format=validate_format)
    format_options = settings.format_options()
    if pretty:
        format_options["pretty"] = True

    try:
        tree = ObjectTreeFactory.create(
            type_name,
            data,
            action if action is not None else settings.action,
            registry=registry,
        )
        output = tree.render(output_format or settings.format, format_options, change, validation)
    except UpdateConnectorError as e:
        fail(str(e))

    logger.info(f"Rendered {len(tree)} '{type_name}' element(s)")
    click.echo(output)


@cli.command()
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False), help="JSON file with extra type definitions")
def list_types(schema_file):
    """List the known object types."""
    print_banner()
    registry = load_registry(schema_file or app_config.render.schema_file)
    for type_name in registry.type_names():
        click.echo(f"  {Fore.GREEN}{type_name}")


@cli.command()
@click.argument("type_name")
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False), help="JSON file with extra type definitions")
def show_type(type_name, schema_file):
    """Show the fields and objects of TYPE_NAME."""
    print_banner()
    registry = load_registry(schema_file or app_config.render.schema_file)
    try:
        definition = registry.get_definition(type_name)
    except UpdateConnectorError as e:
        fail(str(e))

    click.echo(f"{Fore.YELLOW}{type_name}")
    click.echo(f"{Fore.YELLOW}{'=' * 30}")
    if definition.id_property:
        click.echo(f"ID property: {definition.id_property}")

    click.echo(f"\n{Fore.CYAN}Fields:")
    for name, field in definition.fields.items():
        details = [field.kind or "string"]
        if field.alias:
            details.append(f"alias: {field.alias}")
        if field.required:
            details.append("required")
        if field.has_default:
            details.append(f"default: {field.default!r}")
        click.echo(f"  {name:<20} {', '.join(details)}")

    if definition.references:
        click.echo(f"\n{Fore.CYAN}Objects:")
        for name, reference in definition.references.items():
            details = [f"type: {reference.target_type or name}"]
            if reference.alias:
                details.append(f"alias: {reference.alias}")
            if reference.multiple:
                details.append("multiple")
            if reference.required:
                details.append("required")
            click.echo(f"  {name:<20} {', '.join(details)}")


if __name__ == "__main__":
    cli()
