"""Validation CLI commands: validate documents and list rules."""

import json
from dataclasses import replace
from pathlib import Path

import click
import yaml

from fieldrules.config import get_config
from fieldrules.registry import RuleRegistry
from fieldrules.schema import RecordSchema, SchemaError
from fieldrules.services import ValidationService


def _load_document(path: Path):
    try:
        with path.open() as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        click.echo(click.style(f"Error: cannot parse {path}: {exc}", fg="red"), err=True)
        raise SystemExit(2)


@click.command()
@click.argument(
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "data_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--record",
    "record_name",
    default=None,
    help="Record to validate against (default: first record in the schema).",
)
@click.option(
    "--required-by-default",
    is_flag=True,
    default=False,
    help="Fail fields without annotations and empty fields not marked optional.",
)
@click.option(
    "--compact",
    is_flag=True,
    default=False,
    help="Print the report on a single line.",
)
def validate(
    schema_path: Path,
    data_path: Path,
    record_name: str | None,
    required_by_default: bool,
    compact: bool,
):
    """Validate a JSON/YAML document against a record schema.

    DATA_PATH may hold a single object or a list of objects. The report is
    printed as JSON; the exit code is 1 when any document is invalid.
    """
    try:
        schema = RecordSchema.from_yaml(schema_path)
    except SchemaError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        raise SystemExit(2)

    data = _load_document(data_path)
    name = record_name or schema.default_record

    config = get_config()
    if required_by_default:
        config = replace(config, required_by_default=True)
    service = ValidationService(config)

    documents = data if isinstance(data, list) else [data]
    results = []
    try:
        for document in documents:
            results.append(service.validate(schema.build(name, document)).to_dict())
    except SchemaError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        raise SystemExit(2)

    output = results if isinstance(data, list) else results[0]
    click.echo(json.dumps(output, indent=None if compact else 2))

    invalid = sum(1 for r in results if not r["valid"])
    if invalid:
        click.echo(
            click.style(f"{invalid} of {len(results)} document(s) invalid", fg="red"),
            err=True,
        )
        raise SystemExit(1)


@click.command()
def rules():
    """List the registered rules, grouped by kind."""
    groups = RuleRegistry.describe()
    titles = {
        "rules": "Rules",
        "param_rules": "Parameterized rules",
        "custom_rules": "Custom rules",
    }
    for key, title in titles.items():
        names = groups[key]
        click.echo(click.style(f"{title} ({len(names)}):", bold=True))
        for name in names:
            click.echo(f"  {name}")
