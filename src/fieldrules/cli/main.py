"""fieldrules CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """fieldrules: annotation-driven record validation CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from fieldrules.cli.validate_cmd import rules, validate  # noqa: E402

cli.add_command(validate)
cli.add_command(rules)
