"""GridForge CLI entry point."""

import click


@click.group()
def cli():
    """GridForge — metadata-driven data grid CLI."""
    pass


# Register subcommand groups
from gridforge.cli.tables_cmd import tables  # noqa: E402

cli.add_command(tables)
