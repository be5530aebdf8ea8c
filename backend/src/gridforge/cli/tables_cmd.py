"""Table CLI commands — list, describe and preview columns."""

import json

import click
import yaml

from gridforge.grid.columns import generate_columns, required_relation_tables
from gridforge.registry import TableRegistry


@click.group()
def tables():
    """Table metadata commands."""
    pass


@tables.command("list")
def list_tables():
    """List registered tables with their field counts."""
    registry_meta = TableRegistry().describe()
    for name, table_meta in registry_meta.tables.items():
        click.echo(f"{name}  ({table_meta.label}, {len(table_meta.fields)} fields)")


@tables.command()
@click.argument("table")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format.",
)
def describe(table: str, output_format: str):
    """Print the derived metadata for TABLE."""
    table_meta = TableRegistry().get_table(table)
    if table_meta is None:
        click.echo(f"Error: Unknown table '{table}'", err=True)
        raise SystemExit(1)

    data = table_meta.to_dict()
    if output_format == "json":
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False))


@tables.command()
@click.argument("table")
def columns(table: str):
    """Show the columns the grid would generate for TABLE."""
    table_meta = TableRegistry().get_table(table)
    if table_meta is None:
        click.echo(f"Error: Unknown table '{table}'", err=True)
        raise SystemExit(1)

    # No rows are loaded here, so relation options come out empty.
    related = {name: [] for name in required_relation_tables(table_meta)}
    for column in generate_columns(table_meta, related):
        variant = column.filter.variant.value if column.filter else "-"
        icon = column.filter.icon if column.filter else "-"
        locked = "  [locked]" if column.locked else ""
        click.echo(f"{column.id:<24} {column.label or '-':<24} {variant:<12} {icon}{locked}")
