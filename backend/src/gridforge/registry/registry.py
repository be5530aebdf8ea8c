"""Table registry: the single source of table metadata."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel

from gridforge.registry.adapter import build_registry_meta, build_table_meta
from gridforge.registry.types import RegistryMeta, TableMeta

if TYPE_CHECKING:
    from gridforge.tables import TableDefinition


class TableRegistry:
    """Describes every registered table.

    ``describe()`` re-derives the metadata on each call; callers that need
    it repeatedly should build it once and pass the RegistryMeta around.
    """

    def __init__(self, definitions: Iterable[TableDefinition] | None = None):
        if definitions is None:
            from gridforge.tables import TABLE_DEFINITIONS

            definitions = TABLE_DEFINITIONS
        self.definitions = tuple(definitions)

    def describe(self) -> RegistryMeta:
        return build_registry_meta(
            [build_table_meta(d.name, d.schema, d.options) for d in self.definitions]
        )

    def get_table(self, name: str) -> TableMeta | None:
        """Describe a single table, or None for unknown names."""
        for definition in self.definitions:
            if definition.name == name:
                return build_table_meta(definition.name, definition.schema, definition.options)
        return None

    def get_schema(self, name: str) -> type[BaseModel] | None:
        """The pydantic schema a table validates against, or None."""
        for definition in self.definitions:
            if definition.name == name:
                return definition.schema
        return None

    def list_tables(self) -> list[str]:
        return [d.name for d in self.definitions]
