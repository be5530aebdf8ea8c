"""In-memory row store."""

import logging
from typing import Any

from pydantic import BaseModel

from gridforge.data.errors import RowNotFoundError, UnknownTableError
from gridforge.data.service import (
    new_id,
    now_millis,
    strip_system_fields,
    validate_row,
)
from gridforge.registry.registry import TableRegistry

logger = logging.getLogger(__name__)


class MemoryDataService:
    """Keeps rows in per-table dicts, in insertion order.

    Every method runs without awaiting, so each operation is atomic with
    respect to the event loop.
    """

    def __init__(self, registry: TableRegistry | None = None):
        self.registry = registry or TableRegistry()
        self._rows: dict[str, dict[str, dict[str, Any]]] = {
            name: {} for name in self.registry.list_tables()
        }

    def _schema(self, table: str) -> type[BaseModel]:
        schema = self.registry.get_schema(table)
        if schema is None:
            raise UnknownTableError(table)
        return schema

    def _table(self, table: str) -> dict[str, dict[str, Any]]:
        if table not in self._rows:
            raise UnknownTableError(table)
        return self._rows[table]

    async def list(
        self, table: str, limit: int | None = None, offset: int = 0
    ) -> list[dict[str, Any]]:
        rows = list(self._table(table).values())
        end = offset + limit if limit is not None else None
        return [dict(r) for r in rows[offset:end]]

    async def get(self, table: str, id: str) -> dict[str, Any] | None:
        row = self._table(table).get(id)
        return dict(row) if row else None

    async def insert(self, table: str, value: dict[str, Any]) -> dict[str, Any]:
        data = validate_row(table, self._schema(table), strip_system_fields(value))
        row = {"_id": new_id(), "_creationTime": now_millis(), **data}
        self._table(table)[row["_id"]] = row
        logger.debug("Inserted %s/%s", table, row["_id"])
        return dict(row)

    async def update(self, table: str, id: str, patch: dict[str, Any]) -> dict[str, Any]:
        rows = self._table(table)
        existing = rows.get(id)
        if existing is None:
            raise RowNotFoundError(table, id)
        merged = {**strip_system_fields(existing), **strip_system_fields(patch)}
        data = validate_row(table, self._schema(table), merged)
        row = {"_id": existing["_id"], "_creationTime": existing["_creationTime"], **data}
        rows[id] = row
        return dict(row)

    async def remove(self, table: str, id: str) -> bool:
        return self._table(table).pop(id, None) is not None
