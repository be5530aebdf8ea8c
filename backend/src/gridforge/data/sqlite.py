"""SQLite row store: one JSON document per row, one table per grid table."""

import json
import logging
import sqlite3
from pathlib import Path
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


class SQLiteDataService:
    """Simple SQLite document store."""

    def __init__(self, db_path: Path | str = ":memory:", registry: TableRegistry | None = None):
        self.db_path = str(db_path)
        self.registry = registry or TableRegistry()
        self.conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open the connection and create a document table per grid table."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        for name in self.registry.list_tables():
            self.conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table_name(name)} ("
                "id TEXT PRIMARY KEY, "
                "creation_time INTEGER NOT NULL, "
                "document TEXT NOT NULL)"
            )
        self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def _table_name(self, table: str) -> str:
        if table not in self.registry.list_tables():
            raise UnknownTableError(table)
        return f'"rows_{table}"'

    def _schema(self, table: str) -> type[BaseModel]:
        schema = self.registry.get_schema(table)
        if schema is None:
            raise UnknownTableError(table)
        return schema

    def _connection(self) -> sqlite3.Connection:
        if not self.conn:
            raise RuntimeError("Database not connected")
        return self.conn

    @staticmethod
    def _to_row(record: sqlite3.Row) -> dict[str, Any]:
        return {
            "_id": record["id"],
            "_creationTime": record["creation_time"],
            **json.loads(record["document"]),
        }

    async def list(
        self, table: str, limit: int | None = None, offset: int = 0
    ) -> list[dict[str, Any]]:
        conn = self._connection()
        sql = f"SELECT * FROM {self._table_name(table)} ORDER BY rowid LIMIT ? OFFSET ?"
        cursor = conn.execute(sql, [limit if limit is not None else -1, offset])
        return [self._to_row(r) for r in cursor.fetchall()]

    async def get(self, table: str, id: str) -> dict[str, Any] | None:
        conn = self._connection()
        cursor = conn.execute(f"SELECT * FROM {self._table_name(table)} WHERE id = ?", [id])
        record = cursor.fetchone()
        return self._to_row(record) if record else None

    async def insert(self, table: str, value: dict[str, Any]) -> dict[str, Any]:
        conn = self._connection()
        table_name = self._table_name(table)
        data = validate_row(table, self._schema(table), strip_system_fields(value))
        row = {"_id": new_id(), "_creationTime": now_millis(), **data}
        conn.execute(
            f"INSERT INTO {table_name} (id, creation_time, document) VALUES (?, ?, ?)",
            [row["_id"], row["_creationTime"], json.dumps(data)],
        )
        conn.commit()
        logger.debug("Inserted %s/%s", table, row["_id"])
        return row

    async def update(self, table: str, id: str, patch: dict[str, Any]) -> dict[str, Any]:
        conn = self._connection()
        existing = await self.get(table, id)
        if existing is None:
            raise RowNotFoundError(table, id)
        merged = {**strip_system_fields(existing), **strip_system_fields(patch)}
        data = validate_row(table, self._schema(table), merged)
        conn.execute(
            f"UPDATE {self._table_name(table)} SET document = ? WHERE id = ?",
            [json.dumps(data), id],
        )
        conn.commit()
        return {"_id": id, "_creationTime": existing["_creationTime"], **data}

    async def remove(self, table: str, id: str) -> bool:
        conn = self._connection()
        cursor = conn.execute(f"DELETE FROM {self._table_name(table)} WHERE id = ?", [id])
        conn.commit()
        return cursor.rowcount > 0
