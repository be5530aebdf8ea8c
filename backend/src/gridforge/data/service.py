"""DataService Protocol and helpers shared by the stores."""

import asyncio
import time
import uuid
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from gridforge.data.errors import SchemaValidationError
from gridforge.registry.types import TableMeta

SYSTEM_FIELDS = ("_id", "_creationTime")


@runtime_checkable
class DataService(Protocol):
    """Interface every row store implements.

    Rows are plain dicts that always carry ``_id`` and ``_creationTime``.
    """

    async def list(
        self, table: str, limit: int | None = None, offset: int = 0
    ) -> list[dict[str, Any]]: ...

    async def get(self, table: str, id: str) -> dict[str, Any] | None: ...

    async def insert(self, table: str, value: dict[str, Any]) -> dict[str, Any]: ...

    async def update(self, table: str, id: str, patch: dict[str, Any]) -> dict[str, Any]: ...

    async def remove(self, table: str, id: str) -> bool: ...


def new_id() -> str:
    return uuid.uuid4().hex


def now_millis() -> int:
    return int(time.time() * 1000)


def strip_system_fields(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k not in SYSTEM_FIELDS}


def validate_row(table: str, schema: type[BaseModel], data: dict[str, Any]) -> dict[str, Any]:
    """Validate a user row and return its JSON-ready form.

    Raises:
        SchemaValidationError: With pydantic's message unchanged
    """
    try:
        model = schema.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError(
            table, str(e), e.errors(include_url=False, include_context=False)
        ) from e
    return model.model_dump(mode="json")


async def fetch_with_relations(
    service: DataService,
    table_meta: TableMeta,
    limit: int | None = None,
    offset: int = 0,
) -> dict[str, Any]:
    """Load a table's rows together with every relation target table.

    Returns:
        ``{"data": rows, "relations": {table: rows}}``
    """
    targets = sorted({f.relation.table for f in table_meta.relation_fields()})
    results = await asyncio.gather(
        service.list(table_meta.name, limit=limit, offset=offset),
        *(service.list(t) for t in targets),
    )
    return {"data": results[0], "relations": dict(zip(targets, results[1:]))}
