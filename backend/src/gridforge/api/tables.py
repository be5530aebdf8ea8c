"""Row query and mutation endpoints for registered tables."""

from typing import Any, Callable

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from gridforge.data import (
    DataService,
    RowNotFoundError,
    batch_delete,
    batch_update,
    fetch_with_relations,
)
from gridforge.filters import decode_filters, filter_rows, parse_join_operator
from gridforge.grid.columns import column_ids, generate_columns
from gridforge.grid.forms import editable_fields, initial_values, validate_form
from gridforge.grid.query import group_rows, paginate, parse_sort, search_rows, sort_rows
from gridforge.grid.row_actions import duplicate_payload
from gridforge.registry.types import RegistryMeta, TableMeta


class BatchUpdateRequest(BaseModel):
    ids: list[str]
    field: str
    value: Any = None


class BatchDeleteRequest(BaseModel):
    ids: list[str]


def create_tables_router(
    get_registry_meta: Callable[[], RegistryMeta | None],
    get_data_service: Callable[[], DataService | None],
) -> APIRouter:
    """Create the table rows router with injected dependencies."""
    router = APIRouter(prefix="/api/tables", tags=["tables"])

    def _services() -> tuple[RegistryMeta, DataService]:
        registry_meta = get_registry_meta()
        service = get_data_service()
        if not registry_meta or not service:
            raise HTTPException(500, "Not initialized")
        return registry_meta, service

    def _table(table: str) -> tuple[TableMeta, DataService]:
        registry_meta, service = _services()
        table_meta = registry_meta.get_table(table)
        if not table_meta:
            raise HTTPException(404, f"Table '{table}' not found")
        return table_meta, service

    @router.get("/{table}/columns")
    async def get_columns(table: str) -> dict[str, Any]:
        """Generated column descriptors; unknown tables have none."""
        registry_meta, service = _services()
        table_meta = registry_meta.get_table(table)
        if not table_meta:
            return {"columns": []}

        fetched = await fetch_with_relations(service, table_meta)
        columns = generate_columns(table_meta, fetched["relations"], fetched["data"])
        return {"columns": [c.to_dict() for c in columns]}

    @router.get("/{table}/rows")
    async def list_rows(
        table: str,
        limit: int | None = None,
        offset: int = 0,
        filters: str | None = None,
        joinOperator: str | None = None,
        search: str | None = None,
        sort: str | None = None,
        group: str | None = None,
    ) -> dict[str, Any]:
        """Rows with relations, after URL filters, search and sort."""
        table_meta, service = _table(table)
        fetched = await fetch_with_relations(service, table_meta)
        rows = fetched["data"]
        relations = fetched["relations"]

        filterable = column_ids(generate_columns(table_meta, relations, rows))
        active_filters = decode_filters(filters, filterable)
        join_operator = parse_join_operator(joinOperator)
        rows = filter_rows(rows, active_filters, join_operator, relations)
        rows = search_rows(rows, search or "", table_meta, relations)
        rows = sort_rows(rows, parse_sort(sort) or table_meta.default_sort or [])

        result: dict[str, Any] = {
            "data": paginate(rows, limit, offset),
            "relations": relations,
            "total": len(rows),
            "filters": [f.to_wire() for f in active_filters],
            "joinOperator": join_operator.value,
        }
        if group:
            group_fields = [g.strip() for g in group.split(",") if g.strip()]
            result["groups"] = [g.to_dict() for g in group_rows(rows, group_fields)]
        return result

    @router.get("/{table}/form")
    async def get_form(table: str, id: str | None = None) -> dict[str, Any]:
        """Editable fields and starting values for a create or edit form."""
        table_meta, service = _table(table)
        row = None
        if id is not None:
            row = await service.get(table, id)
            if row is None:
                raise RowNotFoundError(table, id)
        return {
            "fields": [f.to_dict() for f in editable_fields(table_meta)],
            "values": initial_values(table_meta, row),
        }

    @router.post("/{table}/form/validate")
    async def check_form(table: str, values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        table_meta, _ = _table(table)
        result = validate_form(table_meta, values)
        return {"valid": result.valid, "data": result.data, "errors": result.errors}

    @router.post("/{table}")
    async def insert_row(table: str, value: dict[str, Any] = Body(...)):
        _, service = _table(table)
        row = await service.insert(table, value)
        return JSONResponse(status_code=201, content={"data": row})

    @router.patch("/{table}/{id}")
    async def update_row(table: str, id: str, patch: dict[str, Any] = Body(...)) -> dict[str, Any]:
        _, service = _table(table)
        row = await service.update(table, id, patch)
        return {"data": row}

    @router.delete("/{table}/{id}")
    async def delete_row(table: str, id: str) -> dict[str, Any]:
        _, service = _table(table)
        if not await service.remove(table, id):
            raise RowNotFoundError(table, id)
        return {"deleted": id}

    @router.post("/{table}/{id}/duplicate")
    async def duplicate_row(table: str, id: str):
        """Insert a copy of a row without its system ids."""
        _, service = _table(table)
        source = await service.get(table, id)
        if source is None:
            raise RowNotFoundError(table, id)
        row = await service.insert(table, duplicate_payload(source))
        return JSONResponse(status_code=201, content={"data": row})

    @router.post("/{table}/batch/update")
    async def batch_update_rows(table: str, request: BatchUpdateRequest) -> dict[str, Any]:
        table_meta, service = _table(table)
        if request.field not in table_meta.fields:
            raise HTTPException(422, f"Unknown field '{request.field}' on '{table}'")
        updated = await batch_update(service, table, request.ids, request.field, request.value)
        return {"updated": updated}

    @router.post("/{table}/batch/delete")
    async def batch_delete_rows(table: str, request: BatchDeleteRequest) -> dict[str, Any]:
        _, service = _table(table)
        deleted = await batch_delete(service, table, request.ids)
        return {"deleted": deleted}

    return router
