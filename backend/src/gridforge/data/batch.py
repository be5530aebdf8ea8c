"""Concurrent multi-row update and delete."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from gridforge.data.errors import BatchOperationError, RowNotFoundError
from gridforge.data.service import DataService

logger = logging.getLogger(__name__)


def _collect(
    operation: str, table: str, ids: Sequence[str], results: list[Any]
) -> list[str]:
    failures: dict[str, str] = {}
    succeeded: list[str] = []
    for row_id, result in zip(ids, results):
        if isinstance(result, BaseException):
            failures[row_id] = str(result)
        else:
            succeeded.append(row_id)
    if failures:
        logger.error(
            "Batch %s on %s failed for %d rows: %s",
            operation,
            table,
            len(failures),
            failures,
        )
        raise BatchOperationError(operation, failures, succeeded)
    return succeeded


async def batch_update(
    service: DataService,
    table: str,
    ids: Sequence[str],
    field: str,
    value: Any,
) -> list[str]:
    """Set one field on every row concurrently.

    Rows that succeed stay updated even when others fail.

    Raises:
        BatchOperationError: If any row failed
    """
    results = await asyncio.gather(
        *(service.update(table, row_id, {field: value}) for row_id in ids),
        return_exceptions=True,
    )
    return _collect("update", table, ids, results)


async def _remove(service: DataService, table: str, row_id: str) -> None:
    if not await service.remove(table, row_id):
        raise RowNotFoundError(table, row_id)


async def batch_delete(service: DataService, table: str, ids: Sequence[str]) -> list[str]:
    """Delete every row concurrently; missing rows count as failures."""
    results = await asyncio.gather(
        *(_remove(service, table, row_id) for row_id in ids),
        return_exceptions=True,
    )
    return _collect("delete", table, ids, results)
