"""Row stores, relation pre-fetch and batch operations."""

from gridforge.data.batch import batch_delete, batch_update
from gridforge.data.config import DatabaseConfig, create_data_service
from gridforge.data.errors import (
    BatchOperationError,
    GridForgeError,
    RowNotFoundError,
    SchemaValidationError,
    UnknownTableError,
)
from gridforge.data.memory import MemoryDataService
from gridforge.data.service import DataService, fetch_with_relations
from gridforge.data.sqlite import SQLiteDataService

__all__ = [
    "BatchOperationError",
    "DataService",
    "DatabaseConfig",
    "GridForgeError",
    "MemoryDataService",
    "RowNotFoundError",
    "SQLiteDataService",
    "SchemaValidationError",
    "UnknownTableError",
    "batch_delete",
    "batch_update",
    "create_data_service",
    "fetch_with_relations",
]
