"""FastAPI application."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gridforge.api.tables import create_tables_router
from gridforge.data import (
    BatchOperationError,
    DatabaseConfig,
    RowNotFoundError,
    SchemaValidationError,
    UnknownTableError,
    create_data_service,
)
from gridforge.grid.columns import MissingRelationDataError
from gridforge.registry import RegistryMeta, TableRegistry

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _state(app: FastAPI, name: str) -> Any:
    """Startup-built object on app.state, or None outside the lifespan."""
    return getattr(app.state, name, None)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the registry and data service into app.state; close the store on shutdown."""
    registry = TableRegistry()
    registry_meta = registry.describe()

    # Supports DATABASE_URL or GRIDFORGE_DB_PATH env vars
    db_config = DatabaseConfig.from_env()

    # Ensure parent directory exists for SQLite databases
    if db_config.is_sqlite:
        sqlite_path = db_config.url.replace("sqlite:///", "")
        if sqlite_path and sqlite_path != ":memory:":
            Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    data_service = create_data_service(db_config, registry)
    app.state.registry_meta = registry_meta
    app.state.data_service = data_service
    logger.info(
        "GridForge started with %d tables, store %s",
        len(registry_meta.tables),
        db_config.url,
    )

    yield

    # Cleanup
    close = getattr(data_service, "close", None)
    if close:
        close()
    app.state.registry_meta = None
    app.state.data_service = None


def _cors_origins() -> list[str]:
    raw = os.environ.get("GRIDFORGE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(title="GridForge API", lifespan=lifespan)

# CORS for frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    create_tables_router(
        get_registry_meta=lambda: _state(app, "registry_meta"),
        get_data_service=lambda: _state(app, "data_service"),
    )
)


# --- Error mapping ---


@app.exception_handler(SchemaValidationError)
async def schema_validation_handler(request: Request, exc: SchemaValidationError):
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(
            {"detail": exc.message, "table": exc.table, "errors": exc.errors}
        ),
    )


@app.exception_handler(RowNotFoundError)
async def row_not_found_handler(request: Request, exc: RowNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(UnknownTableError)
async def unknown_table_handler(request: Request, exc: UnknownTableError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(BatchOperationError)
async def batch_operation_handler(request: Request, exc: BatchOperationError):
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(MissingRelationDataError)
async def missing_relation_handler(request: Request, exc: MissingRelationDataError):
    logger.error("Column generation failed: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# --- Metadata Endpoints ---


@app.get("/api/health")
async def health(request: Request) -> dict[str, Any]:
    registry_meta: RegistryMeta | None = _state(request.app, "registry_meta")
    return {"status": "ok", "tables": len(registry_meta.tables) if registry_meta else 0}


@app.get("/api/metadata")
async def list_tables(request: Request) -> dict[str, Any]:
    """List all registered tables."""
    registry_meta: RegistryMeta | None = _state(request.app, "registry_meta")
    if not registry_meta:
        raise HTTPException(500, "Registry not initialized")

    return {
        "version": registry_meta.version,
        "tables": [
            {"name": t.name, "label": t.label, "fieldCount": len(t.fields)}
            for t in registry_meta.tables.values()
        ],
    }


@app.get("/api/metadata/{table}")
async def get_table_metadata(table: str, request: Request) -> dict[str, Any]:
    """Get full metadata for a table."""
    registry_meta: RegistryMeta | None = _state(request.app, "registry_meta")
    if not registry_meta:
        raise HTTPException(500, "Registry not initialized")

    table_meta = registry_meta.get_table(table)
    if not table_meta:
        raise HTTPException(404, f"Table '{table}' not found")
    return table_meta.to_dict()
