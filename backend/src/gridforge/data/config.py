"""Store configuration and data service factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridforge.data.service import DataService
    from gridforge.registry.registry import TableRegistry

MEMORY_URL = "memory://"


@dataclass
class DatabaseConfig:
    """Store connection configuration.

    Supports memory:// and sqlite:/// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. DATABASE_URL env var
        2. GRIDFORGE_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: memory://
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("GRIDFORGE_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        return cls(url=MEMORY_URL)

    @property
    def is_memory(self) -> bool:
        return self.url.startswith("memory")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


def create_data_service(
    config: DatabaseConfig, registry: TableRegistry | None = None
) -> DataService:
    """Create a data service based on the URL scheme.

    SQLite services are returned connected.

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_memory:
        from gridforge.data.memory import MemoryDataService

        return MemoryDataService(registry)

    if config.is_sqlite:
        from gridforge.data.sqlite import SQLiteDataService

        db_path = config.url.replace("sqlite:///", "")
        if not db_path:
            db_path = ":memory:"
        service = SQLiteDataService(db_path, registry)
        service.connect()
        return service

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
