"""Data-layer exceptions."""

from typing import Any


class GridForgeError(Exception):
    """Base class for data-layer failures."""


class SchemaValidationError(GridForgeError):
    """A row failed its table's schema; ``message`` is the validator's text."""

    def __init__(self, table: str, message: str, errors: list[dict[str, Any]] | None = None):
        self.table = table
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class RowNotFoundError(GridForgeError):
    def __init__(self, table: str, id: str):
        self.table = table
        self.id = id
        super().__init__(f"Row '{id}' not found in '{table}'")


class UnknownTableError(GridForgeError):
    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Unknown table: {table}")


class BatchOperationError(GridForgeError):
    """Some rows of a batch failed; the others were applied and stay applied."""

    def __init__(self, operation: str, failures: dict[str, str], succeeded: list[str]):
        self.operation = operation
        self.failures = failures
        self.succeeded = succeeded
        super().__init__(
            f"Batch {operation} failed for {len(failures)} of "
            f"{len(failures) + len(succeeded)} rows"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "detail": str(self),
            "operation": self.operation,
            "failures": self.failures,
            "succeeded": self.succeeded,
        }
