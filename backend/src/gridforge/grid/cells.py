"""Cell behaviour: static display or inline edit with submit feedback."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from gridforge.registry.types import FieldMeta

logger = logging.getLogger(__name__)

UpdateRow = Callable[[str, dict[str, Any]], Awaitable[Any]]


class CellMode(str, Enum):
    STATIC = "static"
    INLINE_EDIT = "inline-edit"


@dataclass(frozen=True)
class Feedback:
    """Transient result shown after an inline edit."""

    success: bool
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


@dataclass
class CellEditor:
    """Click-to-edit affordance for one editable field."""

    field: FieldMeta
    update_row: UpdateRow | None = None

    @property
    def title(self) -> str:
        return f"Edit {self.field.render.label or self.field.name}"

    async def submit(self, row_id: str, value: Any) -> Feedback:
        """Validate ``value`` and send it as a single-field patch.

        Failures are logged and reported back; nothing is retried.
        """
        if self.update_row is None:
            return Feedback(False, "Editing is not available")
        try:
            self.field.validation.validate(value)
        except ValidationError as e:
            message = e.errors()[0]["msg"] if e.errors() else str(e)
            return Feedback(False, message)
        try:
            await self.update_row(row_id, {self.field.name: value})
        except Exception as e:
            logger.error("Update of %s on row %s failed: %s", self.field.name, row_id, e)
            return Feedback(False, str(e) or "Update failed")
        return Feedback(True, "Row updated")


def is_read_only_cell(field: FieldMeta) -> bool:
    return not field.behaviors.editable or field.name == "_id"
