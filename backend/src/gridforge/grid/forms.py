"""Create/edit form support derived from table metadata."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from gridforge.registry.types import FieldMeta, TableMeta


@dataclass
class FormResult:
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


def editable_fields(table_meta: TableMeta) -> list[FieldMeta]:
    """Fields a user may fill in, in declaration order."""
    return [
        f
        for name, f in table_meta.fields.items()
        if f.behaviors.editable and not f.behaviors.read_only and name != "_id"
    ]


def initial_values(
    table_meta: TableMeta,
    row: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Starting form values: the row being edited, else field defaults."""
    values = {}
    for f in editable_fields(table_meta):
        if row is not None and f.name in row:
            values[f.name] = row[f.name]
        else:
            values[f.name] = f.behaviors.default_value
    return values


def validate_form(table_meta: TableMeta, values: Mapping[str, Any]) -> FormResult:
    """Check each editable field against its rule; keep the first error per field."""
    result = FormResult()
    for f in editable_fields(table_meta):
        value = values.get(f.name)
        if value is None:
            if f.behaviors.required:
                result.errors[f.name] = "Field required"
            continue
        try:
            f.validation.validate(value)
        except ValidationError as e:
            errors = e.errors()
            result.errors[f.name] = errors[0]["msg"] if errors else str(e)
            continue
        result.data[f.name] = value
    return result
