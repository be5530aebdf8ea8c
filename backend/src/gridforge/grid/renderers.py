"""Display formatting for each renderer component.

Every FieldRenderer member must have a formatter; the table below is
checked at import time so a new renderer cannot ship unhandled.
"""

import json
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, timezone
from typing import Any

from gridforge.filters.evaluator import to_text
from gridforge.registry.types import FieldMeta, FieldRenderer

EMPTY = "—"

RelatedData = Mapping[str, Sequence[Mapping[str, Any]]]
Formatter = Callable[[FieldMeta, Any, RelatedData], str]


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds, as stored in _creationTime
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _text(field: FieldMeta, value: Any, related: RelatedData) -> str:
    return to_text(value) if value not in (None, "") else EMPTY


def _checkbox(field: FieldMeta, value: Any, related: RelatedData) -> str:
    return "Yes" if value else "No"


def _date(field: FieldMeta, value: Any, related: RelatedData) -> str:
    parsed = _as_datetime(value)
    return parsed.strftime("%Y-%m-%d") if parsed else EMPTY


def _datetime(field: FieldMeta, value: Any, related: RelatedData) -> str:
    parsed = _as_datetime(value)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else EMPTY


def _json(field: FieldMeta, value: Any, related: RelatedData) -> str:
    if value in (None, ""):
        return EMPTY
    return json.dumps(value, default=str, separators=(",", ":"))


def _array(field: FieldMeta, value: Any, related: RelatedData) -> str:
    if not isinstance(value, list) or not value:
        return EMPTY
    return ", ".join(
        json.dumps(item, default=str) if isinstance(item, (dict, list)) else to_text(item)
        for item in value
    )


def relation_label(field: FieldMeta, id_value: Any, related: RelatedData) -> str:
    """Label for a related row id: its display field, else the id itself."""
    relation = field.relation
    if relation is None:
        return to_text(id_value)
    for row in related.get(relation.table, ()):
        if row.get("_id") == id_value:
            if relation.display_field and row.get(relation.display_field):
                return str(row[relation.display_field])
            break
    return to_text(id_value)


def _id_select(field: FieldMeta, value: Any, related: RelatedData) -> str:
    if value in (None, ""):
        return EMPTY
    return relation_label(field, value, related)


def _id_multi_select(field: FieldMeta, value: Any, related: RelatedData) -> str:
    if not isinstance(value, list) or not value:
        return EMPTY
    return ", ".join(relation_label(field, v, related) for v in value)


_FORMATTERS: dict[FieldRenderer, Formatter] = {
    FieldRenderer.TEXT: _text,
    FieldRenderer.TEXTAREA: _text,
    FieldRenderer.NUMBER: _text,
    FieldRenderer.CHECKBOX: _checkbox,
    FieldRenderer.DATE: _date,
    FieldRenderer.DATETIME: _datetime,
    FieldRenderer.SELECT: _text,
    FieldRenderer.ID_SELECT: _id_select,
    FieldRenderer.ID_MULTI_SELECT: _id_multi_select,
    FieldRenderer.JSON: _json,
    FieldRenderer.COLOR: _text,
    FieldRenderer.OBJECT: _json,
    FieldRenderer.ARRAY: _array,
}

_unhandled = set(FieldRenderer) - set(_FORMATTERS)
if _unhandled:
    raise RuntimeError(f"Renderers without a display formatter: {sorted(r.value for r in _unhandled)}")


def display_value(
    field: FieldMeta,
    value: Any,
    related: RelatedData | None = None,
) -> str:
    """Human-readable cell text for a value, dispatched on the field's renderer."""
    renderer = field.render.component or FieldRenderer.TEXT
    return _FORMATTERS[renderer](field, value, related or {})
