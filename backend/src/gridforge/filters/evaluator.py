"""Apply column filter predicates to in-memory rows."""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from gridforge.filters.types import ColumnFilter, FilterVariant, JoinOperator

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]
RelatedData = Mapping[str, Sequence[Row]]

# Checked in order when a relation id is swapped for a readable label.
DISPLAY_FIELDS = ("name", "title", "label", "displayName", "_id")

_NUMERIC_VARIANTS = (FilterVariant.NUMBER, FilterVariant.RANGE)


def is_empty(value: Any) -> bool:
    """None, empty string and empty list count as empty."""
    return value is None or value == "" or (isinstance(value, list) and len(value) == 0)


def to_text(value: Any) -> str:
    """Stringify a cell value the way the grid displays it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    return str(value)


def to_number(value: Any) -> float:
    """Coerce to float; anything non-numeric becomes NaN."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            return float(stripped)
        except ValueError:
            return math.nan
    return math.nan


def resolve_display_value(value: str, related_data: RelatedData) -> str | None:
    """Find ``value`` as an ``_id`` in any related table and return its label."""
    for rows in related_data.values():
        for item in rows:
            if item.get("_id") == value:
                for display_field in DISPLAY_FIELDS:
                    if item.get(display_field):
                        return str(item[display_field])
                return None
    return None


def apply_filter(
    row: Row,
    column_filter: ColumnFilter,
    related_data: RelatedData | None = None,
) -> bool:
    """Evaluate a single predicate against a row."""
    operator = column_filter.operator
    variant = column_filter.variant
    value = column_filter.value
    field_value = row.get(column_filter.id)

    if operator == "isEmpty":
        return is_empty(field_value)
    if operator == "isNotEmpty":
        return not is_empty(field_value)

    if is_empty(value):
        return True

    compare_value = field_value
    if (
        variant not in (FilterVariant.SELECT, FilterVariant.MULTI_SELECT)
        and isinstance(field_value, str)
        and related_data
    ):
        display = resolve_display_value(field_value, related_data)
        if display is not None:
            compare_value = display

    text_field = (to_text(compare_value) if compare_value else "").lower()
    text_filter = to_text(value).lower()

    if operator == "eq":
        if variant is FilterVariant.BOOLEAN:
            return bool(field_value) == (text_filter == "true")
        if variant is FilterVariant.NUMBER:
            return to_number(field_value) == to_number(value)
        return text_field == text_filter

    if operator == "ne":
        if variant is FilterVariant.BOOLEAN:
            return bool(field_value) != (text_filter == "true")
        if variant is FilterVariant.NUMBER:
            return to_number(field_value) != to_number(value)
        return text_field != text_filter

    if operator == "iLike":
        return text_filter in text_field
    if operator == "notILike":
        return text_filter not in text_field

    if operator in ("gt", "gte", "lt", "lte"):
        if variant in _NUMERIC_VARIANTS:
            return _compare(operator, to_number(field_value), to_number(value))
        return _compare(operator, text_field, text_filter)

    if operator == "inArray":
        if not isinstance(value, list):
            return False
        if isinstance(field_value, list):
            return any(to_text(item) in value for item in field_value)
        return to_text(field_value) in value

    if operator == "notInArray":
        if not isinstance(value, list):
            return True
        if isinstance(field_value, list):
            return not any(to_text(item) in value for item in field_value)
        return to_text(field_value) not in value

    if operator == "isBetween":
        if isinstance(value, list) and len(value) == 2:
            low, high = (to_number(v) for v in value)
            number = to_number(field_value)
            return low <= number <= high
        return False

    if operator == "isRelativeToToday":
        # TODO: define date-relative windows (today, this week) before filtering on them
        return True

    logger.warning("Unknown filter operator: %s", operator)
    return True


def _compare(operator: str, left: Any, right: Any) -> bool:
    if operator == "gt":
        return left > right
    if operator == "gte":
        return left >= right
    if operator == "lt":
        return left < right
    return left <= right


def filter_rows(
    rows: Iterable[Row],
    filters: Sequence[ColumnFilter],
    join_operator: JoinOperator = JoinOperator.AND,
    related_data: RelatedData | None = None,
) -> list[Row]:
    """Keep rows matching all (``and``) or any (``or``) of the filters."""
    rows = list(rows)
    if not filters:
        return rows

    combine = any if join_operator is JoinOperator.OR else all
    return [
        row
        for row in rows
        if combine([apply_filter(row, f, related_data) for f in filters])
    ]
