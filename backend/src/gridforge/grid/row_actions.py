"""Per-row actions and the locked row-selection / row-actions columns."""

from collections.abc import Mapping, Sequence
from typing import Any

from gridforge.registry.types import RowAction

ROW_SELECTION_COLUMN_ID = "__rowSelection__"
ROW_ACTIONS_COLUMN_ID = "__rowActions__"
LOCKED_COLUMN_IDS = frozenset({ROW_SELECTION_COLUMN_ID, ROW_ACTIONS_COLUMN_ID})

# Stripped from a row before it is offered as a new record.
DUPLICATE_EXCLUDED_FIELDS = ("_id", "_creationTime", "id")

ROW_ACTION_LABELS: dict[RowAction, str] = {
    RowAction.EDIT: "Edit",
    RowAction.DUPLICATE: "Duplicate",
    RowAction.COPY_ID: "Copy ID",
    RowAction.DELETE: "Delete",
}


def row_id(row: Mapping[str, Any]) -> str | None:
    return row.get("_id") or row.get("id")


def duplicate_payload(row: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a row without its identity fields."""
    return {k: v for k, v in row.items() if k not in DUPLICATE_EXCLUDED_FIELDS}


def copy_id_message(table_name: str, row: Mapping[str, Any]) -> str:
    return f"{table_name} ID successfully copied: {row_id(row) or 'unknown'}"


def action_menu(actions: Sequence[RowAction]) -> list[dict[str, str]]:
    return [{"action": a.value, "label": ROW_ACTION_LABELS[a]} for a in actions]


def reorder_columns(order: Sequence[str], active_id: str, over_id: str) -> list[str]:
    """Move ``active_id`` to the position of ``over_id``.

    Locked columns never move and nothing can be dropped onto them; unknown
    ids leave the order unchanged.
    """
    current = list(order)
    if active_id == over_id:
        return current
    if active_id in LOCKED_COLUMN_IDS or over_id in LOCKED_COLUMN_IDS:
        return current
    if active_id not in current or over_id not in current:
        return current
    old_index = current.index(active_id)
    new_index = current.index(over_id)
    current.insert(new_index, current.pop(old_index))
    return current
