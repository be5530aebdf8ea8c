"""Grid generation: columns, cells, row actions, forms and row queries."""

from gridforge.grid.cells import CellEditor, CellMode, Feedback
from gridforge.grid.columns import (
    ColumnDef,
    FilterMeta,
    FilterOption,
    MissingRelationDataError,
    column_ids,
    field_icon,
    filter_meta_for,
    format_field_name,
    generate_columns,
    required_relation_tables,
)
from gridforge.grid.renderers import display_value
from gridforge.grid.row_actions import (
    LOCKED_COLUMN_IDS,
    ROW_ACTIONS_COLUMN_ID,
    ROW_SELECTION_COLUMN_ID,
    duplicate_payload,
    reorder_columns,
)

__all__ = [
    "CellEditor",
    "CellMode",
    "ColumnDef",
    "Feedback",
    "FilterMeta",
    "FilterOption",
    "LOCKED_COLUMN_IDS",
    "MissingRelationDataError",
    "ROW_ACTIONS_COLUMN_ID",
    "ROW_SELECTION_COLUMN_ID",
    "column_ids",
    "display_value",
    "duplicate_payload",
    "field_icon",
    "filter_meta_for",
    "format_field_name",
    "generate_columns",
    "reorder_columns",
    "required_relation_tables",
]
