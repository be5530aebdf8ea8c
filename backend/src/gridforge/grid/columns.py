"""Generate grid column descriptors from table metadata.

For every field the generator picks a filter variant, an icon, filter
options and a cell mode. Relation options are resolved from already
fetched related rows, so callers must supply a dataset for every table
referenced by a relation field (see ``required_relation_tables``).
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from gridforge.filters.types import FilterVariant
from gridforge.grid.cells import CellEditor, CellMode, UpdateRow, is_read_only_cell
from gridforge.grid.row_actions import (
    ROW_ACTIONS_COLUMN_ID,
    ROW_SELECTION_COLUMN_ID,
    action_menu,
)
from gridforge.registry.types import (
    Cardinality,
    FieldMeta,
    RowAction,
    ScalarKind,
    TableMeta,
    is_array,
    is_numeric,
    scalar_kind,
)

Row = Mapping[str, Any]
RelatedData = Mapping[str, Sequence[Row]]

# A numeric column switches to a range slider past either threshold.
RANGE_DISTINCT_THRESHOLD = 10
RANGE_SPREAD_THRESHOLD = 10

DEFAULT_COLUMN_SIZE = 220


class MissingRelationDataError(LookupError):
    """Related rows were not supplied for one or more relation tables."""

    def __init__(self, table: str, missing: list[str]):
        self.table = table
        self.missing = missing
        super().__init__(
            f"Table '{table}' needs related data for: {', '.join(missing)}"
        )


@dataclass(frozen=True)
class FilterOption:
    label: str
    value: str
    count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.count:
            result["count"] = self.count
        return result


@dataclass(frozen=True)
class FilterMeta:
    label: str
    variant: FilterVariant
    placeholder: str
    icon: str
    options: list[FilterOption] | None = None
    range: tuple[float, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "label": self.label,
            "variant": self.variant.value,
            "placeholder": self.placeholder,
            "icon": self.icon,
        }
        if self.options is not None:
            result["options"] = [o.to_dict() for o in self.options]
        if self.range is not None:
            result["range"] = list(self.range)
        return result


@dataclass
class ColumnDef:
    id: str
    label: str
    accessor_key: str | None = None
    field_meta: FieldMeta | None = None
    filter: FilterMeta | None = None
    cell_mode: CellMode = CellMode.STATIC
    editor: CellEditor | None = None
    context_menu: list[RowAction] = field(default_factory=list)
    size: int = DEFAULT_COLUMN_SIZE
    pinned: str | None = None
    enable_column_filter: bool = False
    enable_sorting: bool = False
    enable_hiding: bool = False
    enable_resizing: bool = False
    enable_grouping: bool = False
    locked: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "accessorKey": self.accessor_key,
            "label": self.label,
            "renderer": self.field_meta.render.component.value
            if self.field_meta and self.field_meta.render.component
            else None,
            "meta": self.filter.to_dict() if self.filter else None,
            "cell": self.cell_mode.value,
            "editTitle": self.editor.title if self.editor else None,
            "contextMenu": action_menu(self.context_menu),
            "size": self.size,
            "pinned": self.pinned,
            "enableColumnFilter": self.enable_column_filter,
            "enableSorting": self.enable_sorting,
            "enableHiding": self.enable_hiding,
            "enableResizing": self.enable_resizing,
            "enableGrouping": self.enable_grouping,
            "locked": self.locked,
        }


def format_field_name(name: str) -> str:
    """``op_altitude`` -> ``Op Altitude``."""
    return " ".join(
        word[:1].upper() + word[1:] for word in name.replace("_", " ").split(" ")
    )


def _is_date_like(name: str) -> bool:
    lowered = name.lower()
    return "time" in lowered or "date" in lowered


def field_icon(field_meta: FieldMeta) -> str:
    """Header icon for a field; purely cosmetic."""
    if scalar_kind(field_meta.type) is ScalarKind.BOOLEAN:
        return "toggle-left"
    if is_numeric(field_meta.type):
        return "hash"
    if _is_date_like(field_meta.name):
        return "calendar"
    if is_array(field_meta.type):
        return "list"
    if field_meta.relation:
        return "link"
    return "text"


def required_relation_tables(table_meta: TableMeta) -> set[str]:
    """Tables whose rows must be fetched before generating columns."""
    return {f.relation.table for f in table_meta.relation_fields()}


def _numeric_values(data: Sequence[Row], key: str) -> list[float]:
    values = []
    for row in data:
        value = row.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isnan(value):
            continue
        values.append(value)
    return values


def _enum_options(field_meta: FieldMeta, data: Sequence[Row] | None) -> list[FilterOption]:
    literals = field_meta.render.options.values if field_meta.render.options else ()
    options = []
    for literal in literals:
        value = str(literal)
        count = sum(1 for row in data if row.get(field_meta.name) == literal) if data else 0
        options.append(
            FilterOption(
                label=value[:1].upper() + value[1:],
                value=value,
                count=count or None,
            )
        )
    return options


def _relation_options(field_meta: FieldMeta, related_data: RelatedData) -> list[FilterOption]:
    relation = field_meta.relation
    display_field = relation.display_field
    options = []
    for item in related_data[relation.table]:
        item_id = str(item.get("_id"))
        label = item_id
        if display_field and item.get(display_field):
            label = str(item[display_field])
        options.append(FilterOption(label=label, value=item_id))
    return options


def filter_meta_for(
    field_meta: FieldMeta,
    related_data: RelatedData,
    data: Sequence[Row] | None = None,
) -> FilterMeta:
    """Choose the filter widget for a field.

    Precedence: boolean, numeric (range when the sample is spread out),
    date-like name, plain array, enum, relation, text.
    """
    key = field_meta.name
    label = field_meta.render.label or format_field_name(key)
    lowered = label.lower()
    icon = field_icon(field_meta)
    kind = scalar_kind(field_meta.type)

    if kind is ScalarKind.BOOLEAN:
        return FilterMeta(label, FilterVariant.BOOLEAN, f"Filter by {lowered}...", icon)

    if is_numeric(field_meta.type):
        values = _numeric_values(data, key) if data else []
        if values:
            low, high = min(values), max(values)
            if (
                len(set(values)) > RANGE_DISTINCT_THRESHOLD
                or high - low > RANGE_SPREAD_THRESHOLD
            ):
                return FilterMeta(
                    label,
                    FilterVariant.RANGE,
                    f"Filter {lowered}...",
                    icon,
                    range=(low, high),
                )
        return FilterMeta(label, FilterVariant.NUMBER, f"Enter {lowered}...", icon)

    if _is_date_like(key):
        return FilterMeta(label, FilterVariant.DATE_RANGE, f"Select {lowered}...", icon)

    # Relation arrays fall through to the relation branch so their options are populated.
    if is_array(field_meta.type) and not field_meta.relation:
        return FilterMeta(
            label, FilterVariant.MULTI_SELECT, f"Select {lowered}...", icon, options=[]
        )

    if kind is ScalarKind.ENUM:
        return FilterMeta(
            label,
            FilterVariant.SELECT,
            f"Select {lowered}...",
            icon,
            options=_enum_options(field_meta, data),
        )

    if field_meta.relation:
        variant = (
            FilterVariant.MULTI_SELECT
            if field_meta.relation.cardinality is Cardinality.MANY
            else FilterVariant.SELECT
        )
        return FilterMeta(
            label,
            variant,
            f"Select {lowered}...",
            icon,
            options=_relation_options(field_meta, related_data),
        )

    return FilterMeta(label, FilterVariant.TEXT, f"Search {lowered}...", icon)


def ordered_fields(table_meta: TableMeta) -> list[FieldMeta]:
    """``_id`` first, then the remaining fields alphabetically, ignoring case."""
    return sorted(
        table_meta.fields.values(),
        key=lambda f: (f.name != "_id", f.name.lower(), f.name),
    )


def _field_column(
    field_meta: FieldMeta,
    table_meta: TableMeta,
    related_data: RelatedData,
    data: Sequence[Row] | None,
    update_row: UpdateRow | None,
) -> ColumnDef:
    read_only = is_read_only_cell(field_meta)
    return ColumnDef(
        id=field_meta.name,
        accessor_key=field_meta.name,
        label=field_meta.render.label or format_field_name(field_meta.name),
        field_meta=field_meta,
        filter=filter_meta_for(field_meta, related_data, data),
        cell_mode=CellMode.STATIC if read_only else CellMode.INLINE_EDIT,
        editor=None if read_only else CellEditor(field_meta, update_row),
        context_menu=list(table_meta.row_actions),
        pinned=field_meta.render.pinned.value if field_meta.render.pinned else None,
        enable_column_filter=field_meta.name != "_id",
        enable_sorting=field_meta.sortable,
        enable_hiding=True,
        enable_resizing=True,
        enable_grouping=field_meta.groupable,
    )


def generate_columns(
    table_meta: TableMeta | None,
    related_data: RelatedData,
    data: Sequence[Row] | None = None,
    update_row: UpdateRow | None = None,
) -> list[ColumnDef]:
    """Build the ordered column list for a table.

    Args:
        table_meta: Table to render; None yields no columns
        related_data: Rows of every relation target table, keyed by table name
        data: Current rows, used for range bounds and option counts
        update_row: Async ``(row_id, patch)`` callable used by inline edits

    Raises:
        MissingRelationDataError: If a relation table is absent from related_data
    """
    if table_meta is None:
        return []

    missing = sorted(required_relation_tables(table_meta) - set(related_data))
    if missing:
        raise MissingRelationDataError(table_meta.name, missing)

    row_actions = list(table_meta.row_actions)
    columns = [
        ColumnDef(
            id=ROW_SELECTION_COLUMN_ID,
            accessor_key="_id",
            label="",
            context_menu=row_actions,
            size=35,
            locked=True,
        )
    ]
    columns.extend(
        _field_column(f, table_meta, related_data, data, update_row)
        for f in ordered_fields(table_meta)
    )
    columns.append(
        ColumnDef(
            id=ROW_ACTIONS_COLUMN_ID,
            label="",
            context_menu=row_actions,
            size=60,
            locked=True,
        )
    )
    return columns


def column_ids(columns: Sequence[ColumnDef]) -> list[str]:
    """Ids of the data columns that may carry filters."""
    return [c.id for c in columns if c.enable_column_filter]
