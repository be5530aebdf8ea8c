"""Search, sort, group and paginate rows already loaded for a grid."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from gridforge.filters.evaluator import to_text
from gridforge.grid.renderers import relation_label
from gridforge.registry.types import SortSpec, TableMeta

Row = Mapping[str, Any]
RelatedData = Mapping[str, Sequence[Row]]


def _searchable_text(row: Row, table_meta: TableMeta | None, related: RelatedData) -> str:
    parts: list[str] = []
    for value in row.values():
        if value is None:
            continue
        if isinstance(value, list):
            parts.extend(to_text(v) for v in value)
        else:
            parts.append(to_text(value))

    if table_meta is not None:
        for f in table_meta.relation_fields():
            value = row.get(f.name)
            if value is None or f.relation.table not in related:
                continue
            ids = value if isinstance(value, list) else [value]
            parts.extend(relation_label(f, v, related) for v in ids)

    return " ".join(parts).lower()


def search_rows(
    rows: Sequence[Row],
    query: str,
    table_meta: TableMeta | None = None,
    related: RelatedData | None = None,
) -> list[Row]:
    """Case-insensitive match against every value and relation label of a row."""
    if not query:
        return list(rows)
    needle = query.lower()
    related = related or {}
    return [r for r in rows if needle in _searchable_text(r, table_meta, related)]


def _sort_key(value: Any) -> tuple:
    # None sorts last; numbers before text so mixed columns stay stable
    if value is None:
        return (2, 0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, to_text(value).lower())


def parse_sort(raw: str | None) -> list[SortSpec]:
    """Parse ``field`` / ``-field`` comma lists, e.g. ``-_creationTime,name``."""
    specs = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        if part.startswith("-"):
            specs.append(SortSpec(field=part[1:], direction="desc"))
        else:
            specs.append(SortSpec(field=part, direction="asc"))
    return specs


def sort_rows(rows: Sequence[Row], sort: Sequence[SortSpec]) -> list[Row]:
    """Stable multi-column sort; the first entry is the primary key."""
    result = list(rows)
    for order in reversed(sort):
        result.sort(
            key=lambda r: _sort_key(r.get(order.field)),
            reverse=order.direction == "desc",
        )
    return result


@dataclass
class RowGroup:
    field: str
    value: Any
    rows: list[Row] = field(default_factory=list)
    subgroups: list["RowGroup"] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "value": self.value,
            "count": self.count,
            "rowIds": [r.get("_id") for r in self.rows],
            "subgroups": [g.to_dict() for g in self.subgroups],
        }


def group_rows(rows: Sequence[Row], fields: Sequence[str]) -> list[RowGroup]:
    """Nest rows by each grouping field in turn, keeping first-seen order."""
    if not fields:
        return []
    key, rest = fields[0], fields[1:]
    groups: dict[str, RowGroup] = {}
    for row in rows:
        value = row.get(key)
        bucket = to_text(value)
        if bucket not in groups:
            groups[bucket] = RowGroup(field=key, value=value)
        groups[bucket].rows.append(row)
    for group in groups.values():
        group.subgroups = group_rows(group.rows, rest)
    return list(groups.values())


def paginate(rows: Sequence[Row], limit: int | None = None, offset: int = 0) -> list[Row]:
    start = max(0, offset)
    end = start + limit if limit is not None else None
    return list(rows[start:end])
