"""Filter state persisted in the URL query string.

Two parameters are used: ``filters`` holds a compact JSON array of
``{id, value, variant, operator, filterId}`` objects and ``joinOperator``
holds ``and`` or ``or``. Default values (no filters, ``and``) are left out
of the query string.
"""

import json
import logging
from collections.abc import Collection, Sequence
from urllib.parse import parse_qs, urlencode

from pydantic import TypeAdapter, ValidationError

from gridforge.filters.types import ColumnFilter, JoinOperator

logger = logging.getLogger(__name__)

FILTERS_KEY = "filters"
JOIN_OPERATOR_KEY = "joinOperator"

_filters_adapter = TypeAdapter(list[ColumnFilter])


def encode_filters(filters: Sequence[ColumnFilter]) -> str:
    """Serialize a filter list to its JSON query-parameter value."""
    return json.dumps([f.to_wire() for f in filters], separators=(",", ":"))


def decode_filters(
    raw: str | None,
    column_ids: Collection[str] | None = None,
) -> list[ColumnFilter]:
    """Parse a ``filters`` parameter value.

    Malformed JSON, invalid predicates, or a predicate on a column outside
    ``column_ids`` yields an empty list rather than an error.
    """
    if not raw:
        return []
    try:
        filters = _filters_adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning("Ignoring invalid filter state: %s", e.errors(include_url=False))
        return []

    if column_ids is not None:
        unknown = [f.id for f in filters if f.id not in column_ids]
        if unknown:
            logger.warning("Ignoring filter state with unknown columns: %s", unknown)
            return []
    return filters


def parse_join_operator(raw: str | None) -> JoinOperator:
    try:
        return JoinOperator(raw) if raw else JoinOperator.AND
    except ValueError:
        logger.warning("Ignoring invalid join operator: %s", raw)
        return JoinOperator.AND


def encode_filter_state(
    filters: Sequence[ColumnFilter],
    join_operator: JoinOperator = JoinOperator.AND,
) -> str:
    """Build the query string for a filter list and join operator."""
    params: dict[str, str] = {}
    if filters:
        params[FILTERS_KEY] = encode_filters(filters)
    if join_operator is not JoinOperator.AND:
        params[JOIN_OPERATOR_KEY] = join_operator.value
    return urlencode(params)


def decode_filter_state(
    query: str,
    column_ids: Collection[str] | None = None,
) -> tuple[list[ColumnFilter], JoinOperator]:
    """Inverse of encode_filter_state."""
    params = parse_qs(query.lstrip("?"), keep_blank_values=True)
    raw_filters = params.get(FILTERS_KEY, [None])[0]
    raw_join = params.get(JOIN_OPERATOR_KEY, [None])[0]
    return decode_filters(raw_filters, column_ids), parse_join_operator(raw_join)
