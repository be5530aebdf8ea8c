"""Row filtering: predicate types, evaluator, URL state codec."""

from gridforge.filters.evaluator import apply_filter, filter_rows, is_empty
from gridforge.filters.types import ColumnFilter, FilterVariant, JoinOperator
from gridforge.filters.url_state import (
    decode_filter_state,
    decode_filters,
    encode_filter_state,
    encode_filters,
    parse_join_operator,
)

__all__ = [
    "ColumnFilter",
    "FilterVariant",
    "JoinOperator",
    "apply_filter",
    "decode_filter_state",
    "decode_filters",
    "encode_filter_state",
    "encode_filters",
    "filter_rows",
    "is_empty",
    "parse_join_operator",
]
