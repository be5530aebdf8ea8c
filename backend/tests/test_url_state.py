"""Tests for filter state stored in the URL query string."""

from urllib.parse import parse_qs

from gridforge.filters import ColumnFilter, FilterVariant, JoinOperator
from gridforge.filters.url_state import (
    decode_filter_state,
    decode_filters,
    encode_filter_state,
    encode_filters,
    parse_join_operator,
)

FILTERS = [
    ColumnFilter(id="name", value="hawk", variant=FilterVariant.TEXT, operator="iLike", filterId="f1"),
    ColumnFilter(
        id="op_altitude",
        value=["1000", "9000"],
        variant=FilterVariant.RANGE,
        operator="isBetween",
        filterId="f2",
    ),
    ColumnFilter(
        id="sensors",
        value=["s1", "s2"],
        variant=FilterVariant.MULTI_SELECT,
        operator="inArray",
        filterId="f3",
    ),
]


class TestFilterState:
    def test_round_trip(self):
        query = encode_filter_state(FILTERS, JoinOperator.OR)
        filters, join = decode_filter_state(query)
        assert filters == FILTERS
        assert join is JoinOperator.OR

    def test_defaults_are_omitted(self):
        assert encode_filter_state([], JoinOperator.AND) == ""

    def test_and_join_is_not_written(self):
        params = parse_qs(encode_filter_state(FILTERS[:1]))
        assert "joinOperator" not in params
        assert "filters" in params

    def test_wire_format_uses_filter_id_key(self):
        assert '"filterId":"f1"' in encode_filters(FILTERS[:1])

    def test_empty_query(self):
        assert decode_filter_state("") == ([], JoinOperator.AND)


class TestInvalidState:
    def test_malformed_json_decodes_to_empty(self):
        assert decode_filters("[{not json") == []

    def test_missing_keys_decode_to_empty(self):
        assert decode_filters('[{"id":"name"}]') == []

    def test_unknown_column_decodes_to_empty(self):
        raw = encode_filters(FILTERS)
        assert decode_filters(raw, column_ids={"name", "op_altitude"}) == []

    def test_known_columns_pass(self):
        raw = encode_filters(FILTERS)
        assert decode_filters(raw, column_ids={"name", "op_altitude", "sensors"}) == FILTERS

    def test_invalid_join_operator_falls_back_to_and(self):
        assert parse_join_operator("xor") is JoinOperator.AND
        assert parse_join_operator(None) is JoinOperator.AND
