"""Tests for cell rendering, inline edits, row actions and forms."""

from unittest.mock import AsyncMock

import pytest

from gridforge.grid.cells import CellEditor, Feedback, is_read_only_cell
from gridforge.grid.forms import editable_fields, initial_values, validate_form
from gridforge.grid.renderers import EMPTY, _FORMATTERS, display_value, relation_label
from gridforge.grid.row_actions import (
    LOCKED_COLUMN_IDS,
    ROW_ACTIONS_COLUMN_ID,
    ROW_SELECTION_COLUMN_ID,
    copy_id_message,
    duplicate_payload,
    reorder_columns,
)
from gridforge.registry import TableRegistry
from gridforge.registry.types import FieldRenderer


@pytest.fixture(scope="module")
def registry_meta():
    return TableRegistry().describe()


@pytest.fixture
def aircrafts(registry_meta):
    return registry_meta.get_table("aircrafts")


SENSORS = [
    {"_id": "s1", "name": "Thermal", "color": "#ff0000"},
    {"_id": "s2", "name": "Radar", "color": "#00ff00"},
]


class TestRenderers:
    def test_every_renderer_has_a_formatter(self):
        assert set(_FORMATTERS) == set(FieldRenderer)

    def test_text_and_empty(self, registry_meta):
        field = registry_meta.get_table("callsigns").fields["name"]
        assert display_value(field, "ALPHA") == "ALPHA"
        assert display_value(field, None) == EMPTY

    def test_multi_relation_uses_display_field(self, aircrafts):
        field = aircrafts.fields["sensors"]
        assert display_value(field, ["s1", "s2"], {"sensors": SENSORS}) == "Thermal, Radar"
        assert display_value(field, [], {"sensors": SENSORS}) == EMPTY

    def test_relation_label_falls_back_to_id(self, aircrafts):
        field = aircrafts.fields["sensors"]
        assert relation_label(field, "s9", {"sensors": SENSORS}) == "s9"

    def test_creation_time_renders_as_date(self, aircrafts):
        field = aircrafts.fields["_creationTime"]
        assert display_value(field, 0) == "1970-01-01"

    def test_datetime_renderer(self, registry_meta):
        field = registry_meta.get_table("scheduledFlights").fields["start_time"]
        assert display_value(field, "2024-05-01T09:30:00") == "2024-05-01 09:30"
        assert display_value(field, "not a date") == EMPTY


class TestCellEditor:
    def test_read_only_cells(self, aircrafts):
        assert is_read_only_cell(aircrafts.fields["_id"])
        assert is_read_only_cell(aircrafts.fields["_creationTime"])
        assert not is_read_only_cell(aircrafts.fields["name"])

    @pytest.mark.asyncio
    async def test_submit_sends_single_field_patch(self, aircrafts):
        update_row = AsyncMock(return_value={})
        editor = CellEditor(aircrafts.fields["op_altitude"], update_row)
        feedback = await editor.submit("a1", 9000)
        assert feedback == Feedback(True, "Row updated")
        update_row.assert_awaited_once_with("a1", {"op_altitude": 9000})

    @pytest.mark.asyncio
    async def test_invalid_value_never_reaches_store(self, aircrafts):
        update_row = AsyncMock()
        editor = CellEditor(aircrafts.fields["op_altitude"], update_row)
        feedback = await editor.submit("a1", -5)
        assert feedback.success is False
        assert "greater than 0" in feedback.message
        update_row.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_is_reported(self, aircrafts):
        update_row = AsyncMock(side_effect=RuntimeError("store offline"))
        editor = CellEditor(aircrafts.fields["name"], update_row)
        feedback = await editor.submit("a1", "Reaper")
        assert feedback == Feedback(False, "store offline")

    @pytest.mark.asyncio
    async def test_without_update_callback(self, aircrafts):
        feedback = await CellEditor(aircrafts.fields["name"]).submit("a1", "x")
        assert feedback.success is False


class TestRowActions:
    def test_duplicate_strips_identity_fields(self):
        row = {"_id": "a1", "_creationTime": 1, "id": "legacy", "name": "Reaper"}
        assert duplicate_payload(row) == {"name": "Reaper"}

    def test_copy_id_message(self):
        assert copy_id_message("aircrafts", {"_id": "a1"}) == "aircrafts ID successfully copied: a1"

    def test_reorder_moves_data_columns(self):
        order = [ROW_SELECTION_COLUMN_ID, "_id", "name", "op_altitude", ROW_ACTIONS_COLUMN_ID]
        assert reorder_columns(order, "op_altitude", "_id") == [
            ROW_SELECTION_COLUMN_ID,
            "op_altitude",
            "_id",
            "name",
            ROW_ACTIONS_COLUMN_ID,
        ]

    @pytest.mark.parametrize("locked", sorted(LOCKED_COLUMN_IDS))
    def test_locked_columns_never_move(self, locked):
        order = [ROW_SELECTION_COLUMN_ID, "_id", "name", ROW_ACTIONS_COLUMN_ID]
        assert reorder_columns(order, locked, "name") == order
        assert reorder_columns(order, "name", locked) == order

    def test_unknown_column_is_ignored(self):
        order = ["_id", "name"]
        assert reorder_columns(order, "missing", "name") == order


class TestForms:
    def test_editable_fields_skip_system_fields(self, aircrafts):
        names = [f.name for f in editable_fields(aircrafts)]
        assert names == ["name", "op_altitude", "cruising_speed", "endurance", "sensors"]

    def test_initial_values_from_row(self, aircrafts):
        values = initial_values(aircrafts, {"_id": "a1", "name": "Reaper"})
        assert values["name"] == "Reaper"
        assert values["op_altitude"] is None
        assert "_id" not in values

    def test_valid_form(self, aircrafts):
        result = validate_form(
            aircrafts,
            {
                "name": "Reaper",
                "op_altitude": 7500,
                "cruising_speed": 313,
                "endurance": 27,
                "sensors": ["s1"],
            },
        )
        assert result.valid
        assert result.data["sensors"] == ["s1"]

    def test_form_errors_per_field(self, aircrafts):
        result = validate_form(aircrafts, {"name": "Reaper", "op_altitude": -1})
        assert not result.valid
        assert "greater than 0" in result.errors["op_altitude"]
        assert result.errors["cruising_speed"] == "Field required"
        assert "name" not in result.errors
