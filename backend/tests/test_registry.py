"""Tests for the table registry and the bundled table definitions."""

from gridforge.registry import TableRegistry
from gridforge.registry.types import Cardinality, FieldRenderer, ScalarKind, scalar_kind
from gridforge.tables import TABLE_DEFINITIONS
from gridforge.tables.sensors import Sensor


class TestTableRegistry:
    def test_lists_tables_in_declaration_order(self):
        registry = TableRegistry()
        assert registry.list_tables() == [
            "callsigns",
            "sensors",
            "aircrafts",
            "scheduledFlights",
        ]

    def test_describe_covers_every_definition(self):
        meta = TableRegistry().describe()
        assert set(meta.tables) == {d.name for d in TABLE_DEFINITIONS}

    def test_unknown_table_is_none(self):
        registry = TableRegistry()
        assert registry.get_table("nope") is None
        assert registry.get_schema("nope") is None

    def test_get_schema(self):
        assert TableRegistry().get_schema("sensors") is Sensor

    def test_custom_definitions(self):
        registry = TableRegistry(TABLE_DEFINITIONS[:1])
        assert registry.list_tables() == ["callsigns"]


class TestBundledTables:
    def test_aircraft_sensors_relation(self):
        aircrafts = TableRegistry().get_table("aircrafts")
        sensors = aircrafts.fields["sensors"]
        assert sensors.relation.table == "sensors"
        assert sensors.relation.cardinality is Cardinality.MANY
        assert sensors.relation.display_field == "name"
        assert sensors.render.component is FieldRenderer.ID_MULTI_SELECT

    def test_scheduled_flight_relations(self):
        flights = TableRegistry().get_table("scheduledFlights")
        assert {f.name for f in flights.relation_fields()} == {"callsign", "aircraft"}
        assert flights.fields["start_time"].render.component is FieldRenderer.DATETIME
        assert flights.label == "Scheduled Flights"

    def test_sensor_type_is_enum(self):
        sensors = TableRegistry().get_table("sensors")
        assert scalar_kind(sensors.fields["type"].type) is ScalarKind.ENUM
        assert "Thermal" in sensors.fields["type"].render.options.values
        assert sensors.fields["color"].render.component is FieldRenderer.COLOR

    def test_callsign_name_is_unique(self):
        callsigns = TableRegistry().get_table("callsigns")
        assert callsigns.fields["name"].behaviors.unique is True
