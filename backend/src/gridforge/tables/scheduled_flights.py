"""Scheduled flights table."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from gridforge.registry.adapter import TableId
from gridforge.registry.types import (
    Cardinality,
    FieldOverrides,
    FieldRenderer,
    RelationMeta,
    TableBuildOptions,
)


class ScheduledFlight(BaseModel):
    model_config = ConfigDict(extra="forbid")

    callsign: TableId
    aircraft: TableId
    start_time: datetime
    end_time: datetime


SCHEDULED_FLIGHTS_OPTIONS = TableBuildOptions(
    table_label="Scheduled Flights",
    field_overrides={
        "callsign": FieldOverrides(
            relation=RelationMeta(
                table="callsigns",
                cardinality=Cardinality.ONE,
                display_field="name",
            ),
        ),
        "aircraft": FieldOverrides(
            relation=RelationMeta(
                table="aircrafts",
                cardinality=Cardinality.ONE,
                display_field="name",
            ),
        ),
        "start_time": FieldOverrides(component=FieldRenderer.DATETIME),
        "end_time": FieldOverrides(component=FieldRenderer.DATETIME),
    },
)
