"""Aircrafts table."""

from pydantic import BaseModel, ConfigDict, Field

from gridforge.registry.adapter import TableId
from gridforge.registry.types import (
    Cardinality,
    FieldOverrides,
    RelationMeta,
    TableBuildOptions,
)


class Aircraft(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    op_altitude: float = Field(gt=0, description="Operating altitude in metres")
    cruising_speed: float = Field(gt=0)
    endurance: float = Field(gt=0, description="Endurance in hours")
    sensors: list[TableId]


AIRCRAFTS_OPTIONS = TableBuildOptions(
    table_label="Aircrafts",
    field_overrides={
        "sensors": FieldOverrides(
            relation=RelationMeta(
                table="sensors",
                cardinality=Cardinality.MANY,
                display_field="name",
                color_field="color",
            ),
        ),
    },
)
