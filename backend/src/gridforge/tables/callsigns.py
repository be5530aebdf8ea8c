"""Callsigns table."""

from pydantic import BaseModel, ConfigDict

from gridforge.registry.types import FieldOverrides, TableBuildOptions


class Callsign(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    country: str


CALLSIGNS_OPTIONS = TableBuildOptions(
    table_label="Callsigns",
    field_overrides={
        "name": FieldOverrides(unique=True),
    },
)
