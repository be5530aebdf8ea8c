"""Sensors table."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gridforge.registry.types import FieldOverrides, FieldRenderer, TableBuildOptions

SensorType = Literal["Thermal", "Optical", "Multi-Spectral", "Radar", "LiDAR", "Infrared"]


class Sensor(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: SensorType
    color: str = Field(
        pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$",
        description="Hex colour, e.g. #1f77b4 or #f00",
    )
    min_range: float = Field(ge=0)
    max_range: float = Field(ge=0)
    resolution: int = Field(gt=0)
    circular_error_probable: float = Field(ge=0)
    min_detectable_velocity: str


SENSORS_OPTIONS = TableBuildOptions(
    table_label="Sensors",
    field_overrides={
        "color": FieldOverrides(component=FieldRenderer.COLOR),
    },
)
