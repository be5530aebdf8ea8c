"""Fixed list of tables served by the grid.

Adding a table means adding a TableDefinition here; there is no runtime
registration.
"""

from dataclasses import dataclass

from pydantic import BaseModel

from gridforge.registry.types import TableBuildOptions
from gridforge.tables.aircrafts import AIRCRAFTS_OPTIONS, Aircraft
from gridforge.tables.callsigns import CALLSIGNS_OPTIONS, Callsign
from gridforge.tables.scheduled_flights import SCHEDULED_FLIGHTS_OPTIONS, ScheduledFlight
from gridforge.tables.sensors import SENSORS_OPTIONS, Sensor


@dataclass(frozen=True)
class TableDefinition:
    name: str
    schema: type[BaseModel]
    options: TableBuildOptions


TABLE_DEFINITIONS: tuple[TableDefinition, ...] = (
    TableDefinition("callsigns", Callsign, CALLSIGNS_OPTIONS),
    TableDefinition("sensors", Sensor, SENSORS_OPTIONS),
    TableDefinition("aircrafts", Aircraft, AIRCRAFTS_OPTIONS),
    TableDefinition("scheduledFlights", ScheduledFlight, SCHEDULED_FLIGHTS_OPTIONS),
)

__all__ = ["TableDefinition", "TABLE_DEFINITIONS"]
