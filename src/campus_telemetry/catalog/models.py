"""Pydantic models for campuses and their energy-asset configuration.

Field names are snake_case in Python and camelCase on the wire, matching the
catalog payload served to dashboards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Coordinates(_CatalogModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Location(_CatalogModel):
    address: str
    city: str
    state: str
    country: str
    zip_code: str
    coordinates: Coordinates


class SolarSource(_CatalogModel):
    enabled: bool = False
    capacity: float = 0  # kW
    panels: int = 0
    efficiency: float = Field(0.0, ge=0.0, le=1.0)


class WindSource(_CatalogModel):
    enabled: bool = False
    capacity: float = 0  # kW
    turbines: int = 0
    cut_in_speed: float = 0.0  # m/s


class BatterySource(_CatalogModel):
    enabled: bool = False
    capacity: float = 0  # kWh
    type: str = "lithium-ion"
    cycle_life: int = 0


class EnergySources(_CatalogModel):
    solar: SolarSource = SolarSource()
    wind: WindSource = WindSource()
    battery: BatterySource = BatterySource()


class Campus(_CatalogModel):
    """A physical site with a fixed energy-asset configuration."""

    id: str = Field(min_length=1)
    name: str
    location: Location
    energy_sources: EnergySources = EnergySources()

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
