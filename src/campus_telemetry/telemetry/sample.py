"""Telemetry sample value types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

SYNTHETIC_SOURCE = "mock-iot"


@dataclass(frozen=True)
class SolarReading:
    generation: float  # kW
    irradiance: float  # W/m²
    efficiency: float  # %
    temperature: float  # °C


@dataclass(frozen=True)
class WindReading:
    generation: float  # kW
    speed: float  # m/s
    direction: int  # degrees
    temperature: float  # °C


@dataclass(frozen=True)
class BatteryReading:
    soc: float  # %
    power: float  # kW, negative = discharging
    voltage: float  # V
    temperature: float  # °C
    capacity: float  # kWh
    cycles: int


@dataclass(frozen=True)
class GridReading:
    import_power: float  # kW
    export_power: float  # kW
    frequency: float  # Hz
    voltage: float  # V
    power_factor: float


@dataclass(frozen=True)
class LoadReading:
    total: float  # kW
    critical: float  # kW
    non_critical: float  # kW


@dataclass(frozen=True)
class WeatherReading:
    temperature: float  # °C
    humidity: float  # %
    pressure: float  # hPa
    wind_speed: float  # m/s
    cloud_cover: int  # %


@dataclass(frozen=True)
class TelemetrySample:
    """One synthetic multi-domain reading for a campus at a point in time."""

    campus_id: str
    timestamp: datetime
    solar: SolarReading
    wind: WindReading
    battery: BatteryReading
    grid: GridReading
    load: LoadReading
    weather: WeatherReading
    source: str = SYNTHETIC_SOURCE

    @property
    def is_synthetic(self) -> bool:
        return self.source == SYNTHETIC_SOURCE

    def to_dict(self) -> dict:
        """Serialise to the camelCase payload sent to observers."""
        return {
            "campusId": self.campus_id,
            "timestamp": self.timestamp.isoformat(),
            "solar": {
                "generation": self.solar.generation,
                "irradiance": self.solar.irradiance,
                "efficiency": self.solar.efficiency,
                "temperature": self.solar.temperature,
            },
            "wind": {
                "generation": self.wind.generation,
                "speed": self.wind.speed,
                "direction": self.wind.direction,
                "temperature": self.wind.temperature,
            },
            "battery": {
                "soc": self.battery.soc,
                "power": self.battery.power,
                "voltage": self.battery.voltage,
                "temperature": self.battery.temperature,
                "capacity": self.battery.capacity,
                "cycles": self.battery.cycles,
            },
            "grid": {
                "import": self.grid.import_power,
                "export": self.grid.export_power,
                "frequency": self.grid.frequency,
                "voltage": self.grid.voltage,
                "powerFactor": self.grid.power_factor,
            },
            "load": {
                "total": self.load.total,
                "critical": self.load.critical,
                "nonCritical": self.load.non_critical,
            },
            "weather": {
                "temperature": self.weather.temperature,
                "humidity": self.weather.humidity,
                "pressure": self.weather.pressure,
                "windSpeed": self.weather.wind_speed,
                "cloudCover": self.weather.cloud_cover,
            },
            "source": self.source,
        }
