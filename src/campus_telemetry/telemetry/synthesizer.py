"""Bounded-random telemetry synthesis.

Every numeric field is drawn independently and uniformly from a half-open
range. No physical consistency between fields is modelled.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

from campus_telemetry.errors import SynthesisError
from campus_telemetry.telemetry.sample import (
    BatteryReading,
    GridReading,
    LoadReading,
    SolarReading,
    TelemetrySample,
    WeatherReading,
    WindReading,
)

BATTERY_CAPACITY_KWH = 1000

# (low, high) bounds, high exclusive
SOLAR_GENERATION = (100.0, 500.0)
SOLAR_IRRADIANCE = (200.0, 1000.0)
SOLAR_EFFICIENCY = (20.0, 25.0)
SOLAR_TEMPERATURE = (35.0, 45.0)
WIND_GENERATION = (50.0, 300.0)
WIND_SPEED = (5.0, 15.0)
WIND_DIRECTION = (0, 360)
WIND_TEMPERATURE = (20.0, 35.0)
BATTERY_SOC = (60.0, 100.0)
BATTERY_POWER = (-100.0, 100.0)
BATTERY_VOLTAGE = (400.0, 450.0)
BATTERY_TEMPERATURE = (25.0, 35.0)
BATTERY_CYCLES = (500, 1500)
GRID_IMPORT = (0.0, 100.0)
GRID_EXPORT = (0.0, 150.0)
GRID_FREQUENCY = (49.5, 50.5)
GRID_VOLTAGE = (225.0, 235.0)
GRID_POWER_FACTOR = (0.9, 1.0)
LOAD_TOTAL = (200.0, 600.0)
LOAD_CRITICAL = (50.0, 150.0)
LOAD_NON_CRITICAL = (150.0, 450.0)
WEATHER_TEMPERATURE = (20.0, 35.0)
WEATHER_HUMIDITY = (40.0, 70.0)
WEATHER_PRESSURE = (1000.0, 1050.0)
WEATHER_WIND_SPEED = (2.0, 12.0)
WEATHER_CLOUD_COVER = (0, 100)


class TelemetrySynthesizer:
    """Produces synthetic telemetry samples from an injectable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def synthesize(self, campus_id: str, now: datetime | None = None) -> TelemetrySample:
        """Generate one sample for ``campus_id`` stamped at ``now`` (default: current UTC).

        Raises:
            SynthesisError: if the random source fails.
        """
        timestamp = now or datetime.now(timezone.utc)
        try:
            return TelemetrySample(
                campus_id=campus_id,
                timestamp=timestamp,
                solar=SolarReading(
                    generation=self._uniform(SOLAR_GENERATION),
                    irradiance=self._uniform(SOLAR_IRRADIANCE),
                    efficiency=self._uniform(SOLAR_EFFICIENCY),
                    temperature=self._uniform(SOLAR_TEMPERATURE),
                ),
                wind=WindReading(
                    generation=self._uniform(WIND_GENERATION),
                    speed=self._uniform(WIND_SPEED),
                    direction=self._integer(WIND_DIRECTION),
                    temperature=self._uniform(WIND_TEMPERATURE),
                ),
                battery=BatteryReading(
                    soc=self._uniform(BATTERY_SOC),
                    power=self._uniform(BATTERY_POWER),
                    voltage=self._uniform(BATTERY_VOLTAGE),
                    temperature=self._uniform(BATTERY_TEMPERATURE),
                    capacity=BATTERY_CAPACITY_KWH,
                    cycles=self._integer(BATTERY_CYCLES),
                ),
                grid=GridReading(
                    import_power=self._uniform(GRID_IMPORT),
                    export_power=self._uniform(GRID_EXPORT),
                    frequency=self._uniform(GRID_FREQUENCY),
                    voltage=self._uniform(GRID_VOLTAGE),
                    power_factor=self._uniform(GRID_POWER_FACTOR),
                ),
                load=LoadReading(
                    total=self._uniform(LOAD_TOTAL),
                    critical=self._uniform(LOAD_CRITICAL),
                    non_critical=self._uniform(LOAD_NON_CRITICAL),
                ),
                weather=WeatherReading(
                    temperature=self._uniform(WEATHER_TEMPERATURE),
                    humidity=self._uniform(WEATHER_HUMIDITY),
                    pressure=self._uniform(WEATHER_PRESSURE),
                    wind_speed=self._uniform(WEATHER_WIND_SPEED),
                    cloud_cover=self._integer(WEATHER_CLOUD_COVER),
                ),
            )
        except SynthesisError:
            raise
        except Exception as e:
            raise SynthesisError(f"Random source failed for {campus_id}: {e}") from e

    def _uniform(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        value = low + self._rng.random() * (high - low)
        # Float rounding can land exactly on the exclusive bound
        return value if value < high else low

    def _integer(self, bounds: tuple[int, int]) -> int:
        low, high = bounds
        return self._rng.randrange(low, high)


_default = TelemetrySynthesizer()


def synthesize(campus_id: str, now: datetime | None = None) -> TelemetrySample:
    """Generate one sample using the module-level synthesizer."""
    return _default.synthesize(campus_id, now)
