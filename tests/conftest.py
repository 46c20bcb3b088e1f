"""Shared test fixtures for Campus Telemetry."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.faults import FaultTracker
from campus_telemetry.catalog.models import Campus, Coordinates, Location
from campus_telemetry.catalog.registry import SiteRegistry
from campus_telemetry.config.manager import ConfigManager
from campus_telemetry.config.schema import AppConfig
from campus_telemetry.errors import DeliveryError
from campus_telemetry.telemetry.sample import TelemetrySample
from campus_telemetry.telemetry.synthesizer import TelemetrySynthesizer


class RecordingTransport:
    """Delivery stand-in that records samples and can fail chosen observers."""

    def __init__(self) -> None:
        self.delivered: list[tuple[str, TelemetrySample]] = []
        self.failing: set[str] = set()

    def deliver(self, observer_id: str, sample: TelemetrySample) -> None:
        if observer_id in self.failing:
            raise DeliveryError(observer_id, "socket closed")
        self.delivered.append((observer_id, sample))

    def received_by(self, observer_id: str) -> list[TelemetrySample]:
        return [s for o, s in self.delivered if o == observer_id]

    def clear(self) -> None:
        self.delivered.clear()


def make_campus(campus_id: str) -> Campus:
    return Campus(
        id=campus_id,
        name=f"{campus_id} campus",
        location=Location(
            address="1 Test Road",
            city="Testville",
            state="CA",
            country="USA",
            zip_code="00000",
            coordinates=Coordinates(latitude=0.0, longitude=0.0),
        ),
    )


@pytest.fixture
def config() -> AppConfig:
    """Provide a default test configuration."""
    return AppConfig()


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Provide a config manager with test paths."""
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("broadcast:\n  interval_seconds: 3600\n")
    user = tmp_path / "config.yaml"
    mgr = ConfigManager(defaults_path=defaults, user_path=user)
    mgr.load()
    return mgr


@pytest.fixture
def synthesizer() -> TelemetrySynthesizer:
    return TelemetrySynthesizer(random.Random(1234))


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def faults() -> FaultTracker:
    return FaultTracker(max_consecutive_failures=3)


@pytest.fixture
def broker(synthesizer, transport, faults) -> SubscriptionBroker:
    return SubscriptionBroker(synthesizer, transport.deliver, faults)


@pytest.fixture
def registry() -> SiteRegistry:
    """Two-campus registry: siteA, siteB."""
    return SiteRegistry([make_campus("siteA"), make_campus("siteB")])


@pytest.fixture
def campus_factory():
    return make_campus
