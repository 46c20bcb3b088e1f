"""Construction of the long-lived service objects shared by the app and the loop."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.faults import FaultTracker
from campus_telemetry.broker.scheduler import BroadcastScheduler
from campus_telemetry.catalog.registry import SiteRegistry
from campus_telemetry.config.schema import AppConfig
from campus_telemetry.sessions.outbox import OutboxRegistry
from campus_telemetry.telemetry.synthesizer import TelemetrySynthesizer


@dataclass
class Services:
    """Everything a running server needs, owned by the process."""

    config: AppConfig
    registry: SiteRegistry
    faults: FaultTracker
    synthesizer: TelemetrySynthesizer
    outboxes: OutboxRegistry
    broker: SubscriptionBroker
    scheduler: BroadcastScheduler
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at


def build_services(config: AppConfig, rng: random.Random | None = None) -> Services:
    """Wire registry, broker, outboxes and scheduler from configuration."""
    registry = SiteRegistry(config.catalog.campuses)
    faults = FaultTracker(max_consecutive_failures=config.broadcast.max_consecutive_faults)
    synthesizer = TelemetrySynthesizer(rng)
    outboxes = OutboxRegistry(maxsize=config.broadcast.outbox_size)

    broker = SubscriptionBroker(synthesizer, outboxes.deliver, faults)
    broker.add_disconnect_callback(outboxes.close)

    scheduler = BroadcastScheduler(
        registry=registry,
        broker=broker,
        synthesizer=synthesizer,
        interval_seconds=config.broadcast.interval_seconds,
        faults=faults,
    )
    return Services(
        config=config,
        registry=registry,
        faults=faults,
        synthesizer=synthesizer,
        outboxes=outboxes,
        broker=broker,
        scheduler=scheduler,
    )
