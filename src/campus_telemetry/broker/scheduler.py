"""Async broadcast loop: one sample per campus per tick."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.faults import FaultTracker
from campus_telemetry.catalog.registry import SiteRegistry
from campus_telemetry.errors import SynthesisError
from campus_telemetry.telemetry.synthesizer import TelemetrySynthesizer

logger = logging.getLogger(__name__)


@dataclass
class SchedulerState:
    """Snapshot of the broadcast loop state."""

    tick_count: int = 0
    last_tick_at: datetime | None = None
    last_tick_duration_ms: int = 0
    last_tick_deliveries: int = 0
    last_tick_skipped_sites: int = 0
    is_running: bool = False


class BroadcastScheduler:
    """Periodic broadcast of synthetic telemetry to subscribed observers.

    Every tick (default 5 seconds), for each campus in the registry:
    1. Synthesize one sample
    2. Multicast it to the campus's current subscribers

    The interval is measured from the end of one tick to the start of the
    next, so ticks never overlap. A failure for one campus is logged and
    recorded; the remaining campuses in the tick are still processed.
    """

    def __init__(
        self,
        registry: SiteRegistry,
        broker: SubscriptionBroker,
        synthesizer: TelemetrySynthesizer,
        interval_seconds: float = 5.0,
        faults: FaultTracker | None = None,
    ) -> None:
        self._registry = registry
        self._broker = broker
        self._synthesizer = synthesizer
        self._interval = interval_seconds
        self._faults = faults or broker.faults
        self._state = SchedulerState()
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def interval_seconds(self) -> float:
        return self._interval

    async def run(self) -> None:
        """Run the broadcast loop until stopped."""
        self._state.is_running = True
        self._stop_event.clear()
        logger.info("Broadcast scheduler starting (interval: %.1fs)", self._interval)

        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                    break  # stop_event was set
                except asyncio.TimeoutError:
                    pass  # Normal, interval elapsed

                try:
                    await self._tick()
                except Exception:
                    logger.exception("Broadcast tick %d failed", self._state.tick_count)
        finally:
            self._state.is_running = False
            logger.info("Broadcast scheduler stopped after %d ticks", self._state.tick_count)

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._stop_event.set()

    async def tick_once(self) -> int:
        """Execute a single tick (for testing). Returns successful deliveries."""
        return await self._tick()

    async def _tick(self) -> int:
        self._state.tick_count += 1
        self._state.last_tick_at = datetime.now(timezone.utc)
        tick_start = time.monotonic()

        delivered = 0
        skipped = 0
        for site_id in self._registry.list_site_ids():
            try:
                sample = self._synthesizer.synthesize(site_id, self._state.last_tick_at)
            except SynthesisError as e:
                skipped += 1
                self._faults.record_synthesis_fault(site_id, str(e))
                logger.warning("Tick %d: skipped %s: %s", self._state.tick_count, site_id, e)
                continue
            except Exception as e:
                skipped += 1
                self._faults.record_synthesis_fault(site_id, str(e))
                logger.exception("Tick %d: synthesis error for %s", self._state.tick_count, site_id)
                continue

            try:
                delivered += await self._broker.multicast(site_id, sample)
            except Exception:
                logger.exception("Tick %d: multicast error for %s", self._state.tick_count, site_id)

        elapsed_ms = int((time.monotonic() - tick_start) * 1000)
        self._state.last_tick_duration_ms = elapsed_ms
        self._state.last_tick_deliveries = delivered
        self._state.last_tick_skipped_sites = skipped

        log_fn = logger.debug if skipped == 0 else logger.warning
        log_fn(
            "Tick %d: sites=%d delivered=%d skipped=%d elapsed=%dms",
            self._state.tick_count,
            len(self._registry),
            delivered,
            skipped,
            elapsed_ms,
        )
        return delivered
