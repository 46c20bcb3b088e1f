"""Subscription broker: who is watching which campus, and delivery to them."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from campus_telemetry.broker.faults import FaultTracker
from campus_telemetry.broker.messages import (
    BrokerMessage,
    Connect,
    Disconnect,
    Join,
    Leave,
    SnapshotRequest,
)
from campus_telemetry.errors import DeliveryError, SynthesisError
from campus_telemetry.telemetry.sample import TelemetrySample
from campus_telemetry.telemetry.synthesizer import TelemetrySynthesizer

logger = logging.getLogger(__name__)

# Fire-and-forget delivery to one observer; raises DeliveryError on failure
DeliverFn = Callable[[str, TelemetrySample], None]
DisconnectCallback = Callable[[str], None]


class SubscriptionBroker:
    """Tracks observer/campus memberships and delivers samples to observers.

    Membership is kept in two maps guarded by a single lock:
    campus -> observers (for multicast) and observer -> campuses (for cleanup).

    Mutations may be called directly or submitted as messages; submitted
    messages are handled strictly in order by ``run()``, so a join submitted
    before a disconnect can never outlive it.

    Campus ids are not validated against the catalog. Joining an unknown id
    creates an empty subscriber set for it like any other.
    """

    def __init__(
        self,
        synthesizer: TelemetrySynthesizer,
        deliver: DeliverFn,
        faults: FaultTracker | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._deliver = deliver
        self._faults = faults or FaultTracker()
        self._lock = asyncio.Lock()
        self._inbox: asyncio.Queue[BrokerMessage] = asyncio.Queue()

        self._subscribers: dict[str, set[str]] = {}
        self._memberships: dict[str, set[str]] = {}

        self._on_disconnect: list[DisconnectCallback] = []

    @property
    def faults(self) -> FaultTracker:
        return self._faults

    @property
    def observer_count(self) -> int:
        return len(self._memberships)

    @property
    def pending_messages(self) -> int:
        return self._inbox.qsize()

    def add_disconnect_callback(self, callback: DisconnectCallback) -> None:
        """Register a callback run after an observer's memberships are removed."""
        self._on_disconnect.append(callback)

    # ── Queries ──────────────────────────────────────────────

    def subscribers(self, site_id: str) -> frozenset[str]:
        return frozenset(self._subscribers.get(site_id, ()))

    def sites_for(self, observer_id: str) -> frozenset[str]:
        return frozenset(self._memberships.get(observer_id, ()))

    def site_ids(self) -> list[str]:
        """Campus ids that currently have at least one subscriber."""
        return [site for site, observers in self._subscribers.items() if observers]

    # ── Inbound message channel ──────────────────────────────

    def submit(self, message: BrokerMessage) -> None:
        """Queue a message for in-order handling by ``run()``."""
        self._inbox.put_nowait(message)

    async def drain(self) -> None:
        """Wait until every submitted message has been handled."""
        await self._inbox.join()

    async def run(self) -> None:
        """Consume submitted messages until cancelled."""
        logger.info("Subscription broker started")
        try:
            while True:
                message = await self._inbox.get()
                try:
                    await self.handle(message)
                except Exception:
                    logger.exception("Broker failed to handle %r", message)
                finally:
                    self._inbox.task_done()
        finally:
            logger.info("Subscription broker stopped")

    async def handle(self, message: BrokerMessage) -> None:
        """Apply one inbound message."""
        if isinstance(message, Join):
            await self.join(message.observer_id, message.site_id)
        elif isinstance(message, Leave):
            await self.leave(message.observer_id, message.site_id)
        elif isinstance(message, SnapshotRequest):
            await self.request_snapshot(message.observer_id, message.site_id)
        elif isinstance(message, Connect):
            await self.connect(message.observer_id)
        elif isinstance(message, Disconnect):
            await self.disconnect(message.observer_id)
        else:
            raise TypeError(f"Unsupported broker message: {message!r}")

    # ── Membership ───────────────────────────────────────────

    async def connect(self, observer_id: str) -> None:
        async with self._lock:
            self._memberships.setdefault(observer_id, set())
        logger.info("Observer %s connected", observer_id)

    async def join(self, observer_id: str, site_id: str) -> None:
        """Subscribe an observer to a campus and push it one fresh sample."""
        async with self._lock:
            observers = self._subscribers.setdefault(site_id, set())
            already = observer_id in observers
            observers.add(observer_id)
            self._memberships.setdefault(observer_id, set()).add(site_id)

        if already:
            logger.debug("Observer %s already joined %s", observer_id, site_id)
        else:
            logger.info("Observer %s joined campus %s", observer_id, site_id)

        # Initial data goes to the joiner only
        await self.request_snapshot(observer_id, site_id)

    async def leave(self, observer_id: str, site_id: str) -> None:
        async with self._lock:
            removed = self._discard(observer_id, site_id)
            sites = self._memberships.get(observer_id)
            if sites is not None:
                sites.discard(site_id)
        if removed:
            logger.info("Observer %s left campus %s", observer_id, site_id)

    async def disconnect(self, observer_id: str) -> None:
        """Remove an observer from every campus it joined."""
        async with self._lock:
            sites = self._memberships.pop(observer_id, set())
            for site_id in sites:
                self._discard(observer_id, site_id)

        self._faults.forget_observer(observer_id)
        logger.info("Observer %s disconnected (left %d campuses)", observer_id, len(sites))

        for cb in self._on_disconnect:
            try:
                cb(observer_id)
            except Exception:
                logger.exception("Disconnect callback error")

    def _discard(self, observer_id: str, site_id: str) -> bool:
        observers = self._subscribers.get(site_id)
        if observers is None or observer_id not in observers:
            return False
        observers.discard(observer_id)
        if not observers:
            del self._subscribers[site_id]
        return True

    # ── Delivery ─────────────────────────────────────────────

    async def request_snapshot(self, observer_id: str, site_id: str) -> bool:
        """Send one fresh sample for ``site_id`` to ``observer_id``, joined or not."""
        try:
            sample = self._synthesizer.synthesize(site_id)
        except SynthesisError as e:
            logger.warning("Snapshot for %s skipped: %s", site_id, e)
            self._faults.record_synthesis_fault(site_id, str(e))
            return False
        return self._deliver_to(observer_id, sample)

    async def multicast(self, site_id: str, sample: TelemetrySample) -> int:
        """Deliver ``sample`` to every observer subscribed to ``site_id`` right now.

        Returns the number of successful deliveries. Delivery faults are
        recorded per observer and never raised.
        """
        async with self._lock:
            recipients = list(self._subscribers.get(site_id, ()))

        delivered = 0
        for observer_id in recipients:
            if self._deliver_to(observer_id, sample):
                delivered += 1
        return delivered

    def report_delivery_fault(self, observer_id: str, error: str) -> None:
        """Record a fault raised by the transport after a delivery was accepted."""
        logger.warning("Delivery fault for observer %s: %s", observer_id, error)
        self._faults.record_delivery_fault(observer_id, error)

    def _deliver_to(self, observer_id: str, sample: TelemetrySample) -> bool:
        try:
            self._deliver(observer_id, sample)
        except DeliveryError as e:
            self.report_delivery_fault(observer_id, e.reason)
            return False
        except Exception as e:
            logger.exception("Unexpected delivery error for observer %s", observer_id)
            self._faults.record_delivery_fault(observer_id, str(e))
            return False
        self._faults.record_delivery_success(observer_id)
        return True
