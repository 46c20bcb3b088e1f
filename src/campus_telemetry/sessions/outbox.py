"""Bounded per-observer delivery queues.

The broker hands samples to ``OutboxRegistry.deliver`` without waiting; each
transport connection drains its own ``Outbox``. A slow observer fills only its
own queue.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from campus_telemetry.errors import DeliveryError
from campus_telemetry.telemetry.sample import TelemetrySample

logger = logging.getLogger(__name__)


class Outbox:
    """Queue of samples awaiting transmission to one observer."""

    def __init__(self, observer_id: str, maxsize: int = 100) -> None:
        self.observer_id = observer_id
        self._queue: asyncio.Queue[TelemetrySample | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    def put(self, sample: TelemetrySample) -> None:
        if self._closed:
            raise DeliveryError(self.observer_id, "outbox closed")
        try:
            self._queue.put_nowait(sample)
        except asyncio.QueueFull:
            raise DeliveryError(self.observer_id, "outbox full") from None

    def close(self) -> None:
        """Stop accepting samples and wake the reader."""
        if self._closed:
            return
        self._closed = True
        if self._queue.full():
            # Make room for the end-of-stream marker
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def get(self) -> TelemetrySample | None:
        """Next sample, or None once the outbox is closed and drained."""
        return await self._queue.get()

    async def __aiter__(self) -> AsyncIterator[TelemetrySample]:
        while True:
            sample = await self._queue.get()
            if sample is None:
                return
            yield sample


class OutboxRegistry:
    """Outboxes for every connected observer, keyed by observer id."""

    def __init__(self, maxsize: int = 100) -> None:
        self._maxsize = maxsize
        self._outboxes: dict[str, Outbox] = {}

    def open(self, observer_id: str) -> Outbox:
        outbox = self._outboxes.get(observer_id)
        if outbox is None or outbox.closed:
            outbox = Outbox(observer_id, self._maxsize)
            self._outboxes[observer_id] = outbox
        return outbox

    def get(self, observer_id: str) -> Outbox | None:
        return self._outboxes.get(observer_id)

    def deliver(self, observer_id: str, sample: TelemetrySample) -> None:
        """Queue ``sample`` for ``observer_id``.

        Raises:
            DeliveryError: if the observer has no open outbox or it is full.
        """
        outbox = self._outboxes.get(observer_id)
        if outbox is None:
            raise DeliveryError(observer_id, "observer not connected")
        outbox.put(sample)

    def close(self, observer_id: str) -> None:
        outbox = self._outboxes.pop(observer_id, None)
        if outbox is not None:
            outbox.close()
            logger.debug("Outbox closed for observer %s", observer_id)

    def __len__(self) -> int:
        return len(self._outboxes)

    def __contains__(self, observer_id: object) -> bool:
        return observer_id in self._outboxes
