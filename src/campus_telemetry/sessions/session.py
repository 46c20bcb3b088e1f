"""Lifecycle of one connected observer."""

from __future__ import annotations

import logging
import uuid
from enum import Enum

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.messages import Connect, Disconnect, Join, Leave, SnapshotRequest
from campus_telemetry.errors import SessionClosedError
from campus_telemetry.sessions.outbox import Outbox, OutboxRegistry

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ObserverSession:
    """One observer's identity, translating transport events into broker messages.

    Constructed in the CONNECTED state. After ``disconnect()`` every
    further operation raises ``SessionClosedError``.
    """

    def __init__(
        self,
        broker: SubscriptionBroker,
        outboxes: OutboxRegistry,
        observer_id: str | None = None,
    ) -> None:
        self.observer_id = observer_id or uuid.uuid4().hex
        self._broker = broker
        self._outbox = outboxes.open(self.observer_id)
        self._state = SessionState.CONNECTED
        broker.submit(Connect(self.observer_id))

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    @property
    def outbox(self) -> Outbox:
        return self._outbox

    def join(self, site_id: str) -> None:
        self._ensure_connected("join")
        self._broker.submit(Join(self.observer_id, site_id))

    def leave(self, site_id: str) -> None:
        self._ensure_connected("leave")
        self._broker.submit(Leave(self.observer_id, site_id))

    def request_snapshot(self, site_id: str) -> None:
        self._ensure_connected("snapshot")
        self._broker.submit(SnapshotRequest(self.observer_id, site_id))

    def disconnect(self) -> None:
        """Transition to DISCONNECTED. Only the first call has any effect."""
        if self._state is SessionState.DISCONNECTED:
            return
        self._state = SessionState.DISCONNECTED
        # The broker closes the outbox once memberships are gone
        self._broker.submit(Disconnect(self.observer_id))

    def _ensure_connected(self, operation: str) -> None:
        if self._state is SessionState.DISCONNECTED:
            raise SessionClosedError(
                f"Cannot {operation}: observer {self.observer_id} has disconnected"
            )
