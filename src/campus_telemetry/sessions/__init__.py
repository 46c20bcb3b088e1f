"""Observer sessions and their outbound delivery queues."""

from campus_telemetry.sessions.outbox import Outbox, OutboxRegistry
from campus_telemetry.sessions.session import ObserverSession, SessionState

__all__ = ["ObserverSession", "Outbox", "OutboxRegistry", "SessionState"]
