"""Subscription broker and broadcast scheduling."""

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.scheduler import BroadcastScheduler

__all__ = ["BroadcastScheduler", "SubscriptionBroker"]
