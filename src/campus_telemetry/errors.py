"""Exception types shared across the telemetry service."""

from __future__ import annotations


class CampusTelemetryError(Exception):
    """Base class for all service errors."""


class SiteNotFoundError(CampusTelemetryError, LookupError):
    """Requested campus id is not in the catalog."""

    def __init__(self, site_id: str) -> None:
        super().__init__(f"Campus not found: {site_id}")
        self.site_id = site_id


class SynthesisError(CampusTelemetryError):
    """A telemetry sample could not be generated."""


class DeliveryError(CampusTelemetryError):
    """Outbound delivery to one observer failed."""

    def __init__(self, observer_id: str, reason: str) -> None:
        super().__init__(f"Delivery to {observer_id} failed: {reason}")
        self.observer_id = observer_id
        self.reason = reason


class SessionClosedError(CampusTelemetryError):
    """Operation attempted on an observer session that has disconnected."""


class ProtocolError(CampusTelemetryError):
    """Inbound frame from an observer could not be understood."""
