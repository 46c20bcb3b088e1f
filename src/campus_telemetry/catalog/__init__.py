"""Static campus catalog."""

from campus_telemetry.catalog.models import Campus
from campus_telemetry.catalog.registry import SiteRegistry

__all__ = ["Campus", "SiteRegistry"]
