"""Delivery and synthesis fault tracking."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class FaultRecord:
    """Fault history for a single observer or site."""

    key: str
    healthy: bool = True
    last_success: float = 0.0
    last_failure: float = 0.0
    consecutive_failures: int = 0
    total_failures: int = 0
    last_error: str = ""


class FaultTracker:
    """Counts faults per key and marks a key unhealthy after repeated failures.

    Delivery faults are keyed by observer id, synthesis faults by site id.
    """

    def __init__(self, max_consecutive_failures: int = 3) -> None:
        self._max_failures = max_consecutive_failures
        self._delivery: dict[str, FaultRecord] = {}
        self._synthesis: dict[str, FaultRecord] = {}

    def record_delivery_success(self, observer_id: str) -> None:
        self._record_success(self._delivery, observer_id)

    def record_delivery_fault(self, observer_id: str, error: str = "") -> None:
        self._record_failure(self._delivery, observer_id, error, "Observer")

    def record_synthesis_fault(self, site_id: str, error: str = "") -> None:
        self._record_failure(self._synthesis, site_id, error, "Site")

    def forget_observer(self, observer_id: str) -> None:
        """Drop fault history for an observer that has disconnected."""
        self._delivery.pop(observer_id, None)

    def is_healthy(self, observer_id: str) -> bool:
        record = self._delivery.get(observer_id)
        return record.healthy if record else True  # Unknown observers assumed healthy

    def get_unhealthy_observers(self) -> list[str]:
        return [key for key, r in self._delivery.items() if not r.healthy]

    def get_delivery_record(self, observer_id: str) -> FaultRecord | None:
        return self._delivery.get(observer_id)

    def get_synthesis_record(self, site_id: str) -> FaultRecord | None:
        return self._synthesis.get(site_id)

    @property
    def total_delivery_faults(self) -> int:
        return sum(r.total_failures for r in self._delivery.values())

    @property
    def total_synthesis_faults(self) -> int:
        return sum(r.total_failures for r in self._synthesis.values())

    def summary(self) -> dict:
        return {
            "delivery_faults": self.total_delivery_faults,
            "synthesis_faults": self.total_synthesis_faults,
            "unhealthy_observers": self.get_unhealthy_observers(),
        }

    @staticmethod
    def _record_success(records: dict[str, FaultRecord], key: str) -> None:
        record = records.get(key)
        if record is None:
            return
        record.healthy = True
        record.last_success = time.monotonic()
        record.consecutive_failures = 0

    def _record_failure(
        self, records: dict[str, FaultRecord], key: str, error: str, kind: str
    ) -> None:
        record = records.setdefault(key, FaultRecord(key=key))
        record.last_failure = time.monotonic()
        record.consecutive_failures += 1
        record.total_failures += 1
        record.last_error = error

        if record.healthy and record.consecutive_failures >= self._max_failures:
            record.healthy = False
            logger.warning(
                "%s '%s' marked unhealthy (%d consecutive faults): %s",
                kind, key, record.consecutive_failures, error,
            )
