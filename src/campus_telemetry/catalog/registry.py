"""Read-only, ordered lookup of known campuses."""

from __future__ import annotations

import logging
from typing import Iterable

from campus_telemetry.catalog.models import Campus
from campus_telemetry.errors import SiteNotFoundError

logger = logging.getLogger(__name__)


class SiteRegistry:
    """Immutable catalog of campuses, preserving configuration order."""

    def __init__(self, campuses: Iterable[Campus]) -> None:
        ordered: dict[str, Campus] = {}
        for campus in campuses:
            if campus.id in ordered:
                raise ValueError(f"Duplicate campus id in catalog: {campus.id}")
            ordered[campus.id] = campus
        self._campuses = ordered
        logger.info("Site registry loaded with %d campuses", len(ordered))

    def list_site_ids(self) -> list[str]:
        return list(self._campuses)

    def list_sites(self) -> list[Campus]:
        return list(self._campuses.values())

    def get_site(self, site_id: str) -> Campus:
        """Return the campus with ``site_id``.

        Raises:
            SiteNotFoundError: if the id is not in the catalog.
        """
        try:
            return self._campuses[site_id]
        except KeyError:
            raise SiteNotFoundError(site_id) from None

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._campuses

    def __len__(self) -> int:
        return len(self._campuses)
