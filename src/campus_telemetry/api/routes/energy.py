"""One-shot synthetic energy data endpoints.

These generate fresh samples on every call and do not touch subscriptions.
Campus ids are not checked against the catalog.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

router = APIRouter()


@router.get("/energy-data")
async def energy_data(
    request: Request,
    campus_id: str | None = Query(None, alias="campusId"),
    limit: int | None = Query(None),
) -> list[dict]:
    """Return ``limit`` fresh samples for a campus (default campus and limit from config)."""
    services = request.app.state.services
    api_config = services.config.api

    target = campus_id or api_config.default_campus_id
    count = api_config.default_limit if limit is None else limit
    count = max(0, min(count, api_config.max_energy_data_limit))

    return [services.synthesizer.synthesize(target).to_dict() for _ in range(count)]


@router.get("/energy-data/latest/{campus_id}")
async def latest_energy_data(campus_id: str, request: Request) -> dict:
    return request.app.state.services.synthesizer.synthesize(campus_id).to_dict()
