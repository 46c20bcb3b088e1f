"""Campus catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from campus_telemetry.errors import SiteNotFoundError

router = APIRouter()


@router.get("/campuses")
async def list_campuses(request: Request) -> list[dict]:
    registry = request.app.state.services.registry
    return [campus.to_dict() for campus in registry.list_sites()]


@router.get("/campuses/{campus_id}")
async def get_campus(campus_id: str, request: Request):
    registry = request.app.state.services.registry
    try:
        campus = registry.get_site(campus_id)
    except SiteNotFoundError:
        return JSONResponse({"error": "Campus not found"}, status_code=404)
    return campus.to_dict()
