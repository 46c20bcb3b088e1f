"""Liveness and status endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from campus_telemetry import __version__

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/status")
async def status(request: Request) -> dict:
    """Server identity, uptime and broadcast counters."""
    services = request.app.state.services
    scheduler_state = services.scheduler.state
    return {
        "server": services.config.server.name,
        "version": __version__,
        "status": "running",
        "uptime": round(services.uptime_seconds, 3),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "observers": services.broker.observer_count,
        "ticks": scheduler_state.tick_count,
        "broadcast": {
            "interval_seconds": services.scheduler.interval_seconds,
            "last_tick_at": (
                scheduler_state.last_tick_at.isoformat() if scheduler_state.last_tick_at else None
            ),
            "last_tick_deliveries": scheduler_state.last_tick_deliveries,
            "running": scheduler_state.is_running,
        },
        "faults": services.faults.summary(),
    }
