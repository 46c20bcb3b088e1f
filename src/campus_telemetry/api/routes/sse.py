"""Server-Sent Events stream for a single campus."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Request
from starlette.responses import StreamingResponse

from campus_telemetry.logging.context import bind_observer, clear_context
from campus_telemetry.sessions.session import ObserverSession
from campus_telemetry.telemetry.sample import TelemetrySample

router = APIRouter()
logger = logging.getLogger(__name__)


def format_sse(sample: TelemetrySample) -> str:
    return f"event: energy-data\ndata: {json.dumps(sample.to_dict())}\n\n"


@router.get("/campuses/{campus_id}/events")
async def campus_event_stream(campus_id: str, request: Request) -> StreamingResponse:
    """SSE endpoint: joined to ``campus_id`` for as long as the client stays connected."""
    services = request.app.state.services
    keepalive = services.config.server.sse_keepalive_seconds

    async def generate():
        session = ObserverSession(services.broker, services.outboxes)
        session.join(campus_id)
        bind_observer(session.observer_id, transport="sse", campus_id=campus_id)
        logger.info("SSE client %s streaming campus %s", session.observer_id, campus_id)
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    sample = await asyncio.wait_for(session.outbox.get(), timeout=keepalive)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                if sample is None:
                    break
                yield format_sse(sample)
        finally:
            session.disconnect()
            logger.info("SSE client %s closed", session.observer_id)
            clear_context()

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
