"""Realtime observer connection over WebSocket."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.errors import ProtocolError
from campus_telemetry.logging.context import bind_observer, clear_context
from campus_telemetry.sessions.protocol import (
    dispatch_frame,
    energy_data_frame,
    error_frame,
    parse_frame,
)
from campus_telemetry.sessions.session import ObserverSession

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def observer_socket(websocket: WebSocket) -> None:
    """One observer: inbound frames drive the session, its outbox feeds the socket."""
    services = websocket.app.state.services
    await websocket.accept()

    session = ObserverSession(services.broker, services.outboxes)
    bind_observer(session.observer_id, transport="ws")
    logger.info("Client connected: %s", session.observer_id)

    writer = asyncio.create_task(_pump_outbox(websocket, session, services.broker))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                await websocket.send_json(error_frame("Binary frames are not supported"))
                continue
            try:
                frame = parse_frame(json.loads(text))
            except json.JSONDecodeError as e:
                await websocket.send_json(error_frame(f"Invalid JSON: {e.msg}"))
                continue
            except ProtocolError as e:
                await websocket.send_json(error_frame(str(e)))
                continue
            dispatch_frame(session, frame)
    except WebSocketDisconnect:
        pass
    finally:
        session.disconnect()
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)
        logger.info("Client disconnected: %s", session.observer_id)
        clear_context()


async def _pump_outbox(
    websocket: WebSocket, session: ObserverSession, broker: SubscriptionBroker
) -> None:
    async for sample in session.outbox:
        try:
            await websocket.send_json(energy_data_frame(sample))
        except Exception as e:
            # Socket went away mid-send; the reader side handles the disconnect
            broker.report_delivery_fault(session.observer_id, str(e) or type(e).__name__)
            return
