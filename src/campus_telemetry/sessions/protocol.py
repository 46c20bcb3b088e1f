"""Wire protocol for realtime observer connections.

Inbound frames::

    {"event": "join-campus", "data": {"campusId": "campus-1"}}
    {"event": "leave-campus", "data": {"campusId": "campus-1"}}
    {"event": "get-latest-data", "data": {"campusId": "campus-1"}}

Outbound frames::

    {"event": "energy-data", "data": {...sample...}}
    {"event": "error", "data": {"message": "..."}}
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from campus_telemetry.errors import ProtocolError
from campus_telemetry.sessions.session import ObserverSession
from campus_telemetry.telemetry.sample import TelemetrySample

JOIN_CAMPUS = "join-campus"
LEAVE_CAMPUS = "leave-campus"
GET_LATEST_DATA = "get-latest-data"
ENERGY_DATA = "energy-data"
ERROR = "error"


class CampusRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    campus_id: str = Field(alias="campusId", min_length=1)


class InboundFrame(BaseModel):
    event: Literal["join-campus", "leave-campus", "get-latest-data"]
    data: CampusRef


def parse_frame(raw: Any) -> InboundFrame:
    """Validate a decoded JSON frame.

    Raises:
        ProtocolError: if the frame is not a known event with a campus id.
    """
    try:
        return InboundFrame.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ProtocolError(f"Invalid frame: {errors}") from None


def dispatch_frame(session: ObserverSession, frame: InboundFrame) -> None:
    """Apply an inbound frame to the observer's session."""
    campus_id = frame.data.campus_id
    if frame.event == JOIN_CAMPUS:
        session.join(campus_id)
    elif frame.event == LEAVE_CAMPUS:
        session.leave(campus_id)
    else:
        session.request_snapshot(campus_id)


def energy_data_frame(sample: TelemetrySample) -> dict:
    return {"event": ENERGY_DATA, "data": sample.to_dict()}


def error_frame(message: str) -> dict:
    return {"event": ERROR, "data": {"message": message}}
