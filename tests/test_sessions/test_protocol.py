"""Tests for the realtime wire protocol."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from campus_telemetry.errors import ProtocolError
from campus_telemetry.sessions.protocol import (
    dispatch_frame,
    energy_data_frame,
    error_frame,
    parse_frame,
)


class TestParseFrame:
    @pytest.mark.parametrize("event", ["join-campus", "leave-campus", "get-latest-data"])
    def test_known_events(self, event) -> None:
        frame = parse_frame({"event": event, "data": {"campusId": "campus-1"}})
        assert frame.event == event
        assert frame.data.campus_id == "campus-1"

    @pytest.mark.parametrize(
        "raw",
        [
            {"event": "explode", "data": {"campusId": "campus-1"}},
            {"event": "join-campus"},
            {"event": "join-campus", "data": {}},
            {"event": "join-campus", "data": {"campusId": ""}},
            ["join-campus"],
            42,
        ],
    )
    def test_invalid_frames(self, raw) -> None:
        with pytest.raises(ProtocolError):
            parse_frame(raw)


class TestDispatchFrame:
    def test_routes_to_session(self) -> None:
        session = MagicMock()
        dispatch_frame(session, parse_frame({"event": "join-campus", "data": {"campusId": "a"}}))
        dispatch_frame(session, parse_frame({"event": "leave-campus", "data": {"campusId": "b"}}))
        dispatch_frame(session, parse_frame({"event": "get-latest-data", "data": {"campusId": "c"}}))
        session.join.assert_called_once_with("a")
        session.leave.assert_called_once_with("b")
        session.request_snapshot.assert_called_once_with("c")


class TestOutboundFrames:
    def test_energy_data_frame(self, synthesizer) -> None:
        frame = energy_data_frame(synthesizer.synthesize("campus-2"))
        assert frame["event"] == "energy-data"
        assert frame["data"]["campusId"] == "campus-2"

    def test_error_frame(self) -> None:
        assert error_frame("nope") == {"event": "error", "data": {"message": "nope"}}
