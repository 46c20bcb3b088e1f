"""Tests for subscription broker membership and delivery."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from campus_telemetry.broker.broker import SubscriptionBroker
from campus_telemetry.broker.messages import Connect, Disconnect, Join, Leave, SnapshotRequest
from campus_telemetry.errors import SynthesisError


class TestJoin:
    async def test_join_records_membership(self, broker) -> None:
        await broker.join("obs-1", "siteA")
        assert broker.subscribers("siteA") == {"obs-1"}
        assert broker.sites_for("obs-1") == {"siteA"}

    async def test_join_pushes_snapshot_to_joiner_only(self, broker, transport) -> None:
        await broker.join("obs-other", "siteA")
        transport.clear()

        await broker.join("obs-1", "siteA")

        assert [o for o, _ in transport.delivered] == ["obs-1"]
        assert transport.received_by("obs-1")[0].campus_id == "siteA"

    async def test_join_twice_is_idempotent(self, broker) -> None:
        await broker.join("obs-1", "siteA")
        await broker.join("obs-1", "siteA")
        assert len(broker.subscribers("siteA")) == 1
        assert broker.sites_for("obs-1") == {"siteA"}

    async def test_join_unknown_site_is_accepted(self, broker, transport) -> None:
        await broker.join("obs-1", "not-in-catalog")
        assert broker.subscribers("not-in-catalog") == {"obs-1"}
        assert transport.received_by("obs-1")[0].campus_id == "not-in-catalog"

    async def test_join_survives_snapshot_synthesis_failure(self, transport, faults) -> None:
        synth = MagicMock()
        synth.synthesize.side_effect = SynthesisError("no entropy")
        broker = SubscriptionBroker(synth, transport.deliver, faults)

        await broker.join("obs-1", "siteA")

        assert broker.subscribers("siteA") == {"obs-1"}
        assert transport.delivered == []
        assert faults.get_synthesis_record("siteA").total_failures == 1


class TestLeave:
    async def test_leave_removes_membership(self, broker) -> None:
        await broker.join("obs-1", "siteA")
        await broker.join("obs-1", "siteB")
        await broker.leave("obs-1", "siteA")
        assert broker.subscribers("siteA") == frozenset()
        assert broker.sites_for("obs-1") == {"siteB"}

    async def test_leave_not_joined_is_noop(self, broker) -> None:
        await broker.join("obs-1", "siteA")
        await broker.leave("obs-1", "siteB")
        await broker.leave("ghost", "siteA")
        assert broker.subscribers("siteA") == {"obs-1"}

    async def test_empty_sites_are_pruned(self, broker) -> None:
        await broker.join("obs-1", "siteA")
        await broker.leave("obs-1", "siteA")
        assert broker.site_ids() == []


class TestDisconnect:
    async def test_disconnect_removes_from_all_sites(self, broker) -> None:
        for site in ("siteA", "siteB", "siteC"):
            await broker.join("obs-1", site)
        await broker.join("obs-2", "siteA")

        await broker.disconnect("obs-1")

        for site in ("siteA", "siteB", "siteC"):
            assert "obs-1" not in broker.subscribers(site)
        assert broker.subscribers("siteA") == {"obs-2"}
        assert broker.sites_for("obs-1") == frozenset()

    async def test_disconnect_runs_callbacks(self, broker) -> None:
        released: list[str] = []
        broker.add_disconnect_callback(released.append)
        await broker.connect("obs-1")
        await broker.disconnect("obs-1")
        assert released == ["obs-1"]

    async def test_failing_callback_does_not_block_others(self, broker) -> None:
        released: list[str] = []
        broker.add_disconnect_callback(MagicMock(side_effect=RuntimeError("boom")))
        broker.add_disconnect_callback(released.append)
        await broker.disconnect("obs-1")
        assert released == ["obs-1"]

    async def test_connect_tracks_observer(self, broker) -> None:
        await broker.connect("obs-1")
        assert broker.observer_count == 1
        await broker.disconnect("obs-1")
        assert broker.observer_count == 0


class TestMulticast:
    async def test_delivers_once_to_each_subscriber(self, broker, transport, synthesizer) -> None:
        for obs in ("obs-1", "obs-2", "obs-3"):
            await broker.join(obs, "siteA")
        transport.clear()

        sample = synthesizer.synthesize("siteA")
        delivered = await broker.multicast("siteA", sample)

        assert delivered == 3
        assert sorted(o for o, _ in transport.delivered) == ["obs-1", "obs-2", "obs-3"]
        assert all(s is sample for _, s in transport.delivered)

    async def test_no_cross_site_leakage(self, broker, transport, synthesizer) -> None:
        await broker.join("obs-a", "siteA")
        await broker.join("obs-b", "siteB")
        transport.clear()

        await broker.multicast("siteA", synthesizer.synthesize("siteA"))
        await broker.multicast("siteB", synthesizer.synthesize("siteB"))

        assert [s.campus_id for s in transport.received_by("obs-a")] == ["siteA"]
        assert [s.campus_id for s in transport.received_by("obs-b")] == ["siteB"]

    async def test_multicast_to_empty_site(self, broker, transport, synthesizer) -> None:
        assert await broker.multicast("siteA", synthesizer.synthesize("siteA")) == 0
        assert transport.delivered == []

    async def test_delivery_fault_is_isolated(self, broker, transport, faults, synthesizer) -> None:
        for obs in ("obs-1", "obs-2", "obs-3"):
            await broker.join(obs, "siteA")
        transport.clear()
        transport.failing.add("obs-2")

        delivered = await broker.multicast("siteA", synthesizer.synthesize("siteA"))

        assert delivered == 2
        assert sorted(o for o, _ in transport.delivered) == ["obs-1", "obs-3"]
        assert faults.get_delivery_record("obs-2").total_failures == 1

    async def test_unexpected_delivery_error_is_isolated(self, synthesizer, faults) -> None:
        calls: list[str] = []

        def deliver(observer_id, sample):
            calls.append(observer_id)
            if observer_id == "obs-1":
                raise RuntimeError("transport bug")

        broker = SubscriptionBroker(synthesizer, deliver, faults)
        await broker.join("obs-1", "siteA")
        await broker.join("obs-2", "siteA")
        calls.clear()

        delivered = await broker.multicast("siteA", synthesizer.synthesize("siteA"))

        assert delivered == 1
        assert sorted(calls) == ["obs-1", "obs-2"]
        assert faults.get_delivery_record("obs-1").total_failures == 2

    async def test_join_during_multicast_does_not_duplicate(self, synthesizer, faults) -> None:
        delivered: list[str] = []

        def deliver(observer_id, sample):
            delivered.append(observer_id)

        broker = SubscriptionBroker(synthesizer, deliver, faults)
        await broker.join("obs-1", "siteA")
        await broker.join("obs-2", "siteA")
        delivered.clear()

        sample = synthesizer.synthesize("siteA")
        await asyncio.gather(
            broker.multicast("siteA", sample),
            broker.join("obs-3", "siteA"),
            broker.leave("obs-2", "siteA"),
        )

        # obs-1 was present throughout; obs-3 gets at least its join snapshot
        assert delivered.count("obs-1") == 1
        assert delivered.count("obs-2") <= 1
        assert 1 <= delivered.count("obs-3") <= 2


class TestSnapshot:
    async def test_snapshot_without_joining(self, broker, transport) -> None:
        assert "obs-y" not in broker.subscribers("siteA")

        await broker.request_snapshot("obs-y", "siteA")

        received = transport.received_by("obs-y")
        assert len(received) == 1
        assert received[0].campus_id == "siteA"
        assert "obs-y" not in broker.subscribers("siteA")


class TestMessageChannel:
    async def test_messages_processed_in_order(self, broker, transport) -> None:
        runner = asyncio.create_task(broker.run())
        try:
            broker.submit(Connect("obs-1"))
            broker.submit(Join("obs-1", "siteA"))
            broker.submit(Join("obs-1", "siteB"))
            broker.submit(Leave("obs-1", "siteB"))
            broker.submit(SnapshotRequest("obs-1", "siteC"))
            await broker.drain()

            assert broker.sites_for("obs-1") == {"siteA"}
            assert [s.campus_id for s in transport.received_by("obs-1")] == [
                "siteA", "siteB", "siteC",
            ]

            broker.submit(Disconnect("obs-1"))
            await broker.drain()
            assert broker.subscribers("siteA") == frozenset()
            assert broker.pending_messages == 0
        finally:
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)

    async def test_join_before_disconnect_cannot_leak(self, broker) -> None:
        runner = asyncio.create_task(broker.run())
        try:
            broker.submit(Join("obs-1", "siteA"))
            broker.submit(Disconnect("obs-1"))
            await broker.drain()
            assert broker.subscribers("siteA") == frozenset()
        finally:
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)

    async def test_unknown_message_does_not_stop_consumer(self, broker) -> None:
        runner = asyncio.create_task(broker.run())
        try:
            broker.submit("garbage")  # type: ignore[arg-type]
            broker.submit(Join("obs-1", "siteA"))
            await broker.drain()
            assert broker.subscribers("siteA") == {"obs-1"}
        finally:
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)

    async def test_handle_rejects_unknown_type(self, broker) -> None:
        with pytest.raises(TypeError):
            await broker.handle(object())  # type: ignore[arg-type]
