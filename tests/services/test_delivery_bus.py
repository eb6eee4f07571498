# tests/services/test_delivery_bus.py
"""Tests for the live-session registry and broadcast."""

import pytest

from chatline.services.delivery import EVENT_MESSAGE_APPENDED, DeliveryBus
from tests.conftest import BrokenSession, RecordingSession


@pytest.mark.asyncio
async def test_broadcast_reaches_every_registered_session() -> None:
    bus = DeliveryBus()
    first, second = RecordingSession(), RecordingSession()
    bus.register(first)
    bus.register(second)

    delivered = await bus.broadcast(EVENT_MESSAGE_APPENDED, {"n": 1})

    assert delivered == 2
    expected = {"event": EVENT_MESSAGE_APPENDED, "data": {"n": 1}}
    assert first.sent == [expected]
    assert second.sent == [expected]


@pytest.mark.asyncio
async def test_broadcast_without_sessions_is_a_noop() -> None:
    bus = DeliveryBus()
    assert await bus.broadcast("anything", {}) == 0


@pytest.mark.asyncio
async def test_late_subscriber_gets_no_replay() -> None:
    bus = DeliveryBus()
    early = bus.subscribe(RecordingSession())
    await bus.broadcast("first", {"n": 1})

    late = bus.subscribe(RecordingSession())
    await bus.broadcast("second", {"n": 2})

    assert [env["event"] for env in early.sent] == ["first", "second"]
    assert [env["event"] for env in late.sent] == ["second"]


@pytest.mark.asyncio
async def test_failed_sessions_are_dropped() -> None:
    bus = DeliveryBus()
    healthy = RecordingSession()
    broken = BrokenSession()
    bus.register(healthy)
    bus.register(broken)

    delivered = await bus.broadcast("evt", {})

    assert delivered == 1
    assert broken not in bus
    assert healthy in bus
    assert len(bus) == 1


@pytest.mark.asyncio
async def test_unsubscribed_session_receives_nothing() -> None:
    bus = DeliveryBus()
    session = bus.subscribe(RecordingSession())
    bus.unsubscribe(session)
    bus.unsubscribe(session)

    await bus.broadcast("evt", {})

    assert session.sent == []
    assert len(bus) == 0


def test_register_is_idempotent_and_clear_empties_registry() -> None:
    bus = DeliveryBus()
    session = RecordingSession()
    bus.register(session)
    bus.register(session)
    assert len(bus) == 1

    bus.clear()
    assert len(bus) == 0
