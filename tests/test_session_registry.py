import asyncio
from datetime import timedelta

import pytest
from fastapi import HTTPException

from prepdesk.services.session_service import SessionRegistry, serialize_session
from prepdesk.session import SessionContext, TestSession
from prepdesk.session.timer import SessionTimer
from prepdesk.utils import utc_now


def make_session(gateway) -> TestSession:
    return asyncio.run(TestSession.open(gateway, "t1", SessionContext(user_id="u")))


def test_add_get_discard(fake_gateway) -> None:
    registry = SessionRegistry()
    session = make_session(fake_gateway)
    session_id = registry.add(session)

    assert registry.get(session_id) is session
    assert registry.discard(session_id) is True
    assert registry.discard(session_id) is False
    with pytest.raises(HTTPException):
        registry.get(session_id)


def test_purge_idle_sessions(fake_gateway) -> None:
    registry = SessionRegistry()
    stale_id = registry.add(make_session(fake_gateway))
    fresh_id = registry.add(make_session(fake_gateway))
    registry.get(fresh_id)

    later = utc_now() + timedelta(minutes=30)
    registry._entries[fresh_id].last_seen = later

    assert registry.purge_idle(timedelta(minutes=10), now=later) == 1
    assert len(registry) == 1
    registry.get(fresh_id)
    with pytest.raises(HTTPException):
        registry.get(stale_id)


def test_discard_stops_timer(fake_gateway) -> None:
    async def scenario() -> bool:
        registry = SessionRegistry()
        session = await TestSession.open(
            fake_gateway, "t1", SessionContext(user_id="u"), timer=SessionTimer(interval=0.01)
        )
        session.start()
        registry.add(session)
        registry.close_all()
        return session.timer.running

    assert asyncio.run(scenario()) is False


def test_serialize_session_hides_answers_in_test_mode(fake_gateway) -> None:
    session = make_session(fake_gateway)
    view = serialize_session("s1", session)
    assert view["currentQuestion"]["correctAnswer"] is None
    assert view["currentQuestion"]["solution"] is None
    assert view["elapsed"] == "00h:00m:00s"
    assert view["subjects"][0]["questionIds"] == ["Q1", "Q2"]
