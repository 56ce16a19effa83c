from __future__ import annotations

import pytest

from searchgate.lookup import Directory
from searchgate.state import EnvelopeState
from searchgate.errors import InputTooShortError
from searchgate.admission import Idle, Limited
from searchgate.handlers.websocket.session import SearchSession, check_query_length, error_state_payload

from .fakes import FakeWebSocket, FailingDirectory, make_limits


def _session(ws: FakeWebSocket, directory=None, **limits) -> SearchSession:
    return SearchSession(
        ws,
        EnvelopeState(session_id="s1"),
        directory=directory or Directory(latency_ms=0),
        limits=make_limits(**limits),
    )


def test_check_query_length() -> None:
    check_query_length("ali", 3)
    with pytest.raises(InputTooShortError) as exc:
        check_query_length("al", 3)
    assert exc.value.min_length == 3
    assert exc.value.actual_length == 2
    assert str(exc.value) == "Query must be at least 3 characters long."


def test_error_state_payload() -> None:
    assert error_state_payload(Idle()) == {"state": "none", "remaining_seconds": 0, "message": None}
    assert error_state_payload(Limited(remaining_seconds=3)) == {
        "state": "limited",
        "remaining_seconds": 3,
        "message": "Rate exceeded, please wait 3 seconds.",
    }


@pytest.mark.asyncio
async def test_short_search_is_rejected_before_admission() -> None:
    ws = FakeWebSocket()
    session = _session(ws)

    await session.on_search("al", "r1")
    await session.wait_searches()

    (error,) = ws.of_type("error")
    assert error["payload"]["code"] == "input_too_short"
    assert error["payload"]["message"] == "Query must be at least 3 characters long."
    assert session.limiter.in_window() == 0
    await session.aclose()


@pytest.mark.asyncio
async def test_search_returns_matching_records() -> None:
    ws = FakeWebSocket()
    session = _session(ws)

    await session.on_search("ali", "r1")
    await session.wait_searches()

    (msg,) = ws.of_type("search_results")
    assert msg["request_id"] == "r1"
    assert msg["payload"]["message"] == 'Search result for "ali"'
    assert [r["name"] for r in msg["payload"]["results"]] == ["Alice", "Alina", "Alixa"]
    assert msg["payload"]["results"][0] == {"id": 1, "name": "Alice", "description": "Software Engineer"}
    await session.aclose()


@pytest.mark.asyncio
async def test_search_without_matches_returns_empty_list() -> None:
    ws = FakeWebSocket()
    session = _session(ws)

    await session.on_search("zzz", "r1")
    await session.wait_searches()

    (msg,) = ws.of_type("search_results")
    assert msg["payload"]["results"] == []
    await session.aclose()


@pytest.mark.asyncio
async def test_third_search_in_window_is_rate_limited() -> None:
    ws = FakeWebSocket()
    session = _session(ws)

    for i in range(3):
        await session.on_search("bob", f"r{i}")
    await session.wait_searches()

    assert len(ws.of_type("search_results")) == 2
    (error,) = ws.of_type("error")
    assert error["request_id"] == "r2"
    assert error["payload"]["code"] == "rate_limited"
    assert error["payload"]["details"]["retry_in"] == 15
    assert error["payload"]["message"] == "Rate exceeded, please wait 15 seconds."

    (status,) = ws.of_type("rate_limit_status")
    assert status["payload"]["state"] == "limited"
    await session.aclose()


@pytest.mark.asyncio
async def test_search_lookup_failure_is_reported() -> None:
    ws = FakeWebSocket()
    session = _session(ws, directory=FailingDirectory())

    await session.on_search("bob", "r1")
    await session.wait_searches()

    (error,) = ws.of_type("error")
    assert error["payload"]["code"] == "lookup_failed"
    assert session.limiter.in_window() == 1
    await session.aclose()


@pytest.mark.asyncio
async def test_search_lookup_failure_refund() -> None:
    ws = FakeWebSocket()
    session = _session(ws, directory=FailingDirectory(), search_refund_on_failure=True)

    await session.on_search("bob", "r1")
    await session.wait_searches()

    assert session.limiter.in_window() == 0
    await session.aclose()


@pytest.mark.asyncio
async def test_input_publishes_debounced_suggestions() -> None:
    ws = FakeWebSocket()
    session = _session(ws)

    session.on_input("c", "r1")
    session.on_input("ch", "r2")
    await session.dispatcher.drain()

    (msg,) = ws.of_type("suggestions")
    assert msg["request_id"] == "r2"
    assert msg["payload"]["query"] == "ch"
    assert [r["name"] for r in msg["payload"]["results"]] == ["Charlie", "Charlito"]

    session.on_input("", "r3")
    await session.dispatcher.drain()
    assert ws.of_type("suggestions")[-1]["payload"]["results"] == []
    await session.aclose()


@pytest.mark.asyncio
async def test_autocomplete_failure_is_reported() -> None:
    ws = FakeWebSocket()
    session = _session(ws, directory=FailingDirectory())

    session.on_input("al", "r1")
    await session.dispatcher.drain()

    (error,) = ws.of_type("error")
    assert error["payload"]["details"]["reason_code"] == "autocomplete_failed"
    assert ws.of_type("suggestions") == []
    await session.aclose()


@pytest.mark.asyncio
async def test_aclose_stops_pending_suggestions() -> None:
    ws = FakeWebSocket()
    session = _session(ws, autocomplete_delay_ms=50)

    session.on_input("al", "r1")
    await session.aclose()

    assert ws.of_type("suggestions") == []
