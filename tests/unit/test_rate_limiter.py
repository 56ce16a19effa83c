from __future__ import annotations

import asyncio

import pytest

from searchgate.admission import Idle, Limited, Admitted, Rejected, RateLimiter


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _recording_lookup(calls: list[str]):
    async def lookup(query: str) -> list[str]:
        calls.append(query)
        return [query.upper()]

    return lookup


@pytest.mark.asyncio
async def test_rate_limiter_admits_then_rejects_then_recovers() -> None:
    clock = _Clock()
    calls: list[str] = []
    limiter = RateLimiter(2, 15000, _recording_lookup(calls), now_fn=clock)

    outcomes = []
    for t in (0, 1, 2):
        clock.now = t
        outcomes.append(await limiter.invoke("ali"))

    assert [o.kind for o in outcomes] == ["admitted", "admitted", "rejected"]
    assert calls == ["ali", "ali"]

    clock.now = 15001
    result = await limiter.invoke("bob")
    assert isinstance(result, Admitted)
    assert result.value == ["BOB"]


@pytest.mark.asyncio
async def test_rejection_skips_lookup_and_records_nothing() -> None:
    clock = _Clock()
    calls: list[str] = []
    limiter = RateLimiter(1, 1000, _recording_lookup(calls), now_fn=clock)

    await limiter.invoke("a")
    clock.now = 10
    result = await limiter.invoke("b")

    assert result == Rejected()
    assert calls == ["a"]
    assert limiter.in_window() == 1


@pytest.mark.asyncio
async def test_window_boundary_is_strictly_expired() -> None:
    clock = _Clock()
    limiter = RateLimiter(1, 1000, _recording_lookup([]), now_fn=clock)

    await limiter.invoke("a")
    clock.now = 999
    assert isinstance(await limiter.invoke("b"), Rejected)
    clock.now = 1000
    assert isinstance(await limiter.invoke("c"), Admitted)


@pytest.mark.asyncio
async def test_admitted_value_is_passed_through_unchanged() -> None:
    payload = [{"id": 1}]

    async def lookup(_query: str) -> list[dict[str, int]]:
        return payload

    limiter = RateLimiter(1, 1000, lookup, now_fn=_Clock())
    result = await limiter.invoke("x")

    assert isinstance(result, Admitted)
    assert result.kind == "admitted"
    assert result.value is payload


@pytest.mark.asyncio
async def test_lookup_failure_propagates_and_counts_toward_window() -> None:
    async def lookup(_query: str) -> list[str]:
        raise ConnectionError("backend down")

    limiter = RateLimiter(2, 1000, lookup, now_fn=_Clock())

    with pytest.raises(ConnectionError):
        await limiter.invoke("x")
    assert limiter.in_window() == 1


@pytest.mark.asyncio
async def test_lookup_failure_refund() -> None:
    async def lookup(_query: str) -> list[str]:
        raise ConnectionError("backend down")

    limiter = RateLimiter(1, 1000, lookup, now_fn=_Clock(), refund_on_failure=True)

    for _ in range(3):
        with pytest.raises(ConnectionError):
            await limiter.invoke("x")
    assert limiter.in_window() == 0


@pytest.mark.asyncio
async def test_overlapping_calls_each_check_the_window() -> None:
    release = asyncio.Event()
    calls: list[str] = []

    async def slow_lookup(query: str) -> list[str]:
        calls.append(query)
        await release.wait()
        return [query]

    limiter = RateLimiter(2, 15000, slow_lookup, now_fn=_Clock())
    tasks = [asyncio.create_task(limiter.invoke(q)) for q in ("a", "b", "c")]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks)

    assert [r.kind for r in results] == ["admitted", "admitted", "rejected"]
    assert calls == ["a", "b"]


@pytest.mark.asyncio
async def test_error_state_counts_down_and_clears() -> None:
    clock = _Clock()
    limiter = RateLimiter(2, 15000, _recording_lookup([]), now_fn=clock)
    assert limiter.error_state() == Idle()

    await limiter.invoke("a")
    assert limiter.error_state() == Idle()
    clock.now = 1
    await limiter.invoke("b")

    remaining = []
    for t in (1000, 1001, 5000, 14000, 14999):
        clock.now = t
        state = limiter.error_state()
        assert isinstance(state, Limited)
        remaining.append(state.remaining_seconds)

    assert remaining == [14, 14, 10, 1, 1]
    assert remaining == sorted(remaining, reverse=True)

    clock.now = 15000
    assert limiter.error_state() == Idle()


@pytest.mark.asyncio
async def test_error_state_is_a_pure_read() -> None:
    clock = _Clock()
    limiter = RateLimiter(2, 15000, _recording_lookup([]), now_fn=clock)
    await limiter.invoke("a")
    await limiter.invoke("b")

    clock.now = 3000
    assert limiter.error_state() == limiter.error_state() == Limited(remaining_seconds=12)

    clock.now = 20000
    assert limiter.error_state() == Idle()
    assert limiter.in_window() == 2


@pytest.mark.parametrize(("max_requests", "window_ms"), [(0, 1000), (-1, 1000), (1, 0), (1, -5)])
def test_rate_limiter_rejects_invalid_config(max_requests: int, window_ms: int) -> None:
    with pytest.raises(ValueError):
        RateLimiter(max_requests, window_ms, _recording_lookup([]))
