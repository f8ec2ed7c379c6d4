"""Tests for the minimum-interval limiter."""

import pytest

from transproxy.services.throttle import MinIntervalLimiter


class FakeClock:
    """Manual clock; sleeping advances it."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestMinIntervalLimiter:

    @pytest.mark.asyncio
    async def test_first_call_is_immediate(self, clock):
        limiter = MinIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)
        await limiter.acquire()

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_back_to_back_calls_wait_full_interval(self, clock):
        limiter = MinIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)
        await limiter.acquire()
        await limiter.acquire()
        await limiter.acquire()

        assert clock.sleeps == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_elapsed_time_is_credited(self, clock):
        limiter = MinIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)
        await limiter.acquire()
        clock.now += 0.75
        await limiter.acquire()

        assert clock.sleeps == [pytest.approx(0.25)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_passed(self, clock):
        limiter = MinIntervalLimiter(0.5, clock=clock, sleep=clock.sleep)
        async with limiter:
            pass
        clock.now += 2
        async with limiter:
            pass

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_reset(self, clock):
        limiter = MinIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)
        await limiter.acquire()
        limiter.reset()
        await limiter.acquire()

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_zero_interval_never_waits(self, clock):
        limiter = MinIntervalLimiter(0, clock=clock, sleep=clock.sleep)
        for _ in range(3):
            await limiter.acquire()

        assert clock.sleeps == []

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            MinIntervalLimiter(-1)
