"""Unit tests for the interval throttle."""

import pytest

from sitesnap.services.throttle import Throttle


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.mark.asyncio
async def test_first_call_never_waits(clock: FakeClock) -> None:
    throttle = Throttle(asset_interval=0.2, page_interval=1.0, sleep=clock.sleep, clock=clock)

    await throttle.before_page()
    await throttle.before_asset()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_waits_remaining_interval(clock: FakeClock) -> None:
    throttle = Throttle(asset_interval=0.2, page_interval=1.0, sleep=clock.sleep, clock=clock)

    await throttle.before_page()
    clock.now += 0.25
    await throttle.before_page()

    assert clock.sleeps == [pytest.approx(0.75)]


@pytest.mark.asyncio
async def test_no_wait_when_interval_already_elapsed(clock: FakeClock) -> None:
    throttle = Throttle(asset_interval=0.2, page_interval=1.0, sleep=clock.sleep, clock=clock)

    await throttle.before_asset()
    clock.now += 5
    await throttle.before_asset()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_asset_and_page_clocks_are_independent(clock: FakeClock) -> None:
    throttle = Throttle(asset_interval=0.2, page_interval=1.0, sleep=clock.sleep, clock=clock)

    await throttle.before_page()
    await throttle.before_asset()
    await throttle.before_asset()

    assert clock.sleeps == [pytest.approx(0.2)]


@pytest.mark.asyncio
async def test_zero_intervals_disable_waiting(clock: FakeClock) -> None:
    throttle = Throttle(asset_interval=0, page_interval=0, sleep=clock.sleep, clock=clock)

    for _ in range(3):
        await throttle.before_page()
        await throttle.before_asset()

    assert clock.sleeps == []


def test_negative_interval_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        Throttle(asset_interval=-1)
