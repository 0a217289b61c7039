"""Interval throttle for sequential crawl requests."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable


class Throttle:
    """Enforce minimum intervals between asset downloads and page fetches.

    Each kind of request keeps its own clock: a call waits only for the part
    of the interval that has not already elapsed since the previous call of
    the same kind, so the first call never waits.

    Args:
        asset_interval: Minimum seconds between two asset downloads
        page_interval: Minimum seconds between two page fetches
        sleep: Awaitable sleep function (injectable for tests)
        clock: Monotonic clock function (injectable for tests)
    """

    def __init__(
        self,
        asset_interval: float = 0.2,
        page_interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if asset_interval < 0 or page_interval < 0:
            raise ValueError("throttle intervals must not be negative")
        self.asset_interval = asset_interval
        self.page_interval = page_interval
        self._sleep = sleep
        self._clock = clock
        self._last_asset: float | None = None
        self._last_page: float | None = None

    async def before_asset(self) -> None:
        """Wait until an asset download is allowed."""
        self._last_asset = await self._wait(self._last_asset, self.asset_interval)

    async def before_page(self) -> None:
        """Wait until a page fetch is allowed."""
        self._last_page = await self._wait(self._last_page, self.page_interval)

    async def _wait(self, last: float | None, interval: float) -> float:
        if last is not None and interval > 0:
            remaining = interval - (self._clock() - last)
            if remaining > 0:
                await self._sleep(remaining)
        return self._clock()
