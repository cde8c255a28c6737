"""Post-action wait strategies for automation sequences.

The server gives no "page ready" signal, so the default strategy sleeps for a
fixed time after each action. Swap in another :class:`WaitStrategy` to use a
real readiness check.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Protocol

DEFAULT_DELAYS: dict[str, float] = {
    "navigate": 2.0,
    "wait": 2.0,
    "click": 1.0,
    "fill": 0.0,
}


class WaitStrategy(Protocol):
    async def after(self, action: str) -> None:
        """Called once after each performed step."""
        ...


class FixedDelayWait:
    """Sleep a fixed number of seconds per action type.

    Usage:
        wait = FixedDelayWait({"navigate": 5.0})
        await run_automation_sequence(client, steps, wait=wait)
    """

    def __init__(
        self,
        delays: dict[str, float] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delays = {**DEFAULT_DELAYS, **(delays or {})}
        self._sleep = sleep

    async def after(self, action: str) -> None:
        seconds = self.delays.get(action, 0.0)
        if seconds > 0:
            await self._sleep(seconds)


class NoWait:
    """Never pause."""

    async def after(self, action: str) -> None:
        return None
