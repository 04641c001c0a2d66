"""
Expiry scheduler.
One-shot deferred deletions on the event loop, keyed by document name.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Set

logger = logging.getLogger(__name__)


class ExpiryScheduler:
    """
    Arms one timer per document and runs the expiry callback when it fires.

    Timers are independent and unordered. Each fired callback runs as its
    own task so a slow deletion never delays the others.
    """

    def __init__(self, on_expire: Callable[[str], Awaitable[None]]):
        self._on_expire = on_expire
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._tasks: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, name: str) -> bool:
        return name in self._timers

    def schedule(self, name: str, delay: float) -> None:
        """Arm the expiry of name in delay seconds. Must run on the event loop."""
        loop = asyncio.get_running_loop()
        previous = self._timers.pop(name, None)
        if previous is not None:
            logger.warning("Re-arming expiry for %s", name)
            previous.cancel()
        self._timers[name] = loop.call_later(max(delay, 0.0), self._fire, name)

    def cancel(self, name: str) -> bool:
        """Disarm the timer of name. Returns False if none was pending."""
        timer = self._timers.pop(name, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self, name: str) -> None:
        self._timers.pop(name, None)
        task = asyncio.get_running_loop().create_task(self._run(name))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, name: str) -> None:
        try:
            await self._on_expire(name)
        except Exception:
            logger.exception("Expiry of %s failed", name)

    async def shutdown(self) -> None:
        """Disarm every pending timer and wait for running expiries."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
