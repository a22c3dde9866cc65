"""Trailing-edge debounce for async callables"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

AsyncCall = Callable[[], Awaitable[None]]


class Debouncer:
    """
    Run the most recently scheduled call once `delay` seconds pass without
    another schedule.

    Scheduling requires a running event loop (RuntimeError otherwise).
    A call that already started is never cancelled by a later schedule.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._task: Optional[asyncio.Task] = None
        self._call: Optional[AsyncCall] = None

    @property
    def pending(self) -> bool:
        return self._call is not None

    def schedule(self, call: AsyncCall) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._call = call
        self._task = loop.create_task(self._run_later())

    async def _run_later(self) -> None:
        await asyncio.sleep(self.delay)
        call, self._call = self._call, None
        self._task = None
        if call is not None:
            await call()

    def cancel(self) -> None:
        """Drop the pending call, if any"""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._call = None

    async def flush(self) -> None:
        """Run the pending call now instead of waiting out the delay"""
        call = self._call
        self.cancel()
        if call is not None:
            await call()
