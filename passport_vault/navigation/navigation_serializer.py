"""
Serial navigation queue.

Screens, timers and the bootstrap all request navigation independently. The
serializer makes those requests run one at a time, in the order they were
made, with a short settle delay around each transition so the previous
animation has finished before the next one starts.
"""

import asyncio
import inspect
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Deque, Optional, Protocol, Union

from loguru import logger


class TransitionMode(Enum):
    """How a destination is placed on the screen stack."""
    PUSH = "push"
    REPLACE = "replace"


@dataclass(frozen=True)
class NavigationIntent:
    """A single queued navigation request."""
    destination: str
    mode: TransitionMode = TransitionMode.REPLACE


@dataclass(frozen=True)
class NavigationTimings:
    """Settle delays (seconds) before and after each executed intent."""
    settle_before: float = 0.05
    settle_after: float = 0.1


class ViewRouter(Protocol):
    """The one effect the serializer performs."""

    def navigate_to(self, destination: str, mode: TransitionMode) -> Union[None, Awaitable[Any]]:
        ...


class NavigationSerializer:
    """
    Runs navigation intents strictly in insertion order, never two at once.

    One instance lives for the whole process. It is created at app start and
    injected into everything that navigates.

    ``enqueue`` is fire-and-forget and must be called with a running event
    loop; draining happens in a single background task.
    """

    def __init__(self, router: ViewRouter, timings: Optional[NavigationTimings] = None):
        self.router = router
        self.timings = timings or NavigationTimings()
        self._queue: Deque[NavigationIntent] = deque()
        self._in_flight = False
        self._drain_task: Optional[asyncio.Task] = None

    def enqueue(self, destination: str, mode: TransitionMode = TransitionMode.REPLACE) -> None:
        """
        Append a navigation intent and start draining if idle.

        Args:
            destination: Name of the destination to show. Must be non-empty.
            mode: PUSH onto the stack or REPLACE the current screen.
        """
        if not isinstance(destination, str) or not destination.strip():
            logger.warning(f"Ignoring navigation request with invalid destination: {destination!r}")
            return
        if not isinstance(mode, TransitionMode):
            logger.warning(f"Ignoring navigation to '{destination}' with invalid mode: {mode!r}")
            return

        self._queue.append(NavigationIntent(destination.strip(), mode))
        logger.debug(f"Queued navigation to '{destination}' ({mode.value}), {len(self._queue)} pending")
        self._ensure_draining()

    def clear(self) -> None:
        """
        Drop every intent that has not started yet.

        An intent that is already executing runs to completion.
        """
        if self._queue:
            logger.debug(f"Clearing {len(self._queue)} pending navigation intent(s)")
        self._queue.clear()
        self._in_flight = False

    def is_busy(self) -> bool:
        """True while an intent is executing or waiting in the queue."""
        return self._in_flight or bool(self._queue)

    def pending(self) -> int:
        """Number of intents waiting to start."""
        return len(self._queue)

    async def join(self) -> None:
        """Wait until the queue is fully drained."""
        while self._drain_task is not None and not self._drain_task.done():
            await asyncio.shield(self._drain_task)

    def _ensure_draining(self) -> None:
        if self._drain_task is not None and not self._drain_task.done():
            return
        self._drain_task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._queue:
            self._in_flight = True
            intent = self._queue.popleft()
            try:
                await asyncio.sleep(self.timings.settle_before)
                await self._execute(intent)
                await asyncio.sleep(self.timings.settle_after)
            finally:
                self._in_flight = False

    async def _execute(self, intent: NavigationIntent) -> None:
        logger.debug(f"Executing navigation to '{intent.destination}' ({intent.mode.value})")
        try:
            result = self.router.navigate_to(intent.destination, intent.mode)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            # A failed transition is dropped, never retried; the queue keeps moving.
            logger.error(f"Navigation to '{intent.destination}' failed: {e}")
