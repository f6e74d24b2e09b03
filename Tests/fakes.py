"""
Collaborator doubles shared by the test suite.
"""

import asyncio
from typing import List, Optional, Set, Tuple

from passport_vault.navigation.navigation_serializer import TransitionMode


class RecordingRouter:
    """
    View router double that records what ran and when.

    ``hold`` maps destinations to events the router waits on before
    finishing, so a test can keep a transition in flight.
    """

    def __init__(self, failing: Optional[Set[str]] = None):
        self.calls: List[Tuple[str, TransitionMode]] = []
        self.spans: List[Tuple[str, float, float]] = []
        self.failing = failing or set()
        self.hold = {}
        self.active = 0
        self.max_active = 0

    async def navigate_to(self, destination: str, mode: TransitionMode) -> None:
        loop = asyncio.get_running_loop()
        start = loop.time()
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            self.calls.append((destination, mode))
            if destination in self.hold:
                await self.hold[destination].wait()
            else:
                await asyncio.sleep(0.005)
            if destination in self.failing:
                raise RuntimeError(f"cannot show {destination}")
        finally:
            self.active -= 1
            self.spans.append((destination, start, loop.time()))

    @property
    def destinations(self) -> List[str]:
        return [destination for destination, _ in self.calls]
