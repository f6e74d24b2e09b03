"""
Navigation state management.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NavigationState:
    """Tracks where the screen router currently is and how it got there."""

    current_screen: Optional[str] = None
    previous_screen: Optional[str] = None

    history: List[str] = field(default_factory=list)
    max_history: int = 50

    def record_push(self, screen: str) -> None:
        """Record a destination pushed on top of the current one."""
        self.previous_screen = self.current_screen
        self.current_screen = screen
        self._append_history(screen)

    def record_replace(self, screen: str, unwound: int = 0) -> None:
        """Record a destination that replaced the current one.

        The replaced entry and the ``unwound`` destinations that were pushed
        above it are dropped from the history.
        """
        del self.history[max(len(self.history) - unwound - 1, 0):]
        self.previous_screen = self.current_screen
        self.current_screen = screen
        self._append_history(screen)

    def _append_history(self, screen: str) -> None:
        self.history.append(screen)
        if len(self.history) > self.max_history:
            self.history.pop(0)

