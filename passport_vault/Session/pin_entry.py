"""
Shared machinery for keypad PIN entry.

A PinEntryController turns digit and backspace taps into a complete PIN,
hands the PIN to a subclass once the buffer is full, and plays the failure
feedback when the subclass rejects it.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from loguru import logger

DIGITS = "0123456789"


class PinState(Enum):
    ENTERING = "entering"
    VALIDATING = "validating"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class PinSettings:
    """PIN length and entry timings (seconds)."""
    length: int = 4
    validation_delay: float = 0.15
    feedback_window: float = 0.6
    shake_offsets: Tuple[int, ...] = (3, -3, 2, -2, 1, 0)
    shake_step: float = 0.05


class PinFeedback(Protocol):
    """Failure cues shown while a rejected PIN is on screen."""

    def haptic(self) -> None:
        ...

    def shake(self, offsets: Tuple[int, ...], step: float) -> None:
        ...


class PinBuffer:
    """Digits typed so far. Never longer than ``max_length``."""

    def __init__(self, max_length: int = 4):
        if max_length < 1:
            raise ValueError("max_length must be positive")
        self.max_length = max_length
        self._digits: List[str] = []

    @staticmethod
    def is_digit(value: object) -> bool:
        return isinstance(value, str) and len(value) == 1 and value in DIGITS

    def append(self, digit: str) -> bool:
        """Add a digit. Returns False if the buffer was already full."""
        if self.is_full:
            return False
        self._digits.append(digit)
        return True

    def pop(self) -> bool:
        """Remove the last digit. Returns False if the buffer was empty."""
        if not self._digits:
            return False
        self._digits.pop()
        return True

    def clear(self) -> None:
        self._digits.clear()

    @property
    def is_full(self) -> bool:
        return len(self._digits) >= self.max_length

    @property
    def value(self) -> str:
        return "".join(self._digits)

    def __len__(self) -> int:
        return len(self._digits)

    def __repr__(self) -> str:
        # Never show the digits themselves.
        return f"PinBuffer(length={len(self)}, max_length={self.max_length})"


class PinEntryController:
    """
    Base keypad state machine.

    ENTERING -> VALIDATING when the last digit lands; the subclass hook
    ``_on_complete`` decides what happens next. Input is ignored in every
    state except ENTERING, so the buffer can't change under a pending
    validation.

    Subclasses implement ``async _on_complete(pin)`` and call ``_accept`` or
    ``_reject``.
    """

    def __init__(
        self,
        settings: Optional[PinSettings] = None,
        feedback: Optional[PinFeedback] = None,
        on_change: Optional[Callable[["PinEntryController"], None]] = None,
    ):
        self.settings = settings or PinSettings()
        self.feedback = feedback
        self.on_change = on_change
        self.buffer = PinBuffer(self.settings.length)
        self.state = PinState.ENTERING
        self._task: Optional[asyncio.Task] = None

    @property
    def pin_length(self) -> int:
        return len(self.buffer)

    @property
    def accepts_input(self) -> bool:
        return self.state is PinState.ENTERING

    def on_digit(self, digit: str) -> None:
        """Handle a digit tap. Non-digits, a full buffer and taps outside ENTERING are ignored."""
        if not self.accepts_input:
            logger.debug(f"Ignoring digit while {self.state.value}")
            return
        if not PinBuffer.is_digit(digit):
            logger.debug(f"Ignoring non-digit keypad input: {digit!r}")
            return
        if not self.buffer.append(digit):
            return

        if self.buffer.is_full:
            self.state = PinState.VALIDATING
            self._task = asyncio.get_running_loop().create_task(self._validate_after_delay())
        self._notify()

    def on_backspace(self) -> None:
        """Remove the last digit. No-op on an empty buffer or outside ENTERING."""
        if not self.accepts_input:
            logger.debug(f"Ignoring backspace while {self.state.value}")
            return
        if self.buffer.pop():
            self._notify()

    async def join(self) -> None:
        """Wait for a scheduled validation and any feedback window to finish."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    def cancel(self) -> None:
        """Abandon pending work, e.g. when the screen goes away."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _validate_after_delay(self) -> None:
        # Let the last dot render before any feedback.
        await asyncio.sleep(self.settings.validation_delay)
        pin = self.buffer.value
        await self._on_complete(pin)

    async def _on_complete(self, pin: str) -> None:
        raise NotImplementedError

    def _accept(self) -> None:
        self.buffer.clear()
        self.state = PinState.ACCEPTED
        self._notify()

    async def _reject(self) -> None:
        """Show failure feedback, wait out the feedback window, then start over."""
        self.state = PinState.REJECTED
        self._notify()
        self._play_feedback()
        await asyncio.sleep(self.settings.feedback_window)
        self.buffer.clear()
        self.state = PinState.ENTERING
        self._notify()

    def _restart_entry(self) -> None:
        """Back to an empty ENTERING buffer without feedback."""
        self.buffer.clear()
        self.state = PinState.ENTERING
        self._notify()

    def _play_feedback(self) -> None:
        if self.feedback is None:
            return
        try:
            self.feedback.haptic()
            self.feedback.shake(self.settings.shake_offsets, self.settings.shake_step)
        except Exception as e:
            logger.warning(f"Failure feedback could not be shown: {e}")

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
