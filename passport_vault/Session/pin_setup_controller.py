"""
First-run PIN creation: choose a PIN, then type it again to confirm.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional

from loguru import logger

from ..navigation.navigation_serializer import NavigationSerializer, TransitionMode
from ..navigation.screen_registry import VAULT
from .pin_entry import PinEntryController, PinFeedback, PinSettings


class SetupStep(Enum):
    CHOOSE = "choose"
    CONFIRM = "confirm"


class PinSetupController(PinEntryController):
    """
    Two-step setup flow.

    A full buffer in CHOOSE moves to CONFIRM with an empty buffer. A full
    buffer in CONFIRM either completes setup (matching PIN) or plays failure
    feedback and starts over from CHOOSE. A failure from ``complete_setup``
    is handled like a mismatch.
    """

    def __init__(
        self,
        complete_setup: Callable[[str], Awaitable[None]],
        navigator: NavigationSerializer,
        *,
        settings: Optional[PinSettings] = None,
        feedback: Optional[PinFeedback] = None,
        on_change: Optional[Callable[[PinEntryController], None]] = None,
        destination: str = VAULT,
    ):
        super().__init__(settings=settings, feedback=feedback, on_change=on_change)
        self._complete_setup = complete_setup
        self.navigator = navigator
        self.destination = destination
        self.step = SetupStep.CHOOSE
        self.mismatch_count = 0
        self.last_error: Optional[str] = None
        self._chosen: Optional[str] = None

    async def _on_complete(self, pin: str) -> None:
        if self.step is SetupStep.CHOOSE:
            self._chosen = pin
            self.step = SetupStep.CONFIRM
            self.last_error = None
            logger.debug("PIN chosen, waiting for confirmation")
            self._restart_entry()
            return

        chosen, self._chosen = self._chosen, None
        if pin != chosen:
            self.mismatch_count += 1
            await self._start_over("PINs did not match")
            return

        try:
            await self._complete_setup(pin)
        except Exception as e:
            logger.error(f"Could not save the new PIN: {e}")
            await self._start_over("PIN could not be saved")
            return

        logger.info("PIN setup complete")
        self.last_error = None
        self._accept()
        self.navigator.enqueue(self.destination, TransitionMode.REPLACE)

    async def _start_over(self, reason: str) -> None:
        logger.info(f"PIN setup restarted: {reason}")
        self.last_error = reason
        self.step = SetupStep.CHOOSE
        await self._reject()
