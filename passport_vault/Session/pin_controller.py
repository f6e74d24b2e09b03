"""
PIN re-authentication for a returning user.
"""

from typing import Awaitable, Callable, Optional

from loguru import logger

from ..navigation.navigation_serializer import NavigationSerializer, TransitionMode
from ..navigation.screen_registry import VAULT
from ..state.app_state import AuthAttemptState
from .pin_entry import PinEntryController, PinFeedback, PinSettings, PinState

__all__ = ["PinAuthenticationController", "PinSettings", "PinState"]


class PinAuthenticationController(PinEntryController):
    """
    Checks a typed PIN against the session and routes to the vault on success.

    ``authenticate`` must always settle. A False result or an exception is a
    rejection: the failed-attempt counter goes up by one, failure feedback
    plays, and the buffer is cleared after the feedback window. The counter is
    only displayed; there is no attempt cap or cooldown.

    ACCEPTED is terminal for an instance.
    """

    def __init__(
        self,
        authenticate: Callable[[str], Awaitable[bool]],
        navigator: NavigationSerializer,
        *,
        settings: Optional[PinSettings] = None,
        feedback: Optional[PinFeedback] = None,
        on_change: Optional[Callable[[PinEntryController], None]] = None,
        on_accepted: Optional[Callable[[], None]] = None,
        destination: str = VAULT,
    ):
        super().__init__(settings=settings, feedback=feedback, on_change=on_change)
        self._authenticate = authenticate
        self.navigator = navigator
        self.on_accepted = on_accepted
        self.destination = destination
        self.attempts = AuthAttemptState()

    @property
    def failed_attempt_count(self) -> int:
        return self.attempts.failed_attempt_count

    async def _on_complete(self, pin: str) -> None:
        try:
            accepted = await self._authenticate(pin) is True
        except Exception as e:
            logger.warning(f"Authentication check failed, treating as rejection: {type(e).__name__}: {e}")
            accepted = False

        if accepted:
            self.attempts.reset()
            logger.info("PIN accepted")
            self._accept()
            self.navigator.enqueue(self.destination, TransitionMode.REPLACE)
            if self.on_accepted is not None:
                self.on_accepted()
            return

        count = self.attempts.record_failure()
        logger.info(f"PIN rejected ({count} failed attempt{'s' if count != 1 else ''})")
        await self._reject()
