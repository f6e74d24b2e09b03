"""
Cold-start routing.

Decides, once per process, whether the user lands on onboarding, the PIN
screen or the unlocked vault, and sends exactly one navigation request.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from loguru import logger

from ..navigation.navigation_serializer import NavigationSerializer, TransitionMode
from ..navigation.screen_registry import AUTHENTICATION, ONBOARDING, VAULT


@dataclass(frozen=True)
class BootstrapSettings:
    """Minimum time (seconds) the splash stays up before routing."""
    min_splash: float = 0.0


class BootstrapResolver:
    """
    One-shot router for the start of the process.

    1. ``is_setup_complete()`` False, or raising: onboarding.
    2. Set up but not authenticated: authentication.
    3. Otherwise: vault.

    The authenticated flag is a snapshot passed to ``resolve``; the resolver
    does not watch the session afterwards.
    """

    def __init__(
        self,
        is_setup_complete: Callable[[], Awaitable[bool]],
        navigator: NavigationSerializer,
        *,
        settings: Optional[BootstrapSettings] = None,
        clear_session: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self._is_setup_complete = is_setup_complete
        self.navigator = navigator
        self.settings = settings or BootstrapSettings()
        self._clear_session = clear_session
        self._started = False
        self.destination: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.destination is not None

    async def resolve(self, is_authenticated: bool) -> Optional[str]:
        """
        Pick the start destination and enqueue it.

        Only the first call does anything; later calls return the earlier
        decision (None if the first call is still running).
        """
        if self._started:
            logger.debug("Bootstrap already resolved, ignoring repeat request")
            return self.destination
        self._started = True

        if self.settings.min_splash > 0:
            await asyncio.sleep(self.settings.min_splash)

        try:
            setup_complete = await self._is_setup_complete() is True
        except Exception as e:
            logger.warning(f"Setup check failed, routing to onboarding: {e}")
            setup_complete = False

        if not setup_complete:
            logger.info("No completed setup found, routing to onboarding")
            await self._clear_stale_session()
            destination = ONBOARDING
        elif not is_authenticated:
            logger.info("Setup complete, no active session, routing to authentication")
            destination = AUTHENTICATION
        else:
            logger.info("Active session found, routing to vault")
            destination = VAULT

        self.destination = destination
        self.navigator.enqueue(destination, TransitionMode.REPLACE)
        return destination

    async def _clear_stale_session(self) -> None:
        if self._clear_session is None:
            return
        try:
            await self._clear_session()
        except Exception as e:
            logger.warning(f"Could not clear stale session before onboarding: {e}")
