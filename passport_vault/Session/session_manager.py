"""
Session ownership: setup status, the authenticated flag and auto-lock.
"""

import asyncio
from typing import Callable, List, Optional

from loguru import logger

from ..state.app_state import AppRoutingState
from .credential_store import PinCredentialStore

SessionListener = Callable[[bool], None]


class SessionManager:
    """
    The only writer of AppRoutingState.

    ``authenticate`` and ``is_setup_complete`` are the collaborator calls the
    session gate uses. Listeners registered with ``subscribe`` are called with
    the new authenticated flag whenever the session locks or unlocks.
    """

    def __init__(
        self,
        store: PinCredentialStore,
        routing: Optional[AppRoutingState] = None,
        auto_lock_minutes: float = 5,
    ):
        self.store = store
        self.routing = routing or AppRoutingState()
        self.auto_lock_minutes = auto_lock_minutes
        self._listeners: List[SessionListener] = []
        self._lock_handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_authenticated(self) -> bool:
        return self.routing.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register for lock/unlock changes. Returns a function that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def is_setup_complete(self) -> bool:
        complete = await asyncio.to_thread(self.store.exists)
        self.routing.is_setup_complete = complete
        return complete

    def stored_pin_length(self) -> Optional[int]:
        """
        Length of the PIN that unlocks the vault.

        Follows the stored record, not the configured length, so a config
        change after setup cannot make the existing PIN untypeable.
        """
        return self.store.stored_pin_length()

    async def authenticate(self, pin: str) -> bool:
        """
        Verify a PIN and unlock the session if it matches.

        A wrong PIN returns False. A damaged store raises CredentialStoreError.
        """
        if not await asyncio.to_thread(self.store.verify_pin, pin):
            logger.info("Authentication failed")
            return False
        self._set_authenticated(True)
        logger.info("Session unlocked")
        return True

    async def complete_setup(self, pin: str) -> None:
        """Store the first PIN and start an authenticated session."""
        await asyncio.to_thread(self.store.save_pin, pin)
        self.routing.is_setup_complete = True
        self._set_authenticated(True)
        logger.info("Setup complete, session unlocked")

    async def change_pin(self, current_pin: str, new_pin: str) -> bool:
        """
        Replace the PIN after checking the current one.

        Returns False if ``current_pin`` is wrong. Raises PinFormatError for a
        malformed ``new_pin``.
        """
        if not await asyncio.to_thread(self.store.verify_pin, current_pin):
            logger.info("PIN change refused: current PIN did not match")
            return False
        await asyncio.to_thread(self.store.save_pin, new_pin)
        self.touch()
        logger.info("PIN changed")
        return True

    def lock(self, reason: str = "manual") -> None:
        """End the authenticated session."""
        if not self.routing.is_authenticated:
            self._cancel_auto_lock()
            return
        logger.info(f"Session locked ({reason})")
        self._set_authenticated(False)

    async def clear_session(self) -> None:
        """Drop any session left over from an earlier run."""
        self.lock(reason="cleared")

    def touch(self) -> None:
        """Record user activity: restarts the auto-lock countdown."""
        if self.routing.is_authenticated:
            self._schedule_auto_lock()

    def _set_authenticated(self, value: bool) -> None:
        changed = self.routing.is_authenticated != value
        if value:
            self.routing.is_authenticated = True
            self._schedule_auto_lock()
        else:
            self.routing.lock()
            self._cancel_auto_lock()
        if changed:
            for listener in list(self._listeners):
                listener(value)

    def _schedule_auto_lock(self) -> None:
        self._cancel_auto_lock()
        if self.auto_lock_minutes <= 0:
            return
        loop = asyncio.get_running_loop()
        self._lock_handle = loop.call_later(self.auto_lock_minutes * 60, self._auto_lock)

    def _cancel_auto_lock(self) -> None:
        if self._lock_handle is not None:
            self._lock_handle.cancel()
            self._lock_handle = None

    def _auto_lock(self) -> None:
        self._lock_handle = None
        self.lock(reason=f"idle for {self.auto_lock_minutes:g} min")
