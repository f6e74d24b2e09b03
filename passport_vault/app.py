# app.py
# Description: Textual application hosting the passport_vault session gate.
#
# Imports
import sys
from dataclasses import replace
from typing import Optional
#
# Third-Party Imports
from loguru import logger
from textual.app import App
from textual.binding import Binding
#
# Local Imports
from .config import (
    get_auto_lock_minutes,
    get_bootstrap_settings,
    get_credentials_path,
    get_max_history,
    get_navigation_timings,
    get_pin_settings,
    load_cli_config_and_ensure_existence,
)
from .Logging_Config import configure_application_logging
from .navigation.navigation_serializer import NavigationSerializer, NavigationTimings, TransitionMode
from .navigation.screen_registry import AUTHENTICATION, ScreenRegistry
from .navigation.screen_router import ScreenRouter
from .Session.bootstrap import BootstrapResolver, BootstrapSettings
from .Session.credential_store import PinCredentialStore
from .Session.pin_entry import PinSettings
from .Session.session_manager import SessionManager
from .state.app_state import AppState
from .UI.Screens.splash_screen import SplashScreen
#
#######################################################################################################################


class PassportApp(App[None]):
    """
    Vault front end.

    Owns the process-wide services: one NavigationSerializer, one
    SessionManager and the one-shot BootstrapResolver. Screens reach them
    through ``app_instance``.
    """

    TITLE = "Passport"
    BINDINGS = [Binding("ctrl+q", "quit", "Quit", priority=True)]

    def __init__(
        self,
        session: Optional[SessionManager] = None,
        *,
        navigation_timings: Optional[NavigationTimings] = None,
        pin_settings: Optional[PinSettings] = None,
        bootstrap_settings: Optional[BootstrapSettings] = None,
        registry: Optional[ScreenRegistry] = None,
    ):
        super().__init__()
        self.pin_settings = pin_settings or get_pin_settings()
        self.app_state = AppState()

        if session is None:
            store = PinCredentialStore(get_credentials_path(), pin_length=self.pin_settings.length)
            session = SessionManager(store, self.app_state.routing, auto_lock_minutes=get_auto_lock_minutes())
            self.app_state.navigation.max_history = get_max_history()
        else:
            self.app_state.routing = session.routing
        self.session = session

        self.router = ScreenRouter(self, self.app_state.navigation, registry)
        self.navigator = NavigationSerializer(self.router, navigation_timings or get_navigation_timings())
        self.bootstrap = BootstrapResolver(
            self.session.is_setup_complete,
            self.navigator,
            settings=bootstrap_settings or get_bootstrap_settings(),
            clear_session=self.session.clear_session,
        )
        self._unsubscribe_session = self.session.subscribe(self._on_session_changed)

    def unlock_pin_settings(self) -> PinSettings:
        """PIN settings for typing the existing PIN: the stored length wins over config."""
        stored_length = self.session.stored_pin_length()
        if stored_length is None or stored_length == self.pin_settings.length:
            return self.pin_settings
        logger.info(f"Stored PIN has {stored_length} digits, configured length is {self.pin_settings.length}")
        return replace(self.pin_settings, length=stored_length)

    async def on_mount(self) -> None:
        await self.push_screen(SplashScreen(self))
        self.run_worker(self._run_bootstrap(), name="bootstrap", exclusive=True)

    async def _run_bootstrap(self) -> None:
        destination = await self.bootstrap.resolve(self.session.is_authenticated)
        self.app_state.is_ready = True
        logger.info(f"Start destination: {destination}")

    def _on_session_changed(self, authenticated: bool) -> None:
        """A session that locks after start-up sends the user back to the PIN screen."""
        if authenticated or not self.app_state.is_ready:
            return
        # Anything still queued was decided while unlocked.
        self.navigator.clear()
        self.navigator.enqueue(AUTHENTICATION, TransitionMode.REPLACE)

    def on_unmount(self) -> None:
        self._unsubscribe_session()
        self.session.lock(reason="app exit")


def main_cli_runner() -> None:
    """Entry point for the passport-vault command."""
    load_cli_config_and_ensure_existence()
    configure_application_logging()
    logger.info("--- Starting passport_vault ---")
    try:
        PassportApp().run()
    except KeyboardInterrupt:
        logger.info("--- KeyboardInterrupt received ---")
    except Exception:
        logger.exception("--- CRITICAL ERROR DURING app.run() ---")
        sys.exit(1)
    finally:
        logger.info("--- passport_vault exited ---")


if __name__ == "__main__":
    main_cli_runner()

#
# End of app.py
#######################################################################################################################
