"""
Registry of the destinations the screen router can display.
"""

from typing import Dict, Optional, Type

from loguru import logger
from textual.screen import Screen

ONBOARDING = "onboarding"
SETUP = "setup"
AUTHENTICATION = "authentication"
VAULT = "vault"


class ScreenRegistry:
    """Maps destination names (and their aliases) to Screen classes."""

    def __init__(self):
        self._screens: Dict[str, Type[Screen]] = {}
        self._aliases: Dict[str, str] = {}
        self._load_screens()

    def _load_screens(self) -> None:
        """Load all screen classes."""
        from ..UI.Screens.onboarding_screen import OnboardingScreen
        from ..UI.Screens.setup_screen import SetupScreen
        from ..UI.Screens.authentication_screen import AuthenticationScreen
        from ..UI.Screens.vault_screen import VaultScreen

        self._screens = {
            ONBOARDING: OnboardingScreen,
            SETUP: SetupScreen,
            AUTHENTICATION: AuthenticationScreen,
            VAULT: VaultScreen,
        }

        self._aliases = {
            'welcome': ONBOARDING,
            'auth': AUTHENTICATION,
            'pin': AUTHENTICATION,
            'main': VAULT,
            'tabs': VAULT,
        }

        logger.info(f"Registered {len(self._screens)} screens with {len(self._aliases)} aliases")

    def resolve_name(self, name: str) -> str:
        """Canonical destination name for a name or alias."""
        return self._aliases.get(name, name)

    def get_screen_class(self, name: str) -> Optional[Type[Screen]]:
        """Get a screen class by name or alias."""
        return self._screens.get(self.resolve_name(name))

