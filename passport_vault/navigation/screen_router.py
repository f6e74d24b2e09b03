"""
Textual implementation of the view router used by the navigation serializer.
"""

from typing import TYPE_CHECKING, Optional

from loguru import logger
from textual.screen import ModalScreen, Screen

from ..exceptions import NavigationError
from ..state.navigation_state import NavigationState
from .navigation_serializer import TransitionMode
from .screen_registry import ScreenRegistry

if TYPE_CHECKING:
    from ..app import PassportApp

# The default screen plus one destination.
BASE_STACK_DEPTH = 2


class ScreenRouter:
    """
    Shows destinations on the app's screen stack.

    PUSH keeps the current screen underneath. REPLACE closes everything above
    the base destination (dialogs and pushed destinations) and swaps the base,
    so exactly one destination is mounted afterwards.
    """

    def __init__(self, app: 'PassportApp', state: NavigationState, registry: Optional[ScreenRegistry] = None):
        self.app = app
        self.state = state
        self.registry = registry or ScreenRegistry()

    async def navigate_to(self, destination: str, mode: TransitionMode) -> None:
        """
        Display a destination.

        Raises:
            NavigationError: if the destination is unknown or the app cannot show screens.
        """
        name = self.registry.resolve_name(destination)
        screen_class = self.registry.get_screen_class(name)
        if screen_class is None:
            raise NavigationError(f"Unknown destination: {destination}")
        if not self.app.is_running:
            raise NavigationError(f"App is not running, cannot show '{name}'")

        screen = self._create_screen(screen_class)
        if mode is TransitionMode.PUSH:
            await self.app.push_screen(screen)
            self.state.record_push(name)
        else:
            unwound = await self._unwind_to_base()
            await self.app.switch_screen(screen)
            self.state.record_replace(name, unwound)
        logger.info(f"Navigated to '{name}' ({mode.value})")

    async def _unwind_to_base(self) -> int:
        """Pop screens until one destination sits on the default screen. Returns the destinations popped."""
        unwound = 0
        while len(self.app.screen_stack) > BASE_STACK_DEPTH:
            top = self.app.screen
            if not isinstance(top, ModalScreen):
                unwound += 1
            logger.debug(f"Closing {type(top).__name__} before replacing destination")
            await self.app.pop_screen()
        return unwound

    def _create_screen(self, screen_class: type) -> Screen:
        # Screens hold per-visit state (PIN buffers), so a fresh instance every time.
        return screen_class(self.app)
