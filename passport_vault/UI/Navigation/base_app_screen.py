"""Screen base: title bar plus a content area filled by subclasses."""

from typing import TYPE_CHECKING

from loguru import logger
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Static

if TYPE_CHECKING:
    from ...app import PassportApp


class BaseAppScreen(Screen):
    """
    Every destination derives from this. ``app_instance`` gives access to the
    session, the navigator and the PIN settings.
    """

    DEFAULT_CSS = """
    BaseAppScreen {
        background: $background;
        align: center middle;
    }

    BaseAppScreen .screen-title {
        dock: top;
        width: 100%;
        height: 3;
        content-align: center middle;
        text-style: bold;
        background: $panel;
        color: $primary;
    }

    #screen-content {
        width: auto;
        height: auto;
        align: center middle;
    }
    """

    TITLE_TEXT = "PASSPORT"

    def __init__(self, app_instance: 'PassportApp', screen_name: str, **kwargs):
        super().__init__(**kwargs)
        self.app_instance = app_instance
        self.screen_name = screen_name

        logger.debug(f"Creating {type(self).__name__} for {screen_name!r}")

    def compose(self) -> ComposeResult:
        """Compose the screen with a title bar and content."""
        yield Static(self.TITLE_TEXT, classes="screen-title")
        with Container(id="screen-content"):
            yield from self.compose_content()

    def compose_content(self) -> ComposeResult:
        """Widgets below the title bar."""
        yield Container()

    def on_mount(self) -> None:
        logger.debug(f"{self.screen_name} screen shown")

    def on_unmount(self) -> None:
        logger.debug(f"{self.screen_name} screen removed")
