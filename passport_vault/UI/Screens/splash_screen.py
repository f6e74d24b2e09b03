"""Splash screen shown while the start destination is being decided."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import LoadingIndicator, Static

from ..Navigation.base_app_screen import BaseAppScreen


class SplashScreen(BaseAppScreen):
    """Logo and a loading indicator. Replaced by whatever the bootstrap picks."""

    DEFAULT_CSS = """
    SplashScreen .splash-logo {
        width: 40;
        content-align: center middle;
        text-style: bold;
        color: $primary;
    }

    SplashScreen LoadingIndicator {
        height: 1;
    }
    """

    def __init__(self, app_instance, **kwargs):
        super().__init__(app_instance, "splash", **kwargs)

    def compose_content(self) -> ComposeResult:
        with Vertical():
            yield Static("🔒  P A S S P O R T", classes="splash-logo")
            yield LoadingIndicator()
