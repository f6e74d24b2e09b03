"""Onboarding screen for first-run users."""

from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Static

from ...navigation.navigation_serializer import TransitionMode
from ...navigation.screen_registry import SETUP
from ..Navigation.base_app_screen import BaseAppScreen


class OnboardingScreen(BaseAppScreen):
    """
    Welcome text and a single action that starts PIN setup.
    """

    DEFAULT_CSS = """
    OnboardingScreen .onboarding-text {
        width: 50;
        margin-bottom: 1;
    }
    """

    def __init__(self, app_instance, **kwargs):
        super().__init__(app_instance, "onboarding", **kwargs)

    def compose_content(self) -> ComposeResult:
        with Vertical():
            yield Static(
                "Welcome to Passport.\n\n"
                "Your passwords and notes stay on this device, locked behind a PIN. "
                "Choose a PIN to get started.",
                classes="onboarding-text",
            )
            yield Button("Get started", variant="primary", id="start-setup")

    @on(Button.Pressed, "#start-setup")
    def start_setup(self) -> None:
        self.app_instance.navigator.enqueue(SETUP, TransitionMode.PUSH)
