"""Common plumbing for screens that take a PIN on the keypad."""

from typing import Tuple

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Static

from ...Session.pin_entry import PinEntryController, PinState
from ...Widgets.pin_keypad import PinKeypad
from ..Navigation.base_app_screen import BaseAppScreen


class PinEntryScreen(BaseAppScreen):
    """
    Keypad screen driven by a PinEntryController.

    Subclasses build the controller in ``create_controller`` and describe the
    current situation in ``prompt_text`` and ``status_text``. The screen is the
    controller's feedback target: haptic is the terminal bell, the shake is
    played by the keypad.
    """

    DEFAULT_CSS = """
    PinEntryScreen .pin-prompt {
        width: 31;
        content-align: center middle;
        margin-bottom: 1;
    }

    PinEntryScreen .pin-status {
        width: 31;
        height: 1;
        content-align: center middle;
        color: $warning;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding(digit, f"digit('{digit}')", show=False) for digit in "0123456789"
    ] + [Binding("backspace", "backspace", "Delete", show=False)]

    def __init__(self, app_instance, screen_name: str, **kwargs):
        super().__init__(app_instance, screen_name, **kwargs)
        self.controller = self.create_controller()

    def create_controller(self) -> PinEntryController:
        raise NotImplementedError

    def prompt_text(self) -> str:
        return "Enter your PIN"

    def status_text(self) -> str:
        return ""

    def compose_content(self) -> ComposeResult:
        with Vertical():
            yield Static(self.prompt_text(), id="pin-prompt", classes="pin-prompt")
            yield PinKeypad(length=self.controller.settings.length, id="pin-keypad")
            yield Static(self.status_text(), id="pin-status", classes="pin-status")

    def on_unmount(self) -> None:
        self.controller.cancel()
        super().on_unmount()

    @on(PinKeypad.DigitPressed)
    def handle_digit(self, event: PinKeypad.DigitPressed) -> None:
        self.controller.on_digit(event.digit)

    @on(PinKeypad.BackspacePressed)
    def handle_backspace(self) -> None:
        self.controller.on_backspace()

    def action_digit(self, digit: str) -> None:
        self.controller.on_digit(digit)

    def action_backspace(self) -> None:
        self.controller.on_backspace()

    # Feedback target for the controller
    def haptic(self) -> None:
        self.app.bell()

    def shake(self, offsets: Tuple[int, ...], step: float) -> None:
        if self.is_mounted:
            self.query_one("#pin-keypad", PinKeypad).shake(offsets, step)

    def refresh_view(self, controller: PinEntryController) -> None:
        """Redraw the dots, prompt and status from the controller."""
        if not self.is_mounted:
            return
        keypad = self.query_one("#pin-keypad", PinKeypad)
        keypad.filled = controller.pin_length if controller.state is not PinState.REJECTED else controller.settings.length
        keypad.set_rejected(controller.state is PinState.REJECTED)
        self.query_one("#pin-prompt", Static).update(self.prompt_text())
        self.query_one("#pin-status", Static).update(self.status_text())
