"""
Change PIN Dialog
-----------------

Modal dialog asking for the current PIN and a new PIN (typed twice).
"""

from typing import Awaitable, Callable, Optional

from loguru import logger
from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from ..exceptions import PassportVaultError


class ChangePinDialog(ModalScreen[bool]):
    """Dialog for changing the vault PIN. Dismisses with True once the PIN is changed."""

    DEFAULT_CSS = """
    ChangePinDialog {
        align: center middle;
    }

    ChangePinDialog > Container {
        background: $surface;
        border: thick $primary;
        padding: 1 2;
        width: 50;
        height: auto;
    }

    ChangePinDialog .dialog-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
        color: $primary;
    }

    ChangePinDialog Input {
        margin-bottom: 1;
    }

    ChangePinDialog .error-message {
        color: $error;
        margin-bottom: 1;
        display: none;
    }

    ChangePinDialog .error-message.visible {
        display: block;
    }

    ChangePinDialog .button-container {
        align: center middle;
        height: auto;
    }

    ChangePinDialog Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    def __init__(
        self,
        change_pin: Callable[[str, str], Awaitable[bool]],
        current_length: int = 4,
        new_length: int = 4,
        name: Optional[str] = None,
    ):
        """
        Args:
            change_pin: Coroutine taking (current, new) and returning False if
                the current PIN is wrong.
            current_length: Number of digits in the PIN in use now.
            new_length: Number of digits the new PIN must have.
            name: Name for the screen.
        """
        super().__init__(name=name)
        self.change_pin = change_pin
        self.current_length = current_length
        self.new_length = new_length

    def compose(self) -> ComposeResult:
        with Container():
            with Vertical():
                yield Label("Change PIN", classes="dialog-title")
                yield Input(placeholder="Current PIN", password=True, max_length=self.current_length, id="current-input")
                yield Input(placeholder="New PIN", password=True, max_length=self.new_length, id="new-input")
                yield Input(placeholder="Confirm new PIN", password=True, max_length=self.new_length, id="confirm-input")
                yield Static("", id="error-message", classes="error-message")
                with Horizontal(classes="button-container"):
                    yield Button("Cancel", variant="default", id="cancel-button")
                    yield Button("Change", variant="primary", id="submit-button")

    def show_error(self, message: str) -> None:
        error_widget = self.query_one("#error-message", Static)
        error_widget.update(message)
        error_widget.add_class("visible")

    def hide_error(self) -> None:
        self.query_one("#error-message", Static).remove_class("visible")

    def validate_inputs(self, current: str, new: str, confirm: str) -> Optional[str]:
        """Return an error message, or None if the inputs can be submitted."""
        if len(current) != self.current_length or not current.isdecimal():
            return f"Current PIN must be exactly {self.current_length} digits"
        if len(new) != self.new_length or not new.isdecimal():
            return f"New PIN must be exactly {self.new_length} digits"
        if new != confirm:
            return "New PINs do not match"
        if new == current:
            return "New PIN must be different"
        return None

    @on(Button.Pressed, "#submit-button")
    async def on_submit(self) -> None:
        self.hide_error()
        current = self.query_one("#current-input", Input).value
        new = self.query_one("#new-input", Input).value
        confirm = self.query_one("#confirm-input", Input).value

        error = self.validate_inputs(current, new, confirm)
        if error:
            self.show_error(error)
            return

        try:
            changed = await self.change_pin(current, new)
        except PassportVaultError as e:
            logger.error(f"Error changing PIN: {e}")
            self.show_error("PIN could not be changed")
            return

        if not changed:
            self.show_error("Current PIN is incorrect")
            return
        self.dismiss(True)

    @on(Button.Pressed, "#cancel-button")
    def on_cancel(self) -> None:
        self.dismiss(False)

    @on(Input.Submitted)
    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter moves to the next field, and submits from the last one."""
        order = ["current-input", "new-input", "confirm-input"]
        index = order.index(event.input.id) if event.input.id in order else len(order) - 1
        if index < len(order) - 1:
            self.query_one(f"#{order[index + 1]}", Input).focus()
        else:
            await self.on_submit()
