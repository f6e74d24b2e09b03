"""Unlocked vault screen."""

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Static

from ...Widgets.change_pin_dialog import ChangePinDialog
from ..Navigation.base_app_screen import BaseAppScreen


class VaultScreen(BaseAppScreen):
    """
    Main screen once the session is unlocked.

    Any key press or click counts as activity and restarts the auto-lock timer.
    """

    DEFAULT_CSS = """
    VaultScreen .vault-status {
        width: 50;
        content-align: center middle;
        color: $success;
        margin-bottom: 1;
    }

    VaultScreen Horizontal {
        height: auto;
        align: center middle;
    }

    VaultScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, app_instance, **kwargs):
        super().__init__(app_instance, "vault", **kwargs)

    def compose_content(self) -> ComposeResult:
        with Vertical():
            yield Static("🔓 Vault unlocked", classes="vault-status")
            with Horizontal():
                yield Button("Change PIN", id="change-pin")
                yield Button("Lock", variant="error", id="lock-vault")

    def on_key(self, event: events.Key) -> None:
        self.app_instance.session.touch()

    def on_click(self, event: events.Click) -> None:
        self.app_instance.session.touch()

    @on(Button.Pressed, "#lock-vault")
    def lock_vault(self) -> None:
        self.app_instance.session.lock()

    @on(Button.Pressed, "#change-pin")
    def change_pin(self) -> None:
        self.app.push_screen(
            ChangePinDialog(
                self.app_instance.session.change_pin,
                current_length=self.app_instance.unlock_pin_settings().length,
                new_length=self.app_instance.pin_settings.length,
            ),
            callback=self._on_pin_changed,
        )

    def _on_pin_changed(self, changed: bool) -> None:
        if changed:
            self.app.notify("PIN changed")
