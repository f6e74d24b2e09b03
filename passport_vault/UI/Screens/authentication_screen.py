"""PIN authentication screen for returning users."""

from ...Session.pin_controller import PinAuthenticationController
from .pin_screen import PinEntryScreen


class AuthenticationScreen(PinEntryScreen):
    """
    Unlocks the vault. Shows how many PINs have been rejected on this visit.
    """

    def __init__(self, app_instance, **kwargs):
        super().__init__(app_instance, "authentication", **kwargs)

    def create_controller(self) -> PinAuthenticationController:
        return PinAuthenticationController(
            self.app_instance.session.authenticate,
            self.app_instance.navigator,
            settings=self.app_instance.unlock_pin_settings(),
            feedback=self,
            on_change=self.refresh_view,
        )

    def prompt_text(self) -> str:
        return "Enter your PIN to unlock"

    def status_text(self) -> str:
        count = self.controller.failed_attempt_count
        if count == 0:
            return ""
        return f"⚠ {count} failed attempt{'' if count == 1 else 's'}"
