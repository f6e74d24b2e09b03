"""First-run PIN setup screen."""

from ...Session.pin_setup_controller import PinSetupController, SetupStep
from .pin_screen import PinEntryScreen


class SetupScreen(PinEntryScreen):
    """Choose a PIN, then confirm it."""

    def __init__(self, app_instance, **kwargs):
        super().__init__(app_instance, "setup", **kwargs)

    def create_controller(self) -> PinSetupController:
        return PinSetupController(
            self.app_instance.session.complete_setup,
            self.app_instance.navigator,
            settings=self.app_instance.pin_settings,
            feedback=self,
            on_change=self.refresh_view,
        )

    def prompt_text(self) -> str:
        if self.controller.step is SetupStep.CONFIRM:
            return "Enter the same PIN again"
        return f"Choose a {self.controller.settings.length}-digit PIN"

    def status_text(self) -> str:
        return self.controller.last_error or ""
