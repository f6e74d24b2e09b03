"""
Session gate: cold-start routing, PIN entry and the session collaborator.
"""

from .bootstrap import BootstrapResolver, BootstrapSettings
from .credential_store import PinCredentialStore
from .pin_controller import PinAuthenticationController
from .pin_entry import PinBuffer, PinEntryController, PinFeedback, PinSettings, PinState
from .pin_setup_controller import PinSetupController, SetupStep
from .session_manager import SessionManager

__all__ = [
    'BootstrapResolver',
    'BootstrapSettings',
    'PinAuthenticationController',
    'PinBuffer',
    'PinCredentialStore',
    'PinEntryController',
    'PinFeedback',
    'PinSettings',
    'PinSetupController',
    'PinState',
    'SessionManager',
    'SetupStep',
]
