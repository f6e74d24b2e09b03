"""
State management module for passport_vault.
"""

from .app_state import AppState, AppRoutingState, AuthAttemptState
from .navigation_state import NavigationState

__all__ = [
    'AppState',
    'AppRoutingState',
    'AuthAttemptState',
    'NavigationState',
]
