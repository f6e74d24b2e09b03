"""
Session routing and authentication attempt state.
"""

from dataclasses import dataclass, field

from .navigation_state import NavigationState


@dataclass
class AppRoutingState:
    """
    The two flags that decide where a cold start lands.

    Owned by the SessionManager. The session gate components only read it.
    """

    is_setup_complete: bool = False
    is_authenticated: bool = False

    def lock(self) -> None:
        self.is_authenticated = False


@dataclass
class AuthAttemptState:
    """Failed PIN attempts for the lifetime of one authentication screen."""

    failed_attempt_count: int = 0

    def record_failure(self) -> int:
        self.failed_attempt_count += 1
        return self.failed_attempt_count

    def reset(self) -> None:
        self.failed_attempt_count = 0


@dataclass
class AppState:
    """
    Root state container for the application.
    """

    routing: AppRoutingState = field(default_factory=AppRoutingState)
    navigation: NavigationState = field(default_factory=NavigationState)

    is_ready: bool = False
