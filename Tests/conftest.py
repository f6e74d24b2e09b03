"""
Root conftest.py for shared test fixtures and configuration.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to Python path for consistent imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from passport_vault import config
from passport_vault.navigation.navigation_serializer import NavigationSerializer, NavigationTimings
from passport_vault.Session.bootstrap import BootstrapSettings
from passport_vault.Session.credential_store import PinCredentialStore
from passport_vault.Session.pin_entry import PinSettings
from passport_vault.Session.session_manager import SessionManager

from Tests.fakes import RecordingRouter

TEST_PBKDF2_ITERATIONS = 1000


# ========== Test Environment Isolation ==========

@pytest.fixture(autouse=True)
def isolate_test_environment(monkeypatch, tmp_path):
    """Point the config file and data directory at a temporary location."""
    data_dir = tmp_path / "data"
    config_path = tmp_path / "config" / "config.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text(f'[paths]\ndata_dir = "{data_dir.as_posix()}"\n', encoding="utf-8")

    monkeypatch.setenv(config.CONFIG_PATH_ENV_VAR, str(config_path))
    config.reset_config_cache()
    yield config_path
    config.reset_config_cache()


# ========== Collaborator Fakes ==========

@pytest.fixture
def recording_router():
    return RecordingRouter()


@pytest.fixture
def fast_timings():
    return NavigationTimings(settle_before=0, settle_after=0)


@pytest.fixture
def navigator(recording_router, fast_timings):
    return NavigationSerializer(recording_router, fast_timings)


@pytest.fixture
def fast_pin_settings():
    return PinSettings(length=4, validation_delay=0, feedback_window=0.01, shake_offsets=(1, -1, 0), shake_step=0)


@pytest.fixture
def fast_bootstrap_settings():
    return BootstrapSettings(min_splash=0)


@pytest.fixture
def feedback():
    """Stands in for the screen: records haptic and shake calls."""
    return MagicMock(spec=["haptic", "shake"])


@pytest.fixture
def credential_store(tmp_path):
    return PinCredentialStore(tmp_path / "credentials.toml", iterations=TEST_PBKDF2_ITERATIONS)


@pytest.fixture
def session_manager(credential_store):
    return SessionManager(credential_store, auto_lock_minutes=0)


# ========== Test Markers ==========

def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line("markers", "unit: Unit tests that don't require external resources")
    config.addinivalue_line("markers", "integration: Integration tests that use files or the Textual app")
