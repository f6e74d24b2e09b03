# passport_vault/config.py
# Description: Configuration management for the passport_vault application.
#
# Imports
import copy
import os
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
#
# Third-Party Imports
import toml
from loguru import logger
#
# Local Imports
from .navigation.navigation_serializer import NavigationTimings
from .Session.bootstrap import BootstrapSettings
from .Session.pin_entry import PinSettings
#
#######################################################################################################################
#
# Constants

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "passport_vault" / "config.toml"
CONFIG_PATH_ENV_VAR = "PASSPORT_VAULT_CONFIG"

MIN_PIN_LENGTH = 4
MAX_PIN_LENGTH = 8

CONFIG_TOML_CONTENT = """
# Configuration for passport_vault
# Values not present here fall back to the built-in defaults.

[navigation]
# Wait before and after each screen transition so animations can settle.
settle_before_ms = 50
settle_after_ms = 100
max_history = 50

[pin]
length = 4
# Delay between the last digit and validation, so the last dot is drawn.
validation_delay_ms = 150
# How long rejection feedback stays on screen before the PIN is cleared.
feedback_window_ms = 600
# Horizontal offsets (in cells) played one after another on rejection.
shake_offsets = [3, -3, 2, -2, 1, 0]
shake_step_ms = 50

[session]
# Lock the vault after this many minutes. 0 disables auto-lock.
auto_lock_minutes = 5

[bootstrap]
# Minimum time the splash screen is shown before routing.
min_splash_ms = 2000

[logging]
log_level = "INFO"
log_filename = "passport_vault.log"
log_rotation = "5 MB"
log_retention = "7 days"

[paths]
data_dir = "~/.local/share/passport_vault"
"""

try:
    DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)
except tomllib.TOMLDecodeError as e:
    logger.critical(f"Built-in default configuration is not valid TOML: {e}")
    DEFAULT_CONFIG_FROM_TOML = {}


# --- Helper for deep merging dictionaries ---
def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config_path() -> Path:
    """Config file location. The PASSPORT_VAULT_CONFIG environment variable wins."""
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


# --- Primary Configuration Loading Logic ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None

def load_cli_config_and_ensure_existence(force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings from the user's config.toml.
    If the file doesn't exist, it's created with the contents of CONFIG_TOML_CONTENT.
    The built-in defaults are always the base; user values are merged on top.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    config_path = get_config_path()
    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)

    if not config_path.exists():
        logger.info(f"Config file not found at {config_path}. Creating it with default values.")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(CONFIG_TOML_CONTENT)
            logger.info(f"Created default config file at {config_path}")
        except OSError as e:
            logger.error(f"Could not create default config file {config_path}: {e}. Using internal defaults.")
    else:
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
            logger.debug(f"Merged user config from {config_path}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {config_path}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {config_path}: {e}. Using internal defaults.")

    _CONFIG_CACHE = loaded_config
    logger.debug(f"Config loaded with sections: {list(loaded_config.keys())}")
    return _CONFIG_CACHE


def save_setting_to_cli_config(section: str, key: str, value: Any) -> bool:
    """
    Saves a single setting to the user's TOML configuration file.

    Reads the current file, sets ``[section].key`` (dotted sections create
    nested tables), writes the whole file back and reloads the cache.

    Returns:
        True if the setting was saved, False otherwise.
    """
    global _CONFIG_CACHE
    config_path = get_config_path()
    logger.info(f"Saving setting: [{section}].{key} = {value!r}")

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create config directory {config_path.parent}: {e}")
        return False

    config_data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                config_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Corrupted config file at {config_path}. Cannot save. Please fix or delete it. Error: {e}")
            return False
        except OSError as e:
            logger.error(f"Unexpected error reading {config_path}: {e}")
            return False

    current_level = config_data
    try:
        for part in section.split('.'):
            current_level = current_level.setdefault(part, {})
        current_level[key] = value
    except (TypeError, AttributeError):
        logger.error(
            f"Configuration structure conflict. Could not set '{key}' in section '{section}' "
            f"because a part of the path is not a table."
        )
        return False

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)
    except (OSError, TypeError) as e:
        logger.error(f"Failed to write updated config to {config_path}: {e}")
        return False

    logger.success(f"Saved setting to {config_path}")
    _CONFIG_CACHE = None
    load_cli_config_and_ensure_existence(force_reload=True)
    return True


def reset_config_cache() -> None:
    """Forget the cached configuration. The next access reloads from disk."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = None


# --- Setting Getters ---
def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_cli_config_and_ensure_existence()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def _default(section: str, key: str) -> Any:
    return DEFAULT_CONFIG_FROM_TOML.get(section, {}).get(key)


def _get_number(section: str, key: str, minimum: float = 0, maximum: Optional[float] = None) -> float:
    """Read a numeric setting, falling back to the built-in default when invalid or out of range."""
    default = _default(section, key)
    value = get_cli_setting(section, key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning(f"Config [{section}].{key} = {value!r} is not a number. Using default: {default}")
        return default
    if value < minimum or (maximum is not None and value > maximum):
        logger.warning(f"Config [{section}].{key} = {value} is out of range. Using default: {default}")
        return default
    return value


def _get_offsets(section: str, key: str) -> List[int]:
    default = _default(section, key)
    value = get_cli_setting(section, key, default)
    if not isinstance(value, list) or not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        logger.warning(f"Config [{section}].{key} must be a list of integers. Using default: {default}")
        return list(default)
    return value


def get_navigation_timings() -> NavigationTimings:
    return NavigationTimings(
        settle_before=_get_number("navigation", "settle_before_ms") / 1000,
        settle_after=_get_number("navigation", "settle_after_ms") / 1000,
    )


def get_max_history() -> int:
    return int(_get_number("navigation", "max_history", minimum=1))


def get_pin_settings() -> PinSettings:
    return PinSettings(
        length=int(_get_number("pin", "length", minimum=MIN_PIN_LENGTH, maximum=MAX_PIN_LENGTH)),
        validation_delay=_get_number("pin", "validation_delay_ms") / 1000,
        feedback_window=_get_number("pin", "feedback_window_ms") / 1000,
        shake_offsets=tuple(_get_offsets("pin", "shake_offsets")),
        shake_step=_get_number("pin", "shake_step_ms") / 1000,
    )


def get_bootstrap_settings() -> BootstrapSettings:
    return BootstrapSettings(min_splash=_get_number("bootstrap", "min_splash_ms") / 1000)


def get_auto_lock_minutes() -> float:
    return _get_number("session", "auto_lock_minutes")


def get_data_dir() -> Path:
    """Application data directory (credentials, logs). Created if missing."""
    data_dir = Path(get_cli_setting("paths", "data_dir", _default("paths", "data_dir"))).expanduser()
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create data directory {data_dir}: {e}")
    return data_dir


def get_credentials_path() -> Path:
    return get_data_dir() / "credentials.toml"


def get_log_file_path() -> Path:
    log_filename = get_cli_setting("logging", "log_filename", _default("logging", "log_filename"))
    return get_data_dir() / log_filename

#
# End of config.py
#######################################################################################################################
