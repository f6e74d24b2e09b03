# Logging_Config.py
# Description: loguru sinks for the passport_vault application.
#
# Imports
import logging
import sys
from pathlib import Path
from typing import Optional
#
# Third-Party Imports
from loguru import logger
#
# Local Imports
from .config import get_cli_setting, get_log_file_path
#
#######################################################################################################################

VALID_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class InterceptHandler(logging.Handler):
    """Forward records from the standard logging module (asyncio, textual) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def _configured_level() -> str:
    level = str(get_cli_setting("logging", "log_level", "INFO")).upper()
    if level not in VALID_LEVELS:
        logger.warning(f"Unknown log level '{level}' in config, falling back to INFO")
        return "INFO"
    return level


def configure_application_logging(console: bool = False, log_file: Optional[Path] = None) -> Path:
    """
    Replace loguru's default sink with the application's sinks.

    Args:
        console: Also log to stderr. Off for the TUI, which owns the terminal.
        log_file: Override the log file location (defaults to the data directory).

    Returns:
        The path of the log file being written.
    """
    level = _configured_level()
    log_path = log_file or get_log_file_path()

    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    try:
        logger.add(
            str(log_path),
            level=level,
            format=FILE_FORMAT,
            rotation=get_cli_setting("logging", "log_rotation", "5 MB"),
            retention=get_cli_setting("logging", "log_retention", "7 days"),
            enqueue=True,
            encoding="utf-8",
        )
    except (OSError, ValueError) as e:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
        logger.error(f"Could not open log file {log_path}: {e}. Logging to stderr only.")

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.WARNING, force=True)
    logger.info(f"Logging configured at {level}, writing to {log_path}")
    return log_path

#
# End of Logging_Config.py
#######################################################################################################################
