"""Bootstrap settings and runtime level updates for logging.

Logging starts before the settings file has been read, so it boots with
hardcoded defaults. Once the CLI has loaded its configuration it calls
update_logger_from_config() to apply the configured levels and log
directory.
"""

import logging
import os
from logging.handlers import QueueListener, RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from ephemeral_runner.constants import (
    APP_DIR_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)
from ephemeral_runner.logger.handlers import (
    ConfigurationError,
    _create_file_handler,
)

if TYPE_CHECKING:
    from ephemeral_runner.logger.state import _LoggerState
    from ephemeral_runner.types import GlobalConfig


def default_log_dir() -> Path:
    """Return the default log directory.

    ``%ProgramData%\\ephemeral-runner\\logs`` on Windows, falling back to
    ``~/.config/ephemeral-runner/logs`` where ProgramData is not defined.
    """
    program_data = os.getenv("ProgramData")
    if program_data:
        return Path(program_data) / APP_DIR_NAME / "logs"
    return Path.home() / ".config" / APP_DIR_NAME / "logs"


def load_log_settings() -> tuple[str, str, Path]:
    """Load bootstrap console level, file level, and file path.

    Environment Variable Override:
        EPHEMERAL_RUNNER_LOG_DIR: Overrides the log directory. The test
        suite points this at a temporary directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    log_dir = (
        Path(env_log_dir).expanduser() if env_log_dir else default_log_dir()
    )
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_dir / LOG_FILE_NAME


def _relocate_file_handler(
    state: "_LoggerState", handler: RotatingFileHandler, log_file: Path
) -> None:
    """Swap the listener's file handler for one writing to log_file."""
    listener = state.queue_listener
    listener.stop()
    try:
        replacement = _create_file_handler(
            log_file, logging.getLevelName(handler.level)
        )
    except ConfigurationError:
        listener.start()
        raise
    handler.close()
    state.queue_listener = QueueListener(
        listener.queue,
        *(replacement if h is handler else h for h in listener.handlers),
        respect_handler_level=True,
    )
    state.queue_listener.start()


def update_logger_from_config(
    state: "_LoggerState", config: "GlobalConfig"
) -> None:
    """Update handlers from a loaded configuration.

    Handler levels follow the configured levels. The file handler moves
    to ``[directory] logs`` unless EPHEMERAL_RUNNER_LOG_DIR is set.

    Args:
        state: Logger state object (from logger.state module)
        config: Loaded global configuration

    Raises:
        ConfigurationError: If the configured log file cannot be opened

    """
    console_level = getattr(
        logging, config["console_log_level"], logging.INFO
    )
    file_level = getattr(logging, config["log_level"], logging.DEBUG)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

        log_file = config["directory"]["logs"] / LOG_FILE_NAME
        for handler in state.queue_listener.handlers:
            if (
                isinstance(handler, RotatingFileHandler)
                and not os.getenv(LOG_DIR_ENV_VAR)
                and Path(handler.baseFilename) != log_file.absolute()
            ):
                _relocate_file_handler(state, handler, log_file)
                break

    state.config_applied = True
