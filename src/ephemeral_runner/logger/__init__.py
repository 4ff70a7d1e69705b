"""Logging utilities for ephemeral-runner.

Structured logging with:
- Hybrid console output (bare INFO narration, colored warnings/errors)
- Rotating log file with function names and line numbers
- QueueHandler/QueueListener so the event loop never blocks on file I/O
- Hierarchical names under the ``ephemeral_runner`` root logger

Usage:
    >>> from ephemeral_runner.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Downloading %s", asset.name)  # %-style, never f-strings

Environment Variables:
    EPHEMERAL_RUNNER_LOG_DIR: Override the log directory (used by tests).

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Only the root 'ephemeral_runner' logger has handlers
    4. Never log the runner registration token
"""

from typing import TYPE_CHECKING

from ephemeral_runner.logger.config import (
    update_logger_from_config as _update_config,
)
from ephemeral_runner.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from ephemeral_runner.logger.handlers import ConfigurationError
from ephemeral_runner.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from ephemeral_runner.logger.state import _state, get_state

if TYPE_CHECKING:
    from ephemeral_runner.types import GlobalConfig

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "_state",  # For testing only
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(config: "GlobalConfig") -> None:
    """Apply configured log levels and log directory to the handlers.

    The file handler moves to ``[directory] logs`` unless
    EPHEMERAL_RUNNER_LOG_DIR is set.

    Args:
        config: Loaded GlobalConfig

    Raises:
        ConfigurationError: If the configured log file cannot be opened

    """
    _update_config(get_state(), config)
