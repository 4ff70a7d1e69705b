"""Configuration loading for ephemeral-runner."""

from ephemeral_runner.config.paths import Paths
from ephemeral_runner.config.settings import SettingsManager

__all__ = ["Paths", "SettingsManager"]
