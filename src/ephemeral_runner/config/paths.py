"""Path defaults for ephemeral-runner configuration."""

import os
from pathlib import Path

from ephemeral_runner.constants import APP_DIR_NAME, CONFIG_FILE_NAME


class Paths:
    """Application paths and directory structure."""

    @staticmethod
    def base_dir() -> Path:
        """Return the machine-wide application directory.

        ``%ProgramData%\\ephemeral-runner`` on Windows, otherwise
        ``~/.config/ephemeral-runner``.
        """
        program_data = os.getenv("ProgramData")
        if program_data:
            return Path(program_data) / APP_DIR_NAME
        return Path.home() / ".config" / APP_DIR_NAME

    @classmethod
    def settings_file(cls) -> Path:
        """Return the default settings file path."""
        return cls.base_dir() / CONFIG_FILE_NAME

    @classmethod
    def download_dir(cls) -> Path:
        """Return the default directory for downloaded artifacts."""
        return cls.base_dir() / "downloads"

    @classmethod
    def logs_dir(cls) -> Path:
        """Return the default log directory."""
        return cls.base_dir() / "logs"
