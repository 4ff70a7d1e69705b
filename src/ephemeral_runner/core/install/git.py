"""Unattended Git for Windows installation."""

from __future__ import annotations

import contextlib
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ephemeral_runner.constants import GIT_INSTALLER_FLAGS
from ephemeral_runner.core.install.options import GitInstallOptions
from ephemeral_runner.exceptions import InstallerFailed
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from ephemeral_runner.core.github.models import FetchResult
    from ephemeral_runner.core.protocols import ProcessRunner

logger = get_logger(__name__)


class GitInstaller:
    """Runs the Git for Windows installer with a generated answer file."""

    def __init__(
        self,
        runner: ProcessRunner,
        options: GitInstallOptions | None = None,
    ) -> None:
        """Initialize installer.

        Args:
            runner: Process runner for the installer executable
            options: Answer-file values (defaults to the CI configuration)

        """
        self.runner = runner
        self.options = options or GitInstallOptions()

    @property
    def git_executable(self) -> Path:
        """Path of git.exe once installation has finished."""
        return Path(self.options.install_dir) / "cmd" / "git.exe"

    def build_command(self, installer: Path, answer_file: Path) -> list[str]:
        """Return the silent-install argv."""
        return [
            str(installer),
            *GIT_INSTALLER_FLAGS,
            f"/LOADINF={answer_file}",
        ]

    async def install(self, fetch_result: FetchResult) -> Path:
        """Install Git from a verified installer.

        The answer file lives in a temporary file that is removed once
        the installer exits, whether or not it succeeded.

        Args:
            fetch_result: Verified download of the installer executable

        Returns:
            Path to the installed git.exe

        Raises:
            IntegrityCheckFailed: If the installer was not verified
            InstallerFailed: If the installer exits non-zero or git.exe
                is missing afterwards

        """
        installer = fetch_result.verified_path()

        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            suffix=".inf",
            prefix="git-install-",
            delete=False,
        ) as f:
            f.write(self.options.to_inf())
            answer_file = Path(f.name)
        logger.debug("Wrote Git answer file: %s", answer_file)

        try:
            logger.info("📦 Installing Git from %s", installer.name)
            try:
                result = await self.runner.run(
                    self.build_command(installer, answer_file)
                )
            except OSError as e:
                msg = f"Could not start {installer.name}: {e}"
                raise InstallerFailed(msg) from e
        finally:
            with contextlib.suppress(OSError):
                answer_file.unlink()

        if not result.ok:
            msg = f"{installer.name} failed with {result.describe_failure()}"
            raise InstallerFailed(msg)

        if not self.git_executable.exists():
            msg = (
                f"{installer.name} exited cleanly but "
                f"{self.git_executable} does not exist"
            )
            raise InstallerFailed(msg)

        logger.info("✅ Git installed at %s", self.options.install_dir)
        return self.git_executable
