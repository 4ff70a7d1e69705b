"""GitHub Actions runner extraction, configuration, and registration.

After ``config.cmd --runasservice`` the only trustworthy signal that the
multi-step configuration worked is a service named ``actions.runner.*``;
its absence is fatal.
"""

from __future__ import annotations

import asyncio
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ephemeral_runner.constants import (
    RUNNER_CONFIG_SCRIPT,
    RUNNER_DIAG_DIR,
    RUNNER_HOOK_SCRIPT_NAME,
)
from ephemeral_runner.exceptions import (
    InstallerFailed,
    ServiceRegistrationFailed,
)
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from ephemeral_runner.core.github.models import FetchResult
    from ephemeral_runner.core.protocols import (
        ProcessRunner,
        SystemConfigurator,
    )
    from ephemeral_runner.types import RunnerConfig

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class RunnerRegistration:
    """Per-VM registration inputs supplied on the command line.

    Attributes:
        url: Organization or repository URL to register with
        token: One-time registration token
        name: Runner name, unique within the target scope
        install_dir: Directory the runner is extracted into
        labels: Comma-separated labels (None uses the configured ones)
        stop_service: Stop the service after registration

    """

    url: str
    token: str
    name: str
    install_dir: Path
    labels: str | None = None
    stop_service: bool = True

    def __repr__(self) -> str:
        """Represent the registration without exposing the token."""
        return (
            f"RunnerRegistration(url={self.url!r}, token='***', "
            f"name={self.name!r}, install_dir={self.install_dir!r}, "
            f"labels={self.labels!r}, stop_service={self.stop_service!r})"
        )


def render_shutdown_hook(delay_seconds: int, reason: str) -> str:
    """Render the job-completed hook script.

    The delayed shutdown leaves time for the runner to flush its logs and
    can still be cancelled with ``shutdown /a`` inside the window.
    """
    safe_reason = reason.replace('"', "'")
    return (
        "# Runs when a runner job completes.\r\n"
        f'shutdown.exe /s /t {delay_seconds} /d p:4:1 /c "{safe_reason}"\r\n'
    )


def _extract_archive(archive: Path, target: Path) -> None:
    target.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive) as zf:
        zf.extractall(target)


class RunnerAgentInstaller:
    """Installs and registers the Actions runner as a Windows service."""

    def __init__(
        self,
        runner: ProcessRunner,
        system: SystemConfigurator,
        config: RunnerConfig,
    ) -> None:
        """Initialize installer.

        Args:
            runner: Process runner for ``config.cmd``
            system: Machine configuration backend
            config: Runner section of the global configuration

        """
        self.runner = runner
        self.system = system
        self.config = config

    async def extract(self, fetch_result: FetchResult, target: Path) -> None:
        """Extract the verified runner archive into target.

        Raises:
            IntegrityCheckFailed: If the archive was not verified
            InstallerFailed: If the archive cannot be extracted

        """
        archive = fetch_result.verified_path()
        logger.info("📂 Extracting %s to %s", archive.name, target)
        try:
            await asyncio.to_thread(_extract_archive, archive, target)
        except (zipfile.BadZipFile, OSError) as e:
            msg = f"Could not extract {archive.name}: {e}"
            raise InstallerFailed(msg) from e

    async def install_shutdown_hook(self, target: Path) -> Path:
        """Write the shutdown hook and point the runner at it.

        Returns:
            Path of the written hook script

        """
        hook_path = target / RUNNER_HOOK_SCRIPT_NAME
        try:
            hook_path.write_bytes(
                render_shutdown_hook(
                    self.config["shutdown_delay_seconds"],
                    self.config["shutdown_reason"],
                ).encode("utf-8")
            )
        except OSError as e:
            msg = f"Cannot write shutdown hook {hook_path}: {e}"
            raise InstallerFailed(msg) from e
        logger.debug("Wrote shutdown hook: %s", hook_path)

        await self.system.set_environment_variable(
            self.config["hook_env_var"], str(hook_path)
        )
        return hook_path

    def build_config_command(
        self, registration: RunnerRegistration
    ) -> list[str]:
        """Return the ``config.cmd`` argv for an ephemeral service runner."""
        config_cmd = registration.install_dir / RUNNER_CONFIG_SCRIPT
        return [
            "cmd.exe",
            "/c",
            str(config_cmd),
            "--unattended",
            "--ephemeral",
            "--name",
            registration.name,
            "--runasservice",
            "--labels",
            registration.labels or self.config["labels"],
            "--url",
            registration.url,
            "--token",
            registration.token,
        ]

    async def configure(self, registration: RunnerRegistration) -> None:
        """Register the runner with GitHub and install its service.

        Raises:
            InstallerFailed: If ``config.cmd`` exits non-zero

        """
        logger.info(
            "⚙️  Registering runner '%s' with %s",
            registration.name,
            registration.url,
        )
        try:
            result = await self.runner.run(
                self.build_config_command(registration)
            )
        except OSError as e:
            msg = f"Could not start {RUNNER_CONFIG_SCRIPT}: {e}"
            raise InstallerFailed(msg) from e

        if not result.ok:
            detail = result.describe_failure().replace(
                registration.token, "***"
            )
            msg = f"{RUNNER_CONFIG_SCRIPT} failed with {detail}"
            raise InstallerFailed(msg)

    async def verify_service(
        self, registration: RunnerRegistration
    ) -> list[str]:
        """Confirm that a runner service exists.

        Returns:
            Names of the matching services

        Raises:
            ServiceRegistrationFailed: If no service matches

        """
        pattern = self.config["service_pattern"]
        services = await self.system.query_services(pattern)
        if not services:
            diag_dir = registration.install_dir / RUNNER_DIAG_DIR
            msg = (
                f"No service matching '{pattern}' was registered. "
                f"See the runner logs in {diag_dir}"
            )
            raise ServiceRegistrationFailed(msg)

        logger.info("✅ Runner service registered: %s", ", ".join(services))
        return services

    async def install(
        self, fetch_result: FetchResult, registration: RunnerRegistration
    ) -> list[str]:
        """Extract, hook, configure, verify, and optionally stop.

        Args:
            fetch_result: Verified download of the runner archive
            registration: Registration inputs

        Returns:
            Names of the registered runner services

        """
        target = registration.install_dir
        await self.extract(fetch_result, target)
        await self.install_shutdown_hook(target)
        await self.configure(registration)
        services = await self.verify_service(registration)

        if registration.stop_service:
            for service in services:
                logger.info("⏹️  Stopping %s until next boot", service)
                await self.system.stop_service(service)
        else:
            logger.info("Leaving runner service running")

        return services
