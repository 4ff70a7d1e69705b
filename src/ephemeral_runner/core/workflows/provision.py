"""End-to-end provisioning workflow.

Runs every step once, in order, and stops at the first failure. A
ProvisioningError leaving a step is tagged with that step's name so the
CLI can report where the pipeline stopped.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ephemeral_runner.core.download import DownloadService, VerifiedFetcher
from ephemeral_runner.core.environment import EnvironmentConfigurator
from ephemeral_runner.core.github import ReleaseAsset, ReleaseResolver
from ephemeral_runner.core.install.git import GitInstaller
from ephemeral_runner.core.install.runner import RunnerAgentInstaller
from ephemeral_runner.exceptions import ProvisioningError
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    import aiohttp

    from ephemeral_runner.core.install.runner import RunnerRegistration
    from ephemeral_runner.core.protocols import (
        ProcessRunner,
        SystemConfigurator,
    )
    from ephemeral_runner.types import GlobalConfig

logger = get_logger(__name__)

STEP_CONFIGURE_ENVIRONMENT = "configure-environment"
STEP_RESOLVE_GIT = "resolve-git-release"
STEP_FETCH_GIT = "fetch-git-installer"
STEP_INSTALL_GIT = "install-git"
STEP_FETCH_RUNNER = "fetch-runner-agent"
STEP_INSTALL_RUNNER = "install-runner-agent"

STEPS = (
    STEP_CONFIGURE_ENVIRONMENT,
    STEP_RESOLVE_GIT,
    STEP_FETCH_GIT,
    STEP_INSTALL_GIT,
    STEP_FETCH_RUNNER,
    STEP_INSTALL_RUNNER,
)


@dataclass(slots=True, frozen=True)
class ProvisionResult:
    """Summary of a successful provisioning run.

    Attributes:
        git_executable: Installed git.exe
        services: Registered runner service names

    """

    git_executable: Path
    services: list[str]


class ProvisionWorkflow:
    """Provision a Windows VM as an ephemeral Actions runner."""

    def __init__(
        self,
        config: GlobalConfig,
        resolver: ReleaseResolver,
        fetcher: VerifiedFetcher,
        environment: EnvironmentConfigurator,
        git_installer: GitInstaller,
        runner_installer: RunnerAgentInstaller,
    ) -> None:
        """Initialize workflow with its collaborators.

        Use create() to wire the production collaborators.
        """
        self.config = config
        self.resolver = resolver
        self.fetcher = fetcher
        self.environment = environment
        self.git_installer = git_installer
        self.runner_installer = runner_installer

    @classmethod
    def create(
        cls,
        config: GlobalConfig,
        session: aiohttp.ClientSession,
        process_runner: ProcessRunner,
        system: SystemConfigurator,
    ) -> ProvisionWorkflow:
        """Build a workflow from configuration and OS backends."""
        return cls(
            config=config,
            resolver=ReleaseResolver(
                session, config["network"]["timeout_seconds"]
            ),
            fetcher=VerifiedFetcher(DownloadService(session)),
            environment=EnvironmentConfigurator(
                system, config["environment"]
            ),
            git_installer=GitInstaller(
                process_runner, config["git"]["options"]
            ),
            runner_installer=RunnerAgentInstaller(
                process_runner, system, config["runner"]
            ),
        )

    @asynccontextmanager
    async def _step(self, name: str) -> AsyncIterator[None]:
        index = STEPS.index(name) + 1
        logger.info("[%d/%d] %s", index, len(STEPS), name)
        try:
            yield
        except ProvisioningError as e:
            if e.step is None:
                e.step = name
            logger.debug(
                "Step %s raised %s: %s", e.step, e.kind, e.message
            )
            raise
        logger.debug("Step %s completed", name)

    async def run(self, registration: RunnerRegistration) -> ProvisionResult:
        """Run every provisioning step in order.

        Args:
            registration: Runner registration inputs

        Returns:
            Summary of what was installed

        Raises:
            ProvisioningError: The first failure, tagged with its step

        """
        download_dir = self.config["directory"]["download"]
        git_config = self.config["git"]
        runner_config = self.config["runner"]

        async with self._step(STEP_CONFIGURE_ENVIRONMENT):
            await self.environment.apply()

        async with self._step(STEP_RESOLVE_GIT):
            logger.info("🌐 Fetching Git for Windows release metadata")
            git_asset = await self.resolver.resolve(
                git_config["release_api"], git_config["asset_pattern"]
            )
            logger.info("   Found %s", git_asset.name)

        async with self._step(STEP_FETCH_GIT):
            git_download = await self.fetcher.fetch(
                git_asset, download_dir / git_asset.name
            )

        async with self._step(STEP_INSTALL_GIT):
            git_executable = await self.git_installer.install(git_download)

        async with self._step(STEP_FETCH_RUNNER):
            runner_asset = ReleaseAsset.pinned(
                runner_config["url"], runner_config["sha256"]
            )
            runner_download = await self.fetcher.fetch(
                runner_asset, download_dir / runner_asset.name
            )

        async with self._step(STEP_INSTALL_RUNNER):
            services = await self.runner_installer.install(
                runner_download, registration
            )

        logger.info("🎉 Runner '%s' provisioned", registration.name)
        return ProvisionResult(
            git_executable=git_executable, services=services
        )
