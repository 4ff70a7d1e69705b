"""CLI runner for ephemeral-runner.

Composition root: loads settings, wires the OS backends and the HTTP
session into the provisioning workflow, and runs it once.
"""

from argparse import Namespace
from collections.abc import Sequence

from ephemeral_runner.cli.parser import CLIParser
from ephemeral_runner.config import SettingsManager
from ephemeral_runner.core.http_session import create_http_session
from ephemeral_runner.core.install.runner import RunnerRegistration
from ephemeral_runner.core.workflows import (
    ProvisionResult,
    ProvisionWorkflow,
)
from ephemeral_runner.exceptions import InvalidSettings
from ephemeral_runner.infrastructure.process import AsyncProcessRunner
from ephemeral_runner.infrastructure.windows import (
    PowerShellSystemConfigurator,
)
from ephemeral_runner.logger import get_logger, update_logger_from_config

logger = get_logger(__name__)


class CLIRunner:
    """Parses arguments and runs the provisioning workflow."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        """Parse arguments and load configuration.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:])

        Raises:
            InvalidSettings: If the settings file holds an invalid value

        """
        self.args: Namespace = CLIParser().parse_args(argv)
        self.settings_manager = SettingsManager(self.args.config)
        try:
            self.global_config = self.settings_manager.load_global_config()
        except ValueError as e:
            raise InvalidSettings(str(e)) from e
        update_logger_from_config(self.global_config)

    def build_registration(self) -> RunnerRegistration:
        """Build the registration inputs from parsed arguments."""
        return RunnerRegistration(
            url=self.args.url,
            token=self.args.token,
            name=self.args.name,
            install_dir=self.args.path,
            labels=self.global_config["runner"]["labels"],
            stop_service=self.args.stop_service,
        )

    async def run(self) -> ProvisionResult:
        """Provision this machine.

        Returns:
            Summary of the provisioning run

        Raises:
            ProvisioningError: If any step fails

        """
        registration = self.build_registration()
        logger.debug("Starting provisioning: %r", registration)

        process_runner = AsyncProcessRunner(redact=(registration.token,))
        system = PowerShellSystemConfigurator(process_runner)

        async with create_http_session(
            self.global_config["network"]
        ) as session:
            workflow = ProvisionWorkflow.create(
                self.global_config, session, process_runner, system
            )
            return await workflow.run(registration)
