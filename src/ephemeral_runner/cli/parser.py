"""CLI argument parser for ephemeral-runner.

One flat command: every run provisions the whole VM, so there are no
subcommands.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path

from ephemeral_runner import __version__


class CLIParser:
    """Command-line argument parser for ephemeral-runner."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:])

        Returns:
            Parsed arguments namespace

        """
        parser = self._create_main_parser()
        self._add_registration_options(parser)
        self._add_global_options(parser)
        return parser.parse_args(argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="ephemeral-runner",
            description=(
                "Provision a Windows VM as an ephemeral GitHub Actions "
                "runner"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Register against an organization and stop the service until next boot
  %(prog)s --url https://github.com/my-org --token AAAA... \\
      --name build-vm-01 --path C:\\actions-runner

  # Keep the service running after registration
  %(prog)s --url https://github.com/my-org/my-repo --token AAAA... \\
      --name build-vm-02 --path C:\\actions-runner --no-stop-service
            """,
        )

    def _add_registration_options(
        self, parser: argparse.ArgumentParser
    ) -> None:
        """Add the runner registration inputs."""
        parser.add_argument(
            "--token",
            required=True,
            help="One-time runner registration token",
        )
        parser.add_argument(
            "--url",
            required=True,
            help="Organization or repository URL to register with",
        )
        parser.add_argument(
            "--name",
            required=True,
            help="Runner name, unique within the organization or repository",
        )
        parser.add_argument(
            "--path",
            required=True,
            type=Path,
            help="Directory to extract the runner into",
        )
        parser.add_argument(
            "--stop-service",
            action=argparse.BooleanOptionalAction,
            default=True,
            help="Stop the runner service after registration",
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        """Add the settings file and version flags."""
        parser.add_argument(
            "--config",
            type=Path,
            default=None,
            help="Settings file (INI) overriding the built-in defaults",
        )
        # Exits before required options are checked
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}",
        )
