"""Command-line interface for ephemeral-runner."""

from ephemeral_runner.cli.parser import CLIParser
from ephemeral_runner.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
