"""Subprocess capability used by installers and OS configuration.

Installers, the archive extractor's callers, and the PowerShell-backed
system configurator all go through ProcessRunner, so tests can swap in a
recording stub and assert on commands and exit-code handling.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class ProcessResult:
    """Outcome of a finished subprocess.

    Attributes:
        command: The argv that was executed
        returncode: Process exit code
        stdout: Decoded standard output
        stderr: Decoded standard error

    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return True if the process exited with code 0."""
        return self.returncode == 0

    def describe_failure(self) -> str:
        """Summarize a failed run for an error message."""
        detail = (self.stderr or self.stdout).strip()
        summary = f"exit code {self.returncode}"
        if detail:
            summary += f": {detail.splitlines()[-1]}"
        return summary


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs an external command to completion."""

    async def run(self, command: Sequence[str]) -> ProcessResult:
        """Run command and wait for it to exit.

        Implementations must not raise for a non-zero exit code; callers
        inspect ProcessResult.returncode.
        """
        ...
