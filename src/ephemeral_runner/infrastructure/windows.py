"""PowerShell-backed SystemConfigurator for Windows hosts.

Each operation is a single ``powershell -Command`` invocation through a
ProcessRunner. ``$ErrorActionPreference = 'Stop'`` turns any cmdlet
error into a non-zero exit code, which is reported as
SystemConfigurationError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ephemeral_runner.exceptions import SystemConfigurationError
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from ephemeral_runner.core.protocols import ProcessResult, ProcessRunner

logger = get_logger(__name__)

POWERSHELL = "powershell.exe"


def ps_quote(value: str) -> str:
    """Quote value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def powershell_command(script: str) -> list[str]:
    """Build the argv for a non-interactive PowerShell script."""
    return [
        POWERSHELL,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-Command",
        f"$ErrorActionPreference = 'Stop'; {script}",
    ]


class PowerShellSystemConfigurator:
    """SystemConfigurator implemented with PowerShell cmdlets."""

    def __init__(self, runner: ProcessRunner) -> None:
        """Initialize configurator.

        Args:
            runner: Process runner used to invoke PowerShell

        """
        self._runner = runner

    async def _run_and_check(
        self, script: str, action: str
    ) -> ProcessResult:
        try:
            result = await self._runner.run(powershell_command(script))
        except OSError as e:
            msg = f"{action}: could not start PowerShell ({e})"
            raise SystemConfigurationError(msg) from e
        if not result.ok:
            msg = f"{action} failed with {result.describe_failure()}"
            raise SystemConfigurationError(msg)
        return result

    async def set_environment_variable(self, name: str, value: str) -> None:
        """Set a machine-scope environment variable."""
        logger.debug("Setting machine environment variable %s", name)
        await self._run_and_check(
            "[Environment]::SetEnvironmentVariable("
            f"{ps_quote(name)}, {ps_quote(value)}, 'Machine')",
            f"Setting environment variable {name}",
        )

    async def set_registry_flag(
        self, key: str, name: str, value: int
    ) -> None:
        """Create the key if needed and write a DWORD value."""
        logger.debug("Setting registry value %s\\%s = %d", key, name, value)
        quoted_key = ps_quote(key)
        await self._run_and_check(
            f"if (-not (Test-Path -Path {quoted_key})) "
            f"{{ New-Item -Path {quoted_key} -Force | Out-Null }}; "
            f"New-ItemProperty -Path {quoted_key} -Name {ps_quote(name)} "
            f"-Value {int(value)} -PropertyType DWord -Force | Out-Null",
            f"Setting registry value {name}",
        )

    async def add_scan_exclusion(self, path: str) -> None:
        """Add a Microsoft Defender path exclusion."""
        logger.debug("Adding Defender exclusion for %s", path)
        await self._run_and_check(
            f"Add-MpPreference -ExclusionPath {ps_quote(path)}",
            f"Adding scan exclusion for {path}",
        )

    async def query_services(self, pattern: str) -> list[str]:
        """Return the names of services matching a wildcard pattern."""
        result = await self._run_and_check(
            f"Get-Service -Name {ps_quote(pattern)} "
            "-ErrorAction SilentlyContinue | "
            "ForEach-Object { $_.Name }",
            f"Querying services matching {pattern}",
        )
        return [
            line.strip() for line in result.stdout.splitlines() if line.strip()
        ]

    async def stop_service(self, name: str) -> None:
        """Stop a service and wait for it to reach the stopped state."""
        logger.debug("Stopping service %s", name)
        await self._run_and_check(
            f"Stop-Service -Name {ps_quote(name)} -Force",
            f"Stopping service {name}",
        )
