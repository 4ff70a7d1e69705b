"""Tests for the PowerShell-backed SystemConfigurator."""

import pytest

from ephemeral_runner.core.protocols import ProcessResult, SystemConfigurator
from ephemeral_runner.exceptions import SystemConfigurationError
from ephemeral_runner.infrastructure.windows import (
    PowerShellSystemConfigurator,
    powershell_command,
    ps_quote,
)
from tests.conftest import RecordingProcessRunner


def _script(runner: RecordingProcessRunner) -> str:
    argv = runner.commands[-1]
    assert argv[0] == "powershell.exe"
    assert argv[-2] == "-Command"
    return argv[-1]


def test_ps_quote_escapes_single_quotes() -> None:
    assert ps_quote("it's") == "'it''s'"


def test_powershell_command_stops_on_error() -> None:
    argv = powershell_command("Get-Date")
    assert "-NonInteractive" in argv
    assert argv[-1] == "$ErrorActionPreference = 'Stop'; Get-Date"


def test_satisfies_protocol(process_runner) -> None:
    assert isinstance(
        PowerShellSystemConfigurator(process_runner), SystemConfigurator
    )


async def test_set_environment_variable(process_runner) -> None:
    await PowerShellSystemConfigurator(
        process_runner
    ).set_environment_variable("HOOK", r"C:\runner\hook.ps1")

    assert _script(process_runner).endswith(
        "[Environment]::SetEnvironmentVariable("
        r"'HOOK', 'C:\runner\hook.ps1', 'Machine')"
    )


async def test_set_registry_flag_creates_key(process_runner) -> None:
    await PowerShellSystemConfigurator(process_runner).set_registry_flag(
        r"HKLM:\SOFTWARE\Test", "Flag", 1
    )

    script = _script(process_runner)
    assert r"New-Item -Path 'HKLM:\SOFTWARE\Test' -Force" in script
    assert "-Name 'Flag' -Value 1 -PropertyType DWord -Force" in script


async def test_add_scan_exclusion(process_runner) -> None:
    await PowerShellSystemConfigurator(process_runner).add_scan_exclusion(
        "C:\\"
    )

    assert _script(process_runner).endswith(
        "Add-MpPreference -ExclusionPath 'C:\\'"
    )


async def test_query_services_parses_names() -> None:
    runner = RecordingProcessRunner(
        results={
            "powershell.exe": ProcessResult(
                command=(),
                returncode=0,
                stdout=(
                    "actions.runner.org.vm1\r\n\r\n"
                    "actions.runner.org.vm2\r\n"
                ),
            )
        }
    )

    services = await PowerShellSystemConfigurator(runner).query_services(
        "actions.runner.*"
    )

    assert services == ["actions.runner.org.vm1", "actions.runner.org.vm2"]
    assert "Get-Service -Name 'actions.runner.*'" in _script(runner)


async def test_query_services_none(process_runner) -> None:
    services = await PowerShellSystemConfigurator(
        process_runner
    ).query_services("actions.runner.*")

    assert services == []


async def test_stop_service(process_runner) -> None:
    await PowerShellSystemConfigurator(process_runner).stop_service("svc")

    assert _script(process_runner).endswith("Stop-Service -Name 'svc' -Force")


async def test_nonzero_exit_raises() -> None:
    runner = RecordingProcessRunner(
        results={
            "powershell.exe": ProcessResult(
                command=(), returncode=1, stderr="Access is denied."
            )
        }
    )

    with pytest.raises(SystemConfigurationError, match="Access is denied"):
        await PowerShellSystemConfigurator(runner).add_scan_exclusion("C:\\")


async def test_powershell_missing_raises() -> None:
    runner = RecordingProcessRunner(side_effect=FileNotFoundError("nope"))

    with pytest.raises(SystemConfigurationError, match="could not start"):
        await PowerShellSystemConfigurator(runner).stop_service("svc")
