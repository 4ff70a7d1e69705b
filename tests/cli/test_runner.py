"""Tests for CLIRunner wiring."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ephemeral_runner.cli import runner as cli_runner
from ephemeral_runner.core.install.runner import RunnerRegistration
from ephemeral_runner.exceptions import InvalidSettings
from ephemeral_runner.infrastructure.process import AsyncProcessRunner
from ephemeral_runner.infrastructure.windows import (
    PowerShellSystemConfigurator,
)


@pytest.fixture
def argv(tmp_path: Path) -> list[str]:
    return [
        "--token",
        "tok",
        "--url",
        "https://github.com/my-org",
        "--name",
        "vm-01",
        "--path",
        str(tmp_path / "runner"),
        "--no-stop-service",
        "--config",
        str(tmp_path / "missing.conf"),
    ]


def test_init_loads_settings_and_updates_logger(argv: list[str]) -> None:
    with patch.object(cli_runner, "update_logger_from_config") as update:
        runner = cli_runner.CLIRunner(argv)

    assert runner.settings_manager.settings_file == Path(argv[-1])
    update.assert_called_once_with(runner.global_config)


def test_build_registration(argv: list[str], tmp_path: Path) -> None:
    runner = cli_runner.CLIRunner(argv)

    assert runner.build_registration() == RunnerRegistration(
        url="https://github.com/my-org",
        token="tok",
        name="vm-01",
        install_dir=tmp_path / "runner",
        labels="self-hosted,windows,x64,ephemeral",
        stop_service=False,
    )


def test_invalid_settings_raise_invalid_settings(tmp_path: Path) -> None:
    settings = tmp_path / "bad.conf"
    settings.write_text("[network]\ntimeout_seconds = x\n", encoding="utf-8")

    with pytest.raises(InvalidSettings, match="timeout_seconds") as exc:
        cli_runner.CLIRunner(
            [
                "--token",
                "t",
                "--url",
                "u",
                "--name",
                "n",
                "--path",
                str(tmp_path),
                "--config",
                str(settings),
            ]
        )

    assert isinstance(exc.value.__cause__, ValueError)
    assert exc.value.step is None


async def test_run_wires_workflow(argv: list[str]) -> None:
    runner = cli_runner.CLIRunner(argv)
    workflow = MagicMock()
    workflow.run = AsyncMock(return_value="result")

    with patch.object(
        cli_runner.ProvisionWorkflow, "create", return_value=workflow
    ) as create:
        result = await runner.run()

    assert result == "result"
    config, session, process_runner, system = create.call_args.args
    assert config is runner.global_config
    assert isinstance(process_runner, AsyncProcessRunner)
    assert process_runner._redact == ("tok",)
    assert isinstance(system, PowerShellSystemConfigurator)
    registration = workflow.run.await_args.args[0]
    assert registration.token == "tok"
