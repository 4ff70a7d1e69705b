"""Pytest configuration and shared fakes for ephemeral-runner tests."""

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

import pytest

# Must be set before the package is imported: module-level loggers set up
# the root file handler on first use.
os.environ.setdefault(
    "EPHEMERAL_RUNNER_LOG_DIR",
    str(Path(tempfile.gettempdir()) / "ephemeral-runner-test-logs"),
)

from ephemeral_runner.core.protocols import ProcessResult  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("ephemeral_runner"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


class RecordingProcessRunner:
    """ProcessRunner stub that records commands and replays results.

    Results are matched by the first argv element containing a key of
    ``results``; anything unmatched exits 0 with empty output.
    """

    def __init__(
        self,
        results: dict[str, ProcessResult] | None = None,
        side_effect=None,
    ) -> None:
        self.commands: list[list[str]] = []
        self.results = results or {}
        self.side_effect = side_effect

    async def run(self, command: Sequence[str]) -> ProcessResult:
        argv = [str(part) for part in command]
        self.commands.append(argv)
        if self.side_effect is not None:
            raise self.side_effect
        for key, result in self.results.items():
            if any(key in part for part in argv):
                return result
        return ProcessResult(command=tuple(argv), returncode=0)


class FakeSystemConfigurator:
    """In-memory SystemConfigurator.

    State lives in dicts and sets so repeated calls can be compared for
    idempotence.
    """

    def __init__(self, services: list[str] | None = None) -> None:
        self.environment: dict[str, str] = {}
        self.registry: dict[tuple[str, str], int] = {}
        self.scan_exclusions: set[str] = set()
        self.services = {name: "Running" for name in services or []}
        self.stopped: list[str] = []
        self.calls: list[str] = []

    async def set_environment_variable(self, name: str, value: str) -> None:
        self.calls.append("set_environment_variable")
        self.environment[name] = value

    async def set_registry_flag(
        self, key: str, name: str, value: int
    ) -> None:
        self.calls.append("set_registry_flag")
        self.registry[(key, name)] = value

    async def add_scan_exclusion(self, path: str) -> None:
        self.calls.append("add_scan_exclusion")
        self.scan_exclusions.add(path)

    async def query_services(self, pattern: str) -> list[str]:
        self.calls.append("query_services")
        prefix = pattern.rstrip("*")
        return [name for name in self.services if name.startswith(prefix)]

    async def stop_service(self, name: str) -> None:
        self.calls.append("stop_service")
        self.services[name] = "Stopped"
        self.stopped.append(name)

    def snapshot(self) -> tuple:
        return (
            dict(self.environment),
            dict(self.registry),
            frozenset(self.scan_exclusions),
            dict(self.services),
        )


@pytest.fixture
def process_runner() -> RecordingProcessRunner:
    """Recording process runner where every command succeeds."""
    return RecordingProcessRunner()


@pytest.fixture
def system() -> FakeSystemConfigurator:
    """Fake system configurator with no services registered."""
    return FakeSystemConfigurator()
