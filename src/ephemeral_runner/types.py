"""Typed configuration structures for ephemeral-runner.

The INI settings file is parsed into these TypedDicts so every consumer
sees already-validated, correctly typed values.
"""

from pathlib import Path
from typing import TypedDict

from ephemeral_runner.core.install.options import GitInstallOptions


class NetworkConfig(TypedDict):
    """Network configuration options."""

    timeout_seconds: int


class DirectoryConfig(TypedDict):
    """Directory paths configuration."""

    download: Path
    logs: Path


class GitConfig(TypedDict):
    """Git for Windows release and installer configuration."""

    release_api: str
    asset_pattern: str
    options: GitInstallOptions


class RunnerConfig(TypedDict):
    """GitHub Actions runner configuration."""

    version: str
    url: str
    sha256: str
    labels: str
    service_pattern: str
    hook_env_var: str
    shutdown_delay_seconds: int
    shutdown_reason: str


class EnvironmentConfig(TypedDict):
    """OS toggles applied before installation."""

    developer_mode: bool
    scan_exclusion: bool
    scan_exclusion_path: str


class GlobalConfig(TypedDict):
    """Global application configuration."""

    log_level: str
    console_log_level: str
    network: NetworkConfig
    directory: DirectoryConfig
    git: GitConfig
    runner: RunnerConfig
    environment: EnvironmentConfig
