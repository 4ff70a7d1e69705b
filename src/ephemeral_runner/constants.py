"""Centralized constants module for ephemeral-runner.

Single source of truth for shared constants: configuration keys and
defaults, GitHub API details, Git for Windows and Actions runner
defaults, and logging formats. Constants use typing.Final annotations.

Usage:
    from ephemeral_runner.constants import GITHUB_API_VERSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_FILE_NAME: Final[str] = "settings.conf"
APP_DIR_NAME: Final[str] = "ephemeral-runner"

DEFAULT_LOG_LEVEL: Final[str] = "DEBUG"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_DIRECTORY: Final[str] = "directory"
SECTION_GIT: Final[str] = "git"
SECTION_RUNNER: Final[str] = "runner"
SECTION_ENVIRONMENT: Final[str] = "environment"

KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_TIMEOUT_SECONDS: Final[str] = "timeout_seconds"

# =============================================================================
# GitHub API Constants
# =============================================================================

GITHUB_ACCEPT_HEADER: Final[str] = "application/vnd.github.v3+json"
GITHUB_API_VERSION_HEADER: Final[str] = "X-GitHub-Api-Version"
GITHUB_API_VERSION: Final[str] = "2022-11-28"

SHA256_HEX_LENGTH: Final[int] = 64

# =============================================================================
# Git for Windows Constants
# =============================================================================

GIT_RELEASE_API: Final[str] = (
    "https://api.github.com/repos/git-for-windows/git/releases/latest"
)
GIT_ASSET_PATTERN: Final[str] = "Git-*-64-bit.exe"
GIT_INSTALL_DIR: Final[str] = r"C:\Program Files\Git"

# Inno Setup switches: no UI, no reboot, no cancel, no "this will install"
# prompt. The answer file is appended as /LOADINF=<path>.
GIT_INSTALLER_FLAGS: Final[tuple[str, ...]] = (
    "/VERYSILENT",
    "/NORESTART",
    "/NOCANCEL",
    "/SP-",
)

# =============================================================================
# GitHub Actions Runner Constants
# =============================================================================

RUNNER_VERSION: Final[str] = "2.317.0"
RUNNER_URL_TEMPLATE: Final[str] = (
    "https://github.com/actions/runner/releases/download/"
    "v{version}/actions-runner-win-x64-{version}.zip"
)
# Must be bumped together with RUNNER_VERSION.
RUNNER_SHA256: Final[str] = (
    "a74dcd1612476eaf4b11c15b3db5a43a4f459c1d3c1807f8148aeb9530d69826"
)
RUNNER_LABELS: Final[str] = "self-hosted,windows,x64,ephemeral"
RUNNER_SERVICE_PATTERN: Final[str] = "actions.runner.*"
RUNNER_HOOK_ENV_VAR: Final[str] = "ACTIONS_RUNNER_HOOK_JOB_COMPLETED"
RUNNER_HOOK_SCRIPT_NAME: Final[str] = "shutdown_hook.ps1"
RUNNER_CONFIG_SCRIPT: Final[str] = "config.cmd"
RUNNER_DIAG_DIR: Final[str] = "_diag"
SHUTDOWN_DELAY_SECONDS: Final[int] = 60
SHUTDOWN_REASON: Final[str] = (
    "Ephemeral runner job completed, shutting down"
)

# =============================================================================
# Windows Environment Constants
# =============================================================================

DEVELOPER_MODE_KEY: Final[str] = (
    r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\AppModelUnlock"
)
DEVELOPER_MODE_VALUE: Final[str] = "AllowDevelopmentWithoutDevLicense"
DEFAULT_SCAN_EXCLUSION_PATH: Final[str] = "C:\\"

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_SERVICE_REGISTRATION_FAILED: Final[int] = 2

# =============================================================================
# Logging Constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "ephemeral-runner.log"
LOG_DIR_ENV_VAR: Final[str] = "EPHEMERAL_RUNNER_LOG_DIR"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 5

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
