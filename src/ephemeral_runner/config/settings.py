"""Settings manager for the optional INI configuration file.

Defaults cover a complete run; a user ``settings.conf`` only needs the
keys it wants to change. Values are validated and converted into a typed
GlobalConfig when loaded.
"""

import configparser
import re
from pathlib import Path

from ephemeral_runner.config.paths import Paths
from ephemeral_runner.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SCAN_EXCLUSION_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    GIT_ASSET_PATTERN,
    GIT_RELEASE_API,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_TIMEOUT_SECONDS,
    RUNNER_HOOK_ENV_VAR,
    RUNNER_LABELS,
    RUNNER_SERVICE_PATTERN,
    RUNNER_SHA256,
    RUNNER_URL_TEMPLATE,
    RUNNER_VERSION,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_ENVIRONMENT,
    SECTION_GIT,
    SECTION_NETWORK,
    SECTION_RUNNER,
    SHA256_HEX_LENGTH,
    SHUTDOWN_DELAY_SECONDS,
    SHUTDOWN_REASON,
)
from ephemeral_runner.core.install.options import GitInstallOptions
from ephemeral_runner.logger import get_logger
from ephemeral_runner.types import (
    DirectoryConfig,
    EnvironmentConfig,
    GitConfig,
    GlobalConfig,
    NetworkConfig,
    RunnerConfig,
)

logger = get_logger(__name__)

SHA256_HEX_RE = re.compile(rf"[0-9a-fA-F]{{{SHA256_HEX_LENGTH}}}")
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class SettingsManager:
    """Loads ephemeral-runner settings from an INI file."""

    def __init__(self, settings_file: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            settings_file: INI file to read (defaults to
                Paths.settings_file()). A missing file means defaults.

        """
        self.settings_file = settings_file or Paths.settings_file()

    def get_default_config(self) -> RawConfigDict:
        """Get default configuration values as raw INI strings."""
        git_defaults = GitInstallOptions()
        return {
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {
                KEY_TIMEOUT_SECONDS: str(DEFAULT_TIMEOUT_SECONDS),
            },
            SECTION_DIRECTORY: {
                "download": str(Paths.download_dir()),
                "logs": str(Paths.logs_dir()),
            },
            SECTION_GIT: {
                "release_api": GIT_RELEASE_API,
                "asset_pattern": GIT_ASSET_PATTERN,
                "install_dir": git_defaults.install_dir,
                "path_option": git_defaults.path_option.value,
                "editor": git_defaults.editor.value,
                "crlf": git_defaults.crlf.value,
                "symlinks": git_defaults.symlinks.value,
                "credential_manager": git_defaults.credential_manager.value,
                "ssh": git_defaults.ssh.value,
                "default_branch": git_defaults.default_branch.value,
                "pull_behavior": git_defaults.pull_behavior.value,
                "terminal": git_defaults.terminal.value,
            },
            SECTION_RUNNER: {
                "version": RUNNER_VERSION,
                "url_template": RUNNER_URL_TEMPLATE,
                "sha256": RUNNER_SHA256,
                "labels": RUNNER_LABELS,
                "service_pattern": RUNNER_SERVICE_PATTERN,
                "hook_env_var": RUNNER_HOOK_ENV_VAR,
                "shutdown_delay_seconds": str(SHUTDOWN_DELAY_SECONDS),
                "shutdown_reason": SHUTDOWN_REASON,
            },
            SECTION_ENVIRONMENT: {
                "developer_mode": "true",
                "scan_exclusion": "true",
                "scan_exclusion_path": DEFAULT_SCAN_EXCLUSION_PATH,
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser populated with defaults.

        Args:
            defaults: Default configuration values

        Returns:
            ConfigParser populated with defaults

        """
        config = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

        flat_defaults = {
            key: value
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, subvalue)

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load configuration, overlaying the settings file on defaults.

        Returns:
            Validated global configuration

        Raises:
            ValueError: If a configured value is invalid

        """
        config = self._create_config_from_defaults(self.get_default_config())

        if self.settings_file.exists():
            logger.debug("Reading settings from %s", self.settings_file)
            config.read(self.settings_file, encoding="utf-8")
        else:
            logger.debug(
                "No settings file at %s, using defaults", self.settings_file
            )

        return self._convert_to_global_config(config)

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        """Convert ConfigParser to a typed GlobalConfig."""
        defaults = config[SECTION_DEFAULT]
        log_level = _parse_log_level(defaults.get(KEY_LOG_LEVEL, ""))
        console_log_level = _parse_log_level(
            defaults.get(KEY_CONSOLE_LOG_LEVEL, "")
        )

        network = NetworkConfig(
            timeout_seconds=_parse_positive_int(
                config[SECTION_NETWORK], KEY_TIMEOUT_SECONDS
            ),
        )

        directory_section = config[SECTION_DIRECTORY]
        directory = DirectoryConfig(
            download=Path(directory_section["download"]).expanduser(),
            logs=Path(directory_section["logs"]).expanduser(),
        )

        git_section = config[SECTION_GIT]
        option_names = {
            name
            for name in self.get_default_config()[SECTION_GIT]
            if name not in {"release_api", "asset_pattern"}
        }
        git = GitConfig(
            release_api=git_section["release_api"],
            asset_pattern=git_section["asset_pattern"],
            options=GitInstallOptions.from_mapping(
                {name: git_section[name] for name in option_names}
            ),
        )

        runner_section = config[SECTION_RUNNER]
        version = runner_section["version"]
        sha256 = runner_section["sha256"].strip()
        if not SHA256_HEX_RE.fullmatch(sha256):
            msg = f"[runner] sha256 is not a SHA-256 hex digest: {sha256!r}"
            raise ValueError(msg)
        runner = RunnerConfig(
            version=version,
            url=runner_section["url_template"].format(version=version),
            sha256=sha256,
            labels=runner_section["labels"],
            service_pattern=runner_section["service_pattern"],
            hook_env_var=runner_section["hook_env_var"],
            shutdown_delay_seconds=_parse_positive_int(
                runner_section, "shutdown_delay_seconds"
            ),
            shutdown_reason=runner_section["shutdown_reason"],
        )

        environment_section = config[SECTION_ENVIRONMENT]
        environment = EnvironmentConfig(
            developer_mode=environment_section.getboolean("developer_mode"),
            scan_exclusion=environment_section.getboolean("scan_exclusion"),
            scan_exclusion_path=environment_section["scan_exclusion_path"],
        )

        return GlobalConfig(
            log_level=log_level,
            console_log_level=console_log_level,
            network=network,
            directory=directory,
            git=git,
            runner=runner,
            environment=environment,
        )


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in VALID_LOG_LEVELS:
        msg = f"Invalid log level: {value!r}"
        raise ValueError(msg)
    return level


def _parse_positive_int(section: configparser.SectionProxy, key: str) -> int:
    raw = section.get(key, "")
    try:
        value = int(raw)
    except ValueError as e:
        msg = f"[{section.name}] {key} must be an integer, got {raw!r}"
        raise ValueError(msg) from e
    if value <= 0:
        msg = f"[{section.name}] {key} must be positive, got {value}"
        raise ValueError(msg)
    return value

