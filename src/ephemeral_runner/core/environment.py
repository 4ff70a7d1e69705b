"""OS toggles applied before anything is installed.

Developer mode lets the runner user create symlinks without elevation;
the scan exclusion keeps Defender out of the way of installs and builds.
Both settings are idempotent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ephemeral_runner.constants import (
    DEVELOPER_MODE_KEY,
    DEVELOPER_MODE_VALUE,
)
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from ephemeral_runner.core.protocols import SystemConfigurator
    from ephemeral_runner.types import EnvironmentConfig

logger = get_logger(__name__)


class EnvironmentConfigurator:
    """Apply developer mode and the malware-scan exclusion."""

    def __init__(
        self,
        system: SystemConfigurator,
        config: EnvironmentConfig,
    ) -> None:
        """Initialize configurator.

        Args:
            system: Machine configuration backend
            config: Environment section of the global configuration

        """
        self.system = system
        self.config = config

    async def enable_developer_mode(self) -> None:
        """Turn on Windows developer mode."""
        logger.info("🛠️  Enabling Windows developer mode")
        await self.system.set_registry_flag(
            DEVELOPER_MODE_KEY, DEVELOPER_MODE_VALUE, 1
        )

    async def exclude_from_scanning(self) -> None:
        """Exclude the configured path from on-access scanning."""
        path = self.config["scan_exclusion_path"]
        logger.info("🛡️  Excluding %s from Defender scanning", path)
        await self.system.add_scan_exclusion(path)

    async def apply(self) -> None:
        """Apply every enabled setting.

        Raises:
            SystemConfigurationError: If a setting cannot be applied

        """
        if self.config["developer_mode"]:
            await self.enable_developer_mode()
        else:
            logger.debug("Developer mode disabled in configuration")

        if self.config["scan_exclusion"]:
            await self.exclude_from_scanning()
        else:
            logger.debug("Scan exclusion disabled in configuration")
