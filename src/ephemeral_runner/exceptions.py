"""Exception classes for ephemeral-runner provisioning.

Every failure in the provisioning pipeline is terminal: nothing is
retried. Each error carries the name of the pipeline step it escaped
from, so the CLI can report failure kind, message, and step together.
"""

from ephemeral_runner.constants import (
    EXIT_FAILURE,
    EXIT_SERVICE_REGISTRATION_FAILED,
)


class ProvisioningError(Exception):
    """Base exception for ephemeral-runner operations."""

    error_prefix: str = "Provisioning failed"
    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, step: str | None = None) -> None:
        """Initialize error with message and optional step name.

        Args:
            message: Error message describing the failure.
            step: Optional name of the pipeline step that failed.

        """
        super().__init__(message)
        self.message = message
        self.step = step

    @property
    def kind(self) -> str:
        """Return the failure kind reported to the user."""
        return type(self).__name__

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.step:
            return f"{self.error_prefix} [{self.step}]: {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ResolutionFailed(ProvisioningError):
    """Raised when the release metadata endpoint cannot be read."""

    error_prefix = "Release resolution failed"


class AssetNotFound(ProvisioningError):
    """Raised when no release asset matches the requested pattern."""

    error_prefix = "Release asset not found"


class HashNotFound(ProvisioningError):
    """Raised when no SHA-256 hash is published for the asset."""

    error_prefix = "Release hash not found"


class DownloadError(ProvisioningError):
    """Raised when an artifact download fails."""

    error_prefix = "Download failed"


class IntegrityCheckFailed(ProvisioningError):
    """Raised when a downloaded artifact fails hash verification."""

    error_prefix = "Integrity check failed"


class InstallerFailed(ProvisioningError):
    """Raised when an installer, extractor, or configurator fails."""

    error_prefix = "Installation failed"


class SystemConfigurationError(ProvisioningError):
    """Raised when an OS-level configuration command fails."""

    error_prefix = "System configuration failed"


class ServiceRegistrationFailed(ProvisioningError):
    """Raised when the runner service cannot be found after setup."""

    error_prefix = "Runner service registration failed"
    exit_code = EXIT_SERVICE_REGISTRATION_FAILED


class InvalidSettings(ProvisioningError):
    """Raised when the settings file holds an invalid value."""

    error_prefix = "Invalid settings"
