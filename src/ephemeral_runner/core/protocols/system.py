"""Interface to machine-wide OS state.

Environment variables, the registry, Defender preferences, and the
service manager are global mutable state; SystemConfigurator is the only
way the pipeline touches them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SystemConfigurator(Protocol):
    """Machine-level configuration operations.

    Every method raises SystemConfigurationError when the underlying
    operation fails. Repeating a set/add call with the same arguments is
    a no-op.
    """

    async def set_environment_variable(self, name: str, value: str) -> None:
        """Set a machine-wide environment variable."""
        ...

    async def set_registry_flag(
        self, key: str, name: str, value: int
    ) -> None:
        """Create or overwrite a DWORD registry value."""
        ...

    async def add_scan_exclusion(self, path: str) -> None:
        """Exclude path from on-access malware scanning."""
        ...

    async def query_services(self, pattern: str) -> list[str]:
        """Return names of services matching a wildcard pattern."""
        ...

    async def stop_service(self, name: str) -> None:
        """Stop a service."""
        ...
