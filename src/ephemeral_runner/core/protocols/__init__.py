"""Protocols decoupling core services from the operating system."""

from ephemeral_runner.core.protocols.process import (
    ProcessResult,
    ProcessRunner,
)
from ephemeral_runner.core.protocols.system import SystemConfigurator

__all__ = ["ProcessResult", "ProcessRunner", "SystemConfigurator"]
