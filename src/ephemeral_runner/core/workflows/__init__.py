"""Provisioning workflows."""

from ephemeral_runner.core.workflows.provision import (
    ProvisionResult,
    ProvisionWorkflow,
)

__all__ = ["ProvisionResult", "ProvisionWorkflow"]
