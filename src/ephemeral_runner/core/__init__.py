"""Core provisioning services for ephemeral-runner."""
