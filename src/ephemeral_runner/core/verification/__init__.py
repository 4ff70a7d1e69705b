"""Integrity verification for downloaded artifacts."""

from ephemeral_runner.core.verification.verifier import (
    Verifier,
    compute_sha256,
    format_bytes,
)

__all__ = ["Verifier", "compute_sha256", "format_bytes"]
