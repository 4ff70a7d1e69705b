"""SHA-256 verification of downloaded artifacts."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from ephemeral_runner.exceptions import IntegrityCheckFailed
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024
BYTES_PER_UNIT = 1024.0


def format_bytes(num_bytes: float) -> str:
    """Convert a byte count to a human-readable string.

    Raises ``ValueError`` if the input is negative.
    """
    if num_bytes < 0:
        message = "Byte size cannot be negative"
        raise ValueError(message)

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    unit_index = 0

    while size >= BYTES_PER_UNIT and unit_index < len(units) - 1:
        size /= BYTES_PER_UNIT
        unit_index += 1

    return f"{size:.1f} {units[unit_index]}"


def compute_sha256(file_path: Path) -> str:
    """Return the uppercase SHA-256 hex digest of a file."""
    hasher = hashlib.sha256()
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest().upper()


class Verifier:
    """Verifies a downloaded file against an expected SHA-256 hash."""

    def __init__(self, file_path: Path) -> None:
        """Create verifier for a downloaded file."""
        self.file_path = file_path

    def verify_sha256(self, expected_hash: str) -> str:
        """Verify the file hash, case-insensitively.

        Args:
            expected_hash: Expected SHA-256 hex digest

        Returns:
            The computed uppercase digest

        Raises:
            IntegrityCheckFailed: If the file is missing or the digest
                does not match. The file is left in place for inspection.

        """
        if not self.file_path.is_file():
            message = f"Downloaded file not found: {self.file_path}"
            raise IntegrityCheckFailed(message)

        file_size = self.file_path.stat().st_size
        logger.debug(
            "🧮 Computing SHA-256 for %s (%s)",
            self.file_path.name,
            format_bytes(file_size),
        )
        actual_hash = compute_sha256(self.file_path)

        if actual_hash != expected_hash.upper():
            logger.error("❌ SHA-256 verification FAILED!")
            logger.error("   Expected: %s", expected_hash.upper())
            logger.error("   Actual:   %s", actual_hash)
            logger.error("   File kept for inspection: %s", self.file_path)
            message = (
                f"SHA-256 mismatch for {self.file_path.name}: "
                f"expected {expected_hash.upper()}, got {actual_hash}"
            )
            raise IntegrityCheckFailed(message)

        logger.debug("✅ SHA-256 verification PASSED: %s", actual_hash)
        return actual_hash
