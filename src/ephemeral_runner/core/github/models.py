"""GitHub release data models."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlparse

from ephemeral_runner.constants import SHA256_HEX_LENGTH
from ephemeral_runner.exceptions import HashNotFound, IntegrityCheckFailed

SHA256_HEX_RE = re.compile(rf"[0-9a-fA-F]{{{SHA256_HEX_LENGTH}}}")


@dataclass(slots=True, frozen=True)
class Asset:
    """A file attached to a GitHub release.

    Attributes:
        name: Asset filename
        browser_download_url: Direct download URL for the asset

    """

    name: str
    browser_download_url: str

    @classmethod
    def from_api_response(cls, asset_data: Any) -> Asset | None:
        """Create Asset from GitHub API response data.

        Args:
            asset_data: Raw asset entry from the ``assets`` array

        Returns:
            Asset instance or None if required fields are missing

        """
        if not isinstance(asset_data, dict):
            return None
        name = asset_data.get("name")
        download_url = asset_data.get("browser_download_url")
        if not isinstance(name, str) or not isinstance(download_url, str):
            return None
        if not name or not download_url:
            return None
        return cls(name=name, browser_download_url=download_url)


@dataclass(slots=True, frozen=True)
class Release:
    """The parts of a GitHub release the resolver needs.

    Attributes:
        assets: Release assets in API order
        body: Free-text release notes

    """

    assets: tuple[Asset, ...]
    body: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Release:
        """Create Release from a GitHub release JSON object.

        Malformed asset entries are skipped; a missing body becomes "".
        """
        raw_assets = data.get("assets") or []
        if not isinstance(raw_assets, list):
            raw_assets = []
        assets = tuple(
            asset
            for asset in (Asset.from_api_response(a) for a in raw_assets)
            if asset is not None
        )
        body = data.get("body")
        return cls(assets=assets, body=body if isinstance(body, str) else "")


@dataclass(slots=True, frozen=True)
class ReleaseAsset:
    """A resolved, downloadable artifact with its expected SHA-256 hash.

    Attributes:
        name: Asset filename
        download_url: URL to download the asset from
        expected_hash: Uppercase SHA-256 hex digest

    Raises:
        HashNotFound: If expected_hash is not a 64-character hex digest

    """

    name: str
    download_url: str
    expected_hash: str

    def __post_init__(self) -> None:
        """Validate and normalize the expected hash."""
        if not SHA256_HEX_RE.fullmatch(self.expected_hash):
            msg = (
                f"'{self.expected_hash}' is not a SHA-256 hex digest "
                f"for {self.name}"
            )
            raise HashNotFound(msg)
        object.__setattr__(self, "expected_hash", self.expected_hash.upper())

    @classmethod
    def pinned(cls, url: str, sha256: str) -> ReleaseAsset:
        """Build an asset whose hash is pinned in configuration.

        The asset name is the last segment of the URL path.
        """
        name = PurePosixPath(urlparse(url).path).name
        return cls(name=name, download_url=url, expected_hash=sha256)


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Outcome of a verified download.

    Attributes:
        local_path: Where the artifact was written
        verified: True once the SHA-256 hash matched

    """

    local_path: Path
    verified: bool

    def verified_path(self) -> Path:
        """Return local_path, refusing anything not hash-verified.

        Raises:
            IntegrityCheckFailed: If the artifact was not verified

        """
        if not self.verified:
            msg = f"Refusing to use unverified artifact {self.local_path}"
            raise IntegrityCheckFailed(msg)
        return self.local_path
