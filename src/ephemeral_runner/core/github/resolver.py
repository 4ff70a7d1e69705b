"""Release resolution: pick an asset and find its published SHA-256.

Git for Windows publishes hashes in the release notes rather than as a
checksum asset, as a Markdown table such as::

    Filename | SHA-256
    -------- | -------
    Git-2.44.0-64-bit.exe | 0f9a1e...

extract_hash() is a pure function over that text.
"""

from __future__ import annotations

import fnmatch
import re
from typing import TYPE_CHECKING

from ephemeral_runner.constants import DEFAULT_TIMEOUT_SECONDS
from ephemeral_runner.core.github.client import ReleaseAPIClient
from ephemeral_runner.core.github.models import Asset, Release, ReleaseAsset
from ephemeral_runner.exceptions import AssetNotFound, HashNotFound
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    import aiohttp

logger = get_logger(__name__)

AssetPattern = str | re.Pattern[str]


def matches_pattern(name: str, pattern: AssetPattern) -> bool:
    """Check an asset name against a glob string or compiled regex."""
    if isinstance(pattern, re.Pattern):
        return pattern.fullmatch(name) is not None
    return fnmatch.fnmatchcase(name, pattern)


def select_asset(
    assets: tuple[Asset, ...] | list[Asset], pattern: AssetPattern
) -> Asset:
    """Return the first asset, in API order, whose name matches pattern.

    Raises:
        AssetNotFound: If no asset matches

    """
    for asset in assets:
        if matches_pattern(asset.name, pattern):
            return asset

    shown = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    available = ", ".join(a.name for a in assets) or "none"
    msg = f"No asset matches '{shown}' (available: {available})"
    raise AssetNotFound(msg)


def extract_hash(body: str, asset_name: str) -> str | None:
    """Find the SHA-256 published for asset_name in release notes.

    Searches line by line for the exact asset name followed, later on the
    same line, by a 64-character hex token. The name must stand alone on
    both sides: ``PortableGit-x.exe`` and ``Git-x.exe.sig`` never match
    ``Git-x.exe``. A trailing sentence period is allowed.

    Args:
        body: Release notes text
        asset_name: Exact asset filename

    Returns:
        The first matching hash, uppercased, or None

    """
    line_re = re.compile(
        rf"(?<![\w.-]){re.escape(asset_name)}(?![\w-]|\.\w)"
        r".*?(?<![0-9a-fA-F])([0-9a-fA-F]{64})(?![0-9a-fA-F])"
    )
    for line in body.splitlines():
        match = line_re.search(line)
        if match:
            return match.group(1).upper()
    return None


class ReleaseResolver:
    """Resolve a release endpoint into a verified-download target."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize resolver.

        Args:
            session: aiohttp session for the metadata request
            timeout_seconds: Metadata request timeout

        """
        self.api_client = ReleaseAPIClient(session, timeout_seconds)

    async def resolve(
        self, endpoint: str, pattern: AssetPattern
    ) -> ReleaseAsset:
        """Resolve an asset and its expected hash from a release endpoint.

        Args:
            endpoint: GitHub release API URL
            pattern: Glob string or compiled regex over asset names

        Returns:
            ReleaseAsset with an uppercase SHA-256 hash

        Raises:
            ResolutionFailed: If the endpoint cannot be read
            AssetNotFound: If no asset matches pattern
            HashNotFound: If the notes carry no hash for the asset

        """
        data = await self.api_client.fetch_release(endpoint)
        release = Release.from_api_response(data)

        asset = select_asset(release.assets, pattern)
        logger.debug("Selected asset: %s", asset.name)

        expected_hash = extract_hash(release.body, asset.name)
        if expected_hash is None:
            msg = f"Release notes carry no SHA-256 line for {asset.name}"
            raise HashNotFound(msg)

        logger.debug("   Published SHA-256: %s", expected_hash)
        return ReleaseAsset(
            name=asset.name,
            download_url=asset.browser_download_url,
            expected_hash=expected_hash,
        )
