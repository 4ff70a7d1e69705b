"""Low-level GitHub API client for release metadata.

One GET, a bounded timeout, and no retries: any failure to obtain a
JSON object is a ResolutionFailed that aborts provisioning.
"""

from typing import Any

import aiohttp
import orjson

from ephemeral_runner.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    GITHUB_ACCEPT_HEADER,
    GITHUB_API_VERSION,
    GITHUB_API_VERSION_HEADER,
)
from ephemeral_runner.exceptions import ResolutionFailed
from ephemeral_runner.logger import get_logger

logger = get_logger(__name__)


class ReleaseAPIClient:
    """Handles direct communication with GitHub API for release data."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp session for making requests
            timeout_seconds: Total timeout for the metadata request

        """
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @staticmethod
    def build_headers() -> dict[str, str]:
        """Return the headers sent with every metadata request."""
        return {
            "Accept": GITHUB_ACCEPT_HEADER,
            GITHUB_API_VERSION_HEADER: GITHUB_API_VERSION,
        }

    async def fetch_release(self, url: str) -> dict[str, Any]:
        """Fetch a release JSON object.

        Args:
            url: Release API endpoint, e.g. ``.../releases/latest``

        Returns:
            Decoded release object

        Raises:
            ResolutionFailed: On network error, timeout, HTTP error status,
                undecodable JSON, or a non-object response

        """
        logger.debug("Fetching release metadata: %s", url)
        try:
            async with self.session.get(
                url, headers=self.build_headers(), timeout=self.timeout
            ) as response:
                response.raise_for_status()
                payload = await response.read()
        except aiohttp.ClientResponseError as e:
            msg = f"GitHub API returned HTTP {e.status} for {url}"
            raise ResolutionFailed(msg) from e
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = f"Could not reach {url}: {str(e) or type(e).__name__}"
            raise ResolutionFailed(msg) from e

        try:
            data = orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            msg = f"Release metadata from {url} is not valid JSON"
            raise ResolutionFailed(msg) from e

        if not isinstance(data, dict):
            msg = (
                f"Unexpected release metadata from {url}: "
                f"expected an object, got {type(data).__name__}"
            )
            raise ResolutionFailed(msg)

        logger.debug(
            "Release metadata received (%d bytes, %d assets)",
            len(payload),
            len(data.get("assets") or []),
        )
        return data
