"""Download and verify release artifacts.

DownloadService streams a URL to disk. VerifiedFetcher wraps it with the
one SHA-256 check every artifact goes through before it may be installed,
whether the expected hash came from release notes or from configuration.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import aiofiles
import aiohttp

from ephemeral_runner.core.github.models import FetchResult, ReleaseAsset
from ephemeral_runner.core.verification import Verifier
from ephemeral_runner.exceptions import DownloadError
from ephemeral_runner.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def _content_length(headers) -> int:
    """Return the advertised body size, or 0 when missing or malformed."""
    try:
        return int(headers.get("Content-Length", 0))
    except (TypeError, ValueError):
        return 0


class DownloadService:
    """Service for downloading artifacts over unauthenticated HTTP."""

    def __init__(self, session: aiohttp.ClientSession) -> None:
        """Initialize download service with HTTP session.

        Args:
            session: aiohttp session for downloads

        """
        self.session = session

    async def download_file(self, url: str, dest: Path) -> Path:
        """Download a file from URL to destination, overwriting it.

        Args:
            url: URL to download from
            dest: Destination path

        Returns:
            The destination path

        Raises:
            DownloadError: If the request or the write fails. Partial
                files are removed.

        """
        logger.debug("Downloading %s", url)
        logger.debug("   To: %s", dest)

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            async with self.session.get(url) as response:
                response.raise_for_status()
                total = _content_length(response.headers)
                if total > 0:
                    logger.debug("   Size: %s bytes", f"{total:,}")
                async with aiofiles.open(dest, mode="wb") as f:
                    async for chunk in response.content.iter_chunked(
                        CHUNK_SIZE
                    ):
                        if chunk:
                            await f.write(chunk)
        except (aiohttp.ClientError, TimeoutError, OSError) as e:
            self._cleanup(dest)
            msg = f"Failed to download {url}: {str(e) or type(e).__name__}"
            raise DownloadError(msg) from e

        logger.debug("Download completed: %s", dest)
        return dest

    @staticmethod
    def _cleanup(dest: Path) -> None:
        if dest.exists():
            logger.debug("Removing partial download: %s", dest)
            with contextlib.suppress(OSError):
                dest.unlink()


class VerifiedFetcher:
    """Download an asset and verify its SHA-256 before handing it out."""

    def __init__(self, download_service: DownloadService) -> None:
        """Initialize fetcher.

        Args:
            download_service: Service used for the HTTP download

        """
        self.download_service = download_service

    async def fetch(
        self, asset: ReleaseAsset, destination: Path
    ) -> FetchResult:
        """Download asset to destination and verify it.

        Args:
            asset: Resolved asset with expected hash
            destination: Where to write the file (overwritten)

        Returns:
            A verified FetchResult

        Raises:
            DownloadError: If the download fails
            IntegrityCheckFailed: If the hash does not match; the file is
                left on disk but never returned as verified

        """
        logger.info("⬇️  Downloading %s", asset.name)
        await self.download_service.download_file(
            asset.download_url, destination
        )

        logger.info("🔍 Verifying SHA-256 of %s", asset.name)
        verifier = Verifier(destination)
        await asyncio.to_thread(verifier.verify_sha256, asset.expected_hash)

        return FetchResult(local_path=destination, verified=True)
