"""HTTP session utilities for ephemeral-runner."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from ephemeral_runner.types import NetworkConfig


@asynccontextmanager
async def create_http_session(
    network_config: NetworkConfig,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create the HTTP session shared by every request in a run.

    Only connect and read stalls are bounded; a large artifact may take as
    long as it needs. The metadata request sets its own total timeout.

    Args:
        network_config: Network section of the global configuration

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout_seconds = network_config["timeout_seconds"]
    timeout = aiohttp.ClientTimeout(
        total=None,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    async with aiohttp.ClientSession(timeout=timeout) as session:
        yield session
