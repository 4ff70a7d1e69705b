"""Shared fixtures for core module tests.

- Async chunk generator for simulated HTTP bodies
- Mocked aiohttp session and response factory
- Sample release data and configuration sections
"""

import hashlib
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ephemeral_runner.core.github import FetchResult, ReleaseAsset
from ephemeral_runner.types import EnvironmentConfig, RunnerConfig

GIT_ASSET_NAME = "Git-2.45.1-64-bit.exe"
GIT_ASSET_HASH = (
    "1b7a8c3f6e1e4b1f0c9f6d3a5b2e7c4d"
    "8f9a0b1c2d3e4f5a6b7c8d9e0f1a2b3c"
)

# =============================================================================
# Async Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Async generator yielding chunks for simulating HTTP responses.

    Args:
        chunks: List of byte chunks to yield.

    Yields:
        Individual byte chunks.

    """
    for chunk in chunks:
        yield chunk


def make_response(
    *,
    payload: bytes = b"",
    chunks: list[bytes] | None = None,
    raise_for_status: Exception | None = None,
) -> AsyncMock:
    """Build an aiohttp-style response usable as ``async with``."""
    response = AsyncMock()
    response.__aenter__.return_value = response
    response.__aexit__.return_value = None
    body = chunks if chunks is not None else [payload]
    response.headers = {"Content-Length": str(sum(len(c) for c in body))}
    response.read = AsyncMock(return_value=payload)
    response.content.iter_chunked = lambda size: async_chunk_gen(body)
    response.raise_for_status = MagicMock(side_effect=raise_for_status)
    return response


def sha256_upper(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().upper()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_session() -> MagicMock:
    """Mock aiohttp session; tests set ``get.return_value``."""
    return MagicMock()


@pytest.fixture
def release_data() -> dict[str, Any]:
    """Git for Windows style release JSON."""
    return {
        "tag_name": "v2.45.1.windows.1",
        "body": (
            "## Changes since Git for Windows v2.45.0\n"
            "\n"
            "Filename | SHA-256\n"
            "-------- | -------\n"
            f"Portable{GIT_ASSET_NAME} | {'a' * 64}\n"
            f"{GIT_ASSET_NAME} | {GIT_ASSET_HASH}\n"
            f"Git-2.45.1-32-bit.exe | {'b' * 64}\n"
        ),
        "assets": [
            {
                "name": "Git-2.45.1-32-bit.exe",
                "browser_download_url": "https://example.invalid/32.exe",
            },
            {
                "name": f"Portable{GIT_ASSET_NAME}",
                "browser_download_url": "https://example.invalid/p.exe",
            },
            {
                "name": GIT_ASSET_NAME,
                "browser_download_url": "https://example.invalid/64.exe",
            },
        ],
    }


@pytest.fixture
def runner_config() -> RunnerConfig:
    """Runner section with test-friendly values."""
    return RunnerConfig(
        version="2.317.0",
        url="https://example.invalid/actions-runner-win-x64-2.317.0.zip",
        sha256="A" * 64,
        labels="self-hosted,windows,x64,ephemeral",
        service_pattern="actions.runner.*",
        hook_env_var="ACTIONS_RUNNER_HOOK_JOB_COMPLETED",
        shutdown_delay_seconds=60,
        shutdown_reason="Job done",
    )


@pytest.fixture
def environment_config() -> EnvironmentConfig:
    """Environment section with every toggle enabled."""
    return EnvironmentConfig(
        developer_mode=True,
        scan_exclusion=True,
        scan_exclusion_path="C:\\",
    )


@pytest.fixture
def verified_file(tmp_path: Path) -> Callable[[str, bytes], FetchResult]:
    """Factory writing a file and returning a verified FetchResult."""

    def _make(name: str, content: bytes = b"payload") -> FetchResult:
        path = tmp_path / name
        path.write_bytes(content)
        return FetchResult(local_path=path, verified=True)

    return _make


@pytest.fixture
def git_asset() -> ReleaseAsset:
    """Resolved Git installer asset."""
    return ReleaseAsset(
        name=GIT_ASSET_NAME,
        download_url="https://example.invalid/64.exe",
        expected_hash=GIT_ASSET_HASH,
    )
