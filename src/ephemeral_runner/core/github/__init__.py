"""GitHub release metadata client, models, and resolver."""

from ephemeral_runner.core.github.models import (
    Asset,
    FetchResult,
    Release,
    ReleaseAsset,
)
from ephemeral_runner.core.github.resolver import (
    ReleaseResolver,
    extract_hash,
    select_asset,
)

__all__ = [
    "Asset",
    "FetchResult",
    "Release",
    "ReleaseAsset",
    "ReleaseResolver",
    "extract_hash",
    "select_asset",
]
