"""Tests for asset selection, hash extraction, and ReleaseResolver."""

import re
from unittest.mock import MagicMock

import orjson
import pytest

from ephemeral_runner.core.github import (
    Asset,
    ReleaseResolver,
    extract_hash,
    select_asset,
)
from ephemeral_runner.core.github.resolver import matches_pattern
from ephemeral_runner.exceptions import (
    AssetNotFound,
    HashNotFound,
    ResolutionFailed,
)
from tests.core.conftest import GIT_ASSET_HASH, GIT_ASSET_NAME, make_response

ENDPOINT = "https://api.github.com/repos/git-for-windows/git/releases/latest"


class TestExtractHash:
    """Pure hash extraction from release notes."""

    def test_table_row(self) -> None:
        body = f"{GIT_ASSET_NAME} | {GIT_ASSET_HASH}"
        assert extract_hash(body, GIT_ASSET_NAME) == GIT_ASSET_HASH.upper()

    @pytest.mark.parametrize(
        "line",
        [
            "* {name}: sha256 {digest} (64-bit)",
            "{name}\t{digest}",
            "Download {name} -- SHA-256 is `{digest}`.",
        ],
    )
    def test_surrounding_prose_is_ignored(self, line: str) -> None:
        body = "Intro text\n" + line.format(
            name=GIT_ASSET_NAME, digest=GIT_ASSET_HASH
        )
        assert extract_hash(body, GIT_ASSET_NAME) == GIT_ASSET_HASH.upper()

    def test_result_is_uppercase(self) -> None:
        digest = "abcdef" + "0" * 58
        assert extract_hash(f"{GIT_ASSET_NAME} {digest}", GIT_ASSET_NAME) == (
            digest.upper()
        )

    def test_name_glued_to_prefix_does_not_match(self) -> None:
        body = f"Portable{GIT_ASSET_NAME} | {'a' * 64}"
        assert extract_hash(body, GIT_ASSET_NAME) is None

    def test_sha256sum_column_format(self) -> None:
        body = (
            "Filename | SHA-256\n"
            "-------- | -------\n"
            f"Git-2.44.0-64-bit.exe sha256sum | {GIT_ASSET_HASH}\n"
        )
        assert extract_hash(body, "Git-2.44.0-64-bit.exe") == (
            GIT_ASSET_HASH.upper()
        )

    @pytest.mark.parametrize("suffix", [".sig", ".asc", "-debug"])
    def test_name_with_suffix_does_not_match(self, suffix: str) -> None:
        body = (
            f"{GIT_ASSET_NAME}{suffix} | {'e' * 64}\n"
            f"{GIT_ASSET_NAME} | {GIT_ASSET_HASH}\n"
        )
        assert extract_hash(body, GIT_ASSET_NAME) == GIT_ASSET_HASH.upper()

    def test_name_ending_a_sentence_matches(self) -> None:
        body = f"Get {GIT_ASSET_NAME}. Its SHA-256 is {GIT_ASSET_HASH}"
        assert extract_hash(body, GIT_ASSET_NAME) == GIT_ASSET_HASH.upper()

    def test_hash_on_another_line_does_not_match(self) -> None:
        body = f"{GIT_ASSET_NAME}\n{GIT_ASSET_HASH}"
        assert extract_hash(body, GIT_ASSET_NAME) is None

    def test_longer_hex_run_is_not_a_hash(self) -> None:
        body = f"{GIT_ASSET_NAME} {'c' * 65}"
        assert extract_hash(body, GIT_ASSET_NAME) is None

    def test_first_matching_line_wins(self) -> None:
        body = f"{GIT_ASSET_NAME} {'1' * 64}\n{GIT_ASSET_NAME} {'2' * 64}"
        assert extract_hash(body, GIT_ASSET_NAME) == "1" * 64

    def test_regex_metacharacters_in_name_are_literal(self) -> None:
        body = f"Git-2X45X1-64-bit.exe {'d' * 64}"
        assert extract_hash(body, "Git-2.45.1-64-bit.exe") is None

    def test_empty_body(self) -> None:
        assert extract_hash("", GIT_ASSET_NAME) is None


class TestSelectAsset:
    """Asset selection by glob or regex."""

    @pytest.fixture
    def assets(self) -> tuple[Asset, ...]:
        return (
            Asset("Git-2.45.1-32-bit.exe", "u32"),
            Asset("PortableGit-2.45.1-64-bit.7z.exe", "up"),
            Asset("Git-2.45.1-64-bit.exe", "u64"),
            Asset("Git-2.45.1-64-bit.tar.bz2", "utar"),
        )

    def test_glob(self, assets: tuple[Asset, ...]) -> None:
        assert select_asset(assets, "Git-*-64-bit.exe").name == (
            "Git-2.45.1-64-bit.exe"
        )

    def test_glob_is_case_sensitive(self) -> None:
        assert not matches_pattern("git-2-64-bit.exe", "Git-*-64-bit.exe")

    def test_compiled_regex_must_match_whole_name(
        self, assets: tuple[Asset, ...]
    ) -> None:
        pattern = re.compile(r"Git-[\d.]+-64-bit\.exe")
        assert select_asset(assets, pattern).browser_download_url == "u64"
        assert not matches_pattern("xGit-1-64-bit.exe", pattern)

    def test_first_match_in_listed_order(self) -> None:
        assets = (Asset("Git-a-64-bit.exe", "first"),) + (
            Asset("Git-b-64-bit.exe", "second"),
        )
        assert select_asset(assets, "Git-*-64-bit.exe").name == (
            "Git-a-64-bit.exe"
        )

    def test_no_match_raises(self, assets: tuple[Asset, ...]) -> None:
        with pytest.raises(AssetNotFound, match="Git-\\*-arm64.exe"):
            select_asset(assets, "Git-*-arm64.exe")

    def test_empty_asset_list(self) -> None:
        with pytest.raises(AssetNotFound, match="available: none"):
            select_asset((), "*")


class TestReleaseResolver:
    """ReleaseResolver against a mocked session."""

    async def test_resolves_asset_and_hash(
        self, mock_session: MagicMock, release_data: dict
    ) -> None:
        mock_session.get.return_value = make_response(
            payload=orjson.dumps(release_data)
        )
        resolver = ReleaseResolver(mock_session, timeout_seconds=10)

        asset = await resolver.resolve(ENDPOINT, "Git-*-64-bit.exe")

        assert asset.name == GIT_ASSET_NAME
        assert asset.download_url == "https://example.invalid/64.exe"
        assert asset.expected_hash == GIT_ASSET_HASH.upper()
        mock_session.get.assert_called_once()
        assert mock_session.get.call_args.args == (ENDPOINT,)

    async def test_no_matching_asset_never_downloads(
        self, mock_session: MagicMock, release_data: dict
    ) -> None:
        release_data["assets"] = [
            {"name": "Git-2.45.1-32-bit.exe", "browser_download_url": "u"}
        ]
        mock_session.get.return_value = make_response(
            payload=orjson.dumps(release_data)
        )
        resolver = ReleaseResolver(mock_session)

        with pytest.raises(AssetNotFound):
            await resolver.resolve(ENDPOINT, "Git-*-64-bit.exe")

        # Only the metadata request was made
        assert mock_session.get.call_count == 1
        assert mock_session.get.call_args.args == (ENDPOINT,)

    async def test_missing_hash_line(
        self, mock_session: MagicMock, release_data: dict
    ) -> None:
        release_data["body"] = "No checksums this time."
        mock_session.get.return_value = make_response(
            payload=orjson.dumps(release_data)
        )
        resolver = ReleaseResolver(mock_session)

        with pytest.raises(HashNotFound, match=GIT_ASSET_NAME):
            await resolver.resolve(ENDPOINT, "Git-*-64-bit.exe")

    async def test_null_body_is_treated_as_empty(
        self, mock_session: MagicMock, release_data: dict
    ) -> None:
        release_data["body"] = None
        mock_session.get.return_value = make_response(
            payload=orjson.dumps(release_data)
        )

        with pytest.raises(HashNotFound):
            await ReleaseResolver(mock_session).resolve(
                ENDPOINT, "Git-*-64-bit.exe"
            )

    async def test_transport_error_propagates(
        self, mock_session: MagicMock
    ) -> None:
        mock_session.get.return_value = make_response(payload=b"not json")

        with pytest.raises(ResolutionFailed):
            await ReleaseResolver(mock_session).resolve(ENDPOINT, "*")
