"""Tests for upstall.release.resolver."""

from __future__ import annotations

from upstall.core.config import IndexConfig
from upstall.core.result import Err, Ok
from upstall.net.http import HttpError, MockHttpClient
from upstall.release.errors import ResolutionFailed
from upstall.release.resolver import ReleaseResolver, parse_release

BASE = "https://api.github.com/repos/PowerShell/PowerShell/releases"

RELEASE_JSON = {
    "tag_name": "v7.5.4",
    "assets": [
        {
            "name": "powershell-7.5.4-linux-x64.tar.gz",
            "browser_download_url": "https://github.com/dl/powershell-7.5.4-linux-x64.tar.gz",
        },
        {
            "name": "powershell-7.5.4-osx-arm64.pkg",
            "browser_download_url": "https://github.com/dl/powershell-7.5.4-osx-arm64.pkg",
        },
    ],
}


class TestParseRelease:
    def test_parses_assets_in_order(self) -> None:
        result = parse_release("u", RELEASE_JSON)

        assert isinstance(result, Ok)
        release = result.value
        assert release.tag == "v7.5.4"
        assert release.version == "7.5.4"
        assert [a.name for a in release.assets] == [
            "powershell-7.5.4-linux-x64.tar.gz",
            "powershell-7.5.4-osx-arm64.pkg",
        ]

    def test_missing_tag(self) -> None:
        result = parse_release("u", {"assets": []})
        assert isinstance(result, Err)
        assert "tag_name" in result.error.message

    def test_assets_not_a_list(self) -> None:
        result = parse_release("u", {"tag_name": "v1", "assets": {}})
        assert isinstance(result, Err)

    def test_asset_without_url(self) -> None:
        result = parse_release("u", {"tag_name": "v1", "assets": [{"name": "a"}]})
        assert isinstance(result, Err)
        assert result.error.url == "u"

    def test_no_assets_is_valid(self) -> None:
        result = parse_release("u", {"tag_name": "v1"})
        assert isinstance(result, Ok)
        assert result.value.assets == ()


class TestReleaseResolver:
    def test_latest_url(self) -> None:
        resolver = ReleaseResolver(MockHttpClient(), IndexConfig())
        assert resolver.release_url(None) == f"{BASE}/latest"
        assert resolver.release_url("") == f"{BASE}/latest"

    def test_tag_url(self) -> None:
        resolver = ReleaseResolver(MockHttpClient(), IndexConfig())
        assert resolver.release_url("v7.4.6") == f"{BASE}/tags/v7.4.6"

    def test_custom_index(self) -> None:
        index = IndexConfig(api_base="https://ghe.example/api/v3/", owner="o", repo="r")
        resolver = ReleaseResolver(MockHttpClient(), index)
        assert resolver.release_url(None) == "https://ghe.example/api/v3/repos/o/r/releases/latest"

    def test_resolve_latest(self) -> None:
        client = MockHttpClient()
        client.set_json(f"{BASE}/latest", RELEASE_JSON)

        result = ReleaseResolver(client, IndexConfig()).resolve()

        assert isinstance(result, Ok)
        assert result.value.tag == "v7.5.4"

    def test_unknown_tag(self) -> None:
        result = ReleaseResolver(MockHttpClient(), IndexConfig()).resolve("v0.0.0")

        assert isinstance(result, Err)
        assert isinstance(result.error, ResolutionFailed)
        assert result.error.url == f"{BASE}/tags/v0.0.0"

    def test_http_error_message_kept(self) -> None:
        client = MockHttpClient()
        client.set_json(f"{BASE}/latest", HttpError(url="x", status=403, message="rate limited"))

        result = ReleaseResolver(client, IndexConfig()).resolve()

        assert isinstance(result, Err)
        assert "rate limited" in result.error.message
