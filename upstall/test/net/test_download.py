"""Tests for upstall.net.download - ArtifactDownloader."""

from __future__ import annotations

from pathlib import Path

import pytest

from upstall.core.result import Err, Ok
from upstall.net.download import ArtifactDownloader, DownloadResult
from upstall.net.http import HttpError, MockHttpClient

NAME = "powershell-7.5.4-osx-arm64.pkg"
URL = f"https://github.com/PowerShell/PowerShell/releases/download/v7.5.4/{NAME}"


class TestDownloadResult:
    def test_is_frozen(self) -> None:
        result = DownloadResult(path=Path("/tmp/a"), size=1, replaced_stale=False)
        with pytest.raises(AttributeError):
            result.size = 2  # type: ignore[misc]


class TestArtifactDownloader:
    def test_destination_uses_basename(self, tmp_path: Path) -> None:
        downloader = ArtifactDownloader(MockHttpClient(), tmp_path)
        assert downloader.destination("../../etc/passwd") == tmp_path / "passwd"
        assert downloader.directory == tmp_path

    def test_download(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(URL, b"pkg bytes")

        result = ArtifactDownloader(client, tmp_path / "dl").download(URL, NAME)

        assert isinstance(result, Ok)
        assert result.value.path == tmp_path / "dl" / NAME
        assert result.value.size == len(b"pkg bytes")
        assert not result.value.replaced_stale

    def test_stale_file_deleted_first(self, tmp_path: Path) -> None:
        (tmp_path / NAME).write_bytes(b"partial from an aborted run")
        client = MockHttpClient()
        client.set_download(URL, b"fresh")

        result = ArtifactDownloader(client, tmp_path).download(URL, NAME)

        assert isinstance(result, Ok)
        assert result.value.replaced_stale
        assert (tmp_path / NAME).read_bytes() == b"fresh"

    def test_failure_leaves_no_file(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(URL, HttpError(url=URL, status=500, message="oops"))

        result = ArtifactDownloader(client, tmp_path).download(URL, NAME)

        assert isinstance(result, Err)
        assert not (tmp_path / NAME).exists()

    def test_progress_forwarded(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download(URL, b"12345")
        seen: list[int] = []

        downloader = ArtifactDownloader(client, tmp_path)
        downloader.download(URL, NAME, progress=lambda d, _t: seen.append(d))

        assert seen == [5]
