"""Artifact downloader with stale-file handling.

This module provides an ArtifactDownloader that:
- Places each artifact at `<directory>/<asset name>`
- Deletes a stale file left at that path by an earlier aborted run
- Removes the partial file when the transfer fails
- Returns Result for error handling
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from upstall.core.result import Err, Ok, Result
from upstall.net.http import HttpError

if TYPE_CHECKING:
    from collections.abc import Callable

    from upstall.net.http import HttpClient

__all__ = ["ArtifactDownloader", "DownloadResult"]


@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Result of a download operation.

    Attributes:
        path: Path to the downloaded file
        size: File size in bytes
        replaced_stale: True if a leftover file was deleted first
    """

    path: Path
    size: int
    replaced_stale: bool


class ArtifactDownloader:
    """Downloads release artifacts into one directory.

    Usage:
        downloader = ArtifactDownloader(http, Path("/tmp/upstall-x"))
        result = downloader.download(asset.download_url, asset.name)
        if is_ok(result):
            print(f"Downloaded to: {result.value.path}")
    """

    def __init__(self, http: HttpClient, directory: Path) -> None:
        self._http = http
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def destination(self, filename: str) -> Path:
        """Get the destination path for a file name.

        Only the final path component is used, so a crafted asset name
        cannot escape the download directory.
        """
        return self._directory / (Path(filename).name or "download")

    def download(
        self,
        url: str,
        filename: str,
        *,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadResult, HttpError]:
        """Download `url` to `<directory>/<filename>`.

        Args:
            url: URL to download
            filename: Name to store the file under
            progress: Optional callback(downloaded_bytes, total_bytes)

        Returns:
            Ok with DownloadResult, or Err with HttpError
        """
        dest = self.destination(filename)
        self._directory.mkdir(parents=True, exist_ok=True)

        replaced_stale = False
        if dest.exists():
            dest.unlink()
            replaced_stale = True

        result = self._http.download(url, dest, progress=progress)

        if isinstance(result, Err):
            # Clean up partial download
            if dest.exists():
                dest.unlink()
            return result

        size = dest.stat().st_size
        return Ok(DownloadResult(path=dest, size=size, replaced_stale=replaced_stale))
