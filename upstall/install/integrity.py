"""SHA-256 verification of downloaded artifacts against sidecar files."""

from __future__ import annotations

import hashlib
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from upstall.core.result import Err, Ok, Result
from upstall.output.console import Style
from upstall.release.errors import DownloadFailed, IntegrityFailed
from upstall.release.model import CHECKSUM_SUFFIX

if TYPE_CHECKING:
    from upstall.net.http import HttpClient
    from upstall.output.console import ConsoleProtocol
    from upstall.release.model import AssetDescriptor

__all__ = ["ChecksumStatus", "IntegrityVerifier", "sha256_file", "expected_digest"]

_READ_CHUNK = 1024 * 1024


class ChecksumStatus(Enum):
    VERIFIED = auto()
    SKIPPED = auto()

    def __str__(self) -> str:
        return self.name.lower()


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_READ_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def expected_digest(content: str) -> str:
    """First whitespace-delimited token of a sidecar; the rest is a file name."""
    parts = content.split()
    return parts[0] if parts else ""


class IntegrityVerifier:
    """Confirms an artifact matches its published checksum.

    A skipped verification is always reported to the console as a warning.
    On success the downloaded sidecar is removed.
    """

    def __init__(self, http: HttpClient, console: ConsoleProtocol) -> None:
        self._http = http
        self._console = console

    def verify(
        self,
        artifact: Path,
        checksum_asset: AssetDescriptor | None,
        *,
        skip: bool = False,
    ) -> Result[ChecksumStatus, IntegrityFailed | DownloadFailed]:
        """Verify `artifact` against `checksum_asset`.

        Args:
            artifact: Downloaded artifact
            checksum_asset: Sidecar asset, or None if the release has none
            skip: Caller asked to bypass verification

        Returns:
            Ok(VERIFIED | SKIPPED), Err(IntegrityFailed) on mismatch,
            Err(DownloadFailed) if the sidecar cannot be fetched
        """
        if skip:
            self._console.warning("checksum verification skipped (--skip-checksum)")
            return Ok(ChecksumStatus.SKIPPED)
        if checksum_asset is None:
            self._console.warning(
                f"no {CHECKSUM_SUFFIX} sidecar published for {artifact.name}; "
                "skipping checksum verification"
            )
            return Ok(ChecksumStatus.SKIPPED)

        sidecar = artifact.with_name(f"{artifact.name}{CHECKSUM_SUFFIX}")
        # A leftover sidecar would be resumed onto instead of replaced
        sidecar.unlink(missing_ok=True)
        self._console.print("downloading checksum file", Style.DIM)
        fetched = self._http.download(checksum_asset.download_url, sidecar)
        if isinstance(fetched, Err):
            sidecar.unlink(missing_ok=True)
            return Err(DownloadFailed(url=checksum_asset.download_url, message=str(fetched.error)))

        try:
            content = sidecar.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            sidecar.unlink(missing_ok=True)
            return Err(DownloadFailed(url=checksum_asset.download_url, message=str(e)))
        sidecar.unlink(missing_ok=True)

        expected = expected_digest(content).lower()
        self._console.print("verifying SHA256 checksum", Style.DIM)
        actual = sha256_file(artifact).lower()
        if not expected or expected != actual:
            return Err(IntegrityFailed(path=artifact, expected=expected, actual=actual))

        self._console.print("SHA256 checksum verified", Style.DIM)
        return Ok(ChecksumStatus.VERIFIED)
