"""Guards consulted before committing to a download.

- connectivity: the release index must be reachable
- disk space: the install target must have `min_free_mb` free
- prerequisites: the applier's external commands must exist
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from upstall.core.result import Err, Ok, Result
from upstall.release.errors import InsufficientDiskSpace, NetworkUnavailable, PrerequisiteMissing

if TYPE_CHECKING:
    from upstall.net.http import HttpClient
    from upstall.platform.detection import PlatformInfo

__all__ = ["Preflight", "DiskUsage", "nearest_existing"]

_MB = 1024 * 1024

# Command name -> package name, where they differ
_PACKAGE_NAMES = {
    "sha256sum": "coreutils",
    "ldd": "libc-bin",
}


class DiskUsage(NamedTuple):
    total: int
    used: int
    free: int


def nearest_existing(path: Path) -> Path | None:
    """Closest existing ancestor of `path` (itself included)."""
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return None


class Preflight:
    """Preflight checks bound to one host.

    Args:
        http: Client used for the connectivity probe (short timeout, no retries)
        platform: Host platform, for package-manager hints
        which: Command lookup (shutil.which)
        disk_usage: Free-space query (shutil.disk_usage)
    """

    def __init__(
        self,
        http: HttpClient,
        platform: PlatformInfo,
        *,
        which: Callable[[str], str | None] = shutil.which,
        disk_usage: Callable[[Path], DiskUsage] = shutil.disk_usage,
    ) -> None:
        self._http = http
        self._platform = platform
        self._which = which
        self._disk_usage = disk_usage

    def check_network(self, url: str) -> Result[None, NetworkUnavailable]:
        """Fail fast when the release index cannot be reached at all."""
        result = self._http.get_text(url)
        if isinstance(result, Err) and result.error.status == 0:
            return Err(NetworkUnavailable(url=url, message=result.error.message))
        # Any HTTP status (even 4xx from rate limiting) proves connectivity
        return Ok(None)

    def free_megabytes(self, target: Path) -> int | None:
        """Free space at `target` in MB, or None when it cannot be measured."""
        anchor = nearest_existing(target)
        if anchor is None:
            return None
        try:
            usage = self._disk_usage(anchor)
        except OSError:
            return None
        return usage.free // _MB

    def check_disk_space(
        self, target: Path, required_mb: int
    ) -> Result[int | None, InsufficientDiskSpace]:
        """Check free space at `target`.

        Returns:
            Ok(available_mb), Ok(None) if unmeasurable, or
            Err(InsufficientDiskSpace)
        """
        available = self.free_megabytes(target)
        if available is None:
            return Ok(None)
        if available < required_mb:
            return Err(
                InsufficientDiskSpace(path=target, required_mb=required_mb, available_mb=available)
            )
        return Ok(available)

    def check_prerequisites(self, commands: Sequence[str]) -> Result[None, PrerequisiteMissing]:
        """Require every command in `commands` to be on PATH."""
        for command in commands:
            if self._which(command) is not None:
                continue
            package = _PACKAGE_NAMES.get(command, command)
            hint = self._platform.distro.install_hint(package) if self._platform.is_linux else None
            return Err(PrerequisiteMissing(command=command, hint=hint))
        return Ok(None)
