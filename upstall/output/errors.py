"""Error presentation utilities.

One cause line per fatal error, plus a `hint:` line where there is a
concrete next step, and a stable exit code per error kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from upstall.core.errors import ErrorCode
from upstall.output.console import Style
from upstall.release.errors import (
    ApplyFailed,
    DownloadFailed,
    InstallError,
    InsufficientDiskSpace,
    IntegrityFailed,
    NetworkUnavailable,
    NotFound,
    PrerequisiteMissing,
    ResolutionFailed,
    UnsupportedPlatform,
)

if TYPE_CHECKING:
    from upstall.output.console import ConsoleProtocol

__all__ = ["print_install_error", "install_error_exit_code"]


def _hint(console: ConsoleProtocol, text: str) -> None:
    console.print(f"hint: {text}", Style.DIM)


def print_install_error(error: InstallError, console: ConsoleProtocol) -> None:
    """Print an install error to console with appropriate formatting."""
    match error:
        case NetworkUnavailable(url=url, message=message):
            console.error(f"cannot reach {url}: {message}")
            _hint(console, "check your network connection or proxy settings")
        case ResolutionFailed(url=url, message=message):
            console.error(f"could not resolve release from {url}: {message}")
            _hint(console, "check the tag name, or set GITHUB_TOKEN if rate limited")
        case NotFound(suffix=suffix, tag=tag):
            console.error(f"no asset matching '*{suffix}' in release {tag}")
        case UnsupportedPlatform(platform=platform, arch=arch):
            console.error(f"unsupported platform: {platform}/{arch}")
        case PrerequisiteMissing(command=command, hint=hint):
            console.error(f"{command}: missing")
            if hint:
                _hint(console, hint)
        case InsufficientDiskSpace(path=path, required_mb=required, available_mb=available):
            console.error(
                f"insufficient disk space at {path}: {required} MB required, {available} MB free"
            )
        case DownloadFailed(url=url, message=message):
            console.error(f"download failed: {url} ({message})")
            _hint(console, "retry; partial downloads are resumed")
        case IntegrityFailed(path=path, expected=expected, actual=actual):
            console.error(f"SHA256 checksum verification failed for {path.name}")
            console.print(f"  expected: {expected or '(empty sidecar)'}", Style.DIM)
            console.print(f"  actual:   {actual}", Style.DIM)
            _hint(console, "retry, or bypass checksum verification with --skip-checksum")
        case ApplyFailed(step=step, returncode=rc):
            console.error(f"{step} failed (exit {rc})")


def install_error_exit_code(error: InstallError) -> int:
    """Get exit code for an install error."""
    match error:
        case ResolutionFailed() | NotFound():
            return int(ErrorCode.USER_ERROR)
        case UnsupportedPlatform() | PrerequisiteMissing():
            return int(ErrorCode.ENV_ERROR)
        case ApplyFailed():
            return int(ErrorCode.INSTALL_ERROR)
        case NetworkUnavailable() | DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case InsufficientDiskSpace():
            return int(ErrorCode.IO_ERROR)
        case IntegrityFailed():
            return int(ErrorCode.INTEGRITY_ERROR)
    return int(ErrorCode.USER_ERROR)
