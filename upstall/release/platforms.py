"""Mapping from the detected host to the artifact naming convention."""

from __future__ import annotations

from upstall.core.result import Err, Ok, Result
from upstall.platform.detection import Arch, Platform, PlatformInfo
from upstall.release.errors import UnsupportedPlatform
from upstall.release.model import PlatformDescriptor

__all__ = ["platform_descriptor"]

_ARCH_TOKENS = {
    Arch.X64: "x64",
    Arch.ARM64: "arm64",
}


def platform_descriptor(info: PlatformInfo) -> Result[PlatformDescriptor, UnsupportedPlatform]:
    """Build the descriptor for `info`.

    Linux: linux-<arch>.tar.gz (linux-musl-<arch>.tar.gz on musl)
    macOS: osx-<arch>.pkg
    Windows: win-<arch>.msi
    """
    token = _ARCH_TOKENS.get(info.arch)
    if token is None:
        return Err(UnsupportedPlatform(platform=str(info.platform), arch=str(info.arch)))

    match info.platform:
        case Platform.LINUX:
            libc = "linux-musl" if info.is_musl else "linux"
            suffix = f"{libc}-{token}.tar.gz"
        case Platform.MACOS:
            suffix = f"osx-{token}.pkg"
        case Platform.WINDOWS:
            suffix = f"win-{token}.msi"
        case _:
            return Err(UnsupportedPlatform(platform=str(info.platform), arch=str(info.arch)))

    return Ok(PlatformDescriptor(arch_token=token, suffix_pattern=suffix))
