"""Tests for upstall.release.platforms and the release data model."""

from __future__ import annotations

import pytest

from upstall.core.result import Err, Ok
from upstall.platform.detection import Arch, Libc, Platform, PlatformInfo
from upstall.release.model import AssetDescriptor, PlatformDescriptor, ReleaseDescriptor
from upstall.release.platforms import platform_descriptor


@pytest.mark.parametrize(
    ("info", "suffix"),
    [
        (PlatformInfo(Platform.LINUX, Arch.X64), "linux-x64.tar.gz"),
        (PlatformInfo(Platform.LINUX, Arch.ARM64), "linux-arm64.tar.gz"),
        (PlatformInfo(Platform.LINUX, Arch.X64, libc=Libc.MUSL), "linux-musl-x64.tar.gz"),
        (PlatformInfo(Platform.MACOS, Arch.ARM64), "osx-arm64.pkg"),
        (PlatformInfo(Platform.WINDOWS, Arch.X64), "win-x64.msi"),
    ],
)
def test_platform_descriptor(info: PlatformInfo, suffix: str) -> None:
    result = platform_descriptor(info)
    assert isinstance(result, Ok)
    assert result.value.suffix_pattern == suffix


def test_unknown_arch_unsupported() -> None:
    result = platform_descriptor(PlatformInfo(Platform.LINUX, Arch.UNKNOWN))
    assert isinstance(result, Err)
    assert result.error.arch == "unknown"


def test_unknown_os_unsupported() -> None:
    result = platform_descriptor(PlatformInfo(Platform.UNKNOWN, Arch.X64))
    assert isinstance(result, Err)


class TestPlatformDescriptor:
    def test_extension(self) -> None:
        assert PlatformDescriptor("x64", "linux-x64.tar.gz").extension == ".tar.gz"
        assert PlatformDescriptor("arm64", "osx-arm64.pkg").extension == ".pkg"

    def test_rejects_empty_token(self) -> None:
        with pytest.raises(ValueError):
            PlatformDescriptor("", "osx-arm64.pkg")


class TestReleaseDescriptor:
    def test_version_strips_single_v(self) -> None:
        assert ReleaseDescriptor("v7.5.4", ()).version == "7.5.4"
        assert ReleaseDescriptor("7.5.4", ()).version == "7.5.4"

    def test_find(self) -> None:
        asset = AssetDescriptor("a.pkg", "u")
        release = ReleaseDescriptor("v1", (asset,))
        assert release.find("a.pkg") is asset
        assert release.find("b.pkg") is None

    def test_checksum_name(self) -> None:
        assert AssetDescriptor("a.pkg", "u").checksum_name == "a.pkg.sha256"
