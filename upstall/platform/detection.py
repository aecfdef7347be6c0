"""Platform and architecture detection.

This module provides enums and functions for detecting the current operating
system, CPU architecture, C library flavour and Linux distribution. All
detection is done lazily and cached.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import shutil as _shutil
import subprocess as _subprocess
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path

__all__ = [
    "Platform",
    "Arch",
    "Libc",
    "LinuxDistro",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_libc",
    "detect_linux_distro",
    "detect_platform",
    "is_windows",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_unix(self) -> bool:
        """Check if this is a Unix-like platform (Linux or macOS)."""
        return self in (Platform.LINUX, Platform.MACOS)

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Platform.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("pwsh") -> "pwsh.exe" on Windows, "pwsh" elsewhere.
        """
        return f"{name}{self.exe_suffix}"


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Libc(Enum):
    """C library implementation (Linux only; others report GLIBC)."""

    GLIBC = auto()
    MUSL = auto()

    def __str__(self) -> str:
        return self.name.lower()


class LinuxDistro(Enum):
    """Linux distribution family."""

    DEBIAN = auto()  # Debian, Ubuntu, Mint, Pop!_OS, etc.
    FEDORA = auto()  # Fedora, RHEL, CentOS, Rocky, etc.
    ALPINE = auto()
    ARCH = auto()  # Arch, Manjaro, EndeavourOS, etc.
    SUSE = auto()  # openSUSE, SLES, etc.
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    def install_hint(self, package: str) -> str | None:
        """Return the install command for `package`, if the family is known."""
        return {
            LinuxDistro.DEBIAN: f"sudo apt-get install {package}",
            LinuxDistro.FEDORA: f"sudo dnf install {package}",
            LinuxDistro.ALPINE: f"sudo apk add {package}",
            LinuxDistro.ARCH: f"sudo pacman -S {package}",
            LinuxDistro.SUSE: f"sudo zypper install {package}",
            LinuxDistro.UNKNOWN: None,
        }[self]


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Complete platform information.

    Use the `detect()` function to get an instance for the running host.
    """

    platform: Platform
    arch: Arch
    distro: LinuxDistro = LinuxDistro.UNKNOWN
    libc: Libc = Libc.GLIBC

    @property
    def is_windows(self) -> bool:
        return self.platform == Platform.WINDOWS

    @property
    def is_linux(self) -> bool:
        return self.platform == Platform.LINUX

    @property
    def is_macos(self) -> bool:
        return self.platform == Platform.MACOS

    @property
    def is_musl(self) -> bool:
        return self.is_linux and self.libc == Libc.MUSL

    def __str__(self) -> str:
        if self.is_musl:
            return f"{self.platform}-musl-{self.arch}"
        return f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows; it may query WMI and hang.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


def _normalize_machine(machine: str) -> Arch:
    m = machine.lower()
    if m in ("x86_64", "amd64", "x64"):
        return Arch.X64
    if m in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    return _normalize_machine(machine)


@lru_cache(maxsize=1)
def detect_libc() -> Libc:
    """Detect musl vs glibc by asking `ldd --version` (cached)."""
    if detect_platform() != Platform.LINUX:
        return Libc.GLIBC
    ldd = _shutil.which("ldd")
    if ldd is None:
        return Libc.GLIBC
    try:
        # musl's ldd prints its banner to stderr and exits non-zero
        proc = _subprocess.run(
            [ldd, "--version"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (OSError, _subprocess.TimeoutExpired):
        return Libc.GLIBC
    output = f"{proc.stdout}\n{proc.stderr}".lower()
    return Libc.MUSL if "musl" in output else Libc.GLIBC


def _read_os_release() -> str | None:
    try:
        return Path("/etc/os-release").read_text().lower()
    except OSError:
        return None


@lru_cache(maxsize=1)
def detect_linux_distro() -> LinuxDistro:
    """Detect Linux distribution family (cached).

    Returns LinuxDistro.UNKNOWN when not on Linux or when /etc/os-release
    is missing or unrecognized.
    """
    if detect_platform() != Platform.LINUX:
        return LinuxDistro.UNKNOWN

    content = _read_os_release()
    if content is None:
        return LinuxDistro.UNKNOWN

    if "alpine" in content:
        return LinuxDistro.ALPINE
    if any(x in content for x in ("fedora", "rhel", "centos", "rocky", "almalinux")):
        return LinuxDistro.FEDORA
    if any(x in content for x in ("ubuntu", "debian", "mint", "pop")):
        return LinuxDistro.DEBIAN
    if any(x in content for x in ("arch", "manjaro", "endeavour")):
        return LinuxDistro.ARCH
    if any(x in content for x in ("opensuse", "suse", "sles")):
        return LinuxDistro.SUSE

    return LinuxDistro.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete platform information (cached)."""
    return PlatformInfo(
        platform=detect_platform(),
        arch=detect_arch(),
        distro=detect_linux_distro(),
        libc=detect_libc(),
    )


def is_windows() -> bool:
    return detect_platform() == Platform.WINDOWS
