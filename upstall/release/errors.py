from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class NetworkUnavailable:
    url: str
    message: str


@dataclass(frozen=True, slots=True)
class ResolutionFailed:
    url: str
    message: str


@dataclass(frozen=True, slots=True)
class NotFound:
    suffix: str
    tag: str


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    platform: str
    arch: str


@dataclass(frozen=True, slots=True)
class PrerequisiteMissing:
    command: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class InsufficientDiskSpace:
    path: Path
    required_mb: int
    available_mb: int


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    url: str
    message: str


@dataclass(frozen=True, slots=True)
class IntegrityFailed:
    path: Path
    expected: str
    actual: str


@dataclass(frozen=True, slots=True)
class ApplyFailed:
    step: str
    returncode: int


InstallError = (
    NetworkUnavailable
    | ResolutionFailed
    | NotFound
    | UnsupportedPlatform
    | PrerequisiteMissing
    | InsufficientDiskSpace
    | DownloadFailed
    | IntegrityFailed
    | ApplyFailed
)
