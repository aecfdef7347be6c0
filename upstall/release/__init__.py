"""Release resolution: index metadata, asset selection, version ordering."""

from upstall.release.assets import select_asset
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
from upstall.release.model import (
    AssetDescriptor,
    PlatformDescriptor,
    ReleaseDescriptor,
    SelectionResult,
)
from upstall.release.platforms import platform_descriptor
from upstall.release.resolver import ReleaseResolver
from upstall.release.version import Ordering, compare

__all__ = [
    # model
    "AssetDescriptor",
    "PlatformDescriptor",
    "ReleaseDescriptor",
    "SelectionResult",
    # operations
    "ReleaseResolver",
    "compare",
    "Ordering",
    "platform_descriptor",
    "select_asset",
    # errors
    "ApplyFailed",
    "DownloadFailed",
    "InstallError",
    "InsufficientDiskSpace",
    "IntegrityFailed",
    "NetworkUnavailable",
    "NotFound",
    "PrerequisiteMissing",
    "ResolutionFailed",
    "UnsupportedPlatform",
]
