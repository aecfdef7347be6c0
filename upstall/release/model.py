"""Release index data model.

All types are immutable; a ReleaseDescriptor is created per resolution and
discarded once an asset has been selected.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AssetDescriptor",
    "ReleaseDescriptor",
    "PlatformDescriptor",
    "SelectionResult",
    "KNOWN_EXTENSIONS",
    "CHECKSUM_SUFFIX",
]

# Longest first so ".tar.gz" wins over ".gz"
KNOWN_EXTENSIONS = (".tar.gz", ".pkg", ".msi", ".zip", ".deb", ".rpm")

CHECKSUM_SUFFIX = ".sha256"


@dataclass(frozen=True, slots=True)
class AssetDescriptor:
    """One published artifact.

    Attributes:
        name: File name as published (e.g. "powershell-7.5.4-osx-arm64.pkg")
        download_url: Where the bytes can be fetched
    """

    name: str
    download_url: str

    @property
    def checksum_name(self) -> str:
        """Name of the sidecar that would carry this artifact's digest."""
        return f"{self.name}{CHECKSUM_SUFFIX}"


@dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """A tagged release and its artifacts, in published order."""

    tag: str
    assets: tuple[AssetDescriptor, ...]

    @property
    def version(self) -> str:
        """Tag without a single leading 'v' (the version passed to appliers)."""
        if self.tag[:1] in ("v", "V"):
            return self.tag[1:]
        return self.tag

    def find(self, name: str) -> AssetDescriptor | None:
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


@dataclass(frozen=True, slots=True)
class PlatformDescriptor:
    """What an artifact for the target platform looks like.

    Attributes:
        arch_token: Token the name must contain (e.g. "arm64")
        suffix_pattern: Platform suffix the name must carry
            (e.g. "osx-arm64.pkg", "linux-musl-x64.tar.gz")
    """

    arch_token: str
    suffix_pattern: str

    def __post_init__(self) -> None:
        if not self.arch_token:
            raise ValueError("arch_token cannot be empty")
        if not self.suffix_pattern:
            raise ValueError("suffix_pattern cannot be empty")

    @property
    def extension(self) -> str:
        """File extension implied by the suffix (install mechanism)."""
        lower = self.suffix_pattern.lower()
        for ext in KNOWN_EXTENSIONS:
            if lower.endswith(ext):
                return ext
        dot = lower.rfind(".")
        return lower[dot:] if dot >= 0 else ""


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Winning artifact plus its checksum sidecar, if one was published."""

    asset: AssetDescriptor
    checksum_asset: AssetDescriptor | None
