"""Install orchestration: preflight, integrity, apply, uninstall."""

from upstall.install.appliers import (
    Applier,
    ApplyStep,
    MsiApplier,
    PkgApplier,
    TarballApplier,
    applier_for,
)
from upstall.install.integrity import ChecksumStatus, IntegrityVerifier
from upstall.install.orchestrator import Orchestrator, create_orchestrator
from upstall.install.preflight import Preflight
from upstall.install.probe import ExecutableVersionProbe, StaticVersionProbe, VersionProbe
from upstall.install.report import Outcome, RunReport, RunState
from upstall.install.signature import (
    NullSignatureVerifier,
    PkgutilSignatureVerifier,
    SignatureStatus,
    SignatureVerifier,
)
from upstall.install.staging import StagingArea, staging_area
from upstall.install.uninstall import (
    FilesystemUninstallLocator,
    RegistryUninstallLocator,
    UninstallEntry,
    UninstallLocator,
    Uninstaller,
)

__all__ = [
    "Applier",
    "ApplyStep",
    "ChecksumStatus",
    "ExecutableVersionProbe",
    "FilesystemUninstallLocator",
    "IntegrityVerifier",
    "MsiApplier",
    "NullSignatureVerifier",
    "Orchestrator",
    "Outcome",
    "PkgApplier",
    "PkgutilSignatureVerifier",
    "Preflight",
    "RegistryUninstallLocator",
    "RunReport",
    "RunState",
    "SignatureStatus",
    "SignatureVerifier",
    "StagingArea",
    "StaticVersionProbe",
    "TarballApplier",
    "UninstallEntry",
    "UninstallLocator",
    "Uninstaller",
    "VersionProbe",
    "applier_for",
    "create_orchestrator",
    "staging_area",
]
