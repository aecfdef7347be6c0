"""Publisher signature checks for installer packages."""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from upstall.platform.process import CommandRunner

__all__ = [
    "SignatureStatus",
    "SignatureVerifier",
    "NullSignatureVerifier",
    "PkgutilSignatureVerifier",
]


class SignatureStatus(Enum):
    TRUSTED = auto()
    UNTRUSTED = auto()
    UNKNOWN = auto()  # no mechanism on this platform, or the check could not run

    def __str__(self) -> str:
        return self.name.lower()


class SignatureVerifier(Protocol):
    def verify(self, path: Path) -> SignatureStatus: ...


class NullSignatureVerifier:
    """Used where no signature mechanism applies (tarballs, msi)."""

    def verify(self, path: Path) -> SignatureStatus:
        return SignatureStatus.UNKNOWN


class PkgutilSignatureVerifier:
    """macOS installer package signature check via `pkgutil --check-signature`.

    A package is trusted when the certificate chain names `signer`.
    """

    def __init__(self, runner: CommandRunner, signer: str) -> None:
        self._runner = runner
        self._signer = signer

    def verify(self, path: Path) -> SignatureStatus:
        proc = self._runner.run(["pkgutil", "--check-signature", str(path)])
        output = f"{proc.stdout}\n{proc.stderr}"
        if self._signer and self._signer in output:
            return SignatureStatus.TRUSTED
        if proc.returncode == 0 or "no signature" in output.lower():
            return SignatureStatus.UNTRUSTED
        return SignatureStatus.UNKNOWN
