"""Platform appliers: turn a verified artifact into an installed product.

Each applier is a fixed sequence of external commands. Steps run in order
and the first non-zero exit code stops the sequence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from upstall.core.result import Err, Ok, Result
from upstall.platform.detection import Platform
from upstall.release.errors import ApplyFailed

if TYPE_CHECKING:
    from upstall.core.config import ProductProfile
    from upstall.platform.process import CommandRunner

__all__ = [
    "ApplyStep",
    "Applier",
    "CommandApplier",
    "TarballApplier",
    "PkgApplier",
    "MsiApplier",
    "applier_for",
]


@dataclass(frozen=True, slots=True)
class ApplyStep:
    name: str
    argv: tuple[str, ...]

    def __str__(self) -> str:
        return " ".join(self.argv)


class Applier(Protocol):
    @property
    def required_commands(self) -> tuple[str, ...]: ...

    @property
    def target(self) -> Path:
        """Filesystem location the install writes to (for disk checks)."""
        ...

    def steps(self, artifact: Path, version: str) -> list[ApplyStep]: ...

    def apply(self, artifact: Path, version: str) -> Result[None, ApplyFailed]: ...


class CommandApplier:
    """Shared step runner; subclasses only describe their steps."""

    def __init__(self, runner: CommandRunner, prefix: tuple[str, ...] = ()) -> None:
        self._runner = runner
        self._prefix = prefix

    @property
    def required_commands(self) -> tuple[str, ...]:
        return self._prefix

    @property
    def target(self) -> Path:
        raise NotImplementedError

    def steps(self, artifact: Path, version: str) -> list[ApplyStep]:
        raise NotImplementedError

    def _step(self, name: str, *argv: str) -> ApplyStep:
        return ApplyStep(name=name, argv=(*self._prefix, *argv))

    def apply(self, artifact: Path, version: str) -> Result[None, ApplyFailed]:
        for step in self.steps(artifact, version):
            proc = self._runner.run(list(step.argv), capture=False)
            if proc.returncode != 0:
                return Err(ApplyFailed(step=step.name, returncode=proc.returncode))
        return Ok(None)


class TarballApplier(CommandApplier):
    """Extract into `<install_root>/<version>` and repoint the launcher link."""

    def __init__(
        self,
        runner: CommandRunner,
        product: ProductProfile,
        prefix: tuple[str, ...] = (),
    ) -> None:
        super().__init__(runner, prefix)
        self._product = product

    @property
    def required_commands(self) -> tuple[str, ...]:
        return (*self._prefix, "mkdir", "tar", "ln")

    @property
    def target(self) -> Path:
        return Path(self._product.install_root)

    def steps(self, artifact: Path, version: str) -> list[ApplyStep]:
        version_dir = f"{self._product.install_root.rstrip('/')}/{version}"
        return [
            self._step("create install directory", "mkdir", "-p", version_dir),
            self._step("extract archive", "tar", "-xzf", str(artifact), "-C", version_dir),
            self._step(
                "link launcher",
                "ln",
                "-sfn",
                f"{version_dir}/{self._product.executable}",
                self._product.launcher,
            ),
        ]


class PkgApplier(CommandApplier):
    """macOS installer package."""

    @property
    def required_commands(self) -> tuple[str, ...]:
        return (*self._prefix, "installer", "pkgutil")

    @property
    def target(self) -> Path:
        return Path("/")

    def steps(self, artifact: Path, version: str) -> list[ApplyStep]:
        return [self._step("run installer", "installer", "-pkg", str(artifact), "-target", "/")]


class MsiApplier(CommandApplier):
    """Windows Installer package, run unattended."""

    def __init__(self, runner: CommandRunner, target: Path) -> None:
        super().__init__(runner)
        self._target = target

    @property
    def required_commands(self) -> tuple[str, ...]:
        return ("msiexec",)

    @property
    def target(self) -> Path:
        return self._target

    def steps(self, artifact: Path, version: str) -> list[ApplyStep]:
        return [self._step("run msiexec", "msiexec", "/i", str(artifact), "/qn", "/norestart")]


def applier_for(
    platform: Platform,
    runner: CommandRunner,
    product: ProductProfile,
    prefix: tuple[str, ...] = (),
) -> CommandApplier:
    """Pick the applier for the host platform."""
    match platform:
        case Platform.WINDOWS:
            return MsiApplier(runner, Path(os.environ.get("ProgramFiles", r"C:\Program Files")))
        case Platform.MACOS:
            return PkgApplier(runner, prefix)
        case _:
            return TarballApplier(runner, product, prefix)
