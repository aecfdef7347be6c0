"""Installed-version probing.

Installed state is never stored: every run asks the installed executable
for its version. A missing executable means "not installed".
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from upstall.platform.process import CommandRunner

__all__ = ["VersionProbe", "ExecutableVersionProbe", "StaticVersionProbe"]


class VersionProbe(Protocol):
    def locate(self) -> str | None:
        """Path of the installed executable, or None."""
        ...

    def installed_version(self) -> str | None:
        """Version reported by the installed product, or None."""
        ...


class ExecutableVersionProbe:
    """Runs `<executable> <version_args>` and reads the first output line."""

    def __init__(
        self,
        runner: CommandRunner,
        executable: str,
        version_args: Sequence[str],
        *,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._version_args = tuple(version_args)
        self._which = which

    def locate(self) -> str | None:
        return self._which(self._executable)

    def installed_version(self) -> str | None:
        path = self.locate()
        if path is None:
            return None
        proc = self._runner.run([path, *self._version_args])
        if proc.returncode != 0:
            return None
        lines = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
        return lines[0] if lines else None


class StaticVersionProbe:
    """Probe with a fixed answer (tests, and hosts with nothing to probe)."""

    def __init__(self, version: str | None, path: str | None = None) -> None:
        self.version = version
        self.path = path if path is not None else ("/usr/local/bin/product" if version else None)
        self.calls = 0

    def locate(self) -> str | None:
        return self.path

    def installed_version(self) -> str | None:
        self.calls += 1
        return self.version
