"""Subprocess execution seam.

`CommandRunner` is the injectable interface used by appliers, version probes,
signature checks and uninstall steps. Production code uses
`DefaultCommandRunner`; tests substitute `MockCommandRunner` to record calls
instead of touching the system.

Usage:
    runner = DefaultCommandRunner()
    proc = runner.run(["pwsh", "-Version"])
    if proc.returncode == 0:
        print(proc.stdout)
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "CommandRunner",
    "DefaultCommandRunner",
    "MockCommandRunner",
    "EXIT_NOT_FOUND",
]

# Conventional shell exit code for "command not found"
EXIT_NOT_FOUND = 127


class CommandRunner(Protocol):
    """Protocol for running external commands."""

    def run(
        self, args: Sequence[str], *, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        """Run a command and return the completed process.

        Args:
            args: Command and arguments
            capture: Capture stdout/stderr instead of streaming to the terminal

        Returns:
            CompletedProcess with returncode, stdout, stderr
        """
        ...


class DefaultCommandRunner:
    """Command runner backed by subprocess.run.

    A command that cannot be started reports exit code 127 instead of
    raising, so callers only ever interpret exit codes.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(
        self, args: Sequence[str], *, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                list(args),
                capture_output=capture,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return subprocess.CompletedProcess(
                list(args), -1, "", f"Command timed out after {self.timeout}s"
            )
        except OSError as e:
            return subprocess.CompletedProcess(list(args), EXIT_NOT_FOUND, "", str(e))


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_responses() -> dict[tuple[str, ...], tuple[int, str]]:
    return {}


def _empty_failures() -> dict[str, int]:
    return {}


@dataclass
class MockCommandRunner:
    """Command runner that records calls and returns canned results.

    Unknown commands succeed with empty output.

    Usage:
        runner = MockCommandRunner()
        runner.respond(["pkgutil", "--pkgs"], stdout="com.microsoft.powershell\\n")
        runner.fail_on("tar", returncode=2)
    """

    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)
    responses: dict[tuple[str, ...], tuple[int, str]] = field(default_factory=_empty_responses)
    failing_programs: dict[str, int] = field(default_factory=_empty_failures)

    def respond(self, args: Sequence[str], *, stdout: str = "", returncode: int = 0) -> None:
        """Set the result for an exact command line."""
        self.responses[tuple(args)] = (returncode, stdout)

    def fail_on(self, program: str, *, returncode: int = 1) -> None:
        """Make every invocation that has `program` as an argument fail."""
        self.failing_programs[program] = returncode

    def run(
        self, args: Sequence[str], *, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        key = tuple(args)
        self.calls.append(key)
        if key in self.responses:
            code, stdout = self.responses[key]
            return subprocess.CompletedProcess(list(args), code, stdout, "")
        for program, code in self.failing_programs.items():
            if program in key:
                return subprocess.CompletedProcess(list(args), code, "", f"{program} failed")
        return subprocess.CompletedProcess(list(args), 0, "", "")

    def called(self, program: str) -> bool:
        """Check whether any recorded command has `program` as an argument."""
        return any(program in call for call in self.calls)
