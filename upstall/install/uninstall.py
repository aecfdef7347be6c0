"""Uninstall: locate an existing install and remove it.

Locating and removing are separate so the Windows registry lookup and the
Unix filesystem lookup share one removal flow.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from upstall.core.result import Err, Ok, Result
from upstall.install.report import Outcome
from upstall.output.console import Style
from upstall.platform.paths import expand_user_path
from upstall.release.errors import ApplyFailed

if TYPE_CHECKING:
    from upstall.core.config import ProductProfile
    from upstall.output.console import ConsoleProtocol
    from upstall.platform.process import CommandRunner

__all__ = [
    "UninstallEntry",
    "UninstallLocator",
    "FilesystemUninstallLocator",
    "RegistryUninstallLocator",
    "Uninstaller",
    "read_uninstall_registry",
]

type Command = tuple[str, ...]

_UNINSTALL_KEYS = (
    r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall",
    r"SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall",
)


@dataclass(frozen=True, slots=True)
class UninstallEntry:
    """An installed copy of the product and how to remove it.

    Attributes:
        display_name: Human-readable name of what was found
        invocation_command: Removal command; empty if there is nothing to run
        install_root: Installed tree, when known
        follow_up_commands: Best-effort cleanup run after the invocation
    """

    display_name: str
    invocation_command: Command
    install_root: Path | None = None
    follow_up_commands: tuple[Command, ...] = ()


class UninstallLocator(Protocol):
    def locate(self) -> UninstallEntry | None: ...


class FilesystemUninstallLocator:
    """Finds a tarball/pkg install under the product's install root.

    On macOS package receipts matching `receipt_pattern` are also collected
    and forgotten after removal.
    """

    def __init__(
        self,
        product: ProductProfile,
        runner: CommandRunner,
        *,
        prefix: Command = (),
        receipts: bool = False,
    ) -> None:
        self._product = product
        self._runner = runner
        self._prefix = prefix
        self._receipts = receipts

    def _receipt_ids(self) -> list[str]:
        proc = self._runner.run(["pkgutil", "--pkgs"])
        if proc.returncode != 0:
            return []
        pattern = self._product.receipt_pattern.lower()
        ids: list[str] = []
        for line in proc.stdout.splitlines():
            receipt = line.strip().lower()
            if not receipt or pattern not in receipt:
                continue
            # A side-by-side preview install keeps its own receipt
            if "preview" in receipt and "preview" not in pattern:
                continue
            ids.append(line.strip())
        return ids

    def locate(self) -> UninstallEntry | None:
        root = Path(self._product.install_root)
        receipts = self._receipt_ids() if self._receipts else []
        has_root = root.is_dir()
        if not has_root and not receipts:
            return None

        invocation: Command = (*self._prefix, "rm", "-rf", str(root)) if has_root else ()
        follow_ups = tuple((*self._prefix, "pkgutil", "--forget", r) for r in receipts)
        return UninstallEntry(
            display_name=f"{self._product.name} at {root}",
            invocation_command=invocation,
            install_root=root,
            follow_up_commands=follow_ups,
        )


def read_uninstall_registry() -> list[dict[str, str]]:
    """Read string values of every HKLM Uninstall subkey (Windows only)."""
    import winreg

    entries: list[dict[str, str]] = []
    for key_path in _UNINSTALL_KEYS:
        try:
            parent = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key_path)
        except OSError:
            continue
        with parent:
            index = 0
            while True:
                try:
                    sub_name = winreg.EnumKey(parent, index)
                except OSError:
                    break
                index += 1
                try:
                    with winreg.OpenKey(parent, sub_name) as sub:
                        values: dict[str, str] = {}
                        for name in ("DisplayName", "UninstallString",
                                     "QuietUninstallString", "InstallLocation"):
                            try:
                                value, _ = winreg.QueryValueEx(sub, name)
                            except OSError:
                                continue
                            if isinstance(value, str):
                                values[name] = value
                        entries.append(values)
                except OSError:
                    continue
    return entries


class RegistryUninstallLocator:
    """Finds the product among Windows "Programs and Features" entries."""

    def __init__(
        self,
        display_name: str,
        reader: Callable[[], Iterable[dict[str, str]]] = read_uninstall_registry,
    ) -> None:
        self._display_name = display_name
        self._reader = reader

    def matches(self, display_name: str) -> bool:
        """Prefix match that keeps a preview build apart from the stable one."""
        wanted = self._display_name.lower()
        name = display_name.lower()
        if not name.startswith(wanted):
            return False
        return "preview" in wanted or "preview" not in name[len(wanted) :]

    def locate(self) -> UninstallEntry | None:
        for values in self._reader():
            name = values.get("DisplayName", "")
            if not self.matches(name):
                continue
            command = values.get("QuietUninstallString") or values.get("UninstallString")
            if not command:
                continue
            argv = tuple(shlex.split(command, posix=False))
            if argv and argv[0].lower().startswith("msiexec"):
                argv = tuple(f"/X{a[2:]}" if a.lower().startswith("/i") else a for a in argv)
                if not any(a.lower() in ("/qn", "/quiet") for a in argv):
                    argv = (*argv, "/qn", "/norestart")
            location = values.get("InstallLocation")
            return UninstallEntry(
                display_name=name,
                invocation_command=argv,
                install_root=Path(location) if location else None,
            )
        return None


class Uninstaller:
    """Removes an installed product found by an `UninstallLocator`.

    User profile data is reported, never deleted. `prune_dirs` removes the
    emptied install root and its parent with `rmdir` (Unix only).
    """

    def __init__(
        self,
        runner: CommandRunner,
        console: ConsoleProtocol,
        locator: UninstallLocator,
        product: ProductProfile,
        *,
        prefix: Command = (),
        prune_dirs: bool = True,
    ) -> None:
        self._runner = runner
        self._console = console
        self._locator = locator
        self._product = product
        self._prefix = prefix
        self._prune_dirs = prune_dirs

    def _launcher_link(self) -> Path | None:
        """Launcher symlink, if it points into the install root."""
        launcher = Path(self._product.launcher)
        if not launcher.is_symlink():
            return None
        try:
            target = str(launcher.readlink())
        except OSError:
            return None
        root = self._product.install_root.rstrip("/")
        return launcher if target.startswith(f"{root}/") else None

    def _run(self, argv: Command, *, dry_run: bool) -> int:
        if dry_run:
            self._console.print(f"[dry-run] {' '.join(argv)}", Style.DIM)
            return 0
        return self._runner.run(list(argv), capture=False).returncode

    def uninstall(self, *, dry_run: bool = False) -> Result[Outcome, ApplyFailed]:
        entry = self._locator.locate()
        link = self._launcher_link()
        if entry is None and link is None:
            self._console.info(f"No {self._product.name} install found")
            return Ok(Outcome.NOTHING_TO_UNINSTALL)

        if entry is not None:
            self._console.print(f"Uninstalling {entry.display_name}")
            if entry.invocation_command:
                code = self._run(entry.invocation_command, dry_run=dry_run)
                if code != 0:
                    return Err(ApplyFailed(step="uninstall", returncode=code))
            for follow_up in entry.follow_up_commands:
                code = self._run(follow_up, dry_run=dry_run)
                if code != 0:
                    self._console.warning(f"'{' '.join(follow_up)}' exited with {code}")

        if link is not None:
            self._console.print(f"Removing launcher link: {link}", Style.DIM)
            code = self._run((*self._prefix, "rm", "-f", str(link)), dry_run=dry_run)
            if code != 0:
                self._console.warning(f"could not remove {link} (exit {code})")

        if self._prune_dirs and entry is not None and entry.install_root is not None:
            root = entry.install_root
            for directory in (root, root.parent):
                # Fails harmlessly when not empty or already gone
                self._run((*self._prefix, "rmdir", str(directory)), dry_run=dry_run)

        self._report_user_data()
        self._console.success(f"{self._product.name} uninstalled")
        return Ok(Outcome.UNINSTALLED)

    def _report_user_data(self) -> None:
        leftovers = [
            path
            for raw in self._product.user_data_dirs
            if (path := expand_user_path(raw)).exists()
        ]
        if not leftovers:
            return
        self._console.info("User data was left in place:")
        for path in leftovers:
            self._console.print(f"  {path}", Style.DIM)
