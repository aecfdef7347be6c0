"""Tests for upstall.platform.process and privilege helpers."""

from __future__ import annotations

import sys
from unittest.mock import patch

from upstall.platform import privilege
from upstall.platform.detection import Platform
from upstall.platform.privilege import elevation_prefix
from upstall.platform.process import EXIT_NOT_FOUND, DefaultCommandRunner, MockCommandRunner


class TestDefaultCommandRunner:
    def test_captures_output(self) -> None:
        proc = DefaultCommandRunner().run([sys.executable, "-c", "print('7.5.4')"])
        assert proc.returncode == 0
        assert proc.stdout.strip() == "7.5.4"

    def test_nonzero_exit(self) -> None:
        proc = DefaultCommandRunner().run([sys.executable, "-c", "raise SystemExit(3)"])
        assert proc.returncode == 3

    def test_missing_program(self) -> None:
        proc = DefaultCommandRunner().run(["definitely-not-a-real-program-xyz"])
        assert proc.returncode == EXIT_NOT_FOUND

    def test_timeout(self) -> None:
        runner = DefaultCommandRunner(timeout=0.2)
        proc = runner.run([sys.executable, "-c", "import time; time.sleep(5)"])
        assert proc.returncode == -1
        assert "timed out" in proc.stderr


class TestMockCommandRunner:
    def test_records_calls(self) -> None:
        runner = MockCommandRunner()
        runner.run(["tar", "-xzf", "a.tar.gz"])
        assert runner.calls == [("tar", "-xzf", "a.tar.gz")]
        assert runner.called("tar")
        assert not runner.called("ln")

    def test_canned_response(self) -> None:
        runner = MockCommandRunner()
        runner.respond(["pkgutil", "--pkgs"], stdout="com.microsoft.powershell\n")

        proc = runner.run(["pkgutil", "--pkgs"])

        assert proc.stdout == "com.microsoft.powershell\n"

    def test_fail_on(self) -> None:
        runner = MockCommandRunner()
        runner.fail_on("installer", returncode=5)

        assert runner.run(["sudo", "installer", "-pkg", "p"]).returncode == 5
        assert runner.run(["ls"]).returncode == 0


class TestElevationPrefix:
    def test_windows_never_elevates(self) -> None:
        assert elevation_prefix(Platform.WINDOWS) == ()

    def test_root_needs_nothing(self) -> None:
        with patch.object(privilege.os, "geteuid", return_value=0, create=True):
            assert elevation_prefix(Platform.LINUX) == ()

    def test_user_gets_sudo(self) -> None:
        with (
            patch.object(privilege.os, "geteuid", return_value=1000, create=True),
            patch.object(privilege.shutil, "which", return_value="/usr/bin/sudo"),
        ):
            assert elevation_prefix(Platform.MACOS) == ("sudo",)

    def test_no_sudo_installed(self) -> None:
        with (
            patch.object(privilege.os, "geteuid", return_value=1000, create=True),
            patch.object(privilege.shutil, "which", return_value=None),
        ):
            assert elevation_prefix(Platform.LINUX) == ()
