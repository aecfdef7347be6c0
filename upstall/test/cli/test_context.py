from __future__ import annotations

from pathlib import Path

import pytest
import typer

import upstall.cli.context as context_module
from upstall.cli.context import CONFIG_ENV, NO_COLOR_ENV, TOKEN_ENV, build_context, config_path
from upstall.core.errors import ErrorCode
from upstall.output.console import MockConsole
from upstall.platform.detection import Arch, Platform, PlatformInfo


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.delenv(TOKEN_ENV, raising=False)
    monkeypatch.delenv(NO_COLOR_ENV, raising=False)
    monkeypatch.setattr(context_module, "user_config_dir", lambda: tmp_path / "user")
    monkeypatch.setattr(context_module, "detect", lambda: PlatformInfo(Platform.LINUX, Arch.X64))


class TestConfigPath:
    def test_explicit_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "env.toml"))
        assert config_path(tmp_path / "cli.toml") == (tmp_path / "cli.toml", True)

    def test_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "env.toml"))
        assert config_path(None) == (tmp_path / "env.toml", True)

    def test_default(self, tmp_path: Path) -> None:
        assert config_path(None) == (tmp_path / "user" / "config.toml", False)


class TestBuildContext:
    def test_defaults_without_file(self) -> None:
        ctx = build_context()
        assert ctx.config.index.owner == "PowerShell"
        assert ctx.platform.platform == Platform.LINUX

    def test_reads_default_file(self, tmp_path: Path) -> None:
        (tmp_path / "user").mkdir()
        (tmp_path / "user" / "config.toml").write_text(
            '[index]\nowner = "acme"\nrepo = "tool"\n', encoding="utf-8"
        )

        ctx = build_context()

        assert ctx.config.index.releases_url.endswith("/repos/acme/tool/releases")

    def test_missing_explicit_file_is_user_error(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path / "missing.toml")
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_token_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(TOKEN_ENV, "ghp_example")
        assert build_context().config.index.token == "ghp_example"

    def test_no_color_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[bool] = []

        def fake_console(*, no_color: bool = False) -> MockConsole:
            seen.append(no_color)
            return MockConsole()

        monkeypatch.setattr(context_module, "RichConsole", fake_console)
        monkeypatch.setenv(NO_COLOR_ENV, "1")

        build_context()

        assert seen == [True]
