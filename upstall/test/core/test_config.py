"""Tests for upstall.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from upstall.core.config import (
    DEFAULT_MIN_FREE_MB,
    ConfigError,
    IndexConfig,
    InstallOptions,
    PreflightConfig,
    ProductProfile,
    UpstallConfig,
    load_config,
)
from upstall.core.result import Err, Ok
from upstall.core.structured import get_int, get_str, get_str_list


class TestDefaults:
    def test_index(self) -> None:
        index = IndexConfig()
        assert index.releases_url == "https://api.github.com/repos/PowerShell/PowerShell/releases"
        assert index.token is None

    def test_product(self) -> None:
        product = ProductProfile()
        assert product.executable == "pwsh"
        assert product.install_root == "/usr/local/microsoft/powershell"
        assert product.launcher == "/usr/local/bin/pwsh"

    def test_preflight(self) -> None:
        assert PreflightConfig().min_free_mb == DEFAULT_MIN_FREE_MB == 500

    def test_options(self) -> None:
        options = InstallOptions()
        assert options.tag is None
        assert not (options.force or options.dry_run or options.uninstall)

    def test_options_frozen(self) -> None:
        with pytest.raises(AttributeError):
            InstallOptions().force = True  # type: ignore[misc]


class TestFromDict:
    def test_empty(self) -> None:
        assert UpstallConfig.from_dict({}) == UpstallConfig()

    def test_overrides(self) -> None:
        config = UpstallConfig.from_dict(
            {
                "index": {"owner": "acme", "repo": "tool", "token": "t0k"},
                "product": {
                    "name": "tool",
                    "executable": "tool",
                    "version_args": ["--version"],
                    "user_data_dirs": [],
                },
                "preflight": {"min_free_mb": 100, "connect_timeout": 3},
            }
        )
        assert config.index.releases_url.endswith("/repos/acme/tool/releases")
        assert config.index.token == "t0k"
        assert config.product.version_args == ("--version",)
        assert config.product.user_data_dirs == ()
        assert config.product.launcher == "/usr/local/bin/pwsh"
        assert config.preflight.min_free_mb == 100
        assert config.preflight.connect_timeout == 3.0

    def test_blank_strings_use_defaults(self) -> None:
        config = UpstallConfig.from_dict({"index": {"owner": "  ", "token": ""}})
        assert config.index.owner == "PowerShell"
        assert config.index.token is None

    def test_zero_min_free_allowed(self) -> None:
        config = UpstallConfig.from_dict({"preflight": {"min_free_mb": 0}})
        assert config.preflight.min_free_mb == 0

    def test_negative_min_free_rejected(self) -> None:
        with pytest.raises(ValueError):
            UpstallConfig.from_dict({"preflight": {"min_free_mb": -1}})


class TestWithToken:
    def test_applies_env_token(self) -> None:
        assert UpstallConfig().with_token("env").index.token == "env"

    def test_configured_token_wins(self) -> None:
        config = UpstallConfig.from_dict({"index": {"token": "file"}})
        assert config.with_token("env").index.token == "file"

    def test_none_is_noop(self) -> None:
        config = UpstallConfig()
        assert config.with_token(None) is config


class TestLoadConfig:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            '[index]\nowner = "acme"\n\n[preflight]\nmin_free_mb = 50\n', encoding="utf-8"
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.index.owner == "acme"
        assert result.value.preflight.min_free_mb == 50

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_bad_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[index\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert result.error.path == path

    def test_bad_value(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[preflight]\nmin_free_mb = -5\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "min_free_mb" in result.error.message


class TestStructured:
    def test_get_str_strips(self) -> None:
        assert get_str({"a": "  x "}, "a") == "x"
        assert get_str({"a": 1}, "a") is None

    def test_get_int_rejects_bool(self) -> None:
        assert get_int({"a": True}, "a") is None
        assert get_int({"a": 3}, "a") == 3

    def test_get_str_list(self) -> None:
        assert get_str_list({"a": ["x", "y"]}, "a") == ("x", "y")
        assert get_str_list({"a": ["x", 1]}, "a") is None
        assert get_str_list({}, "a") is None
