from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from upstall.core.config import UpstallConfig, load_config
from upstall.core.errors import ErrorCode
from upstall.core.result import Err
from upstall.output.console import ConsoleProtocol, RichConsole
from upstall.platform.detection import PlatformInfo, detect
from upstall.platform.paths import user_config_dir

CONFIG_ENV = "UPSTALL_CONFIG"
TOKEN_ENV = "GITHUB_TOKEN"
NO_COLOR_ENV = "NO_COLOR"


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformInfo
    config: UpstallConfig
    console: ConsoleProtocol


def config_path(explicit: Path | None) -> tuple[Path, bool]:
    """Config file to read, and whether the user asked for it explicitly."""
    if explicit is not None:
        return explicit.expanduser(), True
    from_env = os.environ.get(CONFIG_ENV)
    if from_env:
        return Path(from_env).expanduser(), True
    return user_config_dir() / "config.toml", False


def build_context(config_file: Path | None = None) -> CLIContext:
    path, explicit = config_path(config_file)

    config = UpstallConfig()
    if explicit or path.exists():
        result = load_config(path)
        if isinstance(result, Err):
            typer.echo(f"error: {result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = result.value

    return CLIContext(
        platform=detect(),
        config=config.with_token(os.environ.get(TOKEN_ENV)),
        console=RichConsole(no_color=bool(os.environ.get(NO_COLOR_ENV))),
    )
