"""Platform-aware path utilities.

Locates user-level directories (home, upstall's config dir) and expands
`~` in product paths against the detected home rather than the process
default, so tests can point HOME somewhere else.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from .detection import is_windows

__all__ = [
    "home",
    "user_config_dir",
    "expand_user_path",
    "clear_caches",
]

APP_NAME = "upstall"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then Path.home().
    """
    if is_windows():
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)

    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user-level configuration directory.

    Location: ~/.config/upstall/ (Linux/macOS) or %APPDATA%/upstall/ (Windows)
    """
    if is_windows():
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


def expand_user_path(raw: str, *, base: Path | None = None) -> Path:
    """Expand a leading `~` against `base` (defaults to `home()`)."""
    root = base if base is not None else home()
    if raw == "~":
        return root
    if raw.startswith(("~/", "~\\")):
        return root / raw[2:]
    return Path(raw)


def clear_caches() -> None:
    """Clear cached paths (tests change HOME)."""
    home.cache_clear()
    user_config_dir.cache_clear()
