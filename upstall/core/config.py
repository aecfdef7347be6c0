"""Typed configuration loading and access.

Configuration is read once (by the CLI layer) into frozen dataclasses and
passed explicitly to every component. Nothing here is module-level mutable
state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_float,
    get_int,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "UpstallConfig",
    "IndexConfig",
    "ProductProfile",
    "PreflightConfig",
    "InstallOptions",
    "ConfigError",
    "load_config",
    "DEFAULT_MIN_FREE_MB",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_OWNER = "PowerShell"
DEFAULT_REPO = "PowerShell"

DEFAULT_MIN_FREE_MB = 500
DEFAULT_CONNECT_TIMEOUT = 10.0

_PWSH_VERSION_ARGS = (
    "-NoLogo",
    "-NoProfile",
    "-Command",
    "$PSVersionTable.PSVersion.ToString()",
)
_PWSH_USER_DATA_DIRS = (
    "~/.config/powershell",
    "~/.local/share/powershell",
    "~/.cache/powershell",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Where releases are published.

    Attributes:
        api_base: Base URL of the GitHub-compatible REST API
        owner: Repository owner
        repo: Repository name
        token: Optional bearer token (avoids anonymous rate limits)
    """

    api_base: str = DEFAULT_API_BASE
    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    token: str | None = None

    @property
    def releases_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/repos/{self.owner}/{self.repo}/releases"


@dataclass(frozen=True, slots=True)
class ProductProfile:
    """Everything product-specific the engine needs.

    Defaults describe PowerShell as published on GitHub.
    """

    name: str = "powershell"
    executable: str = "pwsh"
    version_args: tuple[str, ...] = _PWSH_VERSION_ARGS
    install_root: str = "/usr/local/microsoft/powershell"
    launcher: str = "/usr/local/bin/pwsh"
    signer: str = "Developer ID Installer: Microsoft Corporation"
    receipt_pattern: str = "powershell"
    windows_display_name: str = "PowerShell 7"
    user_data_dirs: tuple[str, ...] = _PWSH_USER_DATA_DIRS


@dataclass(frozen=True, slots=True)
class PreflightConfig:
    """Preflight thresholds."""

    min_free_mb: int = DEFAULT_MIN_FREE_MB
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT


@dataclass(frozen=True, slots=True)
class UpstallConfig:
    """Main configuration container."""

    index: IndexConfig = field(default_factory=IndexConfig)
    product: ProductProfile = field(default_factory=ProductProfile)
    preflight: PreflightConfig = field(default_factory=PreflightConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> UpstallConfig:
        """Create config from a mapping (parsed TOML)."""
        index: StrDict = get_table(data, "index") or {}
        product: StrDict = get_table(data, "product") or {}
        preflight: StrDict = get_table(data, "preflight") or {}

        defaults = ProductProfile()
        user_data_dirs = get_str_list(product, "user_data_dirs")
        min_free = get_int(preflight, "min_free_mb")
        if min_free is not None and min_free < 0:
            raise ValueError(f"preflight.min_free_mb must be >= 0 (got {min_free})")

        return cls(
            index=IndexConfig(
                api_base=get_str(index, "api_base") or DEFAULT_API_BASE,
                owner=get_str(index, "owner") or DEFAULT_OWNER,
                repo=get_str(index, "repo") or DEFAULT_REPO,
                token=get_str(index, "token"),
            ),
            product=ProductProfile(
                name=get_str(product, "name") or defaults.name,
                executable=get_str(product, "executable") or defaults.executable,
                version_args=get_str_list(product, "version_args") or defaults.version_args,
                install_root=get_str(product, "install_root") or defaults.install_root,
                launcher=get_str(product, "launcher") or defaults.launcher,
                signer=get_str(product, "signer") or defaults.signer,
                receipt_pattern=get_str(product, "receipt_pattern") or defaults.receipt_pattern,
                windows_display_name=get_str(product, "windows_display_name")
                or defaults.windows_display_name,
                user_data_dirs=(
                    defaults.user_data_dirs if user_data_dirs is None else user_data_dirs
                ),
            ),
            preflight=PreflightConfig(
                min_free_mb=DEFAULT_MIN_FREE_MB if min_free is None else min_free,
                connect_timeout=get_float(preflight, "connect_timeout") or DEFAULT_CONNECT_TIMEOUT,
            ),
        )

    def with_token(self, token: str | None) -> UpstallConfig:
        """Return a copy whose index token is `token`, unless one is configured."""
        if not token or self.index.token:
            return self
        index = IndexConfig(
            api_base=self.index.api_base,
            owner=self.index.owner,
            repo=self.index.repo,
            token=token,
        )
        return UpstallConfig(index=index, product=self.product, preflight=self.preflight)


@dataclass(frozen=True, slots=True)
class InstallOptions:
    """Validated per-run options supplied by the CLI.

    Attributes:
        tag: Release tag to install; None means latest stable
        output_directory: Where to save the artifact (kept after install)
        keep_artifact: Keep the artifact even when downloaded to a temp dir
        force: Reinstall even if the installed version is current
        uninstall: Remove the product instead of installing
        skip_checksum: Bypass SHA-256 verification
        dry_run: Report what would happen without side effects
    """

    tag: str | None = None
    output_directory: Path | None = None
    keep_artifact: bool = False
    force: bool = False
    uninstall: bool = False
    skip_checksum: bool = False
    dry_run: bool = False


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[UpstallConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Ok(UpstallConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(UpstallConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
