"""Core domain types and logic."""

from .config import (
    IndexConfig,
    InstallOptions,
    PreflightConfig,
    ProductProfile,
    UpstallConfig,
    ConfigError,
    load_config,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "IndexConfig",
    "InstallOptions",
    "PreflightConfig",
    "ProductProfile",
    "UpstallConfig",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
