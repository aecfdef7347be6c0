"""Platform abstraction layer."""

from .detection import (
    Arch,
    Libc,
    LinuxDistro,
    Platform,
    PlatformInfo,
    detect,
    is_windows,
)
from .paths import (
    expand_user_path,
    home,
    user_config_dir,
)
from .privilege import elevation_prefix
from .process import (
    CommandRunner,
    DefaultCommandRunner,
    MockCommandRunner,
)

__all__ = [
    # detection
    "Arch",
    "Libc",
    "LinuxDistro",
    "Platform",
    "PlatformInfo",
    "detect",
    "is_windows",
    # paths
    "expand_user_path",
    "home",
    "user_config_dir",
    # privilege
    "elevation_prefix",
    # process
    "CommandRunner",
    "DefaultCommandRunner",
    "MockCommandRunner",
]
