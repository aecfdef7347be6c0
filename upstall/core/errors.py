"""Error codes for CLI exit status.

Each fatal install error maps to one of these codes (see
``upstall.output.errors.install_error_exit_code``). Skips such as
"already current" and "nothing to uninstall" exit with ``OK``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI.

    These values are used as process exit codes and should remain stable.
    - 0: Success (including skip outcomes)
    - 1: User error (bad tag, bad config, no artifact for this platform)
    - 2: Environment error (missing commands, unsupported platform)
    - 3: Install error (installer/uninstaller exited non-zero)
    - 4: Network error (index unreachable, download failed)
    - 5: I/O error (insufficient disk space)
    - 6: Integrity error (checksum mismatch)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    INSTALL_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTEGRITY_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
