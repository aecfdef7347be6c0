"""Privilege elevation for system-wide install steps."""

from __future__ import annotations

import os
import shutil

from .detection import Platform

__all__ = ["elevation_prefix"]


def elevation_prefix(platform: Platform) -> tuple[str, ...]:
    """Return the command prefix needed to write system locations.

    Empty on Windows (msiexec elevates itself) and when already root.
    When sudo is not installed the prefix is empty too, and the step
    fails with its own exit code.
    """
    if not platform.is_unix:
        return ()
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() == 0:
        return ()
    if shutil.which("sudo") is None:
        return ()
    return ("sudo",)
