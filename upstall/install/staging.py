"""Download directory ownership for one run."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

__all__ = ["StagingArea", "staging_area"]


@dataclass
class StagingArea:
    """Where a run downloads its artifact.

    Attributes:
        path: Download directory
        ephemeral: True if the run created the directory and owns it
        keep: Set on success to leave an ephemeral directory in place
    """

    path: Path
    ephemeral: bool
    keep: bool = False


@contextmanager
def staging_area(
    output_directory: Path | None, *, prefix: str = "upstall-"
) -> Iterator[StagingArea]:
    """Provide a download directory, removing it afterwards if the run owns it.

    A caller-supplied `output_directory` is created if needed and never
    removed. Otherwise a fresh temporary directory is used and removed on
    every exit route (including exceptions and KeyboardInterrupt) unless
    `keep` was set.
    """
    if output_directory is not None:
        output_directory.mkdir(parents=True, exist_ok=True)
        yield StagingArea(path=output_directory, ephemeral=False)
        return

    area = StagingArea(path=Path(tempfile.mkdtemp(prefix=prefix)), ephemeral=True)
    try:
        yield area
    finally:
        if not area.keep:
            shutil.rmtree(area.path, ignore_errors=True)
