"""Release resolution and install orchestration for GitHub-published software."""

__version__ = "0.3.0"
