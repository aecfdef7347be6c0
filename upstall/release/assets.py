"""Release asset selection for OS/architecture specific artifacts.

A release may publish preview and RC builds next to the stable build under
the same architecture token. Candidates are ranked so the stable,
canonically named artifact wins; ties keep published order.
"""

from __future__ import annotations

import re

from upstall.core.result import Err, Ok, Result
from upstall.release.errors import NotFound
from upstall.release.model import (
    AssetDescriptor,
    PlatformDescriptor,
    ReleaseDescriptor,
    SelectionResult,
)

__all__ = ["select_asset", "score_asset", "is_candidate"]

PREVIEW_PENALTY = 10
RC_PENALTY = 5
CANONICAL_BONUS = 5

# "rc" only as its own token: "-rc.1", "_rc2", ".rc" but not "source"
_RC_RE = re.compile(r"(?:^|[-._])rc(?:[-._\d]|$)")


def is_candidate(asset: AssetDescriptor, platform: PlatformDescriptor) -> bool:
    name = asset.name
    return (
        platform.arch_token in name
        and platform.suffix_pattern in name
        and name.lower().endswith(platform.extension)
    )


def _canonical_re(product: str, platform: PlatformDescriptor) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(product)}-\d+(?:\.\d+)*-{re.escape(platform.suffix_pattern)}$",
        re.IGNORECASE,
    )


def score_asset(name: str, product: str, platform: PlatformDescriptor) -> int:
    """Score an asset name; higher is preferred."""
    lower = name.lower()
    score = 0
    if "preview" in lower:
        score -= PREVIEW_PENALTY
    if _RC_RE.search(lower):
        score -= RC_PENALTY
    if _canonical_re(product, platform).match(name):
        score += CANONICAL_BONUS
    return score


def select_asset(
    release: ReleaseDescriptor,
    platform: PlatformDescriptor,
    product: str,
) -> Result[SelectionResult, NotFound]:
    """Pick the artifact to install and its checksum sidecar.

    Args:
        release: Fetched release metadata
        platform: Target platform descriptor
        product: Product name used for the canonical-name bonus

    Returns:
        Ok(SelectionResult), or Err(NotFound) naming the suffix and tag
    """
    candidates = [a for a in release.assets if is_candidate(a, platform)]
    if not candidates:
        return Err(NotFound(suffix=platform.suffix_pattern, tag=release.tag))

    # sorted() is stable, so equal scores keep published order
    ranked = sorted(candidates, key=lambda a: score_asset(a.name, product, platform), reverse=True)
    winner = ranked[0]

    return Ok(SelectionResult(asset=winner, checksum_asset=release.find(winner.checksum_name)))
