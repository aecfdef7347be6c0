"""Release metadata resolution against a GitHub-style release index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from upstall.core.result import Err, Ok, Result
from upstall.core.structured import as_obj_list, as_str_dict, get_str
from upstall.release.errors import ResolutionFailed
from upstall.release.model import AssetDescriptor, ReleaseDescriptor

if TYPE_CHECKING:
    from upstall.core.config import IndexConfig
    from upstall.net.http import HttpClient

__all__ = ["ReleaseResolver", "parse_release"]


def parse_release(url: str, data: dict[str, Any]) -> Result[ReleaseDescriptor, ResolutionFailed]:
    """Build a ReleaseDescriptor from a release JSON object.

    Assets without a name or download URL make the payload malformed.
    """
    tag = get_str(data, "tag_name")
    if tag is None:
        return Err(ResolutionFailed(url=url, message="Missing tag_name in response"))

    raw_assets = as_obj_list(data.get("assets", []))
    if raw_assets is None:
        return Err(ResolutionFailed(url=url, message="Expected 'assets' to be a list"))

    assets: list[AssetDescriptor] = []
    for i, raw in enumerate(raw_assets):
        entry = as_str_dict(raw)
        if entry is None:
            return Err(ResolutionFailed(url=url, message=f"Asset #{i} is not an object"))
        name = get_str(entry, "name")
        download_url = get_str(entry, "browser_download_url")
        if name is None or download_url is None:
            return Err(
                ResolutionFailed(url=url, message=f"Asset #{i} lacks name or browser_download_url")
            )
        assets.append(AssetDescriptor(name=name, download_url=download_url))

    return Ok(ReleaseDescriptor(tag=tag, assets=tuple(assets)))


class ReleaseResolver:
    """Fetches release metadata: latest stable, or one exact tag.

    Retries belong to the HTTP client; one failed fetch is one
    ResolutionFailed carrying the attempted URL.
    """

    def __init__(self, http: HttpClient, index: IndexConfig) -> None:
        self._http = http
        self._index = index

    def release_url(self, tag: str | None) -> str:
        base = self._index.releases_url
        if not tag:
            return f"{base}/latest"
        return f"{base}/tags/{tag}"

    def resolve(self, tag: str | None = None) -> Result[ReleaseDescriptor, ResolutionFailed]:
        """Resolve `tag` (or the latest stable release when empty)."""
        url = self.release_url(tag)
        result = self._http.get_json(url)
        if isinstance(result, Err):
            return Err(ResolutionFailed(url=url, message=str(result.error)))
        return parse_release(url, result.value)
