"""Network access: HTTP client and artifact downloads."""

from upstall.net.download import ArtifactDownloader, DownloadResult
from upstall.net.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Download
    "ArtifactDownloader",
    "DownloadResult",
]
