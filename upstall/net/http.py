"""HTTP client abstraction for release metadata and artifact downloads.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: urllib implementation with retries, resume and bearer auth
- MockHttpClient: In-memory implementation for testing
"""

from __future__ import annotations

import json
import ssl
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast, runtime_checkable

from upstall import __version__
from upstall.core.result import Err, Ok, Result
from upstall.core.structured import as_str_dict

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"

    @property
    def is_transient(self) -> bool:
        """Network failures and server errors are worth retrying; 4xx are not."""
        return self.status == 0 or self.status >= 500 or self.status == 429


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Implementations own retry and resume behaviour; callers issue one call
    per logical fetch.
    """

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        """Fetch URL and parse a JSON object."""
        ...

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return the body as text."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to file.

        Args:
            url: URL to download
            dest: Destination path
            progress: Optional callback(downloaded, total)

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Optional bearer token on API requests (never on artifact downloads,
      which redirect to third-party storage)
    - Retries of transient failures with a fixed delay
    - Resuming a partial download with a Range request between attempts
    """

    def __init__(
        self,
        timeout: float = 30.0,
        *,
        token: str | None = None,
        retries: int = 3,
        retry_delay: float = 2.0,
        user_agent: str = f"upstall/{__version__}",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._token = token
        self._retries = max(1, retries)
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._ssl_context = ssl.create_default_context()

    def _headers(self, *, api: bool, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if api:
            headers["Accept"] = "application/vnd.github+json"
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
        if extra:
            headers.update(extra)
        return headers

    def _with_retries[T](self, attempt: Callable[[], Result[T, HttpError]]) -> Result[T, HttpError]:
        result = attempt()
        for _ in range(self._retries - 1):
            if isinstance(result, Ok) or not result.error.is_transient:
                return result
            self._sleep(self._retry_delay)
            result = attempt()
        return result

    def _request_once(self, url: str) -> Result[bytes, HttpError]:
        try:
            req = urllib.request.Request(url, headers=self._headers(api=True))
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self._with_retries(lambda: self._request_once(url))
        if isinstance(result, Err):
            return result

        try:
            data_obj: object = json.loads(result.value.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(cast(dict[str, Any], data))

    def get_text(self, url: str) -> Result[str, HttpError]:
        result = self._with_retries(lambda: self._request_once(url))
        if isinstance(result, Err):
            return result

        try:
            return Ok(result.value.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def _download_once(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None,
    ) -> Result[Path, HttpError]:
        offset = dest.stat().st_size if dest.exists() else 0
        extra = {"Range": f"bytes={offset}-"} if offset else None
        try:
            req = urllib.request.Request(url, headers=self._headers(api=False, extra=extra))
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                # 206 means the server honoured the Range header
                resumed = offset > 0 and response.status == 206
                downloaded = offset if resumed else 0
                total = int(response.headers.get("Content-Length", 0)) + downloaded

                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "ab" if resumed else "wb") as f:
                    while True:
                        chunk = response.read(_CHUNK_SIZE)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)

                return Ok(dest)

        except urllib.error.HTTPError as e:
            if e.code == 416:
                # Range not satisfiable: the partial file is already complete
                return Ok(dest)
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Download timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        return self._with_retries(lambda: self._download_once(url, dest, progress))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_json("https://api.github.com/repos/o/r/releases/latest", {...})
        client.set_download("https://example.com/a.tar.gz", b"bytes")
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, dict[str, Any] | HttpError] = {}
        self._text_responses: dict[str, str | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: dict[str, Any] | HttpError) -> None:
        self._json_responses[url] = response

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def calls_of(self, kind: str) -> list[str]:
        """URLs requested through one method ("get_json", "get_text", "download")."""
        return [url for method, url in self.calls if method == kind]

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("get_json", url))

        response = self._json_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))

        response = self._text_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Write the predefined content to dest."""
        self.calls.append(("download", url))

        response = self._download_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        if progress:
            progress(len(response), len(response))
        return Ok(dest)
