"""Tests for upstall.net.http - HTTP client abstraction."""

from __future__ import annotations

import io
import urllib.error
import urllib.request
from pathlib import Path

import pytest

from upstall.core.result import Err, Ok
from upstall.net.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


class FakeResponse(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200, headers: dict[str, str] | None = None):
        super().__init__(body)
        self.status = status
        self.headers = headers or {"Content-Length": str(len(body))}


class Recorder:
    """Stands in for urllib.request.urlopen."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[urllib.request.Request] = []

    def __call__(self, req: urllib.request.Request, **_: object) -> FakeResponse:
        self.requests.append(req)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _client(**kwargs: object) -> RealHttpClient:
    return RealHttpClient(timeout=1.0, sleep=lambda _: None, **kwargs)  # type: ignore[arg-type]


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError("u", code, "err", {}, None)  # type: ignore[arg-type]


class TestHttpError:
    def test_str_with_status(self) -> None:
        assert str(HttpError("u", 404, "Not Found")) == "HTTP 404: Not Found (u)"

    def test_str_network(self) -> None:
        assert str(HttpError("u", 0, "refused")) == "refused (u)"

    @pytest.mark.parametrize(
        ("status", "transient"), [(0, True), (500, True), (429, True), (404, False)]
    )
    def test_is_transient(self, status: int, transient: bool) -> None:
        assert HttpError("u", status, "m").is_transient is transient


class TestMockHttpClient:
    def test_is_client(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_unset_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://x")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_download_and_calls(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download("https://x/a", b"abc")
        seen: list[tuple[int, int]] = []

        result = client.download(
            "https://x/a", tmp_path / "d" / "a", progress=lambda d, t: seen.append((d, t))
        )

        assert isinstance(result, Ok)
        assert (tmp_path / "d" / "a").read_bytes() == b"abc"
        assert seen == [(3, 3)]
        assert client.calls_of("download") == ["https://x/a"]


class TestRealHttpClient:
    def test_defaults(self) -> None:
        client = RealHttpClient()
        assert client.timeout == 30.0
        assert client.user_agent.startswith("upstall/")

    def test_get_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        opener = Recorder(FakeResponse(b'{"tag_name": "v7.5.4"}'))
        monkeypatch.setattr(urllib.request, "urlopen", opener)

        result = _client().get_json("https://api.github.com/x")

        assert isinstance(result, Ok)
        assert result.value == {"tag_name": "v7.5.4"}

    def test_json_must_be_object(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(urllib.request, "urlopen", Recorder(FakeResponse(b"[1, 2]")))

        result = _client().get_json("https://api.github.com/x")

        assert isinstance(result, Err)

    def test_token_only_on_api_requests(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        opener = Recorder(FakeResponse(b"{}"), FakeResponse(b"bytes"))
        monkeypatch.setattr(urllib.request, "urlopen", opener)
        client = _client(token="secret")

        client.get_json("https://api.github.com/x")
        client.download("https://objects.example/a", tmp_path / "a")

        api, dl = opener.requests
        assert api.get_header("Authorization") == "Bearer secret"
        assert dl.get_header("Authorization") is None

    def test_retries_transient(self, monkeypatch: pytest.MonkeyPatch) -> None:
        opener = Recorder(_http_error(503), _http_error(502), FakeResponse(b"ok"))
        monkeypatch.setattr(urllib.request, "urlopen", opener)

        result = _client().get_text("https://x")

        assert result == Ok("ok")
        assert len(opener.requests) == 3

    def test_no_retry_on_404(self, monkeypatch: pytest.MonkeyPatch) -> None:
        opener = Recorder(_http_error(404))
        monkeypatch.setattr(urllib.request, "urlopen", opener)

        result = _client().get_text("https://x")

        assert isinstance(result, Err)
        assert result.error.status == 404
        assert len(opener.requests) == 1

    def test_gives_up_after_retries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        refused = urllib.error.URLError("refused")
        monkeypatch.setattr(urllib.request, "urlopen", Recorder(refused, refused))

        result = _client(retries=2).get_text("https://x")

        assert isinstance(result, Err)
        assert result.error.status == 0

    def test_download_resumes_partial(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        dest = tmp_path / "a.tar.gz"
        dest.write_bytes(b"hello ")
        opener = Recorder(FakeResponse(b"world", status=206))
        monkeypatch.setattr(urllib.request, "urlopen", opener)

        result = _client().download("https://x/a.tar.gz", dest)

        assert isinstance(result, Ok)
        assert dest.read_bytes() == b"hello world"
        assert opener.requests[0].get_header("Range") == "bytes=6-"

    def test_download_restarts_when_range_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        dest = tmp_path / "a.tar.gz"
        dest.write_bytes(b"junk")
        monkeypatch.setattr(urllib.request, "urlopen", Recorder(FakeResponse(b"full body")))

        _client().download("https://x/a.tar.gz", dest)

        assert dest.read_bytes() == b"full body"

    def test_invalid_url(self, tmp_path: Path) -> None:
        dest = tmp_path / "file.zip"

        result = _client(retries=1).download("not-a-url", dest)

        assert isinstance(result, Err)
        assert result.error.status == 0
        assert not dest.exists()
