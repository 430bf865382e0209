import io
import json
import socket
from http.client import BadStatusLine, IncompleteRead, LineTooLong
from urllib.error import HTTPError, URLError

import pytest

from flavor_sync.core import http
from flavor_sync.core.http import HttpRequestError, request_json


class _Response(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def install(body=b"", error=None):
        def fake_urlopen(request, timeout=None):
            calls.append({"request": request, "timeout": timeout})
            if error is not None:
                raise error
            return _Response(body)

        monkeypatch.setattr(http, "urlopen", fake_urlopen)
        return calls

    return install


def test_get_decodes_json(captured):
    calls = captured(body=b'[{"id": "1", "name": "Vanilla"}]')
    assert request_json("GET", "http://flavors.test/collection", timeout_seconds=5) == [
        {"id": "1", "name": "Vanilla"}
    ]
    request = calls[0]["request"]
    assert request.get_method() == "GET"
    assert request.data is None
    assert calls[0]["timeout"] == 5


def test_post_sends_json_body(captured):
    calls = captured(body=b"Created")
    result = request_json("POST", "http://flavors.test/collection", {"id": "1", "name": "Mint"}, expect_json=False)
    assert result is None
    request = calls[0]["request"]
    assert request.get_method() == "POST"
    assert json.loads(request.data) == {"id": "1", "name": "Mint"}
    assert request.get_header("Content-type") == "application/json"


def test_empty_body_returns_none(captured):
    captured(body=b"")
    assert request_json("GET", "http://flavors.test/collection") is None


def test_http_error_carries_status(captured):
    captured(error=HTTPError("http://flavors.test/collection", 503, "Unavailable", {}, None))
    with pytest.raises(HttpRequestError) as exc_info:
        request_json("GET", "http://flavors.test/collection")
    assert exc_info.value.status_code == 503


@pytest.mark.parametrize("error", [URLError("connection refused"), socket.timeout("timed out")])
def test_transport_errors_have_no_status(captured, error):
    captured(error=error)
    with pytest.raises(HttpRequestError) as exc_info:
        request_json("DELETE", "http://flavors.test/collection/1", expect_json=False)
    assert exc_info.value.status_code is None


def test_invalid_json_is_an_error(captured):
    captured(body=b"<html>oops</html>")
    with pytest.raises(HttpRequestError):
        request_json("GET", "http://flavors.test/collection")


class _TruncatedResponse(_Response):
    def read(self, *args):
        raise IncompleteRead(b"[{", 100)


def test_truncated_body_is_an_error(monkeypatch):
    monkeypatch.setattr(http, "urlopen", lambda request, timeout=None: _TruncatedResponse(b""))
    with pytest.raises(HttpRequestError) as exc_info:
        request_json("GET", "http://flavors.test/collection")
    assert exc_info.value.status_code is None


@pytest.mark.parametrize("error", [BadStatusLine("garbage"), LineTooLong("header line")])
def test_garbled_response_is_an_error(captured, error):
    captured(error=error)
    with pytest.raises(HttpRequestError):
        request_json("POST", "http://flavors.test/collection", {"id": "1"}, expect_json=False)


@pytest.mark.parametrize("url", ["", "/collection", "flavors.test/collection"])
def test_malformed_url_is_an_error(url):
    with pytest.raises(HttpRequestError):
        request_json("GET", url)
