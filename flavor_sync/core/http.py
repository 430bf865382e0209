import json
import logging
from http.client import HTTPException
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


logger = logging.getLogger(__name__)


class HttpRequestError(Exception):
    """Transport failure or non-success status from a JSON endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def request_json(
    method: str,
    url: str,
    payload: Any = None,
    *,
    timeout_seconds: float = 60,
    expect_json: bool = True,
) -> Any:
    """Send a JSON request and return the decoded body (None when empty or not expected)."""
    headers = {"Accept": "application/json"}
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"

    try:
        request = Request(url, data=data, headers=headers, method=method)
        with urlopen(request, timeout=timeout_seconds) as resp:
            body = resp.read()
    except HTTPError as e:
        logger.error(f"{method} {url} returned HTTP {e.code}")
        raise HttpRequestError(f"{method} {url} returned HTTP {e.code}", status_code=e.code) from e
    except (URLError, OSError, HTTPException, ValueError) as e:
        # Socket timeouts surface as OSError; HTTPException is a truncated or garbled
        # response; ValueError is a malformed URL
        logger.error(f"{method} {url} failed: {str(e)}")
        raise HttpRequestError(f"{method} {url} failed: {e}") from e

    if not expect_json or not body:
        return None

    try:
        return json.loads(body)
    except ValueError as e:
        logger.error(f"{method} {url} returned invalid JSON: {e}")
        raise HttpRequestError(f"{method} {url} returned invalid JSON") from e
