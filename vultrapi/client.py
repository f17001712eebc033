"""HTTP client for the Vultr v2 API: request building, retries and error handling."""

from __future__ import annotations

import json
import re
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import requests

from .pagination import ListOptions

VERSION = "3.23.0"
DEFAULT_BASE_URL = "https://api.vultr.com"
USER_AGENT = f"vultrapi/{VERSION}"
DEFAULT_RATE_LIMIT = 0.5
DEFAULT_RETRY_LIMIT = 3
DEFAULT_TIMEOUT = 60.0

RequestCallback = Callable[[requests.PreparedRequest, Optional[requests.Response]], None]

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)
_FATAL_ERRORS = (
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
    requests.exceptions.TooManyRedirects,
    requests.exceptions.SSLError,
    requests.exceptions.InvalidHeader,
)


class APIError(Exception):
    """The API answered with a status outside 200-204."""

    def __init__(self, body: str, status_code: int, response: requests.Response | None = None):
        super().__init__(body)
        self.body = body
        self.status_code = status_code
        self.response = response


class RetryError(Exception):
    """Every attempt allowed by the retry limit failed."""

    def __init__(self, message: str, attempts: int, last_error: BaseException | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


def _check_url(url: str) -> None:
    if _CONTROL_CHARS.search(url):
        raise ValueError(f"invalid control character in URL {url!r}")
    if url.startswith(":"):
        raise ValueError(f"missing protocol scheme in URL {url!r}")
    if _BAD_ESCAPE.search(url):
        raise ValueError(f"invalid escape in URL {url!r}")
    try:
        urlsplit(url).port
    except ValueError as exc:
        raise ValueError(f"invalid port in URL {url!r}") from exc


def _encode_json(body: Any) -> bytes:
    if hasattr(body, "to_dict"):
        body = body.to_dict()
    text = json.dumps(body, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _JSON_ESCAPES:
        text = text.replace(char, escaped)
    return (text + "\n").encode("utf-8")


def _encode_query(params: ListOptions | Mapping[str, Any]) -> str:
    if isinstance(params, ListOptions):
        params = params.to_params()
    return urlencode(sorted(params.items()), doseq=True)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = int(value)
    except ValueError:
        pass
    else:
        return float(seconds) if seconds >= 0 else None
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _should_retry(response: requests.Response | None, error: BaseException | None) -> bool:
    if error is not None:
        return not isinstance(error, _FATAL_ERRORS)
    status = response.status_code
    return status == 429 or status == 0 or (status >= 500 and status != 501)


class Client:
    """Builds, sends and retries requests against the Vultr API."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session if session is not None else requests.Session()
        self._base_url = DEFAULT_BASE_URL
        self.user_agent = USER_AGENT
        self.retry_limit = DEFAULT_RETRY_LIMIT
        self.timeout = DEFAULT_TIMEOUT
        self.on_request_completed: RequestCallback | None = None
        self.retry_wait_min = 0.0
        self.retry_wait_max = 0.0
        self.rate_limit = DEFAULT_RATE_LIMIT

    @property
    def base_url(self) -> str:
        """Base URL that request paths are resolved against."""
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        _check_url(value)
        self._base_url = value

    @property
    def rate_limit(self) -> float:
        """Longest wait in seconds between retries; the shortest is two thirds of it."""
        return self.retry_wait_max

    @rate_limit.setter
    def rate_limit(self, seconds: float) -> None:
        self.retry_wait_min = seconds / 3 * 2
        self.retry_wait_max = seconds

    def new_request(
        self,
        method: str,
        uri: str,
        body: Any = None,
        params: ListOptions | Mapping[str, Any] | None = None,
    ) -> requests.PreparedRequest:
        """Prepare a request for ``uri`` with ``body`` sent as JSON.

        When ``params`` is given it replaces the query string of the URL.
        """
        _check_url(uri)
        url = urljoin(self._base_url, uri)
        if params is not None:
            url = urlunsplit(urlsplit(url)._replace(query=_encode_query(params)))
        data = _encode_json(body) if body is not None else None
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        return self.session.prepare_request(
            requests.Request(method, url, headers=headers, data=data)
        )

    def do(self, request: requests.PreparedRequest) -> requests.Response:
        """Send ``request`` with retries and return the successful response.

        Raises APIError for a status outside 200-204 and RetryError when the
        retries run out.
        """
        attempts = 0
        while True:
            attempts += 1
            response: requests.Response | None
            error: BaseException | None
            try:
                response = self.session.send(request, timeout=self.timeout)
                error = None
            except requests.RequestException as exc:
                response, error = None, exc
            retry = _should_retry(response, error)
            if not retry or attempts > self.retry_limit:
                break
            time.sleep(self._backoff(attempts - 1, response))

        failure: BaseException | None = None
        if retry:
            failure = self._give_up(response, error, attempts)
            response = None
        elif error is not None:
            failure = error

        if self.on_request_completed is not None:
            self.on_request_completed(request, response)
        if failure is not None:
            raise failure

        if 200 <= response.status_code <= 204:
            return response
        raise APIError(response.text, response.status_code, response)

    def request(
        self,
        method: str,
        uri: str,
        body: Any = None,
        params: ListOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return its decoded JSON body, or None when it is empty."""
        response = self.do(self.new_request(method, uri, body, params))
        if not response.content.strip():
            return None
        return json.loads(response.content)

    def _backoff(self, attempt: int, response: requests.Response | None) -> float:
        if response is not None and response.status_code in (429, 503):
            delay = _retry_after(response.headers.get("Retry-After"))
            if delay is not None:
                return delay
        return min(self.retry_wait_min * 2**attempt, self.retry_wait_max)

    @staticmethod
    def _give_up(
        response: requests.Response | None, error: BaseException | None, attempts: int
    ) -> RetryError:
        if response is None:
            if error is not None:
                return RetryError(
                    f"gave up after {attempts} attempts, last error : {error}", attempts, error
                )
            return RetryError(
                f"gave up after {attempts} attempts, last error unavailable (resp == nil)",
                attempts,
            )
        return RetryError(
            f"gave up after {attempts} attempts, last error: {_quote(response.text.strip())}",
            attempts,
        )