import json

import pytest
import requests
import responses

from vultrapi.client import (
    DEFAULT_BASE_URL,
    USER_AGENT,
    APIError,
    Client,
    RetryError,
)
from vultrapi.pagination import ListOptions


@pytest.fixture
def mock_api():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client():
    api = Client()
    api.rate_limit = 0.001
    return api


def test_new_client_defaults():
    api = Client()
    assert api.base_url == DEFAULT_BASE_URL
    assert api.user_agent == USER_AGENT
    assert api.retry_limit == 3
    assert api.rate_limit == 0.5


def test_request_decodes_body(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", body='{"Bird":"vultr"}')
    data = client.request("GET", "/")
    assert data == {"Bird": "vultr"}
    assert mock_api.calls[0].request.method == "GET"


def test_server_error_gives_up_after_retries(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", status=500, body="{Error}")
    request = client.new_request("GET", "/")
    with pytest.raises(RetryError) as info:
        client.do(request)
    message = str(info.value)
    assert "gave up after" in message
    assert "last error" in message
    assert info.value.attempts == 4
    assert len(mock_api.calls) == 4
    assert '"{Error}"' in message


def test_retry_limit_controls_attempts(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", status=502, body="bad")
    client.retry_limit = 0
    with pytest.raises(RetryError) as info:
        client.request("GET", "/")
    assert info.value.attempts == 1
    assert len(mock_api.calls) == 1


def test_not_implemented_is_not_retried(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", status=501, body="nope")
    with pytest.raises(APIError) as info:
        client.request("GET", "/")
    assert info.value.status_code == 501
    assert len(mock_api.calls) == 1


def test_too_many_requests_is_retried(client, mock_api):
    mock_api.add(
        responses.GET,
        DEFAULT_BASE_URL + "/",
        status=429,
        body="slow down",
        headers={"Retry-After": "0"},
    )
    with pytest.raises(RetryError):
        client.request("GET", "/")
    assert len(mock_api.calls) == 4


def test_connection_error_does_not_escape_as_raw_exception(client, mock_api):
    mock_api.add(
        responses.GET,
        DEFAULT_BASE_URL + "/",
        body=requests.ConnectionError("fake error"),
    )
    with pytest.raises(RetryError) as info:
        client.request("GET", "/")
    assert "fake error" in str(info.value)
    assert isinstance(info.value.last_error, requests.ConnectionError)


def test_new_request_builds_url_body_and_headers():
    api = Client()
    request = api.new_request("POST", "/unit", {"balance": 500})
    assert request.url == DEFAULT_BASE_URL + "/unit"
    assert request.body == b'{"balance":500}\n'
    assert request.headers["User-Agent"] == api.user_agent
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"


def test_new_request_escapes_html_characters():
    request = Client().new_request("POST", "/", {"q": "<a&b>"})
    assert request.body == b'{"q":"\\u003ca\\u0026b\\u003e"}\n'
    assert json.loads(request.body) == {"q": "<a&b>"}


def test_new_request_encodes_list_options():
    request = Client().new_request(
        "GET", "/v2/instances", params=ListOptions(per_page=1, label="my label")
    )
    assert request.url == DEFAULT_BASE_URL + "/v2/instances?label=my+label&per_page=1"


def test_set_base_url():
    api = Client()
    api.base_url = "http://localhost/vultr"
    assert api.base_url == "http://localhost/vultr"
    with pytest.raises(ValueError):
        api.base_url = ":"
    assert api.base_url == "http://localhost/vultr"


def test_set_user_agent():
    api = Client()
    api.user_agent = "vultr/testing"
    request = api.new_request("GET", "/")
    assert request.headers["User-Agent"] == "vultr/testing"


def test_set_rate_limit():
    api = Client()
    api.rate_limit = 0.6
    assert api.retry_wait_max == 0.6
    assert api.rate_limit == 0.6
    assert api.retry_wait_min == pytest.approx(0.4)


def test_on_request_completed(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", body='{"Vultr":"bird"}')
    seen = []
    client.on_request_completed = lambda req, res: seen.append((req, res))
    request = client.new_request("GET", "/")
    client.do(request)
    assert len(seen) == 1
    assert seen[0][0] is request
    assert '{"Vultr":"bird"}' in seen[0][1].text


def test_set_retry_limit(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/", status=500, body="down")
    client.retry_limit = 4
    with pytest.raises(RetryError) as info:
        client.request("GET", "/")
    assert info.value.attempts == 5


def test_new_request_bad_uri():
    with pytest.raises(ValueError):
        Client().new_request("GET", ":/1.")


def test_new_request_bad_body():
    with pytest.raises(TypeError):
        Client().new_request("GET", "/", object())


def test_bad_request_status_raises(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/wrong", status=400, body="bad request")
    with pytest.raises(APIError) as info:
        client.request("GET", "/wrong")
    assert info.value.status_code == 400
    assert str(info.value) == "bad request"


def test_invalid_response_body_raises(client, mock_api):
    mock_api.add(responses.GET, DEFAULT_BASE_URL + "/wrong", status=200, body="{")
    with pytest.raises(json.JSONDecodeError):
        client.request("GET", "/wrong")


def test_empty_success_body_returns_none(client, mock_api):
    mock_api.add(responses.DELETE, DEFAULT_BASE_URL + "/v2/thing", status=204, body="")
    assert client.request("DELETE", "/v2/thing") is None