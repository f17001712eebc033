import json

import pytest
import requests
import responses

from vultrapi.api import Vultr
from vultrapi.client import DEFAULT_BASE_URL, USER_AGENT, APIError
from vultrapi.kubernetes import Versions


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_defaults_come_from_client():
    vultr = Vultr()
    assert vultr.client.base_url == DEFAULT_BASE_URL
    assert vultr.client.user_agent == USER_AGENT


def test_given_session_is_used():
    session = requests.Session()
    vultr = Vultr(session)
    assert vultr.client.session is session


def test_services_follow_client_base_url(mock):
    vultr = Vultr()
    vultr.client.rate_limit = 0
    vultr.client.base_url = "http://localhost/vultr/"
    mock.add(
        responses.GET,
        "http://localhost/v2/kubernetes/versions",
        json={"versions": ["v1.20.0+1"]},
    )
    assert vultr.kubernetes.get_versions() == Versions(versions=["v1.20.0+1"])
    assert mock.calls[0].request.headers["User-Agent"] == USER_AGENT


def test_user_agent_change_reaches_services(mock):
    vultr = Vultr()
    vultr.client.user_agent = "vultr/testing"
    mock.add(responses.DELETE, DEFAULT_BASE_URL + "/v2/iso/24", body="")
    result = vultr.iso.delete("24")
    assert result is None
    assert mock.calls[0].request.headers["User-Agent"] == "vultr/testing"


def test_errors_propagate_from_services(mock):
    vultr = Vultr()
    mock.add(responses.GET, DEFAULT_BASE_URL + "/v2/inference/abc", body="not found", status=404)
    with pytest.raises(APIError) as info:
        vultr.inference.get("abc")
    assert info.value.status_code == 404
    assert str(info.value) == "not found"


def test_instance_service_sends_json(mock):
    vultr = Vultr()
    mock.add(responses.POST, DEFAULT_BASE_URL + "/v2/instances/start", body="")
    result = vultr.instance.mass_start(["14b3e7d6-ffb5-4994-8502-57fcd9db3b33"])
    assert result is None
    body = json.loads(mock.calls[0].request.body)
    assert body == {"instance_ids": ["14b3e7d6-ffb5-4994-8502-57fcd9db3b33"]}