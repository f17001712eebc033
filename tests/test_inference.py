import json

import pytest
import responses

from vultrapi.client import DEFAULT_BASE_URL, APIError, Client
from vultrapi.inference import (
    Inference,
    InferenceAudioUsage,
    InferenceChatUsage,
    InferenceCreateUpdateReq,
    InferenceService,
    InferenceUsage,
)

BASE = DEFAULT_BASE_URL + "/v2/inference"

SUBSCRIPTION = {
    "id": "sub-1",
    "date_created": "2024-01-01 00:00:00",
    "label": "my-inference",
    "api_key": "placeholder",
}

USAGE = {
    "chat": {"current_tokens": 120, "monthly_allotment": 50000, "overage": 7},
    "audio": {"tts_characters": 300, "tts_sm_characters": 40},
}


@pytest.fixture
def mock():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def service():
    client = Client()
    client.rate_limit = 0
    return InferenceService(client)


def test_list(mock, service):
    mock.add(responses.GET, BASE, json={"subscriptions": [SUBSCRIPTION]})
    assert service.list() == [Inference(**SUBSCRIPTION)]


def test_list_empty(mock, service):
    mock.add(responses.GET, BASE, json={"subscriptions": []})
    assert service.list() == []


def test_create_sends_label(mock, service):
    mock.add(responses.POST, BASE, json={"subscription": SUBSCRIPTION})
    result = service.create(InferenceCreateUpdateReq(label="my-inference"))
    assert result == Inference(**SUBSCRIPTION)
    assert json.loads(mock.calls[0].request.body) == {"label": "my-inference"}


def test_create_omits_empty_label(mock, service):
    mock.add(responses.POST, BASE, json={"subscription": SUBSCRIPTION})
    result = service.create(InferenceCreateUpdateReq())
    assert result == Inference(**SUBSCRIPTION)
    assert json.loads(mock.calls[0].request.body) == {}


def test_get(mock, service):
    mock.add(responses.GET, BASE + "/sub-1", json={"subscription": SUBSCRIPTION})
    result = service.get("sub-1")
    assert result.api_key == SUBSCRIPTION["api_key"]
    assert result == Inference.from_dict(SUBSCRIPTION)


def test_update_uses_patch(mock, service):
    mock.add(responses.PATCH, BASE + "/sub-1", json={"subscription": SUBSCRIPTION})
    result = service.update("sub-1", InferenceCreateUpdateReq(label="renamed"))
    assert result == Inference(**SUBSCRIPTION)
    assert mock.calls[0].request.method == "PATCH"
    assert json.loads(mock.calls[0].request.body) == {"label": "renamed"}


def test_delete(mock, service):
    mock.add(responses.DELETE, BASE + "/sub-1", body="")
    assert service.delete("sub-1") is None
    assert mock.calls[0].request.url == BASE + "/sub-1"


def test_get_usage(mock, service):
    mock.add(responses.GET, BASE + "/sub-1/usage", json={"usage": USAGE})
    usage = service.get_usage("sub-1")
    assert usage == InferenceUsage(
        chat=InferenceChatUsage(**USAGE["chat"]),
        audio=InferenceAudioUsage(**USAGE["audio"]),
    )


def test_usage_missing_sections_default():
    usage = InferenceUsage.from_dict({"chat": USAGE["chat"]})
    assert usage.chat == InferenceChatUsage(**USAGE["chat"])
    assert usage.audio == InferenceAudioUsage()


def test_error_status_raises(mock, service):
    mock.add(responses.GET, BASE + "/gone", status=404, body="not found")
    with pytest.raises(APIError) as info:
        service.get("gone")
    assert info.value.status_code == 404


def test_delete_error_raises(mock, service):
    mock.add(responses.DELETE, BASE + "/gone", status=400, body="bad")
    with pytest.raises(APIError) as info:
        service.delete("gone")
    assert info.value.body == "bad"


def test_inference_from_dict_missing_fields():
    result = Inference.from_dict({"id": "sub-1"})
    assert result == Inference(id="sub-1")
    assert result.label == ""