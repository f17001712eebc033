"""Serverless inference subscriptions and their usage."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .client import Client

_PATH = "/v2/inference"


@dataclass
class Inference:
    """A serverless inference subscription."""

    id: str = ""
    date_created: str = ""
    label: str = ""
    api_key: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Inference:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            date_created=data.get("date_created") or "",
            label=data.get("label") or "",
            api_key=data.get("api_key") or "",
        )


@dataclass
class InferenceCreateUpdateReq:
    """Request to create or update a subscription."""

    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label} if self.label else {}


@dataclass
class InferenceChatUsage:
    """Chat and embeddings token usage."""

    current_tokens: int = 0
    monthly_allotment: int = 0
    overage: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceChatUsage:
        data = data or {}
        return cls(
            current_tokens=data.get("current_tokens") or 0,
            monthly_allotment=data.get("monthly_allotment") or 0,
            overage=data.get("overage") or 0,
        )


@dataclass
class InferenceAudioUsage:
    """Audio generation usage."""

    tts_characters: int = 0
    tts_sm_characters: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceAudioUsage:
        data = data or {}
        return cls(
            tts_characters=data.get("tts_characters") or 0,
            tts_sm_characters=data.get("tts_sm_characters") or 0,
        )


@dataclass
class InferenceUsage:
    """Chat and audio usage of a subscription."""

    chat: InferenceChatUsage = field(default_factory=InferenceChatUsage)
    audio: InferenceAudioUsage = field(default_factory=InferenceAudioUsage)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceUsage:
        data = data or {}
        return cls(
            chat=InferenceChatUsage.from_dict(data.get("chat") or {}),
            audio=InferenceAudioUsage.from_dict(data.get("audio") or {}),
        )


class InferenceService:
    """Manage serverless inference subscriptions."""

    def __init__(self, client: Client):
        self._client = client

    def _object(self, method: str, uri: str, body: Any = None) -> dict[str, Any]:
        payload = self._client.request(method, uri, body)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("unexpected response body: expected a JSON object")
        return payload

    def _subscription(self, method: str, uri: str, body: Any = None) -> Inference | None:
        subscription = self._object(method, uri, body).get("subscription")
        return Inference.from_dict(subscription) if subscription is not None else None

    def list(self) -> list[Inference]:
        """Return every subscription on the account."""
        payload = self._object("GET", _PATH)
        return [Inference.from_dict(item) for item in payload.get("subscriptions") or []]

    def create(self, request: InferenceCreateUpdateReq | None) -> Inference | None:
        """Create a subscription."""
        return self._subscription("POST", _PATH, request)

    def get(self, inference_id: str) -> Inference | None:
        """Return the subscription with the given id."""
        return self._subscription("GET", f"{_PATH}/{inference_id}")

    def update(
        self, inference_id: str, request: InferenceCreateUpdateReq | None
    ) -> Inference | None:
        """Update a subscription and return its new state."""
        return self._subscription("PATCH", f"{_PATH}/{inference_id}", request)

    def delete(self, inference_id: str) -> None:
        """Delete a subscription; its data is lost."""
        self._client.do(self._client.new_request("DELETE", f"{_PATH}/{inference_id}"))

    def get_usage(self, inference_id: str) -> InferenceUsage | None:
        """Return the chat and audio usage of a subscription."""
        usage = self._object("GET", f"{_PATH}/{inference_id}/usage").get("usage")
        return InferenceUsage.from_dict(usage) if usage is not None else None