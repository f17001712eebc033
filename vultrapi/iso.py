"""ISO images on the account and in the public ISO library."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .client import Client
from .pagination import ListOptions, Meta

_PATH = "/v2/iso"
_PUBLIC_PATH = "/v2/iso-public"


@dataclass
class ISO:
    """An ISO image stored on the account."""

    id: str = ""
    date_created: str = ""
    filename: str = ""
    size: int = 0
    md5sum: str = ""
    sha512sum: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ISO:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            date_created=data.get("date_created") or "",
            filename=data.get("filename") or "",
            size=data.get("size") or 0,
            md5sum=data.get("md5sum") or "",
            sha512sum=data.get("sha512sum") or "",
            status=data.get("status") or "",
        )


@dataclass
class PublicISO:
    """An ISO image offered in the public library."""

    id: str = ""
    name: str = ""
    description: str = ""
    md5sum: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PublicISO:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            md5sum=data.get("md5sum") or "",
        )


@dataclass
class ISOReq:
    """Request to create an ISO from a remote URL."""

    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url}


class ISOService:
    """Create, inspect and remove ISO images."""

    def __init__(self, client: Client):
        self._client = client

    def _object(self, method: str, uri: str, body: Any = None, params: Any = None) -> dict[str, Any]:
        payload = self._client.request(method, uri, body, params)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("unexpected response body: expected a JSON object")
        return payload

    def create(self, request: ISOReq | None) -> ISO | None:
        """Create an ISO on the account from the URL in ``request``."""
        payload = self._object("POST", _PATH, request)
        iso = payload.get("iso")
        return ISO.from_dict(iso) if iso is not None else None

    def get(self, iso_id: str) -> ISO | None:
        """Return the ISO with the given id."""
        payload = self._object("GET", f"{_PATH}/{iso_id}")
        iso = payload.get("iso")
        return ISO.from_dict(iso) if iso is not None else None

    def delete(self, iso_id: str) -> None:
        """Delete an ISO from the account."""
        self._client.do(self._client.new_request("DELETE", f"{_PATH}/{iso_id}"))

    def list(self, options: ListOptions | None = None) -> tuple[list[ISO], Meta | None]:
        """Return one page of the account's ISOs and its metadata."""
        payload = self._object("GET", _PATH, params=options if options is not None else ListOptions())
        meta = payload.get("meta")
        return (
            [ISO.from_dict(item) for item in payload.get("isos") or []],
            Meta.from_dict(meta) if meta is not None else None,
        )

    def list_public(
        self, options: ListOptions | None = None
    ) -> tuple[list[PublicISO], Meta | None]:
        """Return one page of the public ISO library and its metadata."""
        payload = self._object(
            "GET", _PUBLIC_PATH, params=options if options is not None else ListOptions()
        )
        meta = payload.get("meta")
        return (
            [PublicISO.from_dict(item) for item in payload.get("public_isos") or []],
            Meta.from_dict(meta) if meta is not None else None,
        )