"""Operations on the instance endpoints of the Vultr API."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

import requests

from .client import Client
from .instance_models import (
    IPv4,
    IPv6,
    AttachVPC2Req,
    BackupSchedule,
    BackupScheduleReq,
    Bandwidth,
    Instance,
    InstanceCreateReq,
    InstanceUpdateReq,
    Iso,
    Neighbors,
    ReinstallReq,
    RestoreReq,
    ReverseIP,
    Upgrades,
    UserData,
    VPC2Info,
    VPCInfo,
)
from .pagination import ListOptions, Meta

_PATH = "/v2/instances"

_T = TypeVar("_T")


def _optional(loader: Callable[[Mapping[str, Any]], _T], data: Any) -> _T | None:
    return loader(data) if data is not None else None


class InstanceService:
    """Create, inspect and manage virtual private server instances."""

    def __init__(self, client: Client):
        self._client = client

    def _send(self, method: str, uri: str, body: Any = None) -> requests.Response:
        return self._client.do(self._client.new_request(method, uri, body))

    def _fetch(
        self,
        method: str,
        uri: str,
        body: Any = None,
        params: ListOptions | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = self._client.do(self._client.new_request(method, uri, body, params))
        payload = json.loads(response.content)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("unexpected response body: expected a JSON object")
        return payload

    def _list(
        self,
        uri: str,
        key: str,
        loader: Callable[[Mapping[str, Any]], _T],
        options: ListOptions | None,
    ) -> tuple[list[_T], Meta | None]:
        payload = self._fetch("GET", uri, params=options if options is not None else ListOptions())
        items = [loader(item) for item in payload.get(key) or []]
        return items, _optional(Meta.from_dict, payload.get("meta"))

    def _instance(self, method: str, uri: str, body: Any = None) -> Instance | None:
        payload = self._fetch(method, uri, body)
        return _optional(Instance.from_dict, payload.get("instance"))

    def create(self, request: InstanceCreateReq | None) -> Instance | None:
        """Create an instance."""
        return self._instance("POST", _PATH, request)

    def get(self, instance_id: str) -> Instance | None:
        """Return the instance with the given id."""
        return self._instance("GET", f"{_PATH}/{instance_id}")

    def update(self, instance_id: str, request: InstanceUpdateReq | None) -> Instance | None:
        """Update an instance and return its new state."""
        return self._instance("PATCH", f"{_PATH}/{instance_id}", request)

    def delete(self, instance_id: str) -> None:
        """Delete an instance; its data is lost and its IP address released."""
        self._send("DELETE", f"{_PATH}/{instance_id}")

    def list(self, options: ListOptions | None = None) -> tuple[list[Instance], Meta | None]:
        """Return one page of the instances on the account and its metadata."""
        return self._list(_PATH, "instances", Instance.from_dict, options)

    def start(self, instance_id: str) -> None:
        """Start an instance, restarting it when it is already running."""
        self._send("POST", f"{_PATH}/{instance_id}/start")

    def halt(self, instance_id: str) -> None:
        """Halt an instance."""
        self._send("POST", f"{_PATH}/{instance_id}/halt")

    def reboot(self, instance_id: str) -> None:
        """Reboot an instance."""
        self._send("POST", f"{_PATH}/{instance_id}/reboot")

    def reinstall(self, instance_id: str, request: ReinstallReq | None = None) -> Instance | None:
        """Reinstall an instance."""
        return self._instance("POST", f"{_PATH}/{instance_id}/reinstall", request)

    def mass_start(self, instance_ids: Iterable[str]) -> None:
        """Start several instances."""
        self._send("POST", f"{_PATH}/start", {"instance_ids": list(instance_ids)})

    def mass_halt(self, instance_ids: Iterable[str]) -> None:
        """Halt several instances."""
        self._send("POST", f"{_PATH}/halt", {"instance_ids": list(instance_ids)})

    def mass_reboot(self, instance_ids: Iterable[str]) -> None:
        """Reboot several instances."""
        self._send("POST", f"{_PATH}/reboot", {"instance_ids": list(instance_ids)})

    def restore(self, instance_id: str, request: RestoreReq | None = None) -> requests.Response:
        """Restore an instance from a backup or snapshot."""
        return self._send("POST", f"{_PATH}/{instance_id}/restore", request)

    def get_bandwidth(self, instance_id: str) -> Bandwidth:
        """Return the daily traffic of an instance."""
        return Bandwidth.from_dict(self._fetch("GET", f"{_PATH}/{instance_id}/bandwidth"))

    def get_neighbors(self, instance_id: str) -> Neighbors:
        """Return the other instances on the same host."""
        return Neighbors.from_dict(self._fetch("GET", f"{_PATH}/{instance_id}/neighbors"))

    def list_vpc_info(
        self, instance_id: str, options: ListOptions | None = None
    ) -> tuple[list[VPCInfo], Meta | None]:
        """Return the VPC networks attached to an instance."""
        return self._list(f"{_PATH}/{instance_id}/vpcs", "vpcs", VPCInfo.from_dict, options)

    def attach_vpc(self, instance_id: str, vpc_id: str) -> None:
        """Attach a VPC network to an instance."""
        self._send("POST", f"{_PATH}/{instance_id}/vpcs/attach", {"vpc_id": vpc_id})

    def detach_vpc(self, instance_id: str, vpc_id: str) -> None:
        """Detach a VPC network from an instance."""
        self._send("POST", f"{_PATH}/{instance_id}/vpcs/detach", {"vpc_id": vpc_id})

    def list_vpc2_info(
        self, instance_id: str, options: ListOptions | None = None
    ) -> tuple[list[VPC2Info], Meta | None]:
        """Return the VPC 2.0 networks attached to an instance (deprecated)."""
        return self._list(f"{_PATH}/{instance_id}/vpc2", "vpcs", VPC2Info.from_dict, options)

    def attach_vpc2(self, instance_id: str, request: AttachVPC2Req | None) -> None:
        """Attach a VPC 2.0 network to an instance (deprecated)."""
        self._send("POST", f"{_PATH}/{instance_id}/vpc2/attach", request)

    def detach_vpc2(self, instance_id: str, vpc_id: str) -> None:
        """Detach a VPC 2.0 network from an instance (deprecated)."""
        self._send("POST", f"{_PATH}/{instance_id}/vpc2/detach", {"vpc_id": vpc_id})

    def iso_status(self, instance_id: str) -> Iso | None:
        """Return the ISO state: ready, isomounting or isomounted."""
        payload = self._fetch("GET", f"{_PATH}/{instance_id}/iso")
        return _optional(Iso.from_dict, payload.get("iso_status"))

    def attach_iso(self, instance_id: str, iso_id: str) -> requests.Response:
        """Attach an ISO to an instance and reboot it."""
        return self._send("POST", f"{_PATH}/{instance_id}/iso/attach", {"iso_id": iso_id})

    def detach_iso(self, instance_id: str) -> requests.Response:
        """Detach the mounted ISO and reboot the instance."""
        return self._send("POST", f"{_PATH}/{instance_id}/iso/detach")

    def get_backup_schedule(self, instance_id: str) -> BackupSchedule | None:
        """Return the backup schedule of an instance; times are UTC."""
        payload = self._fetch("GET", f"{_PATH}/{instance_id}/backup-schedule")
        return _optional(BackupSchedule.from_dict, payload.get("backup_schedule"))

    def set_backup_schedule(
        self, instance_id: str, request: BackupScheduleReq | None
    ) -> requests.Response:
        """Set the backup schedule of an instance; times are UTC."""
        return self._send("POST", f"{_PATH}/{instance_id}/backup-schedule", request)

    def create_ipv4(self, instance_id: str, reboot: bool | None = None) -> IPv4 | None:
        """Add an IPv4 address to an instance."""
        payload = self._fetch("POST", f"{_PATH}/{instance_id}/ipv4", {"reboot": reboot})
        return _optional(IPv4.from_dict, payload.get("ipv4"))

    def list_ipv4(
        self, instance_id: str, options: ListOptions | None = None
    ) -> tuple[list[IPv4], Meta | None]:
        """Return the IPv4 addresses of an instance."""
        return self._list(f"{_PATH}/{instance_id}/ipv4", "ipv4s", IPv4.from_dict, options)

    def delete_ipv4(self, instance_id: str, ip: str) -> None:
        """Remove an IPv4 address from an instance."""
        self._send("DELETE", f"{_PATH}/{instance_id}/ipv4/{ip}")

    def list_ipv6(
        self, instance_id: str, options: ListOptions | None = None
    ) -> tuple[list[IPv6], Meta | None]:
        """Return the IPv6 addresses of an instance."""
        return self._list(f"{_PATH}/{instance_id}/ipv6", "ipv6s", IPv6.from_dict, options)

    def create_reverse_ipv6(self, instance_id: str, request: ReverseIP | None) -> None:
        """Set a reverse DNS entry for an IPv6 address."""
        self._send("POST", f"{_PATH}/{instance_id}/ipv6/reverse", request)

    def list_reverse_ipv6(self, instance_id: str) -> list[ReverseIP]:
        """Return the IPv6 reverse DNS entries of an instance."""
        payload = self._fetch("GET", f"{_PATH}/{instance_id}/ipv6/reverse")
        return [ReverseIP.from_dict(item) for item in payload.get("reverse_ipv6s") or []]

    def delete_reverse_ipv6(self, instance_id: str, ip: str) -> None:
        """Remove the reverse DNS entry of an IPv6 address."""
        self._send("DELETE", f"{_PATH}/{instance_id}/ipv6/reverse/{ip}")

    def create_reverse_ipv4(self, instance_id: str, request: ReverseIP | None) -> None:
        """Set a reverse DNS entry for an IPv4 address."""
        self._send("POST", f"{_PATH}/{instance_id}/ipv4/reverse", request)

    def default_reverse_ipv4(self, instance_id: str, ip: str) -> None:
        """Reset the reverse DNS entry of an IPv4 address to its original value."""
        self._send("POST", f"{_PATH}/{instance_id}/ipv4/reverse/default", {"ip": ip})

    def get_user_data(self, instance_id: str) -> UserData | None:
        """Return the base64-encoded user data of an instance."""
        payload = self._fetch("GET", f"{_PATH}/{instance_id}/user-data")
        return _optional(UserData.from_dict, payload.get("user_data"))

    def get_upgrades(self, instance_id: str) -> Upgrades | None:
        """Return the upgrades available for an instance."""
        payload = self._fetch("GET", f"{_PATH}/{instance_id}/upgrades")
        return _optional(Upgrades.from_dict, payload.get("upgrades"))