"""Data types exchanged with the instance endpoints, including IP address records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import Any, TypeVar

from .pagination import drop_empty

_T = TypeVar("_T")


def _load(cls: type[_T], data: Mapping[str, Any] | None) -> _T:
    """Build ``cls`` from a JSON object whose keys match the field names.

    Missing keys and JSON nulls leave the field at its default.
    """
    data = data or {}
    values = {f.name: data[f.name] for f in fields(cls) if data.get(f.name) is not None}
    return cls(**values)


def _dump(
    obj: Any,
    always: Iterable[str] = (),
    optional: Iterable[str] = (),
    rename: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Encode a request dataclass as a JSON object.

    Fields in ``always`` are sent even when empty. Fields in ``optional`` are
    sent whenever they are set, even to False or zero. Every other field is
    left out when it is empty.
    """
    rename = rename or {}
    raw = {rename.get(key, key): value for key, value in asdict(obj).items()}
    keep = {rename.get(key, key) for key in always}
    keep.update(
        rename.get(key, key) for key in optional if raw[rename.get(key, key)] is not None
    )
    return drop_empty(raw, keep=keep)


@dataclass
class IPv4:
    """An IPv4 address assigned to an instance."""

    ip: str = ""
    netmask: str = ""
    gateway: str = ""
    type: str = ""
    reverse: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IPv4:
        return _load(cls, data)


@dataclass
class IPv6:
    """An IPv6 address assigned to an instance."""

    ip: str = ""
    network: str = ""
    network_size: int = 0
    type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IPv6:
        return _load(cls, data)


@dataclass
class Instance:
    """A virtual private server."""

    id: str = ""
    os: str = ""
    ram: int = 0
    disk: int = 0
    plan: str = ""
    main_ip: str = ""
    vcpu_count: int = 0
    region: str = ""
    default_password: str = ""
    date_created: str = ""
    status: str = ""
    allowed_bandwidth: int = 0
    netmask_v4: str = ""
    gateway_v4: str = ""
    power_status: str = ""
    server_status: str = ""
    v6_network: str = ""
    v6_main_ip: str = ""
    v6_network_size: int = 0
    label: str = ""
    internal_ip: str = ""
    kvm: str = ""
    os_id: int = 0
    app_id: int = 0
    image_id: str = ""
    snapshot_id: str = ""
    firewall_group_id: str = ""
    features: list[str] = field(default_factory=list)
    hostname: str = ""
    tags: list[str] = field(default_factory=list)
    user_scheme: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Instance:
        instance = _load(cls, data)
        instance.features = list(instance.features)
        instance.tags = list(instance.tags)
        return instance


@dataclass
class Neighbors:
    """Other instances that share a host with an instance."""

    neighbors: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Neighbors:
        return cls(neighbors=list((data or {}).get("neighbors") or []))


@dataclass
class BandwidthUsage:
    """Traffic of one day."""

    incoming_bytes: int = 0
    outgoing_bytes: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BandwidthUsage:
        return _load(cls, data)


@dataclass
class Bandwidth:
    """Daily traffic of an instance, keyed by date."""

    bandwidth: dict[str, BandwidthUsage] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bandwidth:
        days = (data or {}).get("bandwidth") or {}
        return cls(bandwidth={day: BandwidthUsage.from_dict(usage) for day, usage in days.items()})


@dataclass
class VPCInfo:
    """A VPC network attached to an instance."""

    id: str = ""
    mac_address: str = ""
    ip_address: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VPCInfo:
        return _load(cls, data)


@dataclass
class VPC2Info:
    """A VPC 2.0 network attached to an instance (deprecated)."""

    id: str = ""
    mac_address: str = ""
    ip_address: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VPC2Info:
        return _load(cls, data)


@dataclass
class AttachVPC2Req:
    """Parameters for attaching a VPC 2.0 network (deprecated)."""

    vpc_id: str = ""
    ip_address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, optional=("ip_address",))


@dataclass
class Iso:
    """The ISO mount state of an instance."""

    state: str = ""
    iso_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Iso:
        return _load(cls, data)


@dataclass
class BackupSchedule:
    """The automatic backup schedule of an instance; times are UTC."""

    enabled: bool | None = None
    type: str = ""
    next_scheduled_time_utc: str = ""
    hour: int = 0
    dow: int = 0
    dom: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BackupSchedule:
        return _load(cls, data)


@dataclass
class BackupScheduleReq:
    """Request to set the backup schedule of an instance."""

    type: str = ""
    hour: int | None = None
    dow: int | None = None
    dom: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _dump(self, always=("type",), optional=("hour", "dow"))


@dataclass
class RestoreReq:
    """Selects the backup or snapshot an instance is restored from."""

    backup_id: str = ""
    snapshot_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)


@dataclass
class ReverseIP:
    """A reverse DNS entry for an address of an instance."""

    ip: str = ""
    reverse: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReverseIP:
        return _load(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return {"ip": self.ip, "reverse": self.reverse}


@dataclass
class UserData:
    """Base64-encoded user data of an instance."""

    data: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserData:
        return _load(cls, data)


@dataclass
class Upgrades:
    """Applications, operating systems and plans an instance can move to.

    Applications and operating systems are kept as the JSON objects the API sent.
    """

    applications: list[dict[str, Any]] = field(default_factory=list)
    os: list[dict[str, Any]] = field(default_factory=list)
    plans: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Upgrades:
        data = data or {}
        return cls(
            applications=[dict(app) for app in data.get("applications") or []],
            os=[dict(entry) for entry in data.get("os") or []],
            plans=list(data.get("plans") or []),
        )


@dataclass
class InstanceCreateReq:
    """Request to create an instance."""

    region: str = ""
    plan: str = ""
    label: str = ""
    tags: list[str] | None = None
    os_id: int = 0
    iso_id: str = ""
    app_id: int = 0
    image_id: str = ""
    firewall_group_id: str = ""
    hostname: str = ""
    ipxe_chain_url: str = ""
    script_id: str = ""
    snapshot_id: str = ""
    enable_ipv6: bool | None = None
    disable_public_ipv4: bool | None = None
    enable_vpc: bool | None = None
    attach_vpc: list[str] = field(default_factory=list)
    enable_vpc2: bool | None = None
    attach_vpc2: list[str] = field(default_factory=list)
    ssh_keys: list[str] = field(default_factory=list)
    backups: str = ""
    ddos_protection: bool | None = None
    user_data: str = ""
    reserved_ipv4: str = ""
    activation_email: bool | None = None
    user_scheme: str = ""
    app_variables: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _dump(
            self,
            always=("tags",),
            optional=(
                "enable_ipv6",
                "disable_public_ipv4",
                "enable_vpc",
                "enable_vpc2",
                "ddos_protection",
                "activation_email",
            ),
            rename={"ssh_keys": "sshkey_id"},
        )


@dataclass
class InstanceUpdateReq:
    """Request to update an instance."""

    plan: str = ""
    label: str = ""
    tags: list[str] | None = None
    os_id: int = 0
    app_id: int = 0
    image_id: str = ""
    enable_ipv6: bool | None = None
    enable_vpc: bool | None = None
    attach_vpc: list[str] = field(default_factory=list)
    detach_vpc: list[str] = field(default_factory=list)
    enable_vpc2: bool | None = None
    attach_vpc2: list[str] = field(default_factory=list)
    detach_vpc2: list[str] = field(default_factory=list)
    backups: str = ""
    ddos_protection: bool | None = None
    user_data: str = ""
    firewall_group_id: str = ""
    user_scheme: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _dump(
            self,
            always=("tags", "ddos_protection"),
            optional=("enable_ipv6", "enable_vpc", "enable_vpc2"),
        )


@dataclass
class ReinstallReq:
    """Changes applied while reinstalling an instance."""

    hostname: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)