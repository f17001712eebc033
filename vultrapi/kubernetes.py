"""Kubernetes (VKE) clusters, node pools and nodes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .client import Client
from .pagination import ListOptions, Meta

_PATH = "/v2/kubernetes/clusters"
_VERSIONS_PATH = "/v2/kubernetes/versions"


@dataclass
class Taint:
    """A Kubernetes taint applied to the nodes of a node pool."""

    key: str = ""
    value: str = ""
    effect: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Taint:
        data = data or {}
        return cls(
            key=data.get("key") or "",
            value=data.get("value") or "",
            effect=data.get("effect") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value, "effect": self.effect}


@dataclass
class Node:
    """A node living within a node pool."""

    id: str = ""
    date_created: str = ""
    label: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Node:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            date_created=data.get("date_created") or "",
            label=data.get("label") or "",
            status=data.get("status") or "",
        )


@dataclass
class NodePool:
    """A group of nodes sharing a label and a plan."""

    id: str = ""
    date_created: str = ""
    date_updated: str = ""
    label: str = ""
    plan: str = ""
    status: str = ""
    node_quantity: int = 0
    min_nodes: int = 0
    max_nodes: int = 0
    auto_scaler: bool = False
    user_data: str = ""
    tag: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    taints: list[Taint] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NodePool:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            date_created=data.get("date_created") or "",
            date_updated=data.get("date_updated") or "",
            label=data.get("label") or "",
            plan=data.get("plan") or "",
            status=data.get("status") or "",
            node_quantity=data.get("node_quantity") or 0,
            min_nodes=data.get("min_nodes") or 0,
            max_nodes=data.get("max_nodes") or 0,
            auto_scaler=bool(data.get("auto_scaler")),
            user_data=data.get("user_data") or "",
            tag=data.get("tag") or "",
            labels=dict(data.get("labels") or {}),
            taints=[Taint.from_dict(item) for item in data.get("taints") or []],
            nodes=[Node.from_dict(item) for item in data.get("nodes") or []],
        )


@dataclass
class Cluster:
    """A VKE cluster with its node pools."""

    id: str = ""
    label: str = ""
    date_created: str = ""
    cluster_subnet: str = ""
    service_subnet: str = ""
    ip: str = ""
    endpoint: str = ""
    version: str = ""
    region: str = ""
    status: str = ""
    ha_controlplanes: bool = False
    firewall_group_id: str = ""
    node_pools: list[NodePool] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Cluster:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            label=data.get("label") or "",
            date_created=data.get("date_created") or "",
            cluster_subnet=data.get("cluster_subnet") or "",
            service_subnet=data.get("service_subnet") or "",
            ip=data.get("ip") or "",
            endpoint=data.get("endpoint") or "",
            version=data.get("version") or "",
            region=data.get("region") or "",
            status=data.get("status") or "",
            ha_controlplanes=bool(data.get("ha_controlplanes")),
            firewall_group_id=data.get("firewall_group_id") or "",
            node_pools=[NodePool.from_dict(item) for item in data.get("node_pools") or []],
        )


@dataclass
class KubeConfig:
    """The base64-encoded kubeconfig of a cluster."""

    kube_config: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> KubeConfig:
        return cls(kube_config=(data or {}).get("kube_config") or "")


@dataclass
class Versions:
    """Kubernetes versions supported by VKE."""

    versions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Versions:
        return cls(versions=list((data or {}).get("versions") or []))


@dataclass
class NodePoolReq:
    """Request to create a node pool."""

    node_quantity: int = 0
    label: str = ""
    plan: str = ""
    tag: str = ""
    min_nodes: int = 0
    max_nodes: int = 0
    auto_scaler: bool | None = None
    labels: dict[str, str] = field(default_factory=dict)
    taints: list[Taint] = field(default_factory=list)
    user_data: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "node_quantity": self.node_quantity,
            "label": self.label,
            "plan": self.plan,
            "tag": self.tag,
        }
        if self.min_nodes:
            body["min_nodes"] = self.min_nodes
        if self.max_nodes:
            body["max_nodes"] = self.max_nodes
        body["auto_scaler"] = self.auto_scaler
        if self.labels:
            body["labels"] = dict(self.labels)
        if self.taints:
            body["taints"] = [taint.to_dict() for taint in self.taints]
        body["user_data"] = self.user_data
        return body


@dataclass
class NodePoolReqUpdate:
    """Request to update a node pool."""

    node_quantity: int = 0
    tag: str | None = None
    min_nodes: int = 0
    max_nodes: int = 0
    auto_scaler: bool | None = None
    labels: dict[str, str] | None = None
    taints: list[Taint] | None = None
    user_data: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.node_quantity:
            body["node_quantity"] = self.node_quantity
        if self.tag is not None:
            body["tag"] = self.tag
        if self.min_nodes:
            body["min_nodes"] = self.min_nodes
        if self.max_nodes:
            body["max_nodes"] = self.max_nodes
        if self.auto_scaler is not None:
            body["auto_scaler"] = self.auto_scaler
        body["labels"] = dict(self.labels) if self.labels is not None else None
        body["taints"] = (
            [taint.to_dict() for taint in self.taints] if self.taints is not None else None
        )
        if self.user_data is not None:
            body["user_data"] = self.user_data
        return body


@dataclass
class ClusterReq:
    """Request to create a cluster."""

    label: str = ""
    region: str = ""
    version: str = ""
    ha_controlplanes: bool = False
    enable_firewall: bool = False
    vpc_id: str = ""
    node_pools: list[NodePoolReq] | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "label": self.label,
            "region": self.region,
            "version": self.version,
        }
        if self.ha_controlplanes:
            body["ha_controlplanes"] = True
        if self.enable_firewall:
            body["enable_firewall"] = True
        if self.vpc_id:
            body["vpc_id"] = self.vpc_id
        body["node_pools"] = (
            [pool.to_dict() for pool in self.node_pools] if self.node_pools is not None else None
        )
        return body


@dataclass
class ClusterReqUpdate:
    """Request to change the label of a cluster."""

    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label}


@dataclass
class ClusterUpgradeReq:
    """Request to upgrade a cluster to another version."""

    upgrade_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"upgrade_version": self.upgrade_version} if self.upgrade_version else {}


class KubernetesService:
    """Manage VKE clusters and their node pools."""

    def __init__(self, client: Client):
        self._client = client

    def _object(
        self, method: str, uri: str, body: Any = None, params: Any = None
    ) -> dict[str, Any]:
        payload = self._client.request(method, uri, body, params)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("unexpected response body: expected a JSON object")
        return payload

    def _send(self, method: str, uri: str, body: Any = None) -> None:
        self._client.do(self._client.new_request(method, uri, body))

    def _cluster(self, method: str, uri: str, body: Any = None) -> Cluster | None:
        cluster = self._object(method, uri, body).get("vke_cluster")
        return Cluster.from_dict(cluster) if cluster is not None else None

    def _node_pool(self, method: str, uri: str, body: Any = None) -> NodePool | None:
        pool = self._object(method, uri, body).get("node_pool")
        return NodePool.from_dict(pool) if pool is not None else None

    def create_cluster(self, request: ClusterReq | None) -> Cluster | None:
        """Create a cluster."""
        return self._cluster("POST", _PATH, request)

    def get_cluster(self, cluster_id: str) -> Cluster | None:
        """Return the cluster with the given id."""
        return self._cluster("GET", f"{_PATH}/{cluster_id}")

    def list_clusters(
        self, options: ListOptions | None = None
    ) -> tuple[list[Cluster], Meta | None]:
        """Return one page of clusters and its metadata."""
        payload = self._object(
            "GET", _PATH, params=options if options is not None else ListOptions()
        )
        meta = payload.get("meta")
        return (
            [Cluster.from_dict(item) for item in payload.get("vke_clusters") or []],
            Meta.from_dict(meta) if meta is not None else None,
        )

    def update_cluster(self, cluster_id: str, request: ClusterReqUpdate | None) -> None:
        """Change the label of a cluster."""
        self._send("PUT", f"{_PATH}/{cluster_id}", request)

    def delete_cluster(self, cluster_id: str) -> None:
        """Delete a cluster."""
        self._send("DELETE", f"{_PATH}/{cluster_id}")

    def delete_cluster_with_resources(self, cluster_id: str) -> None:
        """Delete a cluster and every resource linked to it."""
        self._send("DELETE", f"{_PATH}/{cluster_id}/delete-with-linked-resources")

    def create_node_pool(self, cluster_id: str, request: NodePoolReq | None) -> NodePool | None:
        """Add a node pool to a cluster."""
        return self._node_pool("POST", f"{_PATH}/{cluster_id}/node-pools", request)

    def list_node_pools(
        self, cluster_id: str, options: ListOptions | None = None
    ) -> tuple[list[NodePool], Meta | None]:
        """Return one page of the node pools of a cluster and its metadata."""
        payload = self._object(
            "GET",
            f"{_PATH}/{cluster_id}/node-pools",
            params=options if options is not None else ListOptions(),
        )
        meta = payload.get("meta")
        return (
            [NodePool.from_dict(item) for item in payload.get("node_pools") or []],
            Meta.from_dict(meta) if meta is not None else None,
        )

    def get_node_pool(self, cluster_id: str, node_pool_id: str) -> NodePool | None:
        """Return a single node pool."""
        return self._node_pool("GET", f"{_PATH}/{cluster_id}/node-pools/{node_pool_id}")

    def update_node_pool(
        self, cluster_id: str, node_pool_id: str, request: NodePoolReqUpdate | None
    ) -> NodePool | None:
        """Update a node pool and return its new state."""
        return self._node_pool(
            "PATCH", f"{_PATH}/{cluster_id}/node-pools/{node_pool_id}", request
        )

    def delete_node_pool(self, cluster_id: str, node_pool_id: str) -> None:
        """Remove a node pool from a cluster."""
        self._send("DELETE", f"{_PATH}/{cluster_id}/node-pools/{node_pool_id}")

    def delete_node_pool_instance(self, cluster_id: str, node_pool_id: str, node_id: str) -> None:
        """Remove a node from a node pool."""
        self._send("DELETE", f"{_PATH}/{cluster_id}/node-pools/{node_pool_id}/nodes/{node_id}")

    def recycle_node_pool_instance(
        self, cluster_id: str, node_pool_id: str, node_id: str
    ) -> None:
        """Destroy and redeploy a node of a node pool."""
        self._send(
            "POST", f"{_PATH}/{cluster_id}/node-pools/{node_pool_id}/nodes/{node_id}/recycle"
        )

    def get_kube_config(self, cluster_id: str) -> KubeConfig:
        """Return the kubeconfig of a cluster."""
        return KubeConfig.from_dict(self._object("GET", f"{_PATH}/{cluster_id}/config"))

    def get_versions(self) -> Versions:
        """Return the supported Kubernetes versions."""
        return Versions.from_dict(self._object("GET", _VERSIONS_PATH))

    def get_upgrades(self, cluster_id: str) -> list[str]:
        """Return the versions a cluster can be upgraded to."""
        payload = self._object("GET", f"{_PATH}/{cluster_id}/available-upgrades")
        return list(payload.get("available_upgrades") or [])

    def upgrade(self, cluster_id: str, request: ClusterUpgradeReq | None) -> None:
        """Begin upgrading a cluster."""
        self._send("POST", f"{_PATH}/{cluster_id}/upgrades", request)