"""Network exposure of control plane services.

Each logical service has a fixed port identity. The publishing strategy
declared on the hosted cluster only decides the Service type and, for
NodePort publishing, the requested node port. A node port that is already
allocated is never changed: clients outside the management cluster may be
pinned to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .api import (
    HostedCluster,
    PublishingStrategyType,
    ServicePublishingStrategy,
    ServiceType,
)
from .shared.logging import get_logger

logger = get_logger(__name__)


class ServiceSpecType(str, Enum):
    """Kubernetes Service type."""

    CLUSTER_IP = "ClusterIP"
    NODE_PORT = "NodePort"
    LOAD_BALANCER = "LoadBalancer"


@dataclass
class ServicePort:
    name: str = ""
    protocol: str = "TCP"
    port: int = 0
    target_port: int | str = 0
    node_port: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServicePort:
        return cls(
            name=data.get("name", ""),
            protocol=data.get("protocol", "TCP"),
            port=int(data.get("port", 0)),
            target_port=data.get("targetPort", 0),
            node_port=int(data.get("nodePort", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "protocol": self.protocol,
            "port": self.port,
            "targetPort": self.target_port,
        }
        if self.node_port:
            data["nodePort"] = self.node_port
        return data


@dataclass
class Service:
    """The network endpoint object a service is published through."""

    name: str = ""
    namespace: str = ""
    type: ServiceSpecType = ServiceSpecType.CLUSTER_IP
    ports: list[ServicePort] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Service:
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            type=ServiceSpecType(spec.get("type", ServiceSpecType.CLUSTER_IP.value)),
            ports=[ServicePort.from_dict(p) for p in spec.get("ports") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {
                "type": self.type.value,
                "ports": [p.to_dict() for p in self.ports],
            },
        }


@dataclass(frozen=True)
class ServicePortIdentity:
    """Port fields fixed by service identity."""

    name: str
    port: int
    target_port: int


SERVICE_PORTS: dict[ServiceType, ServicePortIdentity] = {
    ServiceType.API_SERVER: ServicePortIdentity(name="client", port=6443, target_port=6443),
    ServiceType.OAUTH_SERVER: ServicePortIdentity(name="https", port=443, target_port=6443),
    ServiceType.KONNECTIVITY: ServicePortIdentity(name="https", port=8091, target_port=8091),
    ServiceType.IGNITION: ServicePortIdentity(name="https", port=443, target_port=9090),
}

# Service objects backing each logical service in the control plane namespace.
SERVICE_NAMES: dict[ServiceType, str] = {
    ServiceType.API_SERVER: "kube-apiserver",
    ServiceType.OAUTH_SERVER: "oauth-openshift",
    ServiceType.KONNECTIVITY: "konnectivity-server",
    ServiceType.IGNITION: "ignition-server",
}


def service_publishing_strategy_by_type(
    hosted_cluster: HostedCluster, service_type: ServiceType
) -> ServicePublishingStrategy | None:
    """Return the declared publishing strategy for a service, or None if not declared."""
    for mapping in hosted_cluster.spec.services:
        if mapping.service == service_type:
            return mapping.strategy
    return None


def reconcile_service(
    service: Service,
    strategy: ServicePublishingStrategy,
    service_type: ServiceType,
) -> None:
    """Converge ``service`` onto ``strategy`` in place.

    Safe to re-apply: an allocated node port survives every call.
    """
    identity = SERVICE_PORTS[service_type]
    port = service.ports[0] if service.ports else ServicePort()
    port.name = identity.name
    port.protocol = "TCP"
    port.port = identity.port
    port.target_port = identity.target_port

    if strategy.type == PublishingStrategyType.NODE_PORT:
        service.type = ServiceSpecType.NODE_PORT
        requested = strategy.node_port.port if strategy.node_port is not None else 0
        if port.node_port == 0 and requested > 0:
            port.node_port = requested
            logger.debug("node port requested", service=service.name, node_port=requested)
        elif port.node_port and requested and port.node_port != requested:
            logger.info(
                "node port preserved",
                service=service.name,
                node_port=port.node_port,
                requested=requested,
            )
    elif strategy.type == PublishingStrategyType.LOAD_BALANCER:
        service.type = ServiceSpecType.LOAD_BALANCER
    else:
        service.type = ServiceSpecType.CLUSTER_IP

    service.ports = [port]


def service_first_node_port_available(service: Service | None) -> bool:
    """True once the platform has allocated a node port for the service's first port."""
    if service is None or not service.ports:
        return False
    return service.ports[0].node_port > 0


def reconcile_service_exposure(
    hosted_cluster: HostedCluster, service_type: ServiceType, service: Service
) -> bool:
    """Reconcile ``service`` if the hosted cluster declares a strategy for it.

    Returns:
        True if the service was reconciled, False when no exposure is requested.
    """
    strategy = service_publishing_strategy_by_type(hosted_cluster, service_type)
    if strategy is None:
        logger.debug("no publishing strategy declared", service_type=service_type.value)
        return False
    reconcile_service(service, strategy, service_type)
    return True
