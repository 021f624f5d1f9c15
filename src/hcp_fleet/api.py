"""Record types for hosted clusters and their managed control planes.

The dataclasses mirror the Kubernetes-style objects the fleet layer works
with. Each record converts to and from the camelCase dict shape used on the
wire and in YAML snapshots via ``from_dict`` / ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def parse_time(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp as written by the API server."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_time(value: datetime | None) -> str | None:
    """Format a timestamp the way the API server does (UTC, second precision)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Conditions
# =============================================================================


class ConditionStatus(str, Enum):
    """Tri-state status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class Condition:
    """A single observation of an aspect of an object's state."""

    type: str
    status: ConditionStatus = ConditionStatus.UNKNOWN
    observed_generation: int = 0
    reason: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Condition:
        return cls(
            type=data["type"],
            status=ConditionStatus(data.get("status", ConditionStatus.UNKNOWN.value)),
            observed_generation=int(data.get("observedGeneration", 0)),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status.value,
            "observedGeneration": self.observed_generation,
            "reason": self.reason,
            "message": self.message,
        }


def _conditions_from(data: dict[str, Any]) -> list[Condition]:
    return [Condition.from_dict(c) for c in data.get("conditions") or []]


# =============================================================================
# Version history
# =============================================================================


class UpdateState(str, Enum):
    """State of a single rollout in the version history."""

    PARTIAL = "Partial"
    COMPLETED = "Completed"


@dataclass
class Release:
    """A deployable version, identified by its release image."""

    image: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Release:
        return cls(image=(data or {}).get("image", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"image": self.image}


@dataclass
class UpdateHistoryEntry:
    """One rollout of a release image."""

    image: str
    state: UpdateState
    started_time: datetime
    version: str = ""
    completion_time: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UpdateHistoryEntry:
        started = parse_time(data.get("startedTime"))
        if started is None:
            raise ValueError(f"history entry for {data.get('image')!r} has no startedTime")
        return cls(
            image=data["image"],
            state=UpdateState(data["state"]),
            started_time=started,
            version=data.get("version", ""),
            completion_time=parse_time(data.get("completionTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "image": self.image,
                "version": self.version,
                "state": self.state.value,
                "startedTime": format_time(self.started_time),
                "completionTime": format_time(self.completion_time),
            }
        )


@dataclass
class ClusterVersionStatus:
    """Requested release plus the newest-first rollout history."""

    desired: Release = field(default_factory=Release)
    history: list[UpdateHistoryEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusterVersionStatus:
        return cls(
            desired=Release.from_dict(data.get("desired")),
            history=[UpdateHistoryEntry.from_dict(h) for h in data.get("history") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "desired": self.desired.to_dict(),
            "history": [h.to_dict() for h in self.history],
        }


# =============================================================================
# Service publishing
# =============================================================================


class ServiceType(str, Enum):
    """Logical control plane services that can be published."""

    API_SERVER = "APIServer"
    OAUTH_SERVER = "OAuthServer"
    KONNECTIVITY = "Konnectivity"
    IGNITION = "Ignition"


class PublishingStrategyType(str, Enum):
    """Mechanism used to expose a service outside the management cluster."""

    NODE_PORT = "NodePort"
    LOAD_BALANCER = "LoadBalancer"
    ROUTE = "Route"
    NONE = "None"


@dataclass
class NodePortPublishingStrategy:
    port: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodePortPublishingStrategy:
        return cls(port=int(data.get("port", 0)))

    def to_dict(self) -> dict[str, Any]:
        return {"port": self.port}


@dataclass
class ServicePublishingStrategy:
    type: PublishingStrategyType
    node_port: NodePortPublishingStrategy | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServicePublishingStrategy:
        node_port = data.get("nodePort")
        return cls(
            type=PublishingStrategyType(data["type"]),
            node_port=NodePortPublishingStrategy.from_dict(node_port) if node_port else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "type": self.type.value,
                "nodePort": self.node_port.to_dict() if self.node_port else None,
            }
        )


@dataclass
class ServicePublishingStrategyMapping:
    service: ServiceType
    strategy: ServicePublishingStrategy

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServicePublishingStrategyMapping:
        return cls(
            service=ServiceType(data["service"]),
            strategy=ServicePublishingStrategy.from_dict(data["servicePublishingStrategy"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service.value,
            "servicePublishingStrategy": self.strategy.to_dict(),
        }


# =============================================================================
# Hosted cluster (fleet record)
# =============================================================================


@dataclass
class APIServerNetworking:
    """Optional overrides for how the hosted API server is advertised."""

    advertise_address: str | None = None
    port: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> APIServerNetworking:
        port = data.get("port")
        return cls(
            advertise_address=data.get("advertiseAddress"),
            port=int(port) if port is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"advertiseAddress": self.advertise_address, "port": self.port})


@dataclass
class LocalObjectReference:
    name: str


@dataclass
class HostedClusterSpec:
    release: Release = field(default_factory=Release)
    services: list[ServicePublishingStrategyMapping] = field(default_factory=list)
    api_server_networking: APIServerNetworking | None = None


@dataclass
class HostedClusterStatus:
    version: ClusterVersionStatus | None = None
    kubeconfig: LocalObjectReference | None = None
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class HostedCluster:
    """Fleet-level record describing a customer's desired hosted cluster."""

    name: str = ""
    namespace: str = ""
    generation: int = 0
    spec: HostedClusterSpec = field(default_factory=HostedClusterSpec)
    status: HostedClusterStatus = field(default_factory=HostedClusterStatus)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostedCluster:
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        api_server = (spec.get("networking") or {}).get("apiServer")
        version = status.get("version")
        kubeconfig = status.get("kubeconfig")
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            generation=int(metadata.get("generation", 0)),
            spec=HostedClusterSpec(
                release=Release.from_dict(spec.get("release")),
                services=[
                    ServicePublishingStrategyMapping.from_dict(s)
                    for s in spec.get("services") or []
                ],
                api_server_networking=(
                    APIServerNetworking.from_dict(api_server) if api_server else None
                ),
            ),
            status=HostedClusterStatus(
                version=ClusterVersionStatus.from_dict(version) if version else None,
                kubeconfig=LocalObjectReference(kubeconfig["name"]) if kubeconfig else None,
                conditions=_conditions_from(status),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "release": self.spec.release.to_dict(),
            "services": [s.to_dict() for s in self.spec.services],
        }
        if self.spec.api_server_networking is not None:
            spec["networking"] = {"apiServer": self.spec.api_server_networking.to_dict()}
        status: dict[str, Any] = {
            "conditions": [c.to_dict() for c in self.status.conditions],
        }
        if self.status.version is not None:
            status["version"] = self.status.version.to_dict()
        if self.status.kubeconfig is not None:
            status["kubeconfig"] = {"name": self.status.kubeconfig.name}
        return {
            "apiVersion": "hypershift.openshift.io/v1alpha1",
            "kind": "HostedCluster",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "generation": self.generation,
            },
            "spec": spec,
            "status": status,
        }


# =============================================================================
# Hosted control plane (managed control plane record)
# =============================================================================


@dataclass
class HostedControlPlaneSpec:
    release_image: str = ""
    api_port: int | None = None
    api_advertise_address: str | None = None


@dataclass
class HostedControlPlaneStatus:
    release_image: str = ""
    version: str = ""
    last_release_image_transition_time: datetime | None = None
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class HostedControlPlane:
    """Managed control plane record, reconciled by its own operator."""

    name: str = ""
    namespace: str = ""
    spec: HostedControlPlaneSpec = field(default_factory=HostedControlPlaneSpec)
    status: HostedControlPlaneStatus = field(default_factory=HostedControlPlaneStatus)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostedControlPlane:
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        api_port = spec.get("apiPort")
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            spec=HostedControlPlaneSpec(
                release_image=spec.get("releaseImage", ""),
                api_port=int(api_port) if api_port is not None else None,
                api_advertise_address=spec.get("apiAdvertiseAddress"),
            ),
            status=HostedControlPlaneStatus(
                release_image=status.get("releaseImage", ""),
                version=status.get("version", ""),
                last_release_image_transition_time=parse_time(
                    status.get("lastReleaseImageTransitionTime")
                ),
                conditions=_conditions_from(status),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": "hypershift.openshift.io/v1alpha1",
            "kind": "HostedControlPlane",
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": _drop_none(
                {
                    "releaseImage": self.spec.release_image,
                    "apiPort": self.spec.api_port,
                    "apiAdvertiseAddress": self.spec.api_advertise_address,
                }
            ),
            "status": _drop_none(
                {
                    "releaseImage": self.status.release_image,
                    "version": self.status.version,
                    "lastReleaseImageTransitionTime": format_time(
                        self.status.last_release_image_transition_time
                    ),
                    "conditions": [c.to_dict() for c in self.status.conditions],
                }
            ),
        }


# =============================================================================
# API discovery
# =============================================================================


@dataclass(frozen=True)
class GroupVersion:
    """An API group/version pair; the legacy core group has an empty group."""

    group: str
    version: str

    @classmethod
    def parse(cls, value: str) -> GroupVersion:
        if "/" not in value:
            return cls(group="", version=value)
        group, _, version = value.partition("/")
        if not group or not version or "/" in version:
            raise ValueError(f"unexpected GroupVersion string: {value!r}")
        return cls(group=group, version=version)

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


@dataclass
class APIResource:
    name: str
    kind: str = ""
    namespaced: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> APIResource:
        return cls(
            name=data["name"],
            kind=data.get("kind", ""),
            namespaced=bool(data.get("namespaced", False)),
        )


@dataclass
class APIResourceList:
    """Resources served under one group/version."""

    group_version: str
    resources: list[APIResource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> APIResourceList:
        return cls(
            group_version=data["groupVersion"],
            resources=[APIResource.from_dict(r) for r in data.get("resources") or []],
        )
