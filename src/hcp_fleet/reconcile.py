"""One reconciliation pass over a hosted cluster snapshot.

The reconciler reads a consistent snapshot (hosted cluster, its control
plane and the services publishing it) and returns updated copies. Writing
them back, retrying on conflicts and scheduling the next pass belong to the
driver calling it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from .api import ClusterVersionStatus, Condition, HostedCluster, HostedControlPlane, ServiceType
from .availability import compute_hosted_cluster_availability, set_status_condition
from .clock import Clock, SystemClock
from .exposure import SERVICE_NAMES, Service, reconcile_service_exposure
from .rollout import compute_cluster_version_status, reconcile_hosted_control_plane
from .shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    """Desired state produced by one pass."""

    hosted_cluster: HostedCluster
    version_status: ClusterVersionStatus
    availability: Condition
    control_plane: HostedControlPlane | None = None
    exposed_services: dict[ServiceType, Service] = field(default_factory=dict)


class FleetMemberReconciler:
    """Run rollout, availability and exposure decisions for one hosted cluster."""

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()

    def reconcile(
        self,
        hosted_cluster: HostedCluster,
        control_plane: HostedControlPlane | None,
        services: list[Service] | None = None,
    ) -> ReconcileResult:
        """Compute the next state of a hosted cluster and its dependents.

        Args:
            hosted_cluster: Fleet record snapshot.
            control_plane: Managed control plane snapshot, or None if absent.
            services: Service objects currently backing the control plane.
                Each is matched to a logical service by name; when a control
                plane is given, only services in its namespace are considered.

        Returns:
            ReconcileResult holding updated copies; inputs are not mutated.
        """
        log = logger.bind(namespace=hosted_cluster.namespace, name=hosted_cluster.name)

        cluster = copy.deepcopy(hosted_cluster)
        version = compute_cluster_version_status(
            wanted=cluster.spec.release.image,
            previous=cluster.status.version,
            control_plane=control_plane,
            now=self.clock.now(),
        )
        cluster.status.version = version

        availability = compute_hosted_cluster_availability(cluster, control_plane)
        availability.observed_generation = cluster.generation
        set_status_condition(cluster.status.conditions, availability)

        updated_cp = None
        if control_plane is not None:
            updated_cp = copy.deepcopy(control_plane)
            reconcile_hosted_control_plane(updated_cp, cluster)

        exposed: dict[ServiceType, Service] = {}
        by_name = {
            svc.name: svc
            for svc in services or []
            if control_plane is None or svc.namespace == control_plane.namespace
        }
        for service_type, service_name in SERVICE_NAMES.items():
            current = by_name.get(service_name)
            if current is None:
                continue
            updated = copy.deepcopy(current)
            if reconcile_service_exposure(cluster, service_type, updated):
                exposed[service_type] = updated

        log.info(
            "hosted cluster reconciled",
            desired_image=version.desired.image,
            target_image=updated_cp.spec.release_image if updated_cp else None,
            available=availability.status.value,
            exposed=sorted(t.value for t in exposed),
        )
        return ReconcileResult(
            hosted_cluster=cluster,
            version_status=version,
            availability=availability,
            control_plane=updated_cp,
            exposed_services=exposed,
        )
