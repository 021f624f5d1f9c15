"""hcp-fleet - Release rollout and availability decisions for hosted control planes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hcp-fleet")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for editable installs without metadata

from .availability import compute_hosted_cluster_availability
from .exposure import (
    reconcile_service,
    service_first_node_port_available,
    service_publishing_strategy_by_type,
)
from .reconcile import FleetMemberReconciler, ReconcileResult
from .rollout import compute_cluster_version_status, reconcile_hosted_control_plane, rollout_target

__all__ = [
    "__version__",
    # Rollout
    "compute_cluster_version_status",
    "rollout_target",
    "reconcile_hosted_control_plane",
    # Availability
    "compute_hosted_cluster_availability",
    # Exposure
    "service_publishing_strategy_by_type",
    "reconcile_service",
    "service_first_node_port_available",
    # Facade
    "FleetMemberReconciler",
    "ReconcileResult",
]
