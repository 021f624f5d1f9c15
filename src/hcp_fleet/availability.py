"""Availability of a hosted cluster as seen by its end users.

A hosted cluster is available only once its control plane reports itself
available AND the kubeconfig for reaching it has been published on the
hosted cluster status.
"""

from __future__ import annotations

import copy
from enum import Enum

from .api import Condition, ConditionStatus, HostedCluster, HostedControlPlane
from .shared.logging import get_logger

logger = get_logger(__name__)

# Condition type reported on the hosted cluster.
HOSTED_CLUSTER_AVAILABLE = "Available"

# Condition type reported by the control plane's own operator.
HOSTED_CONTROL_PLANE_AVAILABLE = "Available"


class AvailabilityReason(str, Enum):
    """Reason codes for the hosted cluster Available condition."""

    AS_EXPECTED = "AsExpected"
    CONTROL_PLANE_NOT_FOUND = "ControlPlaneNotFound"
    CONTROL_PLANE_UNAVAILABLE = "ControlPlaneUnavailable"
    KUBECONFIG_MISSING = "KubeconfigMissing"

    def describe(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    AvailabilityReason.AS_EXPECTED: "",
    AvailabilityReason.CONTROL_PLANE_NOT_FOUND: "The hosted control plane has not been created",
    AvailabilityReason.CONTROL_PLANE_UNAVAILABLE: "Waiting for hosted control plane to be healthy",
    AvailabilityReason.KUBECONFIG_MISSING: (
        "Waiting for the hosted cluster kubeconfig to be published"
    ),
}


def find_status_condition(conditions: list[Condition], condition_type: str) -> Condition | None:
    """Return the condition of the given type, or None."""
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


def set_status_condition(conditions: list[Condition], new: Condition) -> None:
    """Insert ``new`` or replace the existing condition of the same type in place."""
    for i, condition in enumerate(conditions):
        if condition.type == new.type:
            conditions[i] = copy.copy(new)
            return
    conditions.append(copy.copy(new))


def compute_hosted_cluster_availability(
    hosted_cluster: HostedCluster, control_plane: HostedControlPlane | None
) -> Condition:
    """Compute the Available condition for a hosted cluster.

    ``observed_generation`` is left at 0 for the caller to stamp.
    """
    if control_plane is None:
        return _condition(ConditionStatus.FALSE, AvailabilityReason.CONTROL_PLANE_NOT_FOUND)

    cp_available = find_status_condition(
        control_plane.status.conditions, HOSTED_CONTROL_PLANE_AVAILABLE
    )
    if cp_available is None or cp_available.status != ConditionStatus.TRUE:
        message = cp_available.message if cp_available is not None else ""
        return _condition(
            ConditionStatus.FALSE, AvailabilityReason.CONTROL_PLANE_UNAVAILABLE, message
        )

    if hosted_cluster.status.kubeconfig is None:
        return _condition(ConditionStatus.FALSE, AvailabilityReason.KUBECONFIG_MISSING)

    return _condition(ConditionStatus.TRUE, AvailabilityReason.AS_EXPECTED)


def _condition(status: ConditionStatus, reason: AvailabilityReason, message: str = "") -> Condition:
    logger.debug("availability computed", status=status.value, reason=reason.value)
    return Condition(
        type=HOSTED_CLUSTER_AVAILABLE,
        status=status,
        reason=reason.value,
        message=message or reason.describe(),
    )
