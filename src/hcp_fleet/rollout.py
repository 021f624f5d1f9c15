"""Release rollout tracking for hosted clusters.

A hosted cluster's version status records every rollout newest-first. At
most one rollout is in flight at a time: a new requested image is only
started once the control plane has reported the previous one as applied.
The managed control plane is always pointed at ``history[0].image``, so
repeated spec changes while a rollout is running are deferred rather than
interrupting it.
"""

from __future__ import annotations

import copy
from datetime import datetime

from .api import (
    ClusterVersionStatus,
    HostedCluster,
    HostedControlPlane,
    Release,
    UpdateHistoryEntry,
    UpdateState,
)
from .shared.logging import get_logger

logger = get_logger(__name__)


def compute_cluster_version_status(
    wanted: str,
    previous: ClusterVersionStatus | None,
    control_plane: HostedControlPlane | None,
    now: datetime,
) -> ClusterVersionStatus:
    """Compute the next version status for a hosted cluster.

    Args:
        wanted: Release image requested on the hosted cluster spec.
        previous: Version status from the last pass, or None on the first one.
        control_plane: The managed control plane, or None if not created yet.
        now: Current time, used as the start time of a new rollout.

    Returns:
        A new ClusterVersionStatus; ``previous`` is left untouched.
    """
    if previous is None or not previous.history:
        logger.info("rollout initialized", image=wanted)
        return ClusterVersionStatus(
            desired=Release(image=wanted),
            history=[UpdateHistoryEntry(image=wanted, state=UpdateState.PARTIAL, started_time=now)],
        )

    status = copy.deepcopy(previous)
    head = status.history[0]

    if head.state == UpdateState.PARTIAL and _rollout_applied(head, control_plane):
        transition = control_plane.status.last_release_image_transition_time
        head.state = UpdateState.COMPLETED
        head.version = control_plane.status.version
        head.completion_time = max(transition, head.started_time)
        logger.info(
            "rollout completed",
            image=head.image,
            version=head.version,
            completion_time=head.completion_time.isoformat(),
        )

    if wanted != head.image:
        if head.state == UpdateState.COMPLETED:
            status.history.insert(
                0, UpdateHistoryEntry(image=wanted, state=UpdateState.PARTIAL, started_time=now)
            )
            logger.info("rollout started", image=wanted, previous_image=head.image)
        else:
            logger.debug("rollout deferred", image=wanted, in_flight_image=head.image)

    status.desired = Release(image=wanted)
    return status


def _rollout_applied(head: UpdateHistoryEntry, control_plane: HostedControlPlane | None) -> bool:
    if control_plane is None:
        return False
    return (
        control_plane.status.release_image == head.image
        and control_plane.status.last_release_image_transition_time is not None
    )


def rollout_target(status: ClusterVersionStatus) -> str:
    """Image the managed control plane must currently converge on.

    This is the in-flight (or last completed) rollout, never ``desired``.
    """
    if not status.history:
        return status.desired.image
    return status.history[0].image


def reconcile_hosted_control_plane(
    control_plane: HostedControlPlane, hosted_cluster: HostedCluster
) -> None:
    """Propagate the rollout target and API networking onto a control plane spec.

    Mutates ``control_plane`` in place.
    """
    version = hosted_cluster.status.version
    if version is not None and version.history:
        control_plane.spec.release_image = rollout_target(version)
    else:
        control_plane.spec.release_image = hosted_cluster.spec.release.image

    networking = hosted_cluster.spec.api_server_networking
    if networking is not None:
        control_plane.spec.api_port = networking.port
        control_plane.spec.api_advertise_address = networking.advertise_address
