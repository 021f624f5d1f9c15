"""Detection of optional API capabilities.

Optional integrations (routes, image streams, cloud provider types) only run
when their API group/version is served. Discovery against a loaded API
server often reports a subset of aggregated APIs as failing; a failure for
an unrelated group must not hide the group we care about, so partial
failures are resolved optimistically.
"""

from __future__ import annotations

from ..api import GroupVersion
from ..errors import GroupDiscoveryFailedError
from ..shared.logging import get_logger
from .client import DiscoveryClient, DiscoveryResult

logger = get_logger(__name__)


def is_group_version_registered(discovery: DiscoveryResult, group_version: GroupVersion) -> bool:
    """Decide whether ``group_version`` is served, given one discovery result.

    Raises:
        Exception: The discovery error itself, unchanged, when it is not a
            partial group discovery failure.
    """
    discovered = discovery.group_versions()
    if group_version in discovered:
        return True

    error = discovery.error
    if error is None:
        return False

    if not isinstance(error, GroupDiscoveryFailedError):
        raise error

    if group_version in error.groups:
        logger.debug(
            "group version failed discovery, assuming registered",
            group_version=str(group_version),
        )
        return True

    # The group answered discovery, just not with this version.
    if any(gv.group == group_version.group for gv in discovered):
        return False

    logger.info(
        "group version not discovered during partial failure, assuming registered",
        group_version=str(group_version),
        failed=sorted(str(gv) for gv in error.groups),
    )
    return True


class CapabilityProbe:
    """Answer capability questions from one cached discovery pass.

    Only complete discovery results are cached; a pass that reported a
    partial failure is repeated on the next question.
    """

    def __init__(self, client: DiscoveryClient):
        self.client = client
        self._cached: DiscoveryResult | None = None

    async def discover(self, force_refresh: bool = False) -> DiscoveryResult:
        """Fetch discovery information, caching complete results.

        Args:
            force_refresh: If True, bypass cache and fetch fresh data.

        Raises:
            DiscoveryError: If the group/version listing itself fails.
        """
        if self._cached is not None and not force_refresh:
            return self._cached
        result = await self.client.server_groups_and_resources()
        self._cached = result if result.error is None else None
        return result

    async def is_registered(self, group_version: GroupVersion, force_refresh: bool = False) -> bool:
        discovery = await self.discover(force_refresh=force_refresh)
        return is_group_version_registered(discovery, group_version)
