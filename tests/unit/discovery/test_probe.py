"""Unit tests for capability probing."""

from unittest.mock import AsyncMock

import pytest

from hcp_fleet.api import APIResourceList, GroupVersion
from hcp_fleet.discovery import CapabilityProbe, DiscoveryResult, is_group_version_registered
from hcp_fleet.errors import DiscoveryError, GroupDiscoveryFailedError

pytestmark = pytest.mark.discovery

HYPERSHIFT = GroupVersion("hypershift.openshift.io", "v1alpha1")
ROUTE = GroupVersion("route.openshift.io", "v1")
IMAGE = GroupVersion("image.openshift.io", "v1")


def discovery(error: Exception | None = None, *discovered: GroupVersion) -> DiscoveryResult:
    return DiscoveryResult(
        resources=[APIResourceList(group_version=str(gv)) for gv in discovered],
        error=error,
    )


class TestIsGroupVersionRegistered:
    """Tests for is_group_version_registered."""

    def test_not_registered(self):
        """A group version absent from a clean discovery is not registered."""
        result = discovery(None, HYPERSHIFT, IMAGE)

        assert is_group_version_registered(result, ROUTE) is False

    def test_registered(self):
        result = discovery(None, HYPERSHIFT, ROUTE)

        assert is_group_version_registered(result, ROUTE) is True

    def test_requested_group_failing_discovery_is_registered(self):
        """The requested group appearing among the failures counts as registered."""
        result = discovery(GroupDiscoveryFailedError(groups={ROUTE: None}))

        assert is_group_version_registered(result, ROUTE) is True

    def test_discovered_despite_unrelated_failure(self):
        """A failure for another group does not mask a discovered one."""
        result = discovery(GroupDiscoveryFailedError(groups={IMAGE: None}), ROUTE)

        assert is_group_version_registered(result, ROUTE) is True

    def test_unlisted_group_under_partial_failure_is_assumed_registered(self):
        """Neither discovered nor failed, during a partial failure: optimistic."""
        result = discovery(GroupDiscoveryFailedError(groups={IMAGE: None}), HYPERSHIFT)

        assert is_group_version_registered(result, ROUTE) is True

    def test_other_version_of_group_discovered_is_not_registered(self):
        """The group answered with a different version, so this one is absent."""
        result = discovery(
            GroupDiscoveryFailedError(groups={IMAGE: None}),
            GroupVersion("route.openshift.io", "v2"),
        )

        assert is_group_version_registered(result, ROUTE) is False

    def test_arbitrary_error_is_raised(self):
        """Errors other than partial discovery failures propagate unchanged."""
        error = DiscoveryError("ups")
        result = discovery(error, HYPERSHIFT)

        with pytest.raises(DiscoveryError) as exc_info:
            is_group_version_registered(result, ROUTE)

        assert exc_info.value is error

    def test_arbitrary_error_with_listed_group(self):
        """A group present in the returned list is registered even alongside an error."""
        result = discovery(DiscoveryError("ups"), ROUTE)

        assert is_group_version_registered(result, ROUTE) is True

    def test_core_group(self):
        result = discovery(None, GroupVersion("", "v1"))

        assert is_group_version_registered(result, GroupVersion.parse("v1")) is True


class TestCapabilityProbe:
    """Tests for CapabilityProbe."""

    @pytest.mark.asyncio
    async def test_discovery_is_cached(self):
        """One discovery pass answers several questions."""
        client = AsyncMock()
        client.server_groups_and_resources.return_value = discovery(None, ROUTE)
        probe = CapabilityProbe(client)

        assert await probe.is_registered(ROUTE) is True
        assert await probe.is_registered(IMAGE) is False
        assert client.server_groups_and_resources.await_count == 1

    @pytest.mark.asyncio
    async def test_force_refresh(self):
        client = AsyncMock()
        client.server_groups_and_resources.side_effect = [
            discovery(None),
            discovery(None, ROUTE),
        ]
        probe = CapabilityProbe(client)

        assert await probe.is_registered(ROUTE) is False
        assert await probe.is_registered(ROUTE, force_refresh=True) is True

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self):
        client = AsyncMock()
        client.server_groups_and_resources.side_effect = DiscoveryError("Cannot reach API server")
        probe = CapabilityProbe(client)

        with pytest.raises(DiscoveryError):
            await probe.is_registered(ROUTE)

    @pytest.mark.asyncio
    async def test_partial_failure_not_cached(self):
        """A partial failure is rediscovered on the next question."""
        client = AsyncMock()
        client.server_groups_and_resources.side_effect = [
            discovery(GroupDiscoveryFailedError(groups={IMAGE: None}), ROUTE),
            discovery(None, ROUTE),
            discovery(None, ROUTE, IMAGE),
        ]
        probe = CapabilityProbe(client)

        assert await probe.is_registered(IMAGE) is True
        assert await probe.is_registered(IMAGE) is False
        assert await probe.is_registered(IMAGE) is False
        assert client.server_groups_and_resources.await_count == 2
