"""Unit tests for discovery error mapping."""

import pytest

from hcp_fleet.api import GroupVersion
from hcp_fleet.errors import (
    DiscoveryAuthError,
    DiscoveryError,
    DiscoveryNotFoundError,
    DiscoveryServerError,
    DiscoveryTimeoutError,
    GroupDiscoveryFailedError,
    map_connection_error,
    map_http_error,
)


class TestMapHttpError:
    """Tests for map_http_error."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth(self, status):
        error = map_http_error(status, "Unauthorized")

        assert isinstance(error, DiscoveryAuthError)
        assert error.retryable is False
        assert error.data["http_status"] == status

    def test_not_found(self):
        error = map_http_error(404, "", "https://api/apis/x/v1")

        assert isinstance(error, DiscoveryNotFoundError)
        assert "https://api/apis/x/v1" in error.message

    @pytest.mark.parametrize("status", [408, 504])
    def test_timeout(self, status):
        error = map_http_error(status, "")

        assert isinstance(error, DiscoveryTimeoutError)
        assert error.retryable is True

    @pytest.mark.parametrize("status,retryable", [(500, False), (502, True), (503, True)])
    def test_server(self, status, retryable):
        error = map_http_error(status, "boom")

        assert isinstance(error, DiscoveryServerError)
        assert error.retryable is retryable

    def test_other(self):
        error = map_http_error(418, "teapot")

        assert type(error) is DiscoveryError
        assert "418" in str(error)


class TestMapConnectionError:
    """Tests for map_connection_error."""

    def test_timeout(self):
        error = map_connection_error("timed out", "https://api:6443/api", is_timeout=True)

        assert isinstance(error, DiscoveryTimeoutError)

    def test_unreachable(self):
        error = map_connection_error("refused", "https://api:6443/api")

        assert error.retryable is True
        assert "api:6443" in error.message


class TestGroupDiscoveryFailedError:
    """Tests for GroupDiscoveryFailedError."""

    def test_is_discovery_error(self):
        assert issubclass(GroupDiscoveryFailedError, DiscoveryError)

    def test_str_lists_failed_groups(self):
        error = GroupDiscoveryFailedError(
            groups={
                GroupVersion("metrics.k8s.io", "v1beta1"): DiscoveryError("Server error: 503"),
                GroupVersion("image.openshift.io", "v1"): None,
            }
        )

        text = str(error)

        assert text.startswith("unable to retrieve the complete list of server APIs")
        assert "image.openshift.io/v1" in text
        assert "metrics.k8s.io/v1beta1: Server error: 503" in text
