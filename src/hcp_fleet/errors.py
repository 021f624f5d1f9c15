"""Error types for hcp-fleet.

Only discovery and configuration can fail; the rollout, availability and
exposure decisions are total functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .api import GroupVersion


@dataclass
class FleetError(Exception):
    """Base error class for hcp-fleet errors."""

    message: str
    retryable: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigError(FleetError):
    """Configuration file could not be read or has the wrong shape."""

    message: str = "Invalid configuration"


@dataclass
class DiscoveryError(FleetError):
    """Discovery failed as a whole (transport error or top-level listing)."""

    message: str = "API discovery failed"


@dataclass
class DiscoveryAuthError(DiscoveryError):
    """Discovery request rejected (HTTP 401/403)."""

    message: str = "Authentication failed"


@dataclass
class DiscoveryNotFoundError(DiscoveryError):
    """Discovery endpoint not served (HTTP 404)."""

    message: str = "Discovery endpoint not found"


@dataclass
class DiscoveryTimeoutError(DiscoveryError):
    """Request timeout (HTTP 408/504 or connection timeout)."""

    message: str = "Request timeout"
    retryable: bool = True


@dataclass
class DiscoveryServerError(DiscoveryError):
    """API server error (HTTP 5xx)."""

    message: str = "Server error"


@dataclass
class GroupDiscoveryFailedError(DiscoveryError):
    """Some group/versions could not be enumerated while others succeeded.

    ``groups`` maps each failed group/version to the error seen for it, or
    ``None`` when the cause is unknown.
    """

    message: str = "unable to retrieve the complete list of server APIs"
    retryable: bool = True
    groups: dict[GroupVersion, Exception | None] = field(default_factory=dict)

    def __str__(self) -> str:
        failed = ", ".join(
            f"{gv}: {err}" if err is not None else str(gv)
            for gv, err in sorted(self.groups.items(), key=lambda item: str(item[0]))
        )
        return f"{self.message}: {failed}" if failed else self.message


def map_http_error(status_code: int, message: str, url: str = "") -> DiscoveryError:
    """Map an HTTP status code from the API server to a DiscoveryError.

    Args:
        status_code: HTTP status code
        message: Error message from response
        url: URL that was requested

    Returns:
        Appropriate DiscoveryError subclass
    """
    data = {"original_message": message, "http_status": status_code, "url": url}
    if status_code in (401, 403):
        return DiscoveryAuthError(
            message=f"Authentication failed: {message}" if message else "Authentication failed",
            data=data,
        )
    elif status_code == 404:
        return DiscoveryNotFoundError(
            message=(
                f"Discovery endpoint not found: {url}" if url else "Discovery endpoint not found"
            ),
            data=data,
        )
    elif status_code in (408, 504):
        return DiscoveryTimeoutError(
            message=f"Request timeout: {message}" if message else "Request timeout",
            data=data,
        )
    elif status_code >= 500:
        return DiscoveryServerError(
            message=f"Server error: {message}" if message else "Server error",
            data=data,
            retryable=status_code in (502, 503),  # Gateway errors may be retryable
        )
    else:
        return DiscoveryError(
            message=f"HTTP error {status_code}: {message}",
            data=data,
        )


def map_connection_error(error_message: str, url: str, is_timeout: bool = False) -> DiscoveryError:
    """Map a transport-level failure to a DiscoveryError.

    Args:
        error_message: Error message from exception
        url: URL that was being accessed
        is_timeout: Whether this was a timeout error

    Returns:
        Appropriate DiscoveryError
    """
    if is_timeout:
        return DiscoveryTimeoutError(
            message=f"Request timeout connecting to {url}",
            data={"url": url, "original_error": error_message},
        )

    from urllib.parse import urlparse

    parsed = urlparse(url)
    host_port = f"{parsed.hostname}:{parsed.port}" if parsed.port else parsed.hostname

    return DiscoveryError(
        message=f"Cannot reach API server at {host_port}",
        retryable=True,
        data={"url": url, "original_error": error_message},
    )
