"""HTTP discovery client for Kubernetes-style API servers.

Enumerates served group/versions and their resources the way client-go's
ServerGroupsAndResources does: the top-level listings must succeed, while
failures of individual group/versions are collected into a
GroupDiscoveryFailedError returned alongside the lists that did succeed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..api import APIResourceList, GroupVersion
from ..config import FleetConfig
from ..errors import (
    DiscoveryError,
    GroupDiscoveryFailedError,
    map_connection_error,
    map_http_error,
)
from ..shared.auth import auth_headers, get_token
from ..shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DiscoveryResult:
    """Resource lists that could be enumerated, plus any enumeration error."""

    resources: list[APIResourceList] = field(default_factory=list)
    error: Exception | None = None

    def group_versions(self) -> list[GroupVersion]:
        return [GroupVersion.parse(r.group_version) for r in self.resources]


class DiscoveryClient:
    """Async client for the discovery endpoints of an API server.

    Use as an async context manager.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token: str | None = None,
        insecure: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: API server URL (e.g., https://api.example.com:6443)
            timeout: Request timeout in seconds
            token: Bearer token for the API server
            insecure: Skip TLS certificate verification
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.insecure = insecure
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: FleetConfig, token: str | None = None) -> DiscoveryClient:
        """Build a client from loaded config, resolving the bearer token if not given."""
        return cls(
            base_url=config.server,
            timeout=float(config.timeout),
            token=get_token("discovery", token_arg=token),
            insecure=config.insecure,
        )

    async def __aenter__(self) -> DiscoveryClient:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json", **auth_headers(self.token)},
            verify=not self.insecure,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise DiscoveryError("Client not initialized. Use 'async with' context.")
        return self._client

    async def _get(self, path: str) -> dict[str, Any]:
        """GET a discovery document.

        Raises:
            DiscoveryError: On transport errors or non-2xx responses.
        """
        client = self._ensure_client()
        url = f"{self.base_url}{path}"
        try:
            response = await client.get(path)
        except httpx.TimeoutException as e:
            raise map_connection_error(str(e), url, is_timeout=True) from e
        except httpx.TransportError as e:
            raise map_connection_error(str(e), url) from e

        if response.status_code >= 400:
            raise map_http_error(response.status_code, response.text.strip(), url)

        try:
            return response.json()
        except ValueError as e:
            raise DiscoveryError(f"Invalid discovery document at {url}", data={"url": url}) from e

    async def server_group_versions(self) -> list[GroupVersion]:
        """List every group/version the server advertises.

        Raises:
            DiscoveryError: If either top-level listing fails.
        """
        core = await self._get("/api")
        groups = await self._get("/apis")

        try:
            group_versions = [
                GroupVersion(group="", version=v) for v in core.get("versions") or []
            ]
            for group in groups.get("groups") or []:
                for version in group.get("versions") or []:
                    group_versions.append(GroupVersion.parse(version["groupVersion"]))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DiscoveryError(
                f"Invalid API group listing at {self.base_url}: {e}",
                data={"url": self.base_url},
            ) from e
        return group_versions

    async def server_groups_and_resources(self) -> DiscoveryResult:
        """Enumerate resources for every advertised group/version.

        Per group/version failures are aggregated into a
        GroupDiscoveryFailedError in the result instead of being raised.

        Raises:
            DiscoveryError: If the group/version listing itself fails.
        """
        group_versions = await self.server_group_versions()
        fetched = await asyncio.gather(
            *(self._get(self._resources_path(gv)) for gv in group_versions),
            return_exceptions=True,
        )

        result = DiscoveryResult()
        failed: dict[GroupVersion, Exception | None] = {}
        for gv, payload in zip(group_versions, fetched):
            if isinstance(payload, DiscoveryError):
                failed[gv] = payload
                continue
            if isinstance(payload, BaseException):
                raise payload
            try:
                result.resources.append(self._parse_resource_list(gv, payload))
            except DiscoveryError as e:
                failed[gv] = e

        if failed:
            logger.warning(
                "partial API discovery failure",
                failed=sorted(str(gv) for gv in failed),
                discovered=len(result.resources),
            )
            result.error = GroupDiscoveryFailedError(groups=failed)
        return result

    def _parse_resource_list(self, gv: GroupVersion, payload: Any) -> APIResourceList:
        url = f"{self.base_url}{self._resources_path(gv)}"
        try:
            return APIResourceList.from_dict({"groupVersion": str(gv), **payload})
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DiscoveryError(
                f"Invalid discovery document at {url}: {e!r}", data={"url": url}
            ) from e

    @staticmethod
    def _resources_path(gv: GroupVersion) -> str:
        if not gv.group:
            return f"/api/{gv.version}"
        return f"/apis/{gv.group}/{gv.version}"
