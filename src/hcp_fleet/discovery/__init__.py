"""API discovery and optional capability detection."""

from .client import DiscoveryClient, DiscoveryResult
from .probe import CapabilityProbe, is_group_version_registered

__all__ = [
    "DiscoveryClient",
    "DiscoveryResult",
    "CapabilityProbe",
    "is_group_version_registered",
]
