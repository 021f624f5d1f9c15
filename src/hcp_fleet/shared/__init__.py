"""Shared modules for hcp-fleet.

This module provides functionality used across the library:
- Logging (structlog configuration)
- Paths (~/.hcp-fleet layout)
- Auth (bearer token resolution for the discovery client)
"""

from .auth import auth_headers, get_token
from .logging import configure_logging, get_logger
from .paths import CONFIG_FILE, FLEET_DIR, TOKENS_DIR

__all__ = [
    # Paths
    "FLEET_DIR",
    "CONFIG_FILE",
    "TOKENS_DIR",
    # Auth
    "get_token",
    "auth_headers",
    # Logging
    "configure_logging",
    "get_logger",
]
