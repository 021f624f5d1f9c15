"""Path management for hcp-fleet.

Manages the ~/.hcp-fleet/ directory holding driver configuration and tokens.
"""

from pathlib import Path

# Base directory for all hcp-fleet data
FLEET_DIR = Path.home() / ".hcp-fleet"

# Driver configuration file
CONFIG_FILE = FLEET_DIR / "config.yaml"

# Token storage directory
TOKENS_DIR = FLEET_DIR / "tokens"


def get_token_file(source: str) -> Path:
    """Get path to a token file.

    Args:
        source: Token source name (e.g., "discovery")

    Returns:
        Path to the token file
    """
    return TOKENS_DIR / f"{source}.token"
