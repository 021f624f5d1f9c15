"""Bearer token resolution for the discovery client.

Tokens are opaque strings passed to the API server; nothing here validates
them.
"""

import os

from .paths import get_token_file

TOKEN_ENV_VAR = "HCP_FLEET_TOKEN"


def get_token(
    source: str = "discovery",
    token_arg: str | None = None,
    env_var: str | None = TOKEN_ENV_VAR,
) -> str | None:
    """Resolve token from: explicit argument > env var > stored file.

    Args:
        source: Token source name, selects ~/.hcp-fleet/tokens/{source}.token
        token_arg: Token passed explicitly by the driver
        env_var: Environment variable name to check

    Returns:
        Token string if found, None if no auth available
    """
    if token_arg:
        return token_arg

    if env_var and os.environ.get(env_var):
        return os.environ[env_var]

    token_file = get_token_file(source)
    if token_file.exists():
        return token_file.read_text().strip()

    return None


def auth_headers(token: str | None) -> dict[str, str]:
    """Build Authorization header dict.

    Args:
        token: Bearer token string

    Returns:
        Dict with Authorization header, or empty dict if no token
    """
    if token:
        return {"Authorization": f"Bearer {token}"}
    return {}
