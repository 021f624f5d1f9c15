"""Driver configuration management.

Handles persistent configuration stored in ~/.hcp-fleet/config.yaml.
Supports environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

import yaml

from .errors import ConfigError
from .shared.logging import LOG_LEVELS, configure_logging, get_logger
from .shared.paths import CONFIG_FILE

logger = get_logger(__name__)

# Default values
DEFAULT_SERVER = "https://localhost:6443"
DEFAULT_TIMEOUT = 10
DEFAULT_LOG_LEVEL = "warning"

# Environment variable mappings
ENV_VARS = {
    "server": "HCP_FLEET_SERVER",
    "timeout": "HCP_FLEET_TIMEOUT",
    "insecure": "HCP_FLEET_INSECURE",
    "log_level": "HCP_FLEET_LOG_LEVEL",
    "json_logs": "HCP_FLEET_JSON_LOGS",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class FleetConfig:
    """Configuration for the discovery client and logging."""

    server: str = DEFAULT_SERVER
    timeout: int = DEFAULT_TIMEOUT
    insecure: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    json_logs: bool = False

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def apply_logging(self, stream: TextIO | None = None) -> None:
        """Configure structlog from the loaded log settings."""
        configure_logging(self.log_level, json_output=self.json_logs, stream=stream)


def get_config_path() -> Path:
    """Get the config file path.

    Returns:
        Path to ~/.hcp-fleet/config.yaml
    """
    return CONFIG_FILE


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_str(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"not a non-empty string: {value!r}")
    return value.strip()


def _parse_int(value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, (bool, float)) or value is None:
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def _parse_log_level(value: Any) -> str:
    level = str(value).strip().lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"unknown log level: {value!r}")
    return level


_PARSERS = {
    "server": _parse_str,
    "timeout": _parse_int,
    "insecure": _parse_bool,
    "log_level": _parse_log_level,
    "json_logs": _parse_bool,
}


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", data={"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping", data={"path": str(path)})
    return data


def load_config(path: Path | None = None) -> FleetConfig:
    """Load configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file (~/.hcp-fleet/config.yaml)
    3. Defaults

    Raises:
        ConfigError: If the config file exists but cannot be parsed, or holds
            a value of the wrong type.

    Returns:
        FleetConfig with values and sources
    """
    config = FleetConfig()
    sources: dict[str, str] = {key: "default" for key in _PARSERS}

    config_path = path or get_config_path()
    if config_path.exists():
        file_config = _read_config_file(config_path)
        for key, parse in _PARSERS.items():
            if key not in file_config:
                continue
            try:
                setattr(config, key, parse(file_config[key]))
            except (TypeError, ValueError) as e:
                raise ConfigError(
                    f"Invalid value for {key!r} in {config_path}: {file_config[key]!r}",
                    data={"path": str(config_path), "key": key},
                ) from e
            sources[key] = "config file"

    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, _PARSERS[key](raw))
        except ValueError:
            logger.warning("ignoring invalid environment value", env_var=env_var, value=raw)
            continue
        sources[key] = "environment"

    config._sources = sources
    return config
