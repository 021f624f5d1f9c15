"""Logging configuration for hcp-fleet.

The library only emits events through structlog; the process driving the
reconciliation decides how they are rendered. Controllers usually want JSON
lines, interactive runs the console renderer.
"""

import logging
import sys
from typing import Any, TextIO

import structlog

# Log levels accepted in configuration
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def add_hosted_cluster(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Fold ``namespace``/``name`` context into a single ``hosted_cluster`` key."""
    namespace = event_dict.pop("namespace", None)
    name = event_dict.pop("name", None)
    if name is not None:
        event_dict["hosted_cluster"] = f"{namespace}/{name}" if namespace else name
    elif namespace is not None:
        event_dict["namespace"] = namespace
    return event_dict


def configure_logging(
    level: str = "warning",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure stdlib logging and structlog for the driving process.

    Args:
        level: Log level (debug, info, warning, error, critical)
        json_output: If True, render one JSON object per line
        stream: Output stream, stderr by default
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    logging.basicConfig(level=log_level, handlers=[handler], format="%(message)s", force=True)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_hosted_cluster,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)
