"""structlog setup for the router-dashboard CLI.

Events are rendered as JSON on stderr so stdout stays free for
``generate --dry-run`` output.
"""

import logging
import sys
from typing import Any

import structlog

from router_dashboard import __version__
from router_dashboard.core.errors import ConfigurationError

APP_NAME = "router-dashboard"


def resolve_log_level(level: int | str) -> int:
    """Turn a level name such as ``"info"`` into its numeric value."""
    if isinstance(level, int):
        return level
    levels = logging.getLevelNamesMapping()
    name = level.strip().upper()
    if name not in levels:
        raise ConfigurationError(
            f"Unknown log level: {level}",
            {"choices": ", ".join(sorted(levels, key=levels.__getitem__))},
        )
    return levels[name]


def configure_logging(level: int | str = logging.INFO) -> int:
    """Configure the structlog/stdlib bridge and bind the app context.

    Returns the numeric level in effect.
    """
    numeric_level = resolve_log_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(numeric_level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(app=APP_NAME, version=__version__)
    return numeric_level


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Bind fields to every event logged for the rest of the command."""
    structlog.contextvars.bind_contextvars(**kwargs)
    return structlog.get_logger(APP_NAME)
