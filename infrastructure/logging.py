"""
Logging setup for the catalog service.

Installs coloredlogs on the root logger and routes the uvicorn loggers
through it, so server and service records share one format.
"""

import logging
import os

import coloredlogs  # type: ignore

# Get logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

LEVEL_STYLES = {
    "debug": {"color": "cyan"},
    "info": {"color": "green"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"color": "red", "bold": True},
}

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_log_level() -> int:
    """
    Read the level from LOG_LEVEL.

    Returns:
        The numeric level, INFO when unset or unknown
    """
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(verbose: bool = False) -> int:
    """
    Configure colored console logging for the process.

    Args:
        verbose: Force DEBUG regardless of LOG_LEVEL

    Returns:
        The level that was installed
    """
    log_level = logging.DEBUG if verbose else get_log_level()

    coloredlogs.install(level=log_level, fmt=LOG_FORMAT, level_styles=LEVEL_STYLES)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    # One record per request
    logging.getLogger("uvicorn.access").setLevel(
        logging.INFO if log_level <= logging.DEBUG else logging.WARNING
    )

    logger.info("log level: %s", logging.getLevelName(log_level))
    return log_level
