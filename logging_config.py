"""
Logging Configuration

Centralized logging configuration for the orbit_core propagator.

Library modules only create loggers with ``logging.getLogger(__name__)``;
applications (the demo, notebooks, services) call ``configure_logging`` once
at start-up to decide where the records go.

Usage:
    from logging_config import configure_logging, get_logger

    configure_logging(logging.DEBUG)
    logger = get_logger(__name__)
    logger.info("Satellite initialized")
"""

import logging
import sys
from typing import Optional

# Default logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "orbit_core"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                      package_level: Optional[int] = None) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level for the root logger (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    package_level : int, optional
        Separate level for the ``orbit_core`` loggers. Propagation emits
        DEBUG records on every call, so services usually keep this higher
        than the root level.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    logging.getLogger(PACKAGE_LOGGER).setLevel(
        package_level if package_level is not None else level
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    logging.Logger
        Configured logger instance
    """
    return logging.getLogger(name)
