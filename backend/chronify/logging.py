"""
Logging configuration for the Chronify API.
"""

import logging
import sys

# Libraries that log every statement or request at INFO/DEBUG.
NOISY_LOGGERS = ("aiosqlite", "passlib", "httpx", "httpcore", "backboard")


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure application logging.

    Third-party chatter is held at WARNING unless ``debug`` is set.

    :param debug: Lower the root level to DEBUG and let library logs through
    :type debug: bool
    :return: Root logger for the chronify application
    :rtype: logging.Logger
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)

    app_logger = logging.getLogger('chronify')
    app_logger.setLevel(level)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f'chronify.{name}')
