"""Logging configuration for the Tumblr client.

Log lines from the client identify requests by verb and URL only. The
``Authorization`` header carries the OAuth signature and is never logged,
and urllib3 is kept at INFO so its DEBUG connection dumps stay out of the
output unless they are asked for.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HTTP_LOGGERS = ("urllib3", "requests")


def _parse_level(level: str) -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").strip().lower() == "true"


def configure_logging() -> None:
    """Send client and CLI logs to stdout.

    Safe to call more than once, the root logger always ends up with a
    single stdout handler.

    Env vars:
      - LOG_LEVEL: DEBUG/INFO/WARNING/ERROR/CRITICAL (default INFO)
      - LOG_HTTP_DEBUG: true/false, let urllib3 log at DEBUG (default false)

    :raises ValueError: If LOG_LEVEL is not a known level name.
    """
    level_name = os.environ.get("LOG_LEVEL", "INFO")
    level = _parse_level(level_name)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers[:] = [handler]

    http_level = level if _env_flag("LOG_HTTP_DEBUG") else max(level, logging.INFO)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    logging.getLogger(__name__).info(
        f"Logging configured: level={level_name.upper()} "
        f"http_debug={http_level == logging.DEBUG}"
    )
