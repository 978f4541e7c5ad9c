"""Logging configuration for CLI and service entry points."""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging and quiet noisy libraries."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
