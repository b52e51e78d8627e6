"""Logging helpers: a TRACE level below DEBUG for per-tick chatter."""

from __future__ import annotations

import logging

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def trace(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log *msg* at TRACE level, formatting lazily like the stdlib methods."""
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, msg, *args)


def parse_level(level: int | str) -> int:
    """Resolve a level name (``"trace"``, ``"INFO"``...) or number."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}.")
    return value


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for the command line entry points."""
    logging.basicConfig(level=parse_level(level), format=LOG_FORMAT)
