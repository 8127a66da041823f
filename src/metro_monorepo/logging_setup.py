"""Logging bootstrap for the monorepo helper.

Library code logs through ``logging.getLogger(__name__)`` by default, but the
locator, resolver and helper all accept an explicit logger so callers (and
tests) can inject their own.
"""

from __future__ import annotations

import logging
import os
import sys

TRACE = 5
LOG_FORMAT = "[MonorepoHelper|%(levelname)s] %(message)s"
LOG_LEVEL_ENV_VAR = "METRO_MONOREPO_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

logging.addLevelName(TRACE, "TRACE")


def trace(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log ``msg`` at TRACE level."""
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, msg, *args)


def null_logger(name: str = "metro_monorepo.null") -> logging.Logger:
    """Return a logger that swallows every record."""
    logger = logging.getLogger(name)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name == "TRACE":
        return TRACE
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Install a single stderr handler on the package logger.

    Priority for the level: explicit argument, ``METRO_MONOREPO_LOG_LEVEL``,
    then ``INFO``. Calling this twice replaces the previous handler.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LEVEL)
    numeric_level = _coerce_level(level)

    logger = logging.getLogger("metro_monorepo")
    for handler in list(logger.handlers):
        if getattr(handler, "_metro_monorepo", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._metro_monorepo = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return logger
