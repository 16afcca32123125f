"""Logging configuration using loguru.

Diagnostic detail (index building, manifest writes, commands run) goes to a
single loguru sink on stderr.  User-facing output does not go through here;
it is printed with ``click.echo``.
"""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default handler with one at *level*.

    Call this once at process startup, before the first prompt is shown.
    The default level is quiet so that log lines do not interleave with
    the interactive prompts.
    """
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    logger.debug("Logging initialised (level={})", level)
