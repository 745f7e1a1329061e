"""Logging setup shared by the CLI, the debug helpers and the engine modules."""

from __future__ import annotations

import logging
from typing import IO, Optional

PACKAGE_LOGGER = "connex"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
# Parallel generation interleaves attempts from several pool threads.
THREADED_LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    *,
    threads: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install a single root handler and return it.

    Per-attempt chatter (template picks, wall counts) lives at DEBUG while
    attempt outcomes are reported at INFO. Pass ``threads=True`` when attempts
    run on a worker pool so each line names the thread that produced it.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(
            fmt=THREADED_LOG_FORMAT if threads else LOG_FORMAT,
            datefmt=DATE_FORMAT,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``connex`` namespace, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    if name and not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name or PACKAGE_LOGGER)
