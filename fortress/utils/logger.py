"""Logging setup shared by the engine, the generator and the CLI.

Level conventions:

- DEBUG: per-search summaries and individual reducer clue decisions.
- INFO: generation attempts, reduction totals and CP-SAT runs.
- WARNING: failed generation attempts.
- ERROR: grid validation failures.
"""

from __future__ import annotations

import logging
from typing import Optional

DEFAULT_LOGGER = "fortress"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a single stream handler on the root logger.

    Calling it again replaces the previous handler, so ``main.py`` can apply
    ``--log-level`` after modules have already requested loggers.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the logger for ``name``, configuring INFO output on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or DEFAULT_LOGGER)
