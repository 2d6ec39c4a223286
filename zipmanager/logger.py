"""Centralized logger configuration.

Usage:
    from zipmanager.logger import get_logger
    logger = get_logger(__name__)

Library modules only fetch loggers; handlers are installed by the CLI
through ``setup_logging`` so embedding hosts keep their own configuration.
"""

from __future__ import annotations

import logging
import os

DEFAULT_LEVEL = os.getenv("ZIPMANAGER_LOG_LEVEL", "WARNING").upper()

logging.getLogger("zipmanager").addHandler(logging.NullHandler())


def setup_logging(level: str = DEFAULT_LEVEL, force: bool = False) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=force,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
