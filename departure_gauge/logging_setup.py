"""Logging setup driven by LoggingConfig."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

from departure_gauge.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "departure_gauge.log"


def configure_logging(config: LoggingConfig) -> None:
    """Send log records to stdout and, if a log_dir is set, to a file there."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"))

    logging.basicConfig(
        level=config.level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


__all__ = ["configure_logging"]
