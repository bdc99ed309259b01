from __future__ import annotations

import logging

from departure_gauge.config import LoggingConfig
from departure_gauge.logging_setup import LOG_FILENAME, configure_logging


def test_configure_logging_writes_to_log_dir(tmp_path) -> None:
    log_dir = tmp_path / "logs"
    configure_logging(LoggingConfig(level="debug", log_dir=str(log_dir)))

    logging.getLogger("departure_gauge.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logging.getLogger().level == logging.DEBUG
    assert "hello from the test" in (log_dir / LOG_FILENAME).read_text(encoding="utf-8")

    for handler in list(logging.getLogger().handlers):
        handler.close()
        logging.getLogger().removeHandler(handler)


def test_configure_logging_without_log_dir() -> None:
    configure_logging(LoggingConfig(level="WARNING", log_dir=None))

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert all(not isinstance(h, logging.FileHandler) for h in root.handlers)

    for handler in list(root.handlers):
        root.removeHandler(handler)
