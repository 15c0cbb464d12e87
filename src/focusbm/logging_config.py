"""
Logging setup for the focusbm process
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> logging.Logger:
    """Configure the ``focusbm`` logger with a stream and optional file handler"""
    logger = logging.getLogger("focusbm")
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
