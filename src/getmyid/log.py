"""Opt-in file logging for the getmyid command line.

Library modules log at debug level to ``getmyid.*`` loggers and never attach
handlers themselves, so an embedding application decides where records go.
The CLI calls ``setup_logging`` only when ``--log-file`` is given.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "getmyid"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_path: Path, *, max_bytes: int = 1_000_000, backup_count: int = 3) -> logging.Logger:
    """Send getmyid debug records to a rotating file.

    Does nothing if the package logger already has a handler: repeated CLI
    invocations in one process keep writing to the first file.

    Args:
        log_path: File to append to. Its directory must exist.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files kept.

    Returns:
        The package logger.

    Raises:
        OSError: log_path cannot be opened for appending.

    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.debug("Logging to %s", log_path)
    return logger
