"""Logging setup for the tableaccess package logger.

Only the ``tableaccess`` logger is touched; applications embedding the
library keep full control of the root logger.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

PACKAGE_LOGGER = "tableaccess"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
HANDLER_PREFIX = PACKAGE_LOGGER + "."


def setup_logging(level=logging.INFO, log_file=None, stream=None) -> logging.Logger:
    """Attach a console handler (and a rotating file handler when
    ``log_file`` is given) to the package logger.

    Handlers installed by an earlier call are replaced, so calling this
    again with a new level or file does not duplicate output.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(stream)
    console.set_name(HANDLER_PREFIX + "console")
    handlers = [console]

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # 5 MB per file, 3 backups
        rotating = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
        rotating.set_name(HANDLER_PREFIX + "file")
        handlers.append(rotating)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
