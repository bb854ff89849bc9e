"""Logging setup shared by the web app and the CLI."""
import logging
import os
from typing import Optional

LOG_FORMAT = '[%(levelname)s] %(name)s: %(message)s'
FILE_LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'


def setup_logging(level: str = 'WARNING', log_file: Optional[str] = None) -> logging.Logger:
    """Configure the root PlayHub logger.

    Args:
        level:    Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                  Defaults to WARNING so normal CLI use is quiet.
        log_file: Optional path of an extra file handler.  Failing to
                  create it is logged, not fatal.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('playhub')
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(numeric)

    if log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        try:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
            fh = logging.FileHandler(log_file)
            fh.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
            fh.setLevel(numeric)
            logger.addHandler(fh)
        except OSError:
            logger.warning('Could not create log file handler for %s', log_file)
    return logger
