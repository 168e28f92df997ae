"""Logging for the submission core, with level and format from config."""

import logging
import sys

from .context import get_application_config

FORMAT = '%(asctime)s - %(name)s - %(levelname)s: "%(message)s"'
DATEFMT = '%d/%b/%Y:%H:%M:%S %z'


def getLogger(name: str) -> logging.Logger:
    """
    Get a stdlib logger that writes to stderr.

    The log level is taken from ``LOGLEVEL`` in the application config (or
    the environment), and defaults to ``INFO``.
    """
    logger = logging.getLogger(name)
    config = get_application_config()
    logger.setLevel(int(config.get('LOGLEVEL', logging.INFO)))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATEFMT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
