"""
Logging setup for the command line tools.

Library modules only create loggers; handlers are configured here.
"""

import logging
import sys

from . import config

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level=None, verbose: bool = False):
    """Configure the root logger with a stderr handler."""
    if verbose:
        level = logging.DEBUG
    elif level is None:
        level = config.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
